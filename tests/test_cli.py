# tests/test_cli.py

from __future__ import annotations

import json
import re
from dataclasses import replace
from pathlib import Path

import httpx
import pytest

from md_tasks import __version__
from md_tasks.cli.main import main, parse_args
from md_tasks.core.ports import Improvement, Outcome
from md_tasks.llm.client import OpenRouterCompletionClient

from .fakes import FakeCompletionClient

STAMP = r" - 🕓\d{2}/\d{2}/\d{4} \d{2}:\d{2}"


def _lines(path: Path) -> list[str]:
    return path.read_text("utf-8").splitlines()


def _run(argv: list[str], settings, client: FakeCompletionClient | None = None) -> int:
    client = client or FakeCompletionClient()
    return main(argv, settings=settings, client_factory=client.factory)


def test_create_writes_improved_line(settings, fake_client, task_file: Path, capsys) -> None:
    code = _run(["create", "buy milk", "--file", str(task_file)], settings, fake_client)

    assert code == 0
    assert fake_client.calls == ["buy milk"]
    (line,) = _lines(task_file)
    assert re.fullmatch(r"- \[ \] 📋Improved task" + STAMP, line)

    out = capsys.readouterr().out
    assert "Calling LLM" in out
    assert "Successfully added improved task" in out
    assert "   > - [ ] 📋Improved task" in out


def test_create_falls_back_when_service_unreachable(settings, task_file: Path) -> None:
    client = FakeCompletionClient(Improvement(Outcome.UNAVAILABLE, detail="ConnectError"))
    assert _run(["create", "buy milk", "--file", str(task_file)], settings, client) == 0

    (line,) = _lines(task_file)
    assert re.fullmatch(r"- \[ \] 📋buy milk" + STAMP, line)


def test_create_falls_back_on_error_status(settings, task_file: Path) -> None:
    client = FakeCompletionClient(Improvement(Outcome.API_ERROR, detail="HTTP 500"))
    assert _run(["create", "buy milk", "--file", str(task_file)], settings, client) == 0

    (line,) = _lines(task_file)
    assert re.fullmatch(r"- \[ \] buy milk" + STAMP, line)


def test_create_keeps_raw_text_on_empty_choices(settings, task_file: Path) -> None:
    client = FakeCompletionClient(Improvement(Outcome.EMPTY))
    assert _run(["create", "buy milk", "--file", str(task_file)], settings, client) == 0

    (line,) = _lines(task_file)
    assert re.fullmatch(r"buy milk" + STAMP, line)


def test_create_without_target_exits_1(settings, fake_client, tmp_path: Path, capsys) -> None:
    code = _run(["create", "task"], settings, fake_client)

    assert code == 1
    assert fake_client.calls == []
    assert not any(p.suffix == ".md" for p in tmp_path.rglob("*"))
    err = capsys.readouterr().err
    assert "No file path provided" in err
    assert "tasks config --global-file <PATH>" in err


def test_create_without_api_key_exits_1(settings, task_file: Path, capsys) -> None:
    settings = replace(settings, openrouter_api_key=None)
    code = main(["create", "task", "--file", str(task_file)], settings=settings)

    assert code == 1
    assert not task_file.exists()
    assert "OPENROUTER_API_KEY" in capsys.readouterr().err


def test_config_then_create_uses_global_file(settings, tmp_path: Path, capsys) -> None:
    target = tmp_path / "x.md"

    assert _run(["config", "--global-file", str(target)], settings) == 0
    assert "Global file path successfully set to" in capsys.readouterr().out
    stored = json.loads((settings.config_dir / "config.json").read_text("utf-8"))
    assert stored == {"global_file": str(target)}

    client = FakeCompletionClient(Improvement(Outcome.UNAVAILABLE))
    assert _run(["create", "buy milk"], settings, client) == 0
    (line,) = _lines(target)
    assert re.fullmatch(r"- \[ \] 📋buy milk" + STAMP, line)


def test_explicit_file_overrides_global(settings, tmp_path: Path) -> None:
    global_file = tmp_path / "global.md"
    explicit = tmp_path / "explicit.md"
    _run(["config", "--global-file", str(global_file)], settings)

    assert _run(["create", "a", "--file", str(explicit)], settings) == 0
    assert explicit.exists()
    assert not global_file.exists()


def test_appends_in_call_order(settings, task_file: Path) -> None:
    task_file.write_text("# Inbox\n", "utf-8")
    for raw in ("first", "second"):
        client = FakeCompletionClient(Improvement(Outcome.UNAVAILABLE))
        assert _run(["create", raw, "--file", str(task_file)], settings, client) == 0

    lines = _lines(task_file)
    assert lines[0] == "# Inbox"
    assert lines[1].startswith("- [ ] 📋first - 🕓")
    assert lines[2].startswith("- [ ] 📋second - 🕓")
    assert len(lines) == 3


def test_corrupt_config_does_not_abort(settings, task_file: Path) -> None:
    settings.config_dir.mkdir(parents=True)
    (settings.config_dir / "config.json").write_text("{broken", "utf-8")

    assert _run(["create", "x", "--file", str(task_file)], settings) == 0
    assert task_file.exists()


def test_missing_parent_directory_is_fatal(settings, tmp_path: Path, capsys) -> None:
    target = tmp_path / "nope" / "todo.md"
    assert _run(["create", "x", "--file", str(target)], settings) == 1
    assert "Error:" in capsys.readouterr().err


def test_delete_is_a_no_op(settings, task_file: Path, capsys) -> None:
    task_file.write_text("- [ ] keep me\n", "utf-8")
    assert _run(["delete"], settings) == 0
    assert "Delete Task" in capsys.readouterr().out
    assert task_file.read_text("utf-8") == "- [ ] keep me\n"


@pytest.mark.parametrize(
    "content",
    ["-urgent", "-call mom", "-hurry", "-hurry up", "-help-desk", "--double-dash", "--fi", "-5 pushups"],
)
@pytest.mark.parametrize("content_first", [True, False], ids=["before-file", "after-file"])
def test_content_may_start_with_hyphen(content: str, content_first: bool) -> None:
    argv = ["create", content, "--file", "t.md"] if content_first else ["create", "--file", "t.md", content]
    args = parse_args(argv)
    assert args.content == content
    assert args.file == Path("t.md")


def test_hyphen_content_reaches_the_task_file(settings, task_file: Path) -> None:
    client = FakeCompletionClient(Improvement(Outcome.UNAVAILABLE))
    assert _run(["create", "-hurry up", "--file", str(task_file)], settings, client) == 0
    assert client.calls == ["-hurry up"]

    (line,) = _lines(task_file)
    assert re.fullmatch(r"- \[ \] 📋-hurry up" + STAMP, line)


def test_create_help_still_works(capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        parse_args(["create", "--help"])
    assert exc.value.code == 0
    assert "--file" in capsys.readouterr().out


def test_undecodable_api_response_writes_fallback_line(settings, task_file: Path) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"choices": [{"index": 0, "finish_reason": "stop"}]})

    def factory(s) -> OpenRouterCompletionClient:
        return OpenRouterCompletionClient(s, http_client=httpx.Client(transport=httpx.MockTransport(handler)))

    assert main(["create", "buy milk", "--file", str(task_file)], settings=settings, client_factory=factory) == 0

    (line,) = _lines(task_file)
    assert re.fullmatch(r"- \[ \] 📋buy milk" + STAMP, line)


def test_unencodable_write_is_fatal_not_a_traceback(settings, task_file: Path, monkeypatch, capsys) -> None:
    def boom(path, line):
        raise UnicodeEncodeError("utf-8", line, 0, 1, "surrogates not allowed")

    monkeypatch.setattr("md_tasks.cli.commands.append_task_line", boom)

    assert _run(["create", "x", "--file", str(task_file)], settings) == 1
    assert "Error:" in capsys.readouterr().err



def test_parse_errors_exit_2() -> None:
    with pytest.raises(SystemExit) as exc:
        parse_args(["config"])
    assert exc.value.code == 2

    with pytest.raises(SystemExit) as exc:
        parse_args(["create"])
    assert exc.value.code == 2


def test_version(capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        parse_args(["--version"])
    assert exc.value.code == 0
    assert capsys.readouterr().out.strip() == f"tasks {__version__}"
