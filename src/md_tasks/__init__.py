# src/md_tasks/__init__.py

"""Append markdown tasks to a file, optionally polished by an LLM."""

__version__ = "0.1.0"
