"""
Task file subsystem.

Components:
- task_file.py: append-only writer for the markdown task list
"""
