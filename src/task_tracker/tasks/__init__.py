"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskStatus, TaskDifficulty, TaskCategory, option maps)
- validation.py: field validators returning ValidationResult
- task_store.py: JSON-file repository with atomic writes + metadata summary
- queries.py: pure filters and statistics over task collections
- task_api.py: create / edit / delete helpers used by the CLI
"""
