"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskStatus)
- task_store.py: SQLite-backed storage + query/update helpers
- task_api.py: high-level helpers that feed open tasks to the ranking engine
"""
