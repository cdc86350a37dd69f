"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskCollection, TaskStatus)
- task_store.py: JSON file storage (load/save) and storage errors
- task_list.py: add/edit/toggle/delete/clear/complete-all/list operations
- outcome.py: structured operation results (Outcome, ErrorKind)
"""
