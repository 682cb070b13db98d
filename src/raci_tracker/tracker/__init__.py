"""
Tracker domain.

Components:
- models.py: data structures (Task, TaskStatus, RaciRoles, lifecycle variants)
- task_store.py: in-memory ordered store with change listeners
- roster.py: known assignee names
- views.py: filter/sort projection for the task list
- due_dates.py: due-date badge classification
- role_picker.py: single/multi role selection
- seed.py: sample data for a first run
"""
