"""RACI task tracker: tasks with Responsible/Accountable/Consulted/Informed roles."""

__version__ = "0.1.0"
