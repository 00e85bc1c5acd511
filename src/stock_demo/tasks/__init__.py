"""
Background task subsystem.

Components:
- task_models.py: data structures (TaskState, TaskOutcome)
- task_runner.py: BackgroundTaskRunner and TaskHandle
"""
