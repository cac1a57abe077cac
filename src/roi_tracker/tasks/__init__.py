"""
Task subsystem.

Components:
- task_models.py: data structures (Task, DerivedTask, Metrics, enums)
- derive.py: pure metric functions and the ranking order
- normalize.py: loose JSON records -> Task
- mutations.py: pure add/update/delete/undo transforms
- task_store.py: in-memory TaskStore (lifecycle, queueing, recomputation)
- seed.py: synthetic tasks used when nothing was loaded
"""
