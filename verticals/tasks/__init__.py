"""Tasks vertical — the task organizer resource.

Ties the task API patterns together in one domain:
- SQLAlchemy model with an optimistic-concurrency version column
- Async repository with title, date and status lookups
- FastAPI router under /Tarefa
"""
