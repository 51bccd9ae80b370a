# planner/__init__.py
"""
Calendar planner backend.

Celery loads ``planner.workers.tasks`` itself via ``-A``; nothing is
imported here.
"""
__all__: list[str] = []
