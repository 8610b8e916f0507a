# app/workers/__init__.py
"""
Celery background tasks.
Nothing is imported eagerly; Celery loads app.workers.tasks via the ``-A`` flag.
"""
__all__: list[str] = ["tasks"]
