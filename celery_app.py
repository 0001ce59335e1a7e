"""
Celery Application Instance

Creates the Celery app instance for use by workers and beat scheduler.
Uses the app factory to ensure all services are properly initialized.
"""

from app_factory import create_app

# Workers share the Flask app's container so tasks resolve the same services
flask_app = create_app()

celery_app = flask_app.celery

# Task modules are imported by name to avoid a circular import
# (tasks -> export_task -> celery_app -> tasks).
celery_app.conf.imports = (
    "tasks.export_task",
    "tasks.sweep_task",
)
