"""
Sweep Task

Celery beat task that evicts expired exports and deletes their bundles.
"""

import logging
from typing import Any, Dict

from celery_app import celery_app

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, name="tasks.sweep_expired_exports")
def sweep_expired_exports(self) -> Dict[str, Any]:
    """
    Periodic sweep of the export registry.

    Runs on the Celery beat schedule (every 60 seconds by default).

    Returns:
        dict: Sweep statistics
    """
    from application.export_job_service import ExportJobService
    from celery_app import flask_app

    stats = {"expired_exports_removed": 0, "errors": []}

    try:
        export_job_service = flask_app.container.resolve(ExportJobService)
        stats["expired_exports_removed"] = export_job_service.cleanup_expired_exports()
    except Exception as e:
        error_msg = f"Error sweeping expired exports: {e}"
        stats["errors"].append(error_msg)
        logger.error(error_msg, exc_info=True)

    logger.info(
        f"Sweep completed - Exports: {stats['expired_exports_removed']}, "
        f"Errors: {len(stats['errors'])}"
    )
    return stats
