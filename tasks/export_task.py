"""
Export Task

Celery task for running a static export in a worker.
Thin wrapper that delegates to StaticExportService.
"""

import logging
import time
from typing import Any, Dict

from celery_app import celery_app

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, name="tasks.generate_static_export")
def generate_static_export(self, build_id: str, export_name: str) -> Dict[str, Any]:
    """
    Asynchronous static export task.

    The API has already reserved export_name as pending, so the export
    service refreshes that entry instead of registering a new one.

    Args:
        build_id: Build to export
        export_name: Reserved export name

    Returns:
        dict: ExportResult as a dictionary
    """
    from application.static_export_service import StaticExportService
    from celery_app import flask_app

    start_time = time.time()
    logger.info(f"Task started for export {export_name} (build {build_id})")

    export_service = flask_app.container.resolve(StaticExportService)
    result = export_service.start_export(build_id, export_name, reserved=True)

    duration_ms = (time.time() - start_time) * 1000
    if result.success:
        logger.info(f"Task completed for export {export_name} in {duration_ms:.2f}ms")
    else:
        logger.warning(
            f"Task finished with failed export {export_name} after {duration_ms:.2f}ms: "
            f"{result.error}"
        )

    return result.to_dict()
