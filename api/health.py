"""
Health Status

Component health shared by /health and /api/v1/system/health.
"""

from typing import Any, Dict, Tuple

from config.redis_config import is_redis_initialized, redis_health_check


def get_health_status(app) -> Tuple[Dict[str, Any], int]:
    """
    Get health status of all system components.

    Args:
        app: Flask application instance

    Returns:
        Tuple of (health_status_dict, http_status_code)
    """
    export_config = getattr(app, "export_config", None)
    runner = getattr(app, "export_runner", None)

    health_status = {
        "status": "ok",
        "message": "backend ready",
        "registry": export_config.registry_backend if export_config else "unknown",
        "runner": runner.name if runner is not None else "unavailable",
        "redis": "not_configured",
        "celery": "not_configured",
        "build_store": "configured" if getattr(app, "build_repository", None) else "unavailable",
    }

    if getattr(app, "export_job_service", None) is None or runner is None:
        health_status["status"] = "degraded"

    if is_redis_initialized():
        try:
            if redis_health_check():
                health_status["redis"] = "connected"
            else:
                health_status["redis"] = "disconnected"
                health_status["status"] = "degraded"
        except Exception as e:
            health_status["redis"] = f"error: {str(e)}"
            health_status["status"] = "degraded"

    if getattr(app, "celery", None) is not None:
        health_status["celery"] = "available"
    elif export_config is not None and export_config.runner == "celery":
        health_status["celery"] = "unavailable"
        health_status["status"] = "degraded"

    if health_status["build_store"] == "unavailable":
        health_status["status"] = "degraded"

    status_code = 200 if health_status["status"] == "ok" else 503
    return health_status, status_code
