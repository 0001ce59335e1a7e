"""
API v1 Namespaces

Defines all API endpoints organized by namespace.
"""

from flask import current_app, request
from flask_restx import Namespace, Resource

from api.downloads import resolve_download, send_export_file
from api.health import get_health_status
from api.v1 import api
from api.v1.models import (
    error_response,
    export_accepted_response,
    export_request,
    export_status_response,
    health_response,
)
from domain.errors import (
    ApplicationError,
    ErrorCategory,
    InvalidExportNameError,
    create_error_response,
)
from domain.export_jobs import DuplicateExportError, ExportNotFoundError


def _get_export_job_service():
    return getattr(current_app, "export_job_service", None)


def _service_unavailable():
    return create_error_response(
        ErrorCategory.SYSTEM_ERROR,
        "Export service not initialized",
        status_code=503
    )


# =============================================================================
# Export Namespace - Export lifecycle operations
# =============================================================================

export_ns = Namespace("exports", description="Static site export operations")


@export_ns.route("", "/")
class ExportList(Resource):
    """Start a static export"""

    @export_ns.doc("create_export")
    @export_ns.expect(export_request)
    @export_ns.response(202, "Export started", export_accepted_response)
    @export_ns.response(400, "Bad Request", error_response)
    @export_ns.response(409, "Export already in progress", error_response)
    @export_ns.response(503, "Service Unavailable", error_response)
    def post(self):
        """
        Start a static export of a build

        Reserves the export name and runs the export in the background.
        Poll GET /exports/{name} or GET /exports/{name}/download for the result.
        """
        data = request.get_json(silent=True) or {}
        build_id = str(data.get("build_id") or "").strip()
        name = data.get("name")

        if not build_id:
            return create_error_response(
                ErrorCategory.INVALID_REQUEST,
                "Missing 'build_id' in request body",
                status_code=400
            )
        if name is not None and not isinstance(name, str):
            return create_error_response(
                ErrorCategory.INVALID_REQUEST,
                "'name' must be a string",
                status_code=400
            )

        export_job_service = _get_export_job_service()
        if export_job_service is None:
            return _service_unavailable()

        try:
            export_data = export_job_service.submit_export(build_id, name)
            current_app.logger.info(
                f"Export {export_data['name']} accepted for build {build_id}"
            )
            return export_data, 202

        except InvalidExportNameError as e:
            return create_error_response(
                ErrorCategory.INVALID_REQUEST,
                str(e),
                status_code=400
            )
        except DuplicateExportError as e:
            return create_error_response(
                ErrorCategory.DUPLICATE_EXPORT,
                str(e),
                status_code=409
            )
        except ApplicationError as e:
            return create_error_response(
                e.category,
                e.technical_message,
                status_code=503
            )
        except Exception as e:
            current_app.logger.exception(f"Error starting export for build {build_id}: {str(e)}")
            return create_error_response(
                ErrorCategory.SYSTEM_ERROR,
                f"Internal server error: {str(e)}",
                status_code=500
            )


@export_ns.route("/<string:name>")
@export_ns.param("name", "Export name")
class ExportItem(Resource):
    """Export status and deletion"""

    @export_ns.doc("get_export_status")
    @export_ns.response(200, "Success", export_status_response)
    @export_ns.response(404, "Export not found", error_response)
    def get(self, name):
        """
        Get export status

        Returns the current state of the export. Completed exports include
        the download URL.
        """
        export_job_service = _get_export_job_service()
        if export_job_service is None:
            return _service_unavailable()

        try:
            status = export_job_service.get_export_status(name)
        except ExportNotFoundError as e:
            return create_error_response(
                ErrorCategory.EXPORT_NOT_FOUND,
                str(e),
                status_code=404
            )

        status["download_url"] = None
        if status["status"] == "completed":
            status["download_url"] = api.url_for(ExportDownload, name=name)
        return status, 200

    @export_ns.doc("delete_export")
    @export_ns.response(204, "Export deleted")
    @export_ns.response(404, "Export not found", error_response)
    @export_ns.response(409, "Export still in progress", error_response)
    def delete(self, name):
        """
        Delete an export

        Removes the export from the registry and deletes its archive.
        Pending exports cannot be deleted.
        """
        export_job_service = _get_export_job_service()
        if export_job_service is None:
            return _service_unavailable()

        try:
            export_job_service.delete_export(name)
        except ExportNotFoundError as e:
            return create_error_response(
                ErrorCategory.EXPORT_NOT_FOUND,
                str(e),
                status_code=404
            )
        except ApplicationError as e:
            return create_error_response(
                e.category,
                e.technical_message,
                status_code=409
            )

        return "", 204


@export_ns.route("/<string:name>/download")
@export_ns.param("name", "Export name")
class ExportDownload(Resource):
    """Download a finished export"""

    @export_ns.doc("download_export")
    @export_ns.produces(["application/zip"])
    @export_ns.response(200, "ZIP archive")
    @export_ns.response(202, "Export still in progress", error_response)
    @export_ns.response(404, "Export not found or expired", error_response)
    @export_ns.response(500, "Export failed", error_response)
    def get(self, name):
        """
        Download the export archive

        Returns the ZIP archive once the export has completed.
        """
        export_job_service = _get_export_job_service()
        if export_job_service is None:
            return _service_unavailable()

        outcome = resolve_download(export_job_service, name)
        if not outcome.is_ready:
            return create_error_response(
                outcome.category,
                outcome.message,
                context={"name": name},
                status_code=outcome.status_code
            )

        current_app.logger.info(f"[DOWNLOAD_EXPORT_V1] Serving export {name}")
        return send_export_file(outcome.file_path, name)


# =============================================================================
# System Namespace - System health and monitoring
# =============================================================================

system_ns = Namespace("system", description="System health and monitoring operations")


@system_ns.route("/health")
class Health(Resource):
    """System health check"""

    @system_ns.doc("health_check")
    @system_ns.response(200, "Healthy", health_response)
    @system_ns.response(503, "Service Degraded", health_response)
    def get(self):
        """
        Check system health and service availability

        Reports the export registry backend, the export runner, Redis, Celery
        and the build data store.
        """
        return get_health_status(current_app)
