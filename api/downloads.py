"""
Export Downloads

Shared download resolution for the v1 API and the legacy
/cgi/static/ssg/<filename> route, which answers in plain text.
"""

import os
from dataclasses import dataclass
from typing import Optional

from flask import Blueprint, Response, current_app, send_file

from domain.errors import ErrorCategory
from domain.export_jobs import ExportNotFoundError, ExportStatus


@dataclass
class DownloadOutcome:
    """What a download request resolves to: a file or an HTTP error."""

    status_code: int
    message: str
    category: Optional[ErrorCategory] = None
    file_path: Optional[str] = None

    @property
    def is_ready(self) -> bool:
        return self.file_path is not None


def resolve_download(export_job_service, name: str) -> DownloadOutcome:
    """
    Map the registry state of an export to a download outcome.

    400 missing name, 404 unknown/expired or file missing on disk,
    202 still pending, 500 failed, 200 ready.
    """
    if not name:
        return DownloadOutcome(400, "Filename required", ErrorCategory.INVALID_REQUEST)

    try:
        job = export_job_service.get_export(name)
    except ExportNotFoundError:
        return DownloadOutcome(
            404,
            "Export not found. The export may have expired or never started.",
            ErrorCategory.EXPORT_NOT_FOUND,
        )

    if job.status == ExportStatus.PENDING:
        return DownloadOutcome(202, "Export still in progress. Please wait...", ErrorCategory.EXPORT_PENDING)

    if job.status == ExportStatus.FAILED:
        return DownloadOutcome(500, f"Export failed: {job.error_message}", ErrorCategory.EXPORT_FAILED)

    if not job.file_path or not os.path.isfile(job.file_path):
        return DownloadOutcome(404, "Export file not found on disk", ErrorCategory.FILE_NOT_FOUND)

    return DownloadOutcome(200, "ok", file_path=job.file_path)


def send_export_file(file_path: str, name: str) -> Response:
    """Stream a finished archive as an attachment."""
    response = send_file(
        file_path,
        mimetype="application/zip",
        as_attachment=True,
        download_name=name,
        conditional=False,
    )
    response.headers["Content-Disposition"] = f'attachment; filename="{name}"'
    response.headers["Content-Length"] = str(os.path.getsize(file_path))
    response.headers["Cache-Control"] = "private, no-cache"
    return response


legacy_downloads_bp = Blueprint("legacy_downloads", __name__)


@legacy_downloads_bp.route("/cgi/static/ssg/", defaults={"filename": ""}, methods=["GET"])
@legacy_downloads_bp.route("/cgi/static/ssg/<path:filename>", methods=["GET"])
def legacy_download(filename: str):
    """Download a finished export by file name."""
    current_app.logger.info(f"[STATIC_DOWNLOAD] Requested file: {filename}")

    export_job_service = getattr(current_app, "export_job_service", None)
    if export_job_service is None:
        return Response("Export service not initialized", status=503, mimetype="text/plain")

    outcome = resolve_download(export_job_service, filename)
    if not outcome.is_ready:
        return Response(outcome.message, status=outcome.status_code, mimetype="text/plain")

    return send_export_file(outcome.file_path, filename)
