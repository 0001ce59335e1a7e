"""
API Models for request/response validation and Swagger documentation
"""

from flask_restx import fields

from api.v1 import api

# =============================================================================
# Request Models
# =============================================================================

export_request = api.model(
    "ExportRequest",
    {
        "build_id": fields.String(
            required=True,
            description="Identifier of the build to export",
            example="b7c1e6a2-5d0f-4a55-9c55-1f0e2b7d3a10",
        ),
        "name": fields.String(
            required=False,
            description="Archive file name; .zip is appended when missing",
            example="my-site.zip",
        ),
    },
)

# =============================================================================
# Response Models
# =============================================================================

export_accepted_response = api.model(
    "ExportAcceptedResponse",
    {
        "name": fields.String(description="Export name used for polling and download"),
        "build_id": fields.String(description="Build being exported"),
        "status": fields.String(description="Export status", enum=["pending"]),
        "message": fields.String(description="Status message"),
    },
)

export_status_response = api.model(
    "ExportStatusResponse",
    {
        "name": fields.String(description="Export name"),
        "build_id": fields.String(description="Build being exported"),
        "status": fields.String(
            description="Export status", enum=["pending", "completed", "failed"]
        ),
        "error": fields.String(description="Error message if failed", allow_null=True),
        "error_category": fields.String(description="Error category if failed", allow_null=True),
        "created_at": fields.String(description="When the current state was entered (ISO 8601)"),
        "updated_at": fields.String(description="Last update (ISO 8601)"),
        "expires_at": fields.String(description="When the export expires (ISO 8601)"),
        "download_url": fields.String(description="Download URL when completed", allow_null=True),
    },
)

error_response = api.model(
    "ErrorResponse",
    {
        "error": fields.String(description="Error category"),
        "title": fields.String(description="Error title"),
        "message": fields.String(description="User-facing error message"),
        "action": fields.String(description="Suggested action"),
        "details": fields.Raw(description="Technical details", allow_null=True),
    },
)

health_response = api.model(
    "HealthResponse",
    {
        "status": fields.String(
            description="Overall health status", enum=["ok", "degraded"]
        ),
        "message": fields.String(description="Health message"),
        "registry": fields.String(description="Export registry backend"),
        "runner": fields.String(description="Export runner"),
        "redis": fields.String(description="Redis connection status"),
        "celery": fields.String(description="Celery availability status"),
        "build_store": fields.String(description="Build data store configuration"),
    },
)
