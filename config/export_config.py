"""
Export Configuration

Settings for export storage, expiry and background execution, plus the
PostgREST build data store.
"""

import os
import tempfile
from pathlib import Path

REGISTRY_BACKENDS = ("memory", "redis")
RUNNERS = ("thread", "celery")


class ExportConfig:
    """Static export settings."""

    def __init__(self):
        self.export_dir = Path(
            os.getenv("EXPORT_DIR", os.path.join(tempfile.gettempdir(), "site-exports"))
        )
        self.ttl_seconds = int(os.getenv("EXPORT_TTL_SECONDS", 3600))
        self.sweep_interval_seconds = float(os.getenv("EXPORT_SWEEP_INTERVAL_SECONDS", 60))
        self.registry_backend = os.getenv("EXPORT_REGISTRY_BACKEND", "memory").lower()
        self.runner = os.getenv("EXPORT_RUNNER", "thread").lower()
        self.runner_max_workers = int(os.getenv("EXPORT_RUNNER_MAX_WORKERS", 4))

        if self.registry_backend not in REGISTRY_BACKENDS:
            raise ValueError(
                f"EXPORT_REGISTRY_BACKEND must be one of {REGISTRY_BACKENDS}, "
                f"got {self.registry_backend!r}"
            )
        if self.runner not in RUNNERS:
            raise ValueError(f"EXPORT_RUNNER must be one of {RUNNERS}, got {self.runner!r}")
        if self.runner == "celery" and self.registry_backend != "redis":
            # Celery workers run in other processes and cannot see an in-memory registry
            raise ValueError("EXPORT_RUNNER=celery requires EXPORT_REGISTRY_BACKEND=redis")


class PostgrestConfig:
    """PostgREST build data store settings."""

    def __init__(self):
        self.url = os.getenv("POSTGREST_URL", "http://localhost:3000")
        self.api_key = os.getenv("POSTGREST_API_KEY")
        self.timeout_seconds = float(os.getenv("POSTGREST_TIMEOUT_SECONDS", 10))
