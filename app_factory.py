"""
Application Factory

Creates and configures Flask application with all dependencies.
This factory pattern improves testability by allowing dependency injection
and configuration overrides.
"""

import logging
import os
from datetime import timedelta
from typing import Optional

from flask import Flask, jsonify
from flask_cors import CORS

from api.health import get_health_status
from application.dependency_container import DependencyContainer
from application.event_publisher import EventPublisher
from application.export_job_service import ExportJobService
from application.export_runner import IExportRunner
from application.static_export_service import StaticExportService
from config.celery_config import make_celery
from config.export_config import ExportConfig, PostgrestConfig
from config.redis_config import RedisConfig, get_redis_repository, init_redis
from domain.bundling.packager import IArchivePackager
from domain.export_jobs import ExportJobRegistry, ExportJobRepository
from domain.site_build.renderer import ISiteRenderer
from domain.site_build.repositories import BuildDataRepository
from infrastructure.export_runners import CeleryExportRunner, ThreadExportRunner
from infrastructure.in_memory_export_job_repository import InMemoryExportJobRepository
from infrastructure.postgrest_build_repository import PostgrestBuildRepository
from infrastructure.redis_export_job_repository import RedisExportJobRepository
from infrastructure.registry_sweeper import RegistrySweeper
from infrastructure.static_site_renderer import StaticSiteRenderer
from infrastructure.zip_archive_packager import ZipArchivePackager

logger = logging.getLogger(__name__)


class AppConfig:
    """Application configuration."""

    def __init__(self):
        self.api_version = os.getenv("API_VERSION", "v1")
        self.flask_env = os.getenv("FLASK_ENV", "development")
        self.is_production = self.flask_env == "production"
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()

        # Background sweeper thread; Celery deployments use beat instead
        self.start_sweeper = os.getenv("EXPORT_START_SWEEPER", "true").lower() == "true"

        self.export = ExportConfig()
        self.postgrest = PostgrestConfig()
        self.redis = RedisConfig()


def configure_logging(level: str) -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    )


def create_app(
    config: Optional[AppConfig] = None,
    build_repository: Optional[BuildDataRepository] = None,
) -> Flask:
    """
    Create and configure Flask application.

    Args:
        config: Application configuration, uses default if None
        build_repository: Build data store, a PostgrestBuildRepository by default

    Returns:
        Configured Flask application
    """
    if config is None:
        config = AppConfig()

    configure_logging(config.log_level)

    app = Flask(__name__)
    app.app_config = config
    app.export_config = config.export

    CORS(
        app,
        resources={
            r"/*": {
                "origins": "*",
                "methods": ["GET", "POST", "DELETE", "OPTIONS"],
                "allow_headers": ["Content-Type", "Authorization"],
                "expose_headers": ["Content-Type", "Content-Disposition", "Content-Length"],
                "max_age": 3600,
            }
        },
    )

    _initialize_infrastructure(app, config)
    _initialize_services(app, config, build_repository)
    _register_blueprints(app, config)
    _register_health_endpoint(app)

    return app


def _initialize_infrastructure(app: Flask, config: AppConfig) -> None:
    """
    Initialize infrastructure components (Redis, Celery).

    Redis is only connected when the registry lives there.
    """
    app.celery = None

    if config.export.registry_backend == "redis":
        init_redis(config.redis)
        logger.info(f"Redis initialized at {config.redis.host}:{config.redis.port}")

    try:
        app.celery = make_celery(app)
    except Exception as e:
        if config.export.runner == "celery":
            raise
        logger.warning(f"Could not initialize Celery: {e}")


def _create_job_repository(config: AppConfig) -> ExportJobRepository:
    if config.export.registry_backend == "redis":
        # Redis keys outlive the sweep TTL so the sweep still sees them and removes files
        return RedisExportJobRepository(
            get_redis_repository(config.redis.key_prefix),
            key_ttl_seconds=config.export.ttl_seconds * 2,
        )
    return InMemoryExportJobRepository()


def _initialize_services(
    app: Flask,
    config: AppConfig,
    build_repository: Optional[BuildDataRepository],
) -> None:
    """
    Initialize application services and register them in the DependencyContainer.

    API routes read the export job service from the app; Celery tasks
    resolve services through app.container.
    """
    container = DependencyContainer()

    event_publisher = EventPublisher()
    container.setup_event_handlers(event_publisher)
    container.register_singleton(EventPublisher, event_publisher)

    job_repository = _create_job_repository(config)
    registry = ExportJobRegistry(job_repository)
    container.register_singleton(ExportJobRepository, job_repository)
    container.register_singleton(ExportJobRegistry, registry)

    if build_repository is None:
        build_repository = PostgrestBuildRepository(
            config.postgrest.url,
            api_key=config.postgrest.api_key,
            timeout_seconds=config.postgrest.timeout_seconds,
        )
    renderer = StaticSiteRenderer()
    packager = ZipArchivePackager()
    container.register_singleton(BuildDataRepository, build_repository)
    container.register_singleton(ISiteRenderer, renderer)
    container.register_singleton(IArchivePackager, packager)

    config.export.export_dir.mkdir(parents=True, exist_ok=True)
    export_service = StaticExportService(
        registry,
        build_repository,
        renderer,
        packager,
        event_publisher,
        export_dir=config.export.export_dir,
    )
    container.register_singleton(StaticExportService, export_service)

    runner = _create_runner(app, config, export_service)
    container.register_singleton(IExportRunner, runner)

    export_job_service = ExportJobService(
        registry,
        event_publisher,
        runner=runner,
        ttl=timedelta(seconds=config.export.ttl_seconds),
    )
    container.register_singleton(ExportJobService, export_job_service)

    app.container = container
    app.build_repository = build_repository
    app.export_runner = runner
    app.export_job_service = export_job_service

    app.registry_sweeper = None
    if config.export.runner == "thread" and config.start_sweeper:
        app.registry_sweeper = RegistrySweeper(
            export_job_service, interval_seconds=config.export.sweep_interval_seconds
        )
        app.registry_sweeper.start()

    logger.info(
        f"Export services initialized (registry={config.export.registry_backend}, "
        f"runner={runner.name}, export_dir={config.export.export_dir})"
    )


def _create_runner(app: Flask, config: AppConfig, export_service: StaticExportService) -> IExportRunner:
    if config.export.runner == "celery":
        return CeleryExportRunner(app.celery)
    return ThreadExportRunner(export_service, max_workers=config.export.runner_max_workers)


def _register_blueprints(app: Flask, config: AppConfig) -> None:
    """
    Register API blueprints.

    Args:
        app: Flask application
        config: Application configuration
    """
    from api.downloads import legacy_downloads_bp
    from api.v1 import api_v1_bp

    app.register_blueprint(api_v1_bp)
    app.register_blueprint(legacy_downloads_bp)

    logger.info(
        f"API {config.api_version} registered at /api/{config.api_version} "
        f"with Swagger UI at /api/{config.api_version}/docs"
    )


def _register_health_endpoint(app: Flask) -> None:
    """
    Register health check endpoint.

    Args:
        app: Flask application
    """

    @app.route("/health", methods=["GET"])
    def health():
        """
        Health check endpoint.
        Returns overall health status of the application and its dependencies.
        """
        health_status, status_code = get_health_status(app)
        return jsonify(health_status), status_code
