"""
Shared pytest fixtures and configuration for the site export test suite.

This module provides:
- Hypothesis configuration for property-based testing
- Shared fixtures for build snapshots and export jobs
- In-memory registry and fake build data store
- Flask app and test client with exports running inline
"""

from datetime import datetime, timedelta
from unittest.mock import Mock

import pytest
from hypothesis import HealthCheck, Phase, settings

from app_factory import AppConfig, create_app
from application.event_publisher import EventPublisher
from application.static_export_service import StaticExportService
from domain.export_jobs import ExportJobRegistry
from infrastructure.in_memory_export_job_repository import InMemoryExportJobRepository

from tests.fixtures.domain_fixtures import create_build_data, create_page
from tests.fixtures.mock_repositories import FakeBuildDataRepository, InlineExportRunner

# Register Hypothesis profiles
settings.register_profile(
    "default",
    max_examples=100,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.target, Phase.shrink],
)
settings.register_profile(
    "ci",
    max_examples=200,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)
settings.register_profile(
    "dev",
    max_examples=10,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)
settings.load_profile("default")


# =============================================================================
# Domain Fixtures
# =============================================================================

@pytest.fixture
def sample_build_data():
    """Build with a home page, a contact page and three assets."""
    return create_build_data(
        pages=[
            create_page(path="/", name="Home", title="Welcome"),
            create_page(path="/contact", name="Contact"),
        ],
        asset_count=3,
    )


@pytest.fixture
def job_repository():
    """Provide a fresh in-memory export job repository."""
    return InMemoryExportJobRepository()


@pytest.fixture
def registry(job_repository):
    """Provide an export job registry over the in-memory repository."""
    return ExportJobRegistry(job_repository)


@pytest.fixture
def event_publisher():
    """Provide a real event publisher with no handlers."""
    return EventPublisher()


@pytest.fixture
def mock_event_publisher():
    """Provide a mock event publisher for asserting published events."""
    return Mock(spec=EventPublisher)


@pytest.fixture
def build_repository(sample_build_data):
    """Provide a fake build data store serving the sample build."""
    return FakeBuildDataRepository({sample_build_data.build.id: sample_build_data})


@pytest.fixture
def export_dir(tmp_path):
    """Provide a fresh export directory."""
    path = tmp_path / "exports"
    path.mkdir()
    return path


# =============================================================================
# Flask App Fixtures
# =============================================================================

@pytest.fixture
def app_config(monkeypatch, tmp_path):
    """AppConfig with an in-memory registry, thread runner and no sweeper thread."""
    monkeypatch.setenv("EXPORT_DIR", str(tmp_path / "exports"))
    monkeypatch.setenv("EXPORT_REGISTRY_BACKEND", "memory")
    monkeypatch.setenv("EXPORT_RUNNER", "thread")
    monkeypatch.setenv("EXPORT_START_SWEEPER", "false")
    return AppConfig()


@pytest.fixture
def app(app_config, build_repository):
    """
    Flask app whose exports run inline so results are visible right after POST.
    """
    flask_app = create_app(app_config, build_repository=build_repository)
    flask_app.config["TESTING"] = True

    flask_app.export_runner.shutdown()
    inline_runner = InlineExportRunner(flask_app.container.resolve(StaticExportService))
    flask_app.export_runner = inline_runner
    flask_app.export_job_service.runner = inline_runner

    yield flask_app


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()


# =============================================================================
# Time-related Fixtures
# =============================================================================

@pytest.fixture
def fixed_datetime():
    """Provide a fixed datetime for deterministic testing."""
    return datetime(2024, 1, 15, 12, 0, 0)


@pytest.fixture
def expired_datetime():
    """Provide a datetime that represents an expired timestamp."""
    return datetime.utcnow() - timedelta(hours=2)


# =============================================================================
# Pytest Configuration Hooks
# =============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (full workflows, optional Redis)"
    )
    config.addinivalue_line(
        "markers", "property: Property-based tests using Hypothesis"
    )


def pytest_collection_modifyitems(config, items):
    """
    Automatically mark tests based on their location.

    - tests/unit/* -> @pytest.mark.unit
    - tests/integration/* -> @pytest.mark.integration
    """
    for item in items:
        test_path = str(item.fspath)

        if "/unit/" in test_path or "\\unit\\" in test_path:
            item.add_marker(pytest.mark.unit)
        elif "/integration/" in test_path or "\\integration\\" in test_path:
            item.add_marker(pytest.mark.integration)
