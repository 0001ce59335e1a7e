"""
Test fixtures package.

Provides factory functions, mock implementations, and assertion helpers for testing.
"""

from .domain_fixtures import (
    create_build_data,
    create_export_job,
    create_page,
)
from .mock_repositories import FakeBuildDataRepository, InlineExportRunner
from .assertion_helpers import (
    assert_error_response,
    assert_export_status,
    zip_member_names,
)

__all__ = [
    # Domain fixtures
    "create_build_data",
    "create_export_job",
    "create_page",
    # Mock repositories
    "FakeBuildDataRepository",
    "InlineExportRunner",
    # Assertion helpers
    "assert_error_response",
    "assert_export_status",
    "zip_member_names",
]
