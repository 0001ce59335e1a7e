"""
Tests package for the site export backend.

This package contains test suites organized by type:
- unit/: Unit tests per layer (domain, application, infrastructure, api, tasks)
- integration/: Full export workflows and the Redis-backed registry
"""
