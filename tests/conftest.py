"""Shared fixtures for taskgen tests."""

import pytest

SAMPLE_BACKLOG = """# Sample Development Tasks

This backlog covers the security and architecture work.
It is parsed into epics and features.

## Epic: Authentication Overhaul
- **Priority**: Critical
- **Effort**: 21 story points
- **Business Value**: High - Security is important

Replace the legacy login flow.

#### Features:
1. **JWT Authentication**
   - **Effort**: 8 SP
   - Implement token validation

2. **Security Hardening**
   - **Effort**: 5 SP

## Epic: DDD Implementation
- **Priority**: High
- **Effort**: 34 story points

- Document bounded contexts
"""


@pytest.fixture
def sample_backlog():
    return SAMPLE_BACKLOG


@pytest.fixture
def sample_file(tmp_path):
    path = tmp_path / "backlog.md"
    path.write_text(SAMPLE_BACKLOG)
    return path
