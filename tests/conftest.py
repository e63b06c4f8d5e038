"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

PROJECT_URL = "https://example.org/build-helper/"

BADGE_PATTERNS = [
    "https://github.com/.*/badge.svg",
    "https://img.shields.io/.*?",
    "https://snyk.io/test/.*/badge.svg",
    "https://sonarcloud.io/api/project_badges/.*",
]


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def readme(fixtures_dir: Path) -> str:
    """The README used as input for the site index."""
    return (fixtures_dir / "site-index-input.md").read_text(encoding="utf-8")


@pytest.fixture
def expected_site_index(fixtures_dir: Path) -> str:
    return (fixtures_dir / "site-index-expected.md").read_text(encoding="utf-8")


@pytest.fixture
def project_url() -> str:
    return PROJECT_URL


@pytest.fixture
def badge_patterns() -> list:
    return list(BADGE_PATTERNS)


@pytest.fixture
def events() -> list:
    """A list to use as observer: pass `events.append`."""
    return []


@pytest.fixture
def report_dir(tmp_path: Path, monkeypatch) -> Path:
    """Redirect HTML reports to a temporary directory."""
    import config

    directory = tmp_path / "reports"
    monkeypatch.setattr(config, "REPORT_DIR", directory)
    return directory
