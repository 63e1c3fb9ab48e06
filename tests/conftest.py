"""Shared fixtures and helpers for tests."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

import pytest

from helium_dsl.core.ports.parser import ParseOutcome, SyntaxErrorEvent

logger = logging.getLogger(__name__)

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Parser double
# ---------------------------------------------------------------------------


class FakeParser:
    """Implements ``DslParser`` by replaying canned errors."""

    def __init__(self, errors: list[SyntaxErrorEvent] | None = None, failure: str | None = None) -> None:
        self.errors = errors or []
        self.failure = failure
        self.calls: list[str] = []

    def parse(self, text: str) -> ParseOutcome:
        self.calls.append(text)
        return ParseOutcome(tree=None, errors=list(self.errors), failure=self.failure)


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def clean_parser() -> FakeParser:
    """A parser that never reports errors."""
    return FakeParser()


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write ``text`` to ``relative`` under ``tmp_path`` and return the path."""

    def _write(relative: str, text: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def model_workspace(write_file: Callable[[str, str], Path], tmp_path: Path) -> Path:
    """A workspace with persistent and plain objects spread over model files."""
    write_file("app/model/a_customer.mez", "object Customer {\n    string full_name;\n}\n")
    write_file("app/model/b_customer.mez", "@Audit persistent object Customer {\n    string full_name;\n}\n")
    write_file("app/model/order.mez", "persistent object Order {\n    int order_total;\n}\n")
    write_file("app/model/nested/line_item.mez", "object LineItem {\n    int quantity;\n}\n")
    write_file("app/units/sales.mez", "unit Sales;\nobject NotIndexed {\n}\n")
    write_file("app/.hidden/model/ghost.mez", "persistent object Ghost {\n}\n")
    write_file("app/model/notes.txt", "object NotHelium {\n}\n")
    return tmp_path / "app"


@pytest.fixture
def isolated_artifacts(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point every generated-artifact setting at an empty directory."""
    artifacts = tmp_path / "artifacts"
    artifacts.mkdir()
    monkeypatch.setenv("HELIUM_RULES_PATH", str(artifacts / "dsl-rules.json"))
    monkeypatch.setenv("HELIUM_BIF_METADATA_PATH", str(artifacts / "bif-metadata.json"))
    monkeypatch.setenv("HELIUM_PARSER_DIR", str(artifacts / "parser"))
    return artifacts
