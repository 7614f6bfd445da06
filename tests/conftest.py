"""Shared fixtures and helpers for tests."""

from __future__ import annotations

import json
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

from cscope_nav.config import CscopeConfig

_TESTS_ROOT = Path(__file__).parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        rel = Path(str(item.fspath)).relative_to(_TESTS_ROOT)
        if rel.parts and rel.parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Fake indexer: a Python script replaying canned output
# ---------------------------------------------------------------------------

_FAKE_INDEXER = """\
import json
import sys
from pathlib import Path

here = Path(__file__)
spec = json.loads(here.with_suffix(".json").read_text())
with here.with_suffix(".argv").open("a") as log:
    log.write(json.dumps(sys.argv[1:]) + "\\n")
sys.stdout.write(spec["stdout"])
sys.stderr.write(spec["stderr"])
sys.exit(spec["exit_code"])
"""


class FakeIndexer:
    """Writes a script standing in for the ``cscope`` binary.

    The config it produces runs ``python <script>`` so the indexer flags land
    in the script's argv, which is recorded for assertions.
    """

    def __init__(self, directory: Path) -> None:
        self.directory = directory
        self.script = directory / "fake_cscope.py"
        self.script.write_text(_FAKE_INDEXER, encoding="utf-8")
        self.reply()

    def reply(self, stdout: str = "", stderr: str = "", exit_code: int = 0) -> None:
        payload = {"stdout": stdout, "stderr": stderr, "exit_code": exit_code}
        self.script.with_suffix(".json").write_text(json.dumps(payload), encoding="utf-8")

    def config(self, **overrides: object) -> CscopeConfig:
        values: dict[str, object] = {
            "cscope": sys.executable,
            "query_args": str(self.script),
            "build_args": str(self.script),
        }
        values.update(overrides)
        return CscopeConfig.model_validate(values)

    @property
    def calls(self) -> list[list[str]]:
        log = self.script.with_suffix(".argv")
        if not log.exists():
            return []
        return [json.loads(line) for line in log.read_text(encoding="utf-8").splitlines()]


@pytest.fixture
def fake_indexer(tmp_path: Path) -> FakeIndexer:
    tools = tmp_path / "tools"
    tools.mkdir()
    return FakeIndexer(tools)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A small C project root."""
    root = tmp_path / "project"
    root.mkdir()
    (root / "a.c").write_text(
        "#include <stdio.h>\n\nint foo(void) {\n\treturn bar(1);\n}\n",
        encoding="utf-8",
    )
    (root / "b.c").write_text(
        "int bar(int x) {\n\treturn x;\n}\n\nint main(void) {\n\treturn foo();\n}\n",
        encoding="utf-8",
    )
    return root


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, str], Path]:
    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write
