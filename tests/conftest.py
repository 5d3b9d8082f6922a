# ruff: noqa: E402

import builtins
import sys
from pathlib import Path

import pytest
from _pytest.doctest import DoctestModule

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
TESTS = ROOT / "tests"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))
if str(TESTS) not in sys.path:
    sys.path.append(str(TESTS))

import tfe_bulk.log as tfe_log

DOCTEST_MODULES = {
    ROOT / "src" / "tfe_bulk" / "__init__.py",
    ROOT / "src" / "tfe_bulk" / "config.py",
    ROOT / "src" / "tfe_bulk" / "eligibility.py",
    ROOT / "src" / "tfe_bulk" / "models.py",
}


@pytest.fixture(autouse=True)
def _isolate_runtime(monkeypatch: pytest.MonkeyPatch) -> object:
    for name in (
        "TFE_TOKEN",
        "TFE_ADDRESS",
        "TFE_BULK_TIMEOUT",
        "TFE_BULK_PAGE_SIZE",
        "TFE_BULK_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("TFE_BULK_NO_COLOR", "1")

    def fail_input(prompt: str = "") -> str:
        raise AssertionError("prompted unexpectedly")

    monkeypatch.setattr(builtins, "input", fail_input)
    tfe_log.reset()
    yield
    tfe_log.reset()


def pytest_collect_file(
    parent: pytest.Collector, file_path: Path
) -> DoctestModule | None:
    path = file_path if isinstance(file_path, Path) else Path(str(file_path))
    if path in DOCTEST_MODULES:
        return DoctestModule.from_parent(parent, path=path)
    return None
