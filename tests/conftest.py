"""Shared test fixtures for stencil tests."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass

import pytest
import structlog
from structlog.testing import CapturingLogger
from structlog.typing import FilteringBoundLogger

from stencil.utils import _logging


@dataclass(frozen=True, slots=True)
class CapturedLog:
    """A logger whose events are recorded instead of written."""

    logger: FilteringBoundLogger
    sink: CapturingLogger

    def events(self, level: str | None = None) -> list[dict[str, object]]:
        return [
            call.kwargs
            for call in self.sink.calls
            if level is None or call.method_name == level
        ]

    def event_names(self) -> list[object]:
        return [call.kwargs.get("event") for call in self.sink.calls]


@pytest.fixture
def captured_log() -> CapturedLog:
    """Return a debug-level logger that records every event it receives."""
    sink = CapturingLogger()
    logger = structlog.wrap_logger(
        sink,
        processors=[structlog.processors.add_log_level],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
        context_class=dict,
    )
    return CapturedLog(logger=logger, sink=sink)  # pyright: ignore[reportArgumentType]


@pytest.fixture(autouse=True)
def _clean_stencil_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep STENCIL_* variables from the outer environment out of tests."""
    import os

    for key in list(os.environ):
        if key.startswith("STENCIL_"):
            monkeypatch.delenv(key)


@pytest.fixture(autouse=True)
def _reset_log_files() -> Iterator[None]:
    """Forget log file handles so each test opens files in its own filesystem."""
    _logging._LOG_FILES.clear()  # pyright: ignore[reportPrivateUsage]
    yield
    _logging._LOG_FILES.clear()  # pyright: ignore[reportPrivateUsage]
