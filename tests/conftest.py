"""Shared test helpers."""

from __future__ import annotations

import logging

import pytest

from profile_assets.pipeline import ItemOutcome, RunSummary


class RecordingReporter:
    """Reporter that keeps every call for assertions."""

    def __init__(self):
        self.messages: list[tuple[str, str]] = []
        self.items: list[tuple[str, ItemOutcome]] = []
        self.summaries: list[RunSummary] = []

    def heading(self, message: str) -> None:
        self.messages.append(("heading", message))

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    def success(self, message: str) -> None:
        self.messages.append(("success", message))

    def warning(self, message: str) -> None:
        self.messages.append(("warning", message))

    def item(self, label: str, outcome: ItemOutcome) -> None:
        self.items.append((label, outcome))

    def summary(self, summary: RunSummary, *, done: str) -> None:
        self.summaries.append(summary)

    def of_kind(self, kind: str) -> list[str]:
        return [m for k, m in self.messages if k == kind]


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture(autouse=True)
def reset_package_logger():
    """CLI commands install a handler bound to the runner's stderr; drop it."""
    yield
    logger = logging.getLogger("profile_assets")
    logger.handlers[:] = []
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
