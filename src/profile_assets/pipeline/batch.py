"""
Sequential batch execution with per-item outcome records.

Every pipeline in this package has the same shape: enumerate work items,
transform each one, collect an outcome per item and fold the outcomes into
a summary. A failing item never stops the batch; its exception is captured
on the outcome instead.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Any, Callable, Iterable


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rendered:
    """
    What a transform produced for one item.

    Attributes:
        paths: Files written, in rendition order
        notes: Human-readable detail lines for the console
    """

    paths: tuple[Path, ...] = ()
    notes: tuple[str, ...] = ()


@dataclass(frozen=True)
class ItemOutcome:
    """
    Result of attempting every rendition for one work item.

    Attributes:
        item: The work item (QRTarget, SourceImage, ...)
        succeeded: Whether all renditions were written
        error_message: Exception message when the item failed
        produced_paths: Files written for the item (empty on failure)
        notes: Detail lines reported alongside a success
    """

    item: Any
    succeeded: bool
    error_message: str | None = None
    produced_paths: tuple[Path, ...] = ()
    notes: tuple[str, ...] = ()

    @classmethod
    def success(cls, item: Any, rendered: Rendered) -> "ItemOutcome":
        return cls(
            item=item,
            succeeded=True,
            produced_paths=rendered.paths,
            notes=rendered.notes,
        )

    @classmethod
    def failure(cls, item: Any, error: BaseException) -> "ItemOutcome":
        return cls(item=item, succeeded=False, error_message=str(error))


@dataclass(frozen=True)
class RunSummary:
    """Totals for one batch run; success_count + failure_count == total_items."""

    total_items: int = 0
    success_count: int = 0
    failure_count: int = 0
    failed: tuple[ItemOutcome, ...] = field(default=(), compare=False)

    @property
    def is_empty(self) -> bool:
        return self.total_items == 0


def summarize(outcomes: Iterable[ItemOutcome]) -> RunSummary:
    """
    Fold outcomes into a RunSummary.

    Example:
        >>> summary = summarize(outcomes)
        >>> assert summary.success_count + summary.failure_count == summary.total_items
    """
    total = 0
    ok = 0
    failed: list[ItemOutcome] = []
    for outcome in outcomes:
        total += 1
        if outcome.succeeded:
            ok += 1
        else:
            failed.append(outcome)
    return RunSummary(
        total_items=total,
        success_count=ok,
        failure_count=len(failed),
        failed=tuple(failed),
    )


def run_batch(
    items: Iterable[Any],
    transform: Callable[[Any], Rendered],
    *,
    on_outcome: Callable[[ItemOutcome], None] | None = None,
    describe: Callable[[Any], str] = str,
) -> list[ItemOutcome]:
    """
    Run `transform` over every item in order, capturing failures per item.

    Any `Exception` raised by `transform` marks that item failed with the
    exception message and processing moves on to the next item.

    Parameters:
        items: Work items in enumeration order
        transform: Produces all renditions for one item
        on_outcome: Called with each outcome as soon as it is known
        describe: Item label used in log records

    Returns:
        One ItemOutcome per item, in enumeration order
    """
    outcomes: list[ItemOutcome] = []
    for item in items:
        try:
            rendered = transform(item)
        except Exception as e:
            outcome = ItemOutcome.failure(item, e)
            logger.warning(
                "item_failed",
                extra={"item": describe(item), "error": outcome.error_message},
            )
        else:
            outcome = ItemOutcome.success(item, rendered)
            logger.debug(
                "item_succeeded",
                extra={
                    "item": describe(item),
                    "paths": [str(p) for p in rendered.paths],
                },
            )
        outcomes.append(outcome)
        if on_outcome is not None:
            on_outcome(outcome)
    return outcomes
