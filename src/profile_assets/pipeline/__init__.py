"""
Batch pipeline building blocks.

Provides outcome records, the sequential batch runner and the reporting
interface shared by the QR-code and image-optimization pipelines.
"""

from .batch import ItemOutcome, Rendered, RunSummary, run_batch, summarize
from .reporting import ConsoleReporter, Reporter

__all__ = [
    "ItemOutcome",
    "Rendered",
    "RunSummary",
    "run_batch",
    "summarize",
    "ConsoleReporter",
    "Reporter",
]
