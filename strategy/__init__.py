# PATH: strategy/__init__.py
"""Strategy package for POOLSCAN: the scan pipeline and its entry points."""

from strategy.pipeline import (
    PipelineDriver,
    ScanState,
    VALID_TRANSITIONS,
)

__all__ = [
    "PipelineDriver",
    "ScanState",
    "VALID_TRANSITIONS",
]
