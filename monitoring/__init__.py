"""
Monitoring package for POOLSCAN.

Scan result aggregation, summary output and the JSON sink.
"""

from monitoring.scan_report import (
    JsonSink,
    ScanAggregator,
    print_scan_summary,
)

__all__ = [
    "JsonSink",
    "ScanAggregator",
    "print_scan_summary",
]
