"""
monitoring/scan_report.py - Scan result aggregation and persistence.

REPORT CONTRACT:
- matches are kept in arrival order (ascending pool index)
- NoMatch / Failure outcomes are logged, then dropped
- the sink is written once, as a whole, by atomic file replacement
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List

from core.exceptions import EnrichmentError, SinkWriteError
from core.logging import get_logger
from core.models import Failure, Match, NoMatch, Outcome, ScanResult

logger = get_logger(__name__)


class ScanAggregator:
    """Folds per-pool outcomes into a ScanResult."""

    def __init__(self, registry_address: str = "", entries_total: int = 0):
        self._result = ScanResult(
            registry_address=registry_address,
            entries_total=entries_total,
        )

    @property
    def result(self) -> ScanResult:
        return self._result

    def consume(self, index: int, outcome: Outcome) -> None:
        """Route one outcome. Outcomes must arrive in index order."""
        self._result.entries_scanned += 1

        if isinstance(outcome, Match):
            summary = outcome.summary
            self._result.entries.append(summary)
            logger.info(
                f"Found matching pool {index + 1}/{self._result.entries_total}: "
                f"{summary.address.display}",
                extra={"context": {
                    "index": index,
                    "fee_tier": summary.fee_tier,
                    "token0": f"{summary.token0.symbol} ({summary.token0.address.display})",
                    "token1": f"{summary.token1.symbol} ({summary.token1.address.display})",
                    "liquidity": summary.liquidity,
                }},
            )

        elif isinstance(outcome, NoMatch):
            self._result.no_match += 1
            logger.info(
                f"Pool {index} skipped: target token not in pair",
                extra={"context": {
                    "index": index,
                    "pool": outcome.address.display,
                    "token0": outcome.token0.display,
                    "token1": outcome.token1.display,
                }},
            )

        elif isinstance(outcome, Failure):
            self._log_failure(index, outcome.error)

        else:
            raise TypeError(f"Unknown outcome type: {type(outcome).__name__}")

    def record_failure(self, index: int, error: EnrichmentError) -> None:
        """Record a pool that failed before enrichment (address lookup)."""
        self._result.entries_scanned += 1
        self._log_failure(index, error)

    def _log_failure(self, index: int, error: EnrichmentError) -> None:
        self._result.failed += 1
        logger.warning(
            f"Error processing pool {index}: {error.cause}",
            extra={"context": {
                "index": index,
                "pool": error.entry_address,
                "error_type": type(error.cause).__name__,
            }},
        )


class JsonSink:
    """Durable JSON document holding the list of matched pools."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def to_json(self, records: List[Dict[str, Any]], indent: int = 2) -> str:
        return json.dumps(records, indent=indent, ensure_ascii=False)

    def write(self, records: List[Dict[str, Any]]) -> Path:
        """
        Replace the sink contents with the full record list.

        Written to a temp file in the same directory, fsynced, then
        moved over the destination so readers never see a partial list.

        Raises:
            SinkWriteError: If the file cannot be written
        """
        data = self.to_json(records)
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                delete=False,
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
            ) as tf:
                tmp_name = tf.name
                tf.write(data)
                tf.flush()
                os.fsync(tf.fileno())
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise SinkWriteError(
                f"Cannot write scan results to {self.path}: {e}",
                details={"path": str(self.path), "records": len(records)},
            ) from e

        logger.info(
            f"Filtered pool information has been saved to {self.path}",
            extra={"context": {"records": len(records)}},
        )
        return self.path

    def read(self) -> List[Dict[str, Any]]:
        """Load a previously written sink."""
        with open(self.path, "r", encoding="utf-8") as f:
            return json.load(f)


def print_scan_summary(result: ScanResult, sink_path: Path | None = None) -> None:
    """Print human-readable scan summary to stdout."""
    print(f"Matched {result.matched} of {result.entries_total} pools")
    print(
        f"  scanned={result.entries_scanned} no_match={result.no_match} "
        f"failed={result.failed}"
    )
    if sink_path is not None:
        print(f"  saved to {sink_path}")
