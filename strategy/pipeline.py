# PATH: strategy/pipeline.py
"""
POOLSCAN scan pipeline.

SCAN STATE CONTRACT:
====================

States (ScanState):
  IDLE        -> driver constructed
  OPENING     -> reading the registry pool count
  SCANNING    -> walking pools in ascending index order
  FINALIZING  -> writing the sink
  DONE        -> sink written (terminal)
  FAILED      -> registry could not be opened (terminal, no sink write)
  SAVE_FAILED -> scan finished but the sink write failed (terminal)

Transitions:
  IDLE       -> OPENING
  OPENING    -> SCANNING | FAILED
  SCANNING   -> FINALIZING
  FINALIZING -> DONE | SAVE_FAILED

Per-pool failures never leave SCANNING.
====================
"""

from enum import Enum
from typing import Dict, List, Optional

from chains.gateway import RemoteCaller
from config import ScanConfig
from core.exceptions import (
    EnrichmentError,
    InvalidRegistry,
    PoolscanError,
    RegistryUnreachable,
    SinkWriteError,
)
from core.logging import get_logger
from core.models import ScanResult
from discovery.enricher import EntryEnricher
from discovery.registry import RegistryEnumerator
from monitoring.scan_report import JsonSink, ScanAggregator

logger = get_logger(__name__)


class ScanState(str, Enum):
    """Scan pipeline states."""
    IDLE = "IDLE"
    OPENING = "OPENING"
    SCANNING = "SCANNING"
    FINALIZING = "FINALIZING"
    DONE = "DONE"
    FAILED = "FAILED"
    SAVE_FAILED = "SAVE_FAILED"


VALID_TRANSITIONS: Dict[ScanState, List[ScanState]] = {
    ScanState.IDLE: [ScanState.OPENING],
    ScanState.OPENING: [ScanState.SCANNING, ScanState.FAILED],
    ScanState.SCANNING: [ScanState.FINALIZING],
    ScanState.FINALIZING: [ScanState.DONE, ScanState.SAVE_FAILED],
    ScanState.DONE: [],
    ScanState.FAILED: [],
    ScanState.SAVE_FAILED: [],
}

TERMINAL_STATES = frozenset({ScanState.DONE, ScanState.FAILED, ScanState.SAVE_FAILED})


class PipelineDriver:
    """
    Runs one registry scan: enumerate -> enrich -> aggregate -> persist.

    Usage:
        async with TronGateway(...) as gateway:
            driver = PipelineDriver(config, gateway)
            result = await driver.run()
    """

    def __init__(
        self,
        config: ScanConfig,
        gateway: RemoteCaller,
        sink: Optional[JsonSink] = None,
    ):
        self.config = config
        self.enumerator = RegistryEnumerator(gateway)
        self.enricher = EntryEnricher(gateway, config.target_token)
        self.sink = sink or JsonSink(config.output_path)
        self._state = ScanState.IDLE
        self._aggregator: Optional[ScanAggregator] = None
        self.history: List[ScanState] = [ScanState.IDLE]

    @property
    def state(self) -> ScanState:
        return self._state

    @property
    def result(self) -> Optional[ScanResult]:
        """In-memory result (available after scanning, even if saving failed)."""
        if self._aggregator is None:
            return None
        return self._aggregator.result

    def _transition(self, target: ScanState) -> None:
        if target not in VALID_TRANSITIONS[self._state]:
            raise RuntimeError(f"Invalid scan transition: {self._state.value} -> {target.value}")
        logger.debug(f"Scan state {self._state.value} -> {target.value}")
        self._state = target
        self.history.append(target)

    async def run(self) -> ScanResult:
        """
        Execute the scan.

        Raises:
            RegistryUnreachable / InvalidRegistry: Registry could not be opened
            SinkWriteError: Results could not be saved (result stays on the driver)
        """
        registry = self.config.registry_address

        self._transition(ScanState.OPENING)
        try:
            handle = await self.enumerator.open(registry)
        except (RegistryUnreachable, InvalidRegistry) as e:
            self._transition(ScanState.FAILED)
            logger.error(
                f"Scan aborted: {e}",
                extra={"context": {"registry": registry.display, "code": e.code.value}},
            )
            raise

        self._transition(ScanState.SCANNING)
        self._aggregator = ScanAggregator(
            registry_address=registry.display,
            entries_total=handle.entry_count,
        )

        for index in self.enumerator.indices(handle):
            try:
                pool = await self.enumerator.entry_at(handle, index)
            except PoolscanError as e:
                self._aggregator.record_failure(index, EnrichmentError(None, e))
                continue

            outcome = await self.enricher.enrich(pool)
            self._aggregator.consume(index, outcome)

        result = self._aggregator.result

        self._transition(ScanState.FINALIZING)
        try:
            self.sink.write(result.records())
        except SinkWriteError as e:
            self._transition(ScanState.SAVE_FAILED)
            logger.error(
                f"Saving scan results failed: {e}",
                extra={"context": {"path": str(self.sink.path), "matched": result.matched}},
            )
            raise

        self._transition(ScanState.DONE)
        logger.info(
            f"Scan complete: {result.matched} matching pools",
            extra={"context": result.get_summary()},
        )
        return result
