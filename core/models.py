# PATH: core/models.py
"""
Core data models for POOLSCAN.

SINK RECORD CONTRACT
====================
Each matched pool is persisted as:

  {
    "poolAddress": "T...",
    "feeTier": "0.3%",
    "token0": {"address": "T...", "symbol": "USDT", "decimals": "6"},
    "token1": {"address": "T...", "symbol": "WTRX", "decimals": "6"},
    "liquidity": "123456789012345678901"
  }

All values are strings. Liquidity is the exact decimal of the uint128,
never a float.
====================

OUTCOME CONTRACT
================
Enrichment of one entry yields exactly one of:
  Match(summary)   - pool contains the target token
  NoMatch(...)     - pool does not contain the target token
  Failure(error)   - any remote call or decode failed for this entry
================
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Union

from core.address import Address
from core.constants import FEE_PERCENT_DIVISOR
from core.exceptions import EnrichmentError


def format_fee_tier(raw_fee: int) -> str:
    """
    Render a fee in hundredths of a bip as a percentage.

    3000 -> "0.3%", 500 -> "0.05%", 10000 -> "1%".
    """
    if raw_fee < 0:
        raise ValueError(f"Fee cannot be negative: {raw_fee}")
    percent = Decimal(raw_fee) / Decimal(FEE_PERCENT_DIVISOR)
    if percent == 0:
        return "0%"
    return f"{format(percent.normalize(), 'f')}%"


@dataclass(frozen=True)
class RegistryHandle:
    """Registry being scanned; entry count is fixed for the scan."""
    contract_address: Address
    entry_count: int

    def __post_init__(self):
        if self.entry_count < 0:
            raise ValueError(f"entry_count must be >= 0, got {self.entry_count}")


@dataclass(frozen=True)
class TokenRef:
    """Token referenced by a pool."""
    address: Address
    symbol: str
    decimals: int

    def to_dict(self) -> Dict[str, str]:
        return {
            "address": self.address.display,
            "symbol": self.symbol,
            "decimals": str(self.decimals),
        }


@dataclass(frozen=True)
class EntrySummary:
    """Enriched registry entry."""
    address: Address
    fee_tier: str
    token0: TokenRef
    token1: TokenRef
    liquidity: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "poolAddress": self.address.display,
            "feeTier": self.fee_tier,
            "token0": self.token0.to_dict(),
            "token1": self.token1.to_dict(),
            "liquidity": self.liquidity,
        }


@dataclass(frozen=True)
class Match:
    summary: EntrySummary


@dataclass(frozen=True)
class NoMatch:
    address: Address
    token0: Address
    token1: Address


@dataclass(frozen=True)
class Failure:
    error: EnrichmentError


Outcome = Union[Match, NoMatch, Failure]


@dataclass
class ScanResult:
    """
    Matched entries in discovery order, plus scan counters.

    Owned by the pipeline for the duration of one scan.
    """
    registry_address: str = ""
    entries_total: int = 0
    entries_scanned: int = 0
    no_match: int = 0
    failed: int = 0
    entries: List[EntrySummary] = field(default_factory=list)

    @property
    def matched(self) -> int:
        return len(self.entries)

    def records(self) -> List[Dict[str, Any]]:
        """Sink records in insertion order."""
        return [entry.to_dict() for entry in self.entries]

    def get_summary(self) -> Dict[str, Any]:
        return {
            "registry": self.registry_address,
            "entries_total": self.entries_total,
            "entries_scanned": self.entries_scanned,
            "matched": self.matched,
            "no_match": self.no_match,
            "failed": self.failed,
        }
