"""
discovery/ - Pool enumeration and enrichment.

Modules:
- registry: Factory enumeration (count, index -> pool address)
- enricher: Per-pool token/fee/liquidity metadata
"""

from discovery.enricher import EntryEnricher, gather_all
from discovery.registry import RegistryEnumerator

__all__ = [
    "EntryEnricher",
    "RegistryEnumerator",
    "gather_all",
]
