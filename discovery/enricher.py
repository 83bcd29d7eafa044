"""
discovery/enricher.py - Per-pool metadata enrichment.

For one pool:
1. token0() / token1() in parallel
2. Skip unless one of them is the target token (no further calls)
3. fee(), liquidity(), symbol()/decimals() of both tokens in parallel
4. Assemble EntrySummary

Remote failures never escape: they become Failure outcomes scoped to
the pool being enriched.
"""

import asyncio
from typing import Any, Awaitable

from chains.gateway import RemoteCaller
from core.address import Address
from core.constants import (
    SIG_DECIMALS,
    SIG_FEE,
    SIG_LIQUIDITY,
    SIG_SYMBOL,
    SIG_TOKEN0,
    SIG_TOKEN1,
)
from core.exceptions import EnrichmentError
from core.logging import get_logger
from core.models import (
    EntrySummary,
    Failure,
    Match,
    NoMatch,
    Outcome,
    TokenRef,
    format_fee_tier,
)

logger = get_logger(__name__)


async def gather_all(*calls: Awaitable[Any]) -> list[Any]:
    """
    Await every call, then raise the first failure in argument order.

    All calls run to completion even when one of them fails.
    """
    results = await asyncio.gather(*calls, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return list(results)


class EntryEnricher:
    """
    Builds an EntrySummary for pools that contain the target token.

    Usage:
        enricher = EntryEnricher(gateway, target_token)
        outcome = await enricher.enrich(pool_address)
    """

    def __init__(self, gateway: RemoteCaller, target_token: Address):
        self.gateway = gateway
        self.target_token = target_token

    def matches_target(self, token0: Address, token1: Address) -> bool:
        """Target-match predicate (display-form equality)."""
        target = self.target_token.display
        return token0.display == target or token1.display == target

    async def _fetch_token_pair(self, pool: Address) -> tuple[Address, Address]:
        token0, token1 = await gather_all(
            self.gateway.call(pool, SIG_TOKEN0, returns="address"),
            self.gateway.call(pool, SIG_TOKEN1, returns="address"),
        )
        return token0, token1

    async def enrich(self, pool: Address) -> Outcome:
        """Enrich one pool; never raises for remote failures."""
        try:
            token0, token1 = await self._fetch_token_pair(pool)

            if not self.matches_target(token0, token1):
                return NoMatch(address=pool, token0=token0, token1=token1)

            logger.debug(
                f"Pool {pool.display} contains target, fetching metadata",
                extra={"context": {"token0": token0.display, "token1": token1.display}},
            )

            (
                fee,
                liquidity,
                symbol0,
                decimals0,
                symbol1,
                decimals1,
            ) = await gather_all(
                self.gateway.call(pool, SIG_FEE, returns="uint24"),
                self.gateway.call(pool, SIG_LIQUIDITY, returns="uint128"),
                self.gateway.call(token0, SIG_SYMBOL, returns="string"),
                self.gateway.call(token0, SIG_DECIMALS, returns="uint8"),
                self.gateway.call(token1, SIG_SYMBOL, returns="string"),
                self.gateway.call(token1, SIG_DECIMALS, returns="uint8"),
            )

            summary = EntrySummary(
                address=pool,
                fee_tier=format_fee_tier(int(fee)),
                token0=TokenRef(address=token0, symbol=symbol0, decimals=int(decimals0)),
                token1=TokenRef(address=token1, symbol=symbol1, decimals=int(decimals1)),
                liquidity=str(int(liquidity)),
            )
            return Match(summary=summary)

        except Exception as e:
            return Failure(error=EnrichmentError(pool.display, e))
