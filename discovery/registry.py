"""
discovery/registry.py - Registry-driven pool enumeration.

Pipeline:
1. Read allPoolsLength() once -> RegistryHandle
2. Walk indices 0..N-1 in ascending order
3. Resolve allPools(i) -> pool address
"""

from typing import Iterator

from chains.gateway import RemoteCaller
from core.address import Address
from core.constants import SIG_ALL_POOLS, SIG_ALL_POOLS_LENGTH
from core.exceptions import (
    AbiDecodeError,
    GatewayError,
    InvalidRegistry,
    RegistryUnreachable,
)
from core.logging import get_logger
from core.models import RegistryHandle

logger = get_logger(__name__)


class RegistryEnumerator:
    """
    Enumerates the pools of a factory contract.

    Usage:
        enumerator = RegistryEnumerator(gateway)
        handle = await enumerator.open(factory_address)
        for index in enumerator.indices(handle):
            pool = await enumerator.entry_at(handle, index)
    """

    def __init__(self, gateway: RemoteCaller):
        self.gateway = gateway

    async def open(self, registry_address: Address) -> RegistryHandle:
        """
        Fetch the entry count and freeze it for the scan.

        Raises:
            RegistryUnreachable: If the count call fails
            InvalidRegistry: If the count is missing or not a non-negative int
        """
        try:
            count = await self.gateway.call(
                registry_address,
                SIG_ALL_POOLS_LENGTH,
                returns="uint256",
            )
        except AbiDecodeError as e:
            raise InvalidRegistry(
                f"Registry {registry_address.display} returned an unreadable count: {e.message}",
                details={"registry": registry_address.display},
            ) from e
        except GatewayError as e:
            raise RegistryUnreachable(
                f"Cannot read pool count from {registry_address.display}: {e}",
                details={"registry": registry_address.display, "cause": str(e)},
            ) from e

        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            raise InvalidRegistry(
                f"Registry {registry_address.display} returned invalid count: {count!r}",
                details={"registry": registry_address.display, "count": repr(count)},
            )

        logger.info(
            f"Total pools found: {count}",
            extra={"context": {"registry": registry_address.display}},
        )
        return RegistryHandle(contract_address=registry_address, entry_count=count)

    async def entry_at(self, handle: RegistryHandle, index: int) -> Address:
        """Resolve the pool address stored at index."""
        if not 0 <= index < handle.entry_count:
            raise IndexError(
                f"Pool index {index} out of range [0, {handle.entry_count})"
            )

        return await self.gateway.call(
            handle.contract_address,
            SIG_ALL_POOLS,
            args=(index,),
            returns="address",
        )

    def indices(self, handle: RegistryHandle) -> Iterator[int]:
        """Lazy ascending walk over 0..entry_count-1 (single use)."""
        for index in range(handle.entry_count):
            yield index
