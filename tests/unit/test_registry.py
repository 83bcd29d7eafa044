"""
tests/unit/test_registry.py - Registry enumerator tests.
"""

from unittest.mock import AsyncMock

import httpx
import pytest

from chains.gateway import TronGateway
from core.constants import ErrorCode, SIG_ALL_POOLS, SIG_ALL_POOLS_LENGTH
from core.exceptions import (
    AbiDecodeError,
    ContractRevertError,
    GatewayError,
    InvalidRegistry,
    RegistryUnreachable,
)
from core.models import RegistryHandle
from discovery.registry import RegistryEnumerator


@pytest.fixture
def factory(addr):
    return addr(0xFAC7)


@pytest.fixture
def enumerator(fake_gateway):
    return RegistryEnumerator(fake_gateway)


class TestOpen:
    @pytest.mark.asyncio
    async def test_open_returns_handle(self, enumerator, fake_gateway, factory):
        fake_gateway.set(factory, SIG_ALL_POOLS_LENGTH, 5)

        handle = await enumerator.open(factory)

        assert handle == RegistryHandle(contract_address=factory, entry_count=5)
        assert fake_gateway.calls == [(factory.raw, SIG_ALL_POOLS_LENGTH, ())]

    @pytest.mark.asyncio
    async def test_open_empty_registry(self, enumerator, fake_gateway, factory):
        fake_gateway.set(factory, SIG_ALL_POOLS_LENGTH, 0)

        handle = await enumerator.open(factory)

        assert handle.entry_count == 0
        assert list(enumerator.indices(handle)) == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        GatewayError("node down"),
        ContractRevertError("not a factory"),
    ])
    async def test_gateway_failure_is_unreachable(self, enumerator, fake_gateway, factory, error):
        fake_gateway.set(factory, SIG_ALL_POOLS_LENGTH, error)

        with pytest.raises(RegistryUnreachable) as exc_info:
            await enumerator.open(factory)

        assert exc_info.value.code == ErrorCode.REGISTRY_UNREACHABLE
        assert exc_info.value.__cause__ is error

    @pytest.mark.asyncio
    async def test_undecodable_count_is_invalid(self, enumerator, fake_gateway, factory):
        fake_gateway.set(factory, SIG_ALL_POOLS_LENGTH, AbiDecodeError("Empty call result"))

        with pytest.raises(InvalidRegistry):
            await enumerator.open(factory)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("count", [None, "12", -1, 1.5, True])
    async def test_non_integer_count_is_invalid(self, enumerator, fake_gateway, factory, count):
        fake_gateway.set(factory, SIG_ALL_POOLS_LENGTH, count)

        with pytest.raises(InvalidRegistry) as exc_info:
            await enumerator.open(factory)

        assert exc_info.value.code == ErrorCode.INVALID_REGISTRY


class TestEntries:
    def test_indices_ascending_each_once(self, enumerator, factory):
        handle = RegistryHandle(contract_address=factory, entry_count=4)

        assert list(enumerator.indices(handle)) == [0, 1, 2, 3]

    def test_indices_not_restartable(self, enumerator, factory):
        handle = RegistryHandle(contract_address=factory, entry_count=2)
        walk = enumerator.indices(handle)

        assert list(walk) == [0, 1]
        assert list(walk) == []

    @pytest.mark.asyncio
    async def test_entry_at_resolves_address(self, enumerator, fake_gateway, factory, addr):
        handle = RegistryHandle(contract_address=factory, entry_count=3)
        fake_gateway.set(factory, SIG_ALL_POOLS, addr(0x100 + 2), args=(2,))

        pool = await enumerator.entry_at(handle, 2)

        assert pool == addr(0x102)
        assert fake_gateway.calls == [(factory.raw, SIG_ALL_POOLS, (2,))]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("index", [-1, 3, 10])
    async def test_entry_at_out_of_range(self, enumerator, fake_gateway, factory, index):
        handle = RegistryHandle(contract_address=factory, entry_count=3)

        with pytest.raises(IndexError):
            await enumerator.entry_at(handle, index)

        assert fake_gateway.calls == []

    @pytest.mark.asyncio
    async def test_entry_at_propagates_gateway_error(self, enumerator, fake_gateway, factory):
        handle = RegistryHandle(contract_address=factory, entry_count=1)
        fake_gateway.set(factory, SIG_ALL_POOLS, GatewayError("boom"), args=(0,))

        with pytest.raises(GatewayError):
            await enumerator.entry_at(handle, 0)


class TestRegistryHandle:
    def test_negative_count_rejected(self, factory):
        with pytest.raises(ValueError):
            RegistryHandle(contract_address=factory, entry_count=-1)


class TestWithMockGateway:
    @pytest.mark.asyncio
    async def test_call_arguments(self, factory, addr):
        gateway = AsyncMock()
        gateway.call.side_effect = [2, addr(0x5000)]
        enumerator = RegistryEnumerator(gateway)

        handle = await enumerator.open(factory)
        pool = await enumerator.entry_at(handle, 1)

        assert pool == addr(0x5000)
        gateway.call.assert_any_await(factory, SIG_ALL_POOLS_LENGTH, returns="uint256")
        gateway.call.assert_awaited_with(factory, SIG_ALL_POOLS, args=(1,), returns="address")


class TestOpenOverWire:
    """Count classification with the node replies a real gateway sees."""

    @staticmethod
    def gateway_for(body) -> TronGateway:
        return TronGateway(
            full_node="http://node.test",
            transport=httpx.MockTransport(lambda request: httpx.Response(200, json=body)),
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("constant_result", [[], [""]])
    async def test_missing_count_is_invalid(self, factory, constant_result):
        body = {"result": {"result": True}, "constant_result": constant_result}

        async with self.gateway_for(body) as gateway:
            with pytest.raises(InvalidRegistry):
                await RegistryEnumerator(gateway).open(factory)

    @pytest.mark.asyncio
    async def test_non_object_reply_is_unreachable(self, factory):
        async with self.gateway_for(["unexpected"]) as gateway:
            with pytest.raises(RegistryUnreachable):
                await RegistryEnumerator(gateway).open(factory)
