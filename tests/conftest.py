# PATH: tests/conftest.py
"""
Pytest configuration and fixtures for POOLSCAN tests.
"""

import sys
from pathlib import Path
from typing import Any, Callable, Dict, Sequence, Tuple

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from core.address import Address  # noqa: E402


def pytest_configure(config):
    """Configure pytest."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )


def make_address(n: int) -> Address:
    """Deterministic test address from an integer."""
    return Address("41" + hex(n)[2:].zfill(40))


class FakeGateway:
    """
    In-memory RemoteCaller.

    Responses are keyed by (contract raw, signature, args). A value that is
    an exception instance is raised; a callable is invoked with the args.
    """

    def __init__(self, responses: Dict[Tuple[str, str, tuple], Any] | None = None):
        self.responses = dict(responses or {})
        self.calls: list[Tuple[str, str, tuple]] = []

    def set(self, contract: Address, signature: str, value: Any, args: tuple = ()) -> None:
        self.responses[(contract.raw, signature, tuple(args))] = value

    async def call(
        self,
        contract: Address,
        signature: str,
        args: Sequence[Any] = (),
        returns: str = "uint256",
    ) -> Any:
        key = (contract.raw, signature, tuple(args))
        self.calls.append(key)
        if key not in self.responses:
            raise KeyError(f"No fake response for {key}")
        value = self.responses[key]
        if isinstance(value, BaseException):
            raise value
        if callable(value):
            return value(*args)
        return value

    def add_pool(
        self,
        pool: Address,
        token0: Address,
        token1: Address,
        fee: Any = 3000,
        liquidity: Any = 10 ** 18,
    ) -> None:
        self.set(pool, "token0()", token0)
        self.set(pool, "token1()", token1)
        self.set(pool, "fee()", fee)
        self.set(pool, "liquidity()", liquidity)

    def add_token(self, token: Address, symbol: Any, decimals: Any) -> None:
        self.set(token, "symbol()", symbol)
        self.set(token, "decimals()", decimals)

    def add_factory(self, factory: Address, pools: Sequence[Address]) -> None:
        self.set(factory, "allPoolsLength()", len(pools))
        for index, pool in enumerate(pools):
            self.set(factory, "allPools(uint256)", pool, args=(index,))

    def calls_to(self, contract: Address) -> list[str]:
        return [sig for raw, sig, _ in self.calls if raw == contract.raw]


@pytest.fixture
def fake_gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def target_token() -> Address:
    return make_address(0xAAAA)


@pytest.fixture
def addr() -> Callable[[int], Address]:
    """Factory fixture: addr(n) -> deterministic Address."""
    return make_address


@pytest.fixture
def scan_config(tmp_path, target_token):
    """ScanConfig pointing at a fake factory and a temp output file."""
    from config import ScanConfig, get_network

    return ScanConfig(
        network=get_network("development"),
        registry_address=make_address(0xFAC7),
        target_token=target_token,
        output_path=tmp_path / "filtered_pools_info.json",
        timeout_seconds=1,
    )
