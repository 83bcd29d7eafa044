"""
chains/gateway.py - Read-only contract calls against a TRON node.

Provides:
- Constant calls via /wallet/triggerconstantcontract
- Failover from the full node to the solidity node
- Request timeout handling
- Latency tracking per endpoint

Reverts are final and are not retried on another endpoint.
"""

import time
from dataclasses import dataclass
from typing import Any, Protocol, Sequence

import httpx

from chains.abi import decode_result, encode_args
from core.address import Address, ZERO_ADDRESS
from core.constants import (
    API_KEY_HEADER,
    DEFAULT_TIMEOUT_SECONDS,
    ErrorCode,
    TRIGGER_CONSTANT_PATH,
    TRIGGER_CONSTANT_SOLIDITY_PATH,
)
from core.exceptions import AbiDecodeError, ContractRevertError, GatewayError
from core.logging import get_logger

logger = get_logger(__name__)


class RemoteCaller(Protocol):
    """Capability consumed by the scan: one read-only call, decoded."""

    async def call(
        self,
        contract: Address,
        signature: str,
        args: Sequence[Any] = (),
        returns: str = "uint256",
    ) -> Any:
        ...


@dataclass
class EndpointStats:
    """Statistics for a node endpoint."""
    url: str
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    total_latency_ms: int = 0
    last_error: str | None = None
    last_success_ts: int | None = None

    @property
    def avg_latency_ms(self) -> int:
        if self.successful_requests == 0:
            return 0
        return self.total_latency_ms // self.successful_requests

    @property
    def success_rate(self) -> float:
        if self.total_requests == 0:
            return 0.0
        return self.successful_requests / self.total_requests


@dataclass
class CallResponse:
    """Raw response from a constant call."""
    result: str
    latency_ms: int
    endpoint_used: str
    energy_used: int | None = None


def _decode_node_message(message: str) -> str:
    """Node error messages are usually hex-encoded UTF-8."""
    try:
        return bytes.fromhex(message).decode("utf-8")
    except (ValueError, UnicodeDecodeError):
        return message


class TronGateway:
    """
    Remote call gateway for a TRON network.

    Usage:
        async with TronGateway(full_node, solidity_node) as gateway:
            count = await gateway.call(factory, "allPoolsLength()")
    """

    def __init__(
        self,
        full_node: str,
        solidity_node: str | None = None,
        timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS,
        api_key: str | None = None,
        owner_address: Address = ZERO_ADDRESS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.timeout_seconds = timeout_seconds
        self.api_key = api_key
        self.owner_address = owner_address
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

        self.endpoints = [full_node.rstrip("/") + TRIGGER_CONSTANT_PATH]
        if solidity_node:
            self.endpoints.append(solidity_node.rstrip("/") + TRIGGER_CONSTANT_SOLIDITY_PATH)

        self.stats: dict[str, EndpointStats] = {
            url: EndpointStats(url=url) for url in self.endpoints
        }

    async def __aenter__(self) -> "TronGateway":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            headers = {"Content-Type": "application/json"}
            if self.api_key:
                headers[API_KEY_HEADER] = self.api_key
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout_seconds),
                limits=httpx.Limits(max_connections=10),
                headers=headers,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _check_node_result(self, body: dict, url: str, contract: Address, signature: str) -> str:
        """Return constant_result[0]; raise ContractRevertError or AbiDecodeError."""
        context = {"url": url, "contract": contract.display, "function": signature}

        if "Error" in body:
            raise ContractRevertError(
                f"Node rejected {signature}: {body['Error']}",
                details=context,
            )

        result = body.get("result") or {}
        if result.get("code") or result.get("result") is not True:
            message = _decode_node_message(result.get("message", ""))
            raise ContractRevertError(
                f"{signature} failed: {result.get('code', 'NO_RESULT')} {message}".strip(),
                details=context,
            )

        ret = (body.get("transaction") or {}).get("ret") or [{}]
        if ret[0].get("ret") == "FAILED":
            raise ContractRevertError(f"{signature} reverted", details=context)

        constant_result = body.get("constant_result") or []
        if not constant_result:
            raise AbiDecodeError(f"{signature} returned no data", details=context)
        return constant_result[0]

    async def trigger_constant(
        self,
        contract: Address,
        signature: str,
        parameter: str = "",
    ) -> CallResponse:
        """
        Make a constant call with failover.

        Args:
            contract: Contract address
            signature: Function signature, e.g. "allPools(uint256)"
            parameter: ABI-encoded arguments (hex, no 0x)

        Returns:
            CallResponse with the raw hex result

        Raises:
            ContractRevertError: If the call reverted
            AbiDecodeError: If the node returned no data
            GatewayError: If all endpoints fail
        """
        client = await self._get_client()
        last_error: Exception | None = None
        timed_out = False

        payload = {
            "owner_address": self.owner_address.display,
            "contract_address": contract.display,
            "function_selector": signature,
            "parameter": parameter,
            "visible": True,
        }

        for url in self.endpoints:
            stats = self.stats[url]
            stats.total_requests += 1
            start_ms = int(time.time() * 1000)

            try:
                resp = await client.post(url, json=payload)
                latency_ms = int(time.time() * 1000) - start_ms
                resp.raise_for_status()
                body = resp.json()
                if not isinstance(body, dict):
                    raise ValueError(f"Unexpected node reply: {type(body).__name__}")

                hex_result = self._check_node_result(body, url, contract, signature)

                stats.successful_requests += 1
                stats.total_latency_ms += latency_ms
                stats.last_success_ts = int(time.time() * 1000)

                return CallResponse(
                    result=hex_result,
                    latency_ms=latency_ms,
                    endpoint_used=url,
                    energy_used=body.get("energy_used"),
                )

            except (ContractRevertError, AbiDecodeError) as e:
                stats.failed_requests += 1
                stats.last_error = str(e)
                raise

            except httpx.TimeoutException as e:
                latency_ms = int(time.time() * 1000) - start_ms
                stats.failed_requests += 1
                stats.last_error = f"Timeout after {latency_ms}ms"
                last_error = e
                timed_out = True
                logger.debug(f"Node timeout for {url}: {latency_ms}ms")
                continue

            except (httpx.HTTPError, ValueError) as e:
                stats.failed_requests += 1
                stats.last_error = str(e)
                last_error = e
                logger.debug(f"Node call failed for {url}: {e}")
                continue

        raise GatewayError(
            f"All endpoints failed for {signature} on {contract.display}",
            code=ErrorCode.INFRA_TIMEOUT if timed_out else ErrorCode.INFRA_RPC_ERROR,
            details={
                "contract": contract.display,
                "function": signature,
                "endpoints_tried": len(self.endpoints),
                "last_error": str(last_error),
            },
        )

    async def call(
        self,
        contract: Address,
        signature: str,
        args: Sequence[Any] = (),
        returns: str = "uint256",
    ) -> Any:
        """
        Invoke a read-only function and decode its single return value.

        Args:
            contract: Contract address
            signature: Function signature
            args: Arguments (int or Address)
            returns: ABI return type ("uint*", "address", "string")
        """
        response = await self.trigger_constant(contract, signature, encode_args(args))
        return decode_result(response.result, returns)

    def get_stats_summary(self) -> dict:
        """Get statistics summary for all endpoints."""
        return {
            url: {
                "total_requests": s.total_requests,
                "success_rate": round(s.success_rate, 3),
                "avg_latency_ms": s.avg_latency_ms,
                "last_error": s.last_error,
            }
            for url, s in self.stats.items()
        }
