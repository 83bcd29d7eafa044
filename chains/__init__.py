"""
chains/ - Blockchain interaction layer.

Modules:
- abi: Parameter encoding and return-value decoding
- gateway: Constant calls against a TRON node with failover
"""

from chains.gateway import (
    CallResponse,
    EndpointStats,
    RemoteCaller,
    TronGateway,
)

__all__ = [
    "CallResponse",
    "EndpointStats",
    "RemoteCaller",
    "TronGateway",
]
