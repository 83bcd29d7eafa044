# PATH: config/__init__.py
"""
Configuration loading utilities for POOLSCAN.

Precedence (lowest to highest):
1. Built-in network presets
2. YAML file (config/scan.yaml by default)
3. Environment (.env is loaded first)
4. Explicit overrides (CLI options)
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from core.address import Address, ZERO_ADDRESS
from core.constants import (
    DEFAULT_NETWORK,
    DEFAULT_OUTPUT_PATH,
    DEFAULT_TIMEOUT_SECONDS,
)
from core.exceptions import ConfigError, MalformedAddress


CONFIG_DIR = Path(__file__).parent

# Endpoint triples per network (full node, solidity node, event server)
NETWORKS: Dict[str, Dict[str, str]] = {
    "mainnet": {
        "full_node": "https://api.trongrid.io",
        "solidity_node": "https://api.trongrid.io",
        "event_server": "https://api.trongrid.io",
    },
    "shasta": {
        "full_node": "https://api.shasta.trongrid.io",
        "solidity_node": "https://api.shasta.trongrid.io",
        "event_server": "https://api.shasta.trongrid.io",
    },
    "nile": {
        "full_node": "https://api.nileex.io",
        "solidity_node": "https://api.nileex.io",
        "event_server": "https://event.nileex.io",
    },
    "development": {
        "full_node": "http://127.0.0.1:9090",
        "solidity_node": "http://127.0.0.1:9090",
        "event_server": "http://127.0.0.1:9090",
    },
}

ENV_OVERRIDES: Dict[str, str] = {
    "network": "POOLSCAN_NETWORK",
    "registry_address": "POOLSCAN_REGISTRY",
    "target_token": "POOLSCAN_TARGET_TOKEN",
    "output_path": "POOLSCAN_OUTPUT",
    "api_key": "TRON_PRO_API_KEY",
}


@dataclass(frozen=True)
class NetworkEndpoints:
    """Node endpoint triple for one network."""
    name: str
    full_node: str
    solidity_node: str
    event_server: str


@dataclass(frozen=True)
class ScanConfig:
    """Immutable settings for one scan."""
    network: NetworkEndpoints
    registry_address: Address
    target_token: Address
    output_path: Path = Path(DEFAULT_OUTPUT_PATH)
    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS
    owner_address: Address = ZERO_ADDRESS
    api_key: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "network": self.network.name,
            "full_node": self.network.full_node,
            "registry_address": self.registry_address.display,
            "target_token": self.target_token.display,
            "output_path": str(self.output_path),
            "timeout_seconds": self.timeout_seconds,
            "api_key_set": bool(self.api_key),
        }


def load_yaml(path: Path) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        path: Path to the file; relative names resolve against the config directory

    Returns:
        Parsed YAML as dict
    """
    filepath = Path(path)
    if not filepath.is_absolute() and not filepath.exists():
        filepath = CONFIG_DIR / filepath.name
    if not filepath.exists():
        raise ConfigError(f"Config file not found: {path}", details={"path": str(path)})

    with open(filepath, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {filepath}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config root must be a mapping: {filepath}")
    return data


def get_network(name: str, extra_networks: Optional[Dict[str, Any]] = None) -> NetworkEndpoints:
    """
    Resolve a network name to its endpoint triple.

    Args:
        name: Network key (e.g., 'nile')
        extra_networks: Additional or overriding presets from the config file
    """
    networks = {key: dict(value) for key, value in NETWORKS.items()}
    for key, value in (extra_networks or {}).items():
        networks.setdefault(key, {}).update(value or {})

    if name not in networks:
        raise ConfigError(
            f"Unknown network: {name}",
            details={"known": sorted(networks)},
        )

    preset = networks[name]
    full_node = preset.get("full_node")
    if not full_node:
        raise ConfigError(f"Network {name} has no full_node endpoint")

    return NetworkEndpoints(
        name=name,
        full_node=full_node,
        solidity_node=preset.get("solidity_node") or full_node,
        event_server=preset.get("event_server") or full_node,
    )


def _parse_address(field_name: str, value: Any) -> Address:
    if not value:
        raise ConfigError(f"Missing required setting: {field_name}")
    try:
        return Address.parse(str(value))
    except MalformedAddress as e:
        raise ConfigError(f"Invalid {field_name}: {e.message}") from e


def load_scan_config(
    path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
    use_env: bool = True,
) -> ScanConfig:
    """
    Build a ScanConfig from file, environment and overrides.

    Args:
        path: YAML file (None = no file, presets and env only)
        overrides: Values that win over file and env (None values ignored)
        use_env: Read POOLSCAN_* / TRON_PRO_API_KEY from the environment

    Raises:
        ConfigError: If a value is missing or invalid
    """
    settings: Dict[str, Any] = {}
    if path is not None:
        settings.update(load_yaml(path))

    if use_env:
        load_dotenv()
        for key, env_name in ENV_OVERRIDES.items():
            value = os.getenv(env_name)
            if value:
                settings[key] = value

    for key, value in (overrides or {}).items():
        if value is not None:
            settings[key] = value

    network = get_network(
        settings.get("network", DEFAULT_NETWORK),
        settings.get("networks"),
    )

    try:
        timeout_seconds = int(settings.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid timeout_seconds: {settings.get('timeout_seconds')!r}") from e
    if timeout_seconds <= 0:
        raise ConfigError(f"timeout_seconds must be positive, got {timeout_seconds}")

    owner = settings.get("owner_address")

    return ScanConfig(
        network=network,
        registry_address=_parse_address("registry_address", settings.get("registry_address")),
        target_token=_parse_address("target_token", settings.get("target_token")),
        output_path=Path(settings.get("output_path") or DEFAULT_OUTPUT_PATH),
        timeout_seconds=timeout_seconds,
        owner_address=_parse_address("owner_address", owner) if owner else ZERO_ADDRESS,
        api_key=settings.get("api_key") or None,
    )
