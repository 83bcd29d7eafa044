#!/usr/bin/env python3
"""
strategy/jobs/run_scan.py - CLI entrypoint for the pool registry scan.

Features:
- Enumerates every pool of a factory contract
- Keeps pools that contain the target token
- Writes the matches to a JSON file in one atomic write

Exit codes:
    0  scan complete, results saved
    1  fatal (config error, registry unreachable or invalid)
    2  scan complete but results could not be saved

Usage:
    python -m strategy.jobs.run_scan
    python -m strategy.jobs.run_scan --network mainnet --target T... --output pools.json
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from chains.gateway import RemoteCaller, TronGateway
from config import ScanConfig, load_scan_config
from core.constants import DEFAULT_CONFIG_PATH, ExitCode
from core.exceptions import (
    ConfigError,
    InvalidRegistry,
    RegistryUnreachable,
    SinkWriteError,
)
from core.logging import get_logger, setup_logging
from core.models import ScanResult
from monitoring.scan_report import print_scan_summary
from strategy.pipeline import PipelineDriver

logger = get_logger("poolscan.scan")


async def run_scan(config: ScanConfig, gateway: Optional[RemoteCaller] = None) -> ScanResult:
    """
    Run one scan with the given config.

    Opens (and closes) a TronGateway unless one is supplied.
    """
    if gateway is not None:
        return await PipelineDriver(config, gateway).run()

    async with TronGateway(
        full_node=config.network.full_node,
        solidity_node=config.network.solidity_node,
        timeout_seconds=config.timeout_seconds,
        api_key=config.api_key,
        owner_address=config.owner_address,
    ) as tron:
        try:
            return await PipelineDriver(config, tron).run()
        finally:
            logger.debug("Gateway stats", extra={"context": tron.get_stats_summary()})


@click.command()
@click.option("--config", "-c", "config_path", default=DEFAULT_CONFIG_PATH, help="YAML config file")
@click.option("--network", "-n", default=None, help="Network preset (mainnet, shasta, nile, development)")
@click.option("--registry", "-r", default=None, help="Factory contract address")
@click.option("--target", "-t", default=None, help="Target token address")
@click.option("--output", "-o", default=None, help="Output JSON file")
@click.option("--timeout", default=None, type=int, help="Per-request timeout in seconds")
@click.option("--log-level", "-l", default="INFO", type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]))
@click.option("--log-file", default=None, help="Also write JSON logs to this file")
@click.option("--json-logs/--no-json-logs", default=False)
def main(
    config_path: str,
    network: Optional[str],
    registry: Optional[str],
    target: Optional[str],
    output: Optional[str],
    timeout: Optional[int],
    log_level: str,
    log_file: Optional[str],
    json_logs: bool,
) -> None:
    """POOLSCAN - list factory pools that contain a target token."""
    setup_logging(
        level=getattr(logging, log_level),
        log_file=log_file,
        json_format=json_logs,
    )

    try:
        config = load_scan_config(
            Path(config_path),
            overrides={
                "network": network,
                "registry_address": registry,
                "target_token": target,
                "output_path": output,
                "timeout_seconds": timeout,
            },
        )
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(ExitCode.FATAL)

    logger.info("Starting pool scan", extra={"context": config.to_dict()})

    try:
        result = asyncio.run(run_scan(config))
    except (RegistryUnreachable, InvalidRegistry) as e:
        logger.error(f"Scan failed: {e}", extra={"context": e.details})
        sys.exit(ExitCode.FATAL)
    except SinkWriteError as e:
        logger.error(f"Results not saved: {e}", extra={"context": e.details})
        sys.exit(ExitCode.SAVE_FAILED)

    print_scan_summary(result, config.output_path)


if __name__ == "__main__":
    main()
