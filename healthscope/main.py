"""Health scope controller entrypoint."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
from typing import List, Optional

from healthscope import __version__
from healthscope.client import KubernetesResourceClient
from healthscope.config import ControllerConfig, parse_address
from healthscope.runtime import HealthScopeController

logger = logging.getLogger(__name__)


async def _run(controller: HealthScopeController) -> None:
    """Run the controller and keep the loop alive."""
    await controller.start()
    try:
        while True:
            await asyncio.sleep(3600)
    finally:
        await controller.stop()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="healthscope", description="Health scope controller")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-m", "--metrics-addr", help="The address the metric endpoint binds to.")
    parser.add_argument("-p", "--endpoint-address", help="The address the health scope endpoint binds to.")
    parser.add_argument("-n", "--namespace", help="Namespace to aggregate health scopes in.")
    parser.add_argument("--kubeconfig", help="Path to a kubeconfig file.")
    parser.add_argument("--log-level", default=os.getenv("LOG_LEVEL", "INFO"), help="Logging level.")
    return parser


def load_config(args: argparse.Namespace) -> ControllerConfig:
    """Merge command-line flags over the environment configuration."""
    config = ControllerConfig.from_env()
    overrides = {"namespace": args.namespace, "kubeconfig": args.kubeconfig}
    if args.endpoint_address:
        overrides["endpoint_host"], overrides["endpoint_port"] = parse_address(args.endpoint_address)
    if args.metrics_addr:
        overrides["liveness_host"], overrides["liveness_port"] = parse_address(args.metrics_addr)
    return config.with_overrides(**overrides)


def main(argv: Optional[List[str]] = None) -> None:
    """Application entrypoint for the health scope controller."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args)
    client = KubernetesResourceClient.from_config(config.namespace, config.kubeconfig)
    controller = HealthScopeController(config, client)

    try:
        asyncio.run(_run(controller))
    except KeyboardInterrupt:
        logger.info("interrupted, shutting down")


if __name__ == "__main__":
    main()
