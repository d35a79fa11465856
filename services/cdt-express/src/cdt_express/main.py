"""
Entry point of the `cdt-express-mcp` console script.

Loads settings, configures logging, opens the API client for the lifetime of
the server and runs the configured MCP transport.
"""

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence

from common.logging import configure_logging, get_logger
from common.utils import ConfigError
from fastmcp.server.middleware.logging import StructuredLoggingMiddleware
from fastmcp.server.middleware.timing import TimingMiddleware

from cdt_express.clients.cdt_client import CDTExpressClient
from cdt_express.config import Settings, load_settings
from cdt_express.core.exceptions import ConfigurationError
from cdt_express.mcp_server import create_mcp_server
from cdt_express.tools.endpoints import build_tool_registry

logger = get_logger(__name__)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="cdt-express-mcp",
        description="MCP server exposing the CDT Express climate risk API as tools.",
    )
    parser.add_argument("--config", help="Path to a YAML config file (overrides config/default.yaml)")
    parser.add_argument("--env", help="Environment overlay to merge, e.g. 'dev' for config/dev.yaml")
    parser.add_argument("--api-key", dest="api_key", help="CDT Express API key (overrides CDT_API_KEY)")
    return parser.parse_args(argv)


async def serve(settings: Settings) -> None:
    async with CDTExpressClient(
        base_url=settings.api.base_url,
        api_key=settings.api.api_key.get_secret_value(),
        timeout=settings.api.timeout_seconds,
    ) as client:
        registry = build_tool_registry(client, max_pages=settings.pagination.max_pages)
        mcp = create_mcp_server(registry, settings)
        mcp.add_middleware(TimingMiddleware(logger=logging.getLogger("cdt_express.mcp.timing")))
        mcp.add_middleware(
            StructuredLoggingMiddleware(logger=logging.getLogger("cdt_express.mcp.requests"))
        )

        logger.info(
            "mcp_server_starting",
            transport=settings.server.transport,
            base_url=settings.api.base_url,
            tools=len(registry),
        )
        if settings.server.transport == "http":
            await mcp.run_async(
                transport="http", host=settings.server.host, port=settings.server.port
            )
        else:
            await mcp.run_async(transport="stdio", show_banner=False)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        settings = load_settings(env=args.env, config_path=args.config, api_key=args.api_key)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    # stdout carries the protocol on stdio, so logs go to stderr
    configure_logging(settings.service.name, settings.logging.level, stream=sys.stderr)

    try:
        asyncio.run(serve(settings))
    except ConfigurationError as e:
        logger.error("startup_failed", error=e.message)
        return 2
    except KeyboardInterrupt:
        logger.info("mcp_server_stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
