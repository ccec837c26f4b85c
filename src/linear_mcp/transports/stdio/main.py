from __future__ import annotations

import asyncio
import logging

from mcp.server.fastmcp import FastMCP

from linear_mcp.core.config import load_env_config
from linear_mcp.core.logging import setup_logging
from linear_mcp.core.registry import register_tools
from linear_mcp.core.session import LinearSession

log = logging.getLogger("linear_mcp.transports.stdio")


async def main() -> None:
    config = load_env_config(use_dotenv=True)
    setup_logging(config.log_level)
    session = LinearSession.from_config(config)
    if not session.has_auth:
        log.info("No Linear credentials in environment; waiting for linear_auth")

    app = FastMCP("linear-mcp")
    register_tools(app, session)

    try:
        await app.run_stdio_async()
    finally:
        await session.aclose()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
