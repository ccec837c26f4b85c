from __future__ import annotations

from typing import Any, Dict, cast

from linear_mcp.core.models import Viewer
from linear_mcp.core.operations import GET_VIEWER
from linear_mcp.core.session import LinearSession
from linear_mcp.core.tools._serialize import dump


async def linear_get_user(session: LinearSession) -> Dict[str, Any]:
    """Return the authenticated user and the teams they belong to."""
    await session.ensure_authenticated()
    viewer = cast(Viewer, await session.executor.run(GET_VIEWER))
    return {"user": dump(viewer)}
