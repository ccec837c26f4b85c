"""
Registers the Linear tools on an MCP app.

The tool list is the ``__all__`` of ``linear_mcp.core.tools``. Each tool is an
async function taking the LinearSession first; the registered callable
supplies the session itself, so MCP clients never see that parameter.
"""

from __future__ import annotations

import functools
import importlib
import inspect
import logging
from typing import Any, Callable, Iterable, List, Optional, Union, get_type_hints

from .session import LinearSession

log = logging.getLogger("linear_mcp.core.registry")

TOOLS_PACKAGE = "linear_mcp.core.tools"

SessionProvider = Callable[[], LinearSession]


def check_tool(func: Callable) -> Callable:
    """Raise TypeError unless ``func`` is a coroutine function taking ``session`` first."""
    name = getattr(func, "__name__", repr(func))
    if not inspect.iscoroutinefunction(func):
        raise TypeError(f"Tool {name} must be an async function")
    params = list(inspect.signature(func).parameters)
    if not params or params[0] != "session":
        raise TypeError(f"Tool {name} must take 'session' as its first parameter")
    return func


def exported_tools(package: str = TOOLS_PACKAGE) -> List[Callable]:
    """Tools named in the package's ``__all__``, in declaration order."""
    module = importlib.import_module(package)
    names = getattr(module, "__all__", None)
    if names is None:
        raise ValueError(f"{package} must list its tools in __all__")
    return [check_tool(getattr(module, name)) for name in names]


def bind_session(func: Callable, provider: SessionProvider) -> Callable:
    """
    Return ``func`` with its session argument filled in per call.

    Annotations are resolved against the tool's own module so schema builders
    never evaluate strings in this one.
    """
    hints = get_type_hints(func)
    sig = inspect.signature(func)
    params = [
        p.replace(annotation=hints.get(p.name, p.annotation))
        for p in list(sig.parameters.values())[1:]
    ]

    @functools.wraps(func)
    async def tool(*args: Any, **kwargs: Any) -> Any:
        return await func(provider(), *args, **kwargs)

    tool.__signature__ = sig.replace(  # type: ignore[attr-defined]
        parameters=params,
        return_annotation=hints.get("return", sig.return_annotation),
    )
    tool.__annotations__ = {k: v for k, v in hints.items() if k != "session"}
    return tool


def register_tools(
    app: Any,
    session: Union[LinearSession, SessionProvider],
    tools: Optional[Iterable[Callable]] = None,
) -> List[str]:
    """
    Register ``tools`` (default: every exported Linear tool) on ``app``.

    ``session`` is either the LinearSession every call uses or a zero-argument
    callable returning one per call. Returns the registered names.
    """
    if not hasattr(app, "tool"):
        raise TypeError("app must expose a 'tool' decorator")

    if isinstance(session, LinearSession):
        provider: SessionProvider = functools.partial(_same_session, session)
    elif callable(session):
        provider = session
    else:
        raise TypeError("session must be a LinearSession or a callable returning one")

    funcs = [check_tool(f) for f in (exported_tools() if tools is None else tools)]
    names = [f.__name__ for f in funcs]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ValueError(f"Duplicate tool names: {', '.join(duplicates)}")

    for func in funcs:
        app.tool(name=func.__name__)(bind_session(func, provider))
    log.info("Registered %d Linear tools", len(names))
    return names


def _same_session(session: LinearSession) -> LinearSession:
    return session


__all__ = [
    "TOOLS_PACKAGE",
    "check_tool",
    "exported_tools",
    "bind_session",
    "register_tools",
]
