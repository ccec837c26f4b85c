#!/usr/bin/env python3
"""
Fail if linear_mcp.core imports the MCP server stack or a transport.
Relative imports are resolved against the file's package before matching.
"""

from __future__ import annotations

import ast
import sys
from pathlib import Path
from typing import Iterator

REPO_ROOT = Path(__file__).resolve().parent.parent
SRC_DIR = REPO_ROOT / "src"
CORE_DIR = SRC_DIR / "linear_mcp" / "core"

FORBIDDEN_PREFIXES = (
    "mcp",
    "fastmcp",
    "starlette",
    "uvicorn",
    "linear_mcp.transports",
)


def is_forbidden(module: str) -> bool:
    return any(
        module == prefix or module.startswith(prefix + ".")
        for prefix in FORBIDDEN_PREFIXES
    )


def package_of(path: Path) -> list[str]:
    # the directory holding the file is its package, __init__.py included
    return list(path.relative_to(SRC_DIR).parent.parts)


def imported_modules(path: Path) -> Iterator[str]:
    tree = ast.parse(path.read_text(), filename=str(path))
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                yield alias.name
        elif isinstance(node, ast.ImportFrom):
            if node.level:
                base = package_of(path)
                base = base[: len(base) - (node.level - 1)]
                yield ".".join(base + ([node.module] if node.module else []))
            elif node.module:
                yield node.module


def scan_file(path: Path) -> list[str]:
    return [
        f"{path}: forbidden import '{mod}'"
        for mod in imported_modules(path)
        if is_forbidden(mod)
    ]


def main() -> int:
    violations: list[str] = []
    for py_file in sorted(CORE_DIR.rglob("*.py")):
        violations.extend(scan_file(py_file))

    for v in violations:
        print(v, file=sys.stderr)
    return 1 if violations else 0


if __name__ == "__main__":
    sys.exit(main())
