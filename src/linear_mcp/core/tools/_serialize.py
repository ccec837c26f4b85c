from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel


def dump(model: Optional[BaseModel]) -> Optional[Dict[str, Any]]:
    """Plain JSON-ready dict with Linear's camelCase keys; None fields dropped."""
    if model is None:
        return None
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)
