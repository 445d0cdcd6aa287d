from __future__ import annotations

import json
from typing import Any

__all__ = (
    "from_json",
    "to_json",
)


def to_json(obj: Any) -> str:
    return json.dumps(obj, separators=(",", ":"), ensure_ascii=True)


def from_json(data: str | bytes) -> Any:
    return json.loads(data)
