# visionboard_imaging/utils/serialization.py
from collections.abc import Callable
from typing import Any

import orjson


def orjson_dumps(obj: Any, *, default: Callable[[Any], Any] | None = None, **_kwargs: Any) -> str:
    """`json.dumps`-compatible wrapper used by structlog and aiohttp responses."""
    return orjson.dumps(obj, default=default or str, option=orjson.OPT_NON_STR_KEYS).decode()
