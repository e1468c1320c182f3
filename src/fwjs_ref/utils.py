from __future__ import annotations

import os as _os
import sys
from typing import Optional

from .types import FwBool, FwClosure, FwInt, FwNull, FwValue

DEBUG_PY_TRACE_ENV = "FWJS_DEBUG_PY_TRACE"
RECURSION_LIMIT_ENV = "FWJS_RECURSION_LIMIT"
# each FWJS call costs roughly ten Python frames
DEFAULT_RECURSION_LIMIT = 10000


def stringify(value: FwValue) -> str:
    match value:
        case FwNull():
            return "null"
        case FwBool(value=b):
            return "true" if b else "false"
        case FwInt(value=n):
            return str(n)
        case FwClosure(params=params):
            return f"function({', '.join(params)}) {{...}}"
        case _:
            return repr(value)


def debug_py_trace_enabled() -> bool:
    return _os.environ.get(DEBUG_PY_TRACE_ENV, "").strip().lower() in ("1", "true", "yes", "on")


def set_debug_py_trace(enabled: bool) -> None:
    if enabled:
        _os.environ[DEBUG_PY_TRACE_ENV] = "1"
    else:
        _os.environ.pop(DEBUG_PY_TRACE_ENV, None)


def configured_recursion_limit() -> Optional[int]:
    """Positive integer from FWJS_RECURSION_LIMIT, or None when unset/invalid."""
    raw = _os.environ.get(RECURSION_LIMIT_ENV)
    if raw is None:
        return None

    try:
        limit = int(raw.strip())
    except ValueError:
        return None

    return limit if limit > 0 else None


def apply_recursion_limit() -> None:
    """Raise the interpreter recursion limit; never lowers it."""
    limit = configured_recursion_limit()
    if limit is None:
        limit = DEFAULT_RECURSION_LIMIT

    if limit > sys.getrecursionlimit():
        sys.setrecursionlimit(limit)
