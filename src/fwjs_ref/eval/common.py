from __future__ import annotations

from typing import Callable

from ..runtime import Environment, FwBool, FwClosure, FwInt, FwValue, FwjsTypeError, type_name
from ..tree import Node

EvalFunc = Callable[[Node, Environment], FwValue]

def require_int(value: FwValue, context: str) -> int:
    match value:
        case FwInt(value=n):
            return n
        case _:
            raise FwjsTypeError(f"{context} expects an int; got {type_name(value)}")

def require_bool(value: FwValue, context: str) -> bool:
    match value:
        case FwBool(value=b):
            return b
        case _:
            raise FwjsTypeError(f"{context} expects a bool; got {type_name(value)}")

def require_closure(value: FwValue, context: str) -> FwClosure:
    match value:
        case FwClosure():
            return value
        case _:
            raise FwjsTypeError(f"{context} expects a function; got {type_name(value)}")
