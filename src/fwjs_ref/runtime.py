from __future__ import annotations

from typing import List

from .types import (
    FwNull, FwInt, FwBool, FwClosure, FwValue, Sink,
    Environment, SourcePos,
    FwjsRuntimeError, FwjsTypeError, FwjsDivisionByZero,
    FwjsDuplicateDeclaration, FwjsArityError,
    I64_MIN, I64_MAX,
    type_name,
)
from .utils import stringify

__all__ = [
    "FwNull", "FwInt", "FwBool", "FwClosure", "FwValue", "Sink",
    "Environment", "SourcePos",
    "FwjsRuntimeError", "FwjsTypeError", "FwjsDivisionByZero",
    "FwjsDuplicateDeclaration", "FwjsArityError",
    "I64_MIN", "I64_MAX",
    "type_name",
    "stdout_sink", "emit", "call_closure",
]

def stdout_sink(value: FwValue) -> None:
    print(stringify(value), flush=True)

def emit(env: Environment, value: FwValue) -> None:
    """Hand a printed value to the sink bound on the frame chain."""
    sink = env.current_sink()

    if sink is None:
        sink = stdout_sink

    sink(value)

def call_closure(fn: FwClosure, args: List[FwValue]) -> FwValue:
    """
    Apply a closure:
    - arity must match len(fn.params) exactly;
    - a fresh frame is chained to the closure's captured frame (not the caller's);
    - params are bound in that frame and the body is evaluated there.
    """
    from .evaluator import eval_node  # local import to avoid cycle

    if len(args) != len(fn.params):
        raise FwjsArityError(len(fn.params), len(args))

    callee_env = Environment(parent=fn.env)

    for name, val in zip(fn.params, args):
        callee_env.create_var(name, val)

    return eval_node(fn.body, callee_env)
