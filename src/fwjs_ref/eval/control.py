from __future__ import annotations

from ..runtime import Environment, FwNull, FwValue, emit
from ..tree import If, Print, Sequence, While, flatten_sequence
from .common import EvalFunc, require_bool

def eval_if(n: If, env: Environment, eval_func: EvalFunc) -> FwValue:
    cond = require_bool(eval_func(n.cond, env), "if condition")

    # only the taken branch runs
    if cond:
        return eval_func(n.then, env)

    return eval_func(n.else_, env)

def eval_while(n: While, env: Environment, eval_func: EvalFunc) -> FwValue:
    while require_bool(eval_func(n.cond, env), "while condition"):
        eval_func(n.body, env)

    return FwNull()

def eval_sequence(n: Sequence, env: Environment, eval_func: EvalFunc) -> FwValue:
    """Run every statement of a (possibly nested) sequence, returning the last value."""
    result: FwValue = FwNull()

    for stmt in flatten_sequence(n):
        result = eval_func(stmt, env)

    return result

def eval_print(n: Print, env: Environment, eval_func: EvalFunc) -> FwValue:
    value = eval_func(n.inner, env)
    emit(env, value)

    return value
