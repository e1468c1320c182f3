from __future__ import annotations

from typing import List

from ..runtime import Environment, FwClosure, FwValue, call_closure
from ..tree import FunctionApp, FunctionDecl
from .common import EvalFunc, require_closure

def eval_function_decl(n: FunctionDecl, env: Environment, eval_func: EvalFunc) -> FwValue:
    # capture the live frame, not a snapshot of it
    return FwClosure(params=n.params, body=n.body, env=env)

def eval_function_app(n: FunctionApp, env: Environment, eval_func: EvalFunc) -> FwValue:
    callee = require_closure(eval_func(n.callee, env), "function call")
    args: List[FwValue] = [eval_func(arg, env) for arg in n.args]

    return call_closure(callee, args)
