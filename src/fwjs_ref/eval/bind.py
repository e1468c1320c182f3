from __future__ import annotations

from ..runtime import Environment, FwValue
from ..tree import Assign, VarDecl
from .common import EvalFunc

def eval_var_decl(n: VarDecl, env: Environment, eval_func: EvalFunc) -> FwValue:
    value = eval_func(n.init, env)
    env.create_var(n.name, value)

    return env.resolve_var(n.name)

def eval_assign(n: Assign, env: Environment, eval_func: EvalFunc) -> FwValue:
    value = eval_func(n.value, env)
    env.update_var(n.name, value)

    return env.resolve_var(n.name)
