from __future__ import annotations

from typing import Callable, Optional

from .runtime import (
    Environment,
    FwValue,
    FwjsRuntimeError,
    Sink,
)

from .tree import (
    Assign,
    BinaryOp,
    Expression,
    FunctionApp,
    FunctionDecl,
    If,
    Literal,
    Node,
    Print,
    Sequence,
    VarDecl,
    Variable,
    While,
    node_meta,
)

from .eval.common import EvalFunc
from .eval.bind import eval_assign, eval_var_decl
from .eval.control import eval_if, eval_print, eval_sequence, eval_while
from .eval.expr import eval_binop
from .eval.fn import eval_function_app, eval_function_decl

def _maybe_attach_location(exc: FwjsRuntimeError, node: Node) -> None:
    # innermost node with a position wins; outer frames leave it alone
    if getattr(exc, "_augmented", False):
        return

    meta = node_meta(node)

    if meta is not None and getattr(meta, "line", None) is not None:
        exc.fw_meta = meta
        exc._augmented = True  # type: ignore[attr-defined]

# ---------------- Public API ----------------

def eval_expr(ast: Node, env: Optional[Environment]=None, *, sink: Optional[Sink]=None, source: Optional[str]=None) -> FwValue:
    """Evaluate a whole program; a fresh global environment is used unless one is given."""
    if env is None:
        env = Environment(sink=sink, source=source)
    else:
        if sink is not None:
            env.sink = sink
        if source is not None:
            env.source = source

    try:
        return eval_node(ast, env)
    except RecursionError:
        raise FwjsRuntimeError("Maximum recursion depth exceeded") from None

# ---------------- Core evaluator ----------------

def eval_node(n: Node, env: Environment) -> FwValue:
    try:
        return _eval_node_inner(n, env)
    except FwjsRuntimeError as e:
        _maybe_attach_location(e, n)
        raise


def _eval_node_inner(n: Node, env: Environment) -> FwValue:
    handler = _NODE_DISPATCH.get(type(n))
    if handler is not None:
        return handler(n, env, eval_node)

    match n:
        case Literal(value=v):
            return v
        case Variable(name=name):
            return env.resolve_var(name)
        case Expression():
            raise FwjsRuntimeError(f"Unknown node: {type(n).__name__}")
        case _:
            raise FwjsRuntimeError(f"Not an expression node: {n!r}")

# ---------------- Dispatch ----------------

_NODE_DISPATCH: dict[type, Callable[[Node, Environment, EvalFunc], FwValue]] = {
    Print: eval_print,
    BinaryOp: eval_binop,
    If: eval_if,
    While: eval_while,
    Sequence: eval_sequence,
    VarDecl: eval_var_decl,
    Assign: eval_assign,
    FunctionDecl: eval_function_decl,
    FunctionApp: eval_function_app,
}
