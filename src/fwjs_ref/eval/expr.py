from __future__ import annotations

from ..runtime import Environment, FwBool, FwInt, FwValue, FwjsDivisionByZero, FwjsRuntimeError
from ..tree import BinaryOp, Op
from .common import EvalFunc, require_int

_I64_MOD = 1 << 64

def wrap_i64(n: int) -> int:
    """Two's-complement wrap of an arbitrary int into the signed 64-bit range."""
    n &= _I64_MOD - 1

    if n >= 1 << 63:
        n -= _I64_MOD

    return n

def trunc_divmod(x: int, y: int) -> tuple[int, int]:
    """Quotient truncated toward zero and the matching remainder (sign of x)."""
    q = abs(x) // abs(y)

    if (x < 0) != (y < 0):
        q = -q

    return q, x - q * y

def eval_binop(n: BinaryOp, env: Environment, eval_func: EvalFunc) -> FwValue:
    # both operands are evaluated before either is checked
    lhs = eval_func(n.left, env)
    rhs = eval_func(n.right, env)

    return apply_binary_operator(n.op, lhs, rhs)

def apply_binary_operator(op: Op, lhs: FwValue, rhs: FwValue) -> FwValue:
    context = f"operator '{op.symbol}'"
    x = require_int(lhs, context)
    y = require_int(rhs, context)

    match op:
        case Op.ADD:
            return FwInt(wrap_i64(x + y))
        case Op.SUBTRACT:
            return FwInt(wrap_i64(x - y))
        case Op.MULTIPLY:
            return FwInt(wrap_i64(x * y))
        case Op.DIVIDE | Op.MOD:
            if y == 0:
                raise FwjsDivisionByZero(op.symbol)

            # I64_MIN / -1 overflows and wraps back to I64_MIN
            q, r = trunc_divmod(x, y)

            return FwInt(wrap_i64(q) if op is Op.DIVIDE else r)
        case Op.GT:
            return FwBool(x > y)
        case Op.GE:
            return FwBool(x >= y)
        case Op.LT:
            return FwBool(x < y)
        case Op.LE:
            return FwBool(x <= y)
        case Op.EQ:
            return FwBool(x == y)
        case _:
            raise FwjsRuntimeError(f"Unsupported operator {op!r}")
