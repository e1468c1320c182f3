"""Expression tree for FWJS programs.

Nodes are frozen dataclasses built once by the parser (or by hand in tests) and
never mutated afterwards, so identical subtrees can be shared freely. Every
node carries an optional ``meta`` with its source position; it does not take
part in equality.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Tuple
from typing_extensions import TypeAlias

from .types import Environment, FwNull, FwValue, SourcePos


class Op(Enum):
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    MOD = "%"
    GT = ">"
    GE = ">="
    LT = "<"
    LE = "<="
    EQ = "=="

    @property
    def symbol(self) -> str:
        return self.value

    @classmethod
    def from_symbol(cls, symbol: str) -> 'Op':
        try:
            return cls(symbol)
        except ValueError:
            raise ValueError(f"Unknown operator {symbol!r}") from None


class Expression:
    """Base for all node variants."""

    meta: Optional[SourcePos]

    def evaluate(self, env: Environment) -> FwValue:
        from .evaluator import eval_node  # local import to avoid cycle
        return eval_node(self, env)

    def children(self) -> Tuple['Expression', ...]:
        return ()


def _meta_field():
    return field(default=None, compare=False, repr=False, kw_only=True)


@dataclass(frozen=True)
class Literal(Expression):
    value: FwValue
    meta: Optional[SourcePos] = _meta_field()


@dataclass(frozen=True)
class Variable(Expression):
    name: str
    meta: Optional[SourcePos] = _meta_field()


@dataclass(frozen=True)
class Print(Expression):
    inner: Expression
    meta: Optional[SourcePos] = _meta_field()

    def children(self) -> Tuple[Expression, ...]:
        return (self.inner,)


@dataclass(frozen=True)
class BinaryOp(Expression):
    op: Op
    left: Expression
    right: Expression
    meta: Optional[SourcePos] = _meta_field()

    def children(self) -> Tuple[Expression, ...]:
        return (self.left, self.right)


@dataclass(frozen=True)
class If(Expression):
    cond: Expression
    then: Expression
    else_: Expression
    meta: Optional[SourcePos] = _meta_field()

    def children(self) -> Tuple[Expression, ...]:
        return (self.cond, self.then, self.else_)


@dataclass(frozen=True)
class While(Expression):
    cond: Expression
    body: Expression
    meta: Optional[SourcePos] = _meta_field()

    def children(self) -> Tuple[Expression, ...]:
        return (self.cond, self.body)


@dataclass(frozen=True)
class Sequence(Expression):
    first: Expression
    second: Expression
    meta: Optional[SourcePos] = _meta_field()

    def children(self) -> Tuple[Expression, ...]:
        return (self.first, self.second)


@dataclass(frozen=True)
class VarDecl(Expression):
    name: str
    init: Expression
    meta: Optional[SourcePos] = _meta_field()

    def children(self) -> Tuple[Expression, ...]:
        return (self.init,)


@dataclass(frozen=True)
class Assign(Expression):
    name: str
    value: Expression
    meta: Optional[SourcePos] = _meta_field()

    def children(self) -> Tuple[Expression, ...]:
        return (self.value,)


@dataclass(frozen=True)
class FunctionDecl(Expression):
    params: Tuple[str, ...]
    body: Expression
    meta: Optional[SourcePos] = _meta_field()

    def __post_init__(self) -> None:
        # accept any sequence of names; store a tuple so the node stays immutable
        if not isinstance(self.params, tuple):
            object.__setattr__(self, "params", tuple(self.params))

    def children(self) -> Tuple[Expression, ...]:
        return (self.body,)


@dataclass(frozen=True)
class FunctionApp(Expression):
    callee: Expression
    args: Tuple[Expression, ...]
    meta: Optional[SourcePos] = _meta_field()

    def __post_init__(self) -> None:
        if not isinstance(self.args, tuple):
            object.__setattr__(self, "args", tuple(self.args))

    def children(self) -> Tuple[Expression, ...]:
        return (self.callee, *self.args)


Node: TypeAlias = Expression


def node_meta(node: object) -> Optional[SourcePos]:
    return getattr(node, "meta", None)


def sequence_of(stmts: List[Expression], meta: Optional[SourcePos]=None) -> Expression:
    """Fold a statement list into left-nested Sequence nodes; empty -> null literal."""
    if not stmts:
        return Literal(FwNull(), meta=meta)

    acc = stmts[0]

    for stmt in stmts[1:]:
        acc = Sequence(acc, stmt, meta=node_meta(acc) or meta)

    return acc


def flatten_sequence(node: Expression) -> Iterator[Expression]:
    """Yield the non-Sequence leaves of a Sequence tree in evaluation order.

    Walks iteratively so deeply nested statement lists don't recurse.
    """
    stack: List[Expression] = [node]

    while stack:
        cur = stack.pop()

        if isinstance(cur, Sequence):
            stack.append(cur.second)
            stack.append(cur.first)
            continue

        yield cur


def pretty(node: Expression, indent: str = '  ') -> str:
    """Return an indented, one-node-per-line dump of the tree."""
    lines: List[str] = []

    def _walk(n: Expression, level: int) -> None:
        pad = indent * level

        match n:
            case Literal(value=v):
                lines.append(f"{pad}literal {v!r}")
            case Variable(name=name):
                lines.append(f"{pad}var {name}")
            case BinaryOp(op=op):
                lines.append(f"{pad}binop {op.symbol}")
            case VarDecl(name=name):
                lines.append(f"{pad}vardecl {name}")
            case Assign(name=name):
                lines.append(f"{pad}assign {name}")
            case FunctionDecl(params=params):
                lines.append(f"{pad}function ({', '.join(params)})")
            case _:
                lines.append(f"{pad}{type(n).__name__.lower()}")

        for child in n.children():
            _walk(child, level + 1)

    _walk(node, 0)
    return "\n".join(lines)
