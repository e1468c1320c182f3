"""Source front-end: Lark LALR grammar plus a transformer that builds the expression tree."""
from __future__ import annotations

from pathlib import Path
from typing import Any, List, Optional, Tuple

from lark import Lark, Token, Transformer, UnexpectedInput, v_args
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedToken, VisitError

from .tree import (
    Assign,
    BinaryOp,
    Expression,
    FunctionApp,
    FunctionDecl,
    If,
    Literal,
    Op,
    Print,
    VarDecl,
    Variable,
    While,
    sequence_of,
)
from .types import FwBool, FwInt, FwNull, I64_MAX, SourcePos

GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")

_PARSER: Optional[Lark] = None


class ParseError(Exception):
    def __init__(self, message: str, line: Optional[int]=None, column: Optional[int]=None, context: Optional[str]=None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column
        self.context = context

    def __str__(self) -> str:
        if self.line is None:
            return self.message

        if self.column is None:
            return f"{self.message} (line {self.line})"

        return f"{self.message} (line {self.line}, col {self.column})"


def _pos(meta: Any) -> Optional[SourcePos]:
    if meta is None or getattr(meta, "empty", True):
        return None

    return SourcePos(
        line=meta.line,
        column=meta.column,
        end_line=getattr(meta, "end_line", None),
        end_column=getattr(meta, "end_column", None),
    )


def _tok_pos(tok: Token) -> Optional[SourcePos]:
    line = getattr(tok, "line", None)
    if line is None:
        return None

    return SourcePos(line=line, column=tok.column, end_line=tok.end_line, end_column=tok.end_column)


@v_args(meta=True)
class ExpressionBuilder(Transformer):
    """Lower the Lark parse tree into immutable Expression nodes."""

    def start(self, meta, stmts: List[Expression]) -> Expression:
        return sequence_of(list(stmts), _pos(meta))

    def body(self, meta, stmts: List[Expression]) -> Expression:
        return sequence_of(list(stmts), _pos(meta))

    def block(self, meta, c: List[Expression]) -> Expression:
        return c[0]

    def expr_stmt(self, meta, c: List[Expression]) -> Expression:
        return c[0]

    def empty_stmt(self, meta, c: List[Any]) -> Expression:
        return Literal(FwNull(), meta=_pos(meta))

    def if_else(self, meta, c: List[Expression]) -> Expression:
        cond, then, else_ = c
        return If(cond, then, else_, meta=_pos(meta))

    def if_then(self, meta, c: List[Expression]) -> Expression:
        cond, then = c
        return If(cond, then, Literal(FwNull()), meta=_pos(meta))

    def while_stmt(self, meta, c: List[Expression]) -> Expression:
        cond, body = c
        return While(cond, body, meta=_pos(meta))

    def print_expr(self, meta, c: List[Expression]) -> Expression:
        return Print(c[0], meta=_pos(meta))

    def func_stmt(self, meta, c: List[Any]) -> Expression:
        # `function f(a) {...}` is sugar for `var f = function (a) {...};`
        name, params, body = c
        pos = _pos(meta)
        return VarDecl(str(name), FunctionDecl(params, body, meta=pos), meta=pos)

    def params(self, meta, c: List[Token]) -> Tuple[str, ...]:
        return tuple(str(tok) for tok in c)

    def args(self, meta, c: List[Expression]) -> List[Expression]:
        return list(c)

    def var_decl(self, meta, c: List[Any]) -> Expression:
        name, init = c
        return VarDecl(str(name), init, meta=_pos(meta))

    def assign(self, meta, c: List[Any]) -> Expression:
        name, value = c
        return Assign(str(name), value, meta=_pos(meta))

    def binop(self, meta, c: List[Any]) -> Expression:
        lhs, op_tok, rhs = c
        return BinaryOp(Op.from_symbol(str(op_tok)), lhs, rhs, meta=_tok_pos(op_tok) or _pos(meta))

    def neg(self, meta, c: List[Any]) -> Expression:
        minus, operand = c

        if isinstance(operand, Literal) and isinstance(operand.value, FwInt):
            return Literal(FwInt(-operand.value.value), meta=_tok_pos(minus))

        return BinaryOp(Op.SUBTRACT, Literal(FwInt(0)), operand, meta=_tok_pos(minus))

    def app(self, meta, c: List[Any]) -> Expression:
        callee = c[0]
        args = c[1] if len(c) > 1 else []
        return FunctionApp(callee, tuple(args), meta=_pos(meta))

    def function(self, meta, c: List[Any]) -> Expression:
        params, body = c
        return FunctionDecl(params, body, meta=_pos(meta))

    def int_lit(self, meta, c: List[Token]) -> Expression:
        tok = c[0]
        value = int(str(tok))

        if value > I64_MAX:
            raise ParseError(f"Integer literal {tok} out of range", tok.line, tok.column)

        return Literal(FwInt(value), meta=_tok_pos(tok))

    def true_lit(self, meta, c: List[Any]) -> Expression:
        return Literal(FwBool(True), meta=_pos(meta))

    def false_lit(self, meta, c: List[Any]) -> Expression:
        return Literal(FwBool(False), meta=_pos(meta))

    def null_lit(self, meta, c: List[Any]) -> Expression:
        return Literal(FwNull(), meta=_pos(meta))

    def var(self, meta, c: List[Token]) -> Expression:
        tok = c[0]
        return Variable(str(tok), meta=_tok_pos(tok))


def make_parser(grammar_path: Optional[str]=None) -> Lark:
    path = Path(grammar_path) if grammar_path else GRAMMAR_PATH

    if not path.exists():
        raise FileNotFoundError(f"grammar not found: {path}")

    return Lark(
        path.read_text(encoding="utf-8"),
        parser="lalr",
        start="start",
        maybe_placeholders=False,
        propagate_positions=True,
    )


def _default_parser() -> Lark:
    global _PARSER

    if _PARSER is None:
        _PARSER = make_parser()

    return _PARSER


def _describe(exc: UnexpectedInput) -> str:
    if isinstance(exc, UnexpectedEOF):
        return "Unexpected end of input"

    if isinstance(exc, UnexpectedCharacters):
        return f"Unexpected character {exc.char!r}"

    if isinstance(exc, UnexpectedToken):
        if exc.token.type == "$END":
            return "Unexpected end of input"

        expected = sorted(exc.accepts or exc.expected)
        msg = f"Unexpected token {str(exc.token)!r}"

        if expected:
            msg += f"; expected one of: {', '.join(expected)}"

        return msg

    return str(exc)


def parse_source(src: str, parser: Optional[Lark]=None) -> Expression:
    """Parse program text into a root Expression (statements folded into Sequence)."""
    lark_parser = parser if parser is not None else _default_parser()

    try:
        tree = lark_parser.parse(src)
    except UnexpectedInput as exc:
        line = getattr(exc, "line", None)
        column = getattr(exc, "column", None)
        pos = getattr(exc, "pos_in_stream", None)
        context = exc.get_context(src) if pos is not None and pos >= 0 else None

        if line is not None and line < 1:
            line, column = None, None

        raise ParseError(_describe(exc), line, column, context) from exc

    try:
        return ExpressionBuilder().transform(tree)
    except VisitError as exc:
        if isinstance(exc.orig_exc, ParseError):
            raise exc.orig_exc from None
        raise
