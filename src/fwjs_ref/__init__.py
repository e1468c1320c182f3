"""Reference tree-walking evaluator for Featherweight JavaScript (FWJS)."""

from .evaluator import eval_expr
from .parser import ParseError, parse_source
from .runner import run
from .types import (
    Environment,
    FwBool,
    FwClosure,
    FwInt,
    FwNull,
    FwValue,
    FwjsArityError,
    FwjsDivisionByZero,
    FwjsDuplicateDeclaration,
    FwjsRuntimeError,
    FwjsTypeError,
)

__version__ = "0.1.0"

__all__ = [
    "eval_expr",
    "parse_source",
    "run",
    "ParseError",
    "Environment",
    "FwBool",
    "FwClosure",
    "FwInt",
    "FwNull",
    "FwValue",
    "FwjsArityError",
    "FwjsDivisionByZero",
    "FwjsDuplicateDeclaration",
    "FwjsRuntimeError",
    "FwjsTypeError",
]
