from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Tuple
from typing_extensions import TypeAlias

if TYPE_CHECKING:
    from .tree import Expression

# ---------- Value Model ----------

I64_MIN = -(1 << 63)
I64_MAX = (1 << 63) - 1

@dataclass(frozen=True)
class FwNull:
    def __repr__(self) -> str:
        return "null"

@dataclass(frozen=True)
class FwInt:
    value: int
    def __repr__(self) -> str:
        return str(self.value)

@dataclass(frozen=True)
class FwBool:
    value: bool
    def __repr__(self) -> str:
        return "true" if self.value else "false"

@dataclass(frozen=True, eq=False)
class FwClosure:
    params: Tuple[str, ...]
    body: 'Expression'
    env: 'Environment'          # captured declaration frame, shared not copied
    def __repr__(self) -> str:
        param_desc = ", ".join(self.params) if self.params else "nullary"
        return f"<fn params={param_desc}>"

FwValue: TypeAlias = FwNull | FwInt | FwBool | FwClosure

Sink = Callable[[FwValue], None]

# ---------- Environment ----------

class Environment:
    """One scope frame: local bindings plus a link to the enclosing frame.

    Frames are shared by reference. A closure keeps its declaration frame alive
    for as long as the closure itself is reachable.
    """

    def __init__(self, parent: Optional['Environment']=None, sink: Optional[Sink]=None, source: Optional[str]=None):
        self.parent = parent
        self.vars: Dict[str, FwValue] = {}
        # never copied into child frames; read through current_sink/current_source
        self.sink: Optional[Sink] = sink
        self.source: Optional[str] = source

    def resolve_var(self, name: str) -> FwValue:
        if name in self.vars:
            return self.vars[name]

        if self.parent is not None:
            return self.parent.resolve_var(name)

        # unresolved names read as null, like JS undefined
        return FwNull()

    def create_var(self, name: str, val: FwValue) -> None:
        if name in self.vars:
            raise FwjsDuplicateDeclaration(name)

        self.vars[name] = val

    def update_var(self, name: str, val: FwValue) -> None:
        cur: Optional[Environment] = self

        while cur is not None:
            if name in cur.vars:
                cur.vars[name] = val
                return

            cur = cur.parent

        # Unresolved assignment creates a global.
        self.root().vars[name] = val

    def current_sink(self) -> Optional[Sink]:
        cur: Optional[Environment] = self

        while cur is not None:
            if cur.sink is not None:
                return cur.sink

            cur = cur.parent

        return None

    def current_source(self) -> Optional[str]:
        cur: Optional[Environment] = self

        while cur is not None:
            if cur.source is not None:
                return cur.source

            cur = cur.parent

        return None

    def root(self) -> 'Environment':
        cur = self

        while cur.parent is not None:
            cur = cur.parent

        return cur

    def has_local(self, name: str) -> bool:
        return name in self.vars

    def names(self) -> List[str]:
        return list(self.vars)

    def __repr__(self) -> str:
        depth = 0
        cur = self.parent

        while cur is not None:
            depth += 1
            cur = cur.parent

        return f"<Environment depth={depth} names={self.names()}>"

# ---------- Exceptions ----------

class FwjsRuntimeError(Exception):
    fw_meta: Optional[object]

    def __init__(self, message: str):
        super().__init__(message)
        self.fw_meta = None

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        msg = super().__str__()

        meta = getattr(self, "fw_meta", None)
        if meta is None:
            return msg

        line = getattr(meta, "line", None)
        col = getattr(meta, "column", None)

        if line is None:
            return msg

        if col is None:
            return f"{msg} (line {line})"

        return f"{msg} (line {line}, col {col})"

class FwjsTypeError(FwjsRuntimeError):
    pass

class FwjsDivisionByZero(FwjsRuntimeError):
    def __init__(self, op_symbol: str):
        super().__init__(f"Division by zero in '{op_symbol}'")
        self.op_symbol = op_symbol

class FwjsDuplicateDeclaration(FwjsRuntimeError):
    def __init__(self, name: str):
        super().__init__(f"Variable '{name}' has already been declared in this scope")
        self.name = name

class FwjsArityError(FwjsRuntimeError):
    def __init__(self, expected: int, got: int):
        super().__init__(f"Function expects {expected} args; got {got}")
        self.expected = expected
        self.got = got

@dataclass(frozen=True)
class SourcePos:
    """Line/column of a node in the program text (1-based)."""
    line: int
    column: int
    end_line: Optional[int] = field(default=None, compare=False)
    end_column: Optional[int] = field(default=None, compare=False)

def type_name(value: FwValue) -> str:
    match value:
        case FwNull():
            return "null"
        case FwInt():
            return "int"
        case FwBool():
            return "bool"
        case FwClosure():
            return "function"
        case _:
            return type(value).__name__
