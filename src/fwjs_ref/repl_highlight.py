"""prompt_toolkit lexer for live FWJS syntax highlighting in the REPL."""

from __future__ import annotations

import re
from typing import Callable, Iterator, Tuple

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "boolean": "ansicyan",
    "constant": "ansicyan",
    "number": "ansimagenta",
    "identifier": "",
    "function": "bold ansiyellow",
    "operator": "",
    "punctuation": "",
    "comment": "italic ansigray",
    "error": "bold ansired",
}

KEYWORDS = frozenset({"var", "function", "if", "else", "while", "print"})

_TOKEN_RE = re.compile(
    r"(?P<comment>//.*|/\*.*?(?:\*/|$))"
    r"|(?P<number>[0-9]+)"
    r"|(?P<word>[A-Za-z_$][A-Za-z0-9_$]*)"
    r"|(?P<operator><=|>=|==|[-+*/%<>=])"
    r"|(?P<punctuation>[(){};,])"
    r"|(?P<space>\s+)"
    r"|(?P<error>.)"
)


def _word_group(word: str, rest: str) -> str:
    if word in KEYWORDS:
        return "keyword"

    if word in ("true", "false"):
        return "boolean"

    if word == "null":
        return "constant"

    # a name directly followed by '(' reads as a call
    if rest.lstrip().startswith("("):
        return "function"

    return "identifier"


def iter_line_groups(line: str) -> Iterator[Tuple[str, str]]:
    """Yield (group, text) pairs covering *line* exactly."""
    for m in _TOKEN_RE.finditer(line):
        kind = m.lastgroup or "error"
        text = m.group()

        if kind == "space":
            yield "", text
        elif kind == "word":
            yield _word_group(text, line[m.end():]), text
        else:
            yield kind, text


class FwjsLexer(Lexer):
    """Line-at-a-time highlighter; block comments spanning lines are not tracked."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno >= len(lines):
                return []

            return [(GROUP_STYLE.get(group, ""), text) for group, text in iter_line_groups(lines[lineno])]

        return get_line
