"""
Expressões de path estruturais (PathSpec).

Sintaxe (s-expression do Ion path extraction):
    (step step ...)

    - símbolo simples        → nome de campo        `(foo bar)`
    - símbolo/string citado  → nome de campo literal `('*')`, `("my field")`
    - inteiro não negativo   → índice em sequência   `(items 0)`
    - `*`                    → wildcard (todo filho de struct ou sequência)
    - `()`                   → o próprio valor de topo

Invariantes:
    - PathSpec é imutável e comparável por valor
    - `render()` produz uma expressão que `parse_path` interpreta de volta
      no mesmo PathSpec

Limites explícitos:
    - Não percorre documentos (ver `paths.matcher`)
    - Não suporta anotações nem paths relativos
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from ..exceptions import MalformedPathError


class StepKind(str, Enum):
    FIELD = "field"
    INDEX = "index"
    WILDCARD = "wildcard"


_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_INTEGER = re.compile(r"^[+-]?\d+$")


@dataclass(frozen=True)
class PathStep:
    kind: StepKind
    name: Optional[str] = None
    index: Optional[int] = None

    @classmethod
    def field(cls, name: str) -> "PathStep":
        return cls(StepKind.FIELD, name=name)

    @classmethod
    def at(cls, index: int) -> "PathStep":
        return cls(StepKind.INDEX, index=index)

    @classmethod
    def wildcard(cls) -> "PathStep":
        return cls(StepKind.WILDCARD)

    def render(self) -> str:
        if self.kind is StepKind.WILDCARD:
            return "*"
        if self.kind is StepKind.INDEX:
            return str(self.index)
        if _IDENTIFIER.match(self.name or ""):
            return self.name
        escaped = (self.name or "").replace("\\", "\\\\").replace("'", "\\'")
        return f"'{escaped}'"

    def key(self, case_sensitive: bool) -> Tuple[str, object]:
        if self.kind is StepKind.FIELD and not case_sensitive:
            return (self.kind.value, self.name.casefold())
        return (self.kind.value, self.name if self.kind is StepKind.FIELD else self.index)


@dataclass(frozen=True)
class PathSpec:
    steps: Tuple[PathStep, ...] = ()

    @classmethod
    def for_column(cls, column_name: str) -> "PathSpec":
        """Path default de uma coluna: campo de topo com o nome da coluna."""
        return cls((PathStep.field(column_name),))

    @property
    def has_wildcard(self) -> bool:
        return any(s.kind is StepKind.WILDCARD for s in self.steps)

    @property
    def is_field_only(self) -> bool:
        return bool(self.steps) and all(s.kind is StepKind.FIELD for s in self.steps)

    def last_wildcard(self) -> int:
        """Posição do último wildcard, ou -1."""
        for pos in range(len(self.steps) - 1, -1, -1):
            if self.steps[pos].kind is StepKind.WILDCARD:
                return pos
        return -1

    def split_at_last_wildcard(self) -> Tuple["PathSpec", "PathSpec"]:
        """Divide em (prefixo até o último wildcard inclusive, restante)."""
        pos = self.last_wildcard()
        return PathSpec(self.steps[: pos + 1]), PathSpec(self.steps[pos + 1:])

    def structural_key(self, case_sensitive: bool) -> Tuple[Tuple[str, object], ...]:
        return tuple(s.key(case_sensitive) for s in self.steps)

    def render(self) -> str:
        return "(" + " ".join(s.render() for s in self.steps) + ")"

    def __str__(self) -> str:
        return self.render()


# -----------------------------
# Parser
# -----------------------------

def _malformed(expression: str, column: Optional[str], reason: str) -> MalformedPathError:
    where = f" for column '{column}'" if column else ""
    return MalformedPathError(
        message=f"Malformed path expression{where}: {expression!r} ({reason})",
        details={"column": column, "expression": expression, "reason": reason},
        hint="Use an s-expression such as (field * 0 'quoted field').",
    )


def _read_quoted(text: str, start: int, expression: str, column: Optional[str]) -> Tuple[str, int]:
    quote = text[start]
    out: List[str] = []
    pos = start + 1
    while pos < len(text):
        ch = text[pos]
        if ch == "\\" and pos + 1 < len(text):
            out.append(text[pos + 1])
            pos += 2
            continue
        if ch == quote:
            return "".join(out), pos + 1
        out.append(ch)
        pos += 1
    raise _malformed(expression, column, "unterminated quoted step")


def parse_path(expression: str, column: Optional[str] = None) -> PathSpec:
    """Interpreta uma expressão de path.

    Raises:
        MalformedPathError: quando a expressão não segue a sintaxe acima.
    """
    if not isinstance(expression, str):
        raise _malformed(repr(expression), column, "not a string")

    text = expression.strip()
    if not text:
        raise _malformed(expression, column, "empty expression")
    if not (text.startswith("(") and text.endswith(")")):
        raise _malformed(expression, column, "must be enclosed in parentheses")

    body = text[1:-1]
    steps: List[PathStep] = []
    pos = 0
    while pos < len(body):
        ch = body[pos]
        if ch.isspace():
            pos += 1
            continue
        if ch in "()":
            raise _malformed(expression, column, "nested or unbalanced parentheses")
        if ch in "'\"":
            name, pos = _read_quoted(body, pos, expression, column)
            steps.append(PathStep.field(name))
            continue

        end = pos
        while end < len(body) and not body[end].isspace() and body[end] not in "()'\"":
            end += 1
        token = body[pos:end]
        pos = end

        if token == "*":
            steps.append(PathStep.wildcard())
        elif _INTEGER.match(token):
            index = int(token)
            if index < 0:
                raise _malformed(expression, column, f"negative index {token}")
            steps.append(PathStep.at(index))
        elif _IDENTIFIER.match(token):
            steps.append(PathStep.field(token))
        else:
            raise _malformed(expression, column, f"invalid step {token!r}")

    return PathSpec(tuple(steps))
