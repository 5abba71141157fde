"""
SQL compiler for OpenObserve-style backends.

Values never reach the statement text directly. ``compile_sql`` produces a
statement made of trusted SQL fragments and named parameters; ``render``
turns each parameter into a quoted string literal. OpenObserve's search API
takes statement text only.
"""

import re
from dataclasses import dataclass
from typing import Optional, Union

from logsage.models.schemas import SearchParams
from logsage.query.time_range import resolve_time_range

DEFAULT_TABLE = "default"
TIMESTAMP_COLUMN = "_timestamp"

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def quote_literal(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def quote_identifier(name: str) -> str:
    """Bare for plain names, double-quoted (quotes doubled) for anything else."""
    if _IDENTIFIER_RE.match(name):
        return name
    return '"' + name.replace('"', '""') + '"'


@dataclass(frozen=True)
class Param:
    name: str


Fragment = Union[str, Param]


@dataclass(frozen=True)
class CompiledSql:
    fragments: tuple[Fragment, ...]
    parameters: dict[str, str]
    predicate_count: int = 0

    @property
    def sql(self) -> str:
        """Statement template with ``:name`` placeholders, for logging."""
        return "".join(f":{f.name}" if isinstance(f, Param) else f for f in self.fragments)

    def render(self) -> str:
        """Statement text with every parameter bound as a string literal."""
        return "".join(
            quote_literal(self.parameters[f.name]) if isinstance(f, Param) else f
            for f in self.fragments
        )


def compile_sql(params: SearchParams, now_ms: Optional[int] = None) -> CompiledSql:
    """Compile ``params`` into SELECT … [WHERE …] ORDER BY … LIMIT …

    Predicates are ANDed in a fixed order: keyword match, time lower bound,
    then one equality per filter. The WHERE clause is omitted when empty.
    """
    parameters: dict[str, str] = {}

    def bind(value: str) -> Param:
        param = Param(f"p{len(parameters)}")
        parameters[param.name] = value
        return param

    predicates: list[list[Fragment]] = []

    if params.query:
        pattern = bind(f"%{params.query}%")
        predicates.append(["(message LIKE ", pattern, " OR log LIKE ", pattern, ")"])

    if params.time_range is not None:
        lower_bound = resolve_time_range(params.time_range, now_ms=now_ms)
        predicates.append([f"{TIMESTAMP_COLUMN} > {lower_bound}"])

    for column, value in params.filters.items():
        predicates.append([f"{quote_identifier(column)} = ", bind(value)])

    fragments: list[Fragment] = [f"SELECT * FROM {DEFAULT_TABLE}"]
    for i, predicate in enumerate(predicates):
        fragments.append(" WHERE " if i == 0 else " AND ")
        fragments.extend(predicate)
    fragments.append(f" ORDER BY {TIMESTAMP_COLUMN} DESC LIMIT {params.size}")

    return CompiledSql(
        fragments=tuple(fragments),
        parameters=parameters,
        predicate_count=len(predicates),
    )
