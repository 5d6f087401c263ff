from __future__ import annotations

from dataclasses import dataclass


FILTER_OPERATORS = ('eq', 'neq', 'gt', 'gte', 'lt', 'lte', 'like', 'ilike', 'is', 'in')


@dataclass(frozen=True)
class Embed:
    name: str
    columns: tuple[str, ...]

    @property
    def all_columns(self) -> bool:
        return '*' in self.columns


@dataclass(frozen=True)
class SelectPlan:
    star: bool
    columns: tuple[str, ...]
    embeds: tuple[Embed, ...]


@dataclass(frozen=True)
class FilterClause:
    column: str
    operator: str
    value: object


def split_top_level(text: str, sep: str = ',') -> list[str]:
    """Split on ``sep`` outside of parentheses and double-quoted values."""
    parts: list[str] = []
    depth = 0
    quoted = False
    current: list[str] = []
    for char in text or '':
        if char == '"':
            quoted = not quoted
        elif not quoted and char == '(':
            depth += 1
        elif not quoted and char == ')':
            depth -= 1
        if char == sep and depth == 0 and not quoted:
            parts.append(''.join(current))
            current = []
            continue
        current.append(char)
    if quoted or depth != 0:
        raise ValueError(f'Unbalanced expression: {text}')
    parts.append(''.join(current))
    return parts


def _unquote(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == '"' and value[-1] == '"':
        return value[1:-1]
    return value


def parse_select(expr: str | None) -> SelectPlan:
    star = False
    columns: list[str] = []
    embeds: list[Embed] = []
    for raw in split_top_level(expr or '*'):
        token = raw.strip()
        if not token:
            continue
        if token == '*':
            star = True
        elif '(' in token:
            name, inner = token.split('(', 1)
            if not inner.endswith(')'):
                raise ValueError(f'Malformed embedded resource: {token}')
            inner_columns = tuple(part.strip() for part in split_top_level(inner[:-1]) if part.strip())
            embeds.append(Embed(name=name.strip(), columns=inner_columns or ('*',)))
        else:
            columns.append(token)
    if not columns and not embeds:
        star = True
    return SelectPlan(star=star, columns=tuple(columns), embeds=tuple(embeds))


def parse_or_filter(expr: str) -> list[FilterClause]:
    """Parse ``col.op.value,col.op.value`` into clauses joined with OR."""
    clauses: list[FilterClause] = []
    for raw in split_top_level(expr or ''):
        token = raw.strip()
        if not token:
            continue
        pieces = token.split('.', 2)
        if len(pieces) != 3:
            raise ValueError(f'Malformed filter clause: {token}')
        column, operator, value = pieces
        if operator not in FILTER_OPERATORS:
            raise ValueError(f'Unsupported filter operator: {operator}')
        if operator == 'in':
            inner = value.strip()
            if not (inner.startswith('(') and inner.endswith(')')):
                raise ValueError(f'Malformed in() list: {token}')
            parsed: object = [_unquote(item) for item in split_top_level(inner[1:-1]) if item.strip()]
        else:
            parsed = _unquote(value)
        clauses.append(FilterClause(column=column.strip(), operator=operator, value=parsed))
    if not clauses:
        raise ValueError('Empty filter expression')
    return clauses
