from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Any

from sqlalchemy import Boolean, Date, DateTime, MetaData, String, Table, and_, cast, func, or_, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from academy_dashboard import models  # noqa: F401  registers tables on Base.metadata
from academy_dashboard.db import Base
from academy_dashboard.query.parsing import Embed, FilterClause, parse_or_filter, parse_select


logger = logging.getLogger(__name__)

NOT_FOUND_CODE = 'PGRST116'
PARSE_ERROR_CODE = 'PGRST100'
RELATION_ERROR_CODE = 'PGRST200'
UNIQUE_VIOLATION_CODE = '23505'
FOREIGN_KEY_VIOLATION_CODE = '23503'
NOT_NULL_VIOLATION_CODE = '23502'
INTEGRITY_ERROR_CODE = '23000'
INVALID_VALUE_CODE = '22007'
UNDEFINED_COLUMN_CODE = '42703'
UNDEFINED_TABLE_CODE = '42P01'
MISSING_FILTER_CODE = '21000'
CONNECTION_ERROR_CODE = '08006'

LIKE_ESCAPE = '\\'
LIKE_SPECIALS = ('%', '_', '*', LIKE_ESCAPE)


@dataclass
class AdapterError:
    code: str
    message: str
    details: str | None = None
    hint: str | None = None

    def as_dict(self) -> dict:
        return {'code': self.code, 'message': self.message, 'details': self.details, 'hint': self.hint}


@dataclass
class QueryResult:
    data: Any = None
    error: AdapterError | None = None
    count: int | None = None


class _AdapterFailure(Exception):
    def __init__(self, error: AdapterError):
        super().__init__(error.message)
        self.error = error


class QueryClient:
    """Row-oriented query builder over the declared tables.

    Mirrors a hosted REST query client: builders are assembled with filter
    and modifier calls, and ``execute()`` never raises for storage failures;
    it returns a ``QueryResult`` whose ``error`` is set instead.
    """

    def __init__(self, engine: Engine, metadata: MetaData | None = None):
        self.engine = engine
        self.metadata = metadata or Base.metadata

    def table(self, name: str) -> QueryBuilder:
        return QueryBuilder(self, name)

    from_ = table

    def resolve_table(self, name: str) -> Table:
        table = self.metadata.tables.get(name)
        if table is None:
            raise _AdapterFailure(AdapterError(code=UNDEFINED_TABLE_CODE, message=f'relation "{name}" does not exist'))
        return table


class QueryBuilder:
    def __init__(self, client: QueryClient, table_name: str):
        self._client = client
        self._table_name = table_name
        self._action = 'select'
        self._columns = '*'
        self._count: str | None = None
        self._head = False
        self._payload: Any = None
        self._on_conflict: str | None = None
        self._filters: list[FilterClause | tuple[str, str]] = []
        self._orders: list[tuple[str, bool]] = []
        self._range: tuple[int, int] | None = None
        self._limit: int | None = None
        self._single: str | None = None

    # actions

    def select(self, columns: str = '*', count: str | None = None, head: bool = False) -> QueryBuilder:
        self._action = 'select'
        self._columns = columns
        self._count = count
        self._head = head
        return self

    def insert(self, rows: dict | list[dict]) -> QueryBuilder:
        self._action = 'insert'
        self._payload = rows
        return self

    def upsert(self, rows: dict | list[dict], on_conflict: str | None = None) -> QueryBuilder:
        self._action = 'upsert'
        self._payload = rows
        self._on_conflict = on_conflict
        return self

    def update(self, values: dict) -> QueryBuilder:
        self._action = 'update'
        self._payload = values
        return self

    def delete(self) -> QueryBuilder:
        self._action = 'delete'
        return self

    # filters

    def _filter(self, column: str, operator: str, value: Any) -> QueryBuilder:
        self._filters.append(FilterClause(column=column, operator=operator, value=value))
        return self

    def eq(self, column: str, value: Any) -> QueryBuilder:
        return self._filter(column, 'eq', value)

    def neq(self, column: str, value: Any) -> QueryBuilder:
        return self._filter(column, 'neq', value)

    def gt(self, column: str, value: Any) -> QueryBuilder:
        return self._filter(column, 'gt', value)

    def gte(self, column: str, value: Any) -> QueryBuilder:
        return self._filter(column, 'gte', value)

    def lt(self, column: str, value: Any) -> QueryBuilder:
        return self._filter(column, 'lt', value)

    def lte(self, column: str, value: Any) -> QueryBuilder:
        return self._filter(column, 'lte', value)

    def like(self, column: str, pattern: str) -> QueryBuilder:
        return self._filter(column, 'like', pattern)

    def ilike(self, column: str, pattern: str) -> QueryBuilder:
        return self._filter(column, 'ilike', pattern)

    def in_(self, column: str, values: list) -> QueryBuilder:
        return self._filter(column, 'in', list(values))

    def is_(self, column: str, value: Any) -> QueryBuilder:
        return self._filter(column, 'is', value)

    def contains(self, column: str, values: list) -> QueryBuilder:
        return self._filter(column, 'contains', list(values))

    def or_(self, expression: str) -> QueryBuilder:
        self._filters.append(('or', expression))
        return self

    # modifiers

    def order(self, column: str, desc: bool = False) -> QueryBuilder:
        self._orders.append((column, desc))
        return self

    def range(self, start: int, end: int) -> QueryBuilder:
        self._range = (start, end)
        return self

    def limit(self, size: int) -> QueryBuilder:
        self._limit = size
        return self

    def single(self) -> QueryBuilder:
        self._single = 'single'
        return self

    def maybe_single(self) -> QueryBuilder:
        self._single = 'maybe'
        return self

    # execution

    def execute(self) -> QueryResult:
        try:
            table = self._client.resolve_table(self._table_name)
            with self._client.engine.begin() as conn:
                if self._action == 'select':
                    return self._run_select(conn, table)
                if self._action in ('insert', 'upsert'):
                    return self._run_insert(conn, table)
                if self._action == 'update':
                    return self._run_update(conn, table)
                return self._run_delete(conn, table)
        except _AdapterFailure as exc:
            return QueryResult(error=exc.error)
        except IntegrityError as exc:
            return QueryResult(error=_integrity_error(exc))
        except SQLAlchemyError as exc:
            logger.warning('query_failed table=%s action=%s error=%s', self._table_name, self._action, exc)
            return QueryResult(error=AdapterError(code=CONNECTION_ERROR_CODE, message=str(getattr(exc, 'orig', None) or exc)))

    def _run_select(self, conn: Connection, table: Table) -> QueryResult:
        plan = _parse(parse_select, self._columns)
        conditions = self._conditions(table)

        count = None
        if self._count:
            count = conn.execute(select(func.count()).select_from(table).where(*conditions)).scalar_one()
        if self._head:
            return QueryResult(data=None, count=count)

        columns = list(table.columns) if plan.star else [_column(table, name) for name in plan.columns]
        helper_columns = []
        for embed in plan.embeds:
            local_column, _ = _relationship(table, embed.name)
            if local_column.name not in {column.name for column in columns}:
                columns.append(local_column)
                helper_columns.append(local_column.name)

        stmt = select(*columns).where(*conditions)
        for name, desc in self._orders:
            column = _column(table, name)
            stmt = stmt.order_by(column.desc() if desc else column.asc())
        if self._range is not None:
            start, end = self._range
            stmt = stmt.offset(max(start, 0)).limit(max(end - start + 1, 0))
        elif self._limit is not None:
            stmt = stmt.limit(self._limit)

        rows = [dict(row) for row in conn.execute(stmt).mappings()]
        for embed in plan.embeds:
            self._attach_embed(conn, table, rows, embed)
        for row in rows:
            for name in helper_columns:
                row.pop(name, None)
        return self._finish([_serialize(row) for row in rows], count)

    def _run_insert(self, conn: Connection, table: Table) -> QueryResult:
        rows = self._payload if isinstance(self._payload, list) else [self._payload]
        rows = [_coerce_payload(table, row) for row in rows if row is not None]
        created = []
        if self._action == 'upsert':
            conflict_keys = _conflict_keys(table, self._on_conflict)
            insert_factory = _dialect_insert(conn)
            for row in rows:
                stmt = insert_factory(table).values(row)
                updates = {key: stmt.excluded[key] for key in row if key not in conflict_keys and key != 'id'}
                if not updates:
                    updates = {conflict_keys[0]: stmt.excluded[conflict_keys[0]]}
                stmt = stmt.on_conflict_do_update(index_elements=conflict_keys, set_=updates)
                created.append(dict(conn.execute(stmt.returning(*table.columns)).mappings().one()))
        else:
            for row in rows:
                created.append(dict(conn.execute(table.insert().values(row).returning(*table.columns)).mappings().one()))
        return self._finish([_serialize(row) for row in created], None)

    def _run_update(self, conn: Connection, table: Table) -> QueryResult:
        conditions = self._require_conditions(table)
        values = _coerce_payload(table, self._payload or {})
        if not values:
            raise _AdapterFailure(AdapterError(code=PARSE_ERROR_CODE, message='Empty update payload'))
        stmt = table.update().where(*conditions).values(values).returning(*table.columns)
        rows = [dict(row) for row in conn.execute(stmt).mappings()]
        return self._finish([_serialize(row) for row in rows], None)

    def _run_delete(self, conn: Connection, table: Table) -> QueryResult:
        conditions = self._require_conditions(table)
        stmt = table.delete().where(*conditions).returning(*table.columns)
        rows = [dict(row) for row in conn.execute(stmt).mappings()]
        return self._finish([_serialize(row) for row in rows], None)

    def _finish(self, rows: list[dict], count: int | None) -> QueryResult:
        if self._single is None:
            return QueryResult(data=rows, count=count)
        if self._single == 'maybe' and not rows:
            return QueryResult(data=None, count=count)
        if len(rows) != 1:
            # Raised inside the transaction so a mutation touching the wrong number of rows rolls back.
            raise _AdapterFailure(
                AdapterError(
                    code=NOT_FOUND_CODE,
                    message='JSON object requested, multiple (or no) rows returned',
                    details=f'The result contains {len(rows)} rows',
                )
            )
        return QueryResult(data=rows[0], count=count)

    def _require_conditions(self, table: Table) -> list:
        conditions = self._conditions(table)
        if not conditions:
            raise _AdapterFailure(AdapterError(code=MISSING_FILTER_CODE, message=f'{self._action.upper()} requires a filter'))
        return conditions

    def _conditions(self, table: Table) -> list:
        conditions = []
        for item in self._filters:
            if isinstance(item, tuple):
                clauses = _parse(parse_or_filter, item[1])
                conditions.append(or_(*[_condition(table, clause) for clause in clauses]))
            else:
                conditions.append(_condition(table, item))
        return conditions

    def _attach_embed(self, conn: Connection, table: Table, rows: list[dict], embed: Embed) -> None:
        local_column, remote_column = _relationship(table, embed.name)
        remote_table = remote_column.table
        keys = {row.get(local_column.name) for row in rows if row.get(local_column.name) is not None}
        related: dict[Any, dict] = {}
        if keys:
            if embed.all_columns:
                wanted = list(remote_table.columns)
            else:
                wanted = [_column(remote_table, name) for name in embed.columns]
            query_columns = list(wanted)
            if remote_column.name not in {column.name for column in wanted}:
                query_columns.append(remote_column)
            for match in conn.execute(select(*query_columns).where(remote_column.in_(list(keys)))).mappings():
                related[match[remote_column.name]] = {column.name: match[column.name] for column in wanted}
        for row in rows:
            row[embed.name] = related.get(row.get(local_column.name))


def _parse(parser, expression):
    try:
        return parser(expression)
    except ValueError as exc:
        raise _AdapterFailure(AdapterError(code=PARSE_ERROR_CODE, message=str(exc))) from exc


def _column(table: Table, name: str):
    column = table.columns.get(name.strip())
    if column is None:
        raise _AdapterFailure(AdapterError(code=UNDEFINED_COLUMN_CODE, message=f'column {table.name}.{name} does not exist'))
    return column


def _relationship(table: Table, name: str):
    for foreign_key in table.foreign_keys:
        if foreign_key.column.table.name == name:
            return foreign_key.parent, foreign_key.column
    raise _AdapterFailure(
        AdapterError(
            code=RELATION_ERROR_CODE,
            message=f"Could not find a relationship between '{table.name}' and '{name}'",
        )
    )


def _condition(table: Table, clause: FilterClause):
    column = _column(table, clause.column)
    operator = clause.operator
    value = clause.value
    if operator == 'contains':
        # JSON array columns: match the serialized element inside the stored text.
        return and_(*[cast(column, String).contains(json.dumps(item), autoescape=True) for item in value])
    if operator == 'in':
        return column.in_([_coerce(column, item) for item in value])
    if operator == 'is':
        if value is None or str(value).lower() == 'null':
            return column.is_(None)
        return column.is_(_coerce(column, value))
    if operator in ('like', 'ilike'):
        pattern = like_pattern(value)
        if operator == 'ilike':
            return column.ilike(pattern, escape=LIKE_ESCAPE)
        return column.like(pattern, escape=LIKE_ESCAPE)
    coerced = _coerce(column, value)
    if operator == 'eq':
        return column.is_(None) if coerced is None else column == coerced
    if operator == 'neq':
        return column.is_not(None) if coerced is None else column != coerced
    if operator == 'gt':
        return column > coerced
    if operator == 'gte':
        return column >= coerced
    if operator == 'lt':
        return column < coerced
    if operator == 'lte':
        return column <= coerced
    raise _AdapterFailure(AdapterError(code=PARSE_ERROR_CODE, message=f'Unsupported filter operator: {operator}'))


def like_pattern(value: Any) -> str:
    """Translate a filter pattern to SQL LIKE: ``*`` is a wildcard, ``\\`` escapes the next character."""
    chars: list[str] = []
    escaped = False
    for char in str(value):
        if escaped:
            chars.append(char if char == '*' else LIKE_ESCAPE + char)
            escaped = False
        elif char == LIKE_ESCAPE:
            escaped = True
        elif char == '*':
            chars.append('%')
        else:
            chars.append(char)
    if escaped:
        chars.append(LIKE_ESCAPE * 2)
    return ''.join(chars)


def escape_like(term: str) -> str:
    """Escape wildcard characters so ``term`` matches literally inside a pattern."""
    return ''.join(LIKE_ESCAPE + char if char in LIKE_SPECIALS else char for char in term)


def _coerce(column, value: Any) -> Any:
    if value is None:
        return None
    try:
        if isinstance(column.type, DateTime):
            if isinstance(value, datetime):
                return _naive_utc(value)
            if isinstance(value, date):
                return datetime.combine(value, time.min)
            raw = str(value).strip()
            if raw.endswith('Z'):
                raw = raw[:-1] + '+00:00'
            return _naive_utc(datetime.fromisoformat(raw))
        if isinstance(column.type, Date):
            if isinstance(value, datetime):
                return value.date()
            if isinstance(value, date):
                return value
            return date.fromisoformat(str(value).strip()[:10])
        if isinstance(column.type, Boolean) and isinstance(value, str):
            return value.strip().lower() in ('true', '1', 't', 'yes')
    except ValueError as exc:
        raise _AdapterFailure(
            AdapterError(code=INVALID_VALUE_CODE, message=f'invalid input syntax for {column.name}: "{value}"')
        ) from exc
    return value


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _coerce_payload(table: Table, row: dict) -> dict:
    return {name: _coerce(_column(table, name), value) for name, value in (row or {}).items()}


def _conflict_keys(table: Table, on_conflict: str | None) -> list[str]:
    if on_conflict:
        keys = [key.strip() for key in on_conflict.split(',') if key.strip()]
    else:
        keys = [column.name for column in table.primary_key.columns]
    for key in keys:
        _column(table, key)
    return keys


def _dialect_insert(conn: Connection):
    name = conn.dialect.name
    if name == 'postgresql':
        return postgresql.insert
    if name == 'sqlite':
        return sqlite.insert
    raise _AdapterFailure(AdapterError(code='0A000', message=f'upsert is not supported on {name}'))


def _serialize(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _serialize(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_serialize(item) for item in value]
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def _integrity_error(exc: IntegrityError) -> AdapterError:
    message = str(exc.orig or exc)
    lowered = message.lower()
    if 'unique' in lowered or 'duplicate' in lowered:
        code = UNIQUE_VIOLATION_CODE
    elif 'foreign key' in lowered:
        code = FOREIGN_KEY_VIOLATION_CODE
    elif 'not null' in lowered:
        code = NOT_NULL_VIOLATION_CODE
    else:
        code = INTEGRITY_ERROR_CODE
    return AdapterError(code=code, message=message)
