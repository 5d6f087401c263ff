from __future__ import annotations

from academy_dashboard.core.case_converter import strip_legacy_alias, to_storage_keys
from academy_dashboard.core.response import clean_optional_fields, raise_for_error, wrap_result
from academy_dashboard.core.time_provider import TimeProvider, default_time_provider
from academy_dashboard.query.client import QueryBuilder, QueryClient


class Repository:
    """Generic CRUD over one table, returning ``{'data': ...}`` in domain (camelCase) shape."""

    table_name = ''
    order_column: str | None = 'created_at'
    order_desc = True
    # camelCase fields whose empty-string values are stored as NULL
    optional_fields: tuple[str, ...] = ()
    update_optional_fields: tuple[str, ...] | None = None

    def __init__(self, client: QueryClient, *, time_provider: TimeProvider = default_time_provider):
        self.client = client
        self.time_provider = time_provider

    def query(self) -> QueryBuilder:
        return self.client.table(self.table_name)

    def ordered(self, columns: str = '*', **select_kwargs) -> QueryBuilder:
        query = self.query().select(columns, **select_kwargs)
        if self.order_column:
            query = query.order(self.order_column, desc=self.order_desc)
        return query

    def to_row(self, payload: dict | None, *, for_update: bool = False) -> dict:
        data = strip_legacy_alias(dict(payload or {}))
        fields = self.optional_fields
        if for_update and self.update_optional_fields is not None:
            fields = self.update_optional_fields
        if fields:
            data = clean_optional_fields(data, fields, fill_missing=not for_update)
        return to_storage_keys(data)

    def get_all(self) -> dict:
        return wrap_result(self.ordered().execute(), table=self.table_name)

    def get_one(self, record_id: str) -> dict:
        result = self.query().select('*').eq('id', record_id).single().execute()
        return wrap_result(result, table=self.table_name)

    def create(self, payload: dict) -> dict:
        result = self.query().insert(self.to_row(payload)).single().execute()
        return wrap_result(result, table=self.table_name)

    def update(self, record_id: str, payload: dict) -> dict:
        row = self.to_row(payload, for_update=True)
        row['updated_at'] = self.time_provider.utc_now_iso()
        result = self.query().update(row).eq('id', record_id).single().execute()
        return wrap_result(result, table=self.table_name)

    def delete(self, record_id: str) -> dict:
        result = self.query().delete().eq('id', record_id).execute()
        raise_for_error(result.error, table=self.table_name)
        return {'data': {'success': True}}

    def toggle(self, record_id: str, column: str = 'completed') -> dict:
        # Read-then-write without a version check: two concurrent toggles can cancel out.
        current = self.query().select(column).eq('id', record_id).single().execute()
        raise_for_error(current.error, table=self.table_name)
        values = {column: not current.data[column], 'updated_at': self.time_provider.utc_now_iso()}
        result = self.query().update(values).eq('id', record_id).single().execute()
        return wrap_result(result, table=self.table_name)
