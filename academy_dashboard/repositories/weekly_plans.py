from __future__ import annotations

from datetime import date

from academy_dashboard.core.response import raise_for_error, wrap_result
from academy_dashboard.core.time_provider import to_date_string, week_start
from academy_dashboard.query.client import NOT_FOUND_CODE
from academy_dashboard.repositories.base import Repository


def monday_of(value: date | str) -> str:
    """ISO Monday (``YYYY-MM-DD``) of the week containing ``value``."""
    return week_start(date.fromisoformat(to_date_string(value))).isoformat()


class WeeklyPlanRepository(Repository):
    table_name = 'weekly_plans'
    order_column = 'week_start'
    order_desc = True

    def to_row(self, payload: dict | None, *, for_update: bool = False) -> dict:
        row = super().to_row(payload, for_update=for_update)
        # one plan per (batch, ISO week): any day of the week maps to its Monday
        if row.get('week_start'):
            row['week_start'] = monday_of(row['week_start'])
        return row

    def get_all(self, batch_id: str | None = None) -> dict:
        query = self.ordered()
        if batch_id:
            query = query.eq('batch_id', batch_id)
        return wrap_result(query.execute(), table=self.table_name)

    def get_current(self, batch_id: str) -> dict:
        current_week = self.time_provider.current_week_start().isoformat()
        result = (
            self.query()
            .select('*')
            .eq('batch_id', batch_id)
            .eq('week_start', current_week)
            .single()
            .execute()
        )
        if result.error is not None and result.error.code == NOT_FOUND_CODE:
            return {'data': None}
        return wrap_result(result, table=self.table_name)

    def upsert(self, batch_id: str, week_of: date | str, plan: dict) -> dict:
        """Update the plan for the week containing ``week_of`` or create it.

        Lookup and write are separate calls: two concurrent first saves for the
        same week can race, and the loser fails on the unique constraint.
        """
        week = monday_of(week_of)
        existing = (
            self.query()
            .select('id')
            .eq('batch_id', batch_id)
            .eq('week_start', week)
            .maybe_single()
            .execute()
        )
        raise_for_error(existing.error, table=self.table_name)
        if existing.data:
            return self.update(existing.data['id'], plan)
        return self.create({**plan, 'batchId': batch_id, 'weekStart': week})

    def mark_complete(self, record_id: str) -> dict:
        values = {'completed': True, 'updated_at': self.time_provider.utc_now_iso()}
        result = self.query().update(values).eq('id', record_id).single().execute()
        return wrap_result(result, table=self.table_name)
