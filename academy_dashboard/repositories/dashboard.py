from __future__ import annotations

from academy_dashboard.core.response import raise_for_error
from academy_dashboard.repositories.base import Repository
from academy_dashboard.services.aggregation_service import today_attendance_summary


class DashboardRepository(Repository):
    def count(self, table: str) -> int:
        result = self.client.table(table).select('*', count='exact', head=True).execute()
        raise_for_error(result.error, table=table)
        return result.count or 0

    def today_attendance(self) -> dict:
        day = self.time_provider.today().isoformat()
        result = self.client.table('attendance').select('status').eq('date', day).execute()
        raise_for_error(result.error, table='attendance')
        return today_attendance_summary(result.data or [])
