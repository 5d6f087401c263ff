from __future__ import annotations

from academy_dashboard.repositories.base import Repository


class AcademyRepository(Repository):
    # Deleting an academy removes its batches through the foreign key cascade.
    table_name = 'academies'
