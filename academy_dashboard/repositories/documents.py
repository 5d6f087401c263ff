from __future__ import annotations

from academy_dashboard.repositories.base import Repository


class DocumentRepository(Repository):
    table_name = 'documents'
    optional_fields = ('batchId', 'description', 'category')
