import unittest

from academy_dashboard.core.response import (
    StorageError,
    clean_optional_fields,
    total_pages,
    wrap_page,
    wrap_response,
)
from academy_dashboard.query.client import NOT_FOUND_CODE, AdapterError, QueryResult


class ResponseWrapperTests(unittest.TestCase):
    def test_wrap_response_converts_keys(self):
        wrapped = wrap_response([{'id': 'a', 'guardian_name': 'G'}])
        self.assertEqual(wrapped, {'data': [{'id': 'a', '_id': 'a', 'guardianName': 'G'}]})

    def test_error_is_raised_not_returned(self):
        error = AdapterError(code=NOT_FOUND_CODE, message='missing')
        with self.assertLogs('academy_dashboard.core.response', level='WARNING') as logs:
            with self.assertRaises(StorageError) as ctx:
                wrap_response(None, error, table='students')
        self.assertTrue(ctx.exception.is_not_found)
        self.assertEqual(ctx.exception.payload['code'], NOT_FOUND_CODE)
        self.assertIn('storage_error table=students', logs.output[0])

    def test_total_pages(self):
        self.assertEqual(total_pages(25, 10), 3)
        self.assertEqual(total_pages(20, 10), 2)
        self.assertEqual(total_pages(0, 10), 0)
        self.assertEqual(total_pages(None, 10), 0)

    def test_wrap_page_adds_count_and_pages(self):
        result = QueryResult(data=[{'id': 'x'}], count=41)
        wrapped = wrap_page(result, 20)
        self.assertEqual(wrapped['count'], 41)
        self.assertEqual(wrapped['totalPages'], 3)

    def test_clean_optional_fields(self):
        payload = {'title': 'T', 'batchId': '', 'description': 'd'}
        self.assertEqual(
            clean_optional_fields(payload, ('batchId', 'description', 'dueDate')),
            {'title': 'T', 'batchId': None, 'description': 'd', 'dueDate': None},
        )
        self.assertEqual(
            clean_optional_fields({'batchId': ''}, ('batchId', 'dueDate'), fill_missing=False),
            {'batchId': None},
        )


if __name__ == '__main__':
    unittest.main()
