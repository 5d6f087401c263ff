import tempfile
import unittest
from pathlib import Path

from freezegun import freeze_time
from sqlalchemy import delete

from academy_dashboard.context import AppContext
from academy_dashboard.core.response import StorageError
from academy_dashboard.db import Base, build_engine
from academy_dashboard.query.client import NOT_FOUND_CODE, UNIQUE_VIOLATION_CODE
from academy_dashboard.services.session_store import MemoryStorage


class RepositoryTestCase(unittest.TestCase):
    db_name = 'test_repositories.db'

    @classmethod
    def setUpClass(cls):
        cls._tmpdir = tempfile.TemporaryDirectory()
        db_path = Path(cls._tmpdir.name) / cls.db_name
        cls._engine = build_engine(f'sqlite:///{db_path}')
        Base.metadata.create_all(bind=cls._engine)

    @classmethod
    def tearDownClass(cls):
        cls._engine.dispose()
        cls._tmpdir.cleanup()

    def setUp(self):
        with self._engine.begin() as conn:
            for table in reversed(Base.metadata.sorted_tables):
                conn.execute(delete(table))
        self.ctx = AppContext.build(self._engine, storage=MemoryStorage())
        self.academy = self.ctx.academies.create({'name': 'Main Academy'})['data']
        self.batch = self.ctx.batches.create({'academyId': self.academy['id'], 'name': 'Morning'})['data']

    def add_student(self, name, **extra):
        payload = {'name': name, 'batchIds': [self.batch['id']], **extra}
        return self.ctx.students.create(payload)['data']


class CrudTests(RepositoryTestCase):
    def test_create_returns_domain_shape_with_alias(self):
        student = self.add_student('Asha', guardianName='Ravi')
        self.assertEqual(student['guardianName'], 'Ravi')
        self.assertEqual(student['_id'], student['id'])
        self.assertEqual(student['batchIds'], [self.batch['id']])

    def test_legacy_alias_is_ignored_on_write(self):
        student = self.add_student('Asha')
        updated = self.ctx.students.update(student['id'], {**student, 'name': 'Asha R'})['data']
        self.assertEqual(updated['name'], 'Asha R')

    def test_get_one_missing_raises_not_found(self):
        with self.assertRaises(StorageError) as ctx:
            self.ctx.students.get_one('missing')
        self.assertEqual(ctx.exception.code, NOT_FOUND_CODE)

    def test_update_stamps_updated_at(self):
        with freeze_time('2026-03-02 08:00:00'):
            student = self.add_student('Asha')
        with freeze_time('2026-03-05 09:30:00'):
            updated = self.ctx.students.update(student['id'], {'phone': '999'})['data']
        self.assertEqual(updated['updatedAt'], '2026-03-05T09:30:00')
        self.assertEqual(updated['name'], 'Asha')

    def test_delete_reports_success(self):
        student = self.add_student('Asha')
        self.assertEqual(self.ctx.students.delete(student['id']), {'data': {'success': True}})
        self.assertEqual(self.ctx.students.get_all()['data'], [])

    def test_batches_filter_by_academy(self):
        other = self.ctx.academies.create({'name': 'Other'})['data']
        self.ctx.batches.create({'academyId': other['id'], 'name': 'Evening'})
        names = [row['name'] for row in self.ctx.batches.get_all(academy_id=other['id'])['data']]
        self.assertEqual(names, ['Evening'])
        self.assertEqual(len(self.ctx.batches.get_all()['data']), 2)


class StudentRepositoryTests(RepositoryTestCase):
    def test_pagination_returns_requested_window(self):
        for index in range(25):
            self.add_student(f'Student {index + 1:02d}')
        page = self.ctx.students.get_all(page=2, limit=10)
        self.assertEqual(page['count'], 25)
        self.assertEqual(page['totalPages'], 3)
        self.assertEqual(
            [row['name'] for row in page['data']],
            [f'Student {index:02d}' for index in range(11, 21)],
        )

    def test_search_matches_name_or_email(self):
        self.add_student('Asha', email='asha@example.com')
        self.add_student('Bina', email='kumar.bina@example.com')
        self.add_student('Kumar Dev', email='dev@example.com')
        names = [row['name'] for row in self.ctx.students.get_all(search='kumar')['data']]
        self.assertEqual(names, ['Bina', 'Kumar Dev'])

    def test_search_treats_wildcards_literally(self):
        self.add_student('a_b')
        self.add_student('axb')
        self.add_student('Full 100%')
        self.add_student('Full 1000')
        self.assertEqual([row['name'] for row in self.ctx.students.get_all(search='a_b')['data']], ['a_b'])
        self.assertEqual([row['name'] for row in self.ctx.students.get_all(search='100%')['data']], ['Full 100%'])
        self.assertEqual(self.ctx.students.get_all_unpaged(search='a*b')['data'], [])

    def test_batch_filter_and_name_resolution(self):
        evening = self.ctx.batches.create({'academyId': self.academy['id'], 'name': 'Evening'})['data']
        self.add_student('Asha', batchIds=[self.batch['id'], 'deleted-batch'])
        self.add_student('Bina', batchIds=[evening['id']])
        result = self.ctx.students.get_all(batch_id=self.batch['id'])
        self.assertEqual(result['count'], 1)
        refs = result['data'][0]['batchIds']
        self.assertEqual([(ref['id'], ref['name']) for ref in refs], [(self.batch['id'], 'Morning'), ('deleted-batch', 'Unknown')])

    def test_unpaged_listing(self):
        for name in ('Chetan', 'Asha'):
            self.add_student(name)
        rows = self.ctx.students.get_all_unpaged()['data']
        self.assertEqual([row['name'] for row in rows], ['Asha', 'Chetan'])
        self.assertEqual(rows[0]['batchIds'], [self.batch['id']])
        resolved = self.ctx.students.get_all_unpaged(resolve_batches=True)['data']
        self.assertEqual(resolved[0]['batchIds'][0]['name'], 'Morning')


class AttendanceRepositoryTests(RepositoryTestCase):
    def test_bulk_mark_is_an_upsert(self):
        student = self.add_student('Asha')
        self.ctx.attendance.mark_bulk(
            batch_id=self.batch['id'], date='2026-03-02', records=[{'studentId': student['id'], 'status': 'present'}]
        )
        self.ctx.attendance.mark_bulk(
            batch_id=self.batch['id'], date='2026-03-02T18:45:00Z', records=[{'studentId': student['id'], 'status': 'absent'}]
        )
        rows = self.ctx.attendance.get(batch_id=self.batch['id'], date='2026-03-02')['data']
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0]['status'], 'absent')
        self.assertEqual(rows[0]['studentId']['name'], 'Asha')
        self.assertEqual(rows[0]['date'], '2026-03-02')

    def test_mark_single_and_by_student(self):
        asha = self.add_student('Asha')
        bina = self.add_student('Bina')
        record = self.ctx.attendance.mark_single(
            student_id=asha['id'], batch_id=self.batch['id'], date='2026-03-03', status='late'
        )['data']
        self.assertEqual(record['status'], 'late')
        self.ctx.attendance.mark_single(student_id=bina['id'], batch_id=self.batch['id'], date='2026-03-03', status='present')
        rows = self.ctx.attendance.get_by_student(asha['id'])['data']
        self.assertEqual([row['studentId']['id'] for row in rows], [asha['id']])

    def test_statuses_projection_and_delete(self):
        asha = self.add_student('Asha')
        record = self.ctx.attendance.mark_single(
            student_id=asha['id'], batch_id=self.batch['id'], date='2026-03-03', status='present'
        )['data']
        self.assertEqual(
            self.ctx.attendance.get_statuses(batch_id=self.batch['id'], day='2026-03-03'),
            [{'studentId': asha['id'], 'status': 'present'}],
        )
        self.ctx.attendance.delete(record['id'])
        self.assertEqual(self.ctx.attendance.get_statuses(batch_id=self.batch['id']), [])

    def test_deleting_student_cascades_attendance(self):
        asha = self.add_student('Asha')
        self.ctx.attendance.mark_single(student_id=asha['id'], batch_id=self.batch['id'], date='2026-03-03', status='present')
        self.ctx.students.delete(asha['id'])
        self.assertEqual(self.ctx.attendance.get()['data'], [])


class SyllabusRepositoryTests(RepositoryTestCase):
    def test_ordering_progress_and_toggle(self):
        for order, title in ((2, 'Calculus'), (0, 'Algebra'), (1, 'Geometry')):
            self.ctx.syllabus.create({'batchId': self.batch['id'], 'subject': 'Maths', 'title': title, 'sortOrder': order})
        self.ctx.syllabus.create({'batchId': self.batch['id'], 'subject': 'Physics', 'title': 'Optics', 'sortOrder': 0})

        topics = self.ctx.syllabus.get_all(batch_id=self.batch['id'], subject='Maths')['data']
        self.assertEqual([topic['title'] for topic in topics], ['Algebra', 'Geometry', 'Calculus'])
        self.assertIsNone(topics[0]['dueDate'])

        toggled = self.ctx.syllabus.toggle(topics[0]['id'])['data']
        self.assertTrue(toggled['completed'])
        self.assertEqual(
            self.ctx.syllabus.get_progress(self.batch['id'], 'Maths')['data'],
            {'total': 3, 'completed': 1, 'percentage': 33},
        )
        self.assertFalse(self.ctx.syllabus.toggle(topics[0]['id'])['data']['completed'])

    def test_progress_with_no_topics(self):
        self.assertEqual(self.ctx.syllabus.get_progress('none')['data'], {'total': 0, 'completed': 0, 'percentage': 0})

    def test_empty_optional_fields_become_null(self):
        topic = self.ctx.syllabus.create(
            {'batchId': self.batch['id'], 'subject': 'Maths', 'title': 'Sets', 'description': '', 'dueDate': ''}
        )['data']
        self.assertIsNone(topic['description'])
        self.assertIsNone(topic['dueDate'])


class ResultsRepositoryTests(RepositoryTestCase):
    def _result(self, student, marks, total, subject='Maths', test_date='2026-03-01'):
        return self.ctx.results.create(
            {
                'studentId': student['id'],
                'batchId': self.batch['id'],
                'subject': subject,
                'testName': '',
                'marks': marks,
                'totalMarks': total,
                'testDate': test_date,
            }
        )['data']

    def test_results_join_student_names_newest_first(self):
        asha = self.add_student('Asha')
        self._result(asha, 8, 10, test_date='2026-02-01')
        self._result(asha, 9, 10, test_date='2026-03-01')
        rows = self.ctx.results.get_all(student_id=asha['id'])['data']
        self.assertEqual([row['testDate'] for row in rows], ['2026-03-01', '2026-02-01'])
        self.assertEqual(rows[0]['studentId'], {'id': asha['id'], 'name': 'Asha', '_id': asha['id']})
        self.assertIsNone(rows[0]['testName'])

    def test_leaderboard_weights_by_total_marks(self):
        asha = self.add_student('Asha')
        bina = self.add_student('Bina')
        self._result(asha, 10, 10)
        self._result(asha, 120, 140)
        self._result(bina, 45, 50)
        self._result(bina, 0, 50, subject='Physics')

        board = self.ctx.results.get_leaderboard(self.batch['id'], 'Maths')['data']
        self.assertEqual([entry['studentName'] for entry in board], ['Bina', 'Asha'])
        self.assertAlmostEqual(board[1]['percentage'], 86.6666, places=3)

    def test_leaderboard_empty(self):
        self.assertEqual(self.ctx.results.get_leaderboard()['data'], [])


class AnnouncementRepositoryTests(RepositoryTestCase):
    def test_targeting_includes_global_announcements(self):
        evening = self.ctx.batches.create({'academyId': self.academy['id'], 'name': 'Evening'})['data']
        self.ctx.announcements.create({'title': 'Global', 'message': 'all', 'targetBatchIds': []})
        self.ctx.announcements.create({'title': 'Morning only', 'message': 'm', 'targetBatchIds': [self.batch['id']]})
        self.ctx.announcements.create({'title': 'Evening only', 'message': 'e', 'targetBatchIds': [evening['id']]})

        titles = sorted(row['title'] for row in self.ctx.announcements.get_all(self.batch['id'])['data'])
        self.assertEqual(titles, ['Global', 'Morning only'])
        everything = self.ctx.announcements.get_all()['data']
        self.assertEqual(len(everything), 3)
        targeted = next(row for row in everything if row['title'] == 'Morning only')
        self.assertEqual(targeted['targetBatchIds'][0]['name'], 'Morning')

    def test_toggle_viewed(self):
        row = self.ctx.announcements.create({'title': 'Hi', 'message': ''})['data']
        self.assertTrue(self.ctx.announcements.toggle_viewed(row['id'])['data']['viewed'])


class ContentRepositoryTests(RepositoryTestCase):
    def test_notes_embed_batch_name(self):
        self.ctx.notes.create({'title': 'With batch', 'batchId': self.batch['id']})
        self.ctx.notes.create({'title': 'Loose', 'batchId': ''})
        notes = {row['title']: row for row in self.ctx.notes.get_all()['data']}
        self.assertEqual(notes['With batch']['batchId']['name'], 'Morning')
        self.assertIsNone(notes['Loose']['batchId'])
        self.assertNotIn('batches', notes['Loose'])

    def test_documents_clean_optional_fields(self):
        doc = self.ctx.documents.create(
            {'title': 'Syllabus PDF', 'url': 'https://x/y.pdf', 'type': 'document', 'category': '', 'batchId': ''}
        )['data']
        self.assertIsNone(doc['category'])
        self.assertIsNone(doc['batchId'])
        self.assertIsNone(doc['description'])

    def test_events_range_filter_ordered_by_date(self):
        for title, when in (('Exam', '2026-03-20T09:00:00'), ('Meeting', '2026-03-05T09:00:00'), ('Later', '2026-04-10T09:00:00')):
            self.ctx.events.create({'title': title, 'date': when, 'type': 'other'})
        rows = self.ctx.events.get_all(start_date='2026-03-01', end_date='2026-03-31')['data']
        self.assertEqual([row['title'] for row in rows], ['Meeting', 'Exam'])

    def test_todos_shape_toggle_and_partial_update(self):
        todo = self.ctx.todos.create({'title': 'Grade tests', 'priority': 'high', 'batchId': '', 'dueDate': ''})['data']
        self.assertEqual(todo['priority'], 'high')
        self.assertFalse(todo['completed'])
        self.assertIsNone(todo['dueDate'])
        self.assertTrue(self.ctx.todos.toggle(todo['id'])['data']['completed'])

        updated = self.ctx.todos.update(todo['id'], {'description': 'before Friday'})['data']
        self.assertEqual(updated['description'], 'before Friday')
        self.assertEqual(updated['priority'], 'high')

        self.ctx.todos.create({'title': 'Batch todo', 'batchId': self.batch['id']})
        self.assertEqual([row['title'] for row in self.ctx.todos.get_all(self.batch['id'])['data']], ['Batch todo'])


class WeeklyPlanRepositoryTests(RepositoryTestCase):
    @freeze_time('2026-03-05 06:00:00')
    def test_current_week_uses_monday(self):
        self.assertEqual(self.ctx.weekly_plans.get_current(self.batch['id']), {'data': None})
        self.ctx.weekly_plans.upsert(self.batch['id'], '2026-03-02', {'dayTopics': {'monday': 'Algebra'}})
        current = self.ctx.weekly_plans.get_current(self.batch['id'])['data']
        self.assertEqual(current['weekStart'], '2026-03-02')
        self.assertEqual(current['dayTopics'], {'monday': 'Algebra'})

    def test_upsert_updates_existing_week(self):
        first = self.ctx.weekly_plans.upsert(self.batch['id'], '2026-03-02', {'dayTopics': {'monday': 'A'}})['data']
        second = self.ctx.weekly_plans.upsert(self.batch['id'], '2026-03-02', {'dayTopics': {'monday': 'B'}})['data']
        self.assertEqual(first['id'], second['id'])
        plans = self.ctx.weekly_plans.get_all(self.batch['id'])['data']
        self.assertEqual(len(plans), 1)
        self.assertEqual(plans[0]['dayTopics'], {'monday': 'B'})

    def test_upsert_mid_week_date_lands_on_monday(self):
        self.ctx.weekly_plans.upsert(self.batch['id'], '2026-03-04', {'dayTopics': {'monday': 'A'}})
        self.ctx.weekly_plans.upsert(self.batch['id'], '2026-03-02', {'dayTopics': {'monday': 'B'}})
        plans = self.ctx.weekly_plans.get_all(self.batch['id'])['data']
        self.assertEqual(
            [(plan['weekStart'], plan['dayTopics']) for plan in plans],
            [('2026-03-02', {'monday': 'B'})],
        )

    def test_create_stores_monday_of_given_week(self):
        plan = self.ctx.weekly_plans.create({'batchId': self.batch['id'], 'weekStart': '2026-03-08'})['data']
        self.assertEqual(plan['weekStart'], '2026-03-02')

    def test_duplicate_week_create_conflicts(self):
        self.ctx.weekly_plans.create({'batchId': self.batch['id'], 'weekStart': '2026-03-02'})
        with self.assertRaises(StorageError) as ctx:
            self.ctx.weekly_plans.create({'batchId': self.batch['id'], 'weekStart': '2026-03-02'})
        self.assertEqual(ctx.exception.code, UNIQUE_VIOLATION_CODE)

    def test_mark_complete(self):
        plan = self.ctx.weekly_plans.upsert(self.batch['id'], '2026-03-09', {})['data']
        self.assertTrue(self.ctx.weekly_plans.mark_complete(plan['id'])['data']['completed'])


class ExitAndDashboardRepositoryTests(RepositoryTestCase):
    def test_exit_stats(self):
        for exit_type in ('kicked', 'left', 'left'):
            self.ctx.student_exits.create({'studentId': 's', 'studentName': 'S', 'exitType': exit_type, 'reason': ''})
        self.assertEqual(self.ctx.student_exits.get_stats()['data'], {'total': 3, 'kicked': 1, 'left': 2})
        self.assertIsNone(self.ctx.student_exits.get_all()['data'][0]['reason'])

    @freeze_time('2026-03-05 06:00:00')
    def test_dashboard_stats(self):
        asha = self.add_student('Asha')
        bina = self.add_student('Bina')
        self.ctx.attendance.mark_single(student_id=asha['id'], batch_id=self.batch['id'], date='2026-03-05', status='present')
        self.ctx.attendance.mark_single(student_id=bina['id'], batch_id=self.batch['id'], date='2026-03-05', status='late')
        self.ctx.attendance.mark_single(student_id=bina['id'], batch_id=self.batch['id'], date='2026-03-04', status='present')
        dashboard = self.ctx.dashboard
        self.assertEqual(dashboard.count('students'), 2)
        self.assertEqual(dashboard.count('batches'), 1)
        self.assertEqual(dashboard.count('academies'), 1)
        self.assertEqual(dashboard.today_attendance(),{'present': 1, 'total': 2, 'percentage': 50.0})


if __name__ == '__main__':
    unittest.main()
