import unittest

from academy_dashboard.services.aggregation_service import (
    attendance_band,
    attendance_percent,
    exit_stats,
    monthly_exit_breakdown,
    rank_leaderboard,
    round_half_up,
    student_analytics_stats,
    summarize_attendance,
    syllabus_progress,
    today_attendance_summary,
)


class LeaderboardTests(unittest.TestCase):
    def test_percentage_is_weighted_by_total_marks(self):
        rows = [
            {'student_id': 'a', 'marks': 10, 'total_marks': 10},
            {'student_id': 'a', 'marks': 120, 'total_marks': 140},
            {'student_id': 'b', 'marks': 45, 'total_marks': 50},
        ]
        board = rank_leaderboard(rows, {'a': 'Asha', 'b': 'Bina'})
        self.assertEqual([entry['studentId'] for entry in board], ['b', 'a'])
        self.assertAlmostEqual(board[0]['percentage'], 90.0)
        self.assertAlmostEqual(board[1]['percentage'], 130 / 150 * 100)
        self.assertEqual(board[1]['testCount'], 2)
        self.assertEqual(board[1]['_id'], 'a')

    def test_ties_keep_first_seen_order_and_unknown_names(self):
        rows = [
            {'student_id': 'x', 'marks': 5, 'total_marks': 10},
            {'student_id': 'y', 'marks': 1, 'total_marks': 2},
        ]
        board = rank_leaderboard(rows, {'y': 'Yash'})
        self.assertEqual([entry['studentId'] for entry in board], ['x', 'y'])
        self.assertEqual(board[0]['studentName'], 'Unknown')

    def test_zero_total_marks_yields_zero_percent(self):
        board = rank_leaderboard([{'student_id': 'z', 'marks': 0, 'total_marks': 0}], {})
        self.assertEqual(board[0]['percentage'], 0.0)
        self.assertEqual(rank_leaderboard([], {}), [])


class AttendanceAggregationTests(unittest.TestCase):
    def test_round_half_up(self):
        self.assertEqual(round_half_up(2.5), 3)
        self.assertEqual(round_half_up(66.666), 67)
        self.assertEqual(round_half_up(0.49), 0)

    def test_summarize_attendance(self):
        records = [{'status': 'present'}, {'status': 'present'}, {'status': 'absent'}, {'status': 'late'}]
        self.assertEqual(
            summarize_attendance(records),
            {'present': 2, 'absent': 1, 'late': 1, 'total': 4, 'percentage': 50},
        )
        self.assertEqual(summarize_attendance([])['percentage'], 0)

    def test_attendance_percent_counts_late_as_attended(self):
        self.assertEqual(attendance_percent([{'status': 'present'}, {'status': 'late'}, {'status': 'absent'}]), 67)
        self.assertIsNone(attendance_percent([]))

    def test_today_summary_keeps_fraction(self):
        summary = today_attendance_summary([{'status': 'present'}, {'status': 'absent'}, {'status': 'late'}])
        self.assertEqual(summary['present'], 1)
        self.assertEqual(summary['total'], 3)
        self.assertAlmostEqual(summary['percentage'], 100 / 3)

    def test_bands(self):
        self.assertEqual(attendance_band(80), 'high')
        self.assertEqual(attendance_band(79), 'medium')
        self.assertEqual(attendance_band(60), 'medium')
        self.assertEqual(attendance_band(59), 'low')
        self.assertEqual(attendance_band(None), 'none')

    def test_student_analytics_stats(self):
        students = [{'attendancePercent': 90}, {'attendancePercent': 70}, {'attendancePercent': 10}, {'attendancePercent': None}]
        self.assertEqual(
            student_analytics_stats(students),
            {'total': 4, 'highAttendance': 1, 'lowAttendance': 1, 'noAttendance': 1},
        )


class ExitAndSyllabusTests(unittest.TestCase):
    def test_exit_stats(self):
        rows = [{'exit_type': 'kicked'}, {'exitType': 'left'}, {'exit_type': 'left'}]
        self.assertEqual(exit_stats(rows), {'total': 3, 'kicked': 1, 'left': 2})

    def test_monthly_breakdown_groups_by_month(self):
        rows = [
            {'exitDate': '2026-01-05T10:00:00', 'exitType': 'left'},
            {'exitDate': '2026-01-20T10:00:00Z', 'exitType': 'kicked'},
            {'exitDate': '2026-02-01T00:00:00', 'exitType': 'left'},
        ]
        self.assertEqual(
            monthly_exit_breakdown(rows),
            [
                {'month': 'Jan 2026', 'kicked': 1, 'left': 1},
                {'month': 'Feb 2026', 'kicked': 0, 'left': 1},
            ],
        )

    def test_syllabus_progress_guards_empty_pool(self):
        self.assertEqual(syllabus_progress([]), {'total': 0, 'completed': 0, 'percentage': 0})
        rows = [{'completed': True}, {'completed': False}, {'completed': True}]
        self.assertEqual(syllabus_progress(rows), {'total': 3, 'completed': 2, 'percentage': 67})


if __name__ == '__main__':
    unittest.main()
