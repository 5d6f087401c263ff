from datetime import timedelta
from pathlib import Path
import sys


# Ensure imports work when running this file directly: `python scripts/init_db.py`.
ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from academy_dashboard.context import AppContext
from academy_dashboard.db import Base, engine
from academy_dashboard.services.session_store import MemoryStorage


Base.metadata.create_all(bind=engine)

ctx = AppContext.build(engine, storage=MemoryStorage())
if not ctx.academies.get_all()['data']:
    today = ctx.time_provider.today()
    ctx.auth.register(name='Admin', email='admin@academy.local', password='admin123', role='admin')
    academy = ctx.academies.create({'name': 'Sunrise Academy', 'description': 'Sample academy'})['data']
    batch = ctx.batches.create(
        {'academyId': academy['id'], 'name': 'Batch A', 'schedule': 'Mon-Fri 07:00', 'subjects': ['Maths', 'Physics']}
    )['data']

    students = [
        ctx.students.create({'name': name, 'guardianPhone': phone, 'batchIds': [batch['id']]})['data']
        for name, phone in (('Aarav', '9999990001'), ('Diya', '9999990002'), ('Ishaan', '9999990003'))
    ]
    ctx.attendance.mark_bulk(
        batch_id=batch['id'],
        date=today,
        records=[{'studentId': s['id'], 'status': 'present'} for s in students],
    )
    for offset, student in enumerate(students):
        ctx.results.create(
            {
                'studentId': student['id'],
                'batchId': batch['id'],
                'subject': 'Maths',
                'testName': 'Unit Test 1',
                'marks': 70 + offset * 10,
                'totalMarks': 100,
                'testDate': (today - timedelta(days=7)).isoformat(),
            }
        )
    for order, title in enumerate(('Algebra', 'Trigonometry', 'Calculus')):
        ctx.syllabus.create({'batchId': batch['id'], 'subject': 'Maths', 'title': title, 'sortOrder': order})

print('DB initialized with sample data.')
