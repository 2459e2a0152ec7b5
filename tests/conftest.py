import pytest

from models import StudentRecord
from record_store import RecordStore


@pytest.fixture
def store(tmp_path):
    return RecordStore(str(tmp_path / 'students.dat'))


@pytest.fixture
def sample_records():
    return [
        StudentRecord(1, 'Asha Rao', 'CS', 'BTech', 2021, 3.9),
        StudentRecord(2, 'Bilal Khan', 'EE', 'BTech', 2020, 2.1),
        StudentRecord(3, 'Chen Wei', 'ME', 'MTech', 2023, 3.4),
        StudentRecord(4, 'Dana Ortiz', '', '', 2025, 0.5),
    ]


@pytest.fixture
def filled_store(store, sample_records):
    for record in sample_records:
        store.append(record)
    return store


def scripted_input(lines):
    """Input function that replays lines, then behaves like end of input"""
    remaining = list(lines)

    def _input(prompt=''):
        if not remaining:
            raise EOFError
        return remaining.pop(0)

    return _input


@pytest.fixture
def make_input():
    return scripted_input
