import os

from models import StudentRecord
from student_menu import StudentMenu


def run_menu(store, make_input, lines, output_dir='.'):
    StudentMenu(store, output_dir=output_dir, input_fn=make_input(lines)).run()


def test_add_student(store, make_input, capsys):
    run_menu(store, make_input, ['1', '101', 'Asha Rao', 'CS', 'BTech', '2022', '3.6', '8'])

    assert list(store.scan_all()) == [StudentRecord(101, 'Asha Rao', 'CS', 'BTech', 2022, 3.6)]
    assert 'Student added successfully' in capsys.readouterr().out


def test_add_reprompts_until_valid(store, make_input):
    run_menu(store, make_input, [
        '1', 'abc', '-4', '7', 'Ravi', '', '', '1999', '2030', '2005', '5', 'x', '2.5', '8',
    ])

    assert list(store.scan_all()) == [StudentRecord(7, 'Ravi', '', '', 2005, 2.5)]


def test_add_duplicate_is_refused(filled_store, make_input, capsys):
    run_menu(filled_store, make_input, ['1', '2', '8'])

    assert filled_store.count() == 4
    assert 'already exists' in capsys.readouterr().out


def test_add_empty_name_is_refused(store, make_input, capsys):
    run_menu(store, make_input, ['1', '5', '   ', '8'])

    assert not store.exists()
    assert 'Name cannot be empty' in capsys.readouterr().out


def test_overlong_name_reports_error_and_returns_to_menu(store, make_input, capsys):
    run_menu(store, make_input, ['1', '5', 'n' * 60, 'CS', 'BTech', '2020', '3.0', '8'])

    out = capsys.readouterr().out
    assert 'Error: name' in out
    assert 'Thank you' in out
    assert not store.exists()


def test_display_all(filled_store, make_input, capsys):
    run_menu(filled_store, make_input, ['2', '8'])

    out = capsys.readouterr().out
    assert 'Bilal Khan' in out
    assert 'Total Students: 4' in out


def test_display_empty(store, make_input, capsys):
    run_menu(store, make_input, ['2', '8'])
    assert 'No records found' in capsys.readouterr().out


def test_search(filled_store, make_input, capsys):
    run_menu(filled_store, make_input, ['3', '3', '3', '55', '8'])

    out = capsys.readouterr().out
    assert 'STUDENT FOUND' in out
    assert 'Chen Wei' in out
    assert 'Roll Number 55 not found' in out


def test_update_keeps_blank_fields(filled_store, make_input, capsys):
    run_menu(filled_store, make_input, ['4', '1', '', 'AI', '', '1990', '3.95', '8'])

    record = filled_store.find_by_roll(1)[0]
    assert record == StudentRecord(1, 'Asha Rao', 'AI', 'BTech', 2021, 3.95)
    assert 'Invalid year_joined' in capsys.readouterr().out


def test_update_non_numeric_gpa_is_no_change(filled_store, make_input):
    run_menu(filled_store, make_input, ['4', '2', '', '', '', '', 'high', '8'])
    assert filled_store.find_by_roll(2)[0].gpa == 2.1


def test_delete_confirmed(filled_store, make_input):
    run_menu(filled_store, make_input, ['5', '2', 'y', '8'])
    assert [r.roll_no for r in filled_store.scan_all()] == [1, 3, 4]


def test_delete_cancelled(filled_store, make_input, capsys):
    run_menu(filled_store, make_input, ['5', '2', 'n', '8'])

    assert filled_store.count() == 4
    assert 'Deletion cancelled' in capsys.readouterr().out


def test_statistics(filled_store, make_input, capsys):
    run_menu(filled_store, make_input, ['6', '8'])

    out = capsys.readouterr().out
    assert 'Total Students    : 4' in out
    assert 'Top Performer     : Asha Rao' in out
    assert 'Excellent (3.5-4.0)' in out


def test_statistics_empty(store, make_input, capsys):
    run_menu(store, make_input, ['6', '8'])
    assert 'No students in database' in capsys.readouterr().out


def test_export_default_csv(filled_store, make_input, tmp_path):
    run_menu(filled_store, make_input, ['7', '', '8'], output_dir=str(tmp_path))

    assert os.path.exists(tmp_path / 'students_export.csv')


def test_export_json(filled_store, make_input, tmp_path):
    run_menu(filled_store, make_input, ['7', 'json', '8'], output_dir=str(tmp_path))

    assert os.path.exists(tmp_path / 'students_export.json')


def test_export_empty_store(store, make_input, tmp_path, capsys):
    run_menu(store, make_input, ['7', '8'], output_dir=str(tmp_path))

    assert 'No data to export' in capsys.readouterr().out
    assert not os.path.exists(tmp_path / 'students_export.csv')


def test_invalid_choice_and_end_of_input(store, make_input, capsys):
    run_menu(store, make_input, ['9', 'abc'])
    assert 'Invalid choice' in capsys.readouterr().out
