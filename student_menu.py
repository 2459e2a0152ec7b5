"""
=============================================================================
Interactive Menu for the Student Records Store
=============================================================================

Numbered text menu over a RecordStore:
1. Add New Student
2. Display All Students
3. Search Student
4. Update Student Details
5. Delete Student
6. View Statistics
7. Export Records (CSV / JSON / Excel)
8. Exit

All store errors are caught per action and reported; control always
returns to the menu.

Date: 2026-10-19
Version: 1.0
=============================================================================
"""

import os
import logging
from typing import Callable, Optional

from models import (
    StudentRecord, ValidationError, GPA_BANDS,
    YEAR_MIN, YEAR_MAX, GPA_MIN, GPA_MAX,
)
from record_store import RecordStore, StoreError
from export_utils import EXPORTERS, statistics_to_dict


MENU_ITEMS = [
    'Add New Student',
    'Display All Students',
    'Search Student',
    'Update Student Details',
    'Delete Student',
    'View Statistics',
    'Export Records',
    'Exit',
]

TABLE_RULE = '-' * 96


def parse_int(text: str) -> Optional[int]:
    try:
        return int(text.strip())
    except ValueError:
        return None


def parse_float(text: str) -> Optional[float]:
    try:
        return float(text.strip())
    except ValueError:
        return None


def format_row(record: StudentRecord) -> str:
    return (f"{record.roll_no:<8} {record.name:<30} {record.department:<15} "
            f"{record.course:<20} {record.year_joined:>4}  {record.gpa:.2f}")


def format_details(record: StudentRecord) -> str:
    return '\n'.join([
        f"  Roll Number : {record.roll_no}",
        f"  Name        : {record.name}",
        f"  Department  : {record.department}",
        f"  Course      : {record.course}",
        f"  Year Joined : {record.year_joined}",
        f"  GPA         : {record.gpa:.2f}",
    ])


class StudentMenu:
    """
    Interactive front end for a RecordStore.
    """

    def __init__(self, store: RecordStore, output_dir: str = '.',
                 input_fn: Callable[[str], str] = input):
        """
        Initialize the menu.

        Args:
            store: Record store to operate on
            output_dir: Directory for export files
            input_fn: Line reader (replaced in tests)
        """
        self.store = store
        self.output_dir = output_dir
        self.input_fn = input_fn
        self.logger = logging.getLogger('StudentMenu')

        self.actions = {
            1: self.add_student,
            2: self.display_all,
            3: self.search_student,
            4: self.update_student,
            5: self.delete_student,
            6: self.display_statistics,
            7: self.export_records,
        }

    def ask(self, prompt: str) -> str:
        return self.input_fn(prompt)

    def ask_int(self, prompt: str, retry_prompt: str,
                valid: Callable[[int], bool] = lambda v: True) -> int:
        """Keep asking until a valid integer is entered"""
        value = parse_int(self.ask(prompt))
        while value is None or not valid(value):
            value = parse_int(self.ask(retry_prompt))
        return value

    def ask_float(self, prompt: str, retry_prompt: str,
                  valid: Callable[[float], bool] = lambda v: True) -> float:
        value = parse_float(self.ask(prompt))
        while value is None or not valid(value):
            value = parse_float(self.ask(retry_prompt))
        return value

    def show_menu(self):
        print()
        print("=" * 50)
        print("MAIN MENU")
        print("=" * 50)
        for idx, item in enumerate(MENU_ITEMS, 1):
            print(f"  {idx}. {item}")
        print("=" * 50)

    def run(self):
        """Menu loop; returns when the user picks Exit or input ends"""
        print()
        print("=" * 50)
        print("     STUDENT MANAGEMENT SYSTEM v1.0")
        print("=" * 50)
        print(f"Database file: {os.path.abspath(self.store.path)}")

        while True:
            self.show_menu()
            try:
                choice = parse_int(self.ask("Enter your choice: "))
            except EOFError:
                print()
                break

            if choice == len(MENU_ITEMS):
                print()
                print("Thank you for using the Student Management System!")
                print()
                break

            action = self.actions.get(choice)
            if action is None:
                print(f"\n⚠ Invalid choice! Please select 1-{len(MENU_ITEMS)}.")
                continue

            self.logger.debug(f"Menu choice {choice}: {MENU_ITEMS[choice - 1]}")
            try:
                action()
            except (StoreError, ValidationError) as e:
                self.logger.warning(f"{MENU_ITEMS[choice - 1]} failed: {e}")
                print(f"\n⚠ Error: {e}")
            except EOFError:
                print()
                break

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def add_student(self):
        print()
        print("-" * 50)
        print("ADD NEW STUDENT")
        print("-" * 50)

        roll_no = self.ask_int(
            "\nEnter Roll Number: ",
            "⚠ Please enter a valid positive number: ",
            lambda v: v > 0,
        )

        # Early duplicate check so the user is not asked for everything else
        if self.store.find_by_roll(roll_no) is not None:
            print(f"\n⚠ Error: Roll number {roll_no} already exists!")
            return

        name = self.ask("Enter Name: ").strip()
        if not name:
            print("\n⚠ Error: Name cannot be empty!")
            return

        department = self.ask("Enter Department (CS/EE/ME/CE/Other): ").strip()
        course = self.ask("Enter Course: ").strip()
        year_joined = self.ask_int(
            f"Enter Year of Joining ({YEAR_MIN}-{YEAR_MAX}): ",
            f"⚠ Please enter a valid year ({YEAR_MIN}-{YEAR_MAX}): ",
            lambda v: YEAR_MIN <= v <= YEAR_MAX,
        )
        gpa = self.ask_float(
            f"Enter GPA ({GPA_MIN}-{GPA_MAX}): ",
            f"⚠ Please enter a valid GPA ({GPA_MIN}-{GPA_MAX}): ",
            lambda v: GPA_MIN <= v <= GPA_MAX,
        )

        record = StudentRecord(roll_no, name, department, course, year_joined, gpa)
        self.store.append(record)

        print(f"\n✓ Student added successfully! Roll Number {roll_no} has been registered.")

    def display_all(self):
        if not self.store.exists():
            print("\n⚠ No records found! Database is empty. Add some students first.")
            return

        print()
        print(TABLE_RULE)
        print(f"{'Roll #':<8} {'Name':<30} {'Department':<15} {'Course':<20} {'Year':>4}  GPA")
        print(TABLE_RULE)
        count = 0
        for record in self.store.scan_all():
            print(format_row(record))
            count += 1
        print(TABLE_RULE)
        print(f"\nTotal Students: {count}")

    def search_student(self):
        roll_no = parse_int(self.ask("\nEnter Roll Number to search: "))
        if roll_no is None:
            print("\n⚠ Invalid input!")
            return

        found = self.store.find_by_roll(roll_no)
        if found is None:
            print(f"\n⚠ Student with Roll Number {roll_no} not found!")
            return

        record, _offset = found
        print()
        print("✓ STUDENT FOUND!")
        print(format_details(record))

    def update_student(self):
        roll_no = parse_int(self.ask("\nEnter Roll Number to update: "))
        if roll_no is None:
            print("\n⚠ Invalid input!")
            return

        found = self.store.find_by_roll(roll_no)
        if found is None:
            print(f"\n⚠ Student with Roll Number {roll_no} not found!")
            return
        current, _offset = found

        print("\nCurrent Details:")
        print(format_details(current))
        print("\nEnter new details (press Enter to keep current):\n")

        changes = {}
        name = self.ask(f"New Name [{current.name}]: ").strip()
        if name:
            changes['name'] = name
        department = self.ask(f"New Department [{current.department}]: ").strip()
        if department:
            changes['department'] = department
        course = self.ask(f"New Course [{current.course}]: ").strip()
        if course:
            changes['course'] = course

        # Unparseable numbers count as "no change"
        year_text = self.ask(f"New Year [{current.year_joined}]: ").strip()
        if year_text:
            year_joined = parse_int(year_text)
            if year_joined is None:
                print("⚠ Year not a number, keeping current value")
            else:
                changes['year_joined'] = year_joined
        gpa_text = self.ask(f"New GPA [{current.gpa:.2f}]: ").strip()
        if gpa_text:
            gpa = parse_float(gpa_text)
            if gpa is None:
                print("⚠ GPA not a number, keeping current value")
            else:
                changes['gpa'] = gpa

        outcome = self.store.update_by_roll(roll_no, **changes)
        for field_name in outcome.ignored_fields:
            print(f"⚠ Invalid {field_name}, keeping current value")
        print("\n✓ Student record updated successfully!")

    def delete_student(self):
        roll_no = parse_int(self.ask("\nEnter Roll Number to delete: "))
        if roll_no is None:
            print("\n⚠ Invalid input!")
            return

        found = self.store.find_by_roll(roll_no)
        if found is None:
            print(f"\n⚠ Student with Roll Number {roll_no} not found!")
            return
        record, _offset = found

        print("\nStudent to Delete:")
        print(format_details(record))
        confirm = self.ask("\n⚠ Are you sure you want to delete this student? (y/n): ").strip()
        if confirm.lower() != 'y':
            print("\n✓ Deletion cancelled.")
            return

        self.store.delete_by_roll(roll_no)
        print("\n✓ Student deleted successfully!")

    def display_statistics(self):
        stats = self.store.aggregate()
        if stats is None:
            print("\n⚠ No students in database!")
            return

        report = statistics_to_dict(stats)
        print()
        print("=" * 50)
        print("DATABASE STATISTICS")
        print("=" * 50)
        print(f"  Total Students    : {report['total_students']}")
        print(f"  Average GPA       : {report['average_gpa']:.2f}")
        print(f"  Highest GPA       : {report['highest_gpa']:.2f}")
        print(f"  Top Performer     : {report['top_performer']}")
        print(f"  Lowest GPA        : {report['lowest_gpa']:.2f}")
        print(f"  Needs Improvement : {report['needs_improvement']}")
        print("=" * 50)
        print("\nGPA Distribution:")
        for _key, label, _lower in GPA_BANDS:
            print(f"   {label:<20}: {report[label]} students")

    def export_records(self):
        if self.store.count() == 0:
            print("\n⚠ No data to export!")
            return

        fmt = self.ask("\nExport format (csv/json/xlsx) [csv]: ").strip().lower() or 'csv'
        exporter = EXPORTERS.get(fmt)
        if exporter is None:
            print(f"\n⚠ Unknown format: {fmt}")
            return

        output_file = os.path.join(self.output_dir, f'students_export.{fmt}')
        count = exporter(self.store, output_file)
        print(f"\n✓ Export Successful! {count} records exported to {output_file}")
