"""
=============================================================================
Flat-File Record Store for Student Records
=============================================================================

Keeps StudentRecord entries as fixed-size binary records in one file:
1. Append: duplicate-checked write at the end of the file
2. Scan: linear read from start to end, one record per fixed-size chunk
3. Update: seek-and-overwrite at the record's original byte offset
4. Delete: rebuild into a temporary file, then atomically swap it in

Every operation opens the file for its own duration only. No index or
cache outlives a call, so the file is always the complete dataset.

Usage:
    from record_store import RecordStore
    store = RecordStore('students.dat')
    store.append(StudentRecord(101, 'Asha Rao', 'CS', 'BTech', 2022, 3.6))

Date: 2026-10-19
Version: 1.0
=============================================================================
"""

import os
import logging
import tempfile
from typing import Iterator, Optional, Tuple

from models import (
    RECORD_SIZE, GPA_MIN, GPA_MAX, GPA_BANDS,
    DEPARTMENT_SIZE, COURSE_SIZE, NAME_SIZE,
    StudentRecord, GpaStatistics, UpdateOutcome,
    text_fits, year_in_range, gpa_in_range, gpa_band,
)


class StoreError(Exception):
    """Base class for record store failures"""


class DuplicateKeyError(StoreError):
    """Roll number already present in the store"""

    def __init__(self, roll_no: int):
        super().__init__(f"Roll number {roll_no} already exists")
        self.roll_no = roll_no


class NotFoundError(StoreError):
    """Roll number not present in the store"""

    def __init__(self, roll_no: int):
        super().__init__(f"Student with roll number {roll_no} not found")
        self.roll_no = roll_no


class StoreIOError(StoreError):
    """File open/read/write/rename failure"""


def _write_all(fd: int, data: bytes) -> None:
    """Write every byte or raise OSError"""
    view = memoryview(data)
    while view:
        written = os.write(fd, view)
        if written == 0:
            raise OSError(f"write made no progress ({len(view)} bytes left)")
        view = view[written:]


class RecordStore:
    """
    Student records backed by a flat binary file.

    Single-process, single-threaded use only; the file is not locked.
    """

    def __init__(self, path: str = 'students.dat'):
        """
        Initialize the store.

        Args:
            path: Path to the binary store file (created on first append)
        """
        self.path = path
        self.logger = logging.getLogger('RecordStore')

    def exists(self) -> bool:
        return os.path.exists(self.path)

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def _scan_with_offsets(self) -> Iterator[Tuple[StudentRecord, int]]:
        try:
            f = open(self.path, 'rb')
        except FileNotFoundError:
            self.logger.debug(f"Store file {self.path} does not exist yet")
            return
        except OSError as e:
            self.logger.error(f"Cannot open {self.path}: {e}")
            raise StoreIOError(f"Cannot open {self.path}: {e}") from e

        with f:
            offset = 0
            while True:
                try:
                    chunk = f.read(RECORD_SIZE)
                except OSError as e:
                    self.logger.error(f"Read failed at offset {offset}: {e}")
                    raise StoreIOError(f"Read failed at offset {offset}: {e}") from e
                if len(chunk) < RECORD_SIZE:
                    if chunk:
                        self.logger.warning(
                            f"Ignoring {len(chunk)} trailing bytes at offset {offset}"
                        )
                    break
                yield StudentRecord.unpack(chunk), offset
                offset += RECORD_SIZE

    def scan_all(self) -> Iterator[StudentRecord]:
        """
        Iterate over every record in file order.

        A missing store file yields nothing. A partial trailing chunk is
        treated as end of data. Each call starts a fresh scan.

        Raises:
            StoreIOError: If an existing file cannot be read
        """
        for record, _offset in self._scan_with_offsets():
            yield record

    def find_by_roll(self, roll_no: int) -> Optional[Tuple[StudentRecord, int]]:
        """
        Find the first record with the given roll number.

        Returns:
            (record, byte_offset) or None if absent
        """
        for record, offset in self._scan_with_offsets():
            if record.roll_no == roll_no:
                return record, offset
        return None

    def count(self) -> int:
        return sum(1 for _ in self.scan_all())

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def append(self, record: StudentRecord) -> None:
        """
        Append a new record to the end of the store.

        Args:
            record: Record to add; validated before anything is written

        Raises:
            ValidationError: If a field is out of its domain
            DuplicateKeyError: If the roll number is already stored
            StoreIOError: If the file cannot be opened or written
        """
        record.validate()

        if self.find_by_roll(record.roll_no) is not None:
            self.logger.warning(f"Rejected duplicate roll number {record.roll_no}")
            raise DuplicateKeyError(record.roll_no)

        data = record.pack()
        try:
            fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | getattr(os, 'O_BINARY', 0), 0o644)
        except OSError as e:
            self.logger.error(f"Cannot open {self.path} for append: {e}")
            raise StoreIOError(f"Cannot open {self.path} for append: {e}") from e

        start = None
        try:
            size = os.fstat(fd).st_size
            # Records must start on a record boundary
            start = size - size % RECORD_SIZE
            if start != size:
                self.logger.warning(f"Dropping {size - start} trailing bytes at offset {start}")
                os.ftruncate(fd, start)
            os.lseek(fd, start, os.SEEK_SET)
            _write_all(fd, data)
        except OSError as e:
            self.logger.error(f"Append of roll number {record.roll_no} failed: {e}")
            if start is not None:
                self._truncate_to(fd, start)
            raise StoreIOError(f"Failed to save roll number {record.roll_no}: {e}") from e
        finally:
            try:
                os.close(fd)
            except OSError as e:
                self.logger.error(f"Cannot close {self.path}: {e}")
                raise StoreIOError(f"Cannot close {self.path}: {e}") from e

        self.logger.info(f"Added roll number {record.roll_no} ({record.name}) at offset {start}")

    def _truncate_to(self, fd: int, size: int) -> None:
        """Drop any partial record bytes past size"""
        try:
            os.ftruncate(fd, size)
        except OSError as e:
            self.logger.error(f"Could not truncate {self.path} back to {size} bytes: {e}")

    def update_by_roll(self, roll_no: int, name: Optional[str] = None,
                       department: Optional[str] = None, course: Optional[str] = None,
                       year_joined: Optional[int] = None,
                       gpa: Optional[float] = None) -> UpdateOutcome:
        """
        Overwrite selected fields of a record in place.

        A None argument leaves that field unchanged. Changes that fall
        outside the field's domain are discarded individually and the
        old value is kept; the remaining changes still apply.

        Returns:
            UpdateOutcome with the stored record and any discarded fields

        Raises:
            NotFoundError: If no record has this roll number
            StoreIOError: If the seek/write fails
        """
        found = self.find_by_roll(roll_no)
        if found is None:
            raise NotFoundError(roll_no)
        current, offset = found

        updated = StudentRecord(**current.to_dict())
        ignored = []

        if name is not None:
            if text_fits(name, NAME_SIZE) and name.strip():
                updated.name = name
            else:
                ignored.append('name')
        if department is not None:
            if text_fits(department, DEPARTMENT_SIZE):
                updated.department = department
            else:
                ignored.append('department')
        if course is not None:
            if text_fits(course, COURSE_SIZE):
                updated.course = course
            else:
                ignored.append('course')
        if year_joined is not None:
            if year_in_range(year_joined):
                updated.year_joined = year_joined
            else:
                ignored.append('year_joined')
        if gpa is not None:
            if gpa_in_range(gpa):
                updated.gpa = gpa
            else:
                ignored.append('gpa')

        for field_name in ignored:
            self.logger.warning(f"Roll number {roll_no}: discarded out-of-range {field_name} change")

        data = updated.pack()
        try:
            with open(self.path, 'r+b') as f:
                f.seek(offset)
                written = f.write(data)
                if written != len(data):
                    raise OSError(f"short write ({written} of {len(data)} bytes)")
        except OSError as e:
            self.logger.error(f"Update of roll number {roll_no} failed: {e}")
            raise StoreIOError(f"Update of roll number {roll_no} failed: {e}") from e

        self.logger.info(f"Updated roll number {roll_no} at offset {offset}")
        return UpdateOutcome(record=updated, ignored_fields=ignored)

    def delete_by_roll(self, roll_no: int) -> StudentRecord:
        """
        Remove a record by rebuilding the store without it.

        Surviving records keep their relative order. The rebuilt file
        replaces the original with os.replace (atomic rename-over).

        Returns:
            The deleted record

        Raises:
            NotFoundError: If no record has this roll number (file untouched)
            StoreIOError: If the rebuild or the swap fails
        """
        found = self.find_by_roll(roll_no)
        if found is None:
            raise NotFoundError(roll_no)
        deleted, _offset = found

        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            fd, temp_path = tempfile.mkstemp(
                prefix=os.path.basename(self.path) + '.', suffix='.tmp', dir=directory
            )
        except OSError as e:
            self.logger.error(f"Cannot create temporary file in {directory}: {e}")
            raise StoreIOError(f"Cannot create temporary file: {e}") from e

        kept = 0
        try:
            with os.fdopen(fd, 'wb') as temp:
                for record in self.scan_all():
                    if record.roll_no != roll_no:
                        temp.write(record.pack())
                        kept += 1
                temp.flush()
                os.fsync(temp.fileno())
        except (OSError, StoreIOError) as e:
            self.logger.error(f"Rebuild for delete of roll number {roll_no} failed: {e}")
            self._discard_temp(temp_path)
            raise StoreIOError(f"Rebuild failed, original file left untouched: {e}") from e

        try:
            os.replace(temp_path, self.path)
        except OSError as e:
            self.logger.error(f"Cannot replace {self.path} with {temp_path}: {e}")
            raise StoreIOError(
                f"Cannot replace {self.path}; rebuilt data left in {temp_path}: {e}"
            ) from e

        self.logger.info(f"Deleted roll number {roll_no}; {kept} record(s) remain")
        return deleted

    def _discard_temp(self, temp_path: str) -> None:
        try:
            os.remove(temp_path)
        except OSError as e:
            self.logger.warning(f"Could not remove temporary file {temp_path}: {e}")

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def aggregate(self) -> Optional[GpaStatistics]:
        """
        Compute GPA statistics in one scan.

        Ties for highest/lowest keep the first record seen in file order.

        Returns:
            GpaStatistics, or None when the store holds no records
        """
        count = 0
        total = 0.0
        highest, top_student = GPA_MIN, ''
        lowest, weakest_student = GPA_MAX, ''
        distribution = {key: 0 for key, _label, _lower in GPA_BANDS}

        for record in self.scan_all():
            if count == 0:
                highest, top_student = record.gpa, record.name
                lowest, weakest_student = record.gpa, record.name
            else:
                if record.gpa > highest:
                    highest, top_student = record.gpa, record.name
                if record.gpa < lowest:
                    lowest, weakest_student = record.gpa, record.name
            count += 1
            total += record.gpa
            distribution[gpa_band(record.gpa)] += 1

        if count == 0:
            return None

        return GpaStatistics(
            count=count,
            average_gpa=total / count,
            highest_gpa=highest,
            top_student=top_student,
            lowest_gpa=lowest,
            weakest_student=weakest_student,
            distribution=distribution,
        )
