"""
=============================================================================
Record Models for the Student Records Store
=============================================================================

Plain data models for student records kept in a flat binary file.

Types:
- StudentRecord: One student's fixed-schema data
- GpaStatistics: Aggregate GPA figures over the whole store
- UpdateOutcome: Result of an in-place update

Binary layout (little-endian, 142 bytes per record, no header):
    roll_no      int32
    name         50 bytes, UTF-8, NUL padded
    department   50 bytes, UTF-8, NUL padded
    course       30 bytes, UTF-8, NUL padded
    year_joined  int32
    gpa          float32

Date: 2026-10-19
Version: 1.0
=============================================================================
"""

import struct
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Any


# Field capacities in bytes (one byte reserved for the terminating NUL)
NAME_SIZE = 50
DEPARTMENT_SIZE = 50
COURSE_SIZE = 30

ROLL_MAX = 2**31 - 1  # int32

YEAR_MIN = 2000
YEAR_MAX = 2025
GPA_MIN = 0.0
GPA_MAX = 4.0

RECORD_STRUCT = struct.Struct(f'<i{NAME_SIZE}s{DEPARTMENT_SIZE}s{COURSE_SIZE}sif')
RECORD_SIZE = RECORD_STRUCT.size

CSV_HEADER = ['Roll Number', 'Name', 'Department', 'Course', 'Year Joined', 'GPA']

# (key, label, lower bound inclusive), checked top to bottom
GPA_BANDS = [
    ('excellent', 'Excellent (3.5-4.0)', 3.5),
    ('good', 'Good (3.0-3.49)', 3.0),
    ('average', 'Average (2.0-2.99)', 2.0),
    ('poor', 'Poor (Below 2.0)', GPA_MIN),
]


class ValidationError(ValueError):
    """Raised when a field value falls outside its domain"""

    def __init__(self, field_name: str, message: str):
        super().__init__(f"{field_name}: {message}")
        self.field_name = field_name


def _fit(text: str, size: int) -> bytes:
    """Encode text into a fixed NUL padded buffer, truncating if needed."""
    raw = (text or '').encode('utf-8')[:size - 1]
    # Do not leave half a multi-byte character behind
    raw = raw.decode('utf-8', errors='ignore').encode('utf-8')
    return raw.ljust(size, b'\x00')


def _unfit(raw: bytes) -> str:
    return raw.split(b'\x00', 1)[0].decode('utf-8', errors='ignore')


def text_fits(text: str, size: int) -> bool:
    """Check that text fits a field of the given capacity."""
    # NUL terminates a field on disk
    if not isinstance(text, str) or '\x00' in text:
        return False
    return len(text.encode('utf-8')) <= size - 1


def year_in_range(year: int) -> bool:
    if not isinstance(year, int) or isinstance(year, bool):
        return False
    return YEAR_MIN <= year <= YEAR_MAX


def gpa_in_range(gpa: float) -> bool:
    if not isinstance(gpa, (int, float)) or isinstance(gpa, bool):
        return False
    return GPA_MIN <= gpa <= GPA_MAX


def gpa_band(gpa: float) -> str:
    """Return the distribution band key for a GPA"""
    for key, _label, lower in GPA_BANDS:
        if gpa >= lower:
            return key
    return GPA_BANDS[-1][0]


@dataclass
class StudentRecord:
    """Student record as stored in the binary file"""
    roll_no: int
    name: str
    department: str = ''
    course: str = ''
    year_joined: int = YEAR_MIN
    gpa: float = 0.0

    def validate(self) -> None:
        """
        Check every field against its domain constraints.

        Raises:
            ValidationError: On the first field that is out of range
        """
        if (not isinstance(self.roll_no, int) or isinstance(self.roll_no, bool)
                or not 0 < self.roll_no <= ROLL_MAX):
            raise ValidationError('roll_no', 'must be a positive integer')
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValidationError('name', 'cannot be empty')
        if not text_fits(self.name, NAME_SIZE):
            raise ValidationError('name', f"at most {NAME_SIZE - 1} characters, no NUL bytes")
        if not text_fits(self.department, DEPARTMENT_SIZE):
            raise ValidationError('department', f"at most {DEPARTMENT_SIZE - 1} characters, no NUL bytes")
        if not text_fits(self.course, COURSE_SIZE):
            raise ValidationError('course', f"at most {COURSE_SIZE - 1} characters, no NUL bytes")
        if not year_in_range(self.year_joined):
            raise ValidationError('year_joined', f'must be a whole number between {YEAR_MIN} and {YEAR_MAX}')
        if not gpa_in_range(self.gpa):
            raise ValidationError('gpa', f'must be a number between {GPA_MIN} and {GPA_MAX}')

    def pack(self) -> bytes:
        """Serialize to the fixed-width binary layout"""
        return RECORD_STRUCT.pack(
            self.roll_no,
            _fit(self.name, NAME_SIZE),
            _fit(self.department, DEPARTMENT_SIZE),
            _fit(self.course, COURSE_SIZE),
            self.year_joined,
            self.gpa,
        )

    @classmethod
    def unpack(cls, raw: bytes) -> 'StudentRecord':
        """Deserialize one fixed-width chunk"""
        roll_no, name, department, course, year_joined, gpa = RECORD_STRUCT.unpack(raw)
        return cls(
            roll_no=roll_no,
            name=_unfit(name),
            department=_unfit(department),
            course=_unfit(course),
            year_joined=year_joined,
            # float32 -> float64 noise; 6 decimals recovers the typed value
            gpa=round(gpa, 6),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_csv_row(self) -> str:
        """One comma separated line, no quoting or escaping"""
        return (f"{self.roll_no},{self.name},{self.department},{self.course},"
                f"{self.year_joined},{self.gpa:.2f}")

    def __repr__(self):
        return f"<StudentRecord(roll_no={self.roll_no}, name={self.name}, gpa={self.gpa})>"


@dataclass
class GpaStatistics:
    """Aggregate GPA figures over a non-empty store"""
    count: int
    average_gpa: float
    highest_gpa: float
    top_student: str
    lowest_gpa: float
    weakest_student: str
    distribution: Dict[str, int] = field(default_factory=dict)


@dataclass
class UpdateOutcome:
    """Updated record plus the field changes that were discarded"""
    record: StudentRecord
    ignored_fields: List[str] = field(default_factory=list)
