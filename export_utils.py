"""
=============================================================================
Export Utilities for the Student Records Store
=============================================================================

Utilities to export store records to CSV, JSON and Excel, and to flatten
GPA statistics for reporting.

CSV output is written line by line with no quoting or escaping, so a
comma inside a text field shifts the columns of that row.

Date: 2026-10-19
Version: 1.0
=============================================================================
"""

import json
import logging
from typing import Dict, Any, Optional

import pandas as pd

from models import CSV_HEADER, GPA_BANDS, GpaStatistics
from record_store import RecordStore, StoreIOError

logger = logging.getLogger('export_utils')


def export_students_csv(store: RecordStore, output_file: str = 'students_export.csv') -> int:
    """
    Export all records to a comma separated file.

    Header row first, then one row per record in store order.

    Args:
        store: Record store to read
        output_file: Output CSV file path

    Returns:
        Number of records exported
    """
    count = 0
    try:
        with open(output_file, 'w', encoding='utf-8', newline='') as f:
            f.write(','.join(CSV_HEADER) + '\n')
            for record in store.scan_all():
                f.write(record.to_csv_row() + '\n')
                count += 1
    except OSError as e:
        logger.error(f"Cannot write CSV export {output_file}: {e}")
        raise StoreIOError(f"Cannot write {output_file}: {e}") from e

    logger.info(f"Exported {count} student records to {output_file}")
    return count


def export_students_json(store: RecordStore, output_file: str = 'students_export.json') -> int:
    """
    Export all records to a JSON array of objects.

    Args:
        store: Record store to read
        output_file: Output JSON file path

    Returns:
        Number of records exported
    """
    export_data = [record.to_dict() for record in store.scan_all()]

    try:
        with open(output_file, 'w', encoding='utf-8') as f:
            json.dump(export_data, f, indent=2, ensure_ascii=False)
    except OSError as e:
        logger.error(f"Cannot write JSON export {output_file}: {e}")
        raise StoreIOError(f"Cannot write {output_file}: {e}") from e

    logger.info(f"Exported {len(export_data)} student records to {output_file}")
    return len(export_data)


def export_students_excel(store: RecordStore, output_file: str = 'students_export.xlsx') -> int:
    """
    Export all records to an Excel workbook with auto-sized columns.

    Args:
        store: Record store to read
        output_file: Output .xlsx file path

    Returns:
        Number of records exported
    """
    rows = [
        [r.roll_no, r.name, r.department, r.course, r.year_joined, round(r.gpa, 2)]
        for r in store.scan_all()
    ]
    df = pd.DataFrame(rows, columns=CSV_HEADER)

    try:
        with pd.ExcelWriter(output_file, engine='openpyxl') as writer:
            df.to_excel(writer, index=False, sheet_name='Students')

            # Auto-adjust column widths
            worksheet = writer.sheets['Students']
            for column in worksheet.columns:
                column_letter = column[0].column_letter
                max_length = max(len(str(cell.value)) for cell in column if cell.value is not None)
                worksheet.column_dimensions[column_letter].width = min(max_length + 2, 50)
    except OSError as e:
        logger.error(f"Cannot write Excel export {output_file}: {e}")
        raise StoreIOError(f"Cannot write {output_file}: {e}") from e

    logger.info(f"Exported {len(df)} student records to {output_file}")
    return len(df)


EXPORTERS = {
    'csv': export_students_csv,
    'json': export_students_json,
    'xlsx': export_students_excel,
}


def statistics_to_dict(stats: Optional[GpaStatistics]) -> Dict[str, Any]:
    """
    Flatten GPA statistics for printing or JSON output.

    Args:
        stats: Result of RecordStore.aggregate(), None for an empty store

    Returns:
        Dictionary of report values; {'total_students': 0} when empty
    """
    if stats is None:
        return {'total_students': 0}

    result = {
        'total_students': stats.count,
        'average_gpa': round(stats.average_gpa, 2),
        'highest_gpa': round(stats.highest_gpa, 2),
        'top_performer': stats.top_student,
        'lowest_gpa': round(stats.lowest_gpa, 2),
        'needs_improvement': stats.weakest_student,
    }
    for key, label, _lower in GPA_BANDS:
        result[label] = stats.distribution.get(key, 0)

    return result
