"""
=============================================================================
Entry Point for the Student Records Store
=============================================================================

Launches the interactive menu, or runs a single export / statistics
report without prompting.

Usage:
    python run_students.py [--db FILE] [--output DIR] [--log-file NAME]
                           [--export {csv,json,xlsx}] [--stats] [--verbose]

Examples:
    python run_students.py
    python run_students.py --db class_2024.dat
    python run_students.py --export xlsx --output exports/

Date: 2026-10-19
Version: 1.0
=============================================================================
"""

import os
import sys
import logging
import argparse

from record_store import RecordStore, StoreError
from export_utils import EXPORTERS
from student_menu import StudentMenu


def setup_logging(log_file: str, verbose: bool = False):
    """Configure logging to file and console"""
    formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(message)s')
    file_handler = logging.FileHandler(log_file)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    # Console stays quiet unless asked, so it does not interleave with the menu
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO if verbose else logging.WARNING)
    console_handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    root.addHandler(file_handler)
    root.addHandler(console_handler)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Manage student records stored in a flat binary file',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Interactive menu on students.dat
  python run_students.py

  # Use a different store file
  python run_students.py --db class_2024.dat

  # Export to Excel without the menu
  python run_students.py --export xlsx --output exports/

  # Print statistics and exit
  python run_students.py --stats
        """
    )

    parser.add_argument(
        '--db',
        default='students.dat',
        help='Binary store file path (default: students.dat)'
    )

    parser.add_argument(
        '--output',
        default='.',
        help='Directory for exports and the log file (default: .)'
    )

    parser.add_argument(
        '--log-file',
        default='students.log',
        help='Log file name inside the output directory (default: students.log)'
    )

    parser.add_argument(
        '--export',
        choices=sorted(EXPORTERS),
        help='Export all records in this format and exit'
    )

    parser.add_argument(
        '--stats',
        action='store_true',
        help='Print GPA statistics and exit'
    )

    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Show informational log messages on the console'
    )

    return parser


def main(argv=None):
    """Main entry point"""
    args = build_parser().parse_args(argv)

    if not os.path.exists(args.output):
        os.makedirs(args.output)
        print(f"Created output directory: {args.output}")

    setup_logging(os.path.join(args.output, args.log_file), args.verbose)
    logger = logging.getLogger('run_students')
    logger.info(f"Store file: {os.path.abspath(args.db)}")

    store = RecordStore(args.db)

    try:
        if args.export:
            output_file = os.path.join(args.output, f'students_export.{args.export}')
            count = EXPORTERS[args.export](store, output_file)
            print(f"✓ Exported {count} records to {output_file}")
        elif args.stats:
            StudentMenu(store).display_statistics()
        else:
            StudentMenu(store, output_dir=args.output).run()

    except KeyboardInterrupt:
        print()
        print("Interrupted by user.")
        sys.exit(0)

    except StoreError as e:
        logger.error(f"Store error: {e}")
        print(f"Error: {e}")
        sys.exit(1)

    except Exception as e:
        print()
        print("=" * 80)
        print("ERROR")
        print("=" * 80)
        print()
        print(f"An error occurred: {e}")
        print()

        import traceback
        print("Traceback:")
        traceback.print_exc()
        print()

        sys.exit(1)


if __name__ == '__main__':
    main()
