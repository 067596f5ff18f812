"""
Calendar command-line entry point.

Usage:
    python scripts/run_calendar.py --mode interactive
    python scripts/run_calendar.py --mode headless commands.txt
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

# Add project root to Python path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from zonecal.core.calendar_manager import CalendarManager
from zonecal.core.config_manager import Config
from zonecal.models.enums import RunMode
from zonecal.processors.command_processor import CommandProcessor
from zonecal.utils.logger import setup_logger

logger = setup_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zonecal",
        description="Timezone-aware calendar manager",
    )
    parser.add_argument(
        "--mode",
        required=True,
        choices=[m.value for m in RunMode],
        type=str.lower,
        help="interactive reads commands from stdin, headless from a file",
    )
    parser.add_argument("command_file", nargs="?", help="Command file (headless mode)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main execution function.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    args = build_parser().parse_args(argv)
    mode = RunMode(args.mode)

    if not Config.validate():
        logger.error("Configuration validation failed")
        return 1

    processor = CommandProcessor(CalendarManager(), output=print)

    if mode is RunMode.INTERACTIVE:
        try:
            return 0 if processor.run(sys.stdin, mode) else 1
        except KeyboardInterrupt:
            logger.warning("Interrupted by user")
            return 1

    if not args.command_file:
        print("Use '--mode interactive' or '--mode headless <file>' only.")
        return 1

    try:
        with open(args.command_file, 'r', encoding='utf-8') as f:
            return 0 if processor.run(f, mode) else 1
    except FileNotFoundError:
        print(f"Error: File not found: {args.command_file}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
