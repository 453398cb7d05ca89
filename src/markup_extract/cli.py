"""
CLI module for markup_extract.

Provides the command-line interface: extract a table or a select from a
file or URL, or run a batch configuration, printing JSON to stdout.
"""

import argparse
import json
import logging
import sys
from typing import Any, List, Optional

from .config import SelectorSpec, TableOptions, load_config
from .errors import ExtractionError
from .runner import ExtractionRunner, extract_target, serialize
from .sources import load_document
from .utils import NORMALIZERS

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Set up logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        stream=sys.stderr,
    )


def _print_json(data: Any) -> None:
    print(json.dumps(data, ensure_ascii=False, indent=2))


def _target_from_args(args: argparse.Namespace) -> SelectorSpec:
    options = TableOptions()
    if args.command == 'table':
        options = TableOptions(
            has_header_row=args.header_row,
            has_index_column=args.index_column,
            postfix=args.postfix,
            allow_composite_text=args.composite,
            composite_delimiter=args.delimiter,
            normalizer=args.normalizer,
            text_filter=args.text_filter,
        )
    return SelectorSpec(
        name=args.command,
        kind=args.command,
        id=args.id,
        class_name=args.class_name,
        nth=args.nth,
        options=options,
    )


def run_single(args: argparse.Namespace) -> int:
    """
    Extract one table or select and print it.

    Args:
        args: Parsed command-line arguments

    Returns:
        Process exit code
    """
    setup_logging(args.verbose)

    try:
        document = load_document(args.source, args.timeout)
        result = extract_target(document, _target_from_args(args))
    except ExtractionError as e:
        logger.error(f"Extraction failed: {e}")
        return 1

    _print_json(serialize(result, records=getattr(args, 'records', False)))
    return 0


def run_batch(args: argparse.Namespace) -> int:
    """
    Run every target of a configuration file and print the results.

    Returns:
        Process exit code, 1 if any target failed
    """
    setup_logging(args.verbose)

    try:
        config = load_config(args.config_file)
        runner = ExtractionRunner(config)
        results = runner.run()
    except (ExtractionError, FileNotFoundError, ValueError) as e:
        logger.error(f"Extraction failed: {e}")
        return 1

    _print_json(results)
    return 1 if runner.get_stats().failed else 0


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('source', help='Path or http(s) URL of the markup')
    locator = parser.add_mutually_exclusive_group()
    locator.add_argument('--id', help='Match the element with this id')
    locator.add_argument('--class-name', help='Match elements with this class')
    parser.add_argument('--nth', type=int, default=0,
                        help='Use the n-th matching element (0-based)')
    parser.add_argument('--timeout', type=float, default=30.0,
                        help='Request timeout in seconds for URLs')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Enable verbose logging')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Extract tables and select options from HTML",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  markup-extract table page.html --id prices --index-column
  markup-extract table https://example.com --class-name data --records
  markup-extract select page.html --id country
  markup-extract run targets.json
        """
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    table_parser = subparsers.add_parser('table', help='Extract a table')
    _add_common_arguments(table_parser)
    table_parser.add_argument('--header-row', action=argparse.BooleanOptionalAction, default=True,
                              help='Use the first row as headers')
    table_parser.add_argument('--index-column', action='store_true',
                              help='Use the first column as index')
    table_parser.add_argument('--postfix', default='',
                              help='Postfix for repeated header and index labels')
    table_parser.add_argument('--composite', action='store_true',
                              help='Join all texts of a cell instead of using the first one')
    table_parser.add_argument('--delimiter', default=' ',
                              help='Delimiter for composite texts')
    table_parser.add_argument('--normalizer', choices=sorted(NORMALIZERS), default='identity',
                              help='Normalizer applied to every text')
    table_parser.add_argument('--text-filter', choices=['printable', 'visible'], default='printable',
                              help='Which text fragments count as content')
    table_parser.add_argument('--records', action='store_true',
                              help='Print one object per row instead of the grid')

    select_parser = subparsers.add_parser('select', help='Extract the options of a select')
    _add_common_arguments(select_parser)

    run_parser = subparsers.add_parser('run', help='Extract all targets of a configuration file')
    run_parser.add_argument('config_file', help='Path to JSON configuration file')
    run_parser.add_argument('--verbose', '-v', action='store_true',
                            help='Enable verbose logging')

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command in ('table', 'select'):
        sys.exit(run_single(args))
    elif args.command == 'run':
        sys.exit(run_batch(args))
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == '__main__':
    main()
