#!/usr/bin/env python3
"""
Proforma Invoice Extraction System - Main Entry Point.

This is the main entry point for the proforma invoice extraction system.
It provides both a command-line interface and programmatic access
to the extraction pipeline.

Usage:
    Command Line:
        python main.py --input invoice.pdf --output results.xlsx
        python main.py --input ./invoices/ --input extra.pdf --no-excel

    Python:
        from main import run_extraction
        result = run_extraction(["invoice.pdf"], api_key="sk-...")

Author: ML Engineering Team
Version: 1.0.0
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from config import ConfigurationManager, get_config
from proforma_extraction.utils.logger import setup_logger_from_config, get_logger, LOGGER_NAMESPACE
from proforma_extraction.utils.exceptions import ExcelExportError
from proforma_extraction.pipeline import InvoicePipeline, BatchResult
from proforma_extraction.output_handler import ExcelExporter, OutputRecord

API_KEY_ENV_VAR = "OPENAI_API_KEY"

# (header, attribute, width) for the console table
TABLE_COLUMNS = [
    ('File', 'file_name', 24),
    ('Item No.', 'item_no', 10),
    ('Description', 'description', 28),
    ('Qty', 'quantity', 8),
    ('Unit Price', 'unit_price', 14),
    ('Amount', 'amount', 14),
]


def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        argv: Argument list. Defaults to sys.argv[1:].

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="Proforma Invoice Field Extraction System",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    Process single invoice:
        python main.py --input invoice.pdf --output results.xlsx

    Process directory without Excel output:
        python main.py --input ./invoices/ --no-excel

    Regex extraction only (no language model):
        OPENAI_API_KEY= python main.py --input ./invoices/
        """
    )

    # Input/Output arguments
    parser.add_argument(
        "--input", "-i",
        type=str,
        action="append",
        required=True,
        help="Input PDF file or directory (repeatable)"
    )

    parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Excel output file or directory (default: configured output dir)"
    )

    parser.add_argument(
        "--api-key",
        type=str,
        default=os.environ.get(API_KEY_ENV_VAR),
        help=f"Language model API key (default: ${API_KEY_ENV_VAR})"
    )

    # Processing options
    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="Path to custom configuration file"
    )

    parser.add_argument(
        "--no-excel",
        action="store_true",
        help="Disable Excel output"
    )

    # Logging options
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress console output"
    )

    return parser.parse_args(argv)


def initialize_system(args: argparse.Namespace) -> ConfigurationManager:
    """
    Initialize the extraction system with configuration and logging.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Initialized configuration manager.
    """
    if args.config:
        ConfigurationManager.reset()
    config = ConfigurationManager(args.config)

    logger = setup_logger_from_config()

    if args.debug:
        logging.getLogger(LOGGER_NAMESPACE).setLevel(logging.DEBUG)
        for handler in logging.getLogger(LOGGER_NAMESPACE).handlers:
            handler.setLevel(logging.DEBUG)
    elif args.quiet:
        logging.getLogger(LOGGER_NAMESPACE).setLevel(logging.ERROR)

    logger.info("=" * 60)
    logger.info("PROFORMA INVOICE EXTRACTION SYSTEM")
    logger.info("=" * 60)
    logger.info(f"Version: {config.get('project.version', '1.0.0')}")
    logger.info(f"Input: {', '.join(args.input)}")
    logger.info(f"Oracle credential: {'supplied' if args.api_key else 'none (fallback only)'}")

    return config


def run_extraction(
    inputs: Sequence[str],
    output_path: Optional[str] = None,
    api_key: Optional[str] = None,
    enable_excel: bool = True
) -> BatchResult:
    """
    Run the proforma extraction pipeline.

    This is the main programmatic entry point for the extraction system.
    Files are processed one at a time; failed files are reported in the
    result, not raised.

    Args:
        inputs: Input files and/or directories.
        output_path: Excel file (.xlsx) or directory for the export.
        api_key: Language model credential. Without one the regex
                fallback is used.
        enable_excel: Whether to generate Excel output.

    Returns:
        BatchResult with records and per-file failures.

    Raises:
        ExcelExportError: If the Excel file cannot be written.

    Example:
        >>> result = run_extraction(["invoices/"], enable_excel=False)
        >>> for record in result.records:
        ...     print(record.item_no, record.amount)
    """
    logger = get_logger(__name__)

    logger.info("Initializing pipeline components...")
    pipeline = InvoicePipeline(api_key=api_key)
    result = pipeline.process_batch(list(inputs))

    if enable_excel and get_config("output.excel.enabled", True) and result.records:
        filename, output_dir = None, None
        if output_path:
            output_p = Path(output_path)
            if output_p.suffix.lower() == '.xlsx':
                filename, output_dir = output_p.name, str(output_p.parent)
            else:
                output_dir = str(output_p)

        excel_path = ExcelExporter().export(result.records, filename=filename, output_dir=output_dir)
        logger.info(f"Excel output: {excel_path}")

    return result


def format_table(records: List[OutputRecord]) -> str:
    """
    Render records as a fixed-width text table.

    Args:
        records: Records to display.

    Returns:
        Table text, one line per record below a header.
    """
    def row(values):
        return "  ".join(
            str(value)[:width].ljust(width)
            for value, (_, _, width) in zip(values, TABLE_COLUMNS)
        ).rstrip()

    lines = [row(header for header, _, _ in TABLE_COLUMNS)]
    lines.append("  ".join("-" * width for _, _, width in TABLE_COLUMNS))
    for record in records:
        lines.append(row(getattr(record, attr) for _, attr, _ in TABLE_COLUMNS))
    return "\n".join(lines)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main function - entry point for command-line execution.

    Returns:
        Exit code (0 when at least one file succeeded, non-zero otherwise).
    """
    try:
        args = parse_arguments(argv)

        initialize_system(args)
        logger = get_logger(__name__)

        result = run_extraction(
            inputs=args.input,
            output_path=args.output,
            api_key=args.api_key,
            enable_excel=not args.no_excel
        )

        if not args.quiet:
            if result.records:
                print(format_table(result.records))
            for failure in result.failures:
                print(f"FAILED {failure.file_name}: {failure.error_type}: {failure.message}")

        logger.info("=" * 60)
        logger.info(
            f"Extraction complete. {result.files_processed} file(s) succeeded, "
            f"{result.files_failed} failed."
        )
        logger.info("=" * 60)

        return 0 if result.succeeded else 1

    except ExcelExportError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except FileNotFoundError as e:
        # Missing configuration file
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
