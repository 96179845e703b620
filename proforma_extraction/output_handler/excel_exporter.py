"""
Excel Exporter Module.

This module provides Excel file generation for proforma extraction
results. Uses openpyxl for modern Excel format support.

Features:
    - One row per output record, formatted headers
    - Auto-column width
    - Summary sheet with counts of filled key fields

Author: ML Engineering Team
"""

from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import openpyxl
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side
from openpyxl.utils import get_column_letter

from config import get_config
from proforma_extraction.utils.logger import get_logger
from proforma_extraction.utils.helpers import ensure_directory, generate_timestamp
from proforma_extraction.utils.exceptions import ExcelExportError
from .record_assembler import OutputRecord

# Initialize module logger
logger = get_logger(__name__)


class ExcelExporter:
    """
    Exports output records to an Excel workbook.

    Attributes:
        output_dir: Directory for output files
        sheet_name: Title of the data sheet
        summary_sheet_name: Title of the summary sheet

    Example:
        >>> exporter = ExcelExporter()
        >>> filepath = exporter.export(records, "extractions.xlsx")
        >>> print(f"Saved to: {filepath}")
    """

    # (header, OutputRecord attribute)
    COLUMNS = [
        ('File Name', 'file_name'),
        ('P/I No.', 'pi_no'),
        ('P/O No.', 'po_no'),
        ('S/C No.', 'sc_no'),
        ('Item No.', 'item_no'),
        ('Description', 'description'),
        ('Quantity', 'quantity'),
        ('Unit Price', 'unit_price'),
        ('Amount', 'amount'),
        ('BENEFICIARY', 'beneficiary'),
        ('NAME OF THE BANK', 'name_of_bank'),
        ('ACCOUNT No.', 'account_no'),
        ('SWIFT', 'swift'),
        ('Extracted At', 'extracted_at'),
    ]

    MAX_COLUMN_WIDTH = 50

    def __init__(self, output_dir: Optional[str] = None) -> None:
        """Initialize the Excel exporter with configuration."""
        self.output_dir = Path(output_dir or get_config("paths.output_dir", "outputs"))
        self.sheet_name = get_config("output.excel.sheet_name", "Extracted Data")
        self.summary_sheet_name = get_config("output.excel.summary_sheet_name", "Summary")

        logger.debug(f"ExcelExporter initialized (output_dir: {self.output_dir})")

    def export(
        self,
        records: Sequence[OutputRecord],
        filename: Optional[str] = None,
        output_dir: Optional[str] = None
    ) -> str:
        """
        Export output records to an Excel file.

        Args:
            records: Records to export.
            filename: Output filename. If None, auto-generated.
            output_dir: Output directory. If None, uses configured dir.

        Returns:
            Path to the created Excel file.

        Raises:
            ExcelExportError: If there is nothing to export or saving fails.
        """
        out_dir = Path(output_dir) if output_dir else self.output_dir
        filepath = out_dir / (filename or self.get_default_filename())

        if not records:
            raise ExcelExportError(str(filepath), "No records to export")

        try:
            ensure_directory(out_dir)

            workbook = openpyxl.Workbook()
            self._create_data_sheet(workbook, records)
            self._create_summary_sheet(workbook, records)
            workbook.save(filepath)

        except OSError as e:
            logger.error(f"Excel export failed: {e}")
            raise ExcelExportError(str(filepath), str(e)) from e

        logger.info(f"Excel file saved: {filepath} ({len(records)} records)")
        return str(filepath)

    def _create_data_sheet(self, workbook, records: Sequence[OutputRecord]) -> None:
        """
        Create the main data sheet, one row per record.

        Args:
            workbook: openpyxl Workbook instance.
            records: Records to write.
        """
        sheet = workbook.active
        sheet.title = self.sheet_name

        header_font = Font(bold=True, color="FFFFFF")
        header_fill = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
        header_alignment = Alignment(horizontal="center", vertical="center")
        thin_border = Border(
            left=Side(style='thin'),
            right=Side(style='thin'),
            top=Side(style='thin'),
            bottom=Side(style='thin')
        )

        headers = ['No.'] + [header for header, _ in self.COLUMNS]
        for col, header_name in enumerate(headers, 1):
            cell = sheet.cell(row=1, column=col, value=header_name)
            cell.font = header_font
            cell.fill = header_fill
            cell.alignment = header_alignment
            cell.border = thin_border

        for row_num, record in enumerate(records, 2):
            sheet.cell(row=row_num, column=1, value=row_num - 1).border = thin_border
            for col, (_, attr) in enumerate(self.COLUMNS, 2):
                cell = sheet.cell(row=row_num, column=col, value=getattr(record, attr, '') or '')
                cell.border = thin_border

        self._fit_columns(sheet, len(headers), len(records) + 1)
        sheet.freeze_panes = 'A2'

    def _create_summary_sheet(self, workbook, records: Sequence[OutputRecord]) -> None:
        """
        Create the summary sheet with counts of filled key fields.

        Args:
            workbook: openpyxl Workbook instance.
            records: Records to summarise.
        """
        sheet = workbook.create_sheet(title=self.summary_sheet_name)

        header_font = Font(bold=True, color="FFFFFF")
        header_fill = PatternFill(start_color="548235", end_color="548235", fill_type="solid")

        for col, header in enumerate(('Field', 'Value'), 1):
            cell = sheet.cell(row=1, column=col, value=header)
            cell.font = header_font
            cell.fill = header_fill
            cell.alignment = Alignment(horizontal="center")

        for row_num, (label, value) in enumerate(self.summarize(records), 2):
            sheet.cell(row=row_num, column=1, value=label)
            sheet.cell(row=row_num, column=2, value=value)

        sheet.column_dimensions['A'].width = 32
        sheet.column_dimensions['B'].width = 22

    @staticmethod
    def summarize(records: Sequence[OutputRecord]) -> List[Tuple[str, object]]:
        """
        Compute the summary rows.

        Returns:
            (label, value) pairs: record total, export date and the number
            of records with each key field filled.
        """
        return [
            ('Total Records', len(records)),
            ('Export Date', datetime.now().strftime("%Y-%m-%d %H:%M:%S")),
            ('Records with P/I No.', sum(1 for r in records if r.pi_no)),
            ('Records with P/O No.', sum(1 for r in records if r.po_no)),
            ('Records with S/C No.', sum(1 for r in records if r.sc_no)),
            ('Records with Beneficiary', sum(1 for r in records if r.beneficiary)),
            ('Records with Bank Details', sum(1 for r in records if r.name_of_bank or r.account_no)),
        ]

    def _fit_columns(self, sheet, column_count: int, row_count: int) -> None:
        """Set each column width to its longest value, capped."""
        for col in range(1, column_count + 1):
            max_length = 0
            for row in range(1, row_count + 1):
                value = sheet.cell(row=row, column=col).value
                if value is not None:
                    max_length = max(max_length, len(str(value)))

            sheet.column_dimensions[get_column_letter(col)].width = \
                min(max_length + 2, self.MAX_COLUMN_WIDTH)

    def get_default_filename(self) -> str:
        """
        Generate a default filename with timestamp.

        Returns:
            Default filename string.
        """
        pattern = get_config(
            "output.excel.filename_pattern",
            "proforma_extractions_{timestamp}.xlsx"
        )
        return pattern.format(timestamp=generate_timestamp())
