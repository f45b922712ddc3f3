"""Report assembly and rendering."""

from .assembler import ReportAssembler
from .excel_generator import ExcelReportGenerator
from .json_writer import render_json, write_json_report

__all__ = [
    "ReportAssembler",
    "ExcelReportGenerator",
    "render_json",
    "write_json_report",
]
