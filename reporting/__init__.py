"""
Reporting outputs — ROI & sensitivity tables, Excel export, and decision flags.
"""

from .tables import (
    cashflow_table,
    export_tables_to_excel,
    roi_summary_table,
    sensitivity_pivot,
    sensitivity_summary,
    sensitivity_table,
)
from .decisions import ROIDecisionReport, generate_roi_report

__all__ = [
    "cashflow_table",
    "export_tables_to_excel",
    "roi_summary_table",
    "sensitivity_pivot",
    "sensitivity_summary",
    "sensitivity_table",
    "ROIDecisionReport",
    "generate_roi_report",
]
