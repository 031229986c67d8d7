from wsprtrack.reports.base import POWER_LADDER, RawReport, Reception
from wsprtrack.reports.file import RawReportFile
from wsprtrack.reports.merging import merge_reports
from wsprtrack.reports.parsing import InvalidReportError, parse_report

__all__ = [
    'POWER_LADDER',
    'RawReport',
    'Reception',
    'RawReportFile',
    'merge_reports',
    'InvalidReportError',
    'parse_report',
]
