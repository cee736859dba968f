"""
Analytics package exports.
"""

from core.analytics.constants import GROUP_LABELS, REPORT_GROUPS
from core.analytics.service import build_review_report, build_store_report
from core.analytics.types import ReportGroup, ReviewReport

__all__ = [
    "GROUP_LABELS",
    "REPORT_GROUPS",
    "build_review_report",
    "build_store_report",
    "ReportGroup",
    "ReviewReport",
]
