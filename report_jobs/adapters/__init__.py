"""Adapter layer package for report backend integration boundaries."""

from .report_http import HttpReportJobTransport

__all__ = ["HttpReportJobTransport"]
