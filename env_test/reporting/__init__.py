"""Reporting module - run statistics and reports."""

from .json_reporter import JsonReporter
from .summary import ReportAggregator, TestEntry, format_duration

__all__ = ["JsonReporter", "ReportAggregator", "TestEntry", "format_duration"]
