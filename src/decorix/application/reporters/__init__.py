"""Reporters: reflection tables → human-readable text."""

from decorix.application.reporters.console import ReflectionReporter, ReportConfig, format_applied

__all__ = ["ReflectionReporter", "ReportConfig", "format_applied"]
