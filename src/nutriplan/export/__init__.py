"""Output formatters."""

from nutriplan.export.formatters import JSONFormatter, TableFormatter

__all__ = ["TableFormatter", "JSONFormatter"]
