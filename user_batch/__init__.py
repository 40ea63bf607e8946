"""Bulk user ingestion: spreadsheet/form normalization and batch mutation."""

__version__ = "0.1.0"
