"""Helpers for USPTO application data: documents, tables, families, bulk products and output."""

__version__ = "0.1.0"