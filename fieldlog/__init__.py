"""Structured, levelled logging with fields, hooks and text or JSON formatters."""

__version__ = "0.1.0"