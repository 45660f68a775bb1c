"""Dreistrom: German multi-stream tax computation and threshold monitoring."""

__version__ = "0.1.0"
