"""JsonFinder - in-memory field index and query engine for JSONL records."""

__version__ = "0.1.0"
