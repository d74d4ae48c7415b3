"""HTTP API for JsonFinder."""
