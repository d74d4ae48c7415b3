"""Document store, inverted index and query engine."""
