"""tracecompare utilities."""
