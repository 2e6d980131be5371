"""Schema ingestion, closure and normalization."""
