"""HTTP status API."""
