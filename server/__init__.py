"""API gateway package."""
