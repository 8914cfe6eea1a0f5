"""Upload pipeline services."""
