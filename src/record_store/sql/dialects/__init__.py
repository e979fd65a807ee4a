"""SQL dialect implementations."""
