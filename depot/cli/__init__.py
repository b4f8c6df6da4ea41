"""depot operator CLI."""
