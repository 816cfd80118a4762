"""Cross-cutting infrastructure: logging and settings."""
