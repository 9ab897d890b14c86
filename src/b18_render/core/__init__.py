"""Core models, schema validation and shared utilities."""
