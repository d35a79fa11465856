"""Shared infrastructure: structured logging, traced HTTP client, config loading."""
