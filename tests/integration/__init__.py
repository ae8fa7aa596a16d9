"""Integration tests against a deployed salary service."""
