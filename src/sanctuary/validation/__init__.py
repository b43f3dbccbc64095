"""Validation layer: pure field checks."""
