"""Snapshot utilities."""
