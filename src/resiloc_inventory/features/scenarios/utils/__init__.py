"""Scenario instance utilities."""
