"""Scenario template utilities."""
