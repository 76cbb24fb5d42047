"""Shared catalog vocabulary and validation rules."""
