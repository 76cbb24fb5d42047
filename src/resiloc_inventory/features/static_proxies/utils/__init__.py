"""Static proxy utilities."""
