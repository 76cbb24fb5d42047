"""Community utilities."""
