"""HTTP surface of the inventory: app factory, dependencies and error handlers."""
