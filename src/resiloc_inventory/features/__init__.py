"""Feature modules of the inventory backend."""
