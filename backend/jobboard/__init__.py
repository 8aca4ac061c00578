"""Job board visibility and search ranking backend."""
