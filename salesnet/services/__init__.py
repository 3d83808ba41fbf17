"""Domain services and the commission engine."""
