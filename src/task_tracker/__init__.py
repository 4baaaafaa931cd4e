"""Personal task tracker: JSON-backed task lifecycle and queries."""
