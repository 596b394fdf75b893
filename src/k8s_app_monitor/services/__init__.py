"""Service layer: cluster queries and the monitor engine."""
