"""Command-line interface for the monitor."""
