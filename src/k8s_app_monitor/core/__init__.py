"""Core configuration for the monitor."""
