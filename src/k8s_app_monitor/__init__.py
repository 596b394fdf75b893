"""Live terminal dashboard for Kubernetes applications."""

__version__ = "0.1.0"
