"""Personal productivity dashboard: REST API and offline worker."""

__version__ = "0.1.0"
