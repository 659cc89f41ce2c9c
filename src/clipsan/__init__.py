"""clipsan — clipboard text sanitization and paste-burst aggregation."""

__version__ = "0.1.0"
