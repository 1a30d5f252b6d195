"""docfill - fill placeholders in uploaded Office templates."""

__version__ = "0.1.0"
