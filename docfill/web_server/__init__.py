"""REST surface for docfill."""

from docfill.web_server.web_server import DocfillWebServer

__all__ = ["DocfillWebServer"]
