"""Template management package."""
from docfill.templates.manager import TemplateManager

__all__ = ["TemplateManager"]
