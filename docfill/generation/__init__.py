"""Document assembly pipeline."""

from docfill.generation.pipeline import DocumentPipeline, GenerationContext, apply_defaults

__all__ = ["DocumentPipeline", "GenerationContext", "apply_defaults"]
