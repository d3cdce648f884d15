# Document restructuring engine
# Chunk driver, segmentation calls, boundary reconciliation and section assembly

from docstruct.structify.driver import words_to_paragraphs
from docstruct.structify.pipeline import StructifyPipeline, run_structify_text

__all__ = [
    "words_to_paragraphs",
    "StructifyPipeline",
    "run_structify_text",
]
