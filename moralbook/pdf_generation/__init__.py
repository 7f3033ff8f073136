"""
PDF export of generated MoralBook stories.
"""

from .builder import PAGE_SIZES, StorybookPDFBuilder

__all__ = ["PAGE_SIZES", "StorybookPDFBuilder"]
