"""
Composition Module
=================

Assembly of enabled modules into the final document.
"""

from .compositer import CompositionError, TemplateCompositer, compose, get_compositer

__all__ = ["CompositionError", "TemplateCompositer", "compose", "get_compositer"]
