"""
Editor Module
============

Editing operations over slides and debounced preview recomposition.
"""

from .preview import PreviewScheduler
from .state import SlideEditor, SlideNotFoundError

__all__ = ["PreviewScheduler", "SlideEditor", "SlideNotFoundError"]
