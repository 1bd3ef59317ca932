"""
Layout Module
============

Stylesheet model, spatial ordering rules and z-index layering.
"""

from .layer_controller import LayerController
from .order_engine import CompositionOrderEngine, get_order_engine
from .stylesheet import CSSDeclaration, CSSRule, Stylesheet

__all__ = [
    "LayerController",
    "CompositionOrderEngine",
    "get_order_engine",
    "CSSDeclaration",
    "CSSRule",
    "Stylesheet",
]
