"""
Carousel Composer
=================

A composition engine that assembles slide markup documents from pluggable
modules, ready to be rasterized into still images by an external renderer.

This package provides:
- Module registry with dependency, conflict and multi-instance handling
- Rich-text chunk rendering with style inheritance and sanitization
- Highlight conversion and slide transformation pipeline
- Spatial ordering rules and z-index layer control
- Template composition of the final document
"""

__version__ = "1.0.0"
__author__ = "Carousel Composer Team"
