"""
Data Models
===========

Pydantic data models for composition inputs and outputs and internal data structures.

Models:
- schemas: styled text, ordering rules, render context, editor state and transport models
"""
