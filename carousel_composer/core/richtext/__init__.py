"""
Rich Text Module
===============

Styled chunk rendering for text fields.

Components:
- chunk_renderer: Resolve styled substrings into safe inline markup
- sanitizers: Pattern checks for inline style values
"""
