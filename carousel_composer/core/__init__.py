"""
Core Business Logic
==================

Core modules for slide composition.

Modules:
- modules: Module contract, registry and built-in modules
- richtext: Styled chunk rendering and style sanitization
- highlights: Highlight conversion, layout bases and slide transformation
- layout: Stylesheets, spatial ordering rules and z-index layering
- composition: Document template compositer
- editor: Editing operations and preview scheduling
- transport: Loading composition requests from JSON/YAML payloads
"""
