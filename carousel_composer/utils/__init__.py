"""
Shared Utilities
===============

Common utilities and helper functions used across the application.

Modules:
- html: HTML escaping, URL sanitization and resolution
- data: Deep copy and deep merge of module data
"""
