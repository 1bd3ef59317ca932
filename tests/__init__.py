"""
Test Suite
==========

Test suite mirroring the carousel_composer package structure.

Test Categories:
- unit: Unit tests for individual components
- integration: Integration tests across transform, editing and composition
"""
