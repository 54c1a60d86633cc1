"""
Tests package - Test suite for the Marina operator.

Contains:
- unit/: Unit tests for individual components
- fixtures/: Sample resources and the in-memory object store
"""
