"""
Test suite for tiered-tokens

Contains:
- tests/unit/          : Unit tests for individual modules
"""
