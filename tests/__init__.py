"""
Test suite for ht-ledger

Contains:
- tests/unit/          : Unit tests for individual modules
"""
