"""
Core domain models, calendar arithmetic, and data contracts.

This module contains the foundational building blocks that are independent
of external systems (time servers, the ledger file, the command line).
"""
