"""
Finance Dashboard - Source Package

A personal-finance dashboard: accounts, transactions, budgets, debts and an
emergency fund, stored in a hosted backend and summarized for the user.

DESIGN PRINCIPLES:
1. The hosted backend owns auth and persistence
2. Rows are validated into typed records as soon as they arrive
3. Aggregations are pure functions over fetched rows
4. Navigation is returned as data, never performed by the state machine
5. The backend client is built once and injected
"""

__version__ = "1.0.0"
__author__ = "Finance Dashboard Team"
