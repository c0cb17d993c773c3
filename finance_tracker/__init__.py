"""
Finance Tracker - Source Package

A personal finance tracker for a single user: debts, recurring fixed
bills, incomes and multi-line-item projects, with summaries computed
fresh from the stored records on every read.

DESIGN PRINCIPLES:
1. Status and summaries are derived, never stored
2. "Now" is always passed in, never read behind the caller's back
3. Imports are lenient: one bad field never blocks the rest
4. Every mutation replaces a whole collection
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Finance Tracker Team"
