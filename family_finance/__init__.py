"""
Family Finance - Source Package

A small household finance tracker: accounts, transactions, fixed monthly
expenses, projects and work-hour logs, with monthly reports, balance
snapshots, Excel export and a Chinese/English interface.

DESIGN PRINCIPLES:
1. Every row belongs to exactly one user
2. Reports are pure functions over fetched rows
3. Bad data is coerced, not rejected
4. Backend errors are shown to the user verbatim
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Family Finance Team"
