"""
fintrack - Finance Tracker Core

Entity model, input validation and derived-state rules for a personal
finance tracking application (users, categories, transactions, budgets,
goals, notifications, settings).

DESIGN PRINCIPLES:
1. Validate at the boundary, trust typed records inside
2. Fail early, fail visibly
3. No silent corrections
4. Derived state is computed, never mutated in place
5. Storage, auth and notification delivery are swappable collaborators
"""

__version__ = "1.0.0"
__author__ = "fintrack Team"
