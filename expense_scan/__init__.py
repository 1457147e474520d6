"""
Receipt-to-transaction extraction pipeline for the expense tracker.
"""

__version__ = "0.1.0"
