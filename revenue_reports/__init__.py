"""
Revenue attribution and win/loss reporting engine.

Turns already-linked sales estimates exported from an estimating tool into
won/lost classifications, calendar-year revenue attribution, portfolio,
account and department statistics, and A/B/C/D account revenue segments.
"""

__version__ = "1.0.0"
