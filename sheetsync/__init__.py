"""
Strava to Google Sheets activity ledger.

Links athletes' Strava accounts to a spreadsheet and imports their
activities into one sheet per athlete.
"""

__version__ = "0.1.0"
