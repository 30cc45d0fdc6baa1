"""
Feature modules.

- strava/ - OAuth and activities API
- sheets/ - Spreadsheet store and repositories
- users/ - Linked athletes
- sync/ - Activity import pipeline
"""
