"""
Error taxonomy for account linking and activity sync.

Every error aborts the current operation; none are retried.
"""


class SheetSyncError(Exception):
    """Base error."""
    pass


class UserNotFoundError(SheetSyncError):
    """Display name is not present in the metadata sheet."""

    def __init__(self, display_name: str):
        super().__init__(f"User not found: {display_name}")
        self.display_name = display_name


class UpstreamAuthError(SheetSyncError):
    """Strava rejected a code exchange or token refresh. Account must be reconnected."""
    pass


class UpstreamFetchError(SheetSyncError):
    """Listing activities from Strava failed."""
    pass


class StoreError(SheetSyncError):
    """Spreadsheet backend read or write failed."""

    def __init__(self, message: str, table: str | None = None):
        super().__init__(f"{message} (sheet: {table})" if table else message)
        self.table = table


class TableExistsError(StoreError):
    """A sheet with the requested title already exists."""
    pass
