"""
Tests for SyncService.

End-to-end sync against the in-memory sheet store and fake Strava API.
"""

import asyncio
from datetime import date, datetime, timezone

import pytest

from sheetsync.features.sync import SyncResult, SyncService
from sheetsync.shared.constants import ACTIVITY_HEADERS, METADATA_HEADERS
from sheetsync.shared.exceptions import (
    StoreError,
    UpstreamAuthError,
    UpstreamFetchError,
    UserNotFoundError,
)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def linked_store(store):
    """Spreadsheet with one linked athlete and an empty activity sheet."""
    store.tables["_Metadata"] = [list(METADATA_HEADERS), ["Jane", "4242", "refresh-old"]]
    store.tables["Jane"] = [list(ACTIVITY_HEADERS)]
    return store


@pytest.fixture
def service(linked_store, strava):
    return SyncService(linked_store, oauth=strava.oauth(), strava=strava.client())


def _sync(service, *args, **kwargs) -> SyncResult:
    return asyncio.run(service.sync(*args, **kwargs))


def _ids(store, table="Jane"):
    return [row[0] for row in store.tables[table][1:]]


# =============================================================================
# Test Import
# =============================================================================

class TestSync:
    """Tests for the happy path."""

    def test_imports_new_activities(self, service, linked_store, strava, make_activity):
        strava.activities = [
            make_activity(1, "2024-03-01T07:00:00Z"),
            make_activity(2, "2024-03-02T07:00:00Z"),
        ]

        result = _sync(service, "Jane")

        assert result == SyncResult(imported_count=2, message="Synced 2 new activities.")
        assert _ids(linked_store) == ["1", "2"]
        assert linked_store.tables["Jane"][1][3] == "5.00"

    def test_uses_refreshed_token(self, service, strava):
        _sync(service, "Jane")

        token_request = strava.requests_to("/oauth/token")[0]
        assert b"refresh_token=refresh-old" in token_request.content
        fetch = strava.requests_to("/api/v3/athlete/activities")[0]
        assert fetch.headers["Authorization"] == "Bearer access-123"

    def test_append_order_is_ascending(self, service, linked_store, strava, make_activity):
        """Upstream order does not matter; rows land sorted by start date."""
        strava.activities = [
            make_activity(3, "2024-03-03T07:00:00Z"),
            make_activity(1, "2024-03-01T07:00:00Z"),
            make_activity(2, "2024-03-02T07:00:00Z"),
        ]

        _sync(service, "Jane")

        dates = [row[5] for row in linked_store.tables["Jane"][1:]]
        assert dates == sorted(dates)
        assert _ids(linked_store) == ["1", "2", "3"]

    def test_second_sync_imports_nothing(self, service, linked_store, strava, make_activity):
        """Idempotent: same upstream data twice -> 0 on the second run."""
        strava.activities = [
            make_activity(1, "2024-03-01T07:00:00Z"),
            make_activity(2, "2024-03-02T07:00:00Z"),
        ]

        first = _sync(service, "Jane")
        second = _sync(service, "Jane")

        assert first.imported_count == 2
        assert second.imported_count == 0
        assert second.message == "Synced 0 new activities."
        assert _ids(linked_store) == ["1", "2"]

    def test_ids_stay_unique(self, service, linked_store, strava, make_activity):
        """Overlapping windows never duplicate an activity."""
        strava.activities = [make_activity(1, "2024-03-01T07:00:00Z")]
        _sync(service, "Jane")

        strava.activities = [
            make_activity(1, "2024-03-01T07:00:00Z"),
            make_activity(2, "2024-03-05T07:00:00Z"),
        ]
        _sync(service, "Jane", start_date=date(2024, 1, 1))
        _sync(service, "Jane")

        ids = _ids(linked_store)
        assert ids == ["1", "2"]
        assert len(ids) == len(set(ids))

    def test_default_window_starts_at_last_row(self, service, linked_store, strava):
        linked_store.tables["Jane"].append(
            ["9", "Run", "Run", "5.00", "30.00", "2024-03-10T08:00:00"]
        )

        _sync(service, "Jane")

        params = strava.requests_to("/api/v3/athlete/activities")[0].url.params
        expected = int(datetime(2024, 3, 10, 8, tzinfo=timezone.utc).timestamp())
        assert params["after"] == str(expected)
        assert "before" not in params

    def test_explicit_window(self, service, strava):
        _sync(service, "Jane", start_date="2024-01-01", end_date="2024-01-02")

        params = strava.requests_to("/api/v3/athlete/activities")[0].url.params
        assert params["after"] == "1704067200"
        assert params["before"] == "1704240000"


# =============================================================================
# Test Header Repair
# =============================================================================

class TestHeaderRepair:
    """Header row is rewritten whenever anything was fetched."""

    def test_stale_header_rewritten(self, service, linked_store, strava, make_activity):
        linked_store.tables["Jane"][0] = ["Activity ID", "Name", "Type"]
        strava.activities = [make_activity(1, "2024-03-01T07:00:00Z")]

        _sync(service, "Jane")

        assert linked_store.tables["Jane"][0] == ACTIVITY_HEADERS

    def test_header_rewritten_even_without_new_rows(self, service, linked_store, strava, make_activity):
        linked_store.tables["Jane"][0] = ["Activity ID"]
        linked_store.tables["Jane"].append(["1", "Run", "Run", "5.00", "30.00", "2024-03-01T07:00:00Z"])
        strava.activities = [make_activity(1, "2024-03-01T07:00:00Z")]

        result = _sync(service, "Jane")

        assert result.imported_count == 0
        assert linked_store.tables["Jane"][0] == ACTIVITY_HEADERS
        assert not [w for w in linked_store.writes if w[0] == "append"]

    def test_nothing_fetched_writes_nothing(self, service, linked_store):
        result = _sync(service, "Jane")

        assert result.imported_count == 0
        assert linked_store.writes == []

    def test_header_failure_does_not_abort(self, linked_store, strava, make_activity, caplog):
        """Header writes are best-effort; rows are still appended."""
        class HeaderFailingStore(type(linked_store)):
            async def write_range(self, table, cell_range, rows):
                raise StoreError("write failed", table)

        failing = HeaderFailingStore()
        failing.tables = linked_store.tables
        strava.activities = [make_activity(1, "2024-03-01T07:00:00Z")]
        service = SyncService(failing, oauth=strava.oauth(), strava=strava.client())

        result = _sync(service, "Jane")

        assert result.imported_count == 1
        assert "Failed to update headers" in caplog.text


# =============================================================================
# Test Errors
# =============================================================================

class TestSyncErrors:
    """Every failure aborts the sync before anything is written."""

    def test_unknown_user(self, service, linked_store, strava):
        with pytest.raises(UserNotFoundError):
            _sync(service, "NoSuchPerson")

        assert strava.requests == []
        assert linked_store.writes == []

    def test_refresh_rejected(self, service, linked_store, strava, make_activity):
        strava.token_status = 400
        strava.activities = [make_activity(1, "2024-03-01T07:00:00Z")]

        with pytest.raises(UpstreamAuthError):
            _sync(service, "Jane")

        assert strava.requests_to("/api/v3/athlete/activities") == []
        assert linked_store.writes == []

    def test_fetch_failed(self, service, linked_store, strava):
        strava.activities_status = 500

        with pytest.raises(UpstreamFetchError):
            _sync(service, "Jane")

        assert linked_store.writes == []

    def test_store_read_failure(self, service, linked_store, strava, make_activity):
        linked_store.fail.add(("read", "Jane"))
        strava.activities = [make_activity(1, "2024-03-01T07:00:00Z")]

        with pytest.raises(StoreError):
            _sync(service, "Jane")

    def test_store_append_failure(self, service, linked_store, strava, make_activity):
        linked_store.fail.add(("append", "Jane"))
        strava.activities = [make_activity(1, "2024-03-01T07:00:00Z")]

        with pytest.raises(StoreError):
            _sync(service, "Jane")


# =============================================================================
# Test Concurrency
# =============================================================================

class TestConcurrentSyncs:
    """Same-athlete syncs in one process are serialized."""

    def test_concurrent_same_user_no_duplicates(self, service, linked_store, strava, make_activity):
        strava.activities = [
            make_activity(1, "2024-03-01T07:00:00Z"),
            make_activity(2, "2024-03-02T07:00:00Z"),
        ]

        async def run_both():
            return await asyncio.gather(
                service.sync("Jane", start_date="2024-01-01"),
                service.sync("Jane", start_date="2024-01-01"),
            )

        results = asyncio.run(run_both())

        assert sorted(r.imported_count for r in results) == [0, 2]
        assert _ids(linked_store) == ["1", "2"]

    def test_locks_released_after_sync(self, service, strava, make_activity):
        strava.activities = [make_activity(1, "2024-03-01T07:00:00Z")]

        async def run_both():
            await asyncio.gather(service.sync("Jane"), service.sync("Jane"))

        asyncio.run(run_both())

        assert service._user_locks == {}

    def test_unknown_names_leave_no_locks(self, service):
        for name in ("Ghost 1", "Ghost 2", "Ghost 3"):
            with pytest.raises(UserNotFoundError):
                _sync(service, name)

        assert service._user_locks == {}

    def test_lock_released_after_failure(self, service, strava):
        strava.activities_status = 500

        with pytest.raises(UpstreamFetchError):
            _sync(service, "Jane")

        assert service._user_locks == {}
