"""Tests for the time entry lifecycle engine."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from togglcli.api.base import ApiClient
from togglcli.errors import InvalidStateError, NoEntriesError, PickerCancelled
from togglcli.models import TimeEntry, User
from togglcli.picker.base import ItemPicker
from togglcli.time_tracking import TimeEntryEngine, format_duration

NOW = datetime(2024, 5, 6, 14, 30, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class FakeApiClient(ApiClient):
    """In-memory ApiClient recording every create/update call."""

    def __init__(self, entries: list[TimeEntry] | None = None) -> None:
        self.entries = entries or []
        self.created: list[TimeEntry] = []
        self.updated: list[TimeEntry] = []

    async def get_user(self) -> User:
        return User(
            api_token="token",
            email="me@example.com",
            timezone="UTC",
            default_workspace_id=1,
        )

    async def get_running_time_entry(self) -> TimeEntry | None:
        return next((e for e in self.entries if e.is_running), None)

    async def get_time_entries(self) -> list[TimeEntry]:
        return list(self.entries)

    async def create_time_entry(self, candidate: TimeEntry) -> TimeEntry:
        self.created.append(candidate)
        return candidate.model_copy(update={"id": 1000 + len(self.created)})

    async def update_time_entry(self, entry: TimeEntry) -> TimeEntry:
        self.updated.append(entry)
        return entry.model_copy()


class FixedPicker(ItemPicker):
    def __init__(self, index: int) -> None:
        self.index = index
        self.seen: list = []

    def pick(self, items):
        self.seen = list(items)
        return items[self.index]


class CancellingPicker(ItemPicker):
    def pick(self, items):
        raise PickerCancelled("Selection cancelled")


def _entry(**overrides) -> TimeEntry:
    defaults = {
        "id": 7,
        "workspace_id": 1,
        "project_id": 42,
        "billable": True,
        "start": NOW - timedelta(hours=2),
        "stop": NOW - timedelta(hours=1),
        "duration": 3600,
        "description": "writing spec",
        "tags": ["docs"],
        "created_with": "browser",
    }
    defaults.update(overrides)
    return TimeEntry(**defaults)


def _engine(api_client: ApiClient, now: datetime = NOW) -> TimeEntryEngine:
    return TimeEntryEngine(api_client, clock=lambda: now, client_name="togglcli-test")


# ---------------------------------------------------------------------------
# start
# ---------------------------------------------------------------------------


class TestStart:
    @pytest.mark.asyncio
    async def test_start_sets_running_fields(self) -> None:
        api = FakeApiClient()
        await _engine(api).start(_entry())

        candidate = api.created[0]
        assert candidate.id is None
        assert candidate.start == NOW
        assert candidate.stop is None
        assert candidate.is_running
        assert candidate.duration == -int(NOW.timestamp())
        assert candidate.created_with == "togglcli-test"

    @pytest.mark.asyncio
    async def test_start_copies_template_fields(self) -> None:
        api = FakeApiClient()
        await _engine(api).start(_entry())

        candidate = api.created[0]
        assert candidate.description == "writing spec"
        assert candidate.project_id == 42
        assert candidate.workspace_id == 1
        assert candidate.billable is True
        assert candidate.tags == ["docs"]

    @pytest.mark.asyncio
    async def test_start_returns_canonical_entry(self) -> None:
        api = FakeApiClient()
        started = await _engine(api).start(_entry())

        assert started.id == 1001

    @pytest.mark.asyncio
    async def test_start_does_not_mutate_template(self) -> None:
        api = FakeApiClient()
        template = _entry()
        await _engine(api).start(template)

        assert template.id == 7
        assert template.stop == NOW - timedelta(hours=1)
        api.created[0].tags.append("extra")
        assert template.tags == ["docs"]

    @pytest.mark.asyncio
    async def test_default_client_name_from_settings(self) -> None:
        api = FakeApiClient()
        await TimeEntryEngine(api, clock=lambda: NOW).start(_entry())

        assert api.created[0].created_with == "togglcli"


# ---------------------------------------------------------------------------
# stop
# ---------------------------------------------------------------------------


class TestStop:
    @pytest.mark.asyncio
    async def test_stop_computes_whole_second_duration(self) -> None:
        api = FakeApiClient()
        start = NOW - timedelta(minutes=45, seconds=12)
        running = _entry(start=start, stop=None, duration=-int(start.timestamp()))

        stopped = await _engine(api).stop(running)

        assert stopped.stop == NOW
        assert stopped.duration == 45 * 60 + 12
        assert stopped.duration >= 0
        assert api.updated[0].id == 7

    @pytest.mark.asyncio
    async def test_stop_right_at_start_is_zero(self) -> None:
        api = FakeApiClient()
        running = _entry(start=NOW, stop=None, duration=-int(NOW.timestamp()))

        stopped = await _engine(api).stop(running)

        assert stopped.duration == 0

    @pytest.mark.asyncio
    async def test_stop_handles_other_timezone_offsets(self) -> None:
        api = FakeApiClient()
        cest = timezone(timedelta(hours=2))
        start = (NOW - timedelta(minutes=10)).astimezone(cest)
        running = _entry(start=start, stop=None, duration=-int(start.timestamp()))

        stopped = await _engine(api).stop(running)

        assert stopped.duration == 600

    @pytest.mark.asyncio
    async def test_stop_rejects_stopped_entry(self) -> None:
        api = FakeApiClient()

        with pytest.raises(InvalidStateError):
            await _engine(api).stop(_entry())

        assert api.updated == []

    @pytest.mark.asyncio
    async def test_stop_rejects_future_start(self) -> None:
        api = FakeApiClient()
        start = NOW + timedelta(minutes=5)
        running = _entry(start=start, stop=None, duration=-int(start.timestamp()))

        with pytest.raises(InvalidStateError):
            await _engine(api).stop(running)

        assert api.updated == []


# ---------------------------------------------------------------------------
# continue
# ---------------------------------------------------------------------------


class TestContinue:
    @pytest.mark.asyncio
    async def test_continue_empty_raises(self) -> None:
        api = FakeApiClient()

        with pytest.raises(NoEntriesError):
            await _engine(api).continue_most_recent([])

        assert api.created == []

    @pytest.mark.asyncio
    async def test_continue_matches_start_of_first(self) -> None:
        first = _entry(id=1, description="first")
        second = _entry(id=2, description="second")

        via_continue = FakeApiClient()
        await _engine(via_continue).continue_most_recent([first, second])
        via_start = FakeApiClient()
        await _engine(via_start).start(first)

        assert via_continue.created == via_start.created

    @pytest.mark.asyncio
    async def test_continue_picked_uses_picker_choice(self) -> None:
        api = FakeApiClient()
        picker = FixedPicker(1)
        entries = [_entry(id=1, description="first"), _entry(id=2, description="second")]

        started = await _engine(api).continue_picked(entries, picker)

        assert picker.seen == entries
        assert started.description == "second"

    @pytest.mark.asyncio
    async def test_continue_picked_empty_skips_picker(self) -> None:
        api = FakeApiClient()
        picker = FixedPicker(0)

        with pytest.raises(NoEntriesError):
            await _engine(api).continue_picked([], picker)

        assert picker.seen == []

    @pytest.mark.asyncio
    async def test_continue_picked_propagates_cancel(self) -> None:
        api = FakeApiClient()

        with pytest.raises(PickerCancelled):
            await _engine(api).continue_picked([_entry()], CancellingPicker())

        assert api.created == []


class TestFormatDuration:
    def test_under_an_hour(self) -> None:
        assert format_duration(45 * 60 + 12) == "0:45:12"

    def test_keeps_seconds_past_an_hour(self) -> None:
        assert format_duration(3600 + 23 * 60 + 5) == "1:23:05"

    def test_hours_are_not_wrapped_at_a_day(self) -> None:
        assert format_duration(26 * 3600) == "26:00:00"

    def test_zero_and_negative(self) -> None:
        assert format_duration(0) == "0:00:00"
        assert format_duration(-1714996800) == "0:00:00"
