"""Tests for the ingest view reducer and session registry."""

import pytest

from smart_inventory.exceptions import FieldValidationError
from smart_inventory.ingest.csv_parser import ValidationIssue
from smart_inventory.ingest.state import (
    FAILED,
    IDLE,
    PREVIEWED,
    UPLOADED,
    UPLOADING,
    Cleared,
    FileSelected,
    IngestSessions,
    IngestState,
    UploadCompleted,
    UploadStarted,
    reduce,
)

ROW = {"date": "2025-11-27", "store_id": "S1", "sku_id": "SKU1", "units_sold": "3"}


def selected(name="a.csv", issues=()):
    return FileSelected(filename=name, content=b"...", preview=(ROW,), issues=issues)


def test_file_selected_starts_new_generation():
    state = reduce(IngestState(), selected())
    assert state.generation == 1
    assert state.status == PREVIEWED
    assert state.can_upload


def test_upload_round_trip():
    state = reduce(IngestState(), selected())
    state = reduce(state, UploadStarted(state.generation))
    assert state.status == UPLOADING
    assert not state.can_upload

    state = reduce(state, UploadCompleted(state.generation, success=True, message="done", result={"inserted": 1}))
    assert state.status == UPLOADED
    assert state.message == "done"
    assert state.result == {"inserted": 1}
    assert state.content == b""
    assert state.preview == (ROW,)
    assert not state.can_upload


def test_failed_upload_keeps_file_for_retry():
    state = reduce(IngestState(), selected())
    state = reduce(state, UploadStarted(state.generation))
    state = reduce(state, UploadCompleted(state.generation, success=False, message="Error: timeout"))
    assert state.status == FAILED
    assert state.filename == "a.csv"
    assert state.content == b"..."
    assert state.can_upload


def test_stale_completion_is_ignored():
    state = reduce(IngestState(), selected("old.csv"))
    old_generation = state.generation
    state = reduce(state, UploadStarted(old_generation))

    # user picks another file while the first upload is in flight
    state = reduce(state, selected("new.csv"))
    after = reduce(state, UploadCompleted(old_generation, success=True, message="old result"))

    assert after is state
    assert after.filename == "new.csv"
    assert after.status == PREVIEWED
    assert after.message is None


def test_stale_start_is_ignored():
    state = reduce(IngestState(), selected())
    state = reduce(state, Cleared())
    assert reduce(state, UploadStarted(1)) is state


def test_completion_without_start_is_ignored():
    state = reduce(IngestState(), selected())
    assert reduce(state, UploadCompleted(state.generation, success=True, message="x")) is state


def test_clear_resets_but_advances_generation():
    state = reduce(IngestState(), selected())
    cleared = reduce(state, Cleared())
    assert cleared.status == IDLE
    assert cleared.filename is None
    assert cleared.generation == 2


def test_issues_block_upload():
    issue = ValidationIssue(1, "units_sold", "BAD_NUMBER", "Invalid units_sold: must be a number", "abc")
    state = reduce(IngestState(), selected(issues=(issue,)))
    assert not state.can_upload
    assert state.to_dict()["errors"] == [issue.to_dict()]

    with pytest.raises(FieldValidationError) as exc:
        state.ensure_no_issues()
    assert exc.value.details == {"errors_count": 1}


def test_states_are_immutable():
    state = IngestState()
    with pytest.raises(AttributeError):
        state.status = UPLOADING


def test_unknown_action():
    with pytest.raises(TypeError):
        reduce(IngestState(), object())


class TestIngestSessions:

    def test_create_dispatch_drop(self):
        sessions = IngestSessions()
        upload_id = sessions.create()
        assert sessions.get(upload_id) == IngestState()

        state = sessions.dispatch(upload_id, selected())
        assert sessions.get(upload_id) is state

        assert sessions.drop(upload_id)
        assert sessions.get(upload_id) is None
        assert not sessions.drop(upload_id)

    def test_full_registry_evicts_oldest(self):
        sessions = IngestSessions(max_sessions=2)
        first = sessions.create()
        second = sessions.create()
        third = sessions.create()

        assert sessions.get(first) is None
        assert sessions.get(second) == IngestState()
        assert sessions.get(third) == IngestState()
        assert sessions.dispatch(first, selected()) is None

    def test_dispatch_after_drop_is_noop(self):
        sessions = IngestSessions()
        upload_id = sessions.create()
        sessions.drop(upload_id)
        assert sessions.dispatch(upload_id, Cleared()) is None
        assert sessions.get(upload_id) is None
