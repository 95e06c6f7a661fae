"""Tests for the request draft value object."""

from __future__ import annotations

from apilib.builder.draft import DraftState, RequestDraft


class TestState:
    def test_empty(self) -> None:
        draft = RequestDraft()
        assert draft.state is DraftState.EMPTY
        assert draft.is_empty

    def test_endpoint_set(self) -> None:
        assert RequestDraft(endpoint="users").state is DraftState.ENDPOINT_SET

    def test_action_set(self) -> None:
        assert RequestDraft(endpoint="users", action="index").state is DraftState.ACTION_SET

    def test_composing(self) -> None:
        draft = RequestDraft(endpoint="users", action="index", query={"page": 2})
        assert draft.state is DraftState.COMPOSING
        assert not draft.is_empty

    def test_falsy_body_is_composing(self) -> None:
        draft = RequestDraft(endpoint="users", action="store", body="")
        assert draft.state is DraftState.COMPOSING


class TestCopy:
    def test_copy_does_not_share_mappings(self) -> None:
        draft = RequestDraft(endpoint="users", action="show", parameters={"userId": 1})
        clone = draft.copy()
        clone.parameters["userId"] = 2
        clone.query["delay"] = 3
        assert draft.parameters == {"userId": 1}
        assert draft.query == {}

    def test_copy_is_equal(self) -> None:
        draft = RequestDraft(endpoint="users", action="store", body={"name": "morpheus"})
        assert draft.copy() == draft
