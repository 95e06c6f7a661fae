"""Tests for path template placeholder helpers."""

from __future__ import annotations

from apilib.definition.templates import extract_placeholders, substitute_placeholders


class TestExtractPlaceholders:
    def test_no_placeholders(self) -> None:
        assert extract_placeholders("users") == []

    def test_single(self) -> None:
        assert extract_placeholders("users/{userId}") == ["userId"]

    def test_order_is_left_to_right(self) -> None:
        assert extract_placeholders("users/{userId}/posts/{postId}") == ["userId", "postId"]

    def test_empty_braces_are_not_placeholders(self) -> None:
        assert extract_placeholders("users/{}") == []


class TestSubstitutePlaceholders:
    def test_template_without_placeholders_is_unchanged(self) -> None:
        assert substitute_placeholders("colors", {"colorId": 1}) == "colors"

    def test_values_are_stringified(self) -> None:
        assert substitute_placeholders("colors/{colorId}", {"colorId": 1}) == "colors/1"

    def test_multiple(self) -> None:
        path = substitute_placeholders(
            "users/{userId}/posts/{postId}", {"postId": "b", "userId": "a"}
        )
        assert path == "users/a/posts/b"

    def test_missing_value_becomes_empty(self) -> None:
        assert substitute_placeholders("users/{userId}", {}) == "users/"

    def test_none_value_becomes_empty(self) -> None:
        assert substitute_placeholders("users/{userId}", {"userId": None}) == "users/"
