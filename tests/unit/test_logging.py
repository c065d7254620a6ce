"""Tests for the logging helpers."""

import pytest

from catalog.config import EntityKind, ModerationStatus
from catalog.core.logging import (
    bind_user,
    clear_request_context,
    get_request_id,
    render_enums,
    set_request_context,
)


@pytest.mark.unit
class TestRenderEnums:
    def test_enums_become_values(self):
        event = render_enums(None, "info", {"event": "x", "kind": EntityKind.FIGURE, "status": ModerationStatus.PENDING, "n": 3})
        assert event == {"event": "x", "kind": "figure", "status": "PENDING", "n": 3}


@pytest.mark.unit
class TestRequestContext:
    def test_bind_and_clear(self):
        set_request_context("abc")
        bind_user(7)
        try:
            assert get_request_id() == "abc"
        finally:
            clear_request_context()
        assert get_request_id() is None

    def test_new_request_drops_previous_user(self):
        import structlog

        set_request_context("first")
        bind_user(7)
        set_request_context("second")
        try:
            assert "user_id" not in structlog.contextvars.get_contextvars()
        finally:
            clear_request_context()
