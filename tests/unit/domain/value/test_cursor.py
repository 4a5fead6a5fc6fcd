"""Unit tests for the pagination cursor."""

import base64
import json
from datetime import datetime, timezone
from uuid import uuid4

import pytest
from pydantic import ValidationError as PydanticValidationError

from commentary.domain.error import ValidationError
from commentary.domain.value import Cursor


class TestCursor:
    """Tests for Cursor encoding and ordering."""

    def test_decode_inverts_encode(self):
        cursor = Cursor(
            created_at=datetime(2026, 3, 1, 9, 30, 15, 123456, tzinfo=timezone.utc),
            comment_id=uuid4(),
        )

        assert Cursor.decode(cursor.encode()) == cursor

    def test_token_is_url_safe(self):
        token = Cursor(
            created_at=datetime.now(timezone.utc), comment_id=uuid4()
        ).encode()

        assert all(ch.isalnum() or ch in "-_=" for ch in token)

    def test_naive_timestamp_rejected(self):
        with pytest.raises(ValueError):
            Cursor(created_at=datetime(2026, 1, 1), comment_id=uuid4())

    def test_key_orders_by_time_then_id(self):
        moment = datetime(2026, 1, 1, tzinfo=timezone.utc)
        low, high = sorted([uuid4(), uuid4()])

        first = Cursor(created_at=moment, comment_id=low)
        second = Cursor(created_at=moment, comment_id=high)

        assert first.key < second.key

    @pytest.mark.parametrize(
        "token",
        [
            "garbage!",
            base64.urlsafe_b64encode(b"not json").decode(),
            base64.urlsafe_b64encode(json.dumps({"created_at": "x"}).encode()).decode(),
            base64.urlsafe_b64encode(
                json.dumps(
                    {"created_at": "2026-01-01T00:00:00", "comment_id": str(uuid4())}
                ).encode()
            ).decode(),
        ],
    )
    def test_malformed_token_rejected(self, token):
        with pytest.raises(ValidationError):
            Cursor.decode(token)

    def test_cursor_is_immutable(self):
        cursor = Cursor(created_at=datetime.now(timezone.utc), comment_id=uuid4())

        with pytest.raises(PydanticValidationError):
            cursor.comment_id = uuid4()
