"""Tests for the bounded shape-retry driver."""

import asyncio

import pytest

from core.domain.envelopes import ROOT, EnvelopeVariant
from core.errors import ApiError
from core.services.retry_policy import ShapeRetryPolicy, reencode_status


def _error(status_code, body=None):
    return ApiError(method="POST", path="Jobs", status_code=status_code, body=body)


class FakeSend:
    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    async def __call__(self, body):
        self.calls.append(body)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def _policy(**kwargs):
    return ShapeRetryPolicy.for_operation(
        "createjobdto",
        (ROOT, EnvelopeVariant.keyed("createJobDto")),
        **kwargs,
    )


class TestShapeRetryPolicy:
    def test_single_call_on_success(self):
        send = FakeSend({"id": 1})
        result = asyncio.run(_policy().execute({"Title": "Dev"}, send))
        assert result == {"id": 1}
        assert send.calls == [{"Title": "Dev"}]

    def test_wraps_after_shape_mismatch(self):
        send = FakeSend(
            _error(400, {"errors": {"createJobDto": ["The createJobDto field is required."]}}),
            {"id": 1},
        )
        asyncio.run(_policy().execute({"Title": "Dev"}, send))
        assert send.calls == [{"Title": "Dev"}, {"createJobDto": {"Title": "Dev"}}]

    def test_no_retry_on_server_error(self):
        error = _error(500, "boom")
        send = FakeSend(error)
        with pytest.raises(ApiError) as info:
            asyncio.run(_policy().execute({"Title": "Dev"}, send))
        assert info.value is error
        assert len(send.calls) == 1

    def test_unrelated_400_is_reraised(self):
        send = FakeSend(_error(400, {"title": "Title is required"}))
        with pytest.raises(ApiError):
            asyncio.run(_policy().execute({"Title": ""}, send))
        assert len(send.calls) == 1

    def test_status_reencoded_after_wrap(self):
        send = FakeSend(
            _error(400, "createJobDto is required"),
            _error(400, {"errors": {"$.Status": ["The JSON value could not be converted to Status."]}}),
            {"ok": True},
        )
        asyncio.run(_policy().execute({"Status": "Shortlisted"}, send))
        assert send.calls[2] == {"createJobDto": {"Status": 2}}
        assert len(send.calls) == 3

    def test_never_exceeds_three_attempts(self):
        error = _error(400, "createjobdto: status could not be converted to int")
        send = FakeSend(error, error, error, error)
        with pytest.raises(ApiError):
            asyncio.run(_policy().execute({"Status": "Hired"}, send))
        assert len(send.calls) == 3

    def test_respects_lower_attempt_cap(self):
        send = FakeSend(_error(400, "createjobdto"), {"ok": True})
        with pytest.raises(ApiError):
            asyncio.run(_policy(max_attempts=1).execute({"Title": "Dev"}, send))
        assert len(send.calls) == 1

    def test_unchanged_payload_is_not_resent(self):
        # Status already canonical: re-encoding would send the same body.
        send = FakeSend(_error(400, "Status could not be converted to enum"))
        with pytest.raises(ApiError):
            asyncio.run(_policy().execute({"Status": 2}, send))
        assert len(send.calls) == 1


def test_reencode_status_touches_only_status_keys():
    assert reencode_status({"status": "hired", "Status": "New", "Notes": "x"}) == {
        "status": 4,
        "Status": 1,
        "Notes": "x",
    }
