"""Tests for the application status codec."""

import pytest

from core.domain.status import DEFAULT_STATUS_CODEC, ApplicationStatus, StatusEncoding

codec = DEFAULT_STATUS_CODEC


class TestRoundTrips:
    @pytest.mark.parametrize("status", list(ApplicationStatus))
    def test_label_and_integer_round_trip(self, status):
        assert codec.to_canonical(codec.to_label(status)) is status
        assert codec.to_canonical(codec.canonical_integer(status)) is status

    def test_canonical_integers_are_one_indexed(self):
        assert [codec.canonical_integer(s) for s in codec.order] == [1, 2, 3, 4]


class TestToCanonical:
    def test_unmapped_number_fails_without_raising(self):
        assert codec.to_canonical(99) is None

    def test_zero_is_read_as_zero_based_index(self):
        assert codec.to_canonical(0) is ApplicationStatus.NEW

    def test_floats_truncate_toward_zero(self):
        assert codec.to_canonical(2.9) is ApplicationStatus.SHORTLISTED

    def test_numeric_text_is_coerced(self):
        assert codec.to_canonical(" 3 ") is ApplicationStatus.REJECTED

    def test_labels_are_case_insensitive(self):
        assert codec.to_canonical("hIrEd") is ApplicationStatus.HIRED

    def test_human_labels(self):
        assert codec.to_canonical("Interview Scheduled") is ApplicationStatus.SHORTLISTED
        assert codec.to_canonical("under review") is ApplicationStatus.NEW

    @pytest.mark.parametrize("raw", [None, True, "", "   ", "archived", float("nan"), object()])
    def test_untranslatable_input(self, raw):
        assert codec.to_canonical(raw) is None


class TestEncode:
    def test_encodings(self):
        status = ApplicationStatus.SHORTLISTED
        assert codec.encode(status) == 2
        assert codec.encode(status, StatusEncoding.ZERO_INDEXED) == 1
        assert codec.encode(status, StatusEncoding.LABEL) == "Shortlisted"
