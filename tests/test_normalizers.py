"""Tests for read-model normalization (calendar, feedback, offers, paging)."""

from datetime import datetime, timedelta, timezone

import pytest

from core.domain.models import (
    Candidate,
    FeedbackVerdict,
    InterviewFormat,
    Job,
    Notification,
    NotificationType,
    OfferStatus,
)
from core.services.calendar_normalizer import (
    classify_format,
    classify_verdict,
    normalize_calendar_event,
    normalize_calendar_response,
    normalize_feedback_entry,
    normalize_feedback_response,
    normalize_schedule_metadata,
    normalize_time_slot,
)
from core.services.offer_normalizer import normalize_offer, normalize_offer_status, normalize_probability
from core.services.paging import normalize_page


def _recent(moment):
    return abs(datetime.now(timezone.utc) - moment) < timedelta(minutes=1)


class TestCalendarEvents:
    def test_teams_call_is_virtual(self):
        event = normalize_calendar_event({"type": "MS Teams call", "dateTime": "2025-04-01T10:00:00Z"})
        assert event.type is InterviewFormat.VIRTUAL

    def test_missing_start_defaults_to_now(self):
        event = normalize_calendar_event({"id": 1})
        assert _recent(event.date_time)

    def test_malformed_start_defaults_to_now(self):
        assert _recent(normalize_calendar_event({"start": "sometime soon"}).date_time)

    def test_start_precedence(self):
        event = normalize_calendar_event(
            {"scheduledStart": "2025-01-02T09:00:00Z", "startTime": "2025-01-03T09:00:00Z"}
        )
        assert event.date_time.day == 2

    def test_defaults(self):
        event = normalize_calendar_event({})
        assert event.id.startswith("int-")
        assert event.candidate == "Pending assignment"
        assert event.role == "Untitled role"
        assert event.stage == "Interview"
        assert event.interviewer == "Hiring team"
        assert event.duration is None

    def test_duration_from_minutes_and_label(self):
        assert normalize_calendar_event({"durationMinutes": 45}).duration == "45 mins"
        event = normalize_calendar_event({"durationLabel": "1 hour 30"})
        assert event.duration == "1 hour 30"
        assert event.duration_minutes == 1

    @pytest.mark.parametrize("minutes", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_duration_is_dropped(self, minutes):
        event = normalize_calendar_event({"durationMinutes": minutes})
        assert event.duration_minutes is None
        assert event.duration is None

    def test_pascal_case_ids(self):
        assert normalize_calendar_event({"InterviewId": 77}).id == "77"

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("Zoom", InterviewFormat.VIRTUAL),
            ("Head office", InterviewFormat.ONSITE),
            ("In-person", InterviewFormat.IN_PERSON),
            ("phone", InterviewFormat.VIRTUAL),
            (None, InterviewFormat.VIRTUAL),
        ],
    )
    def test_format_classification(self, raw, expected):
        assert classify_format(raw) is expected

    def test_response_shapes(self):
        assert normalize_calendar_response(None).events == []
        bare = normalize_calendar_response([{"id": 1}, {"id": 2}])
        assert bare.total_count == 2
        wrapped = normalize_calendar_response({"events": [{"id": 1}], "totalCount": 10})
        assert [e.id for e in wrapped.events] == ["1"]
        assert wrapped.total_count == 10


class TestFeedback:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("Advance", FeedbackVerdict.ADVANCE),
            ("advancing", FeedbackVerdict.ADVANCE),
            ("hold", FeedbackVerdict.HOLD),
            ("no hire", FeedbackVerdict.REJECT),
            (None, FeedbackVerdict.REJECT),
        ],
    )
    def test_verdicts(self, raw, expected):
        assert classify_verdict(raw) is expected

    def test_entry_defaults_and_lists(self):
        entry = normalize_feedback_entry({"feedbackId": "f1", "strengths": "SQL, APIs", "score": "4.5"})
        assert entry.id == "f1"
        assert entry.candidate == "Unknown candidate"
        assert entry.status == "Pending decision"
        assert entry.strengths == ["SQL", "APIs"]
        assert entry.score == 4.5
        assert _recent(entry.submitted_on)

    def test_response_container(self):
        assert normalize_feedback_response({"feedback": [{"id": 1}]})[0].id == "1"
        assert normalize_feedback_response(None) == []


class TestScheduleMetadata:
    def test_options_and_slots(self):
        metadata = normalize_schedule_metadata(
            {
                "stages": ["Screen", {"label": "Onsite"}],
                "locations": [{"value": "hq", "name": "HQ"}, {"id": "x"}, "Remote"],
                "slots": [
                    {"startUtc": "2025-05-01T09:00:00Z", "zone": "Europe/Madrid"},
                    {"label": "no start"},
                ],
                "defaultProvider": "Teams",
            }
        )
        assert metadata.stage_options == ["Screen", "Onsite"]
        assert [(o.id, o.label) for o in metadata.location_options] == [("hq", "HQ"), ("Remote", "Remote")]
        assert len(metadata.suggested_slots) == 1
        assert metadata.suggested_slots[0].label == "Europe/Madrid slot"
        assert metadata.default_provider == "Teams"

    def test_slot_with_non_finite_duration(self):
        slot = normalize_time_slot({"start": "2025-05-01T09:00:00Z", "durationMinutes": float("nan")})
        assert slot.duration_minutes is None

    def test_slot_timezone_defaults_to_utc(self):
        slot = normalize_time_slot({"start": "2025-05-01T09:00:00Z"})
        assert slot.timezone == "UTC"
        assert normalize_time_slot(None) is None


class TestOffers:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("Signed", OfferStatus.ACCEPTED),
            ("e-signature pending", OfferStatus.ACCEPTED),
            ("NEGOTIATING", OfferStatus.NEGOTIATION),
            ("rescinded", OfferStatus.WITHDRAWN),
            ("lapsed", OfferStatus.EXPIRED),
            (2, OfferStatus.NEGOTIATION),
            (3.7, OfferStatus.ACCEPTED),
            (42, OfferStatus.PENDING),
            ("", OfferStatus.PENDING),
            (None, OfferStatus.PENDING),
        ],
    )
    def test_status(self, raw, expected):
        assert normalize_offer_status(raw) is expected

    @pytest.mark.parametrize(
        "raw, expected",
        [("65%", 0.65), ("65", 0.65), (0.4, 0.4), (80, 0.8), ("250%", 1.0), (-3, 0.0), ("abc", None), (None, None)],
    )
    def test_probability(self, raw, expected):
        result = normalize_probability(raw)
        if expected is None:
            assert result is None
        else:
            assert result == pytest.approx(expected)

    def test_nested_offer(self):
        offer = normalize_offer(
            {
                "OfferId": 3,
                "Candidate": {"FirstName": "Ada", "LastName": "Lovelace", "Email": "ada@x.io"},
                "Recruiter": {"FullName": "Grace Hopper"},
                "Job": {"Id": 8, "Title": "Engineer"},
                "StartDate": "2025-07-01",
                "likelihood": "70%",
            }
        )
        assert offer.id == "3"
        assert offer.candidate_name == "Ada Lovelace"
        assert offer.candidate_email == "ada@x.io"
        assert offer.role == "Engineer"
        assert offer.job_id == 8
        assert offer.recruiter == "Grace Hopper"
        assert offer.recruiter_name == "Grace Hopper"
        assert offer.target_start.year == 2025
        assert offer.acceptance_probability == pytest.approx(0.7)

    def test_flat_defaults(self):
        offer = normalize_offer({})
        assert offer.id.startswith("offer-")
        assert offer.candidate_name == "Unknown candidate"
        assert offer.role == "Untitled role"
        assert offer.status is OfferStatus.PENDING


class TestPaging:
    def test_null_is_empty_first_page(self):
        page = normalize_page(None, dict)
        assert page.items == []
        assert page.page_number == 1
        assert page.total_count == 0

    def test_bare_list_is_single_page(self):
        page = normalize_page([{"a": 1}, {"a": 2}], dict)
        assert page.total_count == 2
        assert page.total_pages == 1
        assert not page.has_next_page

    def test_alternate_keys(self):
        page = normalize_page(
            {"data": [{"a": 1}], "total": 30, "pages": 3, "currentPage": 2, "pageLength": 10},
            dict,
        )
        assert page.total_count == 30
        assert page.page_number == 2
        assert page.page_size == 10
        assert page.has_previous_page
        assert page.has_next_page

    def test_explicit_flags_win(self):
        page = normalize_page({"items": [], "pageNumber": 2, "totalPages": 3, "hasMore": False}, dict)
        assert not page.has_next_page


class TestLenientReadModels:
    def test_job_from_irregular_row(self):
        job = Job.model_validate(
            {
                "Id": "12",
                "Title": None,
                "Requirements": "Python; SQL\nDocker",
                "Salary": "80,000 - 100,000",
                "PostedDate": "not a date",
            }
        )
        assert job.id == 12
        assert job.title == ""
        assert job.requirements == ["Python", "SQL", "Docker"]
        assert job.salary == 80000
        assert job.posted_date is None

    def test_candidate_legacy_fields(self):
        candidate = Candidate.model_validate(
            {
                "firstName": "Ada",
                "keySkills": None,
                "skills": "Go, Rust",
                "experience": 7,
                "employment": [{"startDate": "2020-01-01", "currentlyWorking": True}, "garbage"],
            }
        )
        assert candidate.key_skills == []
        assert candidate.skills == "Go, Rust"
        assert candidate.experience == "7"
        assert len(candidate.employment) == 1
        assert candidate.employment[0].currently_working

    def test_notification_defaults(self):
        notification = Notification.model_validate({"candidateId": "4", "matchPercentage": None, "type": None})
        assert notification.candidate_id == 4
        assert notification.match_percentage == 0
        assert notification.type is NotificationType.JOB_POSTING
        assert not notification.read
        assert _recent(notification.created_at)
