"""Tests for the resource clients against a scripted backend."""

import asyncio

import pytest

from adapters.resources import (
    ApplicationsClient,
    CandidatesClient,
    InterviewsClient,
    JobsClient,
    NotificationsClient,
    OffersClient,
    OnboardingClient,
)
from core.domain.filters import ApplicationFilter, OfferFilter, ScheduleInterviewRequest
from core.domain.models import InterviewFormat, NotificationType, OfferStatus
from core.domain.status import ApplicationStatus
from core.errors import ApiError, NoEndpointAvailableError
from core.interfaces.resource import ResourceClient
from core.services.notifications import count_unread, job_posting_notification


def _run(coro):
    return asyncio.run(coro)


class TestJobsClient:
    def test_create_succeeds_first_try(self, api, backend):
        backend.queue(201, {"id": 11, "title": "Backend Dev"})
        job = _run(JobsClient(api).create({"title": " Backend Dev ", "salaryRange": "80k-100k"}))

        assert job.id == 11
        assert backend.paths == ["Jobs"]
        assert backend.bodies == [{"Title": "Backend Dev", "SalaryRange": "80k-100k", "Salary": 80}]

    def test_create_wraps_after_shape_mismatch(self, api, backend):
        backend.queue(400, {"errors": {"createJobDto": ["The createJobDto field is required."]}})
        backend.queue(201, {"Id": 12, "Title": "QA"})

        job = _run(JobsClient(api).create({"title": "QA"}))

        assert job.id == 12
        assert backend.bodies == [{"Title": "QA"}, {"createJobDto": {"Title": "QA"}}]

    def test_update_requires_id_before_any_request(self, api, backend):
        with pytest.raises(ValueError):
            _run(JobsClient(api).update({"title": "No id"}))
        assert backend.requests == []

    def test_update_puts_to_item_path(self, api, backend):
        backend.queue(400, "updateJobDto is required")
        backend.queue(204)

        result = _run(JobsClient(api).update({"id": 4, "rowVersion": "AQ==", "title": "Lead"}))

        assert result is None
        assert backend.paths == ["Jobs/4", "Jobs/4"]
        assert backend.bodies[1] == {"updateJobDto": {"Title": "Lead", "Id": 4, "RowVersion": "AQ=="}}

    def test_list_normalizes_page(self, api, backend):
        backend.queue(200, {"items": [{"Id": 1, "Title": "A"}], "totalCount": 1, "totalPages": 1})
        page = _run(JobsClient(api).list(1, 10))
        assert [job.title for job in page.items] == ["A"]
        assert page.total_count == 1
        assert backend.requests[0].url.params["pageSize"] == "10"

    def test_public_listing_uses_configured_endpoint(self, api, backend):
        backend.queue(200, [])
        _run(JobsClient(api).list_public())
        assert backend.paths == ["public/PublicJobs"]

    def test_satisfies_resource_protocol(self, api):
        assert isinstance(JobsClient(api), ResourceClient)

    def test_list_reads_comma_separated_requirements_and_salary_text(self, api, backend):
        backend.queue(
            200,
            {
                "items": [
                    {"id": 1, "title": "Data", "requirements": "Python, SQL", "salary": "90k"},
                    {"Id": 2, "Title": "Go dev", "Requirements": ["Go"], "Salary": None, "IsActive": None},
                ]
            },
        )

        page = _run(JobsClient(api).list())

        first, second = page.items
        assert first.requirements == ["Python", "SQL"]
        assert first.salary == 90
        assert second.requirements == ["Go"]
        assert second.salary is None
        assert second.is_active

    def test_unreadable_row_is_skipped(self, api, backend):
        backend.queue(200, {"items": [{"id": 1, "title": "A"}, {"id": 2, "publicId": {"nested": True}}], "totalCount": 2})

        page = _run(JobsClient(api).list())

        assert [job.id for job in page.items] == [1]
        assert page.total_count == 2

    def test_create_with_unreadable_echo_returns_none(self, api, backend):
        backend.queue(201, {"id": 5, "rowVersion": ["not", "a", "string"]})

        assert _run(JobsClient(api).create({"title": "QA"})) is None
        assert len(backend.requests) == 1


class TestApplicationsClient:
    def test_status_update_end_to_end(self, api, backend):
        backend.queue(400, {"errors": {"updateDto": ["The updateDto field is required."]}})
        backend.queue(200, {"id": 7, "status": 2})

        application = _run(ApplicationsClient(api).update_status({"applicationId": 7, "status": "Shortlisted"}))

        expected = {"applicationId": 7, "ApplicationId": 7, "status": 2, "Status": 2}
        assert [r.method for r in backend.requests] == ["PUT", "PUT"]
        assert backend.paths == ["Applications/7/status", "Applications/7/status"]
        assert backend.bodies == [expected, {"updateDto": expected}]
        assert application.status is ApplicationStatus.SHORTLISTED

    def test_status_update_without_id_fails_locally(self, api, backend):
        with pytest.raises(ValueError):
            _run(ApplicationsClient(api).update_status({"status": "Hired"}))
        assert backend.requests == []

    def test_no_retry_on_server_error(self, api, backend):
        backend.queue(500, "boom")
        with pytest.raises(ApiError):
            _run(ApplicationsClient(api).update_status({"applicationId": 7, "status": "Hired"}))
        assert len(backend.requests) == 1

    def test_create_sends_label_then_canonical_on_conversion_error(self, api, backend):
        backend.queue(400, {"errors": {"$.Status": ["The JSON value could not be converted to ApplicationStatus."]}})
        backend.queue(201, {"id": 1, "jobId": 3, "candidateId": 4, "status": "New"})

        _run(ApplicationsClient(api).create({"jobId": 3, "candidateId": 4, "status": "New"}))

        assert backend.bodies[0]["Status"] == "New"
        assert backend.bodies[1] == {"JobId": 3, "CandidateId": 4, "Status": 1}

    def test_list_hydrates_statuses(self, api, backend):
        backend.queue(200, {"items": [{"id": 1, "status": 0}, {"id": 2, "status": "Offer"}, {"id": 3, "status": "??"}]})

        page = _run(ApplicationsClient(api).list(ApplicationFilter(status="New")))

        assert [a.status for a in page.items] == [ApplicationStatus.NEW, ApplicationStatus.HIRED, "??"]
        assert backend.requests[0].url.params["status"] == "New"

    def test_history_sorted_by_change_date(self, api, backend):
        backend.queue(
            200,
            {
                "id": 5,
                "statusHistory": [
                    {"status": 2, "changedDate": "2025-02-01T00:00:00Z"},
                    {"status": 1, "changedDate": "2025-01-01T00:00:00Z"},
                ],
            },
        )
        history = _run(ApplicationsClient(api).history(5))
        assert [entry.status for entry in history] == [ApplicationStatus.NEW, ApplicationStatus.SHORTLISTED]


class TestCandidatesClient:
    def test_password_sent_only_on_create(self, api, backend):
        backend.queue(201, {"id": 1})
        backend.queue(200, {"id": 1})
        client = CandidatesClient(api)

        _run(client.create({"firstName": "Ada", "password": "pw"}))
        _run(client.update({"id": 1, "firstName": "Ada", "password": "pw"}))

        assert backend.bodies[0] == {"FirstName": "Ada", "Password": "pw"}
        assert "Password" not in backend.bodies[1]
        assert backend.paths == ["candidates", "candidates/1"]

    def test_search_reads_comma_separated_skills(self, api, backend):
        backend.queue(
            200,
            {"items": [{"id": 1, "keySkills": "python, sql", "itSkills": [{"skill": "Docker"}, {"version": "2"}]}]},
        )

        (candidate,) = _run(CandidatesClient(api).search("py"))

        assert candidate.key_skills == ["python", "sql"]
        assert candidate.it_skills == ["Docker"]

    def test_search(self, api, backend):
        backend.queue(200, [{"id": 1, "firstName": "Ada", "lastName": "L"}])
        results = _run(CandidatesClient(api).search("ada"))
        assert [c.full_name for c in results] == ["Ada L"]
        assert backend.requests[0].url.params["query"] == "ada"


class TestOffersClient:
    def test_tries_endpoints_until_one_answers(self, api, backend):
        backend.queue(404).queue(405)
        backend.queue(200, {"results": [{"offerId": 9, "status": "signed"}], "total": 1})

        page = _run(OffersClient(api).list(OfferFilter(search_term="  ada ")))

        assert backend.paths == ["Offers", "offers", "OfferLetters"]
        assert backend.requests[-1].url.params["searchTerm"] == "ada"
        assert page.items[0].id == "9"
        assert page.items[0].status is OfferStatus.ACCEPTED

    def test_other_errors_propagate(self, api, backend):
        backend.queue(404).queue(500)
        with pytest.raises(ApiError):
            _run(OffersClient(api).list())
        assert len(backend.requests) == 2

    def test_exhausted_probing(self, api, backend):
        for _ in range(5):
            backend.queue(404)
        with pytest.raises(NoEndpointAvailableError):
            _run(OffersClient(api).list())

    def test_writes_use_primary_endpoint(self, api, backend):
        backend.queue(201, {"id": "o-1", "candidateName": "Ada"})
        offer = _run(OffersClient(api).create({"candidateId": 1, "role": "Dev"}))
        assert backend.paths == ["Offers"]
        assert offer.candidate_name == "Ada"


class TestInterviewsClient:
    def test_calendar_404_degrades_to_empty(self, api, backend):
        backend.queue(404)
        response = _run(InterviewsClient(api).calendar())
        assert response.events == []
        assert response.total_count == 0

    def test_non_finite_durations_are_dropped(self, api, backend):
        backend.queue_raw(200, '{"items": [{"id": 1, "durationMinutes": NaN}, {"id": 2, "durationMinutes": Infinity}]}')

        response = _run(InterviewsClient(api).calendar())

        assert [event.duration_minutes for event in response.events] == [None, None]
        assert [event.duration for event in response.events] == [None, None]

    def test_non_finite_slot_duration_is_dropped(self, api, backend):
        backend.queue_raw(200, '{"slots": [{"start": "2025-05-01T09:00:00Z", "durationMinutes": NaN}]}')

        metadata = _run(InterviewsClient(api).schedule_metadata())

        assert metadata.suggested_slots[0].duration_minutes is None

    def test_metadata_other_errors_propagate(self, api, backend):
        backend.queue(500)
        with pytest.raises(ApiError):
            _run(InterviewsClient(api).schedule_metadata())

    def test_schedule_builds_payload_and_merges_overrides(self, api, backend):
        backend.queue(201, {"interviewId": 42, "startTime": "2025-05-01T09:00:00Z", "mode": "Zoom"})
        request = ScheduleInterviewRequest(
            candidate_name=" Ada ",
            stage="Technical",
            scheduled_date="2025-05-01",
            scheduled_time="09:00",
            timezone="UTC",
            duration_minutes=45,
            interviewers=["Bob", "Eve"],
            payload={"roomId": "r-2"},
        )

        event = _run(InterviewsClient(api).schedule(request))

        body = backend.bodies[0]
        assert body["candidateName"] == "Ada"
        assert body["durationMinutes"] == 45
        assert body["interviewers"] == ["Bob", "Eve"]
        assert body["roomId"] == "r-2"
        assert backend.paths == ["Interviews"]
        assert event.id == "42"
        assert event.type is InterviewFormat.VIRTUAL


class TestOnboardingClient:
    def test_list(self, api, backend):
        backend.queue(200, {"items": [{"Id": 1, "CandidateName": "Ada"}], "totalCount": 1})
        page = _run(OnboardingClient(api).list({"pageNumber": 1}))
        assert page.items[0].candidate_name == "Ada"
        assert backend.paths == ["Onboarding"]


class TestNotificationsClient:
    def test_for_candidate_reads_known_and_unknown_types(self, api, backend):
        backend.queue(
            200,
            [
                {
                    "id": "n1",
                    "candidateId": 4,
                    "jobId": 9,
                    "jobTitle": "Dev",
                    "message": "Good match!",
                    "matchPercentage": "85",
                    "type": "skill-match",
                    "read": False,
                    "createdAt": "2025-03-01T10:00:00Z",
                },
                {"id": "n2", "type": "interview-reminder", "read": True},
            ],
        )

        notifications = _run(NotificationsClient(api).for_candidate(4))

        assert backend.paths == ["notifications/candidate/4"]
        assert [n.type for n in notifications] == [NotificationType.SKILL_MATCH, "interview-reminder"]
        assert notifications[0].match_percentage == 85
        assert count_unread(notifications) == 1

    @pytest.mark.parametrize("body, expected", [(3, 3), ({"unreadCount": 2}, 2), ({"count": "7"}, 7), ({}, 0)])
    def test_unread_count_shapes(self, api, backend, body, expected):
        backend.queue(200, body)
        assert _run(NotificationsClient(api).unread_count(4)) == expected
        assert backend.paths == ["notifications/candidate/4/unread-count"]

    def test_mark_read(self, api, backend):
        backend.queue(204).queue(204)
        client = NotificationsClient(api)

        _run(client.mark_read("n1"))
        _run(client.mark_all_read(4))

        assert [r.method for r in backend.requests] == ["PUT", "PUT"]
        assert backend.paths == ["notifications/n1/read", "notifications/candidate/4/mark-all-read"]
        assert backend.bodies == [{}, {}]

    def test_create_sends_camel_case_body(self, api, backend):
        backend.queue(201, {"id": "n9", "candidateId": 4, "type": "job-posting"})
        notification = job_posting_notification(4, 9, "Dev", "New role")

        created = _run(NotificationsClient(api).create(notification))

        body = backend.bodies[0]
        assert body["candidateId"] == 4
        assert body["jobTitle"] == "Dev"
        assert body["type"] == "job-posting"
        assert body["actionUrl"] == "/dashboard/jobs/9"
        assert "id" not in body
        assert created.id == "n9"

    def test_delete(self, api, backend):
        backend.queue(204)
        _run(NotificationsClient(api).delete("n1"))
        assert backend.paths == ["notifications/n1"]
        assert backend.requests[0].method == "DELETE"
