"""Tests for candidate/job skill matching and notification builders."""

from datetime import datetime, timezone

import pytest

from core.domain.models import Candidate, Job, NotificationType
from core.services.notifications import application_update_notification, skill_match_notification
from core.services.skill_matching import (
    calculate_job_match,
    candidate_experience_years,
    candidate_skills,
    experience_requirement,
    find_matching_jobs,
    is_similar_skill_present,
    job_required_skills,
    match_message,
    match_tier,
    skill_match,
)

NOW = datetime(2025, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def candidate():
    return Candidate.model_validate(
        {
            "id": 4,
            "keySkills": ["Python", "SQL"],
            "itSkills": [{"skill": "Docker"}],
            "skills": "Git, python, ",
            "experience": "4 years",
        }
    )


@pytest.fixture
def backend_job():
    return Job.model_validate(
        {
            "id": 9,
            "title": "Backend",
            "requirements": "Python, Kubernetes, Scala",
            "description": "We use Docker and need 5+ years of experience",
        }
    )


class TestSkillExtraction:
    def test_candidate_skills_are_lower_cased_and_unique(self, candidate):
        assert candidate_skills(candidate) == ["python", "sql", "docker", "git"]

    def test_job_skills_include_description_keywords(self, backend_job):
        assert job_required_skills(backend_job) == ["python", "kubernetes", "scala", "docker"]

    @pytest.mark.parametrize(
        "required, skills, expected",
        [
            ("python", ["python"], True),
            ("javascript", ["js"], True),
            ("JavaScript", ["react"], True),
            ("terraform", ["jenkins"], True),
            ("c#", [".net core"], True),
            ("scala", ["python", "docker"], False),
        ],
    )
    def test_similar_skills(self, required, skills, expected):
        assert is_similar_skill_present(required, skills) is expected

    def test_no_requirements_is_full_match(self):
        assert skill_match(["python"], []) == (100, [], [])


class TestExperience:
    def test_requirement_patterns(self):
        assert experience_requirement(Job(description="5+ years of experience")) == 5
        assert experience_requirement(Job(requirements=["Experience: 3 yrs"])) == 3
        assert experience_requirement(Job(description="at least 2 years in fintech")) == 2
        assert experience_requirement(Job(description="Junior welcome")) == 0

    def test_years_from_employment_round_half_up(self):
        candidate = Candidate.model_validate(
            {
                "employment": [
                    {"startDate": "2019-01-01", "endDate": "2021-07-01"},
                    {"startDate": "2022-01-01", "currentlyWorking": True},
                    {"designation": "No dates"},
                ]
            }
        )
        # 30 + 36 months = 5.5 years
        assert candidate_experience_years(candidate, now=NOW) == 6

    def test_years_from_legacy_text(self, candidate):
        assert candidate_experience_years(candidate, now=NOW) == 4
        assert candidate_experience_years(Candidate(), now=NOW) == 0


class TestJobMatch:
    def test_calculate_job_match(self, candidate, backend_job):
        match = calculate_job_match(candidate, backend_job, now=NOW)

        assert match.match_percentage == 75
        assert match.matched_skills == ["python", "kubernetes", "docker"]
        assert match.missing_skills == ["scala"]
        assert match.requirements_met.skills_required
        assert not match.requirements_met.experience_required

    def test_find_matching_jobs_sorted_and_stable(self, candidate, backend_job):
        open_job = Job(id=1, title="Anything")
        other_open_job = Job(id=2, title="Anything else")
        rust_job = Job(id=3, title="Systems", requirements=["Rust", "Haskell"])

        matches = find_matching_jobs(candidate, [rust_job, open_job, backend_job, other_open_job], now=NOW)

        assert [m.job.id for m in matches] == [1, 2, 9, 3]
        assert [m.match_percentage for m in matches] == [100, 100, 75, 0]

    @pytest.mark.parametrize(
        "percentage, prefix, tier",
        [
            (95, "Excellent match!", "excellent"),
            (75, "Good match!", "good"),
            (55, "Potential match!", "fair"),
            (10, "New job posted:", "poor"),
        ],
    )
    def test_message_and_tier(self, candidate, percentage, prefix, tier):
        match = calculate_job_match(candidate, Job(title="Dev"), now=NOW).model_copy(
            update={"match_percentage": percentage}
        )
        assert match_message(match).startswith(prefix)
        assert '"Dev"' in match_message(match)
        assert match_tier(percentage) == tier


class TestNotificationBuilders:
    def test_skill_match_notification(self, candidate, backend_job):
        match = calculate_job_match(candidate, backend_job, now=NOW)
        notification = skill_match_notification(4, match)

        assert notification.type is NotificationType.SKILL_MATCH
        assert notification.job_id == 9
        assert notification.match_percentage == 75
        assert notification.message.startswith("Good match!")
        assert notification.action_url == "/dashboard/jobs/9"
        assert not notification.read

    def test_application_update_notification(self):
        notification = application_update_notification(4, 9, "Backend", "Shortlisted", "We will call you.")

        assert notification.message == (
            'Your application status for "Backend" has been updated to: Shortlisted. We will call you.'
        )
        assert notification.action_url == "/candidate-dashboard"
        assert notification.match_percentage == 0
