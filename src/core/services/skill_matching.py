"""Afinidad entre el perfil de un candidato y una oferta de empleo.

Por qué en el Core:
- Es lógica pura sobre `Candidate` y `Job`: no hace I/O y se puede probar sin
  backend.
- El porcentaje y el umbral alimentan tanto la CLI como las notificaciones de
  "skill match".

Reglas:
- Habilidades del candidato: `keySkills`, `itSkills` y el campo heredado
  `skills` (texto separado por comas), en minúsculas y sin duplicados.
- Habilidades de la oferta: `requirements` más las palabras técnicas
  conocidas que aparezcan en la descripción.
- Una habilidad cuenta si coincide exacta, por subcadena o por familia
  (p. ej. "react" cubre "javascript").
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Iterable, Sequence

from core.domain.models import Candidate, Job, JobMatch, MatchRequirements

SKILLS_THRESHOLD = 60

TECH_KEYWORDS: tuple[str, ...] = (
    "java", "python", "javascript", "typescript", "golang", "rust", "c++", "c#", "php", "ruby",
    "angular", "react", "vue", "node", "express", "spring", "django", "flask", "laravel",
    "sql", "mysql", "postgresql", "mongodb", "redis", "elasticsearch", "docker", "kubernetes",
    "aws", "gcp", "azure", "git", "ci/cd", "jenkins", "gitlab", "microservices", "rest", "graphql",
    "html", "css", "sass", "webpack", "gradle", "maven", "npm", "yarn", "linux", "windows",
)

SKILL_FAMILIES: dict[str, tuple[str, ...]] = {
    "javascript": ("js", "typescript", "ts", "node", "react", "angular", "vue"),
    "python": ("django", "flask", "pandas", "numpy"),
    "java": ("spring", "maven", "gradle", "j2ee"),
    "c#": ("dotnet", ".net", "asp.net"),
    "database": ("sql", "mysql", "postgresql", "mongodb", "nosql"),
    "devops": ("docker", "kubernetes", "ci/cd", "jenkins", "gitlab", "terraform"),
    "cloud": ("aws", "azure", "gcp", "cloud"),
}

_EXPERIENCE_PATTERNS = (
    re.compile(r"(\d+)\+?\s*(?:years?|yrs?)\s+(?:of\s+)?experience", re.IGNORECASE),
    re.compile(r"experience[:\s]+(\d+)\+?\s*(?:years?|yrs?)", re.IGNORECASE),
    re.compile(r"(?:minimum|at least|required)\s+(\d+)\s+years?", re.IGNORECASE),
)
_FIRST_NUMBER_RE = re.compile(r"(\d+)")


def _round_half_up(value: float) -> int:
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


def _unique_lower(values: Iterable[str]) -> list[str]:
    seen: dict[str, None] = {}
    for value in values:
        text = value.strip().lower()
        if text:
            seen.setdefault(text, None)
    return list(seen)


def candidate_skills(candidate: Candidate) -> list[str]:
    legacy = (candidate.skills or "").split(",")
    return _unique_lower([*candidate.key_skills, *candidate.it_skills, *legacy])


def tech_keywords(description: str) -> list[str]:
    text = description.lower()
    return [keyword for keyword in TECH_KEYWORDS if keyword in text]


def job_required_skills(job: Job) -> list[str]:
    return _unique_lower([*job.requirements, *tech_keywords(job.description)])


def is_similar_skill_present(required_skill: str, skills: Sequence[str]) -> bool:
    required = required_skill.strip().lower()
    if any(skill == required for skill in skills):
        return True
    if any(skill in required or required in skill for skill in skills):
        return True
    for family, variants in SKILL_FAMILIES.items():
        if family not in required and not any(variant in required for variant in variants):
            continue
        if any(family in skill or any(variant in skill for variant in variants) for skill in skills):
            return True
    return False


def skill_match(skills: Sequence[str], required: Sequence[str]) -> tuple[int, list[str], list[str]]:
    """Devuelve `(porcentaje, cubiertas, faltantes)`; sin requisitos, 100%."""

    if not required:
        return 100, [], []
    matched = [skill for skill in required if is_similar_skill_present(skill, skills)]
    missing = [skill for skill in required if skill not in matched]
    return _round_half_up(len(matched) / len(required) * 100), matched, missing


def candidate_experience_years(candidate: Candidate, *, now: datetime | None = None) -> int:
    """Años de experiencia a partir del historial laboral.

    Sin historial se usa el texto heredado `experience` ("5 years" -> 5).
    Las entradas sin fecha de inicio no suman.
    """

    now = now or datetime.now(timezone.utc)
    if not candidate.employment:
        match = _FIRST_NUMBER_RE.search(candidate.experience or "")
        return int(match.group(1)) if match else 0

    total_months = 0
    for entry in candidate.employment:
        if entry.start_date is None:
            continue
        end = now if entry.currently_working or entry.end_date is None else entry.end_date
        total_months += (end.year - entry.start_date.year) * 12 + (end.month - entry.start_date.month)
    return _round_half_up(total_months / 12)


def experience_requirement(job: Job) -> int:
    text = f"{', '.join(job.requirements)} {job.description}"
    for pattern in _EXPERIENCE_PATTERNS:
        match = pattern.search(text)
        if match:
            return int(match.group(1))
    return 0


def calculate_job_match(candidate: Candidate, job: Job, *, now: datetime | None = None) -> JobMatch:
    percentage, matched, missing = skill_match(candidate_skills(candidate), job_required_skills(job))
    return JobMatch(
        job=job,
        match_percentage=percentage,
        matched_skills=matched,
        missing_skills=missing,
        requirements_met=MatchRequirements(
            skills_required=percentage >= SKILLS_THRESHOLD,
            experience_required=candidate_experience_years(candidate, now=now) >= experience_requirement(job),
        ),
    )


def find_matching_jobs(candidate: Candidate, jobs: Iterable[Job], *, now: datetime | None = None) -> list[JobMatch]:
    """Todas las ofertas, de mayor a menor afinidad (empates en orden original)."""

    matches = [calculate_job_match(candidate, job, now=now) for job in jobs]
    return sorted(matches, key=lambda match: match.match_percentage, reverse=True)


def match_message(match: JobMatch) -> str:
    percentage = match.match_percentage
    title = match.job.title
    if percentage >= 90:
        return f'Excellent match! Your profile matches {percentage}% of the requirements for "{title}"'
    if percentage >= 70:
        return f'Good match! Your profile matches {percentage}% of the requirements for "{title}"'
    if percentage >= 50:
        return f'Potential match! Your profile matches {percentage}% of the requirements for "{title}"'
    return f'New job posted: "{title}" - Consider developing some additional skills to increase your match'


def match_tier(percentage: int) -> str:
    if percentage >= 80:
        return "excellent"
    if percentage >= 60:
        return "good"
    if percentage >= 40:
        return "fair"
    return "poor"
