"""Clientes de recurso del backend.

Por qué un paquete:
- Un módulo por recurso (jobs, candidates, applications, offers...).
- Todos heredan de `BaseResourceClient` y comparten la política de reintentos.
"""

from adapters.resources.applications import ApplicationsClient
from adapters.resources.candidates import CandidatesClient
from adapters.resources.interviews import InterviewsClient
from adapters.resources.jobs import JobsClient
from adapters.resources.notifications import NotificationsClient
from adapters.resources.offers import OffersClient
from adapters.resources.onboarding import OnboardingClient

__all__ = [
	"ApplicationsClient",
	"CandidatesClient",
	"InterviewsClient",
	"JobsClient",
	"NotificationsClient",
	"OffersClient",
	"OnboardingClient",
]
