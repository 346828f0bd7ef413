"""Política de reintentos por forma de petición.

El backend no documenta si espera el DTO en la raíz o envuelto, ni cómo
codifica los estados. En vez de callbacks recursivos, la política es una lista
ordenada de pasos `(trigger, transform)` ejecutada por un bucle acotado:

1. Se envía el DTO tal cual.
2. Tras un fallo, se busca el primer paso no usado cuyo `trigger` acepte el
   error; su `transform` produce el siguiente intento.
3. Sin paso aplicable, sin cambios en el cuerpo o sin intentos restantes, se
   relanza el último error sin modificar.

Los intentos son estrictamente secuenciales: un reintento concurrente podría
duplicar escrituras si el primer "fallo" llegó a tener efecto en el servidor.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Awaitable, Callable, Mapping, Sequence

from core.domain.envelopes import ROOT, EnvelopeVariant
from core.domain.status import DEFAULT_STATUS_CODEC, StatusCodec
from core.errors import ApiError, FailureKind, classify_failure

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 3


@dataclass(frozen=True)
class PayloadState:
    """DTO canónico + envoltura actual. Solo cambian la envoltura y el estado."""

    dto: Mapping[str, Any]
    envelope: EnvelopeVariant = ROOT

    def render(self) -> dict[str, Any]:
        return self.envelope.wrap(self.dto)


@dataclass(frozen=True)
class RetryStep:
    name: str
    trigger: Callable[[ApiError], bool]
    transform: Callable[[PayloadState], PayloadState]


def shape_mismatch_step(keyword: str, envelope: EnvelopeVariant) -> RetryStep:
    """Reintenta con `envelope` si un 400 menciona `keyword` (p.ej. `createjobdto`)."""

    def trigger(error: ApiError) -> bool:
        kind = classify_failure(error.status_code, error.body, shape_keyword=keyword)
        return kind is FailureKind.SHAPE_MISMATCH

    def transform(state: PayloadState) -> PayloadState:
        return replace(state, envelope=envelope)

    return RetryStep(name=f"wrap:{envelope.name}", trigger=trigger, transform=transform)


def reencode_status(dto: Mapping[str, Any], codec: StatusCodec = DEFAULT_STATUS_CODEC) -> dict[str, Any]:
    out = dict(dto)
    for key, value in dto.items():
        if key.lower() != "status":
            continue
        status = codec.to_canonical(value)
        if status is not None:
            out[key] = codec.canonical_integer(status)
    return out


def status_encoding_step(codec: StatusCodec = DEFAULT_STATUS_CODEC) -> RetryStep:
    def trigger(error: ApiError) -> bool:
        kind = classify_failure(error.status_code, error.body)
        return kind is FailureKind.STATUS_ENCODING_MISMATCH

    def transform(state: PayloadState) -> PayloadState:
        return replace(state, dto=reencode_status(state.dto, codec))

    return RetryStep(name="status:canonical", trigger=trigger, transform=transform)


@dataclass
class ShapeRetryPolicy:
    steps: Sequence[RetryStep] = field(default_factory=tuple)
    max_attempts: int = MAX_ATTEMPTS
    initial_envelope: EnvelopeVariant = ROOT

    @classmethod
    def for_operation(
        cls,
        keyword: str,
        envelopes: Sequence[EnvelopeVariant],
        *,
        max_attempts: int = MAX_ATTEMPTS,
        codec: StatusCodec = DEFAULT_STATUS_CODEC,
    ) -> "ShapeRetryPolicy":
        """Política estándar: raíz, luego cada envoltura alternativa, luego estado."""

        initial, *alternates = list(envelopes) or [ROOT]
        steps = [shape_mismatch_step(keyword, envelope) for envelope in alternates]
        steps.append(status_encoding_step(codec))
        return cls(steps=tuple(steps), max_attempts=max_attempts, initial_envelope=initial)

    async def execute(
        self,
        dto: Mapping[str, Any],
        send: Callable[[dict[str, Any]], Awaitable[Any]],
    ) -> Any:
        state = PayloadState(dto=dict(dto), envelope=self.initial_envelope)
        used: set[int] = set()
        attempt = 0
        while True:
            attempt += 1
            try:
                return await send(state.render())
            except ApiError as exc:
                if attempt >= self.max_attempts:
                    raise
                chosen = self._next_step(exc, used)
                if chosen is None:
                    raise
                index, step = chosen
                next_state = step.transform(state)
                if next_state == state:
                    raise
                used.add(index)
                logger.info(
                    "%s %s rejected (HTTP %s); retrying with %s",
                    exc.method,
                    exc.path,
                    exc.status_code,
                    step.name,
                )
                state = next_state

    def _next_step(self, error: ApiError, used: set[int]) -> tuple[int, RetryStep] | None:
        for index, step in enumerate(self.steps):
            if index in used:
                continue
            if step.trigger(error):
                return index, step
        return None
