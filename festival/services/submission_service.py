"""
Participant submission service.

This module drives a registration from a filled-in draft to the remote
participant service:
- Local pre-flight validation (age, CPF, rules accepted) without touching
  the network
- Normalization of masked fields into the digits-only wire payload
- A single bounded POST with timeout, rejection and outage handling
- At most one in-flight submission per draft

The service never mutates the draft. Callers discard it only after an
ACCEPTED outcome; on every other outcome the draft stays as it was.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from django.conf import settings
from django.core.cache import cache
from loguru import logger

from festival.drafts import ParticipantDraft
from festival.exceptions import (
    ParticipantRejectedError,
    ParticipantServiceTimeout,
    ParticipantServiceUnavailable,
    SubmissionInProgressError,
)
from festival.formatting import only_digits
from festival.services.eligibility import AgeEligibilityEvaluator
from festival.services.participant_api import ParticipantAPIClient
from festival.validators import is_valid_cpf

LOCK_KEY_PREFIX = "festival:submission-lock:"

REGULATION_REQUIRED_MESSAGE = (
    "Você deve aceitar o regulamento para prosseguir com a inscrição."
)
INVALID_CPF_MESSAGE = "CPF inválido."
TIMEOUT_MESSAGE = "Timeout na conexão. Tente novamente mais tarde."
UNREACHABLE_MESSAGE = (
    "Não foi possível conectar ao servidor de inscrições. "
    "Tente novamente mais tarde."
)
REJECTED_MESSAGE = "Erro ao enviar inscrição. Tente novamente."
SIMULATED_MESSAGE = "Servidor de inscrições offline: sucesso simulado (desenvolvimento)."


class SubmissionStatus(str, Enum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    NETWORK_FAILURE = "network_failure"
    INVALID = "invalid"


class FailureReason(str, Enum):
    TIMEOUT = "timeout"
    UNREACHABLE = "unreachable"


@dataclass(frozen=True)
class SubmissionOutcome:
    """
    Result of a submission attempt.

    Attributes:
        status: What happened
        message: User-facing summary
        reason: Why a NETWORK_FAILURE happened
        errors: Field name → messages, for INVALID outcomes
        server_message: Body text of a REJECTED response
        simulated: True when an outage was reported as success (lenient mode)
    """

    status: SubmissionStatus
    message: str = ""
    reason: FailureReason | None = None
    errors: dict[str, list[str]] = field(default_factory=dict)
    server_message: str = ""
    simulated: bool = False

    @property
    def accepted(self) -> bool:
        return self.status == SubmissionStatus.ACCEPTED


class SubmissionCoordinator:
    """
    Validate a draft locally and send it to the participant service.

    Args:
        client: Participant service client
        lenient_offline: Report an unreachable service as a (simulated)
            success. Defaults to ``settings.PARTICIPANT_API_LENIENT_OFFLINE``;
            meant for local development only.

    Example:
        >>> coordinator = SubmissionCoordinator()
        >>> outcome = coordinator.submit(draft)
        >>> if outcome.accepted:
        ...     discard_draft(request.session)
    """

    def __init__(
        self,
        client: ParticipantAPIClient | None = None,
        lenient_offline: bool | None = None,
        evaluator: AgeEligibilityEvaluator | None = None,
    ):
        self.client = client or ParticipantAPIClient()
        if lenient_offline is None:
            lenient_offline = settings.PARTICIPANT_API_LENIENT_OFFLINE
        self.lenient_offline = lenient_offline
        self.evaluator = evaluator or AgeEligibilityEvaluator()

    def validate_draft(
        self, draft: ParticipantDraft, as_of: date | None = None
    ) -> dict[str, list[str]]:
        """
        Run the pre-flight checks.

        Returns:
            Field name → error messages; empty when the draft may be sent
        """
        errors: dict[str, list[str]] = {}

        age_result = self.evaluator.evaluate(draft.birth_date, as_of=as_of)
        if not age_result.is_valid:
            errors.setdefault("birth_date", []).append(age_result.message)

        if not is_valid_cpf(draft.cpf):
            errors.setdefault("cpf", []).append(INVALID_CPF_MESSAGE)

        if not draft.regulation_accepted:
            errors.setdefault("regulation_accepted", []).append(
                REGULATION_REQUIRED_MESSAGE
            )

        logger.debug(f"Draft validation completed with {len(errors)} error(s)")
        return errors

    def submit(
        self, draft: ParticipantDraft, as_of: date | None = None
    ) -> SubmissionOutcome:
        """
        Submit ``draft`` to the participant service.

        Raises:
            SubmissionInProgressError: If a submission for this draft is pending
        """
        errors = self.validate_draft(draft, as_of=as_of)
        if errors:
            logger.info(f"Submission blocked by local validation: {sorted(errors)}")
            first_message = next(iter(errors.values()))[0]
            return SubmissionOutcome(
                status=SubmissionStatus.INVALID, message=first_message, errors=errors
            )

        lock_key = f"{LOCK_KEY_PREFIX}{draft.draft_id}"
        if not cache.add(lock_key, True, timeout=settings.SUBMISSION_LOCK_TIMEOUT):
            logger.warning(f"Submission already pending for draft {draft.draft_id}")
            raise SubmissionInProgressError(draft.draft_id)

        try:
            return self._send(draft)
        finally:
            cache.delete(lock_key)

    def _send(self, draft: ParticipantDraft) -> SubmissionOutcome:
        payload = draft.to_payload()
        masked_cpf = f"***{only_digits(draft.cpf)[-2:]}"
        logger.info(
            f"Submitting participant {payload['name']!r} (CPF {masked_cpf}) "
            f"for city {payload['cityId']}"
        )

        try:
            self.client.create_participant(payload)
        except ParticipantServiceTimeout:
            return SubmissionOutcome(
                status=SubmissionStatus.NETWORK_FAILURE,
                message=TIMEOUT_MESSAGE,
                reason=FailureReason.TIMEOUT,
            )
        except ParticipantServiceUnavailable as e:
            if self.lenient_offline:
                logger.warning(
                    f"Participant service unreachable ({e}); "
                    f"reporting simulated success (lenient offline mode)"
                )
                return SubmissionOutcome(
                    status=SubmissionStatus.ACCEPTED,
                    message=SIMULATED_MESSAGE,
                    simulated=True,
                )
            logger.error(f"Participant service unreachable: {e}")
            return SubmissionOutcome(
                status=SubmissionStatus.NETWORK_FAILURE,
                message=UNREACHABLE_MESSAGE,
                reason=FailureReason.UNREACHABLE,
            )
        except ParticipantRejectedError as e:
            logger.warning(f"Participant service rejected submission: {e}")
            return SubmissionOutcome(
                status=SubmissionStatus.REJECTED,
                message=REJECTED_MESSAGE,
                server_message=e.server_message,
            )

        logger.info(f"Participant {payload['name']!r} accepted")
        return SubmissionOutcome(status=SubmissionStatus.ACCEPTED)
