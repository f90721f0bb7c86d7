"""
Service layer for the festival application.

Business rules live here, separated from views so they can be unit tested
without requests or templates.
"""

from .eligibility import AgeEligibilityEvaluator, AgeValidationResult, evaluate_age
from .participant_api import CityDirectory, ParticipantAPIClient
from .submission_service import SubmissionCoordinator, SubmissionOutcome
from .voting_window import VotingDecision, VotingWindowResolver

__all__ = [
    "AgeEligibilityEvaluator",
    "AgeValidationResult",
    "CityDirectory",
    "ParticipantAPIClient",
    "SubmissionCoordinator",
    "SubmissionOutcome",
    "VotingDecision",
    "VotingWindowResolver",
    "evaluate_age",
]
