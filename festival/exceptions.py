"""
Exceptions raised by the festival service layer.

Local validation problems use Django's ``ValidationError``; everything here
describes what happened while talking to the participant service or while
resolving a voting link.
"""


class ParticipantServiceError(Exception):
    """Base class for failures talking to the participant service."""


class ParticipantServiceTimeout(ParticipantServiceError):
    """The request was aborted after its time budget elapsed."""


class ParticipantServiceUnavailable(ParticipantServiceError):
    """The service could not be reached (no HTTP response at all)."""


class ParticipantRejectedError(ParticipantServiceError):
    """
    The service answered with a non-success status.

    Attributes:
        status_code: HTTP status returned by the service
        server_message: Response body text, shown to the user as-is
    """

    def __init__(self, status_code: int, server_message: str):
        super().__init__(f"HTTP {status_code}: {server_message}")
        self.status_code = status_code
        self.server_message = server_message


class SubmissionInProgressError(Exception):
    """A submission for the same draft is still pending."""


class UnknownCityError(KeyError):
    """The city key has no entry in the voting windows configuration."""
