"""Error types raised by the intake pipeline, session controller and gateway."""


class LabCopilotError(Exception):
    """Base class for errors surfaced to the user as a message."""

    status_code = 500

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class IntakeError(LabCopilotError):
    """A file batch was rejected before admission."""

    status_code = 400


class IntakeSizeError(IntakeError):
    status_code = 413


class IntakeTypeError(IntakeError):
    status_code = 415


class IntakeCountError(IntakeError):
    pass


class IntakeReadError(IntakeError):
    pass


class SubmissionGuardError(LabCopilotError):
    """Analyze was requested with neither attachments nor notes."""

    status_code = 400


class SessionBusyError(LabCopilotError):
    """Analyze was requested while a previous analysis is still running."""

    status_code = 409


class GatewayError(LabCopilotError):
    """The hosted model call failed."""

    status_code = 502
