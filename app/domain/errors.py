class DomainError(Exception):
    """Base class for all domain-level errors."""

    pass


class CacheFailure(DomainError):
    """Internal response-cache error (e.g. an input that cannot be fingerprinted).

    Never reaches a client: callers log it and recompute.
    """

    pass


class InvalidOrExpiredCode(DomainError):
    """Passcode missing, wrong, already used or expired.

    The message is the same for every case so the reset flow does not leak
    which emails have a pending code.
    """

    def __init__(self) -> None:
        super().__init__("invalid or expired code")


class TooManyAttempts(DomainError):
    """The passcode ran out of verification attempts; a new one must be issued."""

    def __init__(self) -> None:
        super().__init__("too many attempts; request a new code")


class ConfigurationMissing(DomainError):
    """A required collaborator (storage backend, random source) is unavailable."""

    pass


class InvalidResetToken(DomainError):
    """Reset token unknown, expired or already consumed."""

    pass


class EmailServiceUnavailable(DomainError):
    """No mail relay is configured, so codes cannot be delivered."""

    pass


class UserNotFound(DomainError):
    """No user matches the lookup criteria (e.g., email)."""

    pass


class InvalidAnalysisInput(DomainError):
    """Text handed to an AI analysis is too short or empty."""

    pass
