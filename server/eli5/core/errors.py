from __future__ import annotations


class ExplainError(Exception):
    """Failure that is safe to show to the end user.

    ``message`` is short and non-technical; diagnostic detail belongs in the
    log, never here.
    """

    status_code = 500
    default_message = 'Something went wrong. Please try again.'

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ConfigMissing(ExplainError):
    status_code = 503
    default_message = 'API key is missing or invalid. Please check your environment variables.'

    @classmethod
    def for_service(cls, service: str) -> 'ConfigMissing':
        return cls(f'{service} API key is missing or invalid. Please check your environment variables.')


class InvalidUrl(ExplainError):
    status_code = 400
    default_message = 'Please enter a valid Warpcast or Farcaster URL'


class CastNotFound(ExplainError):
    status_code = 404
    default_message = 'Cast not found. Please check the URL and try again.'


class UpstreamFailure(ExplainError):
    status_code = 502
    default_message = 'Something went wrong talking to an upstream service. Please try again.'


class EmptyGeneration(UpstreamFailure):
    default_message = 'No explanation was generated. Please try again.'


class SessionStateError(RuntimeError):
    """Raised when a session action is not allowed in the current state."""


FETCH_FAILED_MESSAGE = 'Failed to fetch cast. Please check the URL and try again.'
GENERATE_FAILED_MESSAGE = 'Failed to generate explanation. Please try again.'
RATE_LIMITED_MESSAGE = 'Rate limit exceeded. Please try again in a moment.'
