"""Custom exceptions for sitespec."""


class SiteSpecError(Exception):
    """Base class for all sitespec exceptions."""

    pass


class GenerationError(SiteSpecError):
    """Raised when the model output cannot be turned into a usable adapter spec.

    Attributes:
        hint: Short reason fed back to the model on the next attempt

    """

    def __init__(self, message: str, hint: str = ''):
        """Initialize generation error.

        Args:
            message: Human readable error message
            hint: Short reason appended to the next prompt as a validation error

        """
        self.hint = hint or message
        super().__init__(message)


class AdapterParseError(GenerationError):
    """Raised when no JSON object can be recovered from the model output."""

    def __init__(self, message: str = 'could not parse adapter json'):
        """Initialize parse error with the fixed retry hint."""
        super().__init__(message, hint='json parse failed')


class InvalidSpecError(GenerationError):
    """Raised when a candidate spec fails the structural gate or type validation."""

    def __init__(self, reason: str):
        """Initialize invalid spec error.

        Args:
            reason: Validator error such as 'itemSelector missing'

        """
        self.reason = reason
        super().__init__(f'invalid spec: {reason}', hint=reason)


class ModelCallError(SiteSpecError):
    """Raised when the model provider request itself fails."""

    pass


class FetchError(SiteSpecError):
    """Raised when page markup cannot be fetched."""

    def __init__(self, url: str, reason: str):
        """Initialize fetch error.

        Args:
            url: URL that could not be fetched
            reason: Underlying transport error

        """
        self.url = url
        self.reason = reason
        super().__init__(f'Fetch failed for {url}: {reason}')


class InvalidURLError(SiteSpecError):
    """Raised when a lookup or generation request carries an unusable URL."""

    pass
