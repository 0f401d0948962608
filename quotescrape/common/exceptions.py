"""Exception types for scraper errors.

Per-page failures (transport, bad status, parse) derive from ScrapeError.
The driver catches them, logs them and drops the page; they never stop a run.
ExportFailureException is the only fatal error and does not
derive from ScrapeError.
"""

from typing import Any


class ScrapeError(Exception):
    """Base class for errors that cause a single page to be dropped.

    Attributes:
        message: Human-readable description of the failure.
        url: The URL of the page that failed.
        context: Additional context (status codes, selectors, counts).
    """

    def __init__(
        self,
        message: str,
        url: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable description of the failure.
            url: The URL of the page that triggered this error.
            context: Optional dict of additional context.
        """
        self.message = message
        self.url = url
        self.context = context or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context.

        Returns:
            Formatted error message string.
        """
        parts = [self.message, f"URL: {self.url}"]

        if self.context:
            parts.append("Context:")
            for key, value in self.context.items():
                parts.append(f"  {key}: {value}")

        return "\n".join(parts)


# =============================================================================
# Fetch errors
# =============================================================================


class TransientException(ScrapeError):
    """Base class for errors that might resolve on retry.

    The request manager retries these itself; by the time one reaches the
    driver, every attempt has been used.
    """


class TransportException(TransientException):
    """Raised when every GET attempt failed at the transport layer.

    Attributes:
        attempts: Number of GET attempts that were made.
        last_error: The transport error raised by the final attempt.
    """

    def __init__(
        self, url: str, attempts: int, last_error: BaseException
    ) -> None:
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"Transport error after {attempts} attempt(s): {last_error!r}",
            url,
            {"attempts": attempts, "error_type": type(last_error).__name__},
        )


class BadStatusException(ScrapeError):
    """Raised when the server answers with a status other than 200.

    Not retried: the status surfaces immediately.

    Attributes:
        status_code: The HTTP status code received.
    """

    def __init__(self, status_code: int, url: str) -> None:
        self.status_code = status_code
        super().__init__(
            f"HTTP {status_code} from {url} (expected 200)",
            url,
            {"status_code": status_code},
        )


class ResponseException(ScrapeError):
    """Raised when a response arrives but cannot be read.

    Covers httpx errors outside the transport layer, such as a body whose
    Content-Encoding does not decode or a redirect chain that never ends.
    Not retried.

    Attributes:
        error: The httpx error that was raised.
    """

    def __init__(self, url: str, error: BaseException) -> None:
        self.error = error
        super().__init__(
            f"Unreadable response: {error!r}",
            url,
            {"error_type": type(error).__name__},
        )


# =============================================================================
# Parse errors
# =============================================================================


class ParseFailureException(ScrapeError):
    """Raised when a page body cannot be parsed as HTML."""


class HTMLStructuralAssumptionException(ParseFailureException):
    """Raised when a CSS selector matches an unexpected number of elements.

    This usually indicates that the website's HTML structure has changed,
    or that the selector itself is invalid.

    Attributes:
        selector: The CSS selector that was used.
        description: Human-readable description of what was being selected.
        expected_min: Minimum number of elements expected.
        expected_max: Maximum number of elements expected (None = unlimited).
        actual_count: Actual number of elements found.
    """

    def __init__(
        self,
        selector: str,
        description: str,
        expected_min: int,
        expected_max: int | None,
        actual_count: int,
        url: str,
    ) -> None:
        self.selector = selector
        self.description = description
        self.expected_min = expected_min
        self.expected_max = expected_max
        self.actual_count = actual_count

        if expected_max is None:
            expected_str = f"at least {expected_min}"
        elif expected_min == expected_max:
            expected_str = f"exactly {expected_min}"
        else:
            expected_str = f"between {expected_min} and {expected_max}"

        message = (
            f"HTML structure mismatch: Expected {expected_str} "
            f"elements for '{description}', but found {actual_count}"
        )

        context = {
            "selector": selector,
            "expected_min": expected_min,
            "expected_max": expected_max
            if expected_max is not None
            else "unlimited",
            "actual_count": actual_count,
        }

        super().__init__(message, url, context)


# =============================================================================
# Export errors
# =============================================================================


class ExportFailureException(Exception):
    """Raised when the CSV sink cannot be created, written or closed.

    Fatal: the CLI logs it once and exits non-zero.

    Attributes:
        path: The output path that failed.
        message: Human-readable error message.
    """

    def __init__(self, path: str, cause: BaseException) -> None:
        self.path = path
        self.message = f"Could not write CSV to {path}: {cause}"
        super().__init__(self.message)
