"""Error hierarchy for hugoify.

Every public error class inherits from :class:`HugoifyError`. Each carries a
machine-readable ``code`` (from :class:`ErrorCode`), a human-readable
``message``, an optional structured ``context`` dict, and an optional
``cause`` (chained exception).

Skipping a page because its categories are not mapped is *not* an error and
is never signalled with an exception; see :class:`hugoify.models.Skip`.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable error codes for every error hugoify can raise."""

    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    RENDER_ERROR = "RENDER_ERROR"
    UNSUPPORTED_BLOCK = "UNSUPPORTED_BLOCK"
    TEMPLATE_ERROR = "TEMPLATE_ERROR"
    METADATA_ERROR = "METADATA_ERROR"
    MEDIA_ERROR = "MEDIA_ERROR"
    API_ERROR = "API_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    RETRY_EXHAUSTED = "RETRY_EXHAUSTED"


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class HugoifyError(Exception):
    """Base exception for all hugoify errors.

    Parameters
    ----------
    code:
        A value from :class:`ErrorCode` (or any string) identifying the
        error category.
    message:
        A developer-friendly description of what went wrong.
    context:
        Arbitrary structured data providing extra diagnostic detail.
    cause:
        The underlying exception, if this error wraps another.
    """

    def __init__(
        self,
        code: str,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.code: str = code
        self.message: str = message
        self.context: dict[str, Any] = context or {}
        self.cause: Exception | None = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"


# ---------------------------------------------------------------------------
# Startup errors
# ---------------------------------------------------------------------------

class HugoifyConfigurationError(HugoifyError):
    """Configuration is missing or invalid (template, output path, storage).

    Raised before any page is processed; never caught per page.

    Context keys: ``field``, ``value``, ``path``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.CONFIGURATION_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# Per-page errors
# ---------------------------------------------------------------------------

class HugoifyRenderError(HugoifyError):
    """Block content is malformed or cannot be rendered.

    Aborts the current page only.

    Context keys: ``block_id``, ``block_type``.
    """

    def __init__(
        self,
        code: str = ErrorCode.RENDER_ERROR,
        message: str = "Render error",
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            context=context,
            cause=cause,
        )


class HugoifyUnsupportedBlockError(HugoifyRenderError):
    """A block type has no Markdown rule and the configured policy is
    ``"raise"``.

    Context keys: ``block_id``, ``block_type``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.UNSUPPORTED_BLOCK,
            message=message,
            context=context,
            cause=cause,
        )


class HugoifyTemplateError(HugoifyRenderError):
    """The front-matter template failed to render or the output file could
    not be written.

    Context keys: ``path``, ``template``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.TEMPLATE_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class HugoifyMetadataError(HugoifyError):
    """The page object itself is unusable (not a mapping, or no ``id``).

    Missing or mistyped *properties* never raise this; they are treated as
    absent.

    Context keys: ``page_type``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.METADATA_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class HugoifyMediaError(HugoifyError):
    """Downloading or persisting a media asset failed.

    Aborts the current page only; never retried.

    Context keys: ``url``, ``status_code``, ``path``, ``key``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.MEDIA_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# Notion API errors
# ---------------------------------------------------------------------------

class HugoifyAPIError(HugoifyError):
    """The Notion API returned a non-retryable error response.

    Context keys: ``status_code``, ``notion_code``, ``path``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.API_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class HugoifyNetworkError(HugoifyError):
    """A transport-level failure occurred (timeout, DNS, connection reset).

    Context keys: ``url``, ``attempt``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.NETWORK_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class HugoifyRetryExhaustedError(HugoifyError):
    """All retry attempts have been exhausted for a retryable request.

    Context keys: ``attempts``, ``last_status_code``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.RETRY_EXHAUSTED,
            message=message,
            context=context,
            cause=cause,
        )
