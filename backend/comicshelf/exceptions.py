"""
ComicShelf Backend — Custom Exception Hierarchy
=================================================

What:  Defines application-specific exceptions for startup and request failures.
Why:   Custom exceptions enable targeted error handling with appropriate HTTP
       status codes, and a clean split between fatal startup conditions
       and per-request failures.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch the request-time
       ones and return structured JSON error responses.
Who:   Raised by archive sources, the index builder and the query accessors.

Exception Hierarchy:
    ComicShelfError (base)
    ├── ArchiveOpenError     → fatal at startup (missing/corrupt archive)
    ├── EmptyIndexError      → fatal at startup (no strip accepted)
    ├── NotFoundError        → 404 Not Found
    ├── StreamOpenError      → 500 Internal Server Error
    └── StreamCopyError      → raised mid-response; connection is aborted

Note:
    Per-entry rejections during the archive scan are NOT exceptions. They are
    expected, high-frequency outcomes and are represented by
    `comicshelf.services.classifier.Rejection` values instead.
"""

from typing import Any, Dict, Optional


class ComicShelfError(Exception):
    """
    Base exception for all ComicShelf application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ArchiveOpenError(ComicShelfError):
    """
    Raised when the strip archive cannot be opened or its directory read.

    When:    File missing, unsupported suffix, corrupt header, permission denied.
    Effect:  Fatal at startup — the server must not begin serving.
    """

    def __init__(
        self,
        message: str = "Unable to open archive",
        path: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if path:
            ctx["path"] = path
        super().__init__(message=message, context=ctx)
        self.path = path


class EmptyIndexError(ComicShelfError):
    """
    Raised when a scan completes without accepting a single strip.

    Why fatal: Serving an empty index is a configuration error (wrong archive,
    wrong layout), not a transient condition worth retrying.
    """

    def __init__(
        self,
        message: str = "No comic strips were found in archive",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(ComicShelfError):
    """
    Raised when a requested year or strip path is absent from the index.

    HTTP:    404 Not Found
    Logging: Not an error — the access log records the 404.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class StreamOpenError(ComicShelfError):
    """
    Raised when an indexed archive entry cannot be opened for reading.

    HTTP:    500 Internal Server Error
    Effect:  Affects only the current request; the index is untouched.
    """

    def __init__(
        self,
        message: str = "Unable to open comic strip",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StreamCopyError(ComicShelfError):
    """
    Raised when reading an entry fails after the response has started.

    Headers (and possibly part of the body) are already on the wire, so no
    error body can be sent; the server aborts the connection instead.
    """

    def __init__(
        self,
        message: str = "Unable to serve comic strip",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
