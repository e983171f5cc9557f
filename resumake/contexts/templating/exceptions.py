"""Custom exceptions for the templating context."""

from typing import Any, Optional


class InvalidResumeStructureError(ValueError):
    """
    Raised when a resume payload cannot be read as a document at all.

    Content-level problems (a bullet of the wrong shape, a missing company name) are
    never raised; they are skipped during parsing. This error is reserved for payloads
    with no usable section list.

    Attributes:
        message: Error description
        payload_excerpt: Short repr of the offending value, for diagnostics
    """

    def __init__(self, message: str, payload: Optional[Any] = None):
        self.message = message
        self.payload_excerpt = None

        parts = [message]
        if payload is not None:
            excerpt = repr(payload)
            self.payload_excerpt = excerpt[:197] + "..." if len(excerpt) > 200 else excerpt
            parts.append(f"Received: {self.payload_excerpt}")

        super().__init__("\n".join(parts))
