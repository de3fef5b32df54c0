"""
Custom exceptions for the CloudWatch writer.

Provides a small typed taxonomy so callers can tell configuration mistakes,
bootstrap failures and delivery failures apart.
"""

from __future__ import annotations

import re
from typing import Optional


class WriterError(Exception):
    """Base error for the CloudWatch writer."""

    pass


class ConfigError(WriterError):
    """Invalid writer configuration (e.g. batch interval below the floor)."""

    pass


class BootstrapError(WriterError):
    """Log group/stream could not be resolved or created."""

    pass


class DeliveryError(WriterError):
    """A batch could not be delivered and was dropped."""

    pass


class LogsServiceError(WriterError):
    """Typed error reported by the CloudWatch Logs service."""

    pass


class ResourceNotFound(LogsServiceError):
    """The log group (or stream) does not exist."""

    pass


class ResourceAlreadyExists(LogsServiceError):
    """The log group or stream being created already exists."""

    pass


class OrderingConflict(LogsServiceError):
    """The sequence token sent with a batch was stale.

    ``expected_token`` is the token the service actually expected; it may be
    ``None`` for a stream that has never received events.
    """

    def __init__(self, message: str, expected_token: Optional[str] = None):
        super().__init__(message)
        self.expected_token = expected_token


_EXPECTED_TOKEN_RE = re.compile(r"sequenceToken(?: is)?:\s*(\S+)")


def _expected_token(response: dict, message: str) -> Optional[str]:
    # modeled field first, then the human readable message
    token = response.get("expectedSequenceToken")
    if token is None:
        token = response.get("Error", {}).get("expectedSequenceToken")
    if token is None:
        match = _EXPECTED_TOKEN_RE.search(message)
        if match and match.group(1) != "null":
            token = match.group(1)
    return token


def map_client_error(e: Exception) -> WriterError:
    from botocore.exceptions import ClientError

    if isinstance(e, WriterError):
        return e
    if not isinstance(e, ClientError):
        return DeliveryError(str(e))

    error = e.response.get("Error", {})
    code = error.get("Code", "")
    message = error.get("Message", "") or str(e)
    if code == "ResourceNotFoundException":
        return ResourceNotFound(message)
    if code == "ResourceAlreadyExistsException":
        return ResourceAlreadyExists(message)
    if code == "InvalidSequenceTokenException":
        return OrderingConflict(message, _expected_token(e.response, message))
    return DeliveryError(f"{code}: {message}" if code else message)
