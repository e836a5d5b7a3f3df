"""Error taxonomy for reading and writing game state over communities."""

from __future__ import annotations

from typing import Iterable, Optional


class ChannelError(Exception):
    """Base class. `code` is a stable identifier, `retryable` a hint to callers."""

    code = "channel_error"
    retryable = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.code}:{self.message}"


class DuplicateFragmentError(ChannelError):
    """The same fragment type appeared twice among marker-AS communities."""

    code = "duplicate_fragment"

    def __init__(self, fragment: str, community=None):
        super().__init__(f"{fragment} fragment advertised more than once")
        self.fragment = fragment
        self.community = community


class InvalidTypeError(ChannelError):
    """A marker-AS community carried an unknown 2-bit type tag."""

    code = "invalid_type"

    def __init__(self, type_tag: int, community=None):
        super().__init__(f"unknown community type {type_tag}")
        self.type_tag = type_tag
        self.community = community


class IncompleteStateError(ChannelError):
    """One or both fragments were missing after a full scan."""

    code = "incomplete_state"
    retryable = True

    def __init__(self, missing: Iterable[str]):
        self.missing = sorted(missing)
        super().__init__(f"missing {', '.join(self.missing)} fragment")


class TransportError(ChannelError):
    """Fetching from or publishing to the routing daemon failed."""

    code = "transport_error"
    retryable = True

    def __init__(self, message: str, reply_code: Optional[int] = None):
        super().__init__(message)
        self.reply_code = reply_code
