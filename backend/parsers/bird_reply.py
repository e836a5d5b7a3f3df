"""
Parse replies from the BIRD control socket.

Every reply line starts with a 4-digit code. A '-' after the code means
more lines follow; a space means this is the last line of the reply.
Lines starting with a space continue the previous code.

    1007-Table master4:
    1.1.1.0/24           unicast [peer1 12:00:00.000] * (100) [AS65001i]
    1012-	BGP.community: (23456,16385) (23456,35952) (65000,0)
    0000

Codes 8xxx are runtime errors, 9xxx parse errors.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from collectors import Community
from errors import TransportError

logger = logging.getLogger(__name__)

# Terminating line of a reply. pexpect compiles with DOTALL, so no '.*'.
REPLY_END_PATTERN = r"(?m)^\d{4} [^\n]*\n"

_LINE_RE = re.compile(r'^(\d{4})([ -])(.*)$')
_COMMUNITY_RE = re.compile(r'\((\d+),\s*(\d+)\)')

CODE_RUNTIME_ERROR = 8000
CODE_ROUTE_NOT_FOUND = 8001
CODE_PARSE_ERROR = 9000


@dataclass
class BirdReply:
    """One complete reply: final code plus all text lines in order."""
    code: Optional[int] = None
    lines: list[tuple[int, str]] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "\n".join(text for _, text in self.lines)

    @property
    def is_error(self) -> bool:
        return self.code is not None and self.code >= CODE_RUNTIME_ERROR

    @property
    def message(self) -> str:
        if not self.lines:
            return ""
        return self.lines[-1][1].strip()


def parse_reply(raw: str) -> BirdReply:
    """Split raw reply text into coded lines. The final coded line sets `code`."""
    reply = BirdReply()
    current: Optional[int] = None

    for line in raw.replace('\r\n', '\n').split('\n'):
        if not line:
            continue

        m = _LINE_RE.match(line)
        if m:
            current = int(m.group(1))
            reply.lines.append((current, m.group(3).strip()))
            if m.group(2) == ' ':
                reply.code = current
            continue

        # Continuation line, same code as before
        reply.lines.append((current if current is not None else 0, line.strip()))

    return reply


def check_reply(reply: BirdReply, command: str) -> BirdReply:
    """Raise TransportError if BIRD answered with an error code."""
    if reply.code is None:
        raise TransportError(f"incomplete reply to '{command}'")
    if reply.is_error:
        raise TransportError(f"'{command}' failed: {reply.message}", reply_code=reply.code)
    return reply


def parse_communities(output: str) -> list[Community]:
    """
    Extract every standard (AS,Data) pair from 'show route all' output.

    Encounter order is kept and duplicates are not removed. Pairs that do
    not fit in 16 bits are dropped.
    """
    communities = []
    for m in _COMMUNITY_RE.finditer(output):
        asn, data = int(m.group(1)), int(m.group(2))
        if asn > 0xFFFF or data > 0xFFFF:
            logger.debug("Skipping out-of-range community (%s,%s)", asn, data)
            continue
        communities.append(Community(asn=asn, data=data))
    return communities
