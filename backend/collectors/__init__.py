"""Advertisement gateways — read communities off the RIB, push ours back out."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class Community:
    """Standard community as carried on a route: (AS, Data), 16 bits each."""
    asn: int
    data: int

    def __str__(self) -> str:
        return f"({self.asn},{self.data})"


class AdvertisementGateway(ABC):
    """
    Transport for the community channel.

    Every method may raise errors.TransportError. Callers get no retry
    and no timeout from the gateway itself.
    """

    @abstractmethod
    def fetch_communities(self, prefix: str) -> list[Community]:
        """All communities on routes matching prefix, in encounter order."""
        ...

    @abstractmethod
    def publish(self, marker_as: int, counter_community: int, position_community: int) -> None:
        """Re-announce the monitored prefix tagged with exactly our two communities."""
        ...

    @abstractmethod
    def reset(self) -> None:
        """Drop our communities and restore the baseline announcement."""
        ...
