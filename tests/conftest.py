"""
Shared fixtures: an in-memory advertisement gateway standing in for BIRD.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from collectors import AdvertisementGateway, Community


class FakeGateway(AdvertisementGateway):
    """Serves queued community sets; records what was published."""

    def __init__(self):
        self.responses: list = []
        self.fetched: list[str] = []
        self.published: list[tuple[int, int, int]] = []
        self.resets = 0
        self.publish_error: Exception | None = None

    def queue(self, *responses):
        """Each response is a list of Community or an exception to raise."""
        self.responses.extend(responses)

    def fetch_communities(self, prefix: str) -> list[Community]:
        self.fetched.append(prefix)
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return list(response)

    def publish(self, marker_as: int, counter_community: int, position_community: int) -> None:
        if self.publish_error is not None:
            raise self.publish_error
        self.published.append((marker_as, counter_community, position_community))

    def reset(self) -> None:
        if self.publish_error is not None:
            raise self.publish_error
        self.resets += 1


@pytest.fixture
def fake_gateway() -> FakeGateway:
    return FakeGateway()
