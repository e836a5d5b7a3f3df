"""
Peer Channel — read the opponent's move, publish ours.

Glue between the community protocol and an advertisement gateway.
Nothing is cached: every read goes back to the gateway.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from collectors import AdvertisementGateway
from community_protocol import (
    GameState,
    decode_game_state,
    encode_game_state,
    is_new_move,
    next_move_counter,
)
from config import PeerConfig
from errors import IncompleteStateError

logger = logging.getLogger(__name__)


class PeerChannel:

    def __init__(
        self,
        config: PeerConfig,
        gateway: AdvertisementGateway,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config
        self.gateway = gateway
        self._sleep = sleep

    def read_state(self) -> GameState:
        """Fetch the monitored prefix's communities and decode the opponent's state."""
        communities = self.gateway.fetch_communities(self.config.prefix)
        state = decode_game_state(communities, self.config.marker_as)
        logger.debug(f"Read state {state} from {len(communities)} communities")
        return state

    def publish_state(self, state: GameState) -> tuple[int, int]:
        counter, position = encode_game_state(state)
        self.gateway.publish(self.config.marker_as, counter, position)
        return counter, position

    def reset(self) -> None:
        self.gateway.reset()

    def next_state(self, previous_counter: int, x: int, y: int, outcome: int) -> GameState:
        return GameState(
            move_counter=next_move_counter(previous_counter),
            x=x,
            y=y,
            outcome=outcome,
        )

    def poll_for_move(
        self,
        last_seen: Optional[int],
        interval: float = 1.0,
        max_polls: Optional[int] = None,
    ) -> GameState:
        """
        Re-read until the opponent's counter differs from last_seen.

        Incomplete state means the peer has not advertised yet and is polled
        again. Any other error propagates on the first occurrence.
        """
        polls = 0
        pending: Optional[IncompleteStateError] = None

        while max_polls is None or polls < max_polls:
            if polls:
                self._sleep(interval)
            polls += 1

            try:
                state = self.read_state()
            except IncompleteStateError as e:
                logger.debug(f"Poll {polls}: {e}")
                pending = e
                continue

            pending = None
            if is_new_move(state, last_seen):
                logger.info(f"New move {state.move_counter} at ({state.x},{state.y}) after {polls} polls")
                return state

        if pending is not None:
            raise pending
        raise TimeoutError(f"no new move after {polls} polls")
