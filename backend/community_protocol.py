"""
Community Protocol — Game state carried in two standard communities.

Both communities are tagged with a shared marker AS. The Data half starts
with a 2-bit type:

Type 1: move counter, bumped on every move so the other side can tell
a new move happened.

    T = Type
    Z = Counter

    +-------------------------------+
    |T|T|Z|Z|Z|Z|Z|Z|Z|Z|Z|Z|Z|Z|Z|Z|
    +-------------------------------+

Type 2: attack coordinates and the result of the previous move.

    T = Type
    X = X coordinate
    Y = Y coordinate
    S = Outcome of last move
    - = Padding (zero)

    +-------------------------------+
    |T|T|X|X|X|X|-|-|Y|Y|Y|Y|S|S|-|-|
    +-------------------------------+

Communities on any other AS are ignored.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from bit_codec import pack_bits, unpack_bits, mask
from collectors import Community
from errors import DuplicateFragmentError, IncompleteStateError, InvalidTypeError


# Type tags
TYPE_COUNTER = 1
TYPE_POSITION = 2

# Field widths
TYPE_BITS = 2
COUNTER_BITS = 14
COORD_BITS = 4
OUTCOME_BITS = 2
PAD_BITS = 2

COUNTER_LAYOUT = [TYPE_BITS, COUNTER_BITS]
POSITION_LAYOUT = [TYPE_BITS, COORD_BITS, PAD_BITS, COORD_BITS, OUTCOME_BITS, PAD_BITS]

FRAGMENT_COUNTER = "counter"
FRAGMENT_POSITION = "position"

# Outcome codes
OUTCOME_UNKNOWN = 0
OUTCOME_HIT = 1
OUTCOME_MISS = 2
OUTCOME_RESERVED = 3

OUTCOME_LABELS: dict[int, str] = {
    OUTCOME_UNKNOWN: "unknown",
    OUTCOME_HIT: "hit",
    OUTCOME_MISS: "miss",
    OUTCOME_RESERVED: "reserved",
}


@dataclass
class GameState:
    """Opponent's last announced move, rebuilt on every read."""
    move_counter: int = 0
    x: int = 0
    y: int = 0
    outcome: int = OUTCOME_UNKNOWN


def type_tag(data: int) -> int:
    """Top two bits of a community's Data half."""
    return unpack_bits(data, [TYPE_BITS, 16 - TYPE_BITS])[0]


def decode_game_state(communities: Iterable[Community], marker_as: int) -> GameState:
    """
    Decode the marker-AS communities of one advertisement into a GameState.

    Raises InvalidTypeError on the first unknown type tag,
    DuplicateFragmentError if a fragment type repeats, and
    IncompleteStateError if either fragment never shows up.
    """
    state = GameState()
    seen: set[str] = set()

    for comm in communities:
        if comm.asn != marker_as:
            continue

        tag = type_tag(comm.data)

        if tag == TYPE_COUNTER:
            if FRAGMENT_COUNTER in seen:
                raise DuplicateFragmentError(FRAGMENT_COUNTER, comm)
            seen.add(FRAGMENT_COUNTER)
            _, state.move_counter = unpack_bits(comm.data, COUNTER_LAYOUT)

        elif tag == TYPE_POSITION:
            if FRAGMENT_POSITION in seen:
                raise DuplicateFragmentError(FRAGMENT_POSITION, comm)
            seen.add(FRAGMENT_POSITION)
            _, state.x, _, state.y, state.outcome, _ = unpack_bits(comm.data, POSITION_LAYOUT)

        else:
            raise InvalidTypeError(tag, comm)

    missing = {FRAGMENT_COUNTER, FRAGMENT_POSITION} - seen
    if missing:
        raise IncompleteStateError(missing)
    return state


def encode_game_state(state: GameState) -> tuple[int, int]:
    """Return (counter_community, position_community). Oversized fields wrap."""
    counter_community = pack_bits([
        (TYPE_COUNTER, TYPE_BITS),
        (state.move_counter, COUNTER_BITS),
    ])
    position_community = pack_bits([
        (TYPE_POSITION, TYPE_BITS),
        (state.x, COORD_BITS),
        (0, PAD_BITS),
        (state.y, COORD_BITS),
        (state.outcome, OUTCOME_BITS),
        (0, PAD_BITS),
    ])
    return counter_community, position_community


def encode_communities(state: GameState, marker_as: int) -> list[Community]:
    """Both encoded values as marker-AS communities, counter first."""
    counter, position = encode_game_state(state)
    return [Community(marker_as, counter), Community(marker_as, position)]


def next_move_counter(counter: int) -> int:
    return (counter + 1) & mask(COUNTER_BITS)


def is_new_move(current: GameState, last_seen: int | None) -> bool:
    """True when the observed counter moved since last_seen (None = never read)."""
    if last_seen is None:
        return True
    return current.move_counter != (last_seen & mask(COUNTER_BITS))


def outcome_label(code: int) -> str:
    return OUTCOME_LABELS.get(code & mask(OUTCOME_BITS), "unknown")
