#!/usr/bin/env python3
"""
Read, write or reset the game state on the local BIRD.

Usage:
  python3 scripts/peer_state.py [--config PATH] read
  python3 scripts/peer_state.py [--config PATH] write COUNTER X Y OUTCOME
  python3 scripts/peer_state.py [--config PATH] reset

Default config: config/peer.yml
"""

import logging
import sys
from pathlib import Path

import yaml
from pydantic import ValidationError

sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from channel import PeerChannel
from collectors import AdvertisementGateway
from collectors.bird_collector import BirdGateway
from community_protocol import GameState, outcome_label
from config import PeerConfig
from errors import ChannelError

CONFIG_PATH = Path(__file__).parent.parent / "config" / "peer.yml"

USAGE = "usage: peer_state.py [--config PATH] read | write COUNTER X Y OUTCOME | reset"


def main(argv: list[str], gateway: AdvertisementGateway | None = None) -> int:
    args = list(argv)
    config_path = CONFIG_PATH
    if args[:1] == ["--config"]:
        if len(args) < 2:
            print(USAGE, file=sys.stderr)
            return 2
        config_path = Path(args[1])
        args = args[2:]

    if not args or args[0] not in ("read", "write", "reset"):
        print(USAGE, file=sys.stderr)
        return 2

    try:
        config = PeerConfig.from_yaml(config_path) if config_path.exists() else PeerConfig()
    except (OSError, yaml.YAMLError, ValidationError) as e:
        print(f"error: cannot load config {config_path}: {e}", file=sys.stderr)
        return 1

    channel = PeerChannel(config, gateway or BirdGateway(config))
    action = args[0]

    try:
        if action == "read":
            state = channel.read_state()
            print(f"move {state.move_counter}: ({state.x},{state.y}) last={outcome_label(state.outcome)}")

        elif action == "write":
            try:
                counter, x, y, outcome = (int(v) for v in args[1:])
            except ValueError:
                print(USAGE, file=sys.stderr)
                return 2
            c1, c2 = channel.publish_state(GameState(counter, x, y, outcome))
            print(f"published ({config.marker_as},{c1}) ({config.marker_as},{c2})")

        else:
            channel.reset()
            print("reset")

    except ChannelError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    sys.exit(main(sys.argv[1:]))
