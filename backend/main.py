"""Community Channel API."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import yaml
from fastapi import FastAPI, HTTPException
from pydantic import ValidationError

from channel import PeerChannel
from collectors.bird_collector import BirdGateway
from community_protocol import GameState, encode_communities, outcome_label
from config import PeerConfig
from errors import (
    ChannelError,
    DuplicateFragmentError,
    IncompleteStateError,
    InvalidTypeError,
    TransportError,
)
from models import ErrorDetail, MoveBody, PublishResponse, StateBody, StateResponse

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

VERSION = "1.0.0"

app = FastAPI(title="Community Channel", description="Game state over BGP communities", version=VERSION)

backend_dir = Path(__file__).parent
project_dir = backend_dir.parent
config_path = project_dir / "config" / "peer.yml"

try:
    config = PeerConfig.from_yaml(config_path)
except (OSError, yaml.YAMLError, ValidationError) as e:
    logger.warning("Could not load config %s: %s", config_path, e)
    config = PeerConfig()

channel = PeerChannel(config, BirdGateway(config))

_STATUS_BY_ERROR = {
    IncompleteStateError: 409,
    DuplicateFragmentError: 422,
    InvalidTypeError: 422,
    TransportError: 502,
}


def _http_error(e: ChannelError) -> HTTPException:
    status = _STATUS_BY_ERROR.get(type(e), 500)
    detail = ErrorDetail(
        code=e.code,
        message=e.message,
        retryable=e.retryable,
        missing=getattr(e, "missing", None),
    )
    return HTTPException(status, detail.model_dump(exclude_none=True))


async def _run(fn, *args):
    loop = asyncio.get_event_loop()
    try:
        return await loop.run_in_executor(None, fn, *args)
    except ChannelError as e:
        logger.warning("%s failed: %s", getattr(fn, "__name__", fn), e)
        raise _http_error(e)


def _publish_response(state: GameState, counter: int, position: int) -> PublishResponse:
    return PublishResponse(
        marker_as=config.marker_as,
        move_counter=state.move_counter,
        counter_community=counter,
        position_community=position,
        communities=[str(c) for c in encode_communities(state, config.marker_as)],
    )


@app.get("/api/state")
async def read_state():
    state = await _run(channel.read_state)
    return StateResponse(
        prefix=config.prefix,
        marker_as=config.marker_as,
        move_counter=state.move_counter,
        x=state.x,
        y=state.y,
        outcome=state.outcome,
        outcome_label=outcome_label(state.outcome),
    )


@app.post("/api/state")
async def publish_state(body: StateBody):
    state = GameState(move_counter=body.move_counter, x=body.x, y=body.y, outcome=body.outcome)
    counter, position = await _run(channel.publish_state, state)
    return _publish_response(state, counter, position)


@app.post("/api/move")
async def publish_move(body: MoveBody):
    state = channel.next_state(body.previous_counter, body.x, body.y, body.outcome)
    counter, position = await _run(channel.publish_state, state)
    return _publish_response(state, counter, position)


@app.post("/api/reset")
async def reset():
    await _run(channel.reset)
    return {"status": "ok"}


@app.get("/api/health")
async def health():
    return {
        "status": "ok",
        "version": VERSION,
        "prefix": config.prefix,
        "marker_as": config.marker_as,
    }
