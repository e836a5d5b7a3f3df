"""
BIRD Collector — Read and write protocol communities through BIRD.

Reads go over the control socket ('show route all <prefix>').
Writes render the configuration template with our two communities and
ask BIRD to 'configure', which re-announces the monitored prefix.

One socket per call, driven with pexpect on the socket's descriptor.
"""

from __future__ import annotations

import logging
import socket
from typing import Optional

import pexpect
from pexpect import fdpexpect

from bird_config import community_block, load_template, render_config, write_config
from collectors import AdvertisementGateway, Community
from config import PeerConfig
from errors import TransportError
from parsers.bird_reply import (
    BirdReply,
    REPLY_END_PATTERN,
    CODE_ROUTE_NOT_FOUND,
    check_reply,
    parse_communities,
    parse_reply,
)

logger = logging.getLogger(__name__)


class BirdSession:
    """
    One control-socket connection. Use as a context manager:

        with BirdSession("/run/bird/bird.ctl") as s:
            reply = s.command("show status")

    The greeting is consumed on entry and the socket is always closed on exit.
    """

    def __init__(self, socket_path: str, timeout: Optional[float] = None):
        self.socket_path = socket_path
        self.timeout = timeout
        self._sock: Optional[socket.socket] = None
        self._child: Optional[fdpexpect.fdspawn] = None

    def __enter__(self) -> "BirdSession":
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.connect(self.socket_path)
            self._sock = sock
            self._child = fdpexpect.fdspawn(sock.fileno(), timeout=self.timeout, encoding="utf-8")
            greeting = check_reply(self._read_reply("connect"), "connect")
        except OSError as e:
            sock.close()
            raise TransportError(f"unable to connect to bird at {self.socket_path}: {e}") from e
        except TransportError:
            sock.close()
            raise
        logger.debug(f"[bird] connected to {self.socket_path}: {greeting.message}")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._sock is not None:
            self._sock.close()
        self._sock = None
        self._child = None

    def command(self, cmd: str) -> BirdReply:
        """Send one command line and return its reply, unchecked."""
        if self._child is None:
            raise TransportError(f"session not open for '{cmd}'")
        try:
            self._child.sendline(cmd)
        except OSError as e:
            raise TransportError(f"unable to send '{cmd}' to bird: {e}") from e
        return self._read_reply(cmd)

    def _read_reply(self, cmd: str) -> BirdReply:
        try:
            self._child.expect(REPLY_END_PATTERN)
        except pexpect.EOF as e:
            raise TransportError(f"bird closed the connection during '{cmd}'") from e
        except pexpect.TIMEOUT as e:
            raise TransportError(f"no reply from bird to '{cmd}' within {self.timeout}s") from e
        except OSError as e:
            raise TransportError(f"unable to read from bird: {e}") from e
        except UnicodeDecodeError as e:
            raise TransportError(f"undecodable reply from bird to '{cmd}': {e}") from e
        return parse_reply(self._child.before + self._child.after)


class BirdGateway(AdvertisementGateway):
    """AdvertisementGateway backed by a local BIRD daemon."""

    def __init__(self, config: PeerConfig):
        self.config = config

    def _session(self) -> BirdSession:
        return BirdSession(self.config.socket_path, timeout=self.config.command_timeout)

    def fetch_communities(self, prefix: str) -> list[Community]:
        cmd = f"show route all {prefix}"
        try:
            with self._session() as s:
                reply = s.command(cmd)
        except TransportError as e:
            logger.error(f"[bird] {cmd} failed: {e}")
            raise

        if reply.code == CODE_ROUTE_NOT_FOUND:
            logger.info(f"[bird] {prefix}: no routes")
            return []
        check_reply(reply, cmd)

        communities = parse_communities(reply.text)
        logger.info(f"[bird] {prefix}: {len(communities)} communities")
        return communities

    def publish(self, marker_as: int, counter_community: int, position_community: int) -> None:
        block = community_block(marker_as, counter_community, position_community)
        self._apply(block)
        logger.info(f"[bird] published ({marker_as},{counter_community}) ({marker_as},{position_community})")

    def reset(self) -> None:
        self._apply("")
        logger.info("[bird] reset to baseline configuration")

    def reconfigure(self) -> BirdReply:
        """Ask BIRD to re-read its configuration file."""
        try:
            with self._session() as s:
                return check_reply(s.command("configure"), "configure")
        except TransportError as e:
            logger.error(f"[bird] configure failed: {e}")
            raise

    def _apply(self, block: str) -> None:
        template = load_template(self.config.template_path)
        write_config(self.config.config_path, render_config(template, block))
        self.reconfigure()
