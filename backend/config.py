"""
Peer configuration — marker AS, monitored prefix and BIRD file locations.

Loaded from YAML; every key is optional:

    marker_as: 23456
    prefix: 1.1.1.0/24
    template_path: /etc/bird/conf.orig
    config_path: /etc/bird/bird.conf
    socket_path: /run/bird/bird.ctl
    command_timeout: null      # seconds; null blocks until BIRD answers
"""

from __future__ import annotations

import ipaddress
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator

DEFAULT_MARKER_AS = 23456
DEFAULT_PREFIX = "1.1.1.0/24"


class PeerConfig(BaseModel):
    marker_as: int = Field(default=DEFAULT_MARKER_AS, ge=0, le=0xFFFF)
    prefix: str = DEFAULT_PREFIX
    template_path: str = "/etc/bird/conf.orig"
    config_path: str = "/etc/bird/bird.conf"
    socket_path: str = "/run/bird/bird.ctl"
    command_timeout: Optional[float] = Field(default=None, gt=0)

    @field_validator("prefix")
    @classmethod
    def _valid_prefix(cls, v: str) -> str:
        return str(ipaddress.ip_network(v.strip(), strict=False))

    @classmethod
    def from_yaml(cls, path: str | Path) -> "PeerConfig":
        with open(path) as f:
            raw = yaml.safe_load(f)
        return cls.model_validate(raw or {})
