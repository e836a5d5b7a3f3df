"""Render BIRD's configuration from a template carrying a community marker."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from errors import TransportError

logger = logging.getLogger(__name__)

COMMUNITY_MARKER = "###COMMUNITY###"
CONFIG_MODE = 0o640


def community_block(marker_as: int, counter_community: int, position_community: int) -> str:
    """Filter statements that attach both protocol communities to the export."""
    return (
        f"\nbgp_community.add(({marker_as},{position_community}));"
        f"\nbgp_community.add(({marker_as},{counter_community}));\n"
    )


def render_config(template: str, block: str = "") -> str:
    """Substitute the first marker. An empty block gives the baseline config."""
    if COMMUNITY_MARKER not in template:
        logger.warning("Template has no %s marker; communities will not be attached", COMMUNITY_MARKER)
    return template.replace(COMMUNITY_MARKER, block, 1)


def load_template(path: str | Path) -> str:
    try:
        return Path(path).read_text()
    except OSError as e:
        raise TransportError(f"cannot read template {path}: {e}") from e


def write_config(path: str | Path, text: str) -> None:
    path = Path(path)
    try:
        path.write_text(text)
        os.chmod(path, CONFIG_MODE)
    except OSError as e:
        raise TransportError(f"cannot write config {path}: {e}") from e
    logger.info("Wrote %s (%d bytes)", path, len(text))
