"""Parsers for routing daemon output."""

from .bird_reply import BirdReply, parse_reply, check_reply, parse_communities, REPLY_END_PATTERN

__all__ = ["BirdReply", "parse_reply", "check_reply", "parse_communities", "REPLY_END_PATTERN"]
