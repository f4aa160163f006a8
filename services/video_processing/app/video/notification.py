"""
Video — push notification decoding and identity derivation.

Zero I/O. Turns the base64 payload of a storage notification into the raw
object name, and derives the record id and owner id from that name:

  "abc-123.mp4"  ->  id "abc-123", owner "abc"

Both splits use the first separator only, so "u1-17.final.mp4" gives
id "u1-17" and owner "u1".
"""
from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass

from app.exceptions import DecodeError
from app.video.constants import PROCESSED_PREFIX


@dataclass(frozen=True)
class VideoIdentity:
    name: str
    video_id: str
    owner_id: str

    @property
    def processed_filename(self) -> str:
        return processed_filename(self.name)


def decode_notification(data: str) -> str:
    """Return the ``name`` field of a base64-encoded JSON notification."""
    try:
        decoded = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError):
        raise DecodeError("encoding")

    try:
        text = decoded.decode("utf-8")
    except UnicodeDecodeError:
        raise DecodeError("charset")

    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        raise DecodeError("format")

    name = payload.get("name") if isinstance(payload, dict) else None
    if not isinstance(name, str):
        raise DecodeError("missing_field")
    return name


def derive_identity(name: str) -> VideoIdentity:
    """Split a raw object name into record id and owner id."""
    if "/" in name or "\\" in name or name in (".", ".."):
        raise DecodeError("bad_identifier")

    video_id, dot, _ = name.partition(".")
    if not dot or not video_id:
        raise DecodeError("bad_identifier")

    owner_id, dash, _ = video_id.partition("-")
    if not dash or not owner_id:
        raise DecodeError("bad_identifier")

    return VideoIdentity(name=name, video_id=video_id, owner_id=owner_id)


def processed_filename(name: str) -> str:
    return f"{PROCESSED_PREFIX}{name}"
