"""ZMQ multipart framing for packnet messages.

Publish (PUB/SUB, through the broker)
    channel, version, text
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

# This is the version of the packnet-over-ZeroMQ framing implemented here,
# identified by a single byte. Frames with any other version are dropped.

VERSION = b"a"


def to_frames(channel: str, text: str) -> Tuple[bytes, bytes, bytes]:
    """Encode one transport message as ZMQ multipart frames."""

    return (channel.encode(), VERSION, text.encode())


def from_frames(parts: Sequence[bytes]) -> Optional[Tuple[str, str]]:
    """Decode ZMQ multipart frames into a ``(channel, text)`` pair.

    Returns None for a frame set carrying another framing version; raises
    ValueError if the frames are not shaped like a packnet message at all.
    """

    if len(parts) != 3:
        raise ValueError(f"invalid packnet message: expected 3 frames, got {len(parts)}")

    channel, their_version, text = parts

    if their_version != VERSION:
        logger.warning(
            "dropping message on %r: framing version %r, expected %r",
            channel, their_version, VERSION,
        )
        return None

    return channel.decode(), text.decode()
