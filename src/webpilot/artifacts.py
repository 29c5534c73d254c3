"""Hand-off point for screenshot and PDF bytes."""

from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class ArtifactSink(Protocol):
    async def store(self, kind: str, name: str, data: bytes) -> None: ...


class NullArtifactSink:
    """Drops artifacts. Storage belongs to whoever embeds the command core."""

    async def store(self, kind: str, name: str, data: bytes) -> None:
        logger.debug("Discarding %s artifact name=%s bytes=%d", kind, name, len(data))
