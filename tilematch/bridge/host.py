"""Bridge to the embedding host.

Outbound: level results are posted through a transport callable.
Inbound: the host pauses, resumes and sets the output volume; the bridge
forwards those signals to subscribed listeners (game sessions).
"""

import logging
from typing import Any, Callable

from pydantic import BaseModel

logger = logging.getLogger(__name__)

Transport = Callable[[dict[str, Any]], None]


class ResultRecord(BaseModel):
    """Level result reported to the host."""

    score: int
    level: int | None = None
    result: str  # "win" or "lose"
    reason: str | None = None
    level_score: int
    target_score: int
    moves_left: int | None = None
    time_left: int | None = None


class BridgeResponse(BaseModel):
    """Response from a bridge call."""

    ok: bool
    code: int = 0
    message: str | None = None


class HostBridge:
    """Host embedding bridge."""

    def __init__(self, transport: Transport | None = None):
        """Initialize bridge.

        Args:
            transport: Delivers result payloads to the host. If None,
                results are only logged.
        """
        self.transport = transport
        self.ready = False
        self.volume = 1.0

        self._pause_listeners: list[Callable[[], None]] = []
        self._resume_listeners: list[Callable[[], None]] = []
        self._volume_listeners: list[Callable[[float], None]] = []

    def init(self, **options: Any) -> BridgeResponse:
        """Mark the bridge ready."""
        logger.info(f"Bridge init {options}")
        self.ready = True
        return BridgeResponse(ok=True)

    def is_ready(self) -> bool:
        return self.ready

    def post_score(self, record: ResultRecord) -> BridgeResponse:
        """Report a level result to the host.

        Never raises: transport failures are logged and returned as
        ``ok=False``.
        """
        if not self.ready:
            return BridgeResponse(ok=False, code=-1, message="bridge not initialized")

        payload = record.model_dump(exclude_none=True)
        logger.info(f"Bridge postScore {payload}")
        if self.transport is None:
            return BridgeResponse(ok=True)

        try:
            self.transport(payload)
        except Exception as e:
            logger.error(f"Bridge postScore failed: {e}")
            return BridgeResponse(ok=False, code=-1, message=str(e))
        return BridgeResponse(ok=True)

    # Inbound host signals

    def add_pause_listener(self, listener: Callable[[], None]) -> None:
        self._pause_listeners.append(listener)

    def add_resume_listener(self, listener: Callable[[], None]) -> None:
        self._resume_listeners.append(listener)

    def add_volume_listener(self, listener: Callable[[float], None]) -> None:
        self._volume_listeners.append(listener)

    def pause(self) -> None:
        """Host asks the game to pause."""
        if not self.ready:
            return
        logger.debug("Bridge onPause")
        for listener in self._pause_listeners:
            listener()

    def resume(self) -> None:
        """Host asks the game to resume."""
        if not self.ready:
            return
        logger.debug("Bridge onResume")
        for listener in self._resume_listeners:
            listener()

    def set_volume(self, volume: float) -> None:
        """Host sets the output volume (0..1, 0 means sound off)."""
        if not self.ready:
            return
        self.volume = min(max(volume, 0.0), 1.0)
        logger.debug(f"Bridge setVolume {self.volume}")
        for listener in self._volume_listeners:
            listener(self.volume)
