"""Host embedding bridge."""

from .host import BridgeResponse, HostBridge, ResultRecord

__all__ = [
    "BridgeResponse",
    "HostBridge",
    "ResultRecord",
]
