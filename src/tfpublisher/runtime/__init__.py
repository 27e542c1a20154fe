"""Runtime plumbing: the reconfiguration channel and the publish loop."""

from .sender import LoggingBroadcaster, RecordingBroadcaster, TransformSender
from .server import ReconfigureServer

__all__ = [
    "LoggingBroadcaster",
    "RecordingBroadcaster",
    "ReconfigureServer",
    "TransformSender",
]
