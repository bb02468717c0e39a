"""
Session recording module.

The orchestrator hands every finished match to a SessionSink. Storage
and transport belong to the sink; the reference sinks here write to
stdout, to a file, or keep records in memory.
"""
from .models import PlayerStats, SessionRecord
from .base import SessionSink
from .stdout_sink import StdoutSessionSink
from .file_sink import FileSessionSink
from .memory_sink import CompositeSessionSink, InMemorySessionSink

__all__ = [
    "PlayerStats",
    "SessionRecord",
    "SessionSink",
    "StdoutSessionSink",
    "FileSessionSink",
    "InMemorySessionSink",
    "CompositeSessionSink",
]
