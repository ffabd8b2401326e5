"""Testing utilities for treeprotocol consumers."""

from .fixtures import RecordedCall, RecordingBuilder, SessionLog

__all__ = ['RecordingBuilder', 'RecordedCall', 'SessionLog']
