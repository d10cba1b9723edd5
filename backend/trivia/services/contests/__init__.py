"""Contest domain services: sessions, registry, scoring and timers.

This package holds the per-room state machine and the collaborators it
talks to, keeping Socket.IO transport concerns in ``trivia.socketio_events``.
"""

from .errors import (
    AlreadyAnswered,
    AlreadyRunning,
    ContestError,
    ContestOver,
    InvalidChoice,
    NoActiveQuestion,
    NotHost,
    NotInRoom,
    QuestionMismatch,
    RoomAllocationError,
    UnknownRoom,
)
from .gateway import SocketIOGateway
from .registry import SessionRegistry
from .scheduler import SocketIOScheduler
from .session import ContestSession, ContestState

__all__ = [
    'AlreadyAnswered',
    'AlreadyRunning',
    'ContestError',
    'ContestOver',
    'ContestSession',
    'ContestState',
    'InvalidChoice',
    'NoActiveQuestion',
    'NotHost',
    'NotInRoom',
    'QuestionMismatch',
    'RoomAllocationError',
    'SessionRegistry',
    'SocketIOGateway',
    'SocketIOScheduler',
    'UnknownRoom',
]
