import logging
import threading
from typing import Dict, Optional

from trivia.models import generate_room_code
from .errors import RoomAllocationError, UnknownRoom
from .session import ContestSession


class SessionRegistry:
    """Process-wide table of room code -> ContestSession.

    The table lock only guards insert/lookup/remove; every room serializes
    its own transitions, so unrelated rooms never contend.
    """

    def __init__(self, questions, gateway, scheduler, settings=None, logger=None, code_factory=generate_room_code):
        self.questions = questions
        self.gateway = gateway
        self.scheduler = scheduler
        self.settings = settings or {}
        self.logger = logger or logging.getLogger(__name__)
        self.code_factory = code_factory
        self._sessions: Dict[str, ContestSession] = {}
        self._lock = threading.Lock()

    def create(self, host_connection_id: str, display_name: str, options=None) -> str:
        options = options or {}
        question_count = self._question_count(options.get('questionCount'))
        length = int(self.settings.get('ROOM_CODE_LENGTH', 5))
        attempts = int(self.settings.get('ROOM_CODE_ATTEMPTS', 20))
        with self._lock:
            for _ in range(attempts):
                room_id = self.code_factory(length)
                if room_id not in self._sessions:
                    break
                self.logger.info(f"[room-collision] room={room_id}")
            else:
                self.logger.error(f"[room-exhausted] attempts={attempts} length={length}")
                raise RoomAllocationError()
            self._sessions[room_id] = ContestSession(
                room_id,
                host_connection_id,
                display_name,
                questions=self.questions,
                gateway=self.gateway,
                scheduler=self.scheduler,
                logger=self.logger,
                question_count=question_count,
                settings=self.settings,
            )
        self.logger.info(f"[contest-create] room={room_id} host={host_connection_id} questions={question_count}")
        return room_id

    def lookup(self, room_id) -> Optional[ContestSession]:
        if not room_id:
            return None
        with self._lock:
            return self._sessions.get(str(room_id).upper())

    def get(self, room_id) -> ContestSession:
        session = self.lookup(room_id)
        if session is None:
            raise UnknownRoom()
        return session

    def destroy(self, room_id) -> None:
        if not room_id:
            return
        room_id = str(room_id).upper()
        with self._lock:
            session = self._sessions.pop(room_id, None)
        if session is None:
            return
        session.close()
        self.gateway.close_room(room_id)
        self.logger.info(f"[contest-destroy] room={room_id}")

    def __len__(self):
        with self._lock:
            return len(self._sessions)

    def __contains__(self, room_id):
        return self.lookup(room_id) is not None

    # ---- connection-level dispatch ----

    def join(self, room_id, connection_id, display_name) -> None:
        self.get(room_id).join(connection_id, display_name)

    def start(self, room_id, connection_id) -> None:
        self.get(room_id).start(connection_id)

    def submit_answer(self, room_id, connection_id, question_id, choice_index) -> None:
        self.get(room_id).submit_answer(connection_id, question_id, choice_index)

    def leave(self, room_id, connection_id) -> None:
        session = self.lookup(room_id)
        if session is None:
            return
        if session.leave(connection_id):
            self.destroy(session.room_id)

    def disconnect(self, connection_id) -> None:
        with self._lock:
            sessions = list(self._sessions.values())
        for session in sessions:
            if session.disconnect(connection_id):
                self.destroy(session.room_id)

    def _question_count(self, requested) -> int:
        default = int(self.settings.get('DEFAULT_QUESTION_COUNT', 10))
        ceiling = int(self.settings.get('MAX_QUESTION_COUNT', 50))
        try:
            value = int(requested) if requested is not None else default
        except (TypeError, ValueError):
            value = default
        if value < 1:
            value = default
        return min(value, ceiling)
