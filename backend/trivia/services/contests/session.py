"""One room's authoritative contest state and its question loop.

States::

    IDLE --start--> QUESTION_OPEN --reveal--> REVEALED --advance--> QUESTION_OPEN ...
                                                 REVEALED --advance--> ENDED (last question)

Every public transition and every timer callback runs under the session's
re-entrant lock, so a room's transitions (and the broadcasts they emit) are
serialized. Timer callbacks carry the question sequence number they were
armed for and do nothing once the contest has moved past it.
"""

import threading
import time
from enum import Enum
from itertools import count
from typing import Dict, Optional

from trivia.models import Answer, Member, Question
from .errors import (
    AlreadyAnswered,
    AlreadyRunning,
    ContestOver,
    InvalidChoice,
    NoActiveQuestion,
    NotHost,
    NotInRoom,
    QuestionMismatch,
    UnknownRoom,
)
from .scoring import leaderboard, score_answers


class ContestState(Enum):
    IDLE = 'idle'
    QUESTION_OPEN = 'question_open'
    REVEALED = 'revealed'
    ENDED = 'ended'


class ContestSession:
    def __init__(self, room_id, host_connection_id, host_name, questions, gateway, scheduler,
                 logger, question_count=10, settings=None):
        self.room_id = room_id
        self.host_connection_id = host_connection_id
        self.question_count = question_count
        self.questions = questions
        self.gateway = gateway
        self.scheduler = scheduler
        self.logger = logger
        settings = settings or {}
        self.question_duration = int(settings.get('QUESTION_DURATION_SEC', 60))
        self.reveal_duration = int(settings.get('REVEAL_DURATION_SEC', 3))
        self.skip_duration = int(settings.get('SKIP_DURATION_SEC', 2))
        self.points_per_correct = int(settings.get('POINTS_PER_CORRECT', 10))

        self.members: Dict[str, Member] = {}
        self.answers: Dict[str, Answer] = {}
        self.current_question: Optional[Question] = None
        self.current_question_index = 0
        self.state = ContestState.IDLE
        self.running = False
        self.deadline: Optional[float] = None
        self.closed = False

        self._lock = threading.RLock()
        self._join_seq = count()
        self._question_seq = 0
        self._reveal_timer = None
        self._advance_timer = None

        self._add_member(host_connection_id, host_name)

    # ---- membership ----

    def join(self, connection_id: str, name: str) -> None:
        with self._lock:
            self._ensure_open()
            self._add_member(connection_id, name)
            self.logger.info(f"[contest-join] room={self.room_id} sid={connection_id} name={name} members={len(self.members)}")
            self.announce_lobby()
            # Late joiner: hand them the live question so they can still answer
            if self.state is ContestState.QUESTION_OPEN and self.current_question is not None:
                self.gateway.to_connection(connection_id, 'question', self._question_payload())

    def leave(self, connection_id: str) -> bool:
        """Remove a member. Returns True when the session should be torn down."""
        with self._lock:
            if self.closed:
                return True
            return self._depart(connection_id, host_reason='host left')

    def disconnect(self, connection_id: str) -> bool:
        """Transport lost a connection. Returns True when the session should be torn down."""
        with self._lock:
            if self.closed:
                return False
            if connection_id not in self.members and connection_id != self.host_connection_id:
                return False
            return self._depart(connection_id, host_reason='host disconnected')

    def announce_lobby(self) -> None:
        with self._lock:
            self.gateway.to_room(self.room_id, 'lobbyUpdate', {
                'roomId': self.room_id,
                'leaderboard': self.leaderboard(),
            })

    def leaderboard(self):
        return leaderboard(self.members.values())

    def _add_member(self, connection_id, name):
        # Re-joining under the same connection is a fresh entry: score 0, back of the join order
        self.members[connection_id] = Member(connection_id, name, next(self._join_seq))

    def _depart(self, connection_id, host_reason):
        self.members.pop(connection_id, None)
        self.answers.pop(connection_id, None)
        self.announce_lobby()
        if connection_id == self.host_connection_id:
            self.logger.info(f"[contest-host-lost] room={self.room_id} reason={host_reason}")
            self._finish(reason=host_reason)
            self.closed = True
            return True
        if self.state is ContestState.QUESTION_OPEN and self.answers and len(self.answers) == len(self.members):
            self._reveal(trigger='early')
        return False

    # ---- question loop ----

    def start(self, requester_connection_id: str) -> None:
        with self._lock:
            self._ensure_open()
            if requester_connection_id != self.host_connection_id:
                raise NotHost()
            if self.running:
                raise AlreadyRunning()
            if self.state is ContestState.ENDED:
                raise ContestOver()
            self.running = True
            self.current_question_index = 0
            self.logger.info(f"[contest-start] room={self.room_id} questions={self.question_count} members={len(self.members)}")
            self._advance()

    def submit_answer(self, connection_id: str, question_id, choice_index) -> None:
        with self._lock:
            self._ensure_open()
            question = self.current_question
            if self.state is not ContestState.QUESTION_OPEN or question is None:
                raise NoActiveQuestion()
            if question_id is None or str(question_id) != question.id:
                raise QuestionMismatch()
            if connection_id not in self.members:
                raise NotInRoom()
            if connection_id in self.answers:
                raise AlreadyAnswered()
            if isinstance(choice_index, bool) or not isinstance(choice_index, int) \
                    or not 0 <= choice_index < len(question.choices):
                raise InvalidChoice()

            self.answers[connection_id] = Answer(choice_index)
            self.logger.info(
                f"[answer] room={self.room_id} question={question.id} sid={connection_id} "
                f"answered={len(self.answers)}/{len(self.members)}"
            )
            if len(self.answers) == len(self.members):
                self._reveal(trigger='early')

    def _advance(self):
        if self.closed or not self.running:
            return
        if self.current_question_index >= self.question_count:
            self._finish()
            return
        question = self.questions.draw()
        if question is None:
            self._finish(reason='no questions available')
            return

        self.answers = {}
        self.current_question = question
        self.state = ContestState.QUESTION_OPEN
        self._question_seq += 1
        self.deadline = time.time() + self.question_duration
        self.gateway.to_room(self.room_id, 'question', self._question_payload())

        self._cancel_timers()
        self._reveal_timer = self.scheduler.call_later(self.question_duration, self._on_deadline, self._question_seq)
        self.logger.info(
            f"[timer-set] room={self.room_id} kind=reveal seq={self._question_seq} "
            f"duration={self.question_duration}s deadline={self.deadline}"
        )

    def _on_deadline(self, seq):
        with self._lock:
            self.logger.info(f"[timer-fire] room={self.room_id} kind=reveal seq={seq} current_seq={self._question_seq} state={self.state.value}")
            if self.closed or self.state is not ContestState.QUESTION_OPEN or seq != self._question_seq:
                self.logger.info(f"[timer-abort] room={self.room_id} kind=reveal seq={seq}")
                return
            self._reveal(trigger='deadline')

    def _reveal(self, trigger):
        question = self.current_question
        self._cancel_timers()
        self.current_question = None
        self.deadline = None
        self.state = ContestState.REVEALED

        if self.answers:
            scored = score_answers(question, self.answers, self.members, self.points_per_correct)
            delay = self.reveal_duration
        else:
            # Nobody answered: skip without scoring
            scored = []
            delay = self.skip_duration
        self.current_question_index += 1
        self.logger.info(
            f"[reveal] room={self.room_id} question={question.id} trigger={trigger} "
            f"answers={len(self.answers)} scored={len(scored)} index={self.current_question_index}/{self.question_count}"
        )
        self.gateway.to_room(self.room_id, 'reveal', {
            'correctIndex': question.answer_index,
            'scored': scored,
            'leaderboard': self.leaderboard(),
        })
        self._advance_timer = self.scheduler.call_later(delay, self._on_advance, self._question_seq)

    def _on_advance(self, seq):
        with self._lock:
            if self.closed or self.state is not ContestState.REVEALED or seq != self._question_seq:
                self.logger.info(f"[timer-abort] room={self.room_id} kind=advance seq={seq}")
                return
            self._advance()

    def _finish(self, reason=None):
        self._cancel_timers()
        self.running = False
        self.current_question = None
        self.deadline = None
        self.state = ContestState.ENDED
        payload = {'leaderboard': self.leaderboard()}
        if reason:
            payload['reason'] = reason
        self.logger.info(f"[contest-end] room={self.room_id} reason={reason or 'completed'} resolved={self.current_question_index}")
        self.gateway.to_room(self.room_id, 'contestEnded', payload)

    # ---- teardown / helpers ----

    def close(self) -> None:
        """Stop all timers and refuse further requests."""
        with self._lock:
            self._cancel_timers()
            self.running = False
            self.closed = True

    def _cancel_timers(self):
        for timer in (self._reveal_timer, self._advance_timer):
            if timer is not None:
                timer.cancel()
        self._reveal_timer = None
        self._advance_timer = None

    def _ensure_open(self):
        if self.closed:
            raise UnknownRoom()

    def _question_payload(self):
        payload = self.current_question.to_public_dict()
        payload['index'] = self.current_question_index
        payload['total'] = self.question_count
        payload['deadline'] = self.deadline
        return payload

    def snapshot(self):
        with self._lock:
            return {
                'roomId': self.room_id,
                'state': self.state.value,
                'running': self.running,
                'questionIndex': self.current_question_index,
                'questionCount': self.question_count,
                'question': self._question_payload() if self.current_question is not None else None,
                'answered': len(self.answers),
                'leaderboard': self.leaderboard(),
            }
