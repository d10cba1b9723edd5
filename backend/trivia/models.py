import random
import string
import time
from typing import Any, Dict, List, Optional


class Question:
    __slots__ = ('id', 'text', 'choices', 'answer_index')

    def __init__(self, id: str, text: str, choices: List[str], answer_index: int):
        self.id = id
        self.text = text
        self.choices = list(choices)
        self.answer_index = answer_index

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> 'Question':
        """Build a question from a bank record, raising ValueError if malformed."""
        if not isinstance(record, dict):
            raise ValueError('record is not an object')
        qid = record.get('id')
        text = record.get('text')
        choices = record.get('choices')
        answer_index = record.get('answerIndex')
        if qid is None or qid == '':
            raise ValueError('missing id')
        if not isinstance(text, str) or not text:
            raise ValueError('missing text')
        if not isinstance(choices, list) or len(choices) < 2:
            raise ValueError('choices must be a list of at least two entries')
        if isinstance(answer_index, bool) or not isinstance(answer_index, int):
            raise ValueError('answerIndex must be an integer')
        if not 0 <= answer_index < len(choices):
            raise ValueError('answerIndex out of range')
        return cls(str(qid), text, [str(c) for c in choices], answer_index)

    def to_public_dict(self) -> Dict[str, Any]:
        # Never includes the correct index
        return {
            'id': self.id,
            'text': self.text,
            'choices': list(self.choices),
        }


class Member:
    __slots__ = ('connection_id', 'name', 'score', 'joined_seq')

    def __init__(self, connection_id: str, name: str, joined_seq: int, score: int = 0):
        self.connection_id = connection_id
        self.name = name
        self.score = score
        self.joined_seq = joined_seq

    def to_dict(self) -> Dict[str, Any]:
        return {
            'socketId': self.connection_id,
            'name': self.name,
            'score': self.score,
        }


class Answer:
    __slots__ = ('choice_index', 'submitted_at')

    def __init__(self, choice_index: int, submitted_at: Optional[float] = None):
        self.choice_index = choice_index
        self.submitted_at = time.time() if submitted_at is None else submitted_at


def generate_room_code(length=5):
    """Generate a short room code. Uniqueness is checked by the registry."""
    return ''.join(random.choices(string.ascii_uppercase + string.digits, k=length))
