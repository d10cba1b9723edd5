"""Question source: a fixed pool loaded once from a JSON file."""

import json
import logging
import random
from typing import Iterable, List, Optional

from trivia.models import Question


SAMPLE_QUESTION = {
    'id': 'default',
    'text': 'Sample question: What is 2+2?',
    'choices': ['3', '4', '5', '6'],
    'answerIndex': 1,
}


class QuestionBank:
    """Uniform-random-with-replacement draws from a fixed pool."""

    def __init__(self, questions: Iterable[Question], source: str = 'memory', rng: Optional[random.Random] = None):
        self._questions: List[Question] = list(questions)
        self.source = source
        self._rng = rng or random.Random()

    @classmethod
    def from_records(cls, records, source='memory', logger=None, rng=None):
        logger = logger or logging.getLogger(__name__)
        questions = []
        for position, record in enumerate(records):
            try:
                questions.append(Question.from_record(record))
            except ValueError as exc:
                logger.warning(f"[questions-skip] source={source} position={position} reason={exc}")
        return cls(questions, source=source, rng=rng)

    @classmethod
    def from_file(cls, path, logger=None, rng=None):
        logger = logger or logging.getLogger(__name__)
        try:
            with open(path, encoding='utf-8') as fh:
                records = json.load(fh)
            if not isinstance(records, list):
                raise ValueError('question file must contain a JSON list')
        except (OSError, ValueError) as exc:
            logger.error(f"[questions-fallback] path={path} error={exc}")
            return cls([Question.from_record(SAMPLE_QUESTION)], source='builtin', rng=rng)
        bank = cls.from_records(records, source=path, logger=logger, rng=rng)
        logger.info(f"[questions-load] path={path} count={len(bank)}")
        return bank

    def draw(self) -> Optional[Question]:
        if not self._questions:
            return None
        return self._rng.choice(self._questions)

    def __len__(self):
        return len(self._questions)
