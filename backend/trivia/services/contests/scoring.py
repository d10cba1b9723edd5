from typing import Dict, Iterable, List

from trivia.models import Answer, Member, Question


def leaderboard(members: Iterable[Member]) -> List[dict]:
    """Members sorted by score descending, ties broken by join order."""
    ordered = sorted(members, key=lambda m: (-m.score, m.joined_seq))
    return [m.to_dict() for m in ordered]


def score_answers(question: Question, answers: Dict[str, Answer], members: Dict[str, Member], points: int) -> List[dict]:
    """Apply scoring for a revealed question.

    +``points`` to each member whose recorded choice is correct. Answers from
    connections no longer present in ``members`` are skipped. Returns the
    scored list in submission order.
    """
    scored = []
    for connection_id, answer in sorted(answers.items(), key=lambda item: item[1].submitted_at):
        member = members.get(connection_id)
        if member is None:
            continue
        if answer.choice_index == question.answer_index:
            member.score += points
            scored.append({'socketId': connection_id, 'name': member.name, 'points': points})
    return scored
