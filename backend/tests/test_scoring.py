from conftest import make_question
from trivia.models import Answer, Member
from trivia.services.contests.scoring import leaderboard, score_answers


def test_leaderboard_orders_by_score_then_join_order():
    members = [Member('a', 'Ann', 0, score=10), Member('b', 'Bo', 1, score=30), Member('c', 'Cy', 2, score=10)]
    assert [e['name'] for e in leaderboard(members)] == ['Bo', 'Ann', 'Cy']


def test_score_answers_awards_correct_and_skips_departed():
    question = make_question()
    members = {'a': Member('a', 'Ann', 0), 'b': Member('b', 'Bo', 1)}
    answers = {
        'a': Answer(1, submitted_at=2.0),
        'b': Answer(0, submitted_at=1.0),
        'gone': Answer(1, submitted_at=0.5),
    }
    scored = score_answers(question, answers, members, points=10)
    assert scored == [{'socketId': 'a', 'name': 'Ann', 'points': 10}]
    assert members['a'].score == 10
    assert members['b'].score == 0
    assert 'gone' not in members
