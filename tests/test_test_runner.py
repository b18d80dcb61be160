from collections import namedtuple

import pytest

from app.models.branch import Branch
from app.utils.errors import ValidationError
from app.utils.test_runner import (COMPLETED, FAILED, PRESENTING, SUBMITTING, TestRun,
                                   select_presented_questions)

Q = namedtuple('Q', ['id', 'branch', 'max_score', 'order_index'])

QUESTIONS = [
    Q(5, 'karaoke', 1.0, 2),
    Q(1, 'general', 1.0, 1),
    Q(3, 'lit_club', 1.0, 1),
    Q(2, 'general', 1.0, 2),
    Q(4, 'karaoke', 1.0, 3),
]


def make_run(questions=QUESTIONS, branch='karaoke', require_comments=True):
    run = TestRun(1, '1234567890', branch, 'Иван', require_comments=require_comments)
    run.resolve_test(namedtuple('T', ['id'])(7))
    run.load_questions(questions)
    return run


def test_selection_keeps_general_and_branch_ordered():
    selected = select_presented_questions(QUESTIONS, Branch.KARAOKE)
    assert [q.id for q in selected] == [1, 2, 5, 4]


def test_equal_order_index_falls_back_to_id():
    selected = select_presented_questions(QUESTIONS, 'lit_club')
    assert [q.id for q in selected] == [1, 3, 2]


def test_missing_test_fails_run():
    run = TestRun(2, '1234567890', 'karaoke', 'Иван')
    run.resolve_test(None)
    assert run.state == FAILED
    assert run.error


def test_no_questions_fails_run():
    run = make_run(questions=[Q(3, 'lit_club', 1.0, 1)])
    assert run.state == FAILED
    assert run.total == 0


def test_advance_requires_score():
    run = make_run()
    with pytest.raises(ValidationError):
        run.advance()
    assert run.index == 0


def test_partial_score_requires_comment():
    run = make_run()
    run.record_score('0.5')
    with pytest.raises(ValidationError) as excinfo:
        run.advance()
    assert excinfo.value.details['field'] == 'comment'

    run.record_comment('  Перепутал правила  ')
    run.advance()
    assert run.index == 1


def test_comment_not_required_when_disabled():
    run = make_run(require_comments=False)
    run.record_score(0)
    run.advance()
    assert run.index == 1


def test_invalid_score_rejected():
    run = make_run()
    with pytest.raises(ValidationError):
        run.record_score('0.3')
    with pytest.raises(ValidationError):
        run.record_score(None)


def test_back_keeps_answers():
    run = make_run()
    run.record_score(1)
    run.advance()
    run.record_score(0.5)
    run.record_comment('Неуверенно')
    run.go_back()
    assert run.index == 0
    assert run.current_score() == 1.0
    run.advance()
    assert run.current_score() == 0.5
    assert run.current_comment() == 'Неуверенно'


def test_back_on_first_question_stays():
    run = make_run()
    run.go_back()
    assert run.index == 0


def test_full_karaoke_run_scores_75_percent():
    run = make_run()
    for score, comment in ((1, ''), (0.5, 'Забыл пункт'), (0.5, 'Частично'), (1, '')):
        run.record_score(score)
        run.record_comment(comment)
        run.advance()

    assert run.state == SUBMITTING
    summary = run.summary()
    assert summary.earned_score == 3.0
    assert summary.max_possible_score == 4.0
    assert summary.percentage_score == 75
    assert run.comments_to_save() == {2: 'Забыл пункт', 5: 'Частично'}

    run.mark_completed(11)
    assert run.state == COMPLETED
    assert run.result_id == 11


def test_comment_on_full_score_not_saved():
    run = make_run()
    run.record_score(0.5)
    run.record_comment('Было')
    run.record_score(1)
    assert run.comments_to_save() == {}


def test_submit_failure_returns_to_last_question():
    run = make_run()
    for _ in range(run.total):
        run.record_score(1)
        run.advance()
    run.mark_submit_failed()
    assert run.state == PRESENTING
    assert run.index == run.total - 1
    assert len(run.answers) == run.total


def test_session_round_trip_preserves_progress():
    run = make_run()
    run.record_score(0.5)
    run.record_comment('Ок')
    restored = TestRun.from_dict(run.to_dict())
    assert restored.state == PRESENTING
    assert restored.current == run.current
    assert restored.current_score() == 0.5
    assert restored.current_comment() == 'Ок'


def test_wrong_state_raises():
    run = TestRun(1, '1234567890', 'karaoke', 'Иван')
    with pytest.raises(RuntimeError):
        run.advance()


def test_long_comment_rejected():
    run = make_run()
    run.record_score(0.5)
    with pytest.raises(ValidationError) as excinfo:
        run.record_comment('я' * (run.comment_max_length + 1))
    assert excinfo.value.details['field'] == 'comment'
    assert run.current_comment() == ''

    run.record_comment('я' * run.comment_max_length)
    run.advance()


def test_total_comment_length_limited():
    run = make_run(questions=QUESTIONS)
    run.comment_max_length = 10
    run.comments_max_total = 15
    run.record_score(0.5)
    run.record_comment('а' * 10)
    run.advance()
    run.record_score(0.5)
    with pytest.raises(ValidationError):
        run.record_comment('б' * 6)
    run.record_comment('б' * 5)

    # Замена своего комментария не считается дважды
    run.go_back()
    run.record_comment('в' * 10)
    assert run.current_comment() == 'в' * 10


def test_limits_survive_session_round_trip():
    run = TestRun(1, '1234567890', 'karaoke', 'Иван', comment_max_length=20, comments_max_total=40)
    restored = TestRun.from_dict(run.to_dict())
    assert restored.comment_max_length == 20
    assert restored.comments_max_total == 40
