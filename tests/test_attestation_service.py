import pytest

from app import db
from app.models import AnswerComment, Question, Test, TestResult
from app.services.attestation import check_access_code, complete_run, start_run
from app.utils.errors import RemoteError, ValidationError
from app.utils.test_runner import COMPLETED, FAILED, PRESENTING, SUBMITTING


def answer_all(run, scores):
    for score, comment in scores:
        run.record_score(score)
        run.record_comment(comment)
        run.advance()
    assert run.state == SUBMITTING


def test_start_run_without_test_fails(app):
    run = start_run(3, '1234567890', 'karaoke', 'Иван')
    assert run.state == FAILED


def test_start_run_loads_branch_questions(app, level_one):
    run = start_run(1, '1234567890', 'karaoke', 'Иван')
    assert run.state == PRESENTING
    assert run.test_id == level_one.id
    assert run.total == 3


def test_complete_run_saves_result_and_comment(app, level_one):
    run = start_run(1, '1234567890', 'karaoke', 'Иван')
    answer_all(run, [(1, ''), (0.5, 'Забыл пункт'), (2, '')])

    outcome = complete_run(run)

    assert outcome.comment_error is None
    assert run.state == COMPLETED
    result = db.session.get(TestResult, outcome.result.id)
    assert result.earned_score == 3.5
    assert result.max_possible_score == 4.0
    assert result.percentage_score == 88
    assert result.branch == 'karaoke'
    assert len(result.answers) == 3
    assert result.started_at == result.completed_at
    comments = AnswerComment.query.filter_by(test_result_id=result.id).all()
    assert [c.comment for c in comments] == ['Забыл пункт']


def test_comment_failure_keeps_result(app, level_one):
    run = start_run(1, '1234567890', 'karaoke', 'Иван')
    answer_all(run, [(1, ''), (0.5, 'Забыл пункт'), (2, '')])
    # Комментарий к несуществующему вопросу нарушает внешний ключ
    run.comments = {'999': 'Нет такого вопроса'}
    run.answers['999'] = 0.0
    run.questions.append(run.questions[-1]._replace(id=999, max_score=1.0))

    outcome = complete_run(run)

    assert outcome.comment_error
    assert TestResult.query.count() == 1
    assert AnswerComment.query.count() == 0


def test_result_failure_returns_to_last_question(app, level_one):
    run = start_run(1, '1234567890', 'karaoke', 'Иван')
    answer_all(run, [(1, ''), (1, ''), (2, '')])
    run.test_id = 999

    with pytest.raises(RemoteError):
        complete_run(run)

    assert run.state == PRESENTING
    assert run.index == run.total - 1
    assert TestResult.query.count() == 0


def test_access_code_reuse_allowed_by_default(app, level_one):
    db.session.add(TestResult(test_id=level_one.id, user_name='Иван', access_code='1234567890',
                              answers={}))
    db.session.commit()
    assert check_access_code('1234567890') == '1234567890'


def test_access_code_reuse_can_be_disabled(app, level_one):
    app.config['ALLOW_ACCESS_CODE_REUSE'] = False
    db.session.add(TestResult(test_id=level_one.id, user_name='Иван', access_code='1234567890',
                              answers={}))
    db.session.commit()
    with pytest.raises(ValidationError):
        check_access_code('123 456 7890')
    assert check_access_code('0987654321') == '0987654321'


def test_general_and_karaoke_scenario(app):
    test = Test(name='Тест уровня 2', level=2)
    db.session.add(test)
    db.session.flush()
    db.session.add_all([
        Question(test_id=test.id, question_text='Q1', branch='general', max_score=1, order_index=1),
        Question(test_id=test.id, question_text='Q2', branch='karaoke', max_score=1, order_index=2),
    ])
    db.session.commit()

    run = start_run(2, '1234567890', 'karaoke', 'Иван')
    answer_all(run, [(1, ''), (0.5, 'Сбился с ритма')])
    outcome = complete_run(run)

    assert outcome.summary == (1.5, 2.0, 75)
    comments = AnswerComment.query.all()
    assert len(comments) == 1
    assert comments[0].question.question_text == 'Q2'
