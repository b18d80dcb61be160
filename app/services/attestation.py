"""
Прохождение переаттестации: проверка кода, запуск теста и сохранение результата
"""
import logging
from collections import namedtuple
from datetime import datetime

from flask import current_app
from flask_babel import gettext as _
from sqlalchemy.exc import SQLAlchemyError

from app import db
from app.models.result import AnswerComment, TestResult
from app.services.catalog import get_questions, get_test_by_level
from app.utils.access_gate import ensure_access_code_unused, validate_access_code
from app.utils.errors import RemoteError
from app.utils.test_runner import COMMENT_MAX_LENGTH, COMMENTS_MAX_TOTAL, SUBMITTING, TestRun

logger = logging.getLogger(__name__)

# Ключ сессии Flask, под которым хранится текущее прохождение
RUN_SESSION_KEY = 'attestation_run'

CompletionOutcome = namedtuple('CompletionOutcome', ['result', 'summary', 'comment_error'])


def check_access_code(raw_code):
    """
    Проверка кода доступа с учётом настроек приложения

    Returns:
        str: Код из цифр

    Raises:
        ValidationError: код короткий или уже использован (если повтор запрещён)
        RemoteError: ошибка чтения из базы
    """
    code = validate_access_code(raw_code, current_app.config.get('ACCESS_CODE_MIN_DIGITS', 10))
    if not current_app.config.get('ALLOW_ACCESS_CODE_REUSE', True):
        try:
            ensure_access_code_unused(code)
        except SQLAlchemyError as e:
            logger.exception("Error checking access code reuse")
            raise RemoteError(_('Не удалось проверить код доступа')) from e
    return code


def start_run(level, access_code, branch, user_name):
    """
    Запуск прохождения: поиск теста уровня и загрузка вопросов ветки

    Returns:
        TestRun: Прохождение в состоянии PRESENTING или FAILED

    Raises:
        RemoteError: ошибка чтения из базы
    """
    config = current_app.config
    run = TestRun(level, access_code, branch, user_name,
                  require_comments=config.get('REQUIRE_REMEDIATION_COMMENT', True),
                  comment_max_length=config.get('COMMENT_MAX_LENGTH', COMMENT_MAX_LENGTH),
                  comments_max_total=config.get('COMMENTS_MAX_TOTAL', COMMENTS_MAX_TOTAL))
    try:
        test = get_test_by_level(run.level)
        run.resolve_test(test)
        if test is not None:
            run.load_questions(get_questions(test))
    except SQLAlchemyError as e:
        logger.exception("Error loading test for level %s", level)
        raise RemoteError(_('Не удалось загрузить вопросы')) from e

    logger.info("Started test run: level=%s branch=%s questions=%d state=%s",
                run.level, run.branch, run.total, run.state)
    return run


def complete_run(run):
    """
    Сохранение результата прохождения

    Результат записывается одной транзакцией. Комментарии пишутся отдельно:
    ошибка при их сохранении не отменяет уже сохранённый результат.

    Args:
        run (TestRun): Прохождение в состоянии SUBMITTING

    Returns:
        CompletionOutcome: результат, итоговые баллы, текст ошибки комментариев (или None)

    Raises:
        RemoteError: результат не сохранён; прохождение возвращено к последнему вопросу
    """
    if run.state != SUBMITTING:
        raise RuntimeError(f'Cannot complete run in state {run.state}')

    summary = run.summary()
    now = datetime.utcnow()
    result = TestResult(
        test_id=run.test_id,
        user_name=run.user_name,
        access_code=run.access_code,
        branch=run.branch,
        # Ровно один ответ на каждый показанный вопрос
        answers={str(q.id): float(run.answers.get(str(q.id), 0)) for q in run.questions},
        earned_score=summary.earned_score,
        max_possible_score=summary.max_possible_score,
        percentage_score=summary.percentage_score,
        started_at=now,
        completed_at=now,
    )

    try:
        db.session.add(result)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception("Error saving test result for access code %s", run.access_code)
        run.mark_submit_failed()
        raise RemoteError(_('Не удалось сохранить результат теста')) from e

    run.mark_completed(result.id)
    logger.info("Saved test result %s: %s/%s (%s%%)", result.id, summary.earned_score,
                summary.max_possible_score, summary.percentage_score)

    comment_error = None
    comments = run.comments_to_save()
    if comments:
        try:
            for question_id, text in comments.items():
                db.session.add(AnswerComment(question_id=question_id,
                                             test_result_id=result.id,
                                             comment=text))
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Error saving comments for test result %s", result.id)
            comment_error = _('Результат сохранён, но не удалось сохранить комментарии')

    return CompletionOutcome(result, summary, comment_error)


def save_run(session, run):
    session[RUN_SESSION_KEY] = run.to_dict()


def load_run(session):
    data = session.get(RUN_SESSION_KEY)
    if not data:
        return None
    return TestRun.from_dict(data)


def clear_run(session):
    """Прерванное прохождение ничего не оставляет в базе"""
    session.pop(RUN_SESSION_KEY, None)
