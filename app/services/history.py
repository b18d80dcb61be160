"""
История переаттестации
Список результатов, поиск по коду доступа, разбор ответов и удаление
"""
import logging
from collections import namedtuple

from flask_babel import gettext as _
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import joinedload

from app import db
from app.models.branch import Branch
from app.models.question import Question
from app.models.result import AnswerComment, TestResult
from app.utils.errors import RemoteError
from app.utils.scoring import format_score_text, result_status

logger = logging.getLogger(__name__)

BreakdownItem = namedtuple('BreakdownItem', ['number', 'question_text', 'score', 'max_score',
                                             'score_text', 'comment'])

ResultBreakdown = namedtuple('ResultBreakdown', ['result', 'level', 'test_name', 'branch',
                                                 'status', 'status_label', 'items'])


def list_results():
    """
    Все результаты вместе с тестом, новые первыми

    Raises:
        RemoteError: ошибка чтения из базы
    """
    try:
        return (TestResult.query
                .options(joinedload(TestResult.test))
                .order_by(TestResult.completed_at.desc(), TestResult.id.desc())
                .all())
    except SQLAlchemyError as e:
        logger.exception("Error loading test results")
        raise RemoteError(_('Не удалось загрузить результаты')) from e


def filter_by_access_code(results, query):
    """
    Поиск по коду доступа: точное вхождение подстроки с учётом регистра

    Args:
        results (list): Результаты тестов
        query (str): Строка поиска; пустая строка возвращает все результаты

    Returns:
        list: Подходящие результаты в исходном порядке
    """
    query = (query or '').strip()
    if not query:
        return list(results)
    return [result for result in results if query in (result.access_code or '')]


def get_result(result_id):
    return db.session.get(TestResult, result_id)


def build_breakdown(result):
    """
    Разбор результата по вопросам

    Вопросы теста берутся в порядке order_index; остаются те, что были показаны
    участнику (общие и вопросы его ветки, а также все, на которые есть ответ).

    Returns:
        ResultBreakdown: Данные для страницы результата и экспорта

    Raises:
        RemoteError: ошибка чтения из базы
    """
    try:
        questions = (Question.query
                     .filter_by(test_id=result.test_id)
                     .order_by(Question.order_index, Question.id)
                     .all())
        comments = AnswerComment.query.filter_by(test_result_id=result.id).all()
    except SQLAlchemyError as e:
        logger.exception("Error loading breakdown for result %s", result.id)
        raise RemoteError(_('Не удалось загрузить ответы')) from e

    answers = result.answers or {}
    allowed = {Branch.GENERAL.value}
    if result.branch:
        allowed.add(result.branch)
    comment_map = {c.question_id: c.comment for c in comments if c.question_id is not None}

    items = []
    for question in questions:
        if question.branch not in allowed and str(question.id) not in answers:
            continue
        score = result.score_for(question.id)
        items.append(BreakdownItem(
            number=len(items) + 1,
            question_text=question.question_text,
            score=score,
            max_score=question.max_score,
            score_text=format_score_text(score, question.max_score),
            comment=comment_map.get(question.id),
        ))

    status, status_label = result_status(result.percentage_score)
    branch = None
    if result.branch:
        try:
            branch = Branch.parse(result.branch)
        except ValueError:
            branch = None
    return ResultBreakdown(
        result=result,
        level=result.test.level if result.test else None,
        test_name=result.test.name if result.test else None,
        branch=branch,
        status=status,
        status_label=status_label,
        items=items,
    )


def delete_result(result):
    """
    Удаление результата вместе с его комментариями (каскад relationship)

    Вопросы и тесты не затрагиваются.

    Raises:
        RemoteError: ошибка записи в базу
    """
    result_id = result.id
    try:
        db.session.delete(result)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception("Error deleting test result %s", result_id)
        raise RemoteError(_('Не удалось удалить результат тестирования')) from e
    logger.info("Deleted test result %s", result_id)
