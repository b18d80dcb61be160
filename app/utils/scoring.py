"""
Подсчёт баллов переаттестации
Шкала оценки вопроса, итоговые баллы, процент и статус результата
"""
import math
from collections import namedtuple

from flask_babel import gettext as _

# Шаг шкалы оценки: полный балл, половина, ноль
HALF_CREDIT = 0.5
SCORE_STEP = 0.5

# Пороги статуса результата в процентах
EXCELLENT_THRESHOLD = 80
GOOD_THRESHOLD = 60

ScoreSummary = namedtuple('ScoreSummary', ['earned_score', 'max_possible_score', 'percentage_score'])


def _normalize(value):
    # Убираем хвосты вида 0.30000000000000004
    return round(float(value), 6)


def score_options(max_score):
    """
    Варианты оценки вопроса

    Args:
        max_score (float): Максимальный балл за вопрос

    Returns:
        list: Различные значения по убыванию: максимум, половина, ноль
    """
    max_score = _normalize(max_score)
    options = []
    for value in (max_score, HALF_CREDIT, 0.0):
        if value <= max_score and value not in options:
            options.append(value)
    return options


def is_valid_score(score, max_score):
    """
    Проверка балла за вопрос

    Допустимы значения от 0 до max_score с шагом 0.5, а также сам max_score
    (он может быть не кратен шагу).

    Returns:
        bool: True если балл допустим
    """
    try:
        score = _normalize(score)
    except (TypeError, ValueError):
        return False
    if math.isnan(score):
        return False
    max_score = _normalize(max_score)
    if score == max_score:
        return True
    if score < 0 or score > max_score:
        return False
    steps = score / SCORE_STEP
    return math.isclose(steps, round(steps))


def calculate_percentage(earned_score, max_possible_score):
    """
    Процент выполнения теста, округлённый до целого (половина вверх)

    Returns:
        int: Процент от 0 до 100 (0, если максимум равен нулю)
    """
    if not max_possible_score:
        return 0
    return int(math.floor(earned_score / max_possible_score * 100 + 0.5))


def summarize(questions, answers):
    """
    Итоговые баллы по набору показанных вопросов

    Args:
        questions (iterable): Объекты с атрибутами id и max_score
        answers (dict): Баллы {question_id: score}; ключи int или str

    Returns:
        ScoreSummary: Набранные баллы, максимум, процент
    """
    answers = {str(key): value for key, value in (answers or {}).items()}
    earned = 0.0
    max_possible = 0.0
    for question in questions:
        # Вопрос без ответа считается как 0
        earned += float(answers.get(str(question.id)) or 0)
        max_possible += float(question.max_score)
    earned = _normalize(earned)
    max_possible = _normalize(max_possible)
    return ScoreSummary(earned, max_possible, calculate_percentage(earned, max_possible))


def result_status(percentage):
    """
    Статус результата по проценту

    Returns:
        tuple: (код статуса, подпись)
    """
    percentage = percentage or 0
    if percentage >= EXCELLENT_THRESHOLD:
        return 'excellent', _('Отлично')
    if percentage >= GOOD_THRESHOLD:
        return 'good', _('Хорошо')
    return 'failed', _('Неудовлетворительно')


def format_points(value):
    """1.0 -> '1', 0.5 -> '0.5'"""
    value = _normalize(value)
    return f'{value:g}'


def format_score_text(score, max_score=1.0):
    """
    Подпись балла для отображения ответа

    Returns:
        str: Например "1 балл (максимум)", "0.5 балла", "0 баллов"
    """
    score = _normalize(score or 0)
    text = _('%(points)s %(word)s', points=format_points(score), word=_points_word(score))
    if score == _normalize(max_score):
        return _('%(text)s (максимум)', text=text)
    return text


def _points_word(value):
    if value == 1:
        return _('балл')
    if value != int(value) or 1 < value < 5:
        return _('балла')
    return _('баллов')
