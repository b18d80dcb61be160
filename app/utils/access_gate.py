"""
Проверка кода доступа перед началом переаттестации
"""
import re

from flask_babel import gettext as _

from app.utils.errors import ValidationError

DEFAULT_MIN_DIGITS = 10

_NON_DIGITS = re.compile(r'[^0-9]')


def normalize_access_code(raw):
    """Оставляет в коде только цифры"""
    return _NON_DIGITS.sub('', raw or '')


def validate_access_code(raw, min_digits=DEFAULT_MIN_DIGITS):
    """
    Проверка кода доступа

    Args:
        raw (str): Введённый код (может содержать пробелы, дефисы и т.п.)
        min_digits (int): Минимальное количество цифр

    Returns:
        str: Строка из цифр кода

    Raises:
        ValidationError: если цифр меньше min_digits
    """
    code = normalize_access_code(raw)
    if len(code) < min_digits:
        raise ValidationError(
            _('Код должен содержать минимум %(count)d цифр', count=min_digits),
            field='access_code')
    return code


def ensure_access_code_unused(code):
    """
    Проверяет, что по коду ещё нет сохранённых результатов

    Используется, когда повторное использование кода запрещено
    настройкой ALLOW_ACCESS_CODE_REUSE.

    Raises:
        ValidationError: если код уже использован
    """
    from app.models.result import TestResult

    if TestResult.query.filter_by(access_code=code).first() is not None:
        raise ValidationError(_('Этот код доступа уже использован'), field='access_code')
