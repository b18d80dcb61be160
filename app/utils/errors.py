"""
Ошибки приложения переаттестации
ValidationError - некорректный ввод, RemoteError - сбой обращения к базе данных
"""


class AttestationError(Exception):
    """Базовая ошибка приложения"""

    def __init__(self, message, **details):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(AttestationError):
    """Ввод не прошёл проверку; пользователь может исправить его и повторить"""


class RemoteError(AttestationError):
    """Ошибка чтения или записи в базу данных"""
