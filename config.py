# config.py
import os
from datetime import timedelta


def _env_flag(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Базовый класс конфигурации приложения"""

    # Название приложения
    APP_NAME = 'Переаттестация'

    # Настройки безопасности
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'your-secret-key-here'

    # Настройки базы данных
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///attestation.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Указываем путь к каталогу с переводами
    BABEL_TRANSLATION_DIRECTORIES = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'translations')
    BABEL_DEFAULT_LOCALE = 'ru'  # Язык по умолчанию
    BABEL_DEFAULT_TIMEZONE = 'UTC'
    # Поддерживаемые языки
    LANGUAGES = {
        'ru': 'Русский',
        'en': 'English'
    }

    # Настройки приложения
    PERMANENT_SESSION_LIFETIME = timedelta(days=7)
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Администратор по умолчанию (создаётся при первом запуске)
    DEFAULT_ADMIN_EMAIL = os.environ.get('DEFAULT_ADMIN_EMAIL') or 'admin@example.com'
    DEFAULT_ADMIN_PASSWORD = os.environ.get('DEFAULT_ADMIN_PASSWORD') or 'admin'
    DEFAULT_ADMIN_NAME = 'Администратор'

    # Переаттестация
    ATTESTATION_LEVELS = (1, 2, 3)
    ACCESS_CODE_MIN_DIGITS = 10
    # Разрешать ли повторное использование кода доступа
    ALLOW_ACCESS_CODE_REUSE = _env_flag('ALLOW_ACCESS_CODE_REUSE', True)
    # Комментарий обязателен, если балл ниже максимального
    REQUIRE_REMEDIATION_COMMENT = _env_flag('REQUIRE_REMEDIATION_COMMENT', True)
    # Прохождение хранится в cookie сессии: длина комментариев ограничена
    COMMENT_MAX_LENGTH = int(os.environ.get('COMMENT_MAX_LENGTH', 500))
    COMMENTS_MAX_TOTAL = int(os.environ.get('COMMENTS_MAX_TOTAL', 1500))

    # Экспорт результатов
    PDF_FONT_PATH = os.environ.get('PDF_FONT_PATH')  # TTF-шрифт с кириллицей, например DejaVuSans.ttf
    EXPORT_IMAGE_WIDTH = 1240


class TestingConfig(Config):
    """Конфигурация для тестов"""

    TESTING = True
    SECRET_KEY = 'testing'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    DEFAULT_ADMIN_EMAIL = 'admin@example.com'
    DEFAULT_ADMIN_PASSWORD = 'admin'
    ALLOW_ACCESS_CODE_REUSE = True
    REQUIRE_REMEDIATION_COMMENT = True
    PDF_FONT_PATH = None
