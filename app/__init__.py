# app/__init__.py
"""
Инициализация Flask-приложения переаттестации
Создание экземпляра приложения, инициализация расширений
"""
from flask import Flask, session, render_template
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_babel import Babel, lazy_gettext as _l
from config import Config
import logging


# Инициализация расширений Flask (до create_app)
db = SQLAlchemy()
login_manager = LoginManager()


def create_app(config_class=Config):
    """
    Создание и настройка экземпляра Flask-приложения

    Args:
        config_class: Класс конфигурации приложения

    Returns:
        app: Настроенный экземпляр Flask-приложения
    """
    # Создание экземпляра приложения
    app = Flask(__name__)
    app.config.from_object(config_class)

    app.logger.setLevel(getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO))

    # Инициализация расширений
    db.init_app(app)
    # === Включение внешних ключей для SQLite ===
    if 'sqlite' in app.config.get('SQLALCHEMY_DATABASE_URI'):
        from sqlalchemy import event
        from sqlalchemy.engine import Engine

        @event.listens_for(Engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    login_manager.init_app(app)
    login_manager.login_view = 'auth.login'
    login_manager.login_message = _l('Пожалуйста, войдите для доступа к этой странице.')

    # === Babel: get_locale ДО инициализации ===
    def get_locale():
        # 1. Сессия
        lang = session.get('language')
        if lang in app.config.get('LANGUAGES', {}):
            return lang

        # 2. Дефолт
        return app.config.get('BABEL_DEFAULT_LOCALE', 'ru')

    Babel(app, locale_selector=get_locale)
    app.jinja_env.globals['get_locale'] = get_locale

    # Функция для имени приложения
    def get_app_name():
        return app.config.get('APP_NAME', 'Приложение')

    app.jinja_env.globals['get_app_name'] = get_app_name

    # === Регистрация Blueprints ===
    from app.routes.auth import bp as auth_bp
    app.register_blueprint(auth_bp, url_prefix='/auth')

    from app.routes.main import bp as main_bp
    app.register_blueprint(main_bp)

    from app.routes.attestation import bp as attestation_bp
    app.register_blueprint(attestation_bp, url_prefix='/attestation')

    from app.routes.history import bp as history_bp
    app.register_blueprint(history_bp, url_prefix='/history')

    from app.routes.catalog import bp as catalog_bp
    app.register_blueprint(catalog_bp, url_prefix='/catalog')

    from app.routes.admin import bp as admin_bp
    app.register_blueprint(admin_bp, url_prefix='/admin')

    # === Jinja2 фильтры ===
    from app.utils.scoring import format_points

    @app.template_filter('points')
    def points_filter(value):
        return format_points(value or 0)

    @app.template_filter('datetime')
    def datetime_filter(value):
        return value.strftime('%d.%m.%Y %H:%M') if value else ''

    @app.errorhandler(403)
    def forbidden(error):
        return render_template('errors/403.html'), 403

    # === Инициализация БД ===
    with app.app_context():
        # Импорт моделей (чтобы SQLAlchemy их увидел)
        from app.models.user import SiteUser
        from app.models import Member, Test, Question, TestResult, AnswerComment  # noqa: F401

        db.create_all()

        # === Создание администратора по умолчанию ===
        admin_email = app.config.get('DEFAULT_ADMIN_EMAIL')
        admin_password = app.config.get('DEFAULT_ADMIN_PASSWORD')

        existing_admin = SiteUser.query.filter_by(email=admin_email).first()
        if admin_email and admin_password and not existing_admin:
            admin_user = SiteUser(
                email=admin_email,
                name=app.config.get('DEFAULT_ADMIN_NAME', 'Администратор'),
                role='admin'
            )
            admin_user.set_password(admin_password)
            db.session.add(admin_user)
            try:
                db.session.commit()
                app.logger.info(f"Создан администратор: {admin_email}")
            except Exception as e:
                db.session.rollback()
                app.logger.error(f"Ошибка создания администратора: {e}")

    return app


# Функция загрузки пользователя для Flask-Login
@login_manager.user_loader
def load_user(user_id):
    from app.models.user import SiteUser
    if user_id is None:
        return None
    try:
        return db.session.get(SiteUser, int(user_id))
    except (ValueError, TypeError):
        return None
