# app/routes/auth.py
"""
Маршруты аутентификации приложения переаттестации
Содержит логику входа и выхода пользователей сайта
"""
from flask import Blueprint, render_template, request, redirect, url_for, flash, session, current_app
from flask_login import login_user, logout_user, login_required, current_user
from app import db
from app.models.user import SiteUser
from app.services.attestation import clear_run
from flask_babel import _
from urllib.parse import urlparse, urljoin

# Создание Blueprint для маршрутов аутентификации
bp = Blueprint('auth', __name__)


@bp.route('/login', methods=['GET', 'POST'])
def login():
    """Маршрут для входа в систему"""
    if current_user.is_authenticated:
        return redirect(url_for('main.index'))

    if request.method == 'POST':
        email = request.form.get('email', '').strip().lower()
        password = request.form.get('password', '')

        user = SiteUser.query.filter(db.func.lower(SiteUser.email) == email).first()

        if user is None:
            flash(_('Пользователь с таким email не найден'))
        elif not user.check_password(password):
            flash(_('Неверный пароль'))
        elif not user.is_active:
            current_app.logger.info(f"Login refused for inactive user {user.email}")
            flash(_('Учётная запись отключена. Обратитесь к администратору.'))
        else:
            login_user(user)
            current_app.logger.info(f"User {user.email} logged in")
            flash(_('Добро пожаловать в систему переаттестации'))

            next_page = url_for('main.index')
            # Безопасный редирект с next
            next_arg = request.args.get('next')
            if next_arg and is_safe_url(next_arg):
                next_page = next_arg
            return redirect(next_page)

    return render_template('auth/login.html')


@bp.route('/logout')
@login_required
def logout():
    """Выход из системы; незавершённое прохождение теста сбрасывается"""
    clear_run(session)
    logout_user()
    session.clear()
    flash(_('Вы вышли из системы'))
    return redirect(url_for('auth.login'))


@bp.route('/change_language/<language>')
def change_language(language):
    """Изменение языка интерфейса (без авторизации, для публичных страниц)"""
    supported_langs = current_app.config.get('LANGUAGES', {})
    if language in supported_langs:
        session['language'] = language
        flash(_('Язык интерфейса изменён'))
    else:
        flash(_('Неподдерживаемый язык'))

    # Безопасный редирект: только локальные пути
    referrer = request.referrer
    if referrer and is_safe_url(referrer):
        # Избегаем зацикливания на /change_language/...
        parsed = urlparse(referrer)
        if not parsed.path.startswith('/auth/change_language/'):
            return redirect(referrer)

    return redirect(url_for('main.index'))


# === Вспомогательные функции ===

def is_safe_url(target):
    """Проверка безопасности URL для редиректа"""
    if not target:
        return False

    host_url = request.host_url.rstrip('/')
    target_url = urljoin(host_url + '/', target).rstrip('/')

    ref = urlparse(host_url)
    test = urlparse(target_url)

    return (
        test.scheme in ('http', 'https') and
        ref.netloc == test.netloc and
        test.path.startswith('/')
    )
