"""
Основные маршруты приложения переаттестации
Содержит главную страницу
"""
from flask import Blueprint, redirect, url_for
from flask_login import current_user

# Создание Blueprint для основных маршрутов
bp = Blueprint('main', __name__)


@bp.route('/')
def index():
    """
    Главная страница приложения - перенаправление на вход или на переаттестацию
    """
    if current_user.is_authenticated:
        return redirect(url_for('attestation.index'))
    return redirect(url_for('auth.login'))
