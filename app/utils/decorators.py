"""
Проверка прав доступа к разделам приложения
"""
from functools import wraps

from flask import render_template
from flask_login import current_user


def admin_required(view):
    """
    Доступ только для администратора

    Проверка выполняется до вызова представления; остальным пользователям
    показывается страница "Доступ запрещён" (HTTP 403). Применяется после
    login_required.
    """
    @wraps(view)
    def wrapped(*args, **kwargs):
        if not current_user.is_authenticated or current_user.role != 'admin':
            return render_template('errors/403.html'), 403
        return view(*args, **kwargs)
    return wrapped
