"""
Модель пользователя сайта приложения переаттестации
Учётные записи, под которыми входят в систему (администраторы и пользователи)
"""
from flask_login import UserMixin
from app import db
from datetime import datetime
from sqlalchemy import String, Integer, DateTime, Boolean
import re
from werkzeug.security import generate_password_hash, check_password_hash

ROLES = ('admin', 'user')


class SiteUser(UserMixin, db.Model):
    """
    Модель пользователя сайта

    Attributes:
        id (int): Уникальный идентификатор пользователя
        email (str): Email пользователя (уникальный, используется как логин)
        name (str): Отображаемое имя (подставляется в результаты тестов)
        password_hash (str): Хеш пароля пользователя
        role (str): Роль пользователя ('admin', 'user')
        is_active (bool): Активна ли учётная запись
        created_at (datetime): Дата создания пользователя
    """

    __tablename__ = 'site_users'

    # Основные поля
    id = db.Column(Integer, primary_key=True)
    email = db.Column(String(120), unique=True, nullable=False)
    name = db.Column(String(200), nullable=False)
    password_hash = db.Column(String(255), nullable=False)
    role = db.Column(String(20), nullable=False, default='user')
    is_active = db.Column(Boolean, nullable=False, default=True)
    created_at = db.Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        """
        Строковое представление объекта пользователя

        Returns:
            str: Строковое представление пользователя
        """
        return f'<SiteUser {self.email} ({self.role})>'

    @property
    def is_admin(self):
        return self.role == 'admin'

    def to_session(self):
        """
        Данные пользователя, доступные остальным частям приложения

        Returns:
            dict: {'id', 'email', 'name', 'role'}
        """
        return {'id': self.id, 'email': self.email, 'name': self.name, 'role': self.role}

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    @staticmethod
    def is_valid_email(email):
        """
        Проверяет корректность формата email

        Args:
            email (str): Email для проверки

        Returns:
            bool: True если формат корректен, иначе False
        """
        pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
        return re.match(pattern, email or '') is not None
