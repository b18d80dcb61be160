"""
Модель участника клуба
Участники, проходящие переаттестацию: уровень, срок и статус
"""
from app import db
from datetime import datetime
from sqlalchemy import String, Integer, Date, DateTime

MEMBER_STATUSES = ('active', 'inactive', 'pending')


class Member(db.Model):
    """
    Модель участника клуба

    Attributes:
        id (int): Уникальный идентификатор записи
        user_id (str): Внешний цифровой ID участника (уникальный)
        nickname (str): Никнейм участника
        level (int): Текущий уровень переаттестации
        deadline (date): Срок прохождения переаттестации
        status (str): Статус ('active', 'inactive', 'pending')
        created_at (datetime): Дата создания записи
        updated_at (datetime): Дата изменения записи
    """

    __tablename__ = 'members'

    id = db.Column(Integer, primary_key=True)
    user_id = db.Column(String(32), unique=True, nullable=False)
    nickname = db.Column(String(120), nullable=False)
    level = db.Column(Integer, nullable=False, default=1)
    deadline = db.Column(Date, nullable=False)
    status = db.Column(String(20), nullable=False, default='active')
    created_at = db.Column(DateTime, default=datetime.utcnow)
    updated_at = db.Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f'<Member {self.user_id} {self.nickname} (level {self.level}, {self.status})>'
