"""
Маршруты администратора приложения переаттестации
Содержит управление участниками клуба и пользователями сайта
"""
from datetime import datetime

from flask import Blueprint, render_template, request, redirect, url_for, flash, current_app
from flask_login import login_required, current_user
from app import db
from app.models.member import Member, MEMBER_STATUSES
from app.models.user import SiteUser, ROLES
from app.utils.decorators import admin_required
from flask_babel import _
from sqlalchemy.exc import SQLAlchemyError

# Создание Blueprint для маршрутов администратора
bp = Blueprint('admin', __name__)


@bp.route('/')
@login_required
@admin_required
def index():
    """Главная страница администратора"""
    return redirect(url_for('admin.members'))


# === Участники переаттестации ===

@bp.route('/members')
@login_required
@admin_required
def members():
    """Список участников переаттестации"""
    members_list = Member.query.order_by(Member.created_at.desc(), Member.id.desc()).all()
    return render_template('admin/members.html',
                           members=members_list,
                           statuses=MEMBER_STATUSES,
                           levels=current_app.config.get('ATTESTATION_LEVELS', (1, 2, 3)))


@bp.route('/members/create', methods=['POST'])
@login_required
@admin_required
def create_member():
    """Добавление участника"""
    user_id = request.form.get('user_id', '').strip()
    nickname = request.form.get('nickname', '').strip()
    deadline_raw = request.form.get('deadline', '').strip()
    status = request.form.get('status', 'active').strip()

    # Валидация
    if not user_id.isdigit():
        flash(_('ID должен состоять только из цифр'))
        return redirect(url_for('admin.members'))

    if not nickname or not deadline_raw:
        flash(_('Заполните все обязательные поля'))
        return redirect(url_for('admin.members'))

    try:
        level = int(request.form.get('level', '1'))
    except (TypeError, ValueError):
        level = None
    if level not in current_app.config.get('ATTESTATION_LEVELS', (1, 2, 3)):
        flash(_('Неизвестный уровень'))
        return redirect(url_for('admin.members'))

    if status not in MEMBER_STATUSES:
        flash(_('Неизвестный статус'))
        return redirect(url_for('admin.members'))

    try:
        deadline = datetime.strptime(deadline_raw, '%Y-%m-%d').date()
    except ValueError:
        flash(_('Некорректная дата'))
        return redirect(url_for('admin.members'))

    if Member.query.filter_by(user_id=user_id).first():
        flash(_('Пользователь с таким ID уже существует'))
        return redirect(url_for('admin.members'))

    try:
        member = Member(user_id=user_id, nickname=nickname, level=level,
                        deadline=deadline, status=status)
        db.session.add(member)
        db.session.commit()
        flash(_('Пользователь добавлен успешно'))
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Error creating member")
        flash(_('Не удалось добавить пользователя'))

    return redirect(url_for('admin.members'))


@bp.route('/members/<int:member_id>/delete', methods=['POST'])
@login_required
@admin_required
def delete_member(member_id):
    """Удаление участника"""
    member = db.get_or_404(Member, member_id)
    try:
        db.session.delete(member)
        db.session.commit()
        flash(_('Пользователь удален'))
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Error deleting member")
        flash(_('Не удалось удалить пользователя'))
    return redirect(url_for('admin.members'))


# === Пользователи сайта ===

@bp.route('/site_users')
@login_required
@admin_required
def site_users():
    """Пользователи, которые могут заходить на сайт"""
    users = SiteUser.query.order_by(SiteUser.created_at.desc(), SiteUser.id.desc()).all()
    return render_template('admin/site_users.html', users=users, roles=ROLES)


@bp.route('/site_users/create', methods=['POST'])
@login_required
@admin_required
def create_site_user():
    """Создание пользователя сайта"""
    email = request.form.get('email', '').strip().lower()
    name = request.form.get('name', '').strip()
    password = request.form.get('password', '')
    role = request.form.get('role', 'user')

    if not email or not name or not password:
        flash(_('Заполните все обязательные поля'))
        return redirect(url_for('admin.site_users'))

    if not SiteUser.is_valid_email(email):
        flash(_('Некорректный формат email'))
        return redirect(url_for('admin.site_users'))

    if role not in ROLES:
        flash(_('Неизвестная роль'))
        return redirect(url_for('admin.site_users'))

    if SiteUser.query.filter_by(email=email).first():
        flash(_('Пользователь с таким email уже существует'))
        return redirect(url_for('admin.site_users'))

    try:
        new_user = SiteUser(email=email, name=name, role=role)
        new_user.set_password(password)
        db.session.add(new_user)
        db.session.commit()
        current_app.logger.info(f"Site user {email} ({role}) created by {current_user.email}")
        flash(_('Пользователь добавлен успешно'))
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Error creating site user")
        flash(_('Не удалось добавить пользователя'))

    return redirect(url_for('admin.site_users'))


@bp.route('/site_users/<int:user_id>/toggle', methods=['POST'])
@login_required
@admin_required
def toggle_site_user(user_id):
    """Включение/отключение учётной записи"""
    user = db.get_or_404(SiteUser, user_id)
    if user.id == current_user.id:
        flash(_('Нельзя отключить собственную учётную запись'))
        return redirect(url_for('admin.site_users'))

    try:
        user.is_active = not user.is_active
        db.session.commit()
        flash(_('Статус пользователя изменен'))
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Error toggling site user status")
        flash(_('Не удалось изменить статус пользователя'))
    return redirect(url_for('admin.site_users'))


@bp.route('/site_users/<int:user_id>/delete', methods=['POST'])
@login_required
@admin_required
def delete_site_user(user_id):
    """Удаление пользователя сайта"""
    user = db.get_or_404(SiteUser, user_id)
    if user.id == current_user.id:
        flash(_('Нельзя удалить собственную учётную запись'))
        return redirect(url_for('admin.site_users'))

    try:
        db.session.delete(user)
        db.session.commit()
        flash(_('Пользователь удален'))
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Error deleting site user")
        flash(_('Не удалось удалить пользователя'))
    return redirect(url_for('admin.site_users'))
