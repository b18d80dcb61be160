"""
Маршруты управления вопросами переаттестации
Тест уровня и его вопросы - только для администратора
"""
from flask import Blueprint, render_template, request, redirect, url_for, flash, current_app, abort
from flask_login import login_required
from flask_babel import _
from app import db
from app.models.branch import Branch
from app.models.question import Question
from app.services.catalog import (get_test_by_level, get_or_create_test, get_questions,
                                  group_questions_by_branch, parse_question_form,
                                  create_question, update_question, delete_question as remove_question)
from app.utils.decorators import admin_required
from app.utils.errors import ValidationError, RemoteError

bp = Blueprint('catalog', __name__)


def _check_level(level):
    if level not in current_app.config.get('ATTESTATION_LEVELS', (1, 2, 3)):
        abort(404)


@bp.route('/level/<int:level>')
@login_required
@admin_required
def level_questions(level):
    """Вопросы уровня, сгруппированные по веткам"""
    _check_level(level)
    test = get_test_by_level(level)
    questions = get_questions(test) if test is not None else []
    return render_template('catalog/level.html',
                           level=level,
                           test=test,
                           questions=questions,
                           groups=group_questions_by_branch(questions))


@bp.route('/level/<int:level>/create_test', methods=['POST'])
@login_required
@admin_required
def create_test(level):
    """Создание теста для уровня, если его нет"""
    _check_level(level)
    try:
        get_or_create_test(level)
        flash(_('Тест создан успешно'))
    except (ValidationError, RemoteError) as e:
        flash(e.message)
    return redirect(url_for('catalog.level_questions', level=level))


@bp.route('/level/<int:level>/question/new', methods=['GET', 'POST'])
@login_required
@admin_required
def new_question(level):
    """Добавление вопроса"""
    _check_level(level)
    test = get_test_by_level(level)
    if test is None:
        flash(_('Для уровня %(level)s еще не создан тест', level=level))
        return redirect(url_for('catalog.level_questions', level=level))

    if request.method == 'POST':
        try:
            data = parse_question_form(request.form)
            create_question(test, data)
        except (ValidationError, RemoteError) as e:
            flash(e.message)
            return render_template('catalog/question_form.html', level=level, question=None,
                                   form=request.form, branches=list(Branch)), 400
        flash(_('Вопрос создан'))
        return redirect(url_for('catalog.level_questions', level=level))

    return render_template('catalog/question_form.html', level=level, question=None,
                           form={}, branches=list(Branch))


@bp.route('/question/<int:question_id>/edit', methods=['GET', 'POST'])
@login_required
@admin_required
def edit_question(question_id):
    """Редактирование вопроса"""
    question = db.get_or_404(Question, question_id)
    level = question.test.level

    if request.method == 'POST':
        try:
            data = parse_question_form(request.form)
            update_question(question, data)
        except (ValidationError, RemoteError) as e:
            flash(e.message)
            return render_template('catalog/question_form.html', level=level, question=question,
                                   form=request.form, branches=list(Branch)), 400
        flash(_('Вопрос обновлен'))
        return redirect(url_for('catalog.level_questions', level=level))

    form = {
        'question_text': question.question_text,
        'branch': question.branch,
        'max_score': f'{question.max_score:g}',
        'order_index': question.order_index,
    }
    return render_template('catalog/question_form.html', level=level, question=question,
                           form=form, branches=list(Branch))


@bp.route('/question/<int:question_id>/delete', methods=['POST'])
@login_required
@admin_required
def delete_question(question_id):
    """Удаление вопроса"""
    question = db.get_or_404(Question, question_id)
    level = question.test.level
    try:
        remove_question(question)
        flash(_('Вопрос удален успешно'))
    except RemoteError as e:
        flash(e.message)
    return redirect(url_for('catalog.level_questions', level=level))
