"""
Маршруты переаттестации
Код доступа -> выбор ветки -> последовательные вопросы -> сохранение результата
"""
from flask import Blueprint, render_template, request, redirect, url_for, flash, session, current_app, abort
from flask_login import login_required, current_user
from flask_babel import _
from app import db
from app.models.branch import Branch
from app.models.question import Question
from app.services.attestation import (check_access_code, start_run, complete_run,
                                      save_run, load_run, clear_run)
from app.services.history import get_result, build_breakdown
from app.utils.errors import ValidationError, RemoteError
from app.utils.test_runner import PRESENTING, FAILED

bp = Blueprint('attestation', __name__)

# Ключ сессии с проверенным кодом доступа (до выбора ветки)
GATE_SESSION_KEY = 'attestation_gate'


def _levels():
    return list(current_app.config.get('ATTESTATION_LEVELS', (1, 2, 3)))


def _check_level(level):
    if level not in _levels():
        abort(404)


def _display_name():
    name = (getattr(current_user, 'name', None) or '').strip()
    return name or _('Неизвестный пользователь')


@bp.route('/')
@login_required
def index():
    """Выбор уровня переаттестации"""
    run = load_run(session)
    if run is not None and run.state == PRESENTING:
        return redirect(url_for('attestation.question'))
    return render_template('attestation/index.html', levels=_levels())


@bp.route('/level/<int:level>/code', methods=['GET', 'POST'])
@login_required
def access_code(level):
    """Ввод кода доступа"""
    _check_level(level)

    if request.method == 'POST':
        raw_code = request.form.get('access_code', '')
        try:
            code = check_access_code(raw_code)
        except (ValidationError, RemoteError) as e:
            flash(e.message)
            return render_template('attestation/code.html', level=level, access_code=raw_code), 400

        # Новый код начинает прохождение заново
        clear_run(session)
        session[GATE_SESSION_KEY] = {'level': level, 'access_code': code}
        return redirect(url_for('attestation.branch', level=level))

    return render_template('attestation/code.html', level=level, access_code='')


@bp.route('/level/<int:level>/branch', methods=['GET', 'POST'])
@login_required
def branch(level):
    """Выбор ветки и запуск теста"""
    _check_level(level)
    gate = session.get(GATE_SESSION_KEY)
    if not gate or gate.get('level') != level:
        flash(_('Сначала введите код доступа'))
        return redirect(url_for('attestation.access_code', level=level))

    if request.method == 'POST':
        try:
            selected = Branch.parse(request.form.get('branch'))
        except ValueError:
            selected = None
        if selected is None or selected is Branch.GENERAL:
            flash(_('Выберите ветку'))
            return render_template('attestation/branch.html', level=level,
                                   branches=Branch.selectable()), 400

        try:
            run = start_run(level, gate['access_code'], selected, _display_name())
        except RemoteError as e:
            flash(e.message)
            return render_template('attestation/branch.html', level=level,
                                   branches=Branch.selectable()), 503

        if run.state == FAILED:
            flash(run.error)
            session.pop(GATE_SESSION_KEY, None)
            return redirect(url_for('attestation.index'))

        session.pop(GATE_SESSION_KEY, None)
        save_run(session, run)
        return redirect(url_for('attestation.question'))

    return render_template('attestation/branch.html', level=level, branches=Branch.selectable())


@bp.route('/question', methods=['GET', 'POST'])
@login_required
def question():
    """Текущий вопрос: выбор балла, комментарий, навигация"""
    run = load_run(session)
    if run is None or run.state != PRESENTING:
        flash(_('Тест не начат'))
        return redirect(url_for('attestation.index'))

    if request.method == 'POST':
        action = request.form.get('action', 'next')
        try:
            if request.form.get('score') not in (None, ''):
                run.record_score(request.form.get('score'))
            if 'comment' in request.form:
                run.record_comment(request.form.get('comment'))

            if action == 'back':
                run.go_back()
            else:
                run.advance()
        except ValidationError as e:
            flash(e.message)
            save_run(session, run)
            return _render_question(run), 400

        if run.state == PRESENTING:
            save_run(session, run)
            return redirect(url_for('attestation.question'))

        # Последний вопрос подтверждён: сохраняем результат
        try:
            outcome = complete_run(run)
        except RemoteError as e:
            flash(e.message)
            save_run(session, run)
            return redirect(url_for('attestation.question'))

        clear_run(session)
        if outcome.comment_error:
            flash(outcome.comment_error)
        summary = outcome.summary
        flash(_('Тест завершен. Результат: %(earned)s/%(max)s баллов (%(percent)s%%)',
                earned=f'{summary.earned_score:g}', max=f'{summary.max_possible_score:g}',
                percent=summary.percentage_score))
        return redirect(url_for('attestation.result', result_id=outcome.result.id))

    return _render_question(run)


@bp.route('/cancel', methods=['POST'])
@login_required
def cancel():
    """Прерывание прохождения; в базу ничего не записывается"""
    clear_run(session)
    session.pop(GATE_SESSION_KEY, None)
    flash(_('Прохождение теста прервано'))
    return redirect(url_for('attestation.index'))


@bp.route('/result/<int:result_id>')
@login_required
def result(result_id):
    """Итог прохождения"""
    test_result = get_result(result_id)
    if test_result is None:
        abort(404)
    try:
        breakdown = build_breakdown(test_result)
    except RemoteError as e:
        flash(e.message)
        return redirect(url_for('history.index'))
    return render_template('attestation/result.html', breakdown=breakdown)


def _render_question(run):
    current = db.session.get(Question, run.current.id)
    return render_template('attestation/question.html',
                           run=run,
                           question=current,
                           branch=Branch.parse(run.branch),
                           options=run.current_options(),
                           selected=run.current_score(),
                           comment=run.current_comment(),
                           comments_enabled=run.require_comments)
