"""
Маршруты истории переаттестации
Список результатов, поиск по коду доступа, просмотр, удаление и экспорт
"""
import io

from flask import Blueprint, render_template, request, redirect, url_for, flash, current_app, abort, send_file
from flask_login import login_required
from flask_babel import _
from app.services.history import (list_results, filter_by_access_code, get_result,
                                  build_breakdown, delete_result)
from app.utils.errors import RemoteError
from app.utils.export import export_filename, render_result_pdf, render_result_png

bp = Blueprint('history', __name__)


@bp.route('/')
@login_required
def index():
    """Все пройденные тесты с поиском по коду доступа"""
    search_code = request.args.get('code', '')
    try:
        results = list_results()
    except RemoteError as e:
        flash(e.message)
        results = []

    filtered = filter_by_access_code(results, search_code)
    return render_template('history/index.html', results=filtered, search_code=search_code)


@bp.route('/<int:result_id>')
@login_required
def detail(result_id):
    """Подробности прохождения теста"""
    breakdown = _load_breakdown(result_id)
    if breakdown is None:
        return redirect(url_for('history.index'))
    return render_template('history/detail.html', breakdown=breakdown)


@bp.route('/<int:result_id>/delete', methods=['POST'])
@login_required
def delete(result_id):
    """Удаление результата (после подтверждения)"""
    test_result = get_result(result_id)
    if test_result is None:
        abort(404)

    if request.form.get('confirm') != 'yes':
        return render_template('history/confirm_delete.html', result=test_result)

    try:
        delete_result(test_result)
        flash(_('Результат тестирования успешно удален'))
    except RemoteError as e:
        flash(e.message)

    return redirect(url_for('history.index'))


@bp.route('/<int:result_id>/export/<fmt>')
@login_required
def export(result_id, fmt):
    """Выгрузка результата в PDF или PNG"""
    if fmt not in ('pdf', 'png'):
        abort(404)

    breakdown = _load_breakdown(result_id)
    if breakdown is None:
        return redirect(url_for('history.index'))

    try:
        if fmt == 'pdf':
            content = render_result_pdf(breakdown, font_path=current_app.config.get('PDF_FONT_PATH'))
            mimetype = 'application/pdf'
        else:
            content = render_result_png(breakdown, width=current_app.config.get('EXPORT_IMAGE_WIDTH', 1240))
            mimetype = 'image/png'
    except Exception:
        current_app.logger.exception(f"Error exporting result {result_id} to {fmt}")
        flash(_('Не удалось создать файл'))
        return redirect(url_for('history.detail', result_id=result_id))

    return send_file(io.BytesIO(content),
                     mimetype=mimetype,
                     as_attachment=True,
                     download_name=export_filename(breakdown.result, fmt))


def _load_breakdown(result_id):
    test_result = get_result(result_id)
    if test_result is None:
        abort(404)
    try:
        return build_breakdown(test_result)
    except RemoteError as e:
        flash(e.message)
        return None
