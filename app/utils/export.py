"""
Экспорт результата переаттестации
PDF (reportlab, A4 с переносом на новые страницы) и PNG (OpenCV)
"""
import io
import logging
import os

import cv2
import numpy as np
from flask_babel import gettext as _

logger = logging.getLogger(__name__)

# Шрифты Hershey в OpenCV и встроенный Helvetica в reportlab не содержат кириллицы
_TRANSLIT = {
    'а': 'a', 'б': 'b', 'в': 'v', 'г': 'g', 'д': 'd', 'е': 'e', 'ё': 'e', 'ж': 'zh',
    'з': 'z', 'и': 'i', 'й': 'y', 'к': 'k', 'л': 'l', 'м': 'm', 'н': 'n', 'о': 'o',
    'п': 'p', 'р': 'r', 'с': 's', 'т': 't', 'у': 'u', 'ф': 'f', 'х': 'kh', 'ц': 'ts',
    'ч': 'ch', 'ш': 'sh', 'щ': 'shch', 'ъ': '', 'ы': 'y', 'ь': '', 'э': 'e', 'ю': 'yu',
    'я': 'ya',
}

PDF_FONT_NAME = 'ExportFont'


def transliterate(text):
    """
    Перевод текста в ASCII для шрифтов без кириллицы

    Returns:
        str: Текст латиницей; прочие не-ASCII символы заменяются на '?'
    """
    out = []
    for char in text or '':
        lower = char.lower()
        if lower in _TRANSLIT:
            latin = _TRANSLIT[lower]
            out.append(latin.capitalize() if char != lower else latin)
        elif ord(char) < 128:
            out.append(char)
        else:
            out.append('?')
    return ''.join(out)


def export_filename(result, extension):
    """Имя файла выгрузки: по коду доступа и имени участника"""
    return f'результат_теста_{result.access_code}_{result.user_name}.{extension}'


def summary_lines(breakdown):
    """
    Содержимое выгрузки в виде строк

    Args:
        breakdown (ResultBreakdown): Разбор результата

    Returns:
        list: Пары (стиль, текст); стиль: 'title', 'meta', 'heading', 'question', 'answer', 'comment'
    """
    result = breakdown.result
    level = breakdown.level if breakdown.level is not None else 'N/A'
    completed = result.completed_at.strftime('%d.%m.%Y %H:%M') if result.completed_at else ''

    lines = [
        ('title', _('Результат тестирования')),
        ('meta', _('Код доступа: %(code)s', code=result.access_code)),
        ('meta', _('Участник: %(name)s', name=result.user_name)),
        ('meta', _('Уровень: %(level)s', level=level)),
    ]
    if breakdown.branch is not None:
        lines.append(('meta', _('Ветка: %(branch)s', branch=breakdown.branch.label)))
    lines.extend([
        ('meta', _('Дата прохождения: %(date)s', date=completed)),
        ('meta', _('Результат: %(earned)s / %(max)s (%(percent)s%%) - %(status)s',
                   earned=f'{result.earned_score:g}', max=f'{result.max_possible_score:g}',
                   percent=result.percentage_score, status=breakdown.status_label)),
        ('heading', _('Ответы')),
    ])
    for item in breakdown.items:
        lines.append(('question', f'{item.number}. {item.question_text}'))
        lines.append(('answer', _('Ответ: %(text)s', text=item.score_text)))
        if item.comment:
            lines.append(('comment', _('Комментарий: %(text)s', text=item.comment)))
    return lines


# === PDF ===

def _register_pdf_font(font_path):
    from reportlab.pdfbase import pdfmetrics
    from reportlab.pdfbase.ttfonts import TTFont

    if not font_path or not os.path.isfile(font_path):
        return None
    try:
        pdfmetrics.registerFont(TTFont(PDF_FONT_NAME, font_path))
    except Exception:
        logger.exception("Cannot register PDF font %s", font_path)
        return None
    return PDF_FONT_NAME


def render_result_pdf(breakdown, font_path=None):
    """
    PDF с результатом (A4, длинные списки ответов переносятся на новые страницы)

    Args:
        breakdown (ResultBreakdown): Разбор результата
        font_path (str): TTF-шрифт с кириллицей; без него текст транслитерируется

    Returns:
        bytes: Содержимое PDF-файла
    """
    from reportlab.lib import colors
    from reportlab.lib.pagesizes import A4
    from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
    from reportlab.lib.units import mm
    from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer
    from xml.sax.saxutils import escape

    font_name = _register_pdf_font(font_path)
    prepare = (lambda text: text) if font_name else transliterate

    buf = io.BytesIO()
    doc = SimpleDocTemplate(buf, pagesize=A4,
                            leftMargin=18 * mm, rightMargin=18 * mm,
                            topMargin=18 * mm, bottomMargin=18 * mm,
                            title=prepare(export_filename(breakdown.result, 'pdf')))
    styles = getSampleStyleSheet()
    base = {'fontName': font_name} if font_name else {}
    style_map = {
        'title': ParagraphStyle('ResultTitle', parent=styles['Heading1'], alignment=1, **base),
        'meta': ParagraphStyle('ResultMeta', parent=styles['BodyText'], **base),
        'heading': ParagraphStyle('ResultHeading', parent=styles['Heading2'], **base),
        'question': ParagraphStyle('ResultQuestion', parent=styles['BodyText'], spaceBefore=6, **base),
        'answer': ParagraphStyle('ResultAnswer', parent=styles['BodyText'], textColor=colors.dimgrey, **base),
        'comment': ParagraphStyle('ResultComment', parent=styles['BodyText'], textColor=colors.darkorange,
                                  leftIndent=6 * mm, **base),
    }

    flow = []
    for style, text in summary_lines(breakdown):
        flow.append(Paragraph(escape(prepare(text)), style_map[style]))
        if style == 'title':
            flow.append(Spacer(1, 6))

    doc.build(flow)
    return buf.getvalue()


# === PNG ===

_PNG_STYLES = {
    # стиль: (масштаб шрифта, толщина, цвет BGR, отступ слева)
    'title': (1.2, 2, (0, 0, 0), 0),
    'meta': (0.75, 1, (40, 40, 40), 0),
    'heading': (0.9, 2, (0, 0, 0), 0),
    'question': (0.75, 2, (0, 0, 0), 0),
    'answer': (0.7, 1, (90, 90, 90), 20),
    'comment': (0.7, 1, (0, 110, 230), 40),
}
_PNG_FONT = cv2.FONT_HERSHEY_SIMPLEX
_PNG_MARGIN = 48
_PNG_LINE_GAP = 14


def _wrap(text, scale, thickness, max_width):
    words = text.split()
    if not words:
        return ['']
    lines = []
    current = words[0]
    for word in words[1:]:
        candidate = f'{current} {word}'
        (width, _height), _baseline = cv2.getTextSize(candidate, _PNG_FONT, scale, thickness)
        if width <= max_width:
            current = candidate
        else:
            lines.append(current)
            current = word
    lines.append(current)
    return lines


def render_result_png(breakdown, width=1240):
    """
    PNG-изображение с результатом

    Args:
        breakdown (ResultBreakdown): Разбор результата
        width (int): Ширина изображения в пикселях

    Returns:
        bytes: Содержимое PNG-файла

    Raises:
        RuntimeError: если OpenCV не смог закодировать изображение
    """
    layout = []
    y = _PNG_MARGIN
    for style, text in summary_lines(breakdown):
        scale, thickness, color, indent = _PNG_STYLES[style]
        max_width = width - 2 * _PNG_MARGIN - indent
        if style in ('heading', 'question'):
            y += _PNG_LINE_GAP
        for line in _wrap(transliterate(text), scale, thickness, max_width):
            (line_width, line_height), baseline = cv2.getTextSize(line, _PNG_FONT, scale, thickness)
            y += line_height + baseline
            x = (width - line_width) // 2 if style == 'title' else _PNG_MARGIN + indent
            layout.append((line, x, y, scale, thickness, color))
            y += _PNG_LINE_GAP // 2
    height = y + _PNG_MARGIN

    image = np.full((height, width, 3), 255, dtype=np.uint8)
    for line, x, y, scale, thickness, color in layout:
        cv2.putText(image, line, (x, y), _PNG_FONT, scale, color, thickness, cv2.LINE_AA)

    ok, encoded = cv2.imencode('.png', image)
    if not ok:
        raise RuntimeError('PNG encoding failed')
    return encoded.tobytes()
