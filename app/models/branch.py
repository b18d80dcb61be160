"""
Ветки переаттестации
Закрытый перечень направлений, по которым выбираются вопросы теста
"""
import enum

from flask_babel import lazy_gettext as _l


class Branch(str, enum.Enum):
    """
    Ветка (направление) переаттестации

    GENERAL - общие вопросы, включаются в тест для любой ветки.
    Остальные значения может выбрать участник перед началом теста.
    """

    GENERAL = 'general'
    KARAOKE = 'karaoke'
    LIT_CLUB = 'lit_club'
    KINOSHKA = 'kinoshka'

    @property
    def label(self):
        return BRANCH_TITLES[self]

    @property
    def description(self):
        return BRANCH_DESCRIPTIONS[self]

    @property
    def icon(self):
        return BRANCH_ICONS.get(self, '')

    @classmethod
    def selectable(cls):
        """Ветки, доступные участнику для выбора"""
        return [branch for branch in cls if branch is not cls.GENERAL]

    @classmethod
    def parse(cls, value):
        """
        Преобразует строку в ветку

        Raises:
            ValueError: если ветка неизвестна
        """
        if isinstance(value, cls):
            return value
        return cls((value or '').strip())


BRANCH_TITLES = {
    Branch.GENERAL: _l('Общий'),
    Branch.KARAOKE: _l('КАРАОКЕ'),
    Branch.LIT_CLUB: _l('ЛИТ.КЛУБ'),
    Branch.KINOSHKA: _l('КИНОШКА'),
}

BRANCH_DESCRIPTIONS = {
    Branch.GENERAL: _l('Для всех веток'),
    Branch.KARAOKE: _l('Ветка караоке'),
    Branch.LIT_CLUB: _l('Литературный клуб'),
    Branch.KINOSHKA: _l('Киноклуб'),
}

BRANCH_ICONS = {
    Branch.KARAOKE: '🎤',
    Branch.LIT_CLUB: '📚',
    Branch.KINOSHKA: '🎬',
}
