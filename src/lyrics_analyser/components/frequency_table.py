"""
Компонент частотной таблицы слов.

Отвечает за поиск частоты слова по шкале Zipf (1-7, выше = чаще) в
курируемых таблицах языковых пакетов и за перевод частоты в
«полезность» слова для изучения.

Полезность максимальна в середине шкалы: самые частые слова ученик уже
знает, а редкие слишком специализированы.
"""

from typing import Optional, Tuple
import logging

from ..languages.registry import LanguagePackRegistry

logger = logging.getLogger(__name__)

# Пороговая кривая: (минимальный Zipf, полезность), проверяется сверху вниз
USEFULNESS_BANDS: Tuple[Tuple[float, float], ...] = (
    (6.5, 0.2),   # "el", "de", "la" - слишком базовые
    (6.0, 0.4),   # "ser", "estar"
    (5.5, 0.6),   # "muy", "bien"
    (4.5, 0.85),  # "amor", "vida"
    (3.5, 0.95),  # "corazón", "alma"
    (2.5, 0.7),
    (1.5, 0.4),   # редкие/книжные
)
RARE_USEFULNESS = 0.2

DEFAULT_USEFULNESS = 0.5


def zipf_to_usefulness(zipf: float) -> float:
    """
    Переводит частоту Zipf в полезность слова для изучения.

    Args:
        zipf: Частота по шкале Zipf

    Returns:
        Полезность в диапазоне (0, 1]
    """
    for threshold, value in USEFULNESS_BANDS:
        if zipf >= threshold:
            return value
    return RARE_USEFULNESS


def estimate_zipf_by_length(word: str) -> float:
    """Грубая оценка частоты по длине: короткие слова обычно частые."""
    length = len(word)
    if length <= 3:
        return 3.0
    if length <= 5:
        return 2.0
    if length <= 8:
        return 1.0
    return 0.5


class FrequencyTable:
    """Частотная таблица поверх языковых пакетов."""

    def __init__(self, registry: Optional[LanguagePackRegistry] = None):
        """
        Args:
            registry: Реестр языковых пакетов (по умолчанию общий синглтон)
        """
        self.registry = registry or LanguagePackRegistry()

    def zipf(self, word: str, language: str) -> Optional[float]:
        """
        Возвращает курируемую частоту слова или None.

        Args:
            word: Слово (регистр не важен)
            language: Код языка

        Returns:
            Частота Zipf или None, если слова (или языка) нет в таблицах
        """
        pack = self.registry.find(language)
        if pack is None or not word:
            return None
        return pack.frequencies.get(word.strip().lower())

    def usefulness(self, word: str, language: str, default: float = DEFAULT_USEFULNESS) -> float:
        """
        Возвращает полезность слова для изучения.

        Args:
            word: Слово
            language: Код языка
            default: Значение для слов вне таблицы (и для неизвестного языка)

        Returns:
            Полезность слова
        """
        value = self.zipf(word, language)
        if value is None:
            return default
        return zipf_to_usefulness(value)

    def estimate_zipf(self, word: str, language: str) -> float:
        """
        Частота для оценки сложности: курируемая, иначе оценка по длине.

        Args:
            word: Слово
            language: Код языка

        Returns:
            Частота Zipf (всегда число)
        """
        value = self.zipf(word, language)
        if value is not None:
            return value
        return estimate_zipf_by_length((word or '').strip().lower())


_default_table = FrequencyTable()


def get_zipf_frequency(word: str, language: str) -> Optional[float]:
    """Курируемая частота слова или None."""
    return _default_table.zipf(word, language)


def usefulness(word: str, language: str, default: float = DEFAULT_USEFULNESS) -> float:
    """Полезность слова для изучения (см. FrequencyTable.usefulness)."""
    return _default_table.usefulness(word, language, default)


def estimate_zipf(word: str, language: str) -> float:
    """Частота слова с оценкой по длине для слов вне таблицы."""
    return _default_table.estimate_zipf(word, language)
