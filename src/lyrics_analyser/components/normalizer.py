"""
Компонент для нормализации слов при ранжировании лексики.

Принципы:
- Нижний регистр и Unicode-нормализация (NFC) для устойчивых сравнений
- Удаление пунктуации по краям и внутри словоформы
- Снятие элидированного префикса (французское l'amour -> amour)
- Лёгкое кэширование результатов
"""

from typing import Dict, Iterable, List
from ..interfaces.analysis import WordNormalizerInterface
import logging
import unicodedata

logger = logging.getLogger(__name__)

# Знаки, удаляемые из слов и переводов
PUNCTUATION = '¿?¡!.,;:"“”‘’«»()[]' + "'"
_PUNCT_TABLE = str.maketrans('', '', PUNCTUATION)


def strip_punctuation(text: str) -> str:
    """Удаляет пунктуацию, сохраняя регистр."""
    return (text or '').translate(_PUNCT_TABLE).strip()


class WordNormalizer(WordNormalizerInterface):
    """Нормализатор словоформ для подсчёта лексики."""

    def __init__(self, elisions: Iterable[str] = (), use_cache: bool = True):
        """
        Инициализирует нормализатор.

        Args:
            elisions: Элидированные префиксы языка ("l'", "j'", ...)
            use_cache: Использовать ли кэш для нормализации
        """
        # Длинные префиксы первыми (qu' раньше любого однобуквенного)
        self.elisions = tuple(sorted(elisions, key=len, reverse=True))
        self.use_cache = use_cache
        self._cache: Dict[str, str] = {}
        self._cache_hits = 0
        self._cache_misses = 0

    def normalize(self, word: str) -> str:
        """
        Нормализует слово для сравнения.

        Args:
            word: Исходное слово (сырой токен строки)

        Returns:
            Нормализованное слово (может быть пустой строкой)
        """
        if not word:
            return ""

        if self.use_cache and word in self._cache:
            self._cache_hits += 1
            return self._cache[word]

        normalized = strip_punctuation(self._strip_elision(self._prepare(word).lower()))

        if self.use_cache:
            self._cache_misses += 1
            self._cache[word] = normalized

        return normalized

    def normalize_batch(self, words: List[str]) -> List[str]:
        """
        Нормализует список слов.

        Args:
            words: Список слов для нормализации

        Returns:
            Список нормализованных слов
        """
        if not words:
            return []

        return [self.normalize(word) for word in words]

    def clean_surface(self, word: str) -> str:
        """Убирает пунктуацию и элизию, но сохраняет исходный регистр (для показа)."""
        prepared = self._prepare(word)
        return strip_punctuation(prepared[self._elision_length(prepared.lower()):])

    @staticmethod
    def has_letters(word: str) -> bool:
        """Проверяет, что в слове есть хотя бы одна буква."""
        return any(ch.isalpha() for ch in word or '')

    def clear_cache(self) -> None:
        """Очищает кэш нормализации."""
        self._cache.clear()
        self._cache_hits = 0
        self._cache_misses = 0

    def get_cache_stats(self) -> Dict[str, int]:
        """
        Возвращает статистику кэша.

        Returns:
            Словарь со статистикой кэша
        """
        return {
            'cache_size': len(self._cache),
            'cache_hits': self._cache_hits,
            'cache_misses': self._cache_misses
        }

    @staticmethod
    def _prepare(word: str) -> str:
        text = unicodedata.normalize('NFC', (word or '').strip())
        # Открывающие знаки мешают распознать элизию
        return text.replace('’', "'").lstrip('¿¡"“‘«([')

    def _elision_length(self, word: str) -> int:
        for prefix in self.elisions:
            if word.startswith(prefix) and len(word) > len(prefix):
                return len(prefix)
        return 0

    def _strip_elision(self, word: str) -> str:
        return word[self._elision_length(word):]
