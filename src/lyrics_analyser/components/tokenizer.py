"""
Компонент для токенизации строк песен.

Отвечает за разбивку строки на словоформы и числа. Регистр сохраняется:
морфологический анализатор сам приводит слова к нижнему регистру там,
где это нужно.
"""

import re
import unicodedata
from typing import Dict, Iterable, List
from ..interfaces.analysis import TokenProcessorInterface

# Буквенные последовательности (любой алфавит) с необязательным апострофом
# элизии перед следующей буквой (l'amour -> l', amour) и числа
WORD_PATTERN = re.compile(r"[^\W\d_]+(?:['’](?=[^\W\d_]))?|\d+")
LETTER = r"[^\W\d_]"


class TokenProcessor(TokenProcessorInterface):
    """Процессор для токенизации строк текста песни."""

    def __init__(self, min_length: int = 1, include_numbers: bool = True,
                 apostrophe_words: Iterable[str] = ()):
        """
        Инициализирует процессор токенизации.

        Args:
            min_length: Минимальная длина буквенного токена
            include_numbers: Включать ли числа в токены
            apostrophe_words: Слова с апострофом, которые остаются одним токеном
        """
        self.min_length = min_length
        self.include_numbers = include_numbers
        self.pattern = self._build_pattern(apostrophe_words)

    def tokenize(self, text: str) -> List[str]:
        """
        Разбивает строку на токены.

        Args:
            text: Исходная строка

        Returns:
            Список токенов в исходном регистре
        """
        if not text or not text.strip():
            return []
        # Единая Unicode-нормализация (NFC) до разбиения
        text = unicodedata.normalize('NFC', text)

        tokens = [t.replace('’', "'") for t in self.pattern.findall(text)]
        return self.filter_tokens(tokens)

    @staticmethod
    def _build_pattern(apostrophe_words: Iterable[str]) -> "re.Pattern":
        words = sorted({w for w in apostrophe_words if w}, key=len, reverse=True)
        if not words:
            return WORD_PATTERN
        # Целые слова проверяются первыми, апостроф любой формы
        alternatives = '|'.join(re.escape(w).replace("'", "['’]") for w in words)
        return re.compile(
            rf"(?<!{LETTER})(?i:{alternatives})(?!{LETTER})|" + WORD_PATTERN.pattern
        )

    def is_valid_token(self, token: str) -> bool:
        """
        Проверяет валидность токена.

        Args:
            token: Токен для проверки

        Returns:
            True если токен валиден
        """
        if not token:
            return False

        if token.isdigit():
            return self.include_numbers

        if len(token) < self.min_length:
            return False

        # Токен должен содержать хотя бы одну букву
        return any(ch.isalpha() for ch in token)

    def filter_tokens(self, tokens: List[str]) -> List[str]:
        """
        Фильтрует токены по критериям валидности.

        Args:
            tokens: Список токенов для фильтрации

        Returns:
            Отфильтрованный список токенов
        """
        return [token for token in tokens if self.is_valid_token(token)]

    def get_token_statistics(self, tokens: List[str]) -> Dict[str, object]:
        """
        Возвращает статистику по токенам.

        Args:
            tokens: Список токенов

        Returns:
            Словарь со статистикой
        """
        if not tokens:
            return {
                'total_tokens': 0,
                'valid_tokens': 0,
                'avg_length': 0.0,
                'length_distribution': {}
            }

        valid_tokens = [t for t in tokens if self.is_valid_token(t)]
        lengths = [len(t) for t in valid_tokens]

        # Распределение по длинам
        length_dist: Dict[int, int] = {}
        for length in lengths:
            length_dist[length] = length_dist.get(length, 0) + 1

        return {
            'total_tokens': len(tokens),
            'valid_tokens': len(valid_tokens),
            'avg_length': round(sum(lengths) / len(lengths), 1) if lengths else 0.0,
            'length_distribution': length_dist
        }
