"""
Исключения пакета lyrics_analyser.

Настоящих отказов у движка немного: пустой вход для оценки сложности,
неизвестный код языка и повреждённый файл языкового пакета. Все прочие
нехватки данных (слова нет в частотной таблице, время глагола не
определилось, строка перевода короче оригинала) обрабатываются значениями
по умолчанию и исключений не порождают.
"""


class LyricsAnalyserError(Exception):
    """Базовое исключение пакета."""


class EmptyInputError(LyricsAnalyserError, ValueError):
    """Оценка сложности вызвана для пустого списка строк."""

    def __init__(self, message: str = "Не переданы строки для оценки сложности"):
        super().__init__(message)


class UnsupportedLanguageError(LyricsAnalyserError, ValueError):
    """Для кода языка не зарегистрирован языковой пакет."""

    def __init__(self, language: str, available=None):
        self.language = language
        self.available = sorted(available or [])
        hint = f" (доступны: {', '.join(self.available)})" if self.available else ""
        super().__init__(f"Язык '{language}' не поддерживается{hint}")


class LanguagePackError(LyricsAnalyserError):
    """Файл языкового пакета отсутствует или содержит ошибки."""
