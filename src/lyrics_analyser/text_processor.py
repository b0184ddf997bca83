"""
Модуль для подготовки сырого текста песни

Содержит функции для:
- Удаления HTML тегов
- Удаления временных меток LRC ([01:23.45]) и пометок разделов ([Chorus])
- Разбиения текста на непустые строки
- Грубого определения языка по стоп-словам языковых пакетов
"""

import re
from bs4 import BeautifulSoup
from typing import List, Optional, Sequence

from .languages.registry import available_languages, get_language_pack

# [mm:ss], [mm:ss.xx], [mm:ss:xx]
LRC_TIMESTAMP = re.compile(r'\[\d{1,2}:\d{2}(?:[.:]\d{1,3})?\]')
# Метаданные LRC: [ar:...], [ti:...], [al:...], [by:...], [offset:...]
LRC_METADATA = re.compile(r'^\s*\[(?:ar|ti|al|au|by|re|ve|length|offset):[^\]]*\]\s*$', re.IGNORECASE)
# Пометки разделов целой строкой: [Chorus], [Verso 2]
SECTION_MARKER = re.compile(r'^\s*\[[^\]]{1,40}\]\s*$')
WORD = re.compile(r"[^\W\d_]+")


class LyricsTextProcessor:
    """Класс для подготовки текста песни к анализу"""

    def __init__(self, remove_section_markers: bool = True) -> None:
        self.remove_section_markers = remove_section_markers

    def remove_html_tags(self, text: str) -> str:
        """
        Удаляет HTML теги из текста используя BeautifulSoup

        Теги <br> превращаются в переводы строк, чтобы не склеивать строки песни.

        Args:
            text: HTML текст

        Returns:
            Очищенный текст без HTML тегов
        """
        if not text:
            return ""

        # Проверяем, содержит ли текст HTML теги
        if '<' in text and '>' in text:
            soup = BeautifulSoup(text, "lxml")
            for br in soup.find_all('br'):
                br.replace_with('\n')
            for block in soup.find_all(['p', 'div', 'li']):
                block.append('\n')
            return soup.get_text()
        return text

    def remove_timestamps(self, line: str) -> str:
        """Удаляет временные метки LRC из строки."""
        return LRC_TIMESTAMP.sub('', line)

    def is_metadata_line(self, line: str) -> bool:
        """Проверяет, является ли строка метаданными LRC или пометкой раздела."""
        if LRC_METADATA.match(line):
            return True
        return self.remove_section_markers and bool(SECTION_MARKER.match(line))

    def clean_lines(self, text: str) -> List[str]:
        """
        Полная очистка текста песни

        Args:
            text: Сырой текст (HTML, LRC или обычный)

        Returns:
            Список непустых строк без разметки
        """
        if not text:
            return []

        text = self.remove_html_tags(text)
        lines = []
        for raw_line in text.splitlines():
            if self.is_metadata_line(raw_line):
                continue
            line = ' '.join(self.remove_timestamps(raw_line).split())
            if line:
                lines.append(line)
        return lines

    def guess_language(self, lines: Sequence[str], candidates: Optional[Sequence[str]] = None) -> Optional[str]:
        """
        Определяет язык песни по доле стоп-слов каждого языкового пакета

        Args:
            lines: Строки песни
            candidates: Коды языков для сравнения (по умолчанию все доступные)

        Returns:
            Код языка с наибольшей долей стоп-слов или None, если слов нет
        """
        words = [w.lower() for line in lines for w in WORD.findall(line)]
        if not words:
            return None

        best_code, best_share = None, 0.0
        for code in candidates or available_languages():
            stop_words = get_language_pack(code).stop_words
            share = sum(1 for w in words if w in stop_words) / len(words)
            if share > best_share:
                best_code, best_share = code, share
        return best_code
