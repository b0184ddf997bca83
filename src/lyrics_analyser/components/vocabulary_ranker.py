"""
Ранжирование ключевой лексики песни.

Оценка слова = число вхождений в песне x полезность слова в языке
(по частоте Zipf). Так наверх поднимаются слова, которые одновременно
важны для песни и полезны для изучения.

Перевод слова берётся из параллельной строки перевода по позиции
(грубое выравнивание), внешний словарь может его переопределить.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from ..interfaces.analysis import (
    AlignerInterface,
    ExternalLookup,
    VocabularyRankerInterface,
    VocabWord,
)
from ..languages.pack import LanguagePack
from ..languages.registry import get_language_pack, on_pack_registered
from .frequency_table import DEFAULT_USEFULNESS, FrequencyTable
from .morphology import MorphologicalAnalyzer, get_analyzer
from .normalizer import WordNormalizer, strip_punctuation

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 15
MIN_WORD_LENGTH = 2


class PositionalAligner(AlignerInterface):
    """Слово перевода с тем же порядковым номером в строке."""

    def align(self, word_index: int, source_words: Sequence[str],
              translation_words: Sequence[str]) -> str:
        if 0 <= word_index < len(translation_words):
            return strip_punctuation(translation_words[word_index].lower())
        return ''


@dataclass
class _WordEntry:
    count: int = 0
    translation: str = ''
    samples: List[str] = field(default_factory=list)


class VocabularyRanker(VocabularyRankerInterface):
    """Ранжировщик лексики для одного языка."""

    def __init__(self, language: str = 'es', aligner: Optional[AlignerInterface] = None,
                 pack: Optional[LanguagePack] = None,
                 frequency_table: Optional[FrequencyTable] = None,
                 analyzer: Optional[MorphologicalAnalyzer] = None,
                 default_usefulness: float = DEFAULT_USEFULNESS,
                 min_word_length: int = MIN_WORD_LENGTH):
        """
        Args:
            language: Код языка
            aligner: Выравниватель переводов (по умолчанию позиционный)
            pack: Готовый языковой пакет
            frequency_table: Частотная таблица
            analyzer: Морфологический анализатор (для части речи)
            default_usefulness: Полезность слов вне частотной таблицы
            min_word_length: Минимальная длина слова (не меньше MIN_WORD_LENGTH)

        Raises:
            UnsupportedLanguageError: если пакета для языка нет
        """
        self.pack = pack or get_language_pack(language)
        self.language = self.pack.code
        self.aligner = aligner or PositionalAligner()
        self.frequency_table = frequency_table or FrequencyTable()
        if analyzer is not None:
            self.analyzer = analyzer
        elif pack is not None:
            self.analyzer = MorphologicalAnalyzer(pack=pack)
        else:
            self.analyzer = get_analyzer(self.language)
        self.normalizer = WordNormalizer(elisions=self.pack.elisions)
        self.default_usefulness = default_usefulness
        self.min_word_length = max(min_word_length, MIN_WORD_LENGTH)

    def extract_vocabulary(self, lyric_lines: Sequence[str],
                           translation_lines: Optional[Sequence[str]] = None,
                           limit: int = DEFAULT_LIMIT,
                           external_lookup: Optional[ExternalLookup] = None) -> List[VocabWord]:
        """
        Возвращает ключевые слова песни по убыванию оценки.

        Args:
            lyric_lines: Строки текста песни
            translation_lines: Параллельные строки перевода (могут быть короче)
            limit: Максимальное число слов (<= 0 - пустой список)
            external_lookup: Внешний словарь слово -> перевод

        Returns:
            Список VocabWord длиной не больше limit
        """
        if not lyric_lines or limit <= 0:
            return []

        entries = self._count_words(lyric_lines, translation_lines or [])
        if not entries:
            return []

        words = []
        for word, entry in entries.items():
            translation = entry.translation
            if external_lookup is not None:
                looked_up = external_lookup(word)
                if looked_up and looked_up.strip():
                    translation = looked_up.strip()

            usefulness = self.frequency_table.usefulness(word, self.language, self.default_usefulness)
            words.append(VocabWord(
                word=entry.samples[0] if entry.samples else word,
                translation=translation or word,
                count=entry.count,
                part_of_speech=self.analyzer.tag(word),
                score=entry.count * usefulness,
            ))

        # sorted() устойчив: при равной оценке сохраняется порядок первого появления
        ranked = sorted(words, key=lambda w: w.score, reverse=True)[:limit]
        logger.debug(f"[{self.language}] лексика: {len(entries)} кандидатов, возвращено {len(ranked)}")
        return ranked

    def is_candidate(self, word: str) -> bool:
        """Проверяет, может ли нормализованное слово попасть в лексику."""
        return (
            len(word) >= self.min_word_length
            and word not in self.pack.stop_words
            and self.normalizer.has_letters(word)
        )

    def _count_words(self, lyric_lines: Sequence[str],
                     translation_lines: Sequence[str]) -> Dict[str, _WordEntry]:
        entries: Dict[str, _WordEntry] = {}
        for index, line in enumerate(lyric_lines):
            source_words = (line or '').split()
            translation_line = translation_lines[index] if index < len(translation_lines) else ''
            translation_words = (translation_line or '').split()

            for word_index, raw_word in enumerate(source_words):
                word = self.normalizer.normalize(raw_word)
                if not word or not self.is_candidate(word):
                    continue

                entry = entries.setdefault(word, _WordEntry())
                entry.count += 1

                # Самый длинный перевод обычно самый содержательный
                translation = self.aligner.align(word_index, source_words, translation_words)
                if translation and len(translation) > len(entry.translation):
                    entry.translation = translation

                if not entry.samples:
                    sample = self.normalizer.clean_surface(raw_word)
                    if sample:
                        entry.samples.append(sample)
        return entries


_rankers: Dict[str, VocabularyRanker] = {}

# Пакет заменён: ранжировщик пересоздаётся при следующем обращении
on_pack_registered(lambda code: _rankers.pop(code, None))


def get_ranker(language: str = 'es') -> VocabularyRanker:
    """Возвращает общий ранжировщик для языка."""
    key = (language or '').strip().lower()
    ranker = _rankers.get(key)
    if ranker is None:
        ranker = VocabularyRanker(key)
        _rankers[key] = ranker
    return ranker


def extract_vocabulary(lyric_lines: Sequence[str], translation_lines: Optional[Sequence[str]] = None,
                       language: str = 'es', limit: int = DEFAULT_LIMIT,
                       external_lookup: Optional[ExternalLookup] = None) -> List[VocabWord]:
    """Ключевая лексика песни (см. VocabularyRanker.extract_vocabulary)."""
    return get_ranker(language).extract_vocabulary(lyric_lines, translation_lines, limit, external_lookup)
