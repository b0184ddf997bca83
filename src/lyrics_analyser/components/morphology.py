"""
Морфологический анализатор строк песен.

Без обученных моделей: часть речи, лемма и время определяются
детерминированными правилами языкового пакета. Правила: упорядоченная
таблица (предикат, тег), которую вычисляет один общий диспетчер, поэтому
новый язык добавляется данными, а не кодом.

Результат приблизительный: уверенность токена всегда 0.8.
"""

import threading
import logging
import unicodedata
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

from ..interfaces.analysis import AnalyzedLine, MorphologicalAnalyzerInterface, Token
from ..languages.pack import LanguagePack, PosRule
from ..languages.registry import get_language_pack, on_pack_registered
from .conjugation import ConjugationGenerator
from .tokenizer import TokenProcessor

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE = 0.8


class MorphologicalAnalyzer(MorphologicalAnalyzerInterface):
    """Анализатор: токенизация + разметка части речи, леммы и времени."""

    def __init__(self, language: str = 'es', pack: Optional[LanguagePack] = None,
                 tokenizer: Optional[TokenProcessor] = None):
        """
        Инициализирует анализатор.

        Args:
            language: Код языка ('es', 'fr')
            pack: Готовый языковой пакет (если не задан, берётся из реестра)
            tokenizer: Токенизатор строк

        Raises:
            UnsupportedLanguageError: если пакета для языка нет
        """
        self.pack = pack or get_language_pack(language)
        self.language = self.pack.code
        self.tokenizer = tokenizer or TokenProcessor(apostrophe_words=self.pack.apostrophe_words)
        self.conjugator = ConjugationGenerator(pack=self.pack)

        # Множества слов для правил-списков (по индексу правила)
        self._rule_words: Dict[int, FrozenSet[str]] = {
            i: frozenset(rule.values)
            for i, rule in enumerate(self.pack.pos_rules) if rule.kind == 'words'
        }
        self._lemma_rules = tuple(sorted(self.pack.lemma_rules, key=lambda r: len(r.suffix), reverse=True))
        self._plural_suffixes = tuple(sorted(self.pack.plural_suffixes, key=len, reverse=True))
        self._nonfinite_suffixes = tuple(r.suffix for r in self._lemma_rules)

        # Кэш разметки по словоформе в нижнем регистре
        self._cache: Dict[str, Tuple[str, str, Optional[str]]] = {}

    def analyze_line(self, text: str, line_index: int = 0) -> AnalyzedLine:
        """
        Токенизирует строку и размечает каждый токен.

        Args:
            text: Строка текста песни (любая, в том числе пустая)
            line_index: Номер строки в песне

        Returns:
            AnalyzedLine с токенами в исходном порядке
        """
        tokens = []
        for surface in self.tokenizer.tokenize(text or ''):
            pos, lemma, tense = self._analyze_word(surface)
            tokens.append(Token(
                text=surface,
                lemma=lemma,
                pos=pos,
                is_verb=(pos == 'VERB'),
                tense=tense,
                confidence=DEFAULT_CONFIDENCE,
            ))
        return AnalyzedLine(raw_text=text or '', sentence_index=line_index, tokens=tuple(tokens))

    def analyze_lines(self, lines: Sequence[str]) -> List[AnalyzedLine]:
        """Анализирует все строки песни, нумеруя их по порядку."""
        return [self.analyze_line(line, index) for index, line in enumerate(lines)]

    def tag(self, word: str) -> str:
        """
        Определяет часть речи по таблице правил пакета.

        Args:
            word: Словоформа

        Returns:
            Тег части речи (первое сработавшее правило или тег по умолчанию)
        """
        lower = self._prepare(word)
        if not lower:
            return self.pack.default_pos
        for index, rule in enumerate(self.pack.pos_rules):
            if self._rule_matches(index, rule, lower):
                return rule.tag
        return self.pack.default_pos

    def lemmatize(self, word: str, pos: Optional[str] = None) -> str:
        """
        Приводит слово к начальной форме.

        Порядок: известная финитная форма -> её инфинитив; герундий и
        причастие -> инфинитив по правилам пакета; множественное число
        существительных и прилагательных -> единственное; иначе слово в
        нижнем регистре.

        Args:
            word: Словоформа
            pos: Часть речи (если не задана, определяется через tag())
        """
        lower = self._prepare(word)
        if not lower:
            return ''
        pos = pos or self.tag(lower)

        if pos == 'VERB':
            return self._verb_lemma(lower)
        if pos in ('NOUN', 'ADJ'):
            return self._singular(lower)
        return lower

    def tense_candidates(self, word: str) -> List[str]:
        """
        Все возможные времена словоформы, в порядке предпочтения.

        Сначала точные совпадения с известными формами (порядок парадигмы),
        иначе все времена, чьи суффиксные таблицы подходят (порядок таблиц).
        Инфинитивы, герундии и причастия времени не имеют.
        """
        lower = self._prepare(word)
        if not lower:
            return []

        exact = self.conjugator.lookup_form(lower)
        if exact:
            return self._unique(tense for _lemma, tense in exact)

        if lower in self.pack.verbs or lower.endswith(self._nonfinite_suffixes):
            return []

        return self._unique(rule.tense for rule in self.pack.tense_rules if rule.matches(lower))

    def detect_tense(self, word: str) -> Optional[str]:
        """Первое подходящее время (или None)."""
        candidates = self.tense_candidates(word)
        return candidates[0] if candidates else None

    def _analyze_word(self, surface: str) -> Tuple[str, str, Optional[str]]:
        lower = self._prepare(surface)
        cached = self._cache.get(lower)
        if cached is not None:
            return cached

        pos = self.tag(lower)
        lemma = self.lemmatize(lower, pos)
        tense = self.detect_tense(lower) if pos == 'VERB' else None
        result = (pos, lemma, tense)
        self._cache[lower] = result
        return result

    def _rule_matches(self, index: int, rule: PosRule, word: str) -> bool:
        if len(word) < rule.min_length:
            return False
        if rule.kind == 'words':
            return word in self._rule_words[index]
        if rule.kind == 'suffixes':
            return word.endswith(rule.values)
        if rule.kind == 'known_verb_form':
            return self.conjugator.is_known_form(word)
        if rule.kind == 'numeric':
            return word.isdigit()
        return False

    def _verb_lemma(self, word: str) -> str:
        if word in self.pack.verbs:
            return word

        known = self.conjugator.lookup_form(word)
        if known:
            return known[0][0]

        for rule in self._lemma_rules:
            if not word.endswith(rule.suffix):
                continue
            stem = word[:-len(rule.suffix)]
            if len(stem) < rule.min_stem:
                continue
            # Лексикон решает между -er и -ir
            for ending in rule.endings:
                if stem + ending in self.pack.verbs:
                    return stem + ending
            return stem + rule.endings[0]

        return word

    def _singular(self, word: str) -> str:
        if len(word) <= 3:
            return word

        candidates = [
            word[:-len(suffix)] for suffix in self._plural_suffixes
            if word.endswith(suffix) and len(word) - len(suffix) >= 2
        ]
        # Слово из частотной таблицы надёжнее эвристики
        for candidate in candidates:
            if candidate in self.pack.frequencies:
                return candidate

        endings = self.pack.plural_stem_endings
        for candidate in candidates:
            if endings is None or candidate[-1] in endings:
                return candidate
        return word

    @staticmethod
    def _unique(items) -> List[str]:
        seen = []
        for item in items:
            if item not in seen:
                seen.append(item)
        return seen

    @staticmethod
    def _prepare(word: str) -> str:
        text = unicodedata.normalize('NFC', (word or '').strip().lower())
        return text.replace('’', "'")


_analyzers: Dict[str, MorphologicalAnalyzer] = {}
_analyzers_lock = threading.Lock()


def _forget_analyzer(code: str) -> None:
    with _analyzers_lock:
        _analyzers.pop(code, None)


on_pack_registered(_forget_analyzer)


def get_analyzer(language: str = 'es') -> MorphologicalAnalyzer:
    """Возвращает общий анализатор для языка (создаётся один раз)."""
    key = (language or '').strip().lower()
    analyzer = _analyzers.get(key)
    if analyzer is None:
        with _analyzers_lock:
            analyzer = _analyzers.get(key)
            if analyzer is None:
                analyzer = MorphologicalAnalyzer(key)
                _analyzers[key] = analyzer
    return analyzer


def analyze_line(text: str, line_index: int = 0, language: str = 'es') -> AnalyzedLine:
    """Анализирует одну строку (см. MorphologicalAnalyzer.analyze_line)."""
    return get_analyzer(language).analyze_line(text, line_index)
