"""
Генератор спряжений глаголов.

Сначала ищет глагол в курируемой таблице неправильных глаголов пакета,
иначе определяет класс спряжения по окончанию инфинитива и склеивает
основу с окончаниями правильной парадигмы.

Ограничение: чередования в основе (pensar -> pienso) вне курируемой
таблицы не обрабатываются, для таких глаголов формы будут «правильными».
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Tuple
import logging
import unicodedata

from ..languages.pack import LanguagePack, Paradigm
from ..languages.registry import get_language_pack, on_pack_registered

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConjugationTable:
    """Таблица спряжения: время -> лицо -> форма."""
    lemma: str
    forms: Mapping[str, Mapping[str, str]]
    irregular: bool = False

    def __getitem__(self, tense: str) -> Mapping[str, str]:
        return self.forms[tense]

    def __contains__(self, tense: object) -> bool:
        return tense in self.forms

    def __iter__(self) -> Iterator[str]:
        return iter(self.forms)

    @property
    def tenses(self) -> Tuple[str, ...]:
        return tuple(self.forms)

    def items(self) -> Iterator[Tuple[str, str, str]]:
        """Перебирает тройки (время, лицо, форма) в порядке парадигмы."""
        for tense, persons in self.forms.items():
            for person, form in persons.items():
                yield tense, person, form

    def to_dict(self) -> Dict[str, Dict[str, str]]:
        return {tense: dict(persons) for tense, persons in self.forms.items()}


class ConjugationGenerator:
    """Генератор спряжений для одного языка."""

    def __init__(self, language: str = 'es', pack: Optional[LanguagePack] = None):
        """
        Args:
            language: Код языка
            pack: Готовый языковой пакет (если не задан, берётся из реестра)
        """
        self.pack = pack or get_language_pack(language)
        self.language = self.pack.code
        self._form_index = self._build_form_index()
        logger.debug(f"[{self.language}] индекс глагольных форм: {len(self._form_index)} форм")

    def conjugations(self, lemma: str) -> Optional[ConjugationTable]:
        """
        Возвращает полную таблицу спряжения (7 времён x 6 лиц).

        Args:
            lemma: Инфинитив глагола

        Returns:
            ConjugationTable или None, если слово не похоже на инфинитив
        """
        key = self._prepare(lemma)
        if not key:
            return None

        irregular = self.pack.irregular_verbs.get(key)
        if irregular is not None:
            forms = {
                tense: MappingProxyType(dict(zip(self.pack.persons, irregular[tense])))
                for tense in self.pack.tenses
            }
            return ConjugationTable(lemma=key, forms=MappingProxyType(forms), irregular=True)

        ending = self.pack.verb_ending(key)
        if ending is None:
            return None

        paradigm = self.pack.paradigms[ending]
        stem = key[:-len(ending)]
        forms = {
            tense: MappingProxyType(self._splice(key, stem, paradigm[tense]))
            for tense in self.pack.tenses
        }
        return ConjugationTable(lemma=key, forms=MappingProxyType(forms))

    def lookup_form(self, form: str) -> List[Tuple[str, str]]:
        """
        Обратный поиск: какие (инфинитив, время) дают эту форму.

        Учитываются неправильные глаголы и глаголы лексикона пакета.

        Args:
            form: Глагольная форма

        Returns:
            Список пар (инфинитив, время) в порядке парадигмы, пустой если форма неизвестна
        """
        return list(self._form_index.get(self._prepare(form), ()))

    def is_known_form(self, form: str) -> bool:
        """Проверяет, что форма есть в индексе (как финитная форма или инфинитив лексикона)."""
        key = self._prepare(form)
        return key in self._form_index or key in self.pack.verbs

    def _splice(self, infinitive: str, stem: str, paradigm: Paradigm) -> Dict[str, str]:
        if paradigm.base == 'infinitive':
            base = infinitive[:len(infinitive) - paradigm.trim] if paradigm.trim else infinitive
        else:
            base = stem
        return {person: base + suffix for person, suffix in zip(self.pack.persons, paradigm.suffixes)}

    def _build_form_index(self) -> Mapping[str, Tuple[Tuple[str, str], ...]]:
        index: Dict[str, List[Tuple[str, str]]] = {}
        for lemma in sorted(self.pack.verbs):
            table = self.conjugations(lemma)
            if table is None:
                logger.warning(f"[{self.language}] глагол лексикона без парадигмы: {lemma}")
                continue
            for tense, _person, form in table.items():
                entries = index.setdefault(form, [])
                if (lemma, tense) not in entries:
                    entries.append((lemma, tense))
        return MappingProxyType({form: tuple(self._order(entries)) for form, entries in index.items()})

    def _order(self, entries: List[Tuple[str, str]]) -> List[Tuple[str, str]]:
        # Неправильные глаголы первыми, внутри - порядок времён парадигмы
        tense_rank = {tense: i for i, tense in enumerate(self.pack.tenses)}
        return sorted(entries, key=lambda e: (e[0] not in self.pack.irregular_verbs, tense_rank.get(e[1], 99)))

    @staticmethod
    def _prepare(word: str) -> str:
        return unicodedata.normalize('NFC', (word or '').strip().lower())


_generators: Dict[str, ConjugationGenerator] = {}
on_pack_registered(lambda code: _generators.pop(code, None))


def get_conjugation_generator(language: str = 'es') -> ConjugationGenerator:
    """Возвращает кэшированный генератор для языка."""
    key = (language or '').strip().lower()
    generator = _generators.get(key)
    if generator is None:
        generator = ConjugationGenerator(key)
        _generators[key] = generator
    return generator


def conjugations(lemma: str, language: str = 'es') -> Optional[ConjugationTable]:
    """Таблица спряжения глагола (см. ConjugationGenerator.conjugations)."""
    return get_conjugation_generator(language).conjugations(lemma)
