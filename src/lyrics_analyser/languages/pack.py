"""
Языковой пакет: неизменяемый набор правил и таблиц для одного языка.

Все четыре компонента движка (частотная таблица, морфология, оценка
сложности, ранжирование лексики) работают только через LanguagePack,
поэтому добавление языка сводится к новому YAML-файлу с данными.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple
import logging

from ..exceptions import LanguagePackError
from ..interfaces.analysis import POS_TAGS

logger = logging.getLogger(__name__)

# Поддерживаемые виды правил определения части речи
RULE_KINDS = ('words', 'suffixes', 'known_verb_form', 'numeric')


@dataclass(frozen=True)
class PosRule:
    """Правило (предикат, тег) для определения части речи."""
    tag: str
    kind: str
    values: Tuple[str, ...] = ()
    min_length: int = 1

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> 'PosRule':
        tag = str(raw.get('tag', '')).upper()
        if tag not in POS_TAGS:
            raise LanguagePackError(f"Неизвестная часть речи в правиле: {raw!r}")
        min_length = int(raw.get('min_length', 1))
        if 'words' in raw:
            words = tuple(sorted({str(w).lower() for w in raw['words']}))
            return cls(tag=tag, kind='words', values=words, min_length=min_length)
        if 'suffixes' in raw:
            # Длинные суффиксы проверяем первыми
            suffixes = tuple(sorted({str(s).lower() for s in raw['suffixes']}, key=len, reverse=True))
            return cls(tag=tag, kind='suffixes', values=suffixes, min_length=min_length)
        if raw.get('known_verb_form'):
            return cls(tag=tag, kind='known_verb_form', min_length=min_length)
        if raw.get('numeric'):
            return cls(tag=tag, kind='numeric', min_length=min_length)
        raise LanguagePackError(f"Правило без предиката (ожидается одно из {RULE_KINDS}): {raw!r}")


@dataclass(frozen=True)
class TenseRule:
    """Таблица суффиксов одного времени."""
    tense: str
    suffixes: Tuple[str, ...]

    def matches(self, word: str) -> bool:
        return any(word.endswith(s) for s in self.suffixes)


@dataclass(frozen=True)
class LemmaRule:
    """Замена словоизменительного суффикса на окончание инфинитива."""
    suffix: str
    endings: Tuple[str, ...]
    min_stem: int = 2


@dataclass(frozen=True)
class Paradigm:
    """Правильная парадигма одного времени: основа + 6 окончаний."""
    base: str  # 'stem' или 'infinitive'
    suffixes: Tuple[str, ...]
    trim: int = 0


@dataclass(frozen=True)
class LanguagePack:
    """Неизменяемые данные одного языка."""
    code: str
    name: str
    native_name: str
    version: str
    persons: Tuple[str, ...]
    tenses: Tuple[str, ...]
    stop_words: FrozenSet[str]
    frequencies: Mapping[str, float]
    pos_rules: Tuple[PosRule, ...]
    tense_rules: Tuple[TenseRule, ...]
    tense_weights: Mapping[str, float]
    idioms: Tuple[str, ...]
    irregular_verbs: Mapping[str, Mapping[str, Tuple[str, ...]]]
    paradigms: Mapping[str, Mapping[str, Paradigm]]
    verbs: FrozenSet[str]
    default_pos: str = 'NOUN'
    untagged_verb_weight: float = 0.5
    unknown_tense_weight: float = 1.0
    lemma_rules: Tuple[LemmaRule, ...] = ()
    plural_suffixes: Tuple[str, ...] = ()
    plural_stem_endings: Optional[str] = None
    elisions: Tuple[str, ...] = field(default=())
    # Слова с апострофом, которые не разбиваются как элизия (aujourd'hui)
    apostrophe_words: FrozenSet[str] = field(default=frozenset())

    def verb_ending(self, lemma: str) -> Optional[str]:
        """Возвращает класс спряжения инфинитива ('ar', 'er', ...) или None."""
        for ending in sorted(self.paradigms, key=len, reverse=True):
            if lemma.endswith(ending) and len(lemma) > len(ending):
                return ending
        return None

    def strip_elision(self, word: str) -> str:
        """Отрезает элидированный артикль/местоимение (l'amour -> amour)."""
        for prefix in self.elisions:
            if word.startswith(prefix) and len(word) > len(prefix):
                return word[len(prefix):]
        return word

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> 'LanguagePack':
        """
        Строит пакет из словаря (содержимого YAML-файла) с валидацией.

        Raises:
            LanguagePackError: если обязательные разделы отсутствуют или
                таблицы не согласованы между собой.
        """
        if not isinstance(raw, dict):
            raise LanguagePackError("Языковой пакет должен быть словарём")
        required = ('code', 'persons', 'tenses', 'stop_words', 'frequencies', 'pos_rules')
        missing = [key for key in required if key not in raw]
        if missing:
            raise LanguagePackError(f"В языковом пакете нет разделов: {', '.join(missing)}")

        code = str(raw['code']).lower()
        persons = tuple(str(p) for p in raw['persons'])
        tenses = tuple(str(t) for t in raw['tenses'])

        paradigms: Dict[str, Mapping[str, Paradigm]] = {}
        for ending, table in (raw.get('paradigms') or {}).items():
            by_tense: Dict[str, Paradigm] = {}
            for tense in tenses:
                entry = (table or {}).get(tense)
                if entry is None:
                    raise LanguagePackError(f"[{code}] парадигма -{ending}: нет времени '{tense}'")
                suffixes = tuple('' if s is None else str(s) for s in entry['suffixes'])
                if len(suffixes) != len(persons):
                    raise LanguagePackError(
                        f"[{code}] парадигма -{ending}/{tense}: {len(suffixes)} окончаний вместо {len(persons)}"
                    )
                base = entry.get('base', 'stem')
                if base not in ('stem', 'infinitive'):
                    raise LanguagePackError(f"[{code}] парадигма -{ending}/{tense}: неизвестная основа '{base}'")
                by_tense[tense] = Paradigm(base=base, suffixes=suffixes, trim=int(entry.get('trim', 0)))
            paradigms[str(ending)] = MappingProxyType(by_tense)

        irregular: Dict[str, Mapping[str, Tuple[str, ...]]] = {}
        for lemma, table in (raw.get('irregular_verbs') or {}).items():
            by_tense = {}
            for tense in tenses:
                forms = (table or {}).get(tense)
                if forms is None or len(forms) != len(persons):
                    raise LanguagePackError(f"[{code}] неправильный глагол '{lemma}': неполное время '{tense}'")
                by_tense[tense] = tuple(str(f) for f in forms)
            irregular[str(lemma)] = MappingProxyType(by_tense)

        tense_rules = tuple(
            TenseRule(tense=str(item['tense']), suffixes=tuple(str(s) for s in item['suffixes']))
            for item in (raw.get('tense_rules') or [])
        )
        lemma_rules = tuple(
            LemmaRule(
                suffix=str(item['suffix']),
                endings=tuple(str(e) for e in item['endings']),
                min_stem=int(item.get('min_stem', 2)),
            )
            for item in (raw.get('lemma_rules') or [])
        )
        frequencies = {str(w).lower(): float(z) for w, z in (raw.get('frequencies') or {}).items()}
        verbs = frozenset(str(v).lower() for v in (raw.get('verbs') or [])) | frozenset(irregular)

        default_pos = str(raw.get('default_pos', 'NOUN')).upper()
        if default_pos not in POS_TAGS:
            raise LanguagePackError(f"[{code}] неизвестная часть речи по умолчанию: {default_pos}")

        pack = cls(
            code=code,
            name=str(raw.get('name', code)),
            native_name=str(raw.get('native_name', raw.get('name', code))),
            version=str(raw.get('version', '0')),
            persons=persons,
            tenses=tenses,
            stop_words=frozenset(str(w).lower() for w in raw['stop_words']),
            frequencies=MappingProxyType(frequencies),
            pos_rules=tuple(PosRule.from_dict(r) for r in raw['pos_rules']),
            tense_rules=tense_rules,
            tense_weights=MappingProxyType({str(k): float(v) for k, v in (raw.get('tense_weights') or {}).items()}),
            idioms=tuple(str(i).lower() for i in (raw.get('idioms') or [])),
            irregular_verbs=MappingProxyType(irregular),
            paradigms=MappingProxyType(paradigms),
            verbs=verbs,
            default_pos=default_pos,
            untagged_verb_weight=float(raw.get('untagged_verb_weight', 0.5)),
            unknown_tense_weight=float(raw.get('unknown_tense_weight', 1.0)),
            lemma_rules=lemma_rules,
            plural_suffixes=tuple(str(s) for s in (raw.get('plural_suffixes') or [])),
            plural_stem_endings=raw.get('plural_stem_endings'),
            elisions=tuple(str(e) for e in (raw.get('elisions') or [])),
            apostrophe_words=frozenset(str(w).lower() for w in (raw.get('apostrophe_words') or [])),
        )
        logger.debug(
            f"Языковой пакет '{code}' v{pack.version}: {len(pack.frequencies)} частот, "
            f"{len(pack.pos_rules)} правил POS, {len(pack.irregular_verbs)} неправильных глаголов"
        )
        return pack
