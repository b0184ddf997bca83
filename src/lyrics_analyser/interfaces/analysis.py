"""
Структуры данных и абстрактные интерфейсы для компонентов анализа текстов песен.

Определяет контракты, которые реализуют компоненты движка, обеспечивая
единообразный API и возможность замены реализаций (например, выравнивателя
переводов).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, asdict, fields
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union, Any
from pathlib import Path


# Допустимые части речи (упрощённый набор Universal Dependencies)
POS_TAGS = ('NOUN', 'VERB', 'ADJ', 'ADV', 'DET', 'PRON', 'ADP', 'CONJ', 'INTJ', 'OTHER')

# Нижняя граница стандартного отклонения в базовой статистике
MIN_STD = 0.001


@dataclass(frozen=True)
class Token:
    """Токен строки с морфологической разметкой."""
    text: str
    lemma: str
    pos: str
    is_verb: bool
    tense: Optional[str] = None
    # Постоянная грубая оценка уверенности эвристик
    confidence: float = 0.8


@dataclass(frozen=True)
class AnalyzedLine:
    """Результат морфологического анализа одной строки текста."""
    raw_text: str
    sentence_index: int
    tokens: Tuple[Token, ...] = ()


@dataclass(frozen=True)
class DifficultyMetrics:
    """Сырые метрики сложности песни."""
    word_count: int
    unique_word_count: int
    type_token_ratio: float
    avg_word_freq_zipf: float
    verb_density: float
    tense_weights: float
    idiom_count: int
    punct_complexity: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DifficultyMetrics':
        """Восстанавливает метрики из словаря (лишние ключи игнорируются)."""
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in names})


@dataclass(frozen=True)
class MetricBaseline:
    """Опорные среднее и стандартное отклонение одной метрики.

    Отклонение не бывает меньше MIN_STD, чтобы z-нормирование всегда было определено.
    """
    mean: float
    std: float

    def __post_init__(self):
        object.__setattr__(self, 'std', max(float(self.std), MIN_STD))


# Метрики, для которых ведётся базовая статистика
BASELINE_METRICS = (
    'word_count',
    'type_token_ratio',
    'avg_word_freq_zipf',
    'verb_density',
    'tense_weights',
    'idiom_count',
    'punct_complexity',
)


@dataclass(frozen=True)
class BaselineStats:
    """
    Базовая статистика корпуса для z-нормализации метрик песни.

    Объект неизменяемый: пересчёт (update_baselines) всегда создаёт новый
    экземпляр, поэтому его безопасно разделять между потоками.
    """
    word_count: MetricBaseline = MetricBaseline(80.0, 30.0)
    type_token_ratio: MetricBaseline = MetricBaseline(0.7, 0.15)
    avg_word_freq_zipf: MetricBaseline = MetricBaseline(4.0, 1.0)
    verb_density: MetricBaseline = MetricBaseline(0.15, 0.05)
    tense_weights: MetricBaseline = MetricBaseline(0.8, 0.3)
    idiom_count: MetricBaseline = MetricBaseline(1.0, 1.0)
    punct_complexity: MetricBaseline = MetricBaseline(0.2, 0.1)

    @classmethod
    def default(cls) -> 'BaselineStats':
        """Встроенные значения по умолчанию."""
        return cls()

    def to_dict(self) -> Dict[str, Dict[str, float]]:
        return {name: {'mean': getattr(self, name).mean, 'std': getattr(self, name).std}
                for name in BASELINE_METRICS}

    @classmethod
    def from_dict(cls, data: Dict[str, Dict[str, float]]) -> 'BaselineStats':
        """
        Создаёт статистику из словаря {метрика: {mean, std}}.

        Отсутствующие метрики берутся из значений по умолчанию.
        """
        defaults = cls()
        values = {}
        for name in BASELINE_METRICS:
            item = (data or {}).get(name)
            if item is None:
                values[name] = getattr(defaults, name)
            else:
                values[name] = MetricBaseline(float(item['mean']), float(item['std']))
        return cls(**values)


@dataclass(frozen=True)
class ScoringResult:
    """Результат оценки сложности песни."""
    metrics: DifficultyMetrics
    difficulty_score: float

    @property
    def level(self) -> int:
        """Уровень 1-10 (округление оценки)."""
        # Локальный импорт, чтобы интерфейсы не зависели от реализации
        from ..components.difficulty_scorer import assign_level
        return assign_level(self.difficulty_score)


@dataclass
class VocabWord:
    """Слово, рекомендованное для изучения."""
    word: str
    translation: str
    count: int
    part_of_speech: str
    score: float


@dataclass
class SongReport:
    """Сводный отчёт по песне: сложность и ключевая лексика."""
    language: str
    result: ScoringResult
    vocabulary: List[VocabWord] = field(default_factory=list)
    line_count: int = 0
    title: Optional[str] = None

    @property
    def level(self) -> int:
        return self.result.level


# Внешний словарь: слово -> перевод (или None, если перевода нет)
ExternalLookup = Callable[[str], Optional[str]]


class TokenProcessorInterface(ABC):
    """Интерфейс для токенизации текста."""

    @abstractmethod
    def tokenize(self, text: str) -> List[str]:
        """Разбивает текст на токены."""
        pass

    @abstractmethod
    def is_valid_token(self, token: str) -> bool:
        """Проверяет валидность токена."""
        pass


class WordNormalizerInterface(ABC):
    """Интерфейс для нормализации слов."""

    @abstractmethod
    def normalize(self, word: str) -> str:
        """Нормализует слово для сравнения."""
        pass

    @abstractmethod
    def normalize_batch(self, words: List[str]) -> List[str]:
        """Нормализует список слов."""
        pass


class MorphologicalAnalyzerInterface(ABC):
    """Интерфейс морфологического анализатора строк."""

    @abstractmethod
    def analyze_line(self, text: str, line_index: int = 0) -> AnalyzedLine:
        """Токенизирует строку и размечает токены."""
        pass

    @abstractmethod
    def tag(self, word: str) -> str:
        """Определяет часть речи отдельного слова."""
        pass


class DifficultyScorerInterface(ABC):
    """Интерфейс оценщика сложности."""

    @abstractmethod
    def compute_difficulty(self, lines: Sequence[AnalyzedLine]) -> ScoringResult:
        """Считает метрики и итоговую оценку 1-10."""
        pass


class AlignerInterface(ABC):
    """Интерфейс выравнивания слов оригинала и перевода."""

    @abstractmethod
    def align(self, word_index: int, source_words: Sequence[str],
              translation_words: Sequence[str]) -> str:
        """Возвращает слово перевода, соответствующее слову оригинала (или '')."""
        pass


class VocabularyRankerInterface(ABC):
    """Интерфейс ранжирования лексики."""

    @abstractmethod
    def extract_vocabulary(self, lyric_lines: Sequence[str],
                           translation_lines: Optional[Sequence[str]] = None,
                           limit: int = 15,
                           external_lookup: Optional[ExternalLookup] = None) -> List[VocabWord]:
        """Возвращает отсортированный список ключевых слов песни."""
        pass


class ResultExporterInterface(ABC):
    """Интерфейс для экспорта результатов."""

    @abstractmethod
    def export_to_excel(self, reports: Sequence[SongReport], filepath: Union[str, Path]) -> Path:
        """Экспортирует отчёты в Excel."""
        pass

    @abstractmethod
    def export_to_csv(self, words: Sequence[VocabWord], filepath: Union[str, Path]) -> Path:
        """Экспортирует лексику в CSV для Anki."""
        pass

    @abstractmethod
    def export_to_json(self, report: SongReport, filepath: Union[str, Path]) -> Path:
        """Экспортирует отчёт в JSON."""
        pass
