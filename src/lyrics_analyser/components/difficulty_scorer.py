"""
Оценка сложности песни по шкале 1-10.

Считает сырые метрики (объём, лексическое разнообразие, частотность слов,
плотность глаголов, сложность времён, идиомы, пунктуацию), нормирует их
относительно базовой статистики корпуса (z-оценка), взвешивает и
отображает сумму через сигмоиду в диапазон [1, 10].

Базовая статистика (BaselineStats) неизменяема и передаётся оценщику
явно; процессный «по умолчанию» заменяется целиком под блокировкой.
"""

import math
import re
import threading
import logging
from typing import Dict, Iterable, Optional, Sequence

import numpy as np

from ..exceptions import EmptyInputError
from ..interfaces.analysis import (
    AnalyzedLine,
    BASELINE_METRICS,
    BaselineStats,
    DifficultyMetrics,
    DifficultyScorerInterface,
    MIN_STD,
    MetricBaseline,
    ScoringResult,
)
from ..languages.pack import LanguagePack
from ..languages.registry import get_language_pack
from .frequency_table import FrequencyTable

logger = logging.getLogger(__name__)

# Веса нормированных метрик в итоговой z-сумме
METRIC_WEIGHTS: Dict[str, float] = {
    'word_count': 0.12,
    'type_token_ratio': 0.18,
    'avg_word_freq_zipf': 0.22,
    'verb_density': 0.18,
    'tense_weights': 0.22,
    'idiom_count': 0.04,
    'punct_complexity': 0.04,
}

# Частота «сверхчастотного» слова: редкость = MAX_ZIPF - zipf
MAX_ZIPF = 7.0
MAX_PUNCT_COMPLEXITY = 2.0
MIN_LEVEL = 1
MAX_LEVEL = 10

# Веса знаков препинания для сложности пунктуации
PUNCT_WEIGHTS = (
    (re.compile(r','), 1.0),
    (re.compile(r';'), 1.5),
    (re.compile(r'[¿?]'), 0.8),
    (re.compile(r'[¡!]'), 0.8),
    (re.compile(r':'), 1.2),
)
SENTENCE_SPLIT = re.compile(r'[.!?]+')


def _sigmoid(x: float) -> float:
    # Две ветки, чтобы exp() не переполнялся при больших |x|
    if x >= 0:
        return 1.0 / (1.0 + math.exp(-x))
    e = math.exp(x)
    return e / (1.0 + e)


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def _norm(value: float, baseline: MetricBaseline) -> float:
    return (value - baseline.mean) / baseline.std


class DifficultyScorer(DifficultyScorerInterface):
    """Оценщик сложности песни для одного языка."""

    def __init__(self, language: str = 'es', baseline: Optional[BaselineStats] = None,
                 pack: Optional[LanguagePack] = None,
                 frequency_table: Optional[FrequencyTable] = None):
        """
        Args:
            language: Код языка (определяет веса времён, идиомы и частоты)
            baseline: Базовая статистика; None - текущая статистика по умолчанию
                на момент каждого вызова
            pack: Готовый языковой пакет
            frequency_table: Частотная таблица

        Raises:
            UnsupportedLanguageError: если пакета для языка нет
        """
        self.pack = pack or get_language_pack(language)
        self.language = self.pack.code
        self.baseline = baseline
        self.frequency_table = frequency_table or FrequencyTable()
        # Идиомы: целые слова, любые пробельные промежутки, без учёта регистра
        self._idiom_patterns = [
            re.compile(r'(?<!\w)' + r'\s+'.join(re.escape(part) for part in idiom.split()) + r'(?!\w)',
                       re.IGNORECASE)
            for idiom in self.pack.idioms if idiom.strip()
        ]

    def compute_difficulty(self, lines: Sequence[AnalyzedLine]) -> ScoringResult:
        """
        Считает метрики и итоговую оценку сложности.

        Args:
            lines: Проанализированные строки песни

        Returns:
            ScoringResult с метриками и оценкой в диапазоне [1, 10]

        Raises:
            EmptyInputError: если строк нет
        """
        if not lines:
            raise EmptyInputError()

        metrics = self.compute_metrics(lines)
        baseline = self.baseline or get_default_baseline()
        score = self.score_metrics(metrics, baseline)
        logger.debug(f"[{self.language}] оценка сложности {score:.2f} ({len(lines)} строк, {metrics.word_count} слов)")
        return ScoringResult(metrics=metrics, difficulty_score=score)

    def compute_metrics(self, lines: Sequence[AnalyzedLine]) -> DifficultyMetrics:
        """Считает сырые метрики без нормирования."""
        if not lines:
            raise EmptyInputError()

        tokens = [token for line in lines for token in line.tokens]
        full_text = ' '.join(line.raw_text for line in lines)
        idiom_count = self.count_idioms(full_text)
        punct_complexity = self.punct_complexity(full_text)

        word_count = len(tokens)
        if word_count == 0:
            logger.warning(f"[{self.language}] в строках песни нет ни одного слова, метрики нейтральные")
            # Частотность на уровне среднего по базовой статистике: редкость не влияет на оценку
            baseline = self.baseline or get_default_baseline()
            return DifficultyMetrics(
                word_count=0,
                unique_word_count=0,
                type_token_ratio=1.0,
                avg_word_freq_zipf=MAX_ZIPF - baseline.avg_word_freq_zipf.mean,
                verb_density=0.0,
                tense_weights=0.0,
                idiom_count=idiom_count,
                punct_complexity=punct_complexity,
            )

        unique_word_count = len({token.lemma.lower() for token in tokens})
        frequencies = [self.frequency_table.estimate_zipf(token.text, self.language) for token in tokens]
        verbs = [token for token in tokens if token.is_verb]

        return DifficultyMetrics(
            word_count=word_count,
            unique_word_count=unique_word_count,
            type_token_ratio=unique_word_count / word_count,
            avg_word_freq_zipf=sum(frequencies) / len(frequencies),
            verb_density=len(verbs) / word_count,
            tense_weights=sum(self.tense_weight(token.tense) for token in verbs),
            idiom_count=idiom_count,
            punct_complexity=punct_complexity,
        )

    def tense_weight(self, tense: Optional[str]) -> float:
        """Вес одного глагола: по таблице времён пакета."""
        if not tense:
            return self.pack.untagged_verb_weight
        return self.pack.tense_weights.get(tense, self.pack.unknown_tense_weight)

    def count_idioms(self, text: str) -> int:
        """Количество вхождений идиом пакета в текст."""
        return sum(len(pattern.findall(text)) for pattern in self._idiom_patterns)

    @staticmethod
    def punct_complexity(text: str) -> float:
        """
        Сложность пунктуации: взвешенная плотность знаков на 100 символов
        плюс коэффициент вариации длины предложений, не больше 2.0.
        """
        if not text:
            return 0.0

        weighted = sum(len(pattern.findall(text)) * weight for pattern, weight in PUNCT_WEIGHTS)
        punctuation_score = weighted / len(text) * 100

        lengths = [len(s.split()) for s in SENTENCE_SPLIT.split(text) if s.strip()]
        variance_score = 0.0
        if lengths:
            mean = sum(lengths) / len(lengths)
            variance = sum((n - mean) ** 2 for n in lengths) / len(lengths)
            variance_score = math.sqrt(variance) / mean

        return min(punctuation_score + variance_score, MAX_PUNCT_COMPLEXITY)

    @staticmethod
    def score_metrics(metrics: DifficultyMetrics, baseline: BaselineStats) -> float:
        """Нормирует метрики, взвешивает и отображает в [1, 10]."""
        # Разнообразие и частотность переводятся в «трудность»: 1 - TTR и редкость
        adjusted = {
            'word_count': metrics.word_count,
            'type_token_ratio': 1 - metrics.type_token_ratio,
            'avg_word_freq_zipf': MAX_ZIPF - metrics.avg_word_freq_zipf,
            'verb_density': metrics.verb_density,
            'tense_weights': metrics.tense_weights,
            'idiom_count': metrics.idiom_count,
            'punct_complexity': metrics.punct_complexity,
        }
        z = sum(weight * _norm(adjusted[name], getattr(baseline, name))
                for name, weight in METRIC_WEIGHTS.items())
        return _clamp(1 + 9 * _sigmoid(z), MIN_LEVEL, MAX_LEVEL)


def compute_baselines(all_metrics: Iterable[DifficultyMetrics],
                      current: Optional[BaselineStats] = None) -> BaselineStats:
    """
    Считает базовую статистику по метрикам корпуса, не меняя процессную.

    Среднее и стандартное отклонение (по генеральной совокупности) каждой
    метрики; отклонение не меньше 0.001. Пустой корпус не меняет статистику.

    Args:
        all_metrics: Метрики песен корпуса
        current: Статистика, возвращаемая при пустом корпусе (по умолчанию - текущая)

    Returns:
        Новая BaselineStats (полная замена, без смешивания со старой)
    """
    metrics_list = list(all_metrics)
    if not metrics_list:
        logger.info("Пустой корпус: базовая статистика не изменилась")
        return current or get_default_baseline()

    values = {}
    for name in BASELINE_METRICS:
        column = np.array([float(getattr(m, name)) for m in metrics_list], dtype=float)
        values[name] = MetricBaseline(
            mean=float(column.mean()),
            std=max(float(column.std()), MIN_STD),
        )
    return BaselineStats(**values)


_default_baseline = BaselineStats.default()
_baseline_lock = threading.Lock()


def get_default_baseline() -> BaselineStats:
    """Текущая процессная базовая статистика."""
    return _default_baseline


def set_default_baseline(baseline: BaselineStats) -> None:
    """Заменяет процессную базовую статистику целиком."""
    global _default_baseline
    with _baseline_lock:
        _default_baseline = baseline
    logger.info("Базовая статистика по умолчанию заменена")


def reset_default_baseline() -> BaselineStats:
    """Возвращает статистику по умолчанию к встроенным значениям."""
    set_default_baseline(BaselineStats.default())
    return _default_baseline


def update_baselines(all_metrics: Iterable[DifficultyMetrics]) -> BaselineStats:
    """
    Пересчитывает статистику по корпусу и делает её статистикой по умолчанию.

    Полная замена; единственный писатель: пересчёт и замена выполняются
    под блокировкой. Пустой корпус ничего не меняет. Сохранение между
    перезапусками - забота вызывающего (см. ResultExporter.export_baselines).

    Returns:
        Действующая после вызова статистика по умолчанию
    """
    global _default_baseline
    metrics_list = list(all_metrics)
    with _baseline_lock:
        if metrics_list:
            _default_baseline = compute_baselines(metrics_list, _default_baseline)
            logger.info(f"Базовая статистика пересчитана по {len(metrics_list)} песням")
        return _default_baseline


def compute_difficulty(lines: Sequence[AnalyzedLine], baseline: Optional[BaselineStats] = None,
                       language: str = 'es') -> ScoringResult:
    """Оценка сложности песни (см. DifficultyScorer.compute_difficulty)."""
    return DifficultyScorer(language=language, baseline=baseline).compute_difficulty(lines)


def assign_level(difficulty_score: float) -> int:
    """
    Уровень 1-10 по оценке: округление половин вверх и ограничение диапазоном.

    Args:
        difficulty_score: Оценка сложности

    Returns:
        Целый уровень от 1 до 10
    """
    return int(_clamp(math.floor(difficulty_score + 0.5), MIN_LEVEL, MAX_LEVEL))


def level_distribution(scores: Iterable[float]) -> Dict[int, int]:
    """
    Распределение оценок по уровням.

    Returns:
        Словарь {уровень: количество} со всеми уровнями 1-10
    """
    distribution = {level: 0 for level in range(MIN_LEVEL, MAX_LEVEL + 1)}
    for score in scores:
        distribution[assign_level(score)] += 1
    return distribution
