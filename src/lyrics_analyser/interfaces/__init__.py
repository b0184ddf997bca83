"""
Интерфейсы и структуры данных для компонентов анализа текстов песен.

Определяет абстрактные базовые классы для всех компонентов,
обеспечивая единообразный API и возможность замены реализаций.
"""

from .analysis import (
    POS_TAGS,
    MIN_STD,
    BASELINE_METRICS,
    Token,
    AnalyzedLine,
    DifficultyMetrics,
    MetricBaseline,
    BaselineStats,
    ScoringResult,
    VocabWord,
    SongReport,
    ExternalLookup,
    TokenProcessorInterface,
    WordNormalizerInterface,
    MorphologicalAnalyzerInterface,
    DifficultyScorerInterface,
    AlignerInterface,
    VocabularyRankerInterface,
    ResultExporterInterface,
)

__all__ = [
    'POS_TAGS',
    'MIN_STD',
    'BASELINE_METRICS',
    'Token',
    'AnalyzedLine',
    'DifficultyMetrics',
    'MetricBaseline',
    'BaselineStats',
    'ScoringResult',
    'VocabWord',
    'SongReport',
    'ExternalLookup',
    'TokenProcessorInterface',
    'WordNormalizerInterface',
    'MorphologicalAnalyzerInterface',
    'DifficultyScorerInterface',
    'AlignerInterface',
    'VocabularyRankerInterface',
    'ResultExporterInterface',
]
