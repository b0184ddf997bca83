"""
Компоненты для анализа текстов песен.

Каждый компонент отвечает за одну конкретную задачу:
- TokenProcessor - токенизация строк
- WordNormalizer - нормализация слов
- FrequencyTable - частоты Zipf и полезность слов
- ConjugationGenerator - спряжение глаголов
- MorphologicalAnalyzer - часть речи, лемма и время
- DifficultyScorer - оценка сложности
- VocabularyRanker - ранжирование лексики
- ResultExporter - экспорт результатов
"""

from .tokenizer import TokenProcessor
from .normalizer import WordNormalizer
from .frequency_table import FrequencyTable
from .conjugation import ConjugationGenerator, ConjugationTable
from .morphology import MorphologicalAnalyzer
from .difficulty_scorer import DifficultyScorer
from .vocabulary_ranker import VocabularyRanker, PositionalAligner
from .exporter import ResultExporter

__all__ = [
    'TokenProcessor',
    'WordNormalizer',
    'FrequencyTable',
    'ConjugationGenerator',
    'ConjugationTable',
    'MorphologicalAnalyzer',
    'DifficultyScorer',
    'VocabularyRanker',
    'PositionalAligner',
    'ResultExporter',
]
