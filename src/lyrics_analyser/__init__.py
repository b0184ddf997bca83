"""
Lyrics Analyser - уровень сложности и ключевая лексика текстов песен

Этот модуль предоставляет инструменты для:
- Морфологического разбора строк песен без обученных моделей
- Оценки сложности песни по шкале 1-10
- Ранжирования ключевой лексики с переводами
- Спряжения глаголов по языковым пакетам
- Экспорта результатов в Excel, CSV и JSON
"""

__version__ = "0.1.0"
__author__ = "Sergey"

from .exceptions import (
    LyricsAnalyserError,
    EmptyInputError,
    UnsupportedLanguageError,
    LanguagePackError,
)
from .components.morphology import analyze_line
from .components.conjugation import conjugations
from .components.difficulty_scorer import (
    compute_difficulty,
    update_baselines,
    assign_level,
    level_distribution,
)
from .components.vocabulary_ranker import extract_vocabulary
from .components.frequency_table import usefulness
from .languages import available_languages
from .text_processor import LyricsTextProcessor
from .song_analyzer import SongAnalyzer

__all__ = [
    "LyricsAnalyserError",
    "EmptyInputError",
    "UnsupportedLanguageError",
    "LanguagePackError",
    "analyze_line",
    "conjugations",
    "compute_difficulty",
    "update_baselines",
    "assign_level",
    "level_distribution",
    "extract_vocabulary",
    "usefulness",
    "available_languages",
    "LyricsTextProcessor",
    "SongAnalyzer",
]
