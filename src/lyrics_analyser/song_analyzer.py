"""
Анализ песни целиком: уровень сложности и ключевая лексика.

SongAnalyzer собирает компоненты (морфология, оценка сложности,
ранжирование лексики) в один вызов и хранит базовую статистику,
по которой нормируются метрики.
"""

import threading
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import pandas as pd

from .config import config
from .components.difficulty_scorer import (
    DifficultyScorer,
    compute_baselines,
    get_default_baseline,
    level_distribution,
    update_baselines,
)
from .components.exporter import ResultExporter
from .components.frequency_table import FrequencyTable
from .components.morphology import MorphologicalAnalyzer
from .components.vocabulary_ranker import VocabularyRanker
from .interfaces.analysis import AlignerInterface, BaselineStats, ExternalLookup, SongReport
from .languages.registry import get_language_pack

logger = logging.getLogger(__name__)

Song = Union[Sequence[str], Mapping[str, Any]]


class SongAnalyzer:
    """Фасад анализа песен одного языка"""

    def __init__(self, language: Optional[str] = None,
                 baseline: Optional[BaselineStats] = None,
                 aligner: Optional[AlignerInterface] = None,
                 vocabulary_limit: Optional[int] = None,
                 baseline_file: Optional[Union[str, Path]] = None):
        """
        Инициализация анализатора песен

        Args:
            language: Код языка (по умолчанию из config.yaml)
            baseline: Своя базовая статистика; None - статистика по умолчанию
                (или загруженная из scoring.baseline_file)
            aligner: Выравниватель переводов для лексики
            vocabulary_limit: Размер списка лексики (по умолчанию из config.yaml)
            baseline_file: YAML с базовой статистикой (перекрывает config.yaml)

        Raises:
            UnsupportedLanguageError: если пакета для языка нет
        """
        self.pack = get_language_pack(language or config.get_default_language())
        self.language = self.pack.code
        self.vocabulary_limit = vocabulary_limit if vocabulary_limit is not None else config.get_vocabulary_limit()

        if baseline is None:
            baseline_file = baseline_file or config.get_baseline_file()
            if baseline_file:
                baseline = ResultExporter.load_baselines(baseline_file)

        self._lock = threading.Lock()
        frequency_table = FrequencyTable()
        self.analyzer = MorphologicalAnalyzer(pack=self.pack)
        self.scorer = DifficultyScorer(pack=self.pack, baseline=baseline, frequency_table=frequency_table)
        self.ranker = VocabularyRanker(
            pack=self.pack,
            aligner=aligner,
            frequency_table=frequency_table,
            analyzer=self.analyzer,
            default_usefulness=config.get_default_usefulness(),
            min_word_length=config.get_min_word_length(),
        )
        logger.info(f"SongAnalyzer готов: язык={self.language}, лексика={self.vocabulary_limit} слов")

    @property
    def baseline(self) -> BaselineStats:
        """Статистика, по которой сейчас нормируются метрики."""
        return self.scorer.baseline or get_default_baseline()

    def analyze_song(self, lines: Sequence[str], translations: Optional[Sequence[str]] = None,
                     title: Optional[str] = None,
                     external_lookup: Optional[ExternalLookup] = None) -> SongReport:
        """
        Анализирует одну песню

        Args:
            lines: Строки текста песни
            translations: Параллельные строки перевода
            title: Название песни для отчётов
            external_lookup: Внешний словарь слово -> перевод

        Returns:
            SongReport с оценкой сложности и лексикой

        Raises:
            EmptyInputError: если строк нет
        """
        analyzed = self.analyzer.analyze_lines(lines)
        result = self.scorer.compute_difficulty(analyzed)
        vocabulary = self.ranker.extract_vocabulary(
            lines, translations, limit=self.vocabulary_limit, external_lookup=external_lookup,
        )
        report = SongReport(
            language=self.language,
            result=result,
            vocabulary=vocabulary,
            line_count=len(lines),
            title=title,
        )
        logger.info(f"Песня '{title or '-'}': уровень {report.level} (оценка {result.difficulty_score:.2f})")
        return report

    def analyze_songs(self, songs: Iterable[Song]) -> List[SongReport]:
        """
        Анализирует набор песен

        Песня задаётся списком строк или словарём с ключами
        lines, translations, title. Песни без строк пропускаются.
        """
        reports = []
        for index, song in enumerate(songs, 1):
            if isinstance(song, Mapping):
                lines = song.get('lines') or []
                translations = song.get('translations')
                title = song.get('title')
            else:
                lines, translations, title = song, None, None

            if not lines:
                logger.warning(f"Песня #{index} без строк пропущена")
                continue
            reports.append(self.analyze_song(lines, translations, title))
        logger.info(f"Проанализировано песен: {len(reports)}")
        return reports

    def recalibrate(self, reports: Sequence[SongReport]) -> BaselineStats:
        """
        Пересчитывает базовую статистику по отчётам корпуса

        Если анализатор работает со статистикой по умолчанию, заменяется
        процессная статистика; своя статистика заменяется только у этого
        анализатора. Пустой корпус ничего не меняет.

        Returns:
            Статистика, действующая после пересчёта
        """
        all_metrics = [report.result.metrics for report in reports]
        with self._lock:
            if self.scorer.baseline is None:
                return update_baselines(all_metrics)
            self.scorer.baseline = compute_baselines(all_metrics, self.scorer.baseline)
            logger.info(f"Собственная базовая статистика пересчитана по {len(all_metrics)} песням")
            return self.scorer.baseline

    @staticmethod
    def metrics_frame(reports: Sequence[SongReport]) -> pd.DataFrame:
        """Таблица метрик по песням (строка на песню)."""
        return ResultExporter.reports_frame(reports)

    @staticmethod
    def level_distribution(reports: Iterable[SongReport]) -> Dict[int, int]:
        """Количество песен на каждом уровне 1-10."""
        return level_distribution(report.result.difficulty_score for report in reports)
