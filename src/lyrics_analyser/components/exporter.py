"""
Компонент для экспорта результатов анализа песен.

Отвечает за экспорт результатов в различные форматы:
Excel (сводка по песням и лексика), CSV для Anki, JSON,
а также за сохранение и загрузку базовой статистики в YAML.
"""

import csv
import json
from datetime import datetime
from pathlib import Path
from typing import Dict, Sequence, Union
import logging

import pandas as pd
import yaml

from ..interfaces.analysis import BaselineStats, ResultExporterInterface, SongReport, VocabWord
from .difficulty_scorer import level_distribution

logger = logging.getLogger(__name__)

VOCAB_COLUMNS = {
    'word': 'Слово',
    'translation': 'Перевод',
    'count': 'Вхождений',
    'part_of_speech': 'Часть речи',
    'score': 'Оценка',
}


class ResultExporter(ResultExporterInterface):
    """Экспортёр результатов анализа."""

    def __init__(self, output_dir: Union[str, Path] = "data/results",
                 main_sheet_name: str = "Песни"):
        """
        Инициализирует экспортёр.

        Args:
            output_dir: Папка для сохранения результатов (создаётся при первом экспорте)
            main_sheet_name: Имя основного листа Excel
        """
        self.output_dir = Path(output_dir)
        self.main_sheet_name = main_sheet_name

    @staticmethod
    def reports_frame(reports: Sequence[SongReport]) -> pd.DataFrame:
        """Таблица метрик: одна строка на песню."""
        rows = []
        for index, report in enumerate(reports, 1):
            row = {
                'Песня': report.title or f"#{index}",
                'Язык': report.language,
                'Строк': report.line_count,
                'Уровень': report.level,
                'Оценка': round(report.result.difficulty_score, 3),
            }
            row.update(report.result.metrics.to_dict())
            rows.append(row)
        return pd.DataFrame(rows)

    @staticmethod
    def vocabulary_frame(words: Sequence[VocabWord]) -> pd.DataFrame:
        """Таблица лексики с русскими заголовками."""
        frame = pd.DataFrame([
            {title: getattr(word, attr) for attr, title in VOCAB_COLUMNS.items()}
            for word in words
        ], columns=list(VOCAB_COLUMNS.values()))
        return frame

    def export_to_excel(self, reports: Sequence[SongReport], filepath: Union[str, Path]) -> Path:
        """
        Экспортирует отчёты по песням в Excel.

        Листы: сводка метрик, лексика всех песен, распределение по уровням.

        Args:
            reports: Отчёты по песням
            filepath: Путь для сохранения файла

        Returns:
            Путь к сохранённому файлу
        """
        filepath = self._resolve(filepath, '.xlsx')
        if not reports:
            logger.info("Нет отчётов для экспорта в Excel")

        try:
            summary_df = self.reports_frame(reports)

            vocab_parts = []
            for index, report in enumerate(reports, 1):
                part = self.vocabulary_frame(report.vocabulary)
                part.insert(0, 'Песня', report.title or f"#{index}")
                vocab_parts.append(part)
            vocab_df = pd.concat(vocab_parts, ignore_index=True) if vocab_parts else self.vocabulary_frame([])

            distribution = level_distribution(r.result.difficulty_score for r in reports)
            levels_df = pd.DataFrame({'Уровень': list(distribution), 'Песен': list(distribution.values())})

            with pd.ExcelWriter(filepath, engine='openpyxl') as writer:
                summary_df.to_excel(writer, sheet_name=self.main_sheet_name, index=False)
                vocab_df.to_excel(writer, sheet_name='Лексика', index=False)
                levels_df.to_excel(writer, sheet_name='Уровни', index=False)
        except (OSError, ValueError) as e:
            raise RuntimeError(f"Ошибка экспорта в Excel ({filepath}): {e}") from e

        logger.info(f"Отчёты экспортированы в Excel: {filepath} ({len(reports)} песен)")
        return filepath

    def export_vocabulary_excel(self, words: Sequence[VocabWord], filepath: Union[str, Path]) -> Path:
        """Экспортирует список лексики одной песни в Excel."""
        filepath = self._resolve(filepath, '.xlsx')
        try:
            with pd.ExcelWriter(filepath, engine='openpyxl') as writer:
                self.vocabulary_frame(words).to_excel(writer, sheet_name='Лексика', index=False)
        except (OSError, ValueError) as e:
            raise RuntimeError(f"Ошибка экспорта лексики в Excel ({filepath}): {e}") from e

        logger.info(f"Лексика экспортирована в Excel: {filepath}")
        return filepath

    def export_to_csv(self, words: Sequence[VocabWord], filepath: Union[str, Path]) -> Path:
        """
        Экспортирует лексику в CSV для импорта в Anki (слово;перевод).

        Args:
            words: Список слов
            filepath: Путь для сохранения файла

        Returns:
            Путь к сохранённому файлу
        """
        filepath = self._resolve(filepath, '.csv')
        try:
            with open(filepath, 'w', newline='', encoding='utf-8') as csvfile:
                writer = csv.writer(csvfile, delimiter=';')
                for word in words:
                    writer.writerow([word.word, word.translation])
        except OSError as e:
            raise RuntimeError(f"Ошибка экспорта в CSV ({filepath}): {e}") from e

        logger.info(f"Экспортировано {len(words)} слов для Anki: {filepath}")
        return filepath

    def export_to_json(self, report: SongReport, filepath: Union[str, Path]) -> Path:
        """
        Экспортирует отчёт по песне в JSON.

        Args:
            report: Отчёт по песне
            filepath: Путь для сохранения файла

        Returns:
            Путь к сохранённому файлу
        """
        filepath = self._resolve(filepath, '.json')
        json_data = {
            'metadata': {
                'timestamp': datetime.now().isoformat(),
                'title': report.title,
                'language': report.language,
                'line_count': report.line_count,
            },
            'difficulty_score': report.result.difficulty_score,
            'level': report.level,
            'metrics': report.result.metrics.to_dict(),
            'vocabulary': [
                {
                    'word': word.word,
                    'translation': word.translation,
                    'count': word.count,
                    'part_of_speech': word.part_of_speech,
                    'score': word.score,
                }
                for word in report.vocabulary
            ],
        }
        try:
            with open(filepath, 'w', encoding='utf-8') as jsonfile:
                json.dump(json_data, jsonfile, ensure_ascii=False, indent=2)
        except OSError as e:
            raise RuntimeError(f"Ошибка экспорта в JSON ({filepath}): {e}") from e

        logger.info(f"Отчёт экспортирован в JSON: {filepath}")
        return filepath

    def export_baselines(self, baseline: BaselineStats, filepath: Union[str, Path]) -> Path:
        """Сохраняет базовую статистику в YAML (движок сам её не хранит)."""
        filepath = self._resolve(filepath, '.yaml')
        try:
            with open(filepath, 'w', encoding='utf-8') as f:
                yaml.safe_dump(baseline.to_dict(), f, allow_unicode=True, sort_keys=False)
        except OSError as e:
            raise RuntimeError(f"Ошибка сохранения базовой статистики ({filepath}): {e}") from e

        logger.info(f"Базовая статистика сохранена: {filepath}")
        return filepath

    @staticmethod
    def load_baselines(filepath: Union[str, Path]) -> BaselineStats:
        """
        Загружает базовую статистику из YAML.

        Raises:
            RuntimeError: если файл не читается или повреждён
        """
        filepath = Path(filepath)
        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
            baseline = BaselineStats.from_dict(data)
        except (OSError, yaml.YAMLError, KeyError, TypeError, ValueError) as e:
            raise RuntimeError(f"Не удалось загрузить базовую статистику ({filepath}): {e}") from e

        logger.info(f"Базовая статистика загружена: {filepath}")
        return baseline

    def export_all_formats(self, report: SongReport, base_filename: str) -> Dict[str, Path]:
        """
        Экспортирует отчёт по песне во все форматы.

        Args:
            report: Отчёт по песне
            base_filename: Базовое имя файла без расширения

        Returns:
            Словарь с путями к экспортированным файлам
        """
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        base_filename = f"{base_filename}_{timestamp}"

        exported_files = {
            'excel': self.export_to_excel([report], self.output_dir / f"{base_filename}.xlsx"),
            'csv': self.export_to_csv(report.vocabulary, self.output_dir / f"{base_filename}_anki.csv"),
            'json': self.export_to_json(report, self.output_dir / f"{base_filename}.json"),
        }
        logger.info(f"Результат экспортирован во все форматы в папку: {self.output_dir}")
        return exported_files

    def _resolve(self, filepath: Union[str, Path], suffix: str) -> Path:
        filepath = Path(filepath)
        if not filepath.suffix:
            filepath = filepath.with_suffix(suffix)
        filepath.parent.mkdir(parents=True, exist_ok=True)
        return filepath
