"""
Тесты для экспортёра результатов
"""

import json

import pandas as pd
import pytest

from lyrics_analyser.components.exporter import ResultExporter
from lyrics_analyser.interfaces.analysis import (
    BaselineStats,
    DifficultyMetrics,
    MetricBaseline,
    ScoringResult,
    SongReport,
    VocabWord,
)


def make_report(score=5.5, title="Bésame mucho") -> SongReport:
    metrics = DifficultyMetrics(
        word_count=40,
        unique_word_count=25,
        type_token_ratio=0.625,
        avg_word_freq_zipf=4.2,
        verb_density=0.2,
        tense_weights=0.9,
        idiom_count=1,
        punct_complexity=0.3,
    )
    vocabulary = [
        VocabWord(word="corazón", translation="сердце", count=3, part_of_speech="NOUN", score=0.91),
        VocabWord(word="bailar", translation="танцевать", count=2, part_of_speech="VERB", score=0.74),
    ]
    return SongReport(
        language="es",
        result=ScoringResult(metrics=metrics, difficulty_score=score),
        vocabulary=vocabulary,
        line_count=8,
        title=title,
    )


@pytest.fixture
def exporter(tmp_path):
    return ResultExporter(output_dir=tmp_path)


class TestResultExporter:
    """Экспорт в Excel, CSV и JSON"""

    def test_excel_sheets(self, exporter, tmp_path):
        reports = [make_report(), make_report(score=8.7, title="La Bamba")]
        path = exporter.export_to_excel(reports, tmp_path / "songs")

        assert path.suffix == ".xlsx"
        sheets = pd.read_excel(path, sheet_name=None)
        assert list(sheets) == ["Песни", "Лексика", "Уровни"]

        summary = sheets["Песни"]
        assert list(summary["Песня"]) == ["Bésame mucho", "La Bamba"]
        assert list(summary["Уровень"]) == [6, 9]
        assert "type_token_ratio" in summary.columns

        vocab = sheets["Лексика"]
        assert len(vocab) == 4
        assert list(vocab.columns) == ["Песня", "Слово", "Перевод", "Вхождений", "Часть речи", "Оценка"]

        levels = sheets["Уровни"]
        assert list(levels["Уровень"]) == list(range(1, 11))
        assert levels["Песен"].sum() == 2

    def test_excel_custom_main_sheet(self, tmp_path):
        exporter = ResultExporter(output_dir=tmp_path, main_sheet_name="Canciones")
        path = exporter.export_to_excel([make_report()], tmp_path / "songs.xlsx")
        assert "Canciones" in pd.read_excel(path, sheet_name=None)

    def test_csv_for_anki(self, exporter, tmp_path):
        path = exporter.export_to_csv(make_report().vocabulary, tmp_path / "anki")

        assert path.suffix == ".csv"
        content = path.read_text(encoding="utf-8").splitlines()
        # Без заголовка: Anki импортирует строки как есть
        assert content == ["corazón;сердце", "bailar;танцевать"]

    def test_csv_empty(self, exporter, tmp_path):
        path = exporter.export_to_csv([], tmp_path / "empty.csv")
        assert path.read_text(encoding="utf-8") == ""

    def test_json(self, exporter, tmp_path):
        path = exporter.export_to_json(make_report(), tmp_path / "report")

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["metadata"]["title"] == "Bésame mucho"
        assert data["metadata"]["language"] == "es"
        assert data["level"] == 6
        assert data["difficulty_score"] == pytest.approx(5.5)
        assert data["metrics"]["word_count"] == 40
        assert data["vocabulary"][0]["word"] == "corazón"
        assert "сердце" in path.read_text(encoding="utf-8")

    def test_vocabulary_excel(self, exporter, tmp_path):
        path = exporter.export_vocabulary_excel(make_report().vocabulary, tmp_path / "vocab.xlsx")
        frame = pd.read_excel(path, sheet_name="Лексика")
        assert list(frame["Слово"]) == ["corazón", "bailar"]

    def test_creates_missing_folder(self, exporter, tmp_path):
        path = exporter.export_to_csv([], tmp_path / "nested" / "dir" / "anki.csv")
        assert path.exists()

    def test_export_all_formats(self, exporter, tmp_path):
        files = exporter.export_all_formats(make_report(), "lyrics_analysis")

        assert set(files) == {"excel", "csv", "json"}
        for path in files.values():
            assert path.exists()
            assert path.parent == tmp_path
            assert path.name.startswith("lyrics_analysis_")
        assert files["csv"].name.endswith("_anki.csv")


class TestBaselineFiles:
    """Сохранение и загрузка базовой статистики"""

    def test_roundtrip(self, exporter, tmp_path):
        baseline = BaselineStats(word_count=MetricBaseline(mean=55.0, std=12.5))
        path = exporter.export_baselines(baseline, tmp_path / "baseline")

        assert path.suffix == ".yaml"
        assert ResultExporter.load_baselines(path) == baseline

    def test_missing_file(self, tmp_path):
        with pytest.raises(RuntimeError):
            ResultExporter.load_baselines(tmp_path / "nope.yaml")

    def test_broken_file(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("word_count: [unclosed", encoding="utf-8")
        with pytest.raises(RuntimeError):
            ResultExporter.load_baselines(path)

    def test_zero_std_file_scores(self, tmp_path, sample_lyrics):
        """Файл с std: 0 загружается, и оценка по нему остаётся в [1, 10]."""
        from lyrics_analyser.components.difficulty_scorer import MIN_STD, compute_difficulty
        from lyrics_analyser.components.morphology import analyze_line

        path = tmp_path / "zero.yaml"
        path.write_text("idiom_count:\n  mean: 0\n  std: 0\n", encoding="utf-8")
        baseline = ResultExporter.load_baselines(path)

        assert baseline.idiom_count.std == MIN_STD
        result = compute_difficulty([analyze_line(sample_lyrics["simple"][0])], baseline=baseline)
        assert 1.0 <= result.difficulty_score <= 10.0
