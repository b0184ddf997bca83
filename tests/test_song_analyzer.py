"""
Тесты для SongAnalyzer: песня целиком, наборы песен и пересчёт статистики.
"""

import pytest

from lyrics_analyser.components.difficulty_scorer import get_default_baseline
from lyrics_analyser.components.exporter import ResultExporter
from lyrics_analyser.exceptions import EmptyInputError, UnsupportedLanguageError
from lyrics_analyser.interfaces.analysis import BaselineStats, MetricBaseline, SongReport
from lyrics_analyser.song_analyzer import SongAnalyzer


class TestAnalyzeSong:
    """Анализ одной песни"""

    def test_simple_song(self, fresh_baseline, sample_lyrics):
        analyzer = SongAnalyzer(language='es')
        report = analyzer.analyze_song(
            sample_lyrics["simple"], sample_lyrics["simple_translation"], title="Idiomas",
        )

        assert isinstance(report, SongReport)
        assert report.language == 'es'
        assert report.title == "Idiomas"
        assert report.line_count == 2
        assert report.level == 4
        assert report.result.metrics.word_count == 6
        translations = {w.word: w.translation for w in report.vocabulary}
        assert translations["hablo"] == "говорю"

    def test_vocabulary_limit(self, fresh_baseline, sample_lyrics):
        analyzer = SongAnalyzer(language='es', vocabulary_limit=2)
        report = analyzer.analyze_song(sample_lyrics["complex"])
        assert len(report.vocabulary) == 2

    def test_external_lookup(self, fresh_baseline, sample_lyrics):
        report = SongAnalyzer('es').analyze_song(
            sample_lyrics["chorus"], external_lookup={"corazón": "сердце"}.get,
        )
        assert report.vocabulary[0].word == "corazón"
        assert report.vocabulary[0].translation == "сердце"

    def test_french(self, fresh_baseline, sample_lyrics):
        report = SongAnalyzer(language='fr').analyze_song(sample_lyrics["french"])
        assert report.language == 'fr'
        assert 1 <= report.level <= 10

    def test_empty_song(self):
        with pytest.raises(EmptyInputError):
            SongAnalyzer('es').analyze_song([])

    def test_unsupported_language(self):
        with pytest.raises(UnsupportedLanguageError):
            SongAnalyzer(language='klingon')


class TestAnalyzeSongs:
    """Набор песен"""

    def test_mixed_song_formats(self, fresh_baseline, sample_lyrics):
        songs = [
            sample_lyrics["simple"],
            {'lines': sample_lyrics["complex"], 'title': "Complicada"},
            {'lines': [], 'title': "Пустая"},
            {'lines': sample_lyrics["simple"], 'translations': sample_lyrics["simple_translation"]},
        ]
        reports = SongAnalyzer('es').analyze_songs(songs)

        assert len(reports) == 3
        assert reports[0].title is None
        assert reports[1].title == "Complicada"
        assert reports[2].vocabulary[0].translation != reports[2].vocabulary[0].word

    def test_metrics_frame(self, fresh_baseline, sample_lyrics):
        reports = SongAnalyzer('es').analyze_songs([sample_lyrics["simple"], sample_lyrics["complex"]])
        frame = SongAnalyzer.metrics_frame(reports)

        assert len(frame) == 2
        assert list(frame["word_count"]) == [r.result.metrics.word_count for r in reports]
        assert list(frame["Уровень"]) == [r.level for r in reports]

    def test_level_distribution(self, fresh_baseline, sample_lyrics):
        reports = SongAnalyzer('es').analyze_songs([sample_lyrics["simple"], sample_lyrics["simple"]])
        distribution = SongAnalyzer.level_distribution(reports)
        assert distribution[4] == 2
        assert sum(distribution.values()) == 2


class TestRecalibrate:
    """Пересчёт базовой статистики"""

    def test_updates_process_default(self, fresh_baseline, sample_lyrics):
        analyzer = SongAnalyzer('es')
        reports = analyzer.analyze_songs([sample_lyrics["simple"], sample_lyrics["complex"]])
        updated = analyzer.recalibrate(reports)

        assert get_default_baseline() is updated
        assert analyzer.baseline is updated
        expected_mean = sum(r.result.metrics.word_count for r in reports) / 2
        assert updated.word_count.mean == pytest.approx(expected_mean)

    def test_own_baseline_stays_local(self, fresh_baseline, sample_lyrics):
        analyzer = SongAnalyzer('es', baseline=BaselineStats.default())
        reports = analyzer.analyze_songs([sample_lyrics["simple"], sample_lyrics["complex"]])
        updated = analyzer.recalibrate(reports)

        assert analyzer.baseline is updated
        assert get_default_baseline() is fresh_baseline
        assert updated != fresh_baseline

    def test_empty_corpus(self, fresh_baseline):
        analyzer = SongAnalyzer('es')
        assert analyzer.recalibrate([]) is fresh_baseline

    def test_recalibration_changes_scores(self, fresh_baseline, sample_lyrics):
        analyzer = SongAnalyzer('es')
        before = analyzer.analyze_song(sample_lyrics["simple"]).result.difficulty_score
        analyzer.recalibrate(analyzer.analyze_songs([sample_lyrics["simple"], sample_lyrics["complex"]]))
        after = analyzer.analyze_song(sample_lyrics["simple"]).result.difficulty_score
        assert after != before


class TestBaselineFile:
    """Загрузка статистики из YAML"""

    def test_baseline_file(self, fresh_baseline, tmp_path):
        saved = BaselineStats(word_count=MetricBaseline(mean=10.0, std=2.0))
        path = ResultExporter(output_dir=tmp_path).export_baselines(saved, tmp_path / "baseline.yaml")

        analyzer = SongAnalyzer('es', baseline_file=path)
        assert analyzer.baseline == saved

    def test_explicit_baseline_wins(self, fresh_baseline, tmp_path):
        own = BaselineStats(word_count=MetricBaseline(mean=20.0, std=2.0))
        analyzer = SongAnalyzer('es', baseline=own, baseline_file=tmp_path / "missing.yaml")
        assert analyzer.baseline is own

    def test_missing_baseline_file(self, tmp_path):
        with pytest.raises(RuntimeError):
            SongAnalyzer('es', baseline_file=tmp_path / "missing.yaml")


class TestConfiguredLimits:
    """Настройки из окружения не нарушают ограничения лексики"""

    def test_min_word_length_from_env(self, fresh_baseline, monkeypatch, tmp_path):
        from lyrics_analyser import song_analyzer
        from lyrics_analyser.config import Config

        monkeypatch.setenv("LYRICS_ANALYSER_VOCABULARY__MIN_WORD_LENGTH", "1")
        monkeypatch.setattr(song_analyzer, "config", Config(config_path=str(tmp_path / "none.yaml")))

        report = SongAnalyzer('es').analyze_song(["x x x corazón"])

        assert [w.word for w in report.vocabulary] == ["corazón"]
        assert all(len(w.word) >= 2 for w in report.vocabulary)

    def test_confidence_not_configurable(self, monkeypatch, tmp_path):
        """Уверенность токенов всегда 0.8, даже если в окружении задано иное."""
        from lyrics_analyser import song_analyzer
        from lyrics_analyser.config import Config

        monkeypatch.setenv("LYRICS_ANALYSER_ANALYSIS__CONFIDENCE", "0.3")
        monkeypatch.setattr(song_analyzer, "config", Config(config_path=str(tmp_path / "none.yaml")))

        line = SongAnalyzer('es').analyzer.analyze_line("Yo hablo español")
        assert all(token.confidence == 0.8 for token in line.tokens)
