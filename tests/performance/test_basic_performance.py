import time

import pytest

from lyrics_analyser.components.conjugation import ConjugationGenerator
from lyrics_analyser.song_analyzer import SongAnalyzer


@pytest.mark.performance
def test_analyze_song_basic_performance(sample_lyrics, fresh_baseline):
    """Проверяет, что анализ длинной песни работает достаточно быстро."""
    analyzer = SongAnalyzer(language="es")
    lines = sample_lyrics["complex"] * 200  # Увеличим объём текста

    start = time.perf_counter()
    analyzer.analyze_song(lines)
    duration = time.perf_counter() - start

    # Базовый грубый порог, чтобы ловить регрессии
    assert duration < 3.0, f"Слишком медленно: {duration:.3f}s"


@pytest.mark.performance
def test_conjugation_basic_performance():
    """Таблицы спряжения строятся быстро."""
    generator = ConjugationGenerator("es")
    verbs = ["hablar", "comer", "vivir", "ser", "ir", "tener", "hacer", "bailar"] * 50

    start = time.perf_counter()
    for verb in verbs:
        generator.conjugations(verb)
    duration = time.perf_counter() - start

    assert duration < 2.0, f"Слишком медленно: {duration:.3f}s"
