import sys
from pathlib import Path
from typing import Dict, List

import pytest

# Позволяет запускать тесты без установки пакета
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from lyrics_analyser.components.difficulty_scorer import reset_default_baseline
from lyrics_analyser.interfaces.analysis import BaselineStats


@pytest.fixture
def temp_directory(tmp_path: Path) -> Path:
    """Временная директория для тестов.

    Возвращает уникальную директорию для каждого теста.
    """
    return tmp_path


@pytest.fixture(scope="session")
def sample_lyrics() -> Dict[str, List[str]]:
    """Наборы строк песен для тестирования."""
    from .fixtures.sample_lyrics import (
        SIMPLE_SONG,
        SIMPLE_TRANSLATION,
        COMPLEX_SONG,
        FRENCH_SONG,
        CHORUS_SONG,
    )

    return {
        "simple": SIMPLE_SONG,
        "simple_translation": SIMPLE_TRANSLATION,
        "complex": COMPLEX_SONG,
        "french": FRENCH_SONG,
        "chorus": CHORUS_SONG,
    }


@pytest.fixture(scope="session")
def raw_lyrics() -> Dict[str, str]:
    """Сырые тексты песен (HTML и LRC)."""
    from .fixtures.sample_lyrics import SAMPLE_HTML_LYRICS, SAMPLE_LRC_LYRICS

    return {
        "html": SAMPLE_HTML_LYRICS,
        "lrc": SAMPLE_LRC_LYRICS,
    }


@pytest.fixture
def fresh_baseline() -> BaselineStats:
    """Встроенная базовая статистика; после теста процессная статистика сбрасывается."""
    baseline = reset_default_baseline()
    yield baseline
    reset_default_baseline()


def pytest_configure(config):
    """Регистрируем маркеры для проекта."""
    config.addinivalue_line("markers", "integration: интеграционные тесты")
    config.addinivalue_line("markers", "performance: тесты производительности")
    config.addinivalue_line("markers", "quality: тесты качества/точности")
