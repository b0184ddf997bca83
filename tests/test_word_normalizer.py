"""
Тесты для компонента WordNormalizer.
"""

import pytest
from lyrics_analyser.components.normalizer import WordNormalizer, strip_punctuation


class TestWordNormalizer:
    """Тесты для WordNormalizer."""

    def test_init(self):
        """Тест инициализации."""
        normalizer = WordNormalizer()
        assert normalizer.use_cache is True
        assert normalizer.elisions == ()

        normalizer = WordNormalizer(elisions=["l'", "qu'"], use_cache=False)
        # Длинные префиксы первыми
        assert normalizer.elisions == ("qu'", "l'")
        assert normalizer.use_cache is False

    def test_normalize_empty(self):
        """Тест нормализации пустого слова."""
        normalizer = WordNormalizer()
        assert normalizer.normalize("") == ""
        assert normalizer.normalize(None) == ""

    @pytest.mark.parametrize("raw,expected", [
        ("Corazón,", "corazón"),
        ("¿Quién?", "quién"),
        ("¡Ay!", "ay"),
        ("«amor»", "amor"),
        ("(vida)", "vida"),
        ("...", ""),
    ])
    def test_normalize_strips_punctuation(self, raw, expected):
        """Пунктуация по краям удаляется, регистр понижается."""
        assert WordNormalizer().normalize(raw) == expected

    def test_normalize_nfc(self):
        """Разные Unicode-представления дают одно слово."""
        normalizer = WordNormalizer()
        assert normalizer.normalize("corazo\u0301n") == normalizer.normalize("corazón") == "corazón"

    def test_normalize_french_elision(self):
        """Элидированный префикс снимается."""
        normalizer = WordNormalizer(elisions=["l'", "j'", "qu'"])
        assert normalizer.normalize("l'amour") == "amour"
        assert normalizer.normalize("L’Amour,") == "amour"
        assert normalizer.normalize("«l'amour»") == "amour"
        assert normalizer.normalize("qu'il") == "il"
        # Сам префикс без слова не трогается (остаётся буква)
        assert normalizer.normalize("l'") == "l"

    def test_clean_surface_keeps_case(self):
        """Отображаемая форма сохраняет регистр."""
        normalizer = WordNormalizer(elisions=["l'"])
        assert normalizer.clean_surface("¡Corazón!") == "Corazón"
        assert normalizer.clean_surface("l'Amour") == "Amour"

    def test_has_letters(self):
        """Тест проверки наличия букв."""
        assert WordNormalizer.has_letters("amor")
        assert not WordNormalizer.has_letters("123")
        assert not WordNormalizer.has_letters("")

    def test_normalize_batch(self):
        """Тест пакетной нормализации."""
        normalizer = WordNormalizer()
        assert normalizer.normalize_batch(["Sol,", "LUNA"]) == ["sol", "luna"]
        assert normalizer.normalize_batch([]) == []

    def test_cache_stats(self):
        """Тест статистики кэша."""
        normalizer = WordNormalizer()
        normalizer.normalize("Amor")
        normalizer.normalize("Amor")
        stats = normalizer.get_cache_stats()
        assert stats == {'cache_size': 1, 'cache_hits': 1, 'cache_misses': 1}

        normalizer.clear_cache()
        assert normalizer.get_cache_stats()['cache_size'] == 0

    def test_no_cache(self):
        """Без кэша статистика не растёт."""
        normalizer = WordNormalizer(use_cache=False)
        normalizer.normalize("Amor")
        assert normalizer.get_cache_stats()['cache_size'] == 0


def test_strip_punctuation():
    """Функция сохраняет регистр и внутренние пробелы."""
    assert strip_punctuation("«Te quiero»,") == "Te quiero"
    assert strip_punctuation(None) == ""
