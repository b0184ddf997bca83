"""
Тесты морфологического анализатора.
"""

import unittest

import pytest

from lyrics_analyser.components.morphology import (
    DEFAULT_CONFIDENCE,
    MorphologicalAnalyzer,
    analyze_line,
    get_analyzer,
)
from lyrics_analyser.exceptions import UnsupportedLanguageError
from lyrics_analyser.interfaces.analysis import AnalyzedLine, POS_TAGS


class TestAnalyzeLine(unittest.TestCase):
    """Разбор целой строки."""

    def setUp(self):
        self.analyzer = MorphologicalAnalyzer('es')

    def test_simple_line(self):
        line = self.analyzer.analyze_line("Yo hablo español", 0)

        self.assertIsInstance(line, AnalyzedLine)
        self.assertEqual(line.raw_text, "Yo hablo español")
        self.assertEqual([t.text for t in line.tokens], ["Yo", "hablo", "español"])
        self.assertEqual([t.pos for t in line.tokens], ["PRON", "VERB", "NOUN"])

        verb = line.tokens[1]
        self.assertTrue(verb.is_verb)
        self.assertEqual(verb.lemma, "hablar")
        self.assertEqual(verb.tense, "presente")

    def test_line_index(self):
        self.assertEqual(self.analyzer.analyze_line("Te quiero", 7).sentence_index, 7)

    def test_empty_line(self):
        line = self.analyzer.analyze_line("", 0)
        self.assertEqual(line.tokens, ())
        self.assertEqual(self.analyzer.analyze_line(None).raw_text, "")

    def test_only_punctuation(self):
        self.assertEqual(self.analyzer.analyze_line("¡¿...?!").tokens, ())

    def test_confidence_constant(self):
        line = self.analyzer.analyze_line("Bailando bajo la luna")
        self.assertTrue(all(t.confidence == DEFAULT_CONFIDENCE == 0.8 for t in line.tokens))

    def test_is_verb_matches_pos(self):
        line = self.analyzer.analyze_line("Si tuviera tu corazón no lloraría más")
        for token in line.tokens:
            self.assertEqual(token.is_verb, token.pos == "VERB")
            self.assertIn(token.pos, POS_TAGS)
            if not token.is_verb:
                self.assertIsNone(token.tense)

    def test_lemma_lowercase_text_preserved(self):
        line = self.analyzer.analyze_line("CORAZONES Casas")
        self.assertEqual(line.tokens[0].text, "CORAZONES")
        self.assertEqual(line.tokens[1].lemma, "casa")

    def test_analyze_lines_numbering(self):
        lines = self.analyzer.analyze_lines(["Te quiero", "", "Mi amor"])
        self.assertEqual([l.sentence_index for l in lines], [0, 1, 2])
        self.assertEqual(lines[1].tokens, ())

    def test_deterministic(self):
        text = "Ayer estuvimos bailando hasta que salió el sol"
        self.assertEqual(self.analyzer.analyze_line(text), MorphologicalAnalyzer('es').analyze_line(text))


class TestPosTagging:
    """Упорядоченная таблица правил частей речи."""

    @pytest.fixture(autouse=True)
    def _analyzer(self):
        self.analyzer = get_analyzer('es')

    @pytest.mark.parametrize("word,tag", [
        ("el", "DET"),
        ("mis", "DET"),
        ("lo", "PRON"),
        ("nosotros", "PRON"),
        ("con", "ADP"),
        ("y", "CONJ"),
        ("que", "CONJ"),
        ("ay", "INTJ"),
        ("quiero", "VERB"),
        ("hablas", "VERB"),
        ("cantando", "VERB"),
        ("bailar", "VERB"),
        ("perdido", "VERB"),
        ("rápidamente", "ADV"),
        ("hermoso", "ADJ"),
        ("posible", "ADJ"),
        ("2024", "OTHER"),
        ("casa", "NOUN"),
        ("corazón", "NOUN"),
    ])
    def test_tag(self, word, tag):
        assert self.analyzer.tag(word) == tag

    def test_tag_case_insensitive(self):
        assert self.analyzer.tag("Quiero") == "VERB"

    def test_tag_empty_defaults_to_noun(self):
        assert self.analyzer.tag("") == "NOUN"

    def test_closed_class_before_verb_suffix(self):
        """Список служебных слов проверяется раньше суффиксов глаголов."""
        assert self.analyzer.tag("ver") == "VERB"
        assert self.analyzer.tag("por") == "ADP"


class TestLemmatization:
    """Леммы глаголов, существительных и прилагательных."""

    @pytest.fixture(autouse=True)
    def _analyzer(self):
        self.analyzer = get_analyzer('es')

    @pytest.mark.parametrize("word,lemma", [
        ("quiero", "querer"),
        ("eres", "ser"),
        ("bailaban", "bailar"),
        ("cantando", "cantar"),
        ("comiendo", "comer"),
        ("viviendo", "vivir"),
        ("perdido", "perder"),
        ("bailar", "bailar"),
    ])
    def test_verb_lemma(self, word, lemma):
        assert self.analyzer.lemmatize(word) == lemma

    @pytest.mark.parametrize("word,lemma", [
        ("casas", "casa"),
        ("noches", "noche"),
        ("ciudades", "ciudad"),
        ("ojos", "ojo"),
        ("mes", "mes"),
        ("sol", "sol"),
    ])
    def test_plural_stripping(self, word, lemma):
        assert self.analyzer.lemmatize(word) == lemma

    def test_other_pos_lowercased(self):
        assert self.analyzer.lemmatize("Nosotros") == "nosotros"

    def test_explicit_pos(self):
        assert self.analyzer.lemmatize("casas", pos="ADV") == "casas"


class TestTenseDetection:
    """Времена: точные формы, затем суффиксные таблицы."""

    @pytest.fixture(autouse=True)
    def _analyzer(self):
        self.analyzer = get_analyzer('es')

    @pytest.mark.parametrize("word,tense", [
        ("hablo", "presente"),
        ("hablaba", "imperfecto"),
        ("cantaré", "futuro"),
        ("bailaría", "condicional"),
        ("hable", "subjuntivo_presente"),
        ("hablara", "subjuntivo_imperfecto"),
        ("fueron", "preterito"),
        ("pintaron", "preterito"),
    ])
    def test_detect_tense(self, word, tense):
        assert self.analyzer.detect_tense(word) == tense

    @pytest.mark.parametrize("word", ["cantar", "cantando", "perdido", "", "123"])
    def test_no_tense(self, word):
        assert self.analyzer.detect_tense(word) is None

    def test_candidates_exact_forms_in_paradigm_order(self):
        assert self.analyzer.tense_candidates("amamos") == ["presente", "preterito"]

    def test_candidates_from_suffix_tables(self):
        """Неизвестный глагол: все подходящие таблицы в их порядке."""
        candidates = self.analyzer.tense_candidates("pintara")
        assert candidates == ["subjuntivo_imperfecto", "presente"]
        assert self.analyzer.detect_tense("pintara") == candidates[0]


class TestFrenchAnalyzer:
    """Французский пакет через тот же диспетчер."""

    @pytest.fixture(autouse=True)
    def _analyzer(self):
        self.analyzer = get_analyzer('fr')

    def test_line_with_elision(self):
        line = self.analyzer.analyze_line("Je chante l'amour")
        assert [t.text for t in line.tokens] == ["Je", "chante", "l'", "amour"]
        assert [t.pos for t in line.tokens] == ["PRON", "VERB", "DET", "NOUN"]
        assert line.tokens[1].lemma == "chanter"
        assert line.tokens[1].tense == "present"

    def test_c_elision_is_pronoun(self):
        line = self.analyzer.analyze_line("C'est la vie")
        assert line.tokens[0].text == "C'"
        assert line.tokens[0].pos == "PRON"

    def test_aujourdhui_single_token(self):
        line = self.analyzer.analyze_line("Aujourd'hui je chante")
        assert [t.text for t in line.tokens] == ["Aujourd'hui", "je", "chante"]
        assert line.tokens[0].pos == "ADV"

    def test_participle_lemma(self):
        assert self.analyzer.tag("parlant") == "VERB"
        assert self.analyzer.lemmatize("parlant") == "parler"
        assert self.analyzer.detect_tense("parlant") is None

    def test_irregular(self):
        assert self.analyzer.lemmatize("sommes") == "être"
        assert self.analyzer.detect_tense("finissons") == "present"

    def test_adverb(self):
        assert self.analyzer.tag("doucement") == "ADV"


class TestModuleFunctions:
    """Функции уровня модуля и кэш анализаторов."""

    def test_analyze_line_default_language(self):
        line = analyze_line("Te quiero", 2)
        assert line.sentence_index == 2
        assert line.tokens[1].lemma == "querer"

    def test_analyze_line_french(self):
        line = analyze_line("Nous parlerons demain", language='fr')
        assert line.tokens[1].tense == "futur"

    def test_get_analyzer_cached(self):
        assert get_analyzer('es') is get_analyzer(' ES ')

    def test_unsupported_language(self):
        with pytest.raises(UnsupportedLanguageError):
            MorphologicalAnalyzer('de')
        with pytest.raises(UnsupportedLanguageError):
            analyze_line("hallo", language='de')
