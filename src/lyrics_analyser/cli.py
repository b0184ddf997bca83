#!/usr/bin/env python3
"""
Интерфейс командной строки для Lyrics Analyser

Команды:
1. score - уровень сложности песни (1-10) и её метрики
2. vocab - ключевая лексика песни с переводами
3. conjugate - таблица спряжения глагола
4. recalibrate - пересчёт базовой статистики по корпусу песен
"""

import os
import sys
import argparse
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from .config import config
from .exceptions import LyricsAnalyserError
from .text_processor import LyricsTextProcessor

logger = logging.getLogger(__name__)


def _read_lines(path: str) -> List[str]:
    """Читает файл песни (UTF-8) и возвращает очищенные строки."""
    text = Path(path).read_text(encoding='utf-8')
    return LyricsTextProcessor().clean_lines(text)


def _resolve_language(language: Optional[str], lines: Sequence[str]) -> str:
    if language and language != 'auto':
        return language
    if language == 'auto':
        guessed = LyricsTextProcessor().guess_language(lines)
        if guessed:
            print(f"🔎 Определён язык: {guessed}")
            return guessed
        print("⚠️ Язык определить не удалось, используется язык по умолчанию")
    return config.get_default_language()


def _load_song(args) -> Tuple[List[str], Optional[List[str]], str]:
    lines = _read_lines(args.lyrics)
    translations = _read_lines(args.translation) if getattr(args, 'translation', None) else None
    language = _resolve_language(args.language, lines)
    return lines, translations, language


def run_score(args) -> bool:
    """Оценивает сложность песни"""
    from .song_analyzer import SongAnalyzer

    lines, translations, language = _load_song(args)
    analyzer = SongAnalyzer(language=language, baseline_file=args.baseline)
    report = analyzer.analyze_song(lines, translations, title=args.title or Path(args.lyrics).stem)

    metrics = report.result.metrics
    print(f"\n🎵 {report.title}")
    print(f"📊 Уровень: {report.level} (оценка {report.result.difficulty_score:.2f})")
    print(f"   Строк: {report.line_count}")
    print(f"   Слов: {metrics.word_count} (уникальных лемм: {metrics.unique_word_count})")
    print(f"   Лексическое разнообразие: {metrics.type_token_ratio:.3f}")
    print(f"   Средняя частота (Zipf): {metrics.avg_word_freq_zipf:.2f}")
    print(f"   Доля глаголов: {metrics.verb_density:.3f}")
    print(f"   Вес времён: {metrics.tense_weights:.2f}")
    print(f"   Идиом: {metrics.idiom_count}")
    print(f"   Сложность пунктуации: {metrics.punct_complexity:.3f}")

    if args.export:
        from .components.exporter import ResultExporter
        exporter = ResultExporter(output_dir=config.get_results_folder(),
                                  main_sheet_name=config.get_main_sheet_name())
        files = exporter.export_all_formats(report, config.get_results_filename_prefix())
        for kind, path in files.items():
            print(f"📁 {kind}: {path}")
    return True


def run_vocab(args) -> bool:
    """Выводит ключевую лексику песни"""
    from .components.vocabulary_ranker import VocabularyRanker

    lines, translations, language = _load_song(args)
    ranker = VocabularyRanker(
        language=language,
        default_usefulness=config.get_default_usefulness(),
        min_word_length=config.get_min_word_length(),
    )
    limit = args.limit if args.limit is not None else config.get_vocabulary_limit()
    words = ranker.extract_vocabulary(lines, translations, limit=limit)

    if not words:
        print("⚠️ Ключевых слов не найдено")
        return True

    print(f"\n📚 Ключевая лексика ({len(words)} слов):")
    for position, word in enumerate(words, 1):
        print(f"{position:>3}. {word.word:<18} {word.translation:<18} "
              f"{word.part_of_speech:<5} x{word.count:<3} {word.score:.2f}")

    if args.csv or args.excel:
        from .components.exporter import ResultExporter
        exporter = ResultExporter(output_dir=config.get_results_folder())
        if args.csv:
            print(f"📁 CSV для Anki: {exporter.export_to_csv(words, args.csv)}")
        if args.excel:
            print(f"📁 Excel: {exporter.export_vocabulary_excel(words, args.excel)}")
    return True


def run_conjugate(args) -> bool:
    """Печатает таблицу спряжения"""
    from .components.conjugation import ConjugationGenerator

    language = args.language if args.language and args.language != 'auto' else config.get_default_language()
    table = ConjugationGenerator(language).conjugations(args.verb)
    if table is None:
        print(f"❌ '{args.verb}' не похоже на инфинитив ({language})")
        return False

    kind = "неправильный" if table.irregular else "правильный"
    print(f"\n🧩 {table.lemma} ({kind})")
    for tense in table:
        forms = table[tense]
        print(f"\n   {tense}:")
        for person, form in forms.items():
            print(f"      {person:<16} {form}")
    return True


def run_recalibrate(args) -> bool:
    """Пересчитывает базовую статистику по набору песен"""
    from .song_analyzer import SongAnalyzer
    from .components.exporter import ResultExporter

    language = args.language if args.language and args.language != 'auto' else config.get_default_language()
    analyzer = SongAnalyzer(language=language)
    songs = []
    for path in args.lyrics:
        lines = _read_lines(path)
        songs.append({'lines': lines, 'title': Path(path).stem})

    reports = analyzer.analyze_songs(songs)
    if not reports:
        print("⚠️ Нет песен для пересчёта, статистика не изменилась")
        return False

    baseline = analyzer.recalibrate(reports)
    path = ResultExporter().export_baselines(baseline, args.output)
    print(f"✅ Базовая статистика пересчитана по {len(reports)} песням: {path}")

    distribution = analyzer.level_distribution(analyzer.analyze_songs(songs))
    print("\n📊 Распределение по уровням после пересчёта:")
    for level, count in distribution.items():
        print(f"   {level:>2}: {'█' * count} {count}")
    return True


def build_parser() -> argparse.ArgumentParser:
    """Создаёт парсер аргументов"""
    parser = argparse.ArgumentParser(
        prog='lyrics-analyser',
        description="Lyrics Analyser - уровень сложности и ключевая лексика песен",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Примеры использования:
  python -m lyrics_analyser.cli score song.txt                      # Уровень сложности
  python -m lyrics_analyser.cli score song.lrc --language auto      # С определением языка
  python -m lyrics_analyser.cli vocab song.txt -t song_ru.txt --csv anki.csv
  python -m lyrics_analyser.cli conjugate bailar
  python -m lyrics_analyser.cli recalibrate songs/*.txt -o baseline.yaml
        """
    )
    subparsers = parser.add_subparsers(dest='command')

    def add_language(sub):
        sub.add_argument('-l', '--language', default=None,
                         help="Код языка (es, fr) или auto; по умолчанию из config.yaml")

    score = subparsers.add_parser('score', help='Оценить сложность песни')
    score.add_argument('lyrics', help='Файл с текстом песни (txt, lrc, html)')
    score.add_argument('-t', '--translation', help='Файл с построчным переводом')
    score.add_argument('--title', help='Название песни')
    score.add_argument('--baseline', help='YAML с базовой статистикой')
    score.add_argument('--export', action='store_true', help='Экспорт в Excel, CSV и JSON')
    add_language(score)

    vocab = subparsers.add_parser('vocab', help='Ключевая лексика песни')
    vocab.add_argument('lyrics', help='Файл с текстом песни')
    vocab.add_argument('-t', '--translation', help='Файл с построчным переводом')
    vocab.add_argument('-n', '--limit', type=int, help='Количество слов')
    vocab.add_argument('--csv', help='Сохранить CSV для Anki')
    vocab.add_argument('--excel', help='Сохранить Excel')
    add_language(vocab)

    conjugate = subparsers.add_parser('conjugate', help='Спряжение глагола')
    conjugate.add_argument('verb', help='Инфинитив')
    add_language(conjugate)

    recalibrate = subparsers.add_parser('recalibrate', help='Пересчитать базовую статистику')
    recalibrate.add_argument('lyrics', nargs='+', help='Файлы с текстами песен корпуса')
    recalibrate.add_argument('-o', '--output', default='baseline.yaml', help='Куда сохранить YAML')
    add_language(recalibrate)

    return parser


COMMANDS = {
    'score': run_score,
    'vocab': run_vocab,
    'conjugate': run_conjugate,
    'recalibrate': run_recalibrate,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Основная функция CLI"""
    # Специальная обработка LYRICS_ANALYSER_DEBUG для переопределения уровня логирования
    if os.environ.get('LYRICS_ANALYSER_DEBUG') == '1':
        os.environ['LYRICS_ANALYSER_LOGGING__CONSOLE_LEVEL'] = 'DEBUG'
        config._apply_env_overrides()
        print("🔍 DEBUG режим активирован через LYRICS_ANALYSER_DEBUG=1")
    config._configure_logging_if_needed(force=True)

    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 1

    try:
        success = COMMANDS[args.command](args)
    except FileNotFoundError as e:
        print(f"❌ Файл не найден: {e.filename}")
        return 1
    except (LyricsAnalyserError, RuntimeError) as e:
        logger.debug(f"Команда {args.command} завершилась ошибкой", exc_info=True)
        print(f"❌ {e}")
        return 1
    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
