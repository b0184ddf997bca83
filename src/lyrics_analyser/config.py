"""
Модуль для работы с конфигурацией проекта

Функции:
- Загрузка config.yaml (+ профили: config.prod.yaml, config.test.yaml)
- ENV-переопределения (префикс LYRICS_ANALYSER_, вложенность через __)
- Валидация диапазонов
- Настройка логирования
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, List, Optional
from dotenv import load_dotenv
import logging
from datetime import datetime

logger = logging.getLogger(__name__)

ENV_PREFIX = 'LYRICS_ANALYSER_'
ENV_PROFILE = 'LYRICS_ANALYSER_ENV'


class Config:
    """Класс для работы с конфигурацией проекта"""

    def __init__(self, config_path: Optional[str] = None):
        """
        Инициализация конфигурации

        Args:
            config_path: Путь к файлу конфигурации
        """
        if config_path:
            self.config_path = Path(config_path)
        else:
            # Ищем config.yaml в текущей директории и выше
            current_dir = Path.cwd()
            config_path = current_dir / "config.yaml"

            while not config_path.exists() and current_dir.parent != current_dir:
                current_dir = current_dir.parent
                config_path = current_dir / "config.yaml"

            self.config_path = config_path

        self.config_data: Dict[str, Any] = {}
        self.env_data: Dict[str, Any] = {}

        self._load_env()
        self._load_config()
        try:
            self._apply_env_overrides()
            self._validate()
        except (TypeError, ValueError) as e:
            logger.warning(f"Проблема при применении ENV/валидации: {e}")
        self._configure_logging_if_needed()

    def _load_env(self):
        """Загружает переменные окружения из .env файла"""
        load_dotenv()
        self.env_data = {key: val for key, val in os.environ.items() if key.startswith(ENV_PREFIX)}
        logger.debug("Переменные окружения загружены из .env (если есть)")

    # --- Профили/ENV overrides/валидация/логирование ---
    def _resolve_config_path(self) -> Path:
        env = os.getenv(ENV_PROFILE, '').lower().strip()
        root = self.config_path.parent if self.config_path else Path.cwd()
        if env == 'production':
            candidate = root / 'config.prod.yaml'
        elif env == 'testing':
            candidate = root / 'config.test.yaml'
        else:
            candidate = root / 'config.yaml'
        if candidate.exists():
            return candidate
        # Фолбэк на исходный путь
        return self.config_path

    def _load_config(self):
        """Загружает конфигурацию из YAML файла"""
        defaults = self._get_default_config()
        try:
            self.config_path = self._resolve_config_path()
            if self.config_path.exists():
                with open(self.config_path, 'r', encoding='utf-8') as f:
                    loaded = yaml.safe_load(f)
                if not isinstance(loaded, dict):
                    loaded = {}
                self.config_data = self._merge(defaults, loaded)
                logger.info(f"Конфигурация загружена: {self.config_path}")
            else:
                logger.warning(f"Файл конфигурации {self.config_path} не найден, используются значения по умолчанию")
                self.config_data = defaults
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Ошибка загрузки конфигурации: {e}")
            self.config_data = defaults

    def _merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Рекурсивно накладывает значения файла на значения по умолчанию."""
        result = dict(base)
        for key, value in override.items():
            if isinstance(value, dict) and isinstance(result.get(key), dict):
                result[key] = self._merge(result[key], value)
            else:
                result[key] = value
        return result

    def _set_nested(self, data: Dict[str, Any], dotted: str, value: Any) -> None:
        cur = data
        keys = dotted.split('.')
        for k in keys[:-1]:
            if k not in cur or not isinstance(cur[k], dict):
                cur[k] = {}
            cur = cur[k]
        cur[keys[-1]] = value

    def _apply_env_overrides(self) -> None:
        """Переопределяет конфиг значениями из ENV (LYRICS_ANALYSER_*)."""
        for key, val in os.environ.items():
            if not key.startswith(ENV_PREFIX) or key == ENV_PROFILE:
                continue
            # Вложенность разделяется двойным подчёркиванием
            dotted = key[len(ENV_PREFIX):].replace('__', '.').lower()
            parsed: Any = val
            if val.lower() in ('true', 'false'):
                parsed = (val.lower() == 'true')
            else:
                try:
                    parsed = float(val) if '.' in val else int(val)
                except ValueError:
                    parsed = val
            self._set_nested(self.config_data, dotted, parsed)
        if os.getenv(ENV_PROFILE):
            logger.info(f"Активирован профиль: {os.getenv(ENV_PROFILE)}")

    def _validate(self) -> None:
        """Проверяет диапазоны значений и подставляет безопасные."""
        limit = int(self.get('vocabulary.limit', 15))
        if limit < 1:
            logger.warning("vocabulary.limit < 1 — принудительно установлено в 1")
            self._set_nested(self.config_data, 'vocabulary.limit', 1)

        min_len = int(self.get('vocabulary.min_word_length', 2))
        if min_len < 2:
            logger.warning("vocabulary.min_word_length < 2 — принудительно установлено в 2")
            self._set_nested(self.config_data, 'vocabulary.min_word_length', 2)

        usefulness = float(self.get('vocabulary.default_usefulness', 0.5))
        if not 0.0 <= usefulness <= 1.0:
            logger.warning(f"vocabulary.default_usefulness={usefulness} вне диапазона [0, 1] — используется 0.5")
            self._set_nested(self.config_data, 'vocabulary.default_usefulness', 0.5)

    def _configure_logging_if_needed(self, force: bool = False) -> None:
        """Инициализирует/переинициализирует базовое логирование по config.

        Повторная конфигурация выполняется, если:
          - ранее не конфигурировалось, или
          - изменился уровень/формат/файл логирования, или
          - явно указан force=True
        """
        root = logging.getLogger()

        console_level_name = str(self.get_console_logging_level()).upper()
        file_level_name = str(self.get_file_logging_level()).upper()
        console_level = getattr(logging, console_level_name, logging.INFO)
        file_level = getattr(logging, file_level_name, logging.DEBUG)

        desired_fmt = self.get_logging_format()
        desired_file = self.get_logging_file() if self.is_logging_to_file_enabled() else None

        if getattr(root, "_lyrics_analyser_configured", False) and not force:
            if (
                getattr(root, "_lyrics_analyser_console_level", None) == console_level_name and
                getattr(root, "_lyrics_analyser_file_level", None) == file_level_name and
                getattr(root, "_lyrics_analyser_format", None) == desired_fmt and
                getattr(root, "_lyrics_analyser_file", None) == desired_file
            ):
                return

        handlers: List[logging.Handler] = []
        console = logging.StreamHandler()
        console.setLevel(console_level)
        console.setFormatter(logging.Formatter(desired_fmt))
        handlers.append(console)

        if desired_file:
            # Очищаем старые логи перед созданием нового
            self.cleanup_old_log_files()

            log_file = Path(desired_file)
            try:
                log_file.parent.mkdir(parents=True, exist_ok=True)
                fh = logging.FileHandler(log_file, encoding='utf-8')
                fh.setLevel(file_level)
                fh.setFormatter(logging.Formatter(desired_fmt))
                handlers.append(fh)
            except OSError as e:
                logger.debug(f"Не удалось открыть файл лога: {e}")

        root_level = min(console_level, file_level) if desired_file else console_level
        logging.basicConfig(level=root_level, handlers=handlers, format=desired_fmt, force=True)
        setattr(root, "_lyrics_analyser_configured", True)
        setattr(root, "_lyrics_analyser_console_level", console_level_name)
        setattr(root, "_lyrics_analyser_file_level", file_level_name)
        setattr(root, "_lyrics_analyser_format", desired_fmt)
        setattr(root, "_lyrics_analyser_file", desired_file)

    def _get_default_config(self) -> Dict[str, Any]:
        """Возвращает конфигурацию по умолчанию"""
        return {
            'analysis': {
                'default_language': 'es',
            },
            'vocabulary': {
                'limit': 15,
                'default_usefulness': 0.5,
                'min_word_length': 2,
            },
            'scoring': {
                # YAML с пересчитанной базовой статистикой; None - встроенные значения
                'baseline_file': None,
            },
            'files': {
                'results_folder': "data/results",
                'results_filename_prefix': "lyrics_analysis",
            },
            'excel': {
                'main_sheet_name': "Песни",
            },
            'logging': {
                'console_level': "INFO",
                'file_level': "DEBUG",
                'format': "%(asctime)s - %(levelname)s - %(message)s",
                'log_to_file': False,
                'max_log_files': 10,
            },
        }

    def get(self, key: str, default: Any = None) -> Any:
        """
        Получает значение конфигурации по ключу

        Args:
            key: Ключ в формате 'section.subsection.parameter'
            default: Значение по умолчанию

        Returns:
            Значение параметра или default
        """
        try:
            value = self.config_data
            for k in key.split('.'):
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default

    def get_env(self, key: str, default: Any = None) -> Any:
        """Получает значение переменной окружения с префиксом проекта"""
        return self.env_data.get(key, default)

    def get_default_language(self) -> str:
        """Язык анализа по умолчанию"""
        return str(self.get('analysis.default_language', 'es')).lower()

    def get_vocabulary_limit(self) -> int:
        """Число слов в списке ключевой лексики"""
        return int(self.get('vocabulary.limit', 15))

    def get_default_usefulness(self) -> float:
        """Полезность слов вне частотной таблицы"""
        return float(self.get('vocabulary.default_usefulness', 0.5))

    def get_min_word_length(self) -> int:
        """Минимальная длина слова для лексики"""
        return int(self.get('vocabulary.min_word_length', 2))

    def get_baseline_file(self) -> Optional[str]:
        """Путь к файлу базовой статистики (или None)"""
        return self.get('scoring.baseline_file')

    def get_results_folder(self) -> str:
        """Получает папку для результатов"""
        return self.get('files.results_folder', "data/results")

    def get_results_filename_prefix(self) -> str:
        """Получает префикс для файлов результатов"""
        return self.get('files.results_filename_prefix', "lyrics_analysis")

    def get_main_sheet_name(self) -> str:
        """Получает название основного листа Excel"""
        return self.get('excel.main_sheet_name', "Песни")

    def get_console_logging_level(self) -> str:
        """Получает уровень логирования для консоли"""
        # Поддержка краткого формата logging.level
        return self.get('logging.console_level', self.get('logging.level', "INFO"))

    def get_file_logging_level(self) -> str:
        """Получает уровень логирования для файла"""
        return self.get('logging.file_level', "DEBUG")

    def get_logging_format(self) -> str:
        """Получает формат логов"""
        return self.get('logging.format', "%(asctime)s - %(levelname)s - %(message)s")

    def is_logging_to_file_enabled(self) -> bool:
        """Проверяет, включено ли логирование в файл"""
        return bool(self.get('logging.log_to_file', False))

    def get_logging_file(self) -> str:
        """Генерирует имя файла лога для текущей сессии с временной меткой"""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        return f"logs/lyrics_analyser_{timestamp}.log"

    def get_max_log_files(self) -> int:
        """Получает максимальное количество файлов логов для хранения"""
        return int(self.get('logging.max_log_files', 10))

    def cleanup_old_log_files(self) -> None:
        """Удаляет старые файлы логов, оставляя только последние max_log_files"""
        logs_dir = Path("logs")
        if not logs_dir.exists():
            return

        log_files = list(logs_dir.glob("lyrics_analyser_*.log"))
        max_files = self.get_max_log_files()
        if len(log_files) <= max_files:
            return

        # Самые новые последними
        log_files.sort(key=lambda f: f.stat().st_mtime)
        for old_file in log_files[:-max_files]:
            try:
                old_file.unlink()
                logger.debug(f"Удален старый лог файл: {old_file}")
            except OSError as e:
                logger.debug(f"Не удалось удалить лог файл {old_file}: {e}")


# Глобальный экземпляр конфигурации
config = Config()
