"""
Реестр языковых пакетов.

Пакеты хранятся как YAML-файлы в languages/data/<код>.yaml и загружаются
лениво при первом обращении. Реестр является синглтоном, чтобы таблицы читались с
диска один раз на процесс.
"""

import re
import threading
import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

import yaml

from ..exceptions import LanguagePackError, UnsupportedLanguageError
from .pack import LanguagePack

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / "data"
# Коды встроенных пакетов: имя файла в data/, без путей
LANGUAGE_CODE = re.compile(r'^[a-z]{2,3}$')


class LanguagePackRegistry:
    """
    Централизованный реестр языковых пакетов.

    Обеспечивает:
    - Ленивую загрузку пакетов из встроенных YAML-файлов
    - Регистрацию дополнительных пакетов (новые языки без изменения кода)
    - Потокобезопасность загрузки
    """

    _instance: Optional['LanguagePackRegistry'] = None
    _lock = threading.Lock()

    def __new__(cls) -> 'LanguagePackRegistry':
        """Синглтон для избежания повторного чтения таблиц."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    instance = super().__new__(cls)
                    instance._packs = {}
                    instance._listeners = []
                    instance._data_dir = DATA_DIR
                    cls._instance = instance
        return cls._instance

    def get(self, code: str) -> LanguagePack:
        """
        Возвращает пакет языка, загружая его при первом обращении.

        Args:
            code: Двухбуквенный код языка ('es', 'fr')

        Raises:
            UnsupportedLanguageError: если пакета для языка нет
        """
        key = (code or '').strip().lower()
        pack = self._packs.get(key)
        if pack is not None:
            return pack
        with self._lock:
            pack = self._packs.get(key)
            if pack is None:
                if not LANGUAGE_CODE.match(key):
                    raise UnsupportedLanguageError(code, self.available())
                path = self._data_dir / f"{key}.yaml"
                if not path.exists():
                    raise UnsupportedLanguageError(code, self.available())
                pack = self._load_file(path)
                self._packs[key] = pack
                logger.info(f"Языковой пакет загружен: {pack.code} ({pack.name}) v{pack.version}")
        return pack

    def find(self, code: str) -> Optional[LanguagePack]:
        """Как get(), но возвращает None для неизвестного языка."""
        try:
            return self.get(code)
        except UnsupportedLanguageError:
            return None

    def register(self, pack: LanguagePack) -> None:
        """
        Регистрирует пакет (заменяет существующий с тем же кодом).

        После замены вызываются подписчики, чтобы кэши компонентов
        не продолжали работать со старым пакетом.
        """
        with self._lock:
            self._packs[pack.code] = pack
            listeners = list(self._listeners)
        for listener in listeners:
            listener(pack.code)
        logger.info(f"Зарегистрирован языковой пакет: {pack.code} v{pack.version}")

    def add_listener(self, listener: Callable[[str], None]) -> None:
        """Подписывает функцию(код языка) на регистрацию пакетов."""
        with self._lock:
            self._listeners.append(listener)

    def register_file(self, path: Union[str, Path]) -> LanguagePack:
        """Загружает пакет из произвольного YAML-файла и регистрирует его."""
        pack = self._load_file(Path(path))
        self.register(pack)
        return pack

    def available(self) -> List[str]:
        """Коды всех доступных языков (встроенных и зарегистрированных)."""
        builtin = {p.stem for p in self._data_dir.glob("*.yaml")}
        return sorted(builtin | set(self._packs))

    def _load_file(self, path: Path) -> LanguagePack:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                raw = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise LanguagePackError(f"Не удалось прочитать языковой пакет {path}: {e}") from e
        return LanguagePack.from_dict(raw)


def get_language_pack(code: str) -> LanguagePack:
    """Возвращает языковой пакет по коду."""
    return LanguagePackRegistry().get(code)


def available_languages() -> List[str]:
    """Возвращает коды поддерживаемых языков."""
    return LanguagePackRegistry().available()


def register_language_pack(pack_or_path: Union[LanguagePack, str, Path]) -> LanguagePack:
    """Регистрирует дополнительный языковой пакет (объект или путь к YAML)."""
    registry = LanguagePackRegistry()
    if isinstance(pack_or_path, LanguagePack):
        registry.register(pack_or_path)
        return pack_or_path
    return registry.register_file(pack_or_path)


def on_pack_registered(listener: Callable[[str], None]) -> None:
    """Подписка на регистрацию пакетов (например, для сброса кэшей по языку)."""
    LanguagePackRegistry().add_listener(listener)
