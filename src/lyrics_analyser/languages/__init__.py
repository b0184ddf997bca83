"""
Языковые пакеты: стоп-слова, частоты, правила разметки, времена,
идиомы и спряжения для каждого поддерживаемого языка.
"""

from .pack import LanguagePack, PosRule, TenseRule, LemmaRule, Paradigm
from .registry import (
    LanguagePackRegistry,
    get_language_pack,
    available_languages,
    register_language_pack,
    on_pack_registered,
)

__all__ = [
    'LanguagePack',
    'PosRule',
    'TenseRule',
    'LemmaRule',
    'Paradigm',
    'LanguagePackRegistry',
    'get_language_pack',
    'available_languages',
    'register_language_pack',
    'on_pack_registered',
]
