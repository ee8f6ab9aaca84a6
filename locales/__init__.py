"""
Строки бота на английском (en) и русском (ru).

Файлы {lang}.yaml читаются один раз при импорте, вложенные ключи
разворачиваются в плоский словарь: {'quiz': {'usage': ...}} → 'quiz.usage'.
Ключ, которого нет в ru.yaml, берётся из en.yaml.
"""

from pathlib import Path

import yaml

from config import get_logger, DEFAULT_LANGUAGE as _CONFIGURED_LANGUAGE

logger = get_logger(__name__)

SUPPORTED_LANGUAGES = ['en', 'ru']
DEFAULT_LANGUAGE = _CONFIGURED_LANGUAGE if _CONFIGURED_LANGUAGE in SUPPORTED_LANGUAGES else 'en'
FALLBACK_CHAIN = {'ru': 'en', 'en': 'en'}

_LOCALES_DIR = Path(__file__).parent


def _flatten(data: dict, prefix: str = "") -> dict[str, str]:
    flat = {}
    for key, value in data.items():
        name = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(_flatten(value, f"{name}."))
        else:
            flat[name] = str(value)
    return flat


def _read_catalog(lang: str) -> dict[str, str]:
    path = _LOCALES_DIR / f"{lang}.yaml"
    if not path.exists():
        logger.warning(f"Locale file not found: {path.name}")
        return {}
    with open(path, encoding='utf-8') as f:
        return _flatten(yaml.safe_load(f) or {})


_catalogs: dict[str, dict[str, str]] = {lang: _read_catalog(lang) for lang in SUPPORTED_LANGUAGES}


def _normalize(lang: str | None) -> str:
    code = (lang or "")[:2].lower()
    return code if code in SUPPORTED_LANGUAGES else DEFAULT_LANGUAGE


def t(key: str, lang: str = DEFAULT_LANGUAGE, **kwargs) -> str:
    """
    Строка по ключу с подстановкой kwargs.

    Example:
        t('quiz.reveal', 'en', n=2, text='cat')  # "✅ The correct answer is option 2: cat"

    Неизвестный ключ возвращается как есть.
    """
    lang = _normalize(lang)
    template = _catalogs[lang].get(key)
    if template is None and FALLBACK_CHAIN[lang] != lang:
        template = _catalogs[FALLBACK_CHAIN[lang]].get(key)
    if template is None:
        return key

    if not kwargs:
        return template
    try:
        return template.format(**kwargs)
    except (KeyError, IndexError):
        logger.warning(f"Bad placeholders for '{key}' ({lang})")
        return template


def detect_language(language_code: str | None) -> str:
    """Язык пользователя по language_code из Telegram (ru-RU → ru, неизвестный → по умолчанию)"""
    return _normalize(language_code)
