"""
国际化：gettext 目录 + ContextVar 保存当前请求语言

目录位于 locales/<lang>/LC_MESSAGES/messages.mo；缺少目录或条目时使用调用方给出的默认文本。
"""
from __future__ import annotations

import gettext
from contextvars import ContextVar
from pathlib import Path
from typing import Optional

import structlog

from domain.common.money import DEFAULT_LOCALE, normalize_locale

LOCALE_DIR = Path(__file__).resolve().parent.parent / "locales"

_current_locale: ContextVar[str] = ContextVar("current_locale", default=DEFAULT_LOCALE)
_translators: dict[str, gettext.NullTranslations] = {}
_logger = structlog.get_logger(__name__)


def set_locale(locale: Optional[str]) -> None:
    _current_locale.set(normalize_locale(locale))


def get_locale() -> str:
    return _current_locale.get()


def _get_translator(locale: str) -> gettext.NullTranslations:
    tr = _translators.get(locale)
    if tr is None:
        tr = gettext.translation(
            domain="messages",
            localedir=str(LOCALE_DIR),
            languages=[locale],
            fallback=True,
        )
        _translators[locale] = tr
    return tr


def t(msgid: str, default: Optional[str] = None, **params) -> str:
    """Translate msgid using current locale and format with params.

    If the catalog has no entry for msgid, `default` (or msgid itself) is used.
    """
    text = _get_translator(get_locale()).gettext(msgid)
    if text == msgid and default is not None:
        text = default
    if not params:
        return text
    try:
        return text.format(**params)
    except (KeyError, IndexError, ValueError) as exc:
        _logger.warning("i18n_format_failed", msgid=msgid, params=list(params.keys()), error=str(exc))
        return text
