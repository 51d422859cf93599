"""Settings for document generation, read from the environment.

A ``.env`` file is loaded first (python-dotenv); explicit overrides, e.g. a
Flask ``app.config``, win over both.
"""
from __future__ import annotations
import os
from typing import Any, List, Mapping, Optional

from dotenv import load_dotenv

from .errors import ConfigurationError
from .models import Info, Server

DEFAULT_TITLE = 'API'
DEFAULT_VERSION = '0.1.0'
DEFAULT_SPEC_PATH = '/openapi.json'
DEFAULT_DOCS_PATH = '/docs'


def _get(overrides: Optional[Mapping[str, Any]], key: str, default: Any = None) -> Any:
    if overrides is not None and overrides.get(key) is not None:
        return overrides[key]
    value = os.getenv(key)
    return default if value is None else value


def parse_servers(raw: Any) -> List[str]:
    if not raw:
        return []
    if isinstance(raw, str):
        return [s.strip() for s in raw.split(',') if s.strip()]
    return [str(s) for s in raw]


class Settings:
    """Document settings, read from environment variables with defaults."""

    def __init__(self, overrides: Optional[Mapping[str, Any]] = None) -> None:
        self.title: str = str(_get(overrides, 'APISCRIBE_TITLE', DEFAULT_TITLE))
        self.version: str = str(_get(overrides, 'APISCRIBE_VERSION', DEFAULT_VERSION))
        self.description: Optional[str] = _get(overrides, 'APISCRIBE_DESCRIPTION')
        self.servers: List[str] = parse_servers(_get(overrides, 'APISCRIBE_SERVERS', ''))
        self.spec_path: str = str(_get(overrides, 'APISCRIBE_SPEC_PATH', DEFAULT_SPEC_PATH))
        # empty string disables the docs page
        self.docs_path: Optional[str] = _get(overrides, 'APISCRIBE_DOCS_PATH', DEFAULT_DOCS_PATH) or None
        indent_raw = _get(overrides, 'APISCRIBE_JSON_INDENT')
        try:
            self.json_indent: Optional[int] = int(indent_raw) if indent_raw not in (None, '') else None
        except ValueError:
            raise ConfigurationError('APISCRIBE_JSON_INDENT must be int')
        if not self.spec_path.startswith('/'):
            raise ConfigurationError('APISCRIBE_SPEC_PATH must start with /')

    def info(self) -> Info:
        return Info(title=self.title, version=self.version, description=self.description)

    def server_list(self) -> List[Server]:
        return [Server(url) for url in self.servers]


def load_settings(overrides: Optional[Mapping[str, Any]] = None, dotenv_path: Optional[str] = None) -> Settings:
    load_dotenv(dotenv_path)
    return Settings(overrides)


__all__ = ['Settings', 'load_settings', 'parse_servers']
