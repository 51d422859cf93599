import os
import pytest
from apiscribe import DocumentBuilder
from apiscribe.config import Settings, load_settings, parse_servers
from apiscribe.errors import ConfigurationError
from apiscribe.models import Info, Server

ENV_KEYS = [
    'APISCRIBE_TITLE', 'APISCRIBE_VERSION', 'APISCRIBE_DESCRIPTION', 'APISCRIBE_SERVERS',
    'APISCRIBE_SPEC_PATH', 'APISCRIBE_DOCS_PATH', 'APISCRIBE_JSON_INDENT',
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults():
    s = Settings()
    assert s.title == 'API'
    assert s.version == '0.1.0'
    assert s.description is None
    assert s.servers == []
    assert s.spec_path == '/openapi.json'
    assert s.docs_path == '/docs'
    assert s.json_indent is None


def test_environment_values(monkeypatch):
    monkeypatch.setenv('APISCRIBE_TITLE', 'Orders')
    monkeypatch.setenv('APISCRIBE_SERVERS', 'https://a.example.com, https://b.example.com')
    monkeypatch.setenv('APISCRIBE_JSON_INDENT', '2')
    s = Settings()
    assert s.title == 'Orders'
    assert s.servers == ['https://a.example.com', 'https://b.example.com']
    assert s.json_indent == 2


def test_overrides_win_over_environment(monkeypatch):
    monkeypatch.setenv('APISCRIBE_TITLE', 'FromEnv')
    s = Settings({'APISCRIBE_TITLE': 'FromConfig', 'APISCRIBE_SERVERS': ['https://c.example.com']})
    assert s.title == 'FromConfig'
    assert s.servers == ['https://c.example.com']


def test_empty_docs_path_disables_docs():
    assert Settings({'APISCRIBE_DOCS_PATH': ''}).docs_path is None


def test_invalid_values_rejected():
    with pytest.raises(ConfigurationError):
        Settings({'APISCRIBE_JSON_INDENT': 'wide'})
    with pytest.raises(ConfigurationError):
        Settings({'APISCRIBE_SPEC_PATH': 'openapi.json'})


def test_parse_servers():
    assert parse_servers('') == []
    assert parse_servers(None) == []
    assert parse_servers('x,, y ') == ['x', 'y']


def test_load_settings_reads_dotenv(tmp_path):
    env_file = tmp_path / '.env'
    env_file.write_text('APISCRIBE_VERSION=9.9.9\n')
    try:
        assert load_settings(dotenv_path=str(env_file)).version == '9.9.9'
        # explicit overrides still win over values loaded from the file
        assert load_settings({'APISCRIBE_VERSION': '1.0'}, dotenv_path=str(env_file)).version == '1.0'
    finally:
        os.environ.pop('APISCRIBE_VERSION', None)


def test_builder_from_settings():
    s = Settings({'APISCRIBE_TITLE': 'T', 'APISCRIBE_DESCRIPTION': 'd', 'APISCRIBE_SERVERS': 'https://x'})
    b = DocumentBuilder.from_settings(s)
    assert b.info == Info(title='T', version='0.1.0', description='d')
    assert b.servers == [Server('https://x')]
