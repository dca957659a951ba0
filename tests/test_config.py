import logging

import pytest

from fastdomaincheck.config import Settings, configure_logging, env_flag, load_settings
from fastdomaincheck.errors import ConfigError


def test_defaults_without_config_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    settings = load_settings()
    assert settings == Settings()
    assert settings.request_delay == 0.3
    assert settings.whois_timeout == 10.0
    assert settings.whois_max_follow == 5
    assert settings.burst == 1


def test_reads_default_path(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / 'config').mkdir()
    (tmp_path / 'config' / 'config.yaml').write_text("request_delay: 1.0\nwhois_timeout: 5\n")
    settings = load_settings()
    assert settings.request_delay == 1.0
    assert settings.whois_timeout == 5


def test_explicit_missing_file(tmp_path):
    with pytest.raises(ConfigError, match='not found'):
        load_settings(str(tmp_path / 'nope.yaml'))


def test_unknown_key(tmp_path):
    path = tmp_path / 'config.yaml'
    path.write_text("whois_timout: 3\n")
    with pytest.raises(ConfigError, match='whois_timout'):
        load_settings(str(path))


def test_malformed_yaml(tmp_path):
    path = tmp_path / 'config.yaml'
    path.write_text("request_delay: [1,\n")
    with pytest.raises(ConfigError):
        load_settings(str(path))


def test_environment_overrides(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv('FASTDOMAINCHECK_REQUEST_DELAY', '0')
    monkeypatch.setenv('FASTDOMAINCHECK_WHOIS_TIMEOUT', '4.5')
    monkeypatch.setenv('DEBUG_WHOIS', '1')
    settings = load_settings()
    assert settings.request_delay == 0.0
    assert settings.whois_timeout == 4.5
    assert settings.debug_whois is True


def test_bad_numeric_environment(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv('FASTDOMAINCHECK_REQUEST_DELAY', 'soon')
    with pytest.raises(ConfigError):
        load_settings()


@pytest.mark.parametrize('value,expected', [
    ('1', True), ('true', True), ('yes', True),
    ('', False), ('0', False), ('false', False), ('OFF', False),
])
def test_env_flag(monkeypatch, value, expected):
    monkeypatch.setenv('DEBUG_WHOIS', value)
    assert env_flag('DEBUG_WHOIS') is expected


def test_configure_logging_levels():
    root = logging.getLogger()
    saved = root.handlers[:], root.level
    try:
        configure_logging(verbose=False, debug_whois=True)
        assert logging.getLogger('fastdomaincheck').level == logging.WARNING
        assert logging.getLogger('fastdomaincheck.diagnostics').level == logging.DEBUG
        configure_logging(verbose=True)
        assert logging.getLogger('fastdomaincheck').level == logging.DEBUG
        assert logging.getLogger('fastdomaincheck.diagnostics').level == logging.WARNING
    finally:
        root.handlers[:] = saved[0]
        root.setLevel(saved[1])
        logging.getLogger('fastdomaincheck').setLevel(logging.NOTSET)
        logging.getLogger('fastdomaincheck.diagnostics').setLevel(logging.NOTSET)


@pytest.mark.parametrize('text,key', [
    ("request_delay: abc\n", 'request_delay'),
    ("request_delay: -1\n", 'request_delay'),
    ("whois_timeout: 0\n", 'whois_timeout'),
    ("whois_max_follow: 2.5\n", 'whois_max_follow'),
    ("burst: 0\n", 'burst'),
    ("dns_timeout: fast\n", 'dns_timeout'),
    ("debug_whois: maybe\n", 'debug_whois'),
])
def test_bad_values_are_config_errors(tmp_path, text, key):
    path = tmp_path / 'config.yaml'
    path.write_text(text)
    with pytest.raises(ConfigError, match=key):
        load_settings(str(path))


def test_negative_environment_delay(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv('FASTDOMAINCHECK_REQUEST_DELAY', '-1')
    with pytest.raises(ConfigError, match='request_delay'):
        load_settings()
