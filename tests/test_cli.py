import json

import pytest
from click.testing import CliRunner

from fastdomaincheck import cli as cli_module
from fastdomaincheck.checkers import AvailabilityService
from fastdomaincheck.cli import cli

REGISTERED = "Domain Name: EXAMPLE.COM\nRegistrar: Example Inc\n"


@pytest.fixture
def runner(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(cli_module, 'configure_logging', lambda **kwargs: None)
    return CliRunner()


@pytest.fixture
def fake_service(monkeypatch, table, whois, dns_checker, limiter):
    whois.responses['example.com'] = REGISTERED
    whois.responses['free-name.com'] = 'No match for domain "FREE-NAME.COM".'
    service = AvailabilityService(table, whois, dns_checker, limiter=limiter)
    monkeypatch.setattr(
        cli_module.AvailabilityService, 'from_settings',
        classmethod(lambda cls, settings, **kw: service),
    )
    return service


def test_check_json(runner, fake_service):
    result = runner.invoke(cli, ['check', 'example.com', 'free-name.com', '--json'])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == [
        {'domain': 'example.com', 'available': False, 'method': 'whois'},
        {'domain': 'free-name.com', 'available': True, 'method': 'whois'},
    ]


def test_check_table(runner, fake_service):
    result = runner.invoke(cli, ['check', 'example.com', 'free-name.com', '-bad-.com'])
    assert result.exit_code == 0, result.output
    assert 'free-name.com' in result.output
    assert 'Invalid domain format' in result.output
    assert '1 of 3 domains available' in result.output


def test_check_reads_file(runner, fake_service, tmp_path):
    (tmp_path / 'domains.txt').write_text("# candidates\nexample.com\n\nfree-name.com\n")
    result = runner.invoke(cli, ['check', '--file', 'domains.txt', '--json'])
    assert result.exit_code == 0, result.output
    assert [r['domain'] for r in json.loads(result.output)] == ['example.com', 'free-name.com']


def test_check_reads_json_file(runner, fake_service, tmp_path):
    (tmp_path / 'domains.json').write_text(json.dumps(['example.com']))
    result = runner.invoke(cli, ['check', '-f', 'domains.json', '--json'])
    assert json.loads(result.output)[0]['domain'] == 'example.com'


def test_check_without_domains(runner, fake_service):
    result = runner.invoke(cli, ['check'])
    assert result.exit_code == 1


def test_check_too_many(runner, fake_service):
    result = runner.invoke(cli, ['check'] + [f'd{i}.com' for i in range(51)])
    assert result.exit_code == 1


def test_delay_option_reaches_settings(runner, monkeypatch):
    seen = {}

    def fake_from_settings(cls, settings, **kw):
        seen['delay'] = settings.request_delay
        raise SystemExit(0)

    monkeypatch.setattr(cli_module.AvailabilityService, 'from_settings', classmethod(fake_from_settings))
    runner.invoke(cli, ['check', 'example.com', '--delay', '0'])
    assert seen['delay'] == 0.0


def test_bad_config_file(runner):
    result = runner.invoke(cli, ['--config', 'missing.yaml', 'check', 'example.com'])
    assert result.exit_code == 2


@pytest.mark.parametrize('domain,expected', [
    ('example.com', 'whois.verisign-grs.com'),
    ('пример.рф', 'whois.tcinet.ru'),
    ('example.zz', 'none configured'),
])
def test_whois_server(runner, domain, expected):
    result = runner.invoke(cli, ['whois-server', domain])
    assert result.exit_code == 0, result.output
    assert expected in result.output


def test_whois_server_invalid(runner):
    result = runner.invoke(cli, ['whois-server', 'localhost'])
    assert result.exit_code == 1


def test_bad_config_value(runner, tmp_path):
    (tmp_path / 'bad.yaml').write_text("request_delay: abc\n")
    result = runner.invoke(cli, ['--config', 'bad.yaml', 'check', 'example.com'])
    assert result.exit_code == 2
    assert 'request_delay' in result.output


def test_negative_delay_rejected(runner, fake_service):
    result = runner.invoke(cli, ['check', 'example.com', '--delay', '-1'])
    assert result.exit_code == 2
    assert fake_service.whois_client.calls == []
