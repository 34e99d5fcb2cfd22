import asyncio

import pytest
import uvicorn
from click.testing import CliRunner

from subgraph import cli


def test_help():
    result = CliRunner().invoke(cli.main, ['--help'])
    assert result.exit_code == 0
    assert '4001' in result.output


def test_main_serves_on_fixed_port(monkeypatch):
    configs = []
    monkeypatch.setattr(cli.Server, 'run', lambda self, sockets=None: configs.append(self.config))

    result = CliRunner().invoke(cli.main, [])

    assert result.exit_code == 0
    assert configs[0].port == 4001
    assert configs[0].host == '0.0.0.0'
    assert configs[0].app == 'subgraph.accounts:app'


def test_main_has_no_options():
    result = CliRunner().invoke(cli.main, ['--port', '5001'])
    assert result.exit_code != 0
    assert 'No such option' in result.output


@pytest.mark.parametrize('host', ['127.0.0.1', '0.0.0.0', '::'])
def test_ready_line(monkeypatch, capsys, host):
    async def startup(self, sockets=None):
        self.started = True

    monkeypatch.setattr(uvicorn.Server, 'startup', startup)
    server = cli.Server(uvicorn.Config('subgraph.accounts:app', host=host, port=4001))

    asyncio.run(server.startup())

    assert '🚀 Server ready at http://localhost:4001' in capsys.readouterr().out
