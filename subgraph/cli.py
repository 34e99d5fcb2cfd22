import logging

import click
import uvicorn

DEFAULT_HOST = '0.0.0.0'
DEFAULT_PORT = 4001

LOCAL_HOSTS = ('0.0.0.0', '127.0.0.1', '::', '::1')


class Server(uvicorn.Server):
    async def startup(self, sockets=None) -> None:
        await super().startup(sockets=sockets)
        if self.started:
            host = 'localhost' if self.config.host in LOCAL_HOSTS else self.config.host
            click.echo(f'🚀 Server ready at http://{host}:{self.config.port}')


@click.command()
def main():
    """Serve the accounts subgraph on port 4001."""
    logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    config = uvicorn.Config('subgraph.accounts:app', host=DEFAULT_HOST, port=DEFAULT_PORT)
    Server(config).run()
