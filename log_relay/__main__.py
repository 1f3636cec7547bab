"""
Allow running Log Relay as a module: python -m log_relay
"""
import os

import click
from log_relay.api import run_server


@click.command()
@click.option('--host', default='0.0.0.0', help='Host to bind to')
@click.option('--port', default=8080, help='Port to bind to')
@click.option(
    '--log-level',
    type=click.Choice(['debug', 'info', 'warn', 'error'], case_sensitive=False),
    default=None,
    help='Minimum level replayed to the console (overrides LOG_LEVEL)',
)
def main(host: str, port: int, log_level: str):
    """Run the Log Relay server"""
    if log_level:
        os.environ['LOG_LEVEL'] = log_level.lower()
    click.echo(f'Starting Log Relay on {host}:{port}')
    click.echo(f'Clients should POST to http://localhost:{port}/api/log')
    run_server(host=host, port=port)


if __name__ == '__main__':
    main()
