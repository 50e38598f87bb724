"""Command‑line interface for the statclust application."""

import sys

import click

from statclust.config.loader import load_config
from statclust.core.app import App
from statclust.utils.logging_config import setup_logging


@click.command()
@click.option(
    '--config', '-c', 'config_path',
    required=True,
    type=click.Path(exists=True),
    help='Path to the JSON config file'
)
def main(config_path):
    """Load the configuration and run the cluster analysis."""
    cfg = load_config(config_path)
    setup_logging(cfg.logging.level, cfg.logging.filename, cfg.logging.fmt)
    result = App(cfg).run()
    for err in result.errors:
        click.echo(f'Error: {err}', err=True)
    sys.exit(0 if result.ok else 1)


if __name__ == '__main__':
    main()
