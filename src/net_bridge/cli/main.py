"""
net-bridge CLI: `net-bridge` command.

Runs the bridge in the foreground on the fixed IPC addresses until
interrupted.
"""

import asyncio

import click
from rich.console import Console

from net_bridge import __version__
from net_bridge.bridge import run_bridge
from net_bridge.errors import TransportError
from net_bridge.log import setup_logging

console = Console(stderr=True)


def _run(coro):
    return asyncio.run(coro)


@click.command()
@click.version_option(__version__)
@click.option("-v", "--verbose", is_flag=True, help="Log dropped datagrams and other debug detail.")
def main(verbose: bool):
    """Relay UDP datagrams from the local IPC peer to WebSocket and HTTP."""
    setup_logging(verbose)
    try:
        _run(run_bridge())
    except TransportError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)
    except KeyboardInterrupt:
        console.print("[dim]Stopped.[/dim]")


if __name__ == "__main__":
    main()
