#!/usr/bin/python3

from itertools import groupby
from typing import List

import click
from ape.cli import ConnectedProviderCommand

from deployment.options import registry_option
from deployment.registry import RegistryEntry, read_registry
from deployment.utils import get_chain_name


def _format_chain_name(chain_name: str) -> str:
    """Format the chain name to capitalize each word and join with slashes."""
    return "/".join(word.capitalize() for word in chain_name.split())


def _display_registry_entries(entries: List[RegistryEntry]) -> None:
    """Display registry entries grouped by chain ID."""
    grouped_entries = groupby(entries, key=lambda e: e.chain_id)
    for chain_id, chain_entries in grouped_entries:
        try:
            chain_name = _format_chain_name(get_chain_name(chain_id))
        except ValueError:
            chain_name = f"Chain {chain_id}"
        click.secho(f"    {chain_name}", fg="yellow")

        for index, entry in enumerate(chain_entries, start=1):
            line = f"        {index}. {entry.name} {entry.address}"
            if entry.implementation:
                line += f" (implementation {entry.implementation})"
            click.secho(line, fg="cyan")


@click.command(cls=ConnectedProviderCommand, name="list-contracts")
@registry_option
def cli(registry_filepath):
    """List all contracts in a registry."""
    click.secho(f"\n{registry_filepath}", fg="green")
    _display_registry_entries(read_registry(filepath=registry_filepath))


if __name__ == "__main__":
    cli()
