#!/usr/bin/python3
from pathlib import Path

import click

from deployment.legacy import import_hardhat_deployments


@click.command()
@click.option(
    "--directory",
    "-d",
    help="hardhat-deploy network directory, e.g. deployments/localhost",
    type=click.Path(file_okay=False, exists=True, path_type=Path),
    required=True,
)
@click.option(
    "--output-registry",
    "-o",
    help="Filepath of output registry file",
    type=click.Path(dir_okay=False, path_type=Path),
    required=True,
)
@click.option(
    "--chain-id",
    help="Chain ID of the deployments; read from the .chainId file when omitted.",
    type=int,
    required=False,
)
def cli(directory, output_registry, chain_id):
    """Import hardhat-deploy deployments into a registry."""
    import_hardhat_deployments(
        directory=directory,
        output_filepath=output_registry,
        chain_id=chain_id,
    )


if __name__ == "__main__":
    cli()
