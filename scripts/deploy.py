#!/usr/bin/python3

import click
from ape.cli import ConnectedProviderCommand, network_option

from deployment.options import (
    auto_option,
    config_option,
    confirmations_option,
    deploy_scripts_dir_option,
    tags_option,
)
from deployment.params import Deployer
from deployment.runner import load_deploy_scripts, run_deploy_scripts, select_deploy_scripts


@click.command(cls=ConnectedProviderCommand, name="deploy")
@network_option(required=True)
@config_option
@tags_option
@deploy_scripts_dir_option
@confirmations_option
@auto_option
def cli(network, config_filepath, tags, deploy_scripts_dir, confirmations, auto):
    """Run the deploy scripts, optionally filtered by tag."""
    click.echo(f"Connected to {network.name} network.")

    scripts = select_deploy_scripts(load_deploy_scripts(deploy_scripts_dir), tags=tags)
    click.echo(f"Deploy scripts: {', '.join(script.name for script in scripts)}")

    deployer = Deployer.from_yaml(
        filepath=config_filepath, autosign=auto, confirmations=confirmations
    )
    results = run_deploy_scripts(deployer=deployer, scripts=scripts)

    for name, completed in results.items():
        status, colour = ("done", "green") if completed else ("incomplete", "yellow")
        click.secho(f"{name}: {status}", fg=colour)


if __name__ == "__main__":
    cli()
