from pathlib import Path

import click

from deployment.constants import DEPLOY_CONFIGS_DIR, DEPLOY_SCRIPTS_DIR
from deployment.types import MinInt

DEFAULT_CONFIG_FILEPATH = DEPLOY_CONFIGS_DIR / "artspark.yml"


config_option = click.option(
    "--config",
    "-c",
    "config_filepath",
    help="Filepath of the deployment config YAML.",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    default=DEFAULT_CONFIG_FILEPATH,
    show_default=True,
)

tags_option = click.option(
    "--tags",
    "-t",
    help="Only run deploy scripts with these tags (and their dependencies).",
    multiple=True,
)

deploy_scripts_dir_option = click.option(
    "--deploy-scripts",
    "deploy_scripts_dir",
    help="Directory of deploy scripts.",
    type=click.Path(file_okay=False, exists=True, path_type=Path),
    default=DEPLOY_SCRIPTS_DIR,
    show_default=True,
)

confirmations_option = click.option(
    "--confirmations",
    help="Number of block confirmations to wait for after each deployment.",
    type=MinInt(0),
    required=False,
)

auto_option = click.option(
    "--auto",
    help="Automatically sign transactions.",
    is_flag=True,
)

registry_option = click.option(
    "--registry",
    "-r",
    "registry_filepath",
    help="Filepath of a registry file.",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    required=True,
)
