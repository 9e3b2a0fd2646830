import importlib.util
import typing
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Dict, List, NamedTuple, Sequence

if TYPE_CHECKING:
    from deployment.params import Deployer

DEPLOY_FUNCTION_NAME = "deploy"
TAGS_ATTRIBUTE = "TAGS"
DEPENDENCIES_ATTRIBUTE = "DEPENDENCIES"


class DeployScriptError(ValueError):
    pass


class DeployScript(NamedTuple):
    """A deploy script module: a `deploy(deployer)` function plus its tags."""

    name: str
    filepath: Path
    deploy: Callable
    tags: List[str]
    dependencies: List[str]


def load_deploy_script(filepath: Path) -> DeployScript:
    """Loads a single deploy script; file names may start with digits."""
    name = filepath.stem
    spec = importlib.util.spec_from_file_location(f"deploy_script_{name}", filepath)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    deploy = getattr(module, DEPLOY_FUNCTION_NAME, None)
    if not callable(deploy):
        raise DeployScriptError(
            f"Deploy script {filepath} has no '{DEPLOY_FUNCTION_NAME}' function."
        )

    return DeployScript(
        name=name,
        filepath=filepath,
        deploy=deploy,
        tags=list(getattr(module, TAGS_ATTRIBUTE, [])),
        dependencies=list(getattr(module, DEPENDENCIES_ATTRIBUTE, [])),
    )


def load_deploy_scripts(directory: Path) -> List[DeployScript]:
    """Loads all deploy scripts in a directory, in file name order."""
    if not directory.is_dir():
        raise DeployScriptError(f"Deploy scripts directory {directory} does not exist.")
    filepaths = sorted(p for p in directory.glob("*.py") if not p.name.startswith("_"))
    return [load_deploy_script(filepath) for filepath in filepaths]


def select_deploy_scripts(
    scripts: Sequence[DeployScript], tags: typing.Optional[Sequence[str]] = None
) -> List[DeployScript]:
    """
    Returns the scripts to run for the given tags (all scripts when no tags are given).
    Dependencies of a selected script are placed before it.
    """
    by_tag: Dict[str, List[DeployScript]] = dict()
    for script in scripts:
        for tag in script.tags:
            by_tag.setdefault(tag, []).append(script)

    if tags:
        unknown = [tag for tag in tags if tag not in by_tag]
        if unknown:
            raise DeployScriptError(f"No deploy scripts found with tag(s) {', '.join(unknown)}.")
        roots = [s for s in scripts if any(tag in s.tags for tag in tags)]
    else:
        roots = list(scripts)

    ordered: List[DeployScript] = list()
    visiting: List[str] = list()

    def visit(script: DeployScript) -> None:
        if script in ordered:
            return
        if script.name in visiting:
            cycle = " -> ".join(visiting + [script.name])
            raise DeployScriptError(f"Circular deploy script dependency: {cycle}")
        visiting.append(script.name)
        for dependency in script.dependencies:
            if dependency not in by_tag:
                raise DeployScriptError(
                    f"Deploy script {script.name} depends on unknown tag '{dependency}'."
                )
            for dependency_script in by_tag[dependency]:
                visit(dependency_script)
        visiting.pop()
        ordered.append(script)

    for script in roots:
        visit(script)
    return ordered


def run_deploy_scripts(
    deployer: "Deployer", scripts: Sequence[DeployScript]
) -> Dict[str, bool]:
    """Runs deploy scripts in order; any failure propagates and stops the run."""
    results = dict()
    for script in scripts:
        print(f"\n(i) Running deploy script {script.name} (tags: {', '.join(script.tags)})")
        completed = bool(script.deploy(deployer))
        if not completed:
            print(f"(i) Deploy script {script.name} did not report completion.")
        results[script.name] = completed
    return results
