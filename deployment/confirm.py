from collections import OrderedDict

from ape.utils import ZERO_ADDRESS


def _abort() -> None:
    print("Aborting deployment!")
    exit(-1)


def _ask(question: str) -> None:
    """Aborts the deployment unless the user agrees."""
    answer = input(f"{question} Y/N? ")
    if answer.lower().strip() == "n":
        _abort()


def _continue() -> None:
    """Asks the user to continue."""
    _ask("Continue")


def _confirm_deployment(contract_name: str) -> None:
    """Asks the user to confirm the deployment of a single contract."""
    _ask(f"Deploy {contract_name}")


def _confirm_resolution(
    resolved_params: OrderedDict, contract_name: str, kind: str = "Constructor parameters"
) -> None:
    """Asks the user to confirm the resolved parameters for a single contract."""
    if len(resolved_params) == 0:
        print(f"\n(i) No {kind.lower()} for {contract_name}")
        _confirm_deployment(contract_name)
        return

    print(f"\n{kind} for {contract_name}")
    contains_zero_address = False
    for name, resolved_value in resolved_params.items():
        print(f"\t{name}={resolved_value}")
        if not contains_zero_address:
            contains_zero_address = resolved_value == ZERO_ADDRESS
    _confirm_deployment(contract_name)
    if contains_zero_address:
        _ask("Zero Address detected for deployment parameter; Continue?")
