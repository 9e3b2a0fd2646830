import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from ape import chain, networks, project
from ape.contracts import ContractContainer
from ape.utils import EMPTY_BYTES32
from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address

from deployment.constants import (
    ARTIFACTS_DIR,
    EIP1967_ADMIN_SLOT,
    EIP1967_IMPLEMENTATION_SLOT,
    OZ_DEPENDENCY_NAME,
    OZ_DEPENDENCY_VERSION,
)
from deployment.networks import get_chain_id, is_local_network


def _load_yaml(filepath: Path) -> dict:
    """Loads a YAML file."""
    with open(filepath, "r") as file:
        return yaml.safe_load(file)


def _load_json(filepath: Path) -> dict:
    """Loads a JSON file."""
    with open(filepath, "r") as file:
        return json.load(file)


def get_artifact_filepath(config: Dict) -> Path:
    """Returns the filepath of the artifact file."""
    artifact_config = config.get("artifacts", {})
    artifact_dir = Path(artifact_config.get("dir", ARTIFACTS_DIR))
    filename = artifact_config.get("filename")
    if not filename:
        raise ValueError("artifact filename is not set in params file.")
    return artifact_dir / filename


def validate_config(config: Dict) -> Path:
    """
    Checks the deployment config against the connected network
    and returns the filepath of the registry to write to.
    """
    print("Validating deployment config YAML...")

    deployment = config.get("deployment")
    if not deployment:
        raise ValueError("deployment is not set in config file.")

    config_chain_id = deployment.get("chain_id")
    if not config_chain_id:
        raise ValueError("chain_id is not set in config file.")

    named_accounts = config.get("named_accounts")
    if not named_accounts or "deployer" not in named_accounts:
        raise ValueError("Config file missing 'named_accounts.deployer' field.")

    config_chain_id = int(config_chain_id)
    chain_mismatch = config_chain_id != get_chain_id()
    if chain_mismatch and not is_local_network():
        raise ValueError(
            f"chain_id in config file ({config_chain_id}) does not match "
            f"chain_id of current network ({get_chain_id()})."
        )

    return get_artifact_filepath(config=config)


def check_infura_plugin() -> None:
    """Checks that the ape-infura plugin is installed."""
    if is_local_network():
        return  # unnecessary for local deployment
    if networks.provider.name != "infura":
        return  # unnecessary when using a provider different than infura
    try:
        import ape_infura  # noqa: F401
        from ape_infura.provider import _ENVIRONMENT_VARIABLE_NAMES  # noqa: F401
    except ImportError:
        raise ImportError("Please install the ape-infura plugin to use this script.")
    for envvar in _ENVIRONMENT_VARIABLE_NAMES:
        api_key = os.environ.get(envvar)
        if api_key:
            break
    else:
        raise ValueError(
            f"No Infura API key found in "
            f"environment variables: {', '.join(_ENVIRONMENT_VARIABLE_NAMES)}"
        )


def check_plugins() -> None:
    print("Checking plugins...")
    check_infura_plugin()


def _get_dependency_contract_container(contract: str) -> ContractContainer:
    for dependency_name, dependency_versions in project.dependencies.items():
        if len(dependency_versions) > 1:
            raise ValueError(f"Ambiguous {dependency_name} dependency for {contract}")
        try:
            dependency_api = list(dependency_versions.values())[0]
            contract_container = getattr(dependency_api, contract)
            return contract_container
        except AttributeError:
            continue
    raise ValueError(f"No contract found with name '{contract}'.")


def get_contract_container(contract: str) -> ContractContainer:
    try:
        contract_container = getattr(project, contract)
    except AttributeError:
        # not in root project; check dependencies
        contract_container = _get_dependency_contract_container(contract)

    return contract_container


def oz_dependency():
    """Returns the OpenZeppelin dependency project."""
    return project.dependencies[OZ_DEPENDENCY_NAME][OZ_DEPENDENCY_VERSION]


def _bytecode(bytecode: Any) -> Optional[str]:
    if bytecode is None or bytecode.bytecode is None:
        return None
    return bytecode.bytecode


def get_extended_artifact(contract: str) -> Dict[str, Any]:
    """
    Returns the ABI, bytecode and natspec of a compiled contract,
    as needed to rebuild a contract instance from a registry entry.
    """
    contract_type = get_contract_container(contract).contract_type
    abi = [entry.model_dump(mode="json", by_alias=True) for entry in contract_type.abi]
    return {
        "contract_name": contract_type.name,
        "source_id": contract_type.source_id,
        "abi": abi,
        "bytecode": _bytecode(contract_type.deployment_bytecode),
        "deployed_bytecode": _bytecode(contract_type.runtime_bytecode),
        "devdoc": contract_type.devdoc or {},
        "userdoc": contract_type.userdoc or {},
    }


def _read_address_slot(address: ChecksumAddress, slot: int) -> ChecksumAddress:
    value = chain.provider.get_storage(address, slot)
    if value == EMPTY_BYTES32:
        raise ValueError(
            f"Slot {hex(slot)} for contract at {address} is empty. "
            "Are you sure this is an EIP1967-compatible proxy?"
        )
    return to_checksum_address(value[-20:])


def get_proxy_implementation(proxy_address: ChecksumAddress) -> ChecksumAddress:
    """Returns the implementation address stored in an EIP1967 proxy."""
    return _read_address_slot(proxy_address, EIP1967_IMPLEMENTATION_SLOT)


def get_proxy_admin(proxy_address: ChecksumAddress) -> ChecksumAddress:
    """Returns the admin address stored in an EIP1967 proxy."""
    return _read_address_slot(proxy_address, EIP1967_ADMIN_SLOT)


def get_chain_name(chain_id: int) -> str:
    """Returns the name of the chain given its chain ID."""
    for ecosystem_name, ecosystem in networks.ecosystems.items():
        for network_name, network in ecosystem.networks.items():
            if network.chain_id == chain_id:
                return f"{ecosystem_name} {network_name}"
    raise ValueError(f"Chain ID {chain_id} not found in networks.")


def sorted_abi(abi: List[Dict]) -> List[Dict]:
    """Returns ABI entries in the order used by registry files."""
    return sorted(abi, key=lambda d: (d["type"], d.get("name", "")))
