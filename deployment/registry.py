import json
from collections import defaultdict
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional

from ape.contracts import ContractInstance
from eth_typing import ABI, ChecksumAddress

from deployment.utils import _load_json, get_contract_container, sorted_abi

ChainId = int
ContractName = str


STANDARD_REGISTRY_JSON_FORMAT = {"indent": 4, "separators": (",", ": ")}


class RegistryEntry(NamedTuple):
    """Represents a single deployment record in a contract registry."""

    chain_id: ChainId
    name: ContractName
    address: ChecksumAddress
    abi: ABI
    tx_hash: Optional[str] = None
    block_number: Optional[int] = None
    deployer: Optional[str] = None
    implementation: Optional[ChecksumAddress] = None
    bytecode: Optional[str] = None
    deployed_bytecode: Optional[str] = None


def _entry_to_json(entry: RegistryEntry) -> Dict[str, Any]:
    data = {
        "address": entry.address,
        "abi": sorted_abi(list(entry.abi)),
        "tx_hash": entry.tx_hash,
        "block_number": int(entry.block_number) if entry.block_number is not None else None,
        "deployer": entry.deployer,
        "implementation": entry.implementation,
        "bytecode": entry.bytecode,
        "deployed_bytecode": entry.deployed_bytecode,
    }
    return data


def _entry_from_json(chain_id: str, name: ContractName, artifacts: Dict) -> RegistryEntry:
    return RegistryEntry(
        chain_id=int(chain_id),
        name=name,
        address=artifacts["address"],
        abi=artifacts["abi"],
        tx_hash=artifacts.get("tx_hash"),
        block_number=artifacts.get("block_number"),
        deployer=artifacts.get("deployer"),
        implementation=artifacts.get("implementation"),
        bytecode=artifacts.get("bytecode"),
        deployed_bytecode=artifacts.get("deployed_bytecode"),
    )


def read_registry(filepath: Path) -> List[RegistryEntry]:
    data = _load_json(filepath)
    registry_entries = list()
    for chain_id, entries in data.items():
        for contract_name, artifacts in entries.items():
            registry_entries.append(_entry_from_json(chain_id, contract_name, artifacts))
    return registry_entries


def write_registry(entries: List[RegistryEntry], filepath: Path, silent: bool = False) -> Path:
    """Writes a contract registry to a file, replacing any existing content."""

    # Sort registry entries to enforce common order
    entries = sorted(entries, key=lambda entry: (str(entry.chain_id), entry.name))

    data = defaultdict(dict)
    for entry in entries:
        data[str(entry.chain_id)][entry.name] = _entry_to_json(entry)

    # Create the parent directory if it does not exist
    filepath.parent.mkdir(parents=True, exist_ok=True)

    if not silent:
        action = "Updating existing" if filepath.exists() else "Creating new"
        print(f"{action} registry at {filepath}.")

    with open(filepath, "w") as file:
        json.dump(data, file, **STANDARD_REGISTRY_JSON_FORMAT)

    return filepath


def save_entry(entry: RegistryEntry, filepath: Path) -> Path:
    """
    Saves a single deployment record, overwriting any existing
    record with the same name on the same chain.
    """
    entries = read_registry(filepath) if filepath.exists() else list()
    kept = list()
    for existing in entries:
        if existing.chain_id == entry.chain_id and existing.name == entry.name:
            print(f"(i) Overwriting {entry.name} at {existing.address} on chain {entry.chain_id}")
            continue
        kept.append(existing)
    kept.append(entry)
    output_filepath = write_registry(entries=kept, filepath=filepath)
    print(f"(i) Saved {entry.name} at {entry.address} to {output_filepath}!")
    return output_filepath


def get_entry(filepath: Path, chain_id: ChainId, name: ContractName) -> RegistryEntry:
    """Returns the deployment record for a contract name on a chain."""
    for entry in read_registry(filepath=filepath):
        if entry.chain_id == chain_id and entry.name == name:
            return entry
    raise KeyError(f"No registry entry for {name} on chain {chain_id} in {filepath}")


def contracts_from_registry(filepath: Path, chain_id: ChainId) -> Dict[str, ContractInstance]:
    """Returns a dictionary of contract instances from a contract registry."""
    registry_entries = read_registry(filepath=filepath)
    deployments = dict()
    for registry_entry in registry_entries:
        if registry_entry.chain_id != chain_id:
            continue
        contract_type = registry_entry.name
        contract_container = get_contract_container(contract_type)
        contract_instance = contract_container.at(registry_entry.address)
        deployments[contract_type] = contract_instance
    return deployments
