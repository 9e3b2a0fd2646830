import os
import typing
from pathlib import Path
from typing import Optional, Tuple
from urllib.parse import urlencode

import requests
from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address

from deployment.registry import ChainId, RegistryEntry, save_entry
from deployment.utils import _load_json

CreationInfo = Tuple[Optional[str], Optional[int], Optional[ChecksumAddress]]

HARDHAT_CHAIN_ID_FILENAME = ".chainId"

EXPLORER_APIS = {
    1: "https://api.etherscan.io/api",
    11155111: "https://api-sepolia.etherscan.io/api",
    137: "https://api.polygonscan.com/api",
    80002: "https://api-amoy.polygonscan.com/api",
}


def get_creation_info(
    api_key: str, chain_id: int, contract_address: ChecksumAddress
) -> Tuple[str, int, ChecksumAddress]:
    """Looks up the creation transaction of a contract on a block explorer."""
    try:
        base_url = EXPLORER_APIS[chain_id]
    except KeyError:
        raise ValueError(f"No block explorer API known for chain ID {chain_id}")

    params = {
        "module": "account",
        "action": "txlist",
        "address": contract_address,
        "page": 1,
        "sort": "asc",
        "apikey": api_key,
    }
    url = f"{base_url}?{urlencode(params)}"
    response = requests.get(url)
    response.raise_for_status()
    data = response.json()

    if data["status"] == "1" and data["result"]:
        # If there are transactions, the first one will be the contract creation transaction
        tx = data["result"][0]
        tx_hash = tx["hash"]
        block_number = int(tx["blockNumber"])
        deployer = tx["from"]
    else:
        raise ValueError(f"Could not find contract creation transaction for {contract_address}")

    return tx_hash, block_number, to_checksum_address(deployer)


def _read_chain_id(directory: Path) -> ChainId:
    chain_id_filepath = directory / HARDHAT_CHAIN_ID_FILENAME
    if not chain_id_filepath.exists():
        raise ValueError(f"No chain ID given and no {HARDHAT_CHAIN_ID_FILENAME} in {directory}")
    return int(chain_id_filepath.read_text().strip())


def _creation_info(
    data: typing.Dict, chain_id: ChainId, address: ChecksumAddress
) -> CreationInfo:
    receipt = data.get("receipt") or {}
    tx_hash = data.get("transactionHash") or receipt.get("transactionHash")
    block_number = receipt.get("blockNumber")
    deployer = receipt.get("from")
    if tx_hash and block_number is not None and deployer:
        return tx_hash, int(block_number), to_checksum_address(deployer)

    # hardhat-deploy records saved by hand carry only the address and artifact
    if chain_id not in EXPLORER_APIS:
        print(f"(i) No transaction data for {address}; no block explorer for chain {chain_id}.")
        return None, None, None
    api_key = os.environ.get("ETHERSCAN_API_KEY")
    if not api_key:
        print(f"(i) No transaction data for {address}; set ETHERSCAN_API_KEY to look it up.")
        return None, None, None
    return get_creation_info(api_key=api_key, chain_id=chain_id, contract_address=address)


def import_hardhat_deployments(
    directory: Path,
    output_filepath: Path,
    chain_id: typing.Optional[ChainId] = None,
) -> typing.List[RegistryEntry]:
    """
    Imports a hardhat-deploy network directory (deployments/<network>/*.json)
    into a contract registry.
    """
    if not directory.exists():
        raise FileNotFoundError(f"Directory not found at {directory}")

    if chain_id is None:
        chain_id = _read_chain_id(directory)

    entries = list()
    for filepath in sorted(directory.glob("*.json")):
        data = _load_json(filepath=filepath)
        name = filepath.stem
        address = to_checksum_address(data["address"])
        tx_hash, block_number, deployer = _creation_info(data, chain_id, address)
        implementation = data.get("implementation")

        entry = RegistryEntry(
            chain_id=chain_id,
            name=name,
            address=address,
            abi=data["abi"],
            tx_hash=tx_hash,
            block_number=block_number,
            deployer=deployer,
            implementation=to_checksum_address(implementation) if implementation else None,
            bytecode=data.get("bytecode"),
            deployed_bytecode=data.get("deployedBytecode"),
        )
        save_entry(entry=entry, filepath=output_filepath)
        entries.append(entry)

    print(f"Imported {len(entries)} hardhat deployment(s) to {output_filepath}")
    return entries
