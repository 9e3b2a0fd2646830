from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from ethpm_types.abi import ABIType, MethodABI

from deployment.constants import EIP1967_IMPLEMENTATION_SLOT, LOCAL_CHAIN_ID, PROXY_NAME
from deployment.params import Deployer

# digit-only addresses are their own checksum
DEPLOYER_ADDRESS = "0x1111111111111111111111111111111111111111"
IMPLEMENTATION_ADDRESS = "0x2222222222222222222222222222222222222222"
PROXY_ADDRESS = "0x3333333333333333333333333333333333333333"
ENCODED_INITIALIZER = b"\x8f\x15\xb4\x14"

INITIALIZE_ABI = MethodABI(
    name="initialize",
    stateMutability="nonpayable",
    inputs=[
        ABIType(name="name", type="string"),
        ABIType(name="symbol", type="string"),
        ABIType(name="ratio", type="uint32"),
        ABIType(name="reserveInit", type="uint256"),
        ABIType(name="signer", type="address"),
    ],
    outputs=[],
)

SYMBOL_ABI = MethodABI(
    name="symbol",
    stateMutability="view",
    inputs=[],
    outputs=[ABIType(name="", type="string")],
)


def make_container(name, methods=(), abi=None):
    contract_type = SimpleNamespace(
        name=name,
        methods=list(methods),
        abi=list(abi if abi is not None else methods),
        source_id=f"{name}.sol",
        deployment_bytecode=SimpleNamespace(bytecode="0x60806040"),
        runtime_bytecode=SimpleNamespace(bytecode="0x6080"),
        devdoc={},
        userdoc={},
    )
    container = MagicMock()
    container.contract_type = contract_type
    container.at.side_effect = lambda address: SimpleNamespace(
        address=address, contract_type=contract_type
    )
    return container


@pytest.fixture
def network():
    return SimpleNamespace(
        name="local",
        chain_id=LOCAL_CHAIN_ID,
        ecosystem=SimpleNamespace(name="ethereum"),
    )


@pytest.fixture
def ape_networks(monkeypatch, network):
    """Stands in for a connected ape network manager."""
    fake_networks = MagicMock()
    fake_networks.provider.network = network
    fake_networks.provider.name = "test"
    for module in ("deployment.networks", "deployment.utils", "deployment.params"):
        monkeypatch.setattr(f"{module}.networks", fake_networks)
    monkeypatch.setattr("deployment.accounts.networks", fake_networks)
    return fake_networks


@pytest.fixture
def deployer_account():
    account = MagicMock()
    account.address = DEPLOYER_ADDRESS
    return account


@pytest.fixture
def ape_accounts(monkeypatch, deployer_account):
    fake_accounts = MagicMock()
    other = MagicMock()
    other.address = "0x4444444444444444444444444444444444444444"
    fake_accounts.test_accounts = [deployer_account, other]
    monkeypatch.setattr("deployment.accounts.accounts", fake_accounts)
    return fake_accounts


@pytest.fixture
def artspark_container():
    return make_container("Artspark", methods=[INITIALIZE_ABI, SYMBOL_ABI])


@pytest.fixture
def proxy_container():
    return make_container(PROXY_NAME)


@pytest.fixture
def ape_project(monkeypatch, artspark_container, proxy_container):
    """A compiled project with Artspark and the OpenZeppelin dependency."""
    oz = SimpleNamespace(TransparentUpgradeableProxy=proxy_container)
    fake_project = SimpleNamespace(
        Artspark=artspark_container,
        dependencies={"openzeppelin": {"5.0.0": oz}},
    )
    monkeypatch.setattr("deployment.utils.project", fake_project)
    return fake_project


@pytest.fixture
def implementation():
    instance = MagicMock()
    instance.address = IMPLEMENTATION_ADDRESS
    instance.initialize.encode_input.return_value = ENCODED_INITIALIZER
    return instance


@pytest.fixture
def proxy():
    instance = MagicMock()
    instance.address = PROXY_ADDRESS
    instance.contract_type.name = PROXY_NAME
    instance.receipt.txn_hash = "0x" + "ab" * 32
    instance.receipt.block_number = 7
    instance.receipt.transaction.sender = DEPLOYER_ADDRESS
    return instance


@pytest.fixture
def chain_deployments(deployer_account, proxy_container, implementation, proxy):
    """Makes the deployer account return fake instances for each deployment."""

    def deploy(container, *args, **kwargs):
        if container is proxy_container:
            return proxy
        return implementation

    deployer_account.deploy.side_effect = deploy
    return deployer_account.deploy


@pytest.fixture
def proxy_storage(monkeypatch):
    """EIP1967 storage of the deployed proxy."""
    storage = {}

    def get_storage(address, slot):
        return storage.get((address, slot), b"\x00" * 32)

    fake_chain = MagicMock()
    fake_chain.provider.get_storage.side_effect = get_storage
    monkeypatch.setattr("deployment.utils.chain", fake_chain)
    return storage


@pytest.fixture
def registry_filepath(tmp_path):
    return tmp_path / "artifacts" / "artspark.json"


@pytest.fixture
def config(registry_filepath):
    return {
        "deployment": {"name": "artspark", "chain_id": LOCAL_CHAIN_ID},
        "artifacts": {
            "dir": str(registry_filepath.parent),
            "filename": registry_filepath.name,
        },
        "named_accounts": {"deployer": {"default": 0}},
    }


@pytest.fixture
def deployer(
    config,
    ape_networks,
    ape_accounts,
    ape_project,
    chain_deployments,
    proxy_storage,
):
    proxy_storage[(PROXY_ADDRESS, EIP1967_IMPLEMENTATION_SLOT)] = (
        b"\x00" * 12 + bytes.fromhex(IMPLEMENTATION_ADDRESS[2:])
    )
    return Deployer(config=config, path="artspark.yml", autosign=True)
