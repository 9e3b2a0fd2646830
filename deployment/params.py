import typing
from collections import OrderedDict
from pathlib import Path
from typing import Any, Dict, List

from ape import networks
from ape.api import AccountAPI, ReceiptAPI
from ape.contracts.base import ContractContainer, ContractInstance, ContractTransactionHandler
from eth_utils import to_checksum_address
from ethpm_types import MethodABI
from web3.auto import w3

from deployment.accounts import NamedAccounts
from deployment.confirm import _confirm_resolution, _continue
from deployment.constants import DEFAULT_INITIALIZER, PROXY_NAME
from deployment.networks import get_chain_id
from deployment.registry import RegistryEntry, save_entry
from deployment.utils import (
    _load_yaml,
    check_plugins,
    get_contract_container,
    get_extended_artifact,
    get_proxy_implementation,
    oz_dependency,
    validate_config,
)

DEPLOYER_ACCOUNT_NAME = "deployer"


def _validate_method_args(
    method_abis: List[MethodABI], args: typing.Sequence[Any]
) -> typing.Dict[str, Any]:
    """Validates the transaction arguments against the function ABI."""
    if len(method_abis) == 0:
        raise ValueError("No method abis provided for validation of args")

    abis_matching_args_length = [abi for abi in method_abis if len(abi.inputs) == len(args)]
    for abi in abis_matching_args_length:
        named_args = OrderedDict()
        for arg, abi_input in zip(args, abi.inputs):
            if not w3.is_encodable(abi_input.type, arg):
                break
            named_args[abi_input.name] = arg
        else:
            return named_args
    method_name = getattr(method_abis[0], "name", "constructor")
    raise ValueError(
        f"Could not find ABI for '{method_name}' with {len(args)} arg(s) and given type(s)"
    )


class Transactor:
    """
    Represents an ape account plus validated/annotated transaction execution.
    """

    def __init__(self, account: AccountAPI, autosign: bool = False):
        self._account = account
        if autosign:
            print("WARNING: Autosign is enabled. Transactions will be signed automatically.")
        self._autosign = autosign
        self._account.set_autosign(autosign)

    def get_account(self) -> AccountAPI:
        """Returns the transactor account."""
        return self._account

    def transact(self, method: ContractTransactionHandler, *args) -> ReceiptAPI:
        named_args = _validate_method_args(method_abis=method.abis, args=args)
        base_message = (
            f"\nTransacting {method.contract.contract_type.name}"
            f"[{method.contract.address[:10]}].{method}"
        )
        if named_args:
            pretty_args = "\n\t".join(f"{k}={v}" for k, v in named_args.items())
            message = f"{base_message} with arguments:\n\t{pretty_args}"
        else:
            message = f"{base_message} with no arguments"
        print(message)
        if not self._autosign:
            _continue()

        return method(*args, sender=self._account)


class Deployer(Transactor):
    """
    Represents the deployer account plus everything a deploy script needs:
    named accounts, contract factories, proxy deployments and the registry.
    """

    class ProxyMismatch(Exception):
        """Raised when a proxy does not point at the implementation it was deployed with"""

    def __init__(
        self,
        config: typing.Dict,
        path: Path,
        account: typing.Optional[AccountAPI] = None,
        autosign: bool = False,
        confirmations: typing.Optional[int] = None,
    ):
        self.path = path
        self.config = config
        self.registry_filepath = validate_config(config=self.config)
        self.named_accounts = NamedAccounts.from_config(self.config)
        if account is None:
            account = self.named_accounts.resolve(DEPLOYER_ACCOUNT_NAME)
        super().__init__(account, autosign)

        check_plugins()
        if confirmations is None:
            confirmations = config["deployment"].get("confirmations")
        self.confirmations = confirmations

        # receipts of proxies deployed in this run, by proxy address
        self._proxy_receipts: Dict[str, ReceiptAPI] = dict()

        self._print_deployment_info()

        if not self._autosign:
            # Confirms the start of the deployment.
            _continue()

    @classmethod
    def from_yaml(cls, filepath: Path, *args, **kwargs) -> "Deployer":
        config = _load_yaml(filepath)
        return cls(config=config, path=filepath, *args, **kwargs)

    def get_named_accounts(self) -> Dict[str, AccountAPI]:
        return self.named_accounts.get_named_accounts()

    def get_chain_id(self) -> int:
        return get_chain_id()

    def get_contract_factory(self, contract_name: str) -> ContractContainer:
        return get_contract_container(contract_name)

    def get_extended_artifact(self, contract_name: str) -> Dict[str, Any]:
        return get_extended_artifact(contract_name)

    def _get_kwargs(self) -> typing.Dict[str, Any]:
        """Returns the deployment kwargs."""
        kwargs = dict()
        if self.confirmations is not None:
            kwargs["required_confirmations"] = self.confirmations
        return kwargs

    def deploy(self, container: ContractContainer, *args) -> ContractInstance:
        resolved_params = OrderedDict()
        if args:
            resolved_params = _validate_method_args(
                method_abis=[container.constructor.abi], args=args
            )
        return self._deploy_contract(container, resolved_params)

    def _deploy_contract(
        self,
        container: ContractContainer,
        resolved_params: OrderedDict,
        kind: str = "Constructor parameters",
    ) -> ContractInstance:
        contract_name = container.contract_type.name
        if not self._autosign:
            _confirm_resolution(resolved_params, contract_name, kind=kind)
        deployment_params = [container, *resolved_params.values()]
        kwargs = self._get_kwargs()

        deployer_account = self.get_account()
        return deployer_account.deploy(*deployment_params, **kwargs)

    def deploy_proxy(
        self,
        container: ContractContainer,
        args: typing.Sequence[Any],
        initializer: str = DEFAULT_INITIALIZER,
        owner: typing.Optional[AccountAPI] = None,
    ) -> ContractInstance:
        """
        Deploys a contract behind a TransparentUpgradeableProxy, initializing
        it through the proxy with `args`, and waits for the proxy deployment
        to be confirmed.

        Returns the contract type wrapped at the proxy address.
        """
        contract_name = container.contract_type.name
        owner = owner or self.get_account()

        initializer_abis = [
            abi for abi in container.contract_type.methods if abi.name == initializer
        ]
        named_args = _validate_method_args(method_abis=initializer_abis, args=args)

        print(f"\nDeploying {contract_name} implementation.")
        implementation = self._deploy_contract(container, resolved_params=OrderedDict())

        initializer_handler = getattr(implementation, initializer)
        if not self._autosign:
            _confirm_resolution(named_args, f"{contract_name}.{initializer}", kind="Initializer")
        data = initializer_handler.encode_input(*args)

        proxy_container = oz_dependency().TransparentUpgradeableProxy
        print(f"\nDeploying {PROXY_NAME} contract to proxy {contract_name}.")
        proxy_params = OrderedDict(
            {"_logic": implementation.address, "initialOwner": owner.address, "_data": data}
        )
        proxy_contract = self._deploy_contract(proxy_container, resolved_params=proxy_params)

        receipt = proxy_contract.receipt
        receipt.await_confirmations()
        self._proxy_receipts[to_checksum_address(proxy_contract.address)] = receipt

        proxied_implementation = get_proxy_implementation(proxy_contract.address)
        if proxied_implementation != to_checksum_address(implementation.address):
            raise self.ProxyMismatch(
                f"{PROXY_NAME} at {proxy_contract.address} points to {proxied_implementation}, "
                f"expected {contract_name} implementation at {implementation.address}."
            )

        print(
            f"\nWrapping {contract_name} into {PROXY_NAME} at {proxy_contract.address} "
            f"(implementation {implementation.address})."
        )
        return container.at(proxy_contract.address)

    def save(self, name: str, deployment: Dict[str, Any]) -> RegistryEntry:
        """
        Persists a deployment record (address plus artifact metadata)
        under `name` for the current chain, overwriting any prior record.
        """
        address = to_checksum_address(deployment["address"])
        receipt = self._proxy_receipts.get(address)
        implementation = deployment.get("implementation")
        if receipt is not None and implementation is None:
            implementation = get_proxy_implementation(address)

        entry = RegistryEntry(
            chain_id=self.get_chain_id(),
            name=name,
            address=address,
            abi=deployment["abi"],
            tx_hash=deployment.get("tx_hash", receipt.txn_hash if receipt else None),
            block_number=deployment.get("block_number", receipt.block_number if receipt else None),
            deployer=deployment.get("deployer", receipt.transaction.sender if receipt else None),
            implementation=implementation,
            bytecode=deployment.get("bytecode"),
            deployed_bytecode=deployment.get("deployed_bytecode"),
        )
        save_entry(entry=entry, filepath=self.registry_filepath)
        return entry

    def _print_deployment_info(self):
        print(
            f"Account: {self.get_account().address}",
            f"Config: {self.path}",
            f"Registry: {self.registry_filepath}",
            f"Ecosystem: {networks.provider.network.ecosystem.name}",
            f"Network: {networks.provider.network.name}",
            f"Chain ID: {networks.provider.network.chain_id}",
            f"Confirmations: {self.confirmations if self.confirmations is not None else 'default'}",
            sep="\n",
        )
