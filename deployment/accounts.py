import typing
from typing import Any, Dict

from ape import accounts, networks
from ape.api import AccountAPI
from eth_utils import is_hex_address, to_checksum_address

from deployment.constants import DEFAULT_NAMED_ACCOUNT_KEY


def _account_from_value(value: Any) -> AccountAPI:
    """
    Loads an account from a named account value:
    a test account index, a known account address or an ape account alias.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid named account value '{value}'.")
    if isinstance(value, int):
        return accounts.test_accounts[value]
    if isinstance(value, str) and is_hex_address(value):
        return accounts[to_checksum_address(value)]
    if isinstance(value, str):
        return accounts.load(value)
    raise ValueError(f"Invalid named account value '{value}'.")


class NamedAccounts:
    """
    Resolves account aliases (e.g. 'deployer') from deployment configuration.

    Each named account maps either directly to a value, or to a mapping
    keyed by chain ID, network name or 'default'.
    """

    class Unknown(KeyError):
        """Raised when a named account cannot be resolved for the connected network"""

    def __init__(self, named_accounts: typing.Dict[str, Any]):
        self.named_accounts = named_accounts or dict()
        self._resolved: Dict[str, AccountAPI] = dict()

    @classmethod
    def from_config(cls, config: typing.Dict) -> "NamedAccounts":
        return cls(named_accounts=config.get("named_accounts", {}))

    @property
    def names(self) -> typing.List[str]:
        return list(self.named_accounts)

    def _select_value(self, name: str) -> Any:
        try:
            entry = self.named_accounts[name]
        except KeyError:
            raise self.Unknown(f"Named account '{name}' not found in deployment config.")

        if not isinstance(entry, dict):
            return entry

        network = networks.provider.network
        # YAML keys may be parsed as int or str
        for key in (network.chain_id, str(network.chain_id), network.name):
            if key in entry:
                return entry[key]
        if DEFAULT_NAMED_ACCOUNT_KEY in entry:
            return entry[DEFAULT_NAMED_ACCOUNT_KEY]

        raise self.Unknown(
            f"Named account '{name}' has no entry for network "
            f"'{network.name}' (chain ID {network.chain_id}) and no default."
        )

    def resolve(self, name: str) -> AccountAPI:
        """Returns the account for a single named account."""
        if name not in self._resolved:
            value = self._select_value(name)
            self._resolved[name] = _account_from_value(value)
        return self._resolved[name]

    def get_named_accounts(self) -> Dict[str, AccountAPI]:
        """Resolves all named accounts."""
        return {name: self.resolve(name) for name in self.names}
