from ape import networks

from deployment.constants import LOCAL_CHAIN_IDS, LOCAL_NETWORKS


def get_chain_id() -> int:
    """Returns the chain ID of the connected network."""
    return networks.provider.network.chain_id


def is_local_network() -> bool:
    """Returns True when connected to a local development network."""
    network = networks.provider.network
    return network.name in LOCAL_NETWORKS or network.chain_id in LOCAL_CHAIN_IDS
