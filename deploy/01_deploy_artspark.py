#!/usr/bin/python3

from deployment.params import Deployer

TAGS = ["Artspark"]

CONTRACT_NAME = "Artspark"
TOKEN_NAME = "Artspark"
TOKEN_SYMBOL = "ARTS"

# 500000 = linear curve
RATIO = 500000
RESERVE_INIT = 10000000000000

SIGNER_ADDRESS = "0x1753a6d1617cec011a1032f3ea6172e92679d9bd"


def deploy(deployer: Deployer) -> bool:
    """
    Deploys Artspark behind an upgradeable proxy and saves it to the registry.

    ape run deploy --network ethereum:local:test --tags Artspark
    """
    named_accounts = deployer.get_named_accounts()
    chain_id = deployer.get_chain_id()
    print(f"Deploying {CONTRACT_NAME} from {named_accounts['deployer'].address} on chain {chain_id}")

    artspark_factory = deployer.get_contract_factory(CONTRACT_NAME)
    artspark = deployer.deploy_proxy(
        artspark_factory,
        [TOKEN_NAME, TOKEN_SYMBOL, RATIO, RESERVE_INIT, SIGNER_ADDRESS],
        owner=named_accounts["deployer"],
    )
    print(f"deployed proxy at {artspark.address}")

    artifact = deployer.get_extended_artifact(CONTRACT_NAME)
    deployer.save(CONTRACT_NAME, {"address": artspark.address, **artifact})
    return True
