#!/usr/bin/env python3

import os

from ape_accounts import import_account_from_private_key

DEPLOYER_ALIAS = "artspark-deployer"


def main():
    try:
        passphrase = os.environ["ARTSPARK_DEPLOYER_PASSPHRASE"]
        private_key = os.environ["ARTSPARK_DEPLOYER_PRIVATE_KEY"]
    except KeyError:
        raise Exception(
            "There are missing environment variables."
            "Please set ARTSPARK_DEPLOYER_PASSPHRASE and ARTSPARK_DEPLOYER_PRIVATE_KEY."
        )
    account = import_account_from_private_key(DEPLOYER_ALIAS, passphrase, private_key)
    print(f"Account imported: {account.address}")


if __name__ == "__main__":
    main()
