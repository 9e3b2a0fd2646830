from pathlib import Path

#
# Filesystem
#

DEPLOYMENT_DIR = Path(__file__).parent
PROJECT_ROOT = DEPLOYMENT_DIR.parent
DEPLOY_CONFIGS_DIR = DEPLOYMENT_DIR / "configs"
ARTIFACTS_DIR = DEPLOYMENT_DIR / "artifacts"
DEPLOY_SCRIPTS_DIR = PROJECT_ROOT / "deploy"

#
# Networks
#

LOCAL_CHAIN_ID = 31337
LOCAL_CHAIN_IDS = [LOCAL_CHAIN_ID, 1337]
LOCAL_NETWORKS = ["local", "localhost"]

DEFAULT_NAMED_ACCOUNT_KEY = "default"

#
# Contracts
#

OZ_DEPENDENCY_NAME = "openzeppelin"
OZ_DEPENDENCY_VERSION = "5.0.0"

PROXY_NAME = "TransparentUpgradeableProxy"
DEFAULT_INITIALIZER = "initialize"

# EIP1967 slots - https://eips.ethereum.org/EIPS/eip-1967
EIP1967_ADMIN_SLOT = 0xB53127684A568B3173AE13B9F8A6016E243E63B6E8EE1178D6A717850B5D6103
EIP1967_IMPLEMENTATION_SLOT = 0x360894A13BA1A3210667C828492DB98DCA3E2076CC3735A920A3CA505D382BBC
