from dataclasses import replace
from typing import Dict

from eth_utils import decode_hex

from beacon_node.constants import (
    SPEC_INTEROP,
    SPEC_MAINNET,
    SPEC_MINIMAL,
)
from beacon_node.eth2.configs import Eth2Config
from beacon_node.eth2.typing import Gwei, Second, Version
from beacon_node.exceptions import UnknownSpec

GWEI_PER_ETH = 10**9


MAINNET_CONFIG = Eth2Config(
    spec_constants=SPEC_MAINNET,
    # Misc
    MAX_COMMITTEES_PER_SLOT=2**6,
    TARGET_COMMITTEE_SIZE=2**7,
    MAX_VALIDATORS_PER_COMMITTEE=2**11,
    MIN_PER_EPOCH_CHURN_LIMIT=2**2,
    CHURN_LIMIT_QUOTIENT=2**16,
    SHUFFLE_ROUND_COUNT=90,
    HYSTERESIS_QUOTIENT=4,
    HYSTERESIS_DOWNWARD_MULTIPLIER=1,
    HYSTERESIS_UPWARD_MULTIPLIER=5,
    # Genesis
    MIN_GENESIS_ACTIVE_VALIDATOR_COUNT=2**14,
    MIN_GENESIS_TIME=1606824000,
    # Gwei values
    MIN_DEPOSIT_AMOUNT=Gwei(2**0 * GWEI_PER_ETH),
    MAX_EFFECTIVE_BALANCE=Gwei(2**5 * GWEI_PER_ETH),
    EJECTION_BALANCE=Gwei(2**4 * GWEI_PER_ETH),
    EFFECTIVE_BALANCE_INCREMENT=Gwei(2**0 * GWEI_PER_ETH),
    # Initial values
    GENESIS_FORK_VERSION=Version(b'\x00' * 4),
    BLS_WITHDRAWAL_PREFIX=b'\x00',
    # Time parameters
    GENESIS_DELAY=604800,
    SECONDS_PER_SLOT=Second(12),
    MIN_ATTESTATION_INCLUSION_DELAY=2**0,
    SLOTS_PER_EPOCH=2**5,
    MIN_SEED_LOOKAHEAD=2**0,
    MAX_SEED_LOOKAHEAD=2**2,
    MIN_EPOCHS_TO_INACTIVITY_PENALTY=2**2,
    EPOCHS_PER_ETH1_VOTING_PERIOD=2**6,
    SLOTS_PER_HISTORICAL_ROOT=2**13,
    MIN_VALIDATOR_WITHDRAWABILITY_DELAY=2**8,
    SHARD_COMMITTEE_PERIOD=2**8,
    # State list lengths
    EPOCHS_PER_HISTORICAL_VECTOR=2**16,
    EPOCHS_PER_SLASHINGS_VECTOR=2**13,
    HISTORICAL_ROOTS_LIMIT=2**24,
    VALIDATOR_REGISTRY_LIMIT=2**40,
    # Rewards and penalties
    BASE_REWARD_FACTOR=2**6,
    WHISTLEBLOWER_REWARD_QUOTIENT=2**9,
    PROPOSER_REWARD_QUOTIENT=2**3,
    INACTIVITY_PENALTY_QUOTIENT=2**24,
    MIN_SLASHING_PENALTY_QUOTIENT=2**5,
    # Max operations per block
    MAX_PROPOSER_SLASHINGS=2**4,
    MAX_ATTESTER_SLASHINGS=2**1,
    MAX_ATTESTATIONS=2**7,
    MAX_DEPOSITS=2**4,
    MAX_VOLUNTARY_EXITS=2**4,
    # Fork choice
    SAFE_SLOTS_TO_UPDATE_JUSTIFIED=2**3,
    # Deposit contract
    DEPOSIT_CHAIN_ID=1,
    DEPOSIT_NETWORK_ID=1,
    DEPOSIT_CONTRACT_ADDRESS=decode_hex("0x00000000219ab540356cBB839Cbe05303d7705Fa"),
)


MINIMAL_CONFIG = replace(
    MAINNET_CONFIG,
    spec_constants=SPEC_MINIMAL,
    # Misc
    MAX_COMMITTEES_PER_SLOT=4,
    TARGET_COMMITTEE_SIZE=4,
    SHUFFLE_ROUND_COUNT=10,
    # Genesis
    MIN_GENESIS_ACTIVE_VALIDATOR_COUNT=64,
    MIN_GENESIS_TIME=1578009600,
    # Initial values
    GENESIS_FORK_VERSION=Version(b'\x00\x00\x00\x01'),
    # Time parameters
    GENESIS_DELAY=300,
    SECONDS_PER_SLOT=Second(6),
    SLOTS_PER_EPOCH=8,
    EPOCHS_PER_ETH1_VOTING_PERIOD=4,
    SLOTS_PER_HISTORICAL_ROOT=64,
    SHARD_COMMITTEE_PERIOD=64,
    # State list lengths
    EPOCHS_PER_HISTORICAL_VECTOR=64,
    EPOCHS_PER_SLASHINGS_VECTOR=64,
    # Fork choice
    SAFE_SLOTS_TO_UPDATE_JUSTIFIED=2,
    # Deposit contract
    DEPOSIT_CHAIN_ID=5,
    DEPOSIT_NETWORK_ID=5,
    DEPOSIT_CONTRACT_ADDRESS=decode_hex("0x1234567890123456789012345678901234567890"),
)


# Local interop testnets: minimal parameters, genesis may happen at any time.
INTEROP_CONFIG = replace(
    MINIMAL_CONFIG,
    spec_constants=SPEC_INTEROP,
    MIN_GENESIS_TIME=0,
    GENESIS_DELAY=0,
)


ETH2_PRESETS: Dict[str, Eth2Config] = {
    SPEC_MAINNET: MAINNET_CONFIG,
    SPEC_MINIMAL: MINIMAL_CONFIG,
    SPEC_INTEROP: INTEROP_CONFIG,
}


def get_preset(name: str) -> Eth2Config:
    """
    Return the :class:`~beacon_node.eth2.configs.Eth2Config` preset called ``name``.
    """
    try:
        return ETH2_PRESETS[name]
    except KeyError:
        raise UnknownSpec(name)
