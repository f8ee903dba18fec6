"""Chain descriptors for the EVM transaction relay."""

from dataclasses import dataclass

GWEI = 10**9


@dataclass(frozen=True)
class ChainConfig:
    """Minimal description of the target chain."""

    chain_id: int
    name: str
    supports_eip1559: bool = True


MAINNET = ChainConfig(chain_id=1, name="Ethereum")
SEPOLIA = ChainConfig(chain_id=11155111, name="Sepolia")
HOLESKY = ChainConfig(chain_id=17000, name="Holesky")
POLYGON = ChainConfig(chain_id=137, name="Polygon")
ARBITRUM = ChainConfig(chain_id=42161, name="Arbitrum One")
BSC = ChainConfig(chain_id=56, name="BNB Smart Chain", supports_eip1559=False)
FOUNDRY = ChainConfig(chain_id=31337, name="Foundry")

KNOWN_CHAINS = {
    chain.chain_id: chain for chain in (MAINNET, SEPOLIA, HOLESKY, POLYGON, ARBITRUM, BSC, FOUNDRY)
}


def get_chain(chain_id: int) -> ChainConfig:
    """Get a known chain descriptor by id.

    Args:
        chain_id: EIP-155 chain id

    Returns:
        Chain descriptor

    Raises:
        ValueError: If the chain id is not known
    """
    if chain_id not in KNOWN_CHAINS:
        raise ValueError(f"Unknown chain id: {chain_id}")
    return KNOWN_CHAINS[chain_id]
