"""Interface descriptions for the contracts this service drives.

Deployment uses the ABI shipped in each build artifact; these copies are used
for calls against contracts whose addresses were configured or discovered.
"""

from nftdex.abis.pair import PAIR_ABI
from nftdex.abis.pair_factory import PAIR_FACTORY_ABI
from nftdex.abis.standard_nft import STANDARD_NFT_ABI

__all__ = ["PAIR_ABI", "PAIR_FACTORY_ABI", "STANDARD_NFT_ABI"]
