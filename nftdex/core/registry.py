# /nftdex/core/registry.py
from enum import Enum
from typing import Dict

from web3 import Web3

from nftdex.core.errors import ContractAddressNotSetError, ValidationError
from nftdex.core.logger import get_logger

log = get_logger(__name__)


class ContractRole(str, Enum):
    NFT = "nftContract"
    PAIR = "pairContract"
    FACTORY = "pairFactory"


class ContractRegistry:
    """Role -> address for the contracts this process works with. Lost on restart."""

    def __init__(self, addresses: Dict[ContractRole, str | None] | None = None):
        self._addresses: Dict[ContractRole, str] = {}
        for role, address in (addresses or {}).items():
            if address:
                self.set(role, address)

    @classmethod
    def from_settings(cls, settings) -> "ContractRegistry":
        return cls({
            ContractRole.NFT: settings.NFT_CONTRACT_ADDRESS,
            ContractRole.PAIR: settings.PAIR_CONTRACT_ADDRESS,
            ContractRole.FACTORY: settings.PAIR_FACTORY_ADDRESS,
        })

    def get(self, role: ContractRole) -> str | None:
        return self._addresses.get(role)

    def require(self, role: ContractRole) -> str:
        address = self._addresses.get(role)
        if address is None:
            raise ContractAddressNotSetError(f"{role.value} address not set")
        return address

    def set(self, role: ContractRole, address: str) -> str:
        if not Web3.is_address(address):
            raise ValidationError(f"Invalid {role.value} address: {address!r}")
        address = Web3.to_checksum_address(address)
        self._addresses[role] = address
        log.info("CONTRACT_ADDRESS_SET", role=role.value, address=address)
        return address

    def update(self, addresses: Dict[ContractRole, str | None]) -> Dict[str, str | None]:
        for role, address in addresses.items():
            if address:
                self.set(role, address)
        return self.snapshot()

    def snapshot(self) -> Dict[str, str | None]:
        return {role.value: self._addresses.get(role) for role in ContractRole}
