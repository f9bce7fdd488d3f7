# /nftdex/core/calls.py
# Closed set of write calls the service issues, one enum per contract kind.
# Each builder validates its own arguments; currency amounts are tagged as Ether.
import re
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Sequence, Tuple

from web3 import Web3

from nftdex.abis import PAIR_ABI, PAIR_FACTORY_ABI, STANDARD_NFT_ABI
from nftdex.core.errors import ValidationError

ETHER_RE = re.compile(r"^[0-9]+(\.[0-9]{1,18})?$")
DECIMAL_STRING_RE = re.compile(r"^[0-9]+\.[0-9]+$")


@dataclass(frozen=True)
class Ether:
    """An amount of native currency in whole-ether units."""
    amount: Decimal

    @classmethod
    def parse(cls, value: Any) -> "Ether":
        if isinstance(value, Ether):
            return value
        if isinstance(value, bool) or not isinstance(value, (str, int, Decimal)):
            raise ValidationError(f"Invalid ether amount: {value!r}")
        text = format(value, "f") if isinstance(value, Decimal) else str(value).strip()
        if not ETHER_RE.match(text):
            raise ValidationError(f"Invalid ether amount: {value!r}")
        return cls(Decimal(text))

    @classmethod
    def from_wei(cls, wei: int) -> "Ether":
        return cls(Decimal(Web3.from_wei(wei, "ether")))

    def to_wei(self) -> int:
        return int(Web3.to_wei(self.amount, "ether"))

    def __str__(self) -> str:
        return format_ether(self.to_wei())


def format_ether(wei: int) -> str:
    return str(Web3.from_wei(wei, "ether"))


def coerce_arg(value: Any, decimal_strings: bool = False) -> Any:
    if isinstance(value, Ether):
        return value.to_wei()
    if decimal_strings and isinstance(value, str) and DECIMAL_STRING_RE.match(value):
        return Ether.parse(value).to_wei()
    if isinstance(value, (list, tuple)):
        return [coerce_arg(v, decimal_strings) for v in value]
    return value


def coerce_args(args: Sequence[Any], decimal_strings: bool = False) -> List[Any]:
    return [coerce_arg(a, decimal_strings) for a in args]


class ContractKind(str, Enum):
    NFT = "StandardNFT"
    PAIR = "Pair"
    FACTORY = "PairFactory"

    @property
    def abi(self) -> list:
        return _ABIS[self]


class NftMethod(str, Enum):
    MINT = "mint"
    PREMINT = "premint"
    APPROVE = "approve"
    SET_APPROVAL_FOR_ALL = "setApprovalForAll"


class PairMethod(str, Enum):
    BUY_NFT = "buyNFT"
    SELL_NFT = "sellNFT"
    ADD_INITIAL_LIQUIDITY = "addInitialLiquidity"
    ADD_LIQUIDITY = "addLiquidity"
    REMOVE_LIQUIDITY = "removeLiquidity"
    WITHDRAW_FEES = "withdrawFees"


class FactoryMethod(str, Enum):
    CREATE_POOL = "createPool"


_ABIS: Dict[ContractKind, list] = {
    ContractKind.NFT: STANDARD_NFT_ABI,
    ContractKind.PAIR: PAIR_ABI,
    ContractKind.FACTORY: PAIR_FACTORY_ABI,
}

_METHODS: Dict[ContractKind, type] = {
    ContractKind.NFT: NftMethod,
    ContractKind.PAIR: PairMethod,
    ContractKind.FACTORY: FactoryMethod,
}


def abi_function(abi: list, name: str) -> Dict[str, Any]:
    for entry in abi:
        if entry.get("type") == "function" and entry.get("name") == name:
            return entry
    raise ValidationError(f"Function {name} not found in interface")


@dataclass(frozen=True)
class ContractCall:
    kind: ContractKind
    method: Enum
    address: str
    args: Tuple[Any, ...] = ()
    value: Ether | None = None

    def __post_init__(self):
        if not isinstance(self.method, _METHODS[self.kind]):
            raise ValidationError(f"{self.method} is not a {self.kind.value} method")
        if not Web3.is_address(self.address):
            raise ValidationError(f"Invalid contract address: {self.address!r}")
        entry = abi_function(self.abi, self.method.value)
        if len(self.args) != len(entry["inputs"]):
            raise ValidationError(
                f"{self.label} takes {len(entry['inputs'])} arguments, got {len(self.args)}"
            )
        if self.value is not None and self.value.amount > 0 and entry.get("stateMutability") != "payable":
            raise ValidationError(f"{self.label} does not accept a value")

    @property
    def abi(self) -> list:
        return self.kind.abi

    @property
    def label(self) -> str:
        return f"{self.kind.value}.{self.method.value}"


# --- argument validation ---

def _uint(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError(f"{name} must be a non-negative integer, got {value!r}")
    return value


def _address(name: str, value: Any) -> str:
    if not isinstance(value, str) or not Web3.is_address(value):
        raise ValidationError(f"{name} must be an address, got {value!r}")
    return Web3.to_checksum_address(value)


def _token_ids(value: Sequence[int]) -> Tuple[int, ...]:
    if not value:
        raise ValidationError("nftTokenIds must contain at least one token id")
    return tuple(_uint("token id", v) for v in value)


# --- StandardNFT ---

def mint(nft: str, to: str, uri: str, price: Ether) -> ContractCall:
    return ContractCall(ContractKind.NFT, NftMethod.MINT, nft, (_address("to", to), str(uri)), value=price)


def premint(nft: str, to: str, count: int) -> ContractCall:
    if _uint("count", count) == 0:
        raise ValidationError("count must be positive")
    return ContractCall(ContractKind.NFT, NftMethod.PREMINT, nft, (_address("to", to), count))


def approve(nft: str, to: str, token_id: int) -> ContractCall:
    return ContractCall(ContractKind.NFT, NftMethod.APPROVE, nft, (_address("to", to), _uint("tokenId", token_id)))


def set_approval_for_all(nft: str, operator: str, approved: bool = True) -> ContractCall:
    return ContractCall(
        ContractKind.NFT, NftMethod.SET_APPROVAL_FOR_ALL, nft, (_address("operator", operator), bool(approved))
    )


# --- Pair ---

def buy_nft(pair: str, max_price: Ether) -> ContractCall:
    # The pair refunds whatever exceeds the actual price.
    return ContractCall(ContractKind.PAIR, PairMethod.BUY_NFT, pair, (max_price,), value=max_price)


def sell_nft(pair: str, token_id: int, min_price: Ether) -> ContractCall:
    return ContractCall(ContractKind.PAIR, PairMethod.SELL_NFT, pair, (_uint("tokenId", token_id), min_price))


def add_initial_liquidity(pair: str, token_ids: Sequence[int], eth_amount: Ether | None = None) -> ContractCall:
    return ContractCall(
        ContractKind.PAIR, PairMethod.ADD_INITIAL_LIQUIDITY, pair, (list(_token_ids(token_ids)),), value=eth_amount
    )


def add_liquidity(pair: str, token_ids: Sequence[int], eth_amount: Ether | None = None) -> ContractCall:
    return ContractCall(
        ContractKind.PAIR, PairMethod.ADD_LIQUIDITY, pair, (list(_token_ids(token_ids)),), value=eth_amount
    )


def remove_liquidity(pair: str, lp_amount: Ether, token_ids: Sequence[int]) -> ContractCall:
    return ContractCall(
        ContractKind.PAIR, PairMethod.REMOVE_LIQUIDITY, pair, (lp_amount, list(_token_ids(token_ids)))
    )


def withdraw_fees(pair: str) -> ContractCall:
    return ContractCall(ContractKind.PAIR, PairMethod.WITHDRAW_FEES, pair)


# --- PairFactory ---

def create_pool(factory: str, nft_contract: str) -> ContractCall:
    return ContractCall(ContractKind.FACTORY, FactoryMethod.CREATE_POOL, factory, (_address("nftContract", nft_contract),))
