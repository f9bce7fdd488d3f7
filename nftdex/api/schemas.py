# /nftdex/api/schemas.py
# Request bodies and shared query parameters. Amounts arrive as decimal ether strings and become Ether at the edge.
from typing import Annotated, Any, List

from fastapi import Query
from pydantic import BaseModel, Field

ADDRESS_PATTERN = r"^0x[0-9a-fA-F]{40}$"
ETHER_PATTERN = r"^[0-9]+(\.[0-9]{1,18})?$"

AddressStr = Annotated[str, Field(pattern=ADDRESS_PATTERN)]
EtherStr = Annotated[str, Field(pattern=ETHER_PATTERN)]
TokenIds = Annotated[List[Annotated[int, Field(ge=0)]], Field(min_length=1)]
PairAddressQuery = Annotated[str | None, Query(pattern=ADDRESS_PATTERN)]


class DeployNftRequest(BaseModel):
    name: str = Field(min_length=1)
    symbol: str = Field(min_length=1)
    baseURI: str = ""
    maxSupply: int = Field(gt=0)
    maxMintPerAddress: int = Field(gt=0)
    mintPrice: EtherStr


class DeployPairRequest(BaseModel):
    nftContractAddress: AddressStr


class DeployContractRequest(BaseModel):
    contractName: str = Field(min_length=1)
    sourceName: str | None = None
    constructorArgs: List[Any] = []
    value: EtherStr | None = None


class UpdateContractsRequest(BaseModel):
    nftContract: AddressStr | None = None
    pairContract: AddressStr | None = None
    pairFactory: AddressStr | None = None


class MintRequest(BaseModel):
    to: AddressStr | None = None
    uri: str = ""
    price: EtherStr | None = None


class PremintRequest(BaseModel):
    to: AddressStr | None = None
    count: int = Field(gt=0)


class ApproveRequest(BaseModel):
    operator: AddressStr | None = None
    approved: bool = True


class CreatePoolRequest(BaseModel):
    nftContractAddress: AddressStr


class LiquidityRequest(BaseModel):
    nftTokenIds: TokenIds
    ethAmount: EtherStr | None = None
    pairAddress: AddressStr | None = None


class RemoveLiquidityRequest(BaseModel):
    lpTokenAmount: EtherStr
    nftTokenIds: TokenIds
    pairAddress: AddressStr | None = None


class BuyRequest(BaseModel):
    maxPrice: EtherStr
    pairAddress: AddressStr | None = None


class SellRequest(BaseModel):
    tokenId: int = Field(ge=0)
    minPrice: EtherStr
    pairAddress: AddressStr | None = None
