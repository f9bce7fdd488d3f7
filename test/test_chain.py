import pytest
from web3 import Web3
from web3.exceptions import ContractLogicError, TransactionNotFound

from nftdex.abis import PAIR_ABI
from nftdex.core.chain import ChainClient
from nftdex.core.errors import (
    BlockchainError,
    ConfirmationTimeoutError,
    ChainIdMismatchError,
    ConnectivityError,
    ContractCallError,
    TransactionRejectedError,
    TransactionRevertedError,
    ValidationError,
)

from conftest import PAIR_ADDR, USER_ADDR

TX_HASH = "0x" + "ab" * 32
UINT_CTOR_ABI = [{"type": "constructor", "stateMutability": "nonpayable", "inputs": [{"name": "supply", "type": "uint256"}]}]


async def _value(v):
    return v


class DummyCall:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error

    async def call(self):
        if self.error:
            raise self.error
        return self.result

    async def build_transaction(self, params):
        if self.error:
            raise self.error
        return {**params, "to": PAIR_ADDR, "data": "0x", "gas": 50000}


class DummyFunctions:
    def __init__(self, results):
        self.results = results

    def __getattr__(self, name):
        if name not in self.results:
            raise AttributeError(name)
        outcome = self.results[name]
        return lambda *args: outcome


class DummyContract:
    def __init__(self, results):
        self.functions = DummyFunctions(results)


class DummyEth:
    def __init__(self):
        self.chain_id_value = 31337
        self.blocks = [10]
        self.receipts = []
        self.call_error = None
        self.contract_results = {}
        self.send_error = None
        self.encode_with_abi = False

    @property
    def chain_id(self):
        return _value(self.chain_id_value)

    @property
    def block_number(self):
        if len(self.blocks) > 1:
            return _value(self.blocks.pop(0))
        return _value(self.blocks[0])

    @property
    def gas_price(self):
        return _value(10**9)

    def contract(self, address=None, abi=None, bytecode=None):
        if self.encode_with_abi:
            return Web3().eth.contract(address=address, abi=abi, bytecode=bytecode)
        return DummyContract(self.contract_results)

    async def get_transaction_receipt(self, tx_hash):
        if not self.receipts:
            raise TransactionNotFound(f"Transaction with hash: {tx_hash} not found.")
        outcome = self.receipts.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def get_transaction(self, tx_hash):
        return {"from": USER_ADDR, "to": PAIR_ADDR, "input": "0x", "value": 0}

    async def call(self, tx, block_identifier):
        if self.call_error:
            raise self.call_error
        return b""

    async def send_raw_transaction(self, raw):
        if self.send_error:
            raise self.send_error
        return bytes.fromhex("ab" * 32)


class DummyProvider:
    endpoint_uri = "http://dummy:8545"

    def __init__(self):
        self.disconnected = False

    async def disconnect(self):
        self.disconnected = True


class DummyW3:
    def __init__(self, connected=True):
        self.eth = DummyEth()
        self.provider = DummyProvider()
        self.connected = connected

    async def is_connected(self):
        return self.connected


@pytest.fixture
def w3():
    return DummyW3()


@pytest.fixture
def client(w3):
    return ChainClient(w3, expected_chain_id=31337, poll_interval=0, default_timeout=1)


@pytest.mark.asyncio
async def test_read_returns_value(w3, client):
    w3.eth.contract_results["getCurrentPrice"] = DummyCall(result=123)
    assert await client.read(PAIR_ADDR, PAIR_ABI, "getCurrentPrice") == 123


@pytest.mark.asyncio
async def test_read_revert_is_contract_call_error(w3, client):
    w3.eth.contract_results["getCurrentPrice"] = DummyCall(error=ContractLogicError("execution reverted: no liquidity"))
    with pytest.raises(ContractCallError) as exc:
        await client.read(PAIR_ADDR, PAIR_ABI, "getCurrentPrice")
    assert "no liquidity" in exc.value.message


@pytest.mark.asyncio
async def test_read_transport_failure_is_blockchain_error(w3, client):
    w3.eth.contract_results["getCurrentPrice"] = DummyCall(error=OSError("connection reset"))
    with pytest.raises(BlockchainError):
        await client.read(PAIR_ADDR, PAIR_ABI, "getCurrentPrice")


@pytest.mark.asyncio
async def test_simulation_revert_rejects_before_nonce(w3, client):
    w3.eth.contract_results["buyNFT"] = DummyCall(error=ContractLogicError("execution reverted: paused"))
    with pytest.raises(TransactionRejectedError) as exc:
        await client.build_call_transaction(PAIR_ADDR, PAIR_ABI, "buyNFT", [1], sender=USER_ADDR, value=1)
    assert exc.value.nonce is None


@pytest.mark.asyncio
async def test_build_leaves_nonce_unset(w3, client):
    w3.eth.contract_results["buyNFT"] = DummyCall()
    tx = await client.build_call_transaction(PAIR_ADDR, PAIR_ABI, "buyNFT", [1], sender=USER_ADDR, value=5)
    assert "nonce" not in tx
    assert tx["value"] == 5


@pytest.mark.asyncio
async def test_send_refusal_is_typed(w3, client):
    w3.eth.send_error = ValueError({"code": -32000, "message": "nonce too low"})
    with pytest.raises(TransactionRejectedError):
        await client.send_raw_transaction(b"raw")
    w3.eth.send_error = None
    assert await client.send_raw_transaction(b"raw") == "0x" + "ab" * 32


@pytest.mark.asyncio
async def test_reverted_receipt_raises_with_reason(w3, client):
    w3.eth.receipts = [{"status": 0, "blockNumber": 10, "gasUsed": 30000}]
    w3.eth.call_error = ContractLogicError("execution reverted: slippage")
    with pytest.raises(TransactionRevertedError) as exc:
        await client.wait_for_confirmation(TX_HASH)
    assert exc.value.tx_hash == TX_HASH
    assert exc.value.reason == "execution reverted: slippage"
    assert exc.value.receipt["gasUsed"] == 30000


@pytest.mark.asyncio
async def test_waits_through_not_found_and_confirmations(w3, client):
    w3.eth.receipts = [OSError("flaky"), {"status": 1, "blockNumber": 10, "gasUsed": 21000}]
    w3.eth.blocks = [10, 11, 12]
    receipt = await client.wait_for_confirmation(TX_HASH, confirmations=3)
    assert receipt["blockNumber"] == 10
    assert w3.eth.blocks == [12]


@pytest.mark.asyncio
async def test_confirmation_timeout(w3, client):
    with pytest.raises(ConfirmationTimeoutError) as exc:
        await client.wait_for_confirmation(TX_HASH, timeout=0.05)
    assert exc.value.tx_hash == TX_HASH


@pytest.mark.asyncio
async def test_connectivity_ok(client):
    info = await client.check_connectivity()
    assert info == {"chain_id": 31337, "block_number": 10, "gas_price": 10**9}


@pytest.mark.asyncio
async def test_connectivity_chain_mismatch(w3, client):
    w3.eth.chain_id_value = 1
    with pytest.raises(ChainIdMismatchError):
        await client.check_connectivity()


@pytest.mark.asyncio
async def test_connectivity_unreachable():
    client = ChainClient(DummyW3(connected=False), expected_chain_id=31337)
    with pytest.raises(ConnectivityError):
        await client.check_connectivity()


@pytest.mark.asyncio
async def test_close_disconnects_provider(w3, client):
    await client.close()
    assert w3.provider.disconnected


@pytest.mark.asyncio
async def test_uncodable_constructor_args_are_validation_errors(w3, client):
    w3.eth.encode_with_abi = True
    with pytest.raises(ValidationError):
        await client.build_deploy_transaction(UINT_CTOR_ABI, "0x6080", ["abc"], sender=USER_ADDR)


@pytest.mark.asyncio
async def test_uncodable_call_args_are_validation_errors(w3, client):
    w3.eth.encode_with_abi = True
    with pytest.raises(ValidationError):
        await client.build_call_transaction(PAIR_ADDR, PAIR_ABI, "buyNFT", ["abc"], sender=USER_ADDR, value=1)
