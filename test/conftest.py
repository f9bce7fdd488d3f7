# /test/conftest.py
# In-memory stand-ins for the node. Transactions are really signed; the fake
# node only recognises them by a marker embedded in their calldata.
import uuid

import pytest
from eth_account import Account
from web3 import Web3

from nftdex.core.errors import BlockchainError, TransactionRejectedError, TransactionRevertedError
from nftdex.core.nonce_manager import NonceSequencer
from nftdex.core.state import TransactionLedger
from nftdex.core.tx import TransactionManager

CHAIN_ID = 31337
GAS_PRICE = 10**9
NFT_ADDR = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
PAIR_ADDR = "0xe7f1725E7734CE288F8367e1Bb143E90bb3F0512"
FACTORY_ADDR = "0x9fE46736679d2D9a65F0992F2272dE9f3c7fa6e0"
USER_ADDR = "0x70997970C51812dc3A010C7901b1695dbF2b5a9d"


class FakeChain:
    """Implements the ChainClient surface the gateway and adapters rely on."""

    def __init__(self, chain_id: int = CHAIN_ID):
        self.expected_chain_id = chain_id
        self.block_number = 1
        self.pending_count = 0
        self.mined_count = 0
        self.fail_pending = False
        self.fail_latest = False
        self.stale_pending = None  # pending count the node reports regardless of what was sent
        self.reject_sends = set()  # 1-based send attempts the node refuses
        self.revert_labels = set()  # methods whose transactions mine with status 0
        self.revert_sends = set()  # 1-based send attempts that mine with status 0
        self.responses = {}
        self.events = {}
        self.code = {}
        self.balance = 10 * 10**18
        self.built = []
        self.sent = []
        self.receipts = {}
        self.closed = False
        self._builds = {}
        self._send_attempts = 0

    # --- Reads ---

    async def read(self, address, abi, method, args=()):
        value = self.responses.get((address, method), self.responses.get(method))
        if value is None:
            raise BlockchainError(f"no response configured for {method}")
        if isinstance(value, Exception):
            raise value
        return value(*args) if callable(value) else value

    async def get_event_logs(self, address, abi, event_name, from_block=0):
        return list(self.events.get(event_name, []))

    async def get_transaction_count(self, address, block_identifier="pending"):
        if block_identifier == "pending":
            if self.fail_pending:
                raise BlockchainError("pending count unavailable")
            return self.pending_count if self.stale_pending is None else self.stale_pending
        if self.fail_latest:
            raise BlockchainError("latest count unavailable")
        return self.mined_count

    async def get_balance(self, address):
        return self.balance

    async def get_code(self, address):
        return self.code.get(address, b"")

    async def get_network_info(self):
        return {"chain_id": self.expected_chain_id, "block_number": self.block_number, "gas_price": GAS_PRICE}

    async def check_connectivity(self):
        return await self.get_network_info()

    # --- Writes ---

    def _tx(self, sender, value, label, args, to=None):
        marker = uuid.uuid4().bytes
        self._builds[marker] = {"label": label, "args": list(args), "value": value, "to": to}
        self.built.append(self._builds[marker])
        tx = {
            "from": sender,
            "value": value,
            "gas": 300000,
            "gasPrice": GAS_PRICE,
            "chainId": self.expected_chain_id,
            "data": Web3.to_hex(marker),
        }
        if to is not None:
            tx["to"] = to
        return tx

    async def build_call_transaction(self, address, abi, method, args, sender, value=0):
        return self._tx(sender, value, method, args, to=Web3.to_checksum_address(address))

    async def build_deploy_transaction(self, abi, bytecode, args, sender, value=0):
        return self._tx(sender, value, "constructor", args)

    async def send_raw_transaction(self, raw_transaction):
        self._send_attempts += 1
        if self._send_attempts in self.reject_sends:
            raise TransactionRejectedError("Node rejected transaction: insufficient funds for gas * price + value")
        raw = bytes(raw_transaction)
        build = next(b for m, b in self._builds.items() if m in raw)
        reverted = build["label"] in self.revert_labels or self._send_attempts in self.revert_sends
        tx_hash = Web3.to_hex(Web3.keccak(raw))
        self.pending_count += 1
        self.sent.append({**build, "tx_hash": tx_hash})
        self.block_number += 1
        contract_address = None
        if build["to"] is None:
            contract_address = Web3.to_checksum_address(Web3.keccak(raw)[-20:])
            self.code[contract_address] = b"\x60\x80"
        self.receipts[tx_hash] = {
            "transactionHash": tx_hash,
            "blockNumber": self.block_number,
            "gasUsed": 21000,
            "effectiveGasPrice": GAS_PRICE,
            "status": 0 if reverted else 1,
            "contractAddress": contract_address,
        }
        return tx_hash

    async def wait_for_confirmation(self, tx_hash, confirmations=1, timeout=None):
        receipt = self.receipts[tx_hash]
        self.mined_count = self.pending_count
        if receipt["status"] == 0:
            raise TransactionRevertedError(tx_hash, receipt, "execution reverted")
        return receipt

    async def close(self):
        self.closed = True


@pytest.fixture
def chain():
    return FakeChain()


@pytest.fixture
def account():
    return Account.create()


@pytest.fixture
def tx_manager(chain, account):
    return TransactionManager(chain, account, NonceSequencer(chain, account.address), TransactionLedger())
