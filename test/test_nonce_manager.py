import asyncio

import pytest
from redis.exceptions import LockError

from nftdex.core.errors import NonceUnavailableError
from nftdex.core.nonce_manager import NonceSequencer

ADDRESS = "0x70997970C51812dc3A010C7901b1695dbF2b5a9d"


class DummyLock:
    def __init__(self, acquired=True, raise_on_acquire=False):
        self.acquired = acquired
        self.raise_on_acquire = raise_on_acquire
        self.released = False

    async def acquire(self):
        if self.raise_on_acquire:
            raise LockError("boom")
        return self.acquired

    async def release(self):
        self.released = True


class DummyRedis:
    def __init__(self, lock):
        self._lock = lock
        self.names = []

    def lock(self, name, timeout=None, blocking_timeout=None):
        self.names.append(name)
        return self._lock

    async def aclose(self):
        pass


@pytest.mark.asyncio
async def test_concurrent_acquires_are_distinct(chain):
    # The node keeps reporting 0 pending; only the local floor keeps nonces apart.
    chain.stale_pending = 0
    seq = NonceSequencer(chain, ADDRESS)
    nonces = await asyncio.gather(*(seq.acquire() for _ in range(10)))
    assert sorted(nonces) == list(range(10))


@pytest.mark.asyncio
async def test_serial_acquires_increase(chain):
    seq = NonceSequencer(chain, ADDRESS)
    first = await seq.acquire()
    second = await seq.acquire()
    assert second == first + 1


@pytest.mark.asyncio
async def test_chain_ahead_of_floor_wins(chain):
    seq = NonceSequencer(chain, ADDRESS)
    assert await seq.acquire() == 0
    chain.pending_count = 7  # another client used the key
    assert await seq.acquire() == 7
    assert seq.local_floor == 8


@pytest.mark.asyncio
async def test_falls_back_to_latest_count(chain):
    chain.fail_pending = True
    chain.mined_count = 4
    seq = NonceSequencer(chain, ADDRESS)
    assert await seq.acquire() == 4


@pytest.mark.asyncio
async def test_both_queries_failing_is_typed(chain):
    chain.fail_pending = True
    chain.fail_latest = True
    seq = NonceSequencer(chain, ADDRESS)
    with pytest.raises(NonceUnavailableError):
        await seq.acquire()
    assert seq.local_floor is None


@pytest.mark.asyncio
async def test_failed_body_does_not_advance_floor(chain):
    chain.stale_pending = 0
    seq = NonceSequencer(chain, ADDRESS)
    with pytest.raises(RuntimeError):
        async with seq.reserve() as nonce:
            assert nonce == 0
            raise RuntimeError("broadcast refused")
    assert seq.local_floor is None
    assert await seq.acquire() == 0


@pytest.mark.asyncio
async def test_reset_trusts_chain_again(chain):
    chain.stale_pending = 0
    seq = NonceSequencer(chain, ADDRESS)
    await seq.acquire()
    await seq.acquire()
    assert seq.local_floor == 2
    await seq.reset()
    assert seq.local_floor is None
    assert await seq.acquire() == 0


@pytest.mark.asyncio
async def test_reserve_holds_the_slot(chain):
    seq = NonceSequencer(chain, ADDRESS)
    order = []

    async def writer(name):
        async with seq.reserve() as nonce:
            order.append((name, "start", nonce))
            await asyncio.sleep(0.01)
            chain.pending_count += 1
            order.append((name, "end", nonce))

    await asyncio.gather(writer("a"), writer("b"))
    assert [step for _, step, _ in order] == ["start", "end", "start", "end"]
    assert {n for _, _, n in order} == {0, 1}


@pytest.mark.asyncio
async def test_cross_process_lock_is_held_and_released(chain):
    lock = DummyLock()
    seq = NonceSequencer(chain, ADDRESS)
    seq._redis = DummyRedis(lock)
    assert await seq.acquire() == 0
    assert seq._redis.names == [f"nonce_lock:{ADDRESS}"]
    assert lock.released


@pytest.mark.asyncio
@pytest.mark.parametrize("lock", [DummyLock(acquired=False), DummyLock(raise_on_acquire=True)])
async def test_cross_process_lock_unavailable(chain, lock):
    seq = NonceSequencer(chain, ADDRESS)
    seq._redis = DummyRedis(lock)
    with pytest.raises(NonceUnavailableError):
        await seq.acquire()
