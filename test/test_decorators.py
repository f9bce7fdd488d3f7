import pytest
from tenacity import wait_none

from nftdex.core.decorators import retry_node_check
from nftdex.core.errors import ChainIdMismatchError, ConnectivityError


def counting(error, succeed_on=None):
    calls = []

    async def check():
        calls.append(1)
        if succeed_on is not None and len(calls) >= succeed_on:
            return {"chain_id": 31337}
        raise error

    return calls, retry_node_check(check).retry_with(wait=wait_none())


@pytest.mark.asyncio
async def test_unreachable_node_is_retried_then_raised():
    calls, check = counting(ConnectivityError("RPC node unreachable"))
    with pytest.raises(ConnectivityError):
        await check()
    assert len(calls) == 3


@pytest.mark.asyncio
async def test_node_coming_up_succeeds():
    calls, check = counting(ConnectivityError("RPC node unreachable"), succeed_on=2)
    assert await check() == {"chain_id": 31337}
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_chain_mismatch_fails_without_retry():
    calls, check = counting(ChainIdMismatchError("Chain id mismatch"))
    with pytest.raises(ChainIdMismatchError):
        await check()
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_other_errors_are_not_retried():
    calls, check = counting(ValueError("bad config"))
    with pytest.raises(ValueError):
        await check()
    assert len(calls) == 1
