import pytest

from nftdex.core.config import Settings
from nftdex.core.config_validator import validate
from nftdex.core.registry import ContractRegistry, ContractRole

KEY = "0x" + "11" * 32


def make_settings(**overrides):
    values = {"EXECUTOR_PRIVATE_KEY": KEY, "RPC_URL": "http://localhost:8545"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


def test_valid_configuration_passes():
    validate(make_settings())


@pytest.mark.parametrize("overrides", [
    {"EXECUTOR_PRIVATE_KEY": None},
    {"EXECUTOR_PRIVATE_KEY": "0x1234"},
    {"RPC_URL": "localhost:8545"},
    {"NFT_CONTRACT_ADDRESS": "0xnope"},
    {"TX_CONFIRMATIONS": 0},
])
def test_invalid_configuration_halts(overrides):
    with pytest.raises(ValueError):
        validate(make_settings(**overrides))


def test_registry_seeded_from_settings():
    settings = make_settings(PAIR_CONTRACT_ADDRESS="0xe7f1725e7734ce288f8367e1bb143e90bb3f0512")
    registry = ContractRegistry.from_settings(settings)
    assert registry.get(ContractRole.PAIR) == "0xe7f1725E7734CE288F8367e1Bb143E90bb3F0512"
    assert registry.get(ContractRole.NFT) is None
