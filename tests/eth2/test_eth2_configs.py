from dataclasses import fields

import pytest

from beacon_node.eth2.configs import Eth2Config
from beacon_node.eth2.presets import (
    ETH2_PRESETS,
    INTEROP_CONFIG,
    MAINNET_CONFIG,
    MINIMAL_CONFIG,
    get_preset,
)
from beacon_node.exceptions import UnknownSpec


@pytest.mark.parametrize('name', ('mainnet', 'minimal', 'interop'))
def test_presets_name_their_spec_constants(name):
    assert get_preset(name).spec_constants == name
    assert ETH2_PRESETS[name] is get_preset(name)


def test_unknown_preset():
    with pytest.raises(UnknownSpec):
        get_preset('goerli')


def test_interop_differs_from_minimal_in_genesis_timing_only():
    differing = {
        field.name
        for field in fields(Eth2Config)
        if getattr(INTEROP_CONFIG, field.name) != getattr(MINIMAL_CONFIG, field.name)
    }
    assert differing == {'spec_constants', 'MIN_GENESIS_TIME', 'GENESIS_DELAY'}
    assert INTEROP_CONFIG.MIN_GENESIS_TIME == 0
    assert INTEROP_CONFIG.GENESIS_DELAY == 0


def test_formatted_dict_hex_encodes_bytes():
    data = MAINNET_CONFIG.to_formatted_dict()
    assert data['spec_constants'] == 'mainnet'
    assert data['GENESIS_FORK_VERSION'] == '0x00000000'
    assert data['BLS_WITHDRAWAL_PREFIX'] == '0x00'
    assert data['DEPOSIT_CONTRACT_ADDRESS'] == '0x00000000219ab540356cbb839cbe05303d7705fa'
    assert data['SLOTS_PER_EPOCH'] == 32


@pytest.mark.parametrize('config', (MAINNET_CONFIG, MINIMAL_CONFIG))
def test_from_formatted_dict(config):
    assert Eth2Config.from_formatted_dict(config.to_formatted_dict()) == config


@pytest.mark.parametrize(
    'key, value, exc_type',
    (
        ('SLOTS_PER_EPOCH', True, TypeError),
        ('SLOTS_PER_EPOCH', '32', TypeError),
        ('SLOTS_PER_EPOCH', -1, ValueError),
        ('SECONDS_PER_SLOT', 1.5, TypeError),
        ('GENESIS_FORK_VERSION', 'not-hex', ValueError),
        ('spec_constants', 1, TypeError),
    ),
)
def test_from_formatted_dict_invalid_value(key, value, exc_type):
    data = MINIMAL_CONFIG.to_formatted_dict()
    data[key] = value
    with pytest.raises(exc_type):
        Eth2Config.from_formatted_dict(data)


def test_from_formatted_dict_missing_value():
    data = MINIMAL_CONFIG.to_formatted_dict()
    del data['MAX_DEPOSITS']
    with pytest.raises(KeyError):
        Eth2Config.from_formatted_dict(data)
