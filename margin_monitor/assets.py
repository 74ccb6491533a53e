"""Registry of supported networks, coins and DeepBook pools.

Every lookup is total over the enums below and raises
``UnsupportedAssetError`` for anything else.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .errors import UnsupportedAssetError


class Network(str, Enum):
    MAINNET = "mainnet"
    TESTNET = "testnet"

    @classmethod
    def parse(cls, value: str) -> "Network":
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise UnsupportedAssetError(f"Unsupported network '{value}'") from None


class CoinSymbol(str, Enum):
    SUI = "SUI"
    USDC = "USDC"

    @classmethod
    def parse(cls, value: str) -> "CoinSymbol":
        try:
            return cls(value.strip().upper())
        except ValueError:
            raise UnsupportedAssetError(f"Unsupported coin '{value}'") from None


COIN_DECIMALS: dict[CoinSymbol, int] = {
    CoinSymbol.SUI: 9,
    CoinSymbol.USDC: 6,
}

COIN_TYPES: dict[CoinSymbol, str] = {
    CoinSymbol.SUI: (
        "0x0000000000000000000000000000000000000000000000000000000000000002::sui::SUI"
    ),
    CoinSymbol.USDC: (
        "0xdba34672e30cb065b1f93e3ab55318768fd6fef66c15942c9f7cb846e2f900e7::usdc::USDC"
    ),
}


@dataclass(frozen=True)
class PoolInfo:
    base: CoinSymbol
    quote: CoinSymbol
    # Table of per-balance-manager accounts; holds open order ids.
    account_table_id: str


class PoolKey(str, Enum):
    SUI_USDC = "SUI_USDC"

    @classmethod
    def parse(cls, value: str) -> "PoolKey":
        try:
            return cls(value.strip().upper())
        except ValueError:
            raise UnsupportedAssetError(f"Unsupported pool '{value}'") from None

    @property
    def info(self) -> PoolInfo:
        return POOLS[self]


POOLS: dict[PoolKey, PoolInfo] = {
    PoolKey.SUI_USDC: PoolInfo(
        base=CoinSymbol.SUI,
        quote=CoinSymbol.USDC,
        account_table_id=(
            "0x85b985f2546b2d0138fe4fec0c9407e955a456c1e081cce71608fee67fcdde01"
        ),
    ),
}


@dataclass(frozen=True)
class SharedObjectRef:
    object_id: str
    initial_shared_version: int
    mutable: bool = False


@dataclass(frozen=True)
class AggregatorInfo:
    """On-chain price aggregator object plus the Pyth feed that updates it."""

    price_aggregator: SharedObjectRef
    pyth_price_id: str


@dataclass(frozen=True)
class NetworkConfig:
    pyth_state_id: str
    wormhole_state_id: str
    price_service_endpoint: str
    aggregators: dict[str, AggregatorInfo] = field(default_factory=dict)


NETWORK_CONFIGS: dict[Network, NetworkConfig] = {
    Network.MAINNET: NetworkConfig(
        pyth_state_id="0x1f9310238ee9298fb703c3419030b35b22bb1cc37113e3bb5007c99aec79e5b8",
        wormhole_state_id="0xaeab97f96cf9877fee2883315d459552b2b921edc16d7ceac6eab944dd88919c",
        price_service_endpoint="https://hermes.pyth.network",
        aggregators={
            COIN_TYPES[CoinSymbol.SUI]: AggregatorInfo(
                price_aggregator=SharedObjectRef(
                    object_id="0x795e888b88d2cfd5aa5174cba71418e87878c7dd7d1980e5b0b2e51cc499aa53",
                    initial_shared_version=610893705,
                ),
                pyth_price_id="0x23d7315113f5b1d3ba7a83604c44b94d79f4fd69af77f804fc7f920a6dc65744",
            ),
            COIN_TYPES[CoinSymbol.USDC]: AggregatorInfo(
                price_aggregator=SharedObjectRef(
                    object_id="0x4b612d4d2039d90f596a362f15346a95149728613ca9d2e2c7e471b72b86c105",
                    initial_shared_version=610893707,
                ),
                pyth_price_id="0xeaa020c61cc479712813461ce153894a96a6c00b21ed0cfc2798d1f9a9e9c94a",
            ),
        },
    ),
    Network.TESTNET: NetworkConfig(
        pyth_state_id="0x2d82612a354f0b7e52809fc2845642911c7190404620cec8688f68808f8800d8",
        wormhole_state_id="0xebba4cc4d614f7a7cdbe883acc76d1cc767922bc96778e7b68be0d15fce27c02",
        price_service_endpoint="https://hermes-beta.pyth.network",
        aggregators={
            "0xa1ec7fc00a6f40db9693ad1415d0c193ad3906494428cf252621037bd7117e29::usdc::USDC": AggregatorInfo(
                price_aggregator=SharedObjectRef(
                    object_id="0x50bfd18d36bf7a9a24c83d2a16e13eb88b824fd181e71e76acb649fae3143b8a",
                    initial_shared_version=442159459,
                    mutable=True,
                ),
                # beta feed
                pyth_price_id="0x41f3625971ca2ed2263e78573fe5ce23e13d2558ed3f2e47ab0f84fb9e7ae722",
            ),
        },
    ),
}

TESTNET_COIN_TYPES: dict[CoinSymbol, str] = {
    CoinSymbol.USDC: (
        "0xa1ec7fc00a6f40db9693ad1415d0c193ad3906494428cf252621037bd7117e29::usdc::USDC"
    ),
}


def normalize_struct_tag(coin_type: str) -> str:
    """Pad the address of a Move struct tag to 32 bytes.

    Examples:
        "0x2::sui::SUI" → "0x000…002::sui::SUI"
    """
    parts = coin_type.strip().split("::")
    if len(parts) != 3 or not all(parts):
        raise UnsupportedAssetError(f"Malformed coin type '{coin_type}'")
    address, module, name = parts
    hex_part = address.lower().removeprefix("0x")
    try:
        int(hex_part, 16)
    except ValueError:
        raise UnsupportedAssetError(f"Malformed coin type '{coin_type}'") from None
    if len(hex_part) > 64:
        raise UnsupportedAssetError(f"Malformed coin type '{coin_type}'")
    return f"0x{hex_part.rjust(64, '0')}::{module}::{name}"


def get_network_config(network: Network) -> NetworkConfig:
    try:
        return NETWORK_CONFIGS[network]
    except KeyError:
        raise UnsupportedAssetError(f"Unsupported network '{network}'") from None


def coin_type_for(network: Network, symbol: CoinSymbol) -> str:
    if network is Network.TESTNET:
        try:
            return TESTNET_COIN_TYPES[symbol]
        except KeyError:
            raise UnsupportedAssetError(
                f"{symbol.value} is not available on {network.value}"
            ) from None
    return COIN_TYPES[symbol]


def get_aggregator_info(network: Network, coin_type: str) -> AggregatorInfo:
    """Price aggregator for ``coin_type`` on ``network``."""
    tag = normalize_struct_tag(coin_type)
    info = get_network_config(network).aggregators.get(tag)
    if info is None:
        raise UnsupportedAssetError(
            f"Unsupported coin type '{coin_type}' on {network.value}"
        )
    return info


def get_pyth_feed_id(network: Network, symbol: CoinSymbol) -> str:
    return get_aggregator_info(network, coin_type_for(network, symbol)).pyth_price_id


def get_decimals(symbol: CoinSymbol) -> int:
    return COIN_DECIMALS[symbol]
