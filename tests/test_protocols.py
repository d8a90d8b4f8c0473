"""
Protocol adapter tests: selectors, reserve/slot0 decoding, candidate order,
sanity windows, explicit pool layouts and the protocol factory.
"""
from __future__ import annotations

import math

import pytest

from dex_oracle.core.errors import MalformedData, OutOfRange
from dex_oracle.pairs import TradingPair
from dex_oracle.protocols import (
    PROTOCOLS,
    DexProtocol,
    PancakeSwapProtocol,
    PoolLayout,
    ProtocolFamily,
    QuickSwapProtocol,
    SanityWindow,
    TraderJoeProtocol,
    UniswapV2Protocol,
    UniswapV3Protocol,
    create_protocol,
)
from tests.fakes.chains import reserves_payload, slot0_payload, sqrt_price_x96_for, word

USDC = 10**6
ETH = 10**18


# ---------------------------------------------------------------------------
# Uniswap V2 (constant product)
# ---------------------------------------------------------------------------

class TestUniswapV2:
    @pytest.mark.parametrize("pair", list(TradingPair))
    def test_selector_is_get_reserves(self, pair):
        assert UniswapV2Protocol().build_call_data(pair) == bytes.fromhex("0902f1ac")

    def test_family(self):
        p = UniswapV2Protocol()
        assert p.family is ProtocolFamily.CONSTANT_PRODUCT
        assert isinstance(p, DexProtocol)

    def test_short_response(self):
        with pytest.raises(MalformedData):
            UniswapV2Protocol().parse_price(b"\x00" * 95)

    def test_zero_reserves(self):
        with pytest.raises(MalformedData, match="Zero liquidity"):
            UniswapV2Protocol().parse_price(reserves_payload(0, 0))
        with pytest.raises(MalformedData):
            UniswapV2Protocol().parse_price(reserves_payload(1_000 * USDC, 0))

    def test_usdc_eth_reserves(self):
        # 1000 USDC vs 0.5 ETH -> r0/r1 * 1e12 = 2000
        price = UniswapV2Protocol().parse_price(reserves_payload(1_000_000_000, 500_000_000_000_000_000))
        assert price == pytest.approx(2000.0)

    def test_extra_trailing_bytes_ignored(self):
        raw = reserves_payload(1_000_000_000, 500_000_000_000_000_000) + word(7)
        assert UniswapV2Protocol().parse_price(raw) == pytest.approx(2000.0)

    def test_second_candidate(self):
        # r1/r0 * 1e-12 = 2000
        assert UniswapV2Protocol().parse_price(reserves_payload(1, 2 * 10**15)) == pytest.approx(2000.0)

    def test_same_decimals_candidates(self):
        assert UniswapV2Protocol().parse_price(reserves_payload(2500 * ETH, ETH)) == pytest.approx(2500.0)
        assert UniswapV2Protocol().parse_price(reserves_payload(ETH, 3000 * ETH)) == pytest.approx(3000.0)

    def test_no_candidate_in_window(self):
        with pytest.raises(OutOfRange, match="No reasonable ETH price"):
            UniswapV2Protocol().parse_price(reserves_payload(50_000 * USDC, ETH))

    def test_window_is_open_interval(self):
        # r0/r1 * 1e12 lands exactly on 1000
        with pytest.raises(OutOfRange):
            UniswapV2Protocol().parse_price(reserves_payload(1_000 * USDC, ETH))

    def test_custom_window(self):
        p = UniswapV2Protocol(window=SanityWindow(10.0, 1000.0))
        assert p.parse_price(reserves_payload(150 * USDC, ETH)) == pytest.approx(150.0)

    def test_layout_resolves_order_without_guessing(self):
        # WETH as token0, USDC as token1: none of the heuristic candidates fits
        raw = reserves_payload(ETH, 3_000 * USDC)
        with pytest.raises(OutOfRange):
            UniswapV2Protocol().parse_price(raw)
        layout = PoolLayout(token0_decimals=18, token1_decimals=6, base_is_token0=True)
        assert UniswapV2Protocol(layout=layout).parse_price(raw) == pytest.approx(3000.0)

    def test_layout_still_applies_window(self):
        layout = PoolLayout(token0_decimals=6, token1_decimals=18)
        with pytest.raises(OutOfRange):
            UniswapV2Protocol(layout=layout).parse_price(reserves_payload(50_000 * USDC, ETH))

    def test_full_width_reserves_do_not_crash(self):
        huge = (1 << 256) - 1
        with pytest.raises(OutOfRange):
            UniswapV2Protocol().parse_price(reserves_payload(huge, 1))


class TestForks:
    @pytest.mark.parametrize("cls,name", [(PancakeSwapProtocol, "pancakeswap"), (QuickSwapProtocol, "quickswap")])
    def test_same_algorithm(self, cls, name):
        p = cls()
        assert p.protocol_name == name
        assert p.build_call_data(TradingPair.ETH_USD) == bytes.fromhex("0902f1ac")
        assert p.parse_price(reserves_payload(1_000_000_000, 500_000_000_000_000_000)) == pytest.approx(2000.0)

    def test_error_messages_name_the_dex(self):
        with pytest.raises(MalformedData, match="PancakeSwap"):
            PancakeSwapProtocol().parse_price(b"\x00" * 10)
        with pytest.raises(OutOfRange, match="QuickSwap"):
            QuickSwapProtocol().parse_price(reserves_payload(50_000 * USDC, ETH))


class TestTraderJoe:
    def test_avax_price_scaled_to_eth(self):
        # 25,000 USDC vs 1,000 AVAX -> AVAX $25 -> x120 = 3000
        price = TraderJoeProtocol().parse_price(reserves_payload(25_000 * USDC, 1_000 * ETH))
        assert price == pytest.approx(3000.0)

    def test_avax_outside_window(self):
        with pytest.raises(OutOfRange, match="AVAX"):
            TraderJoeProtocol().parse_price(reserves_payload(10_000 * USDC, 1_000 * ETH))

    def test_scaled_price_outside_eth_window(self):
        p = TraderJoeProtocol(multiplier=1000.0)
        with pytest.raises(OutOfRange, match="Trader Joe ETH price"):
            p.parse_price(reserves_payload(25_000 * USDC, 1_000 * ETH))

    def test_zero_liquidity(self):
        with pytest.raises(MalformedData, match="Trader Joe"):
            TraderJoeProtocol().parse_price(reserves_payload(0, 1_000 * ETH))


# ---------------------------------------------------------------------------
# Uniswap V3 (concentrated liquidity)
# ---------------------------------------------------------------------------

class TestUniswapV3:
    @pytest.mark.parametrize("pair", list(TradingPair))
    def test_selector_is_slot0(self, pair):
        assert UniswapV3Protocol().build_call_data(pair) == bytes.fromhex("3850c7bd")

    def test_family(self):
        assert UniswapV3Protocol().family is ProtocolFamily.CONCENTRATED_LIQUIDITY

    def test_short_response(self):
        with pytest.raises(MalformedData):
            UniswapV3Protocol().parse_price(b"\x00" * 16)

    def test_zero_sqrt_price(self):
        with pytest.raises(MalformedData):
            UniswapV3Protocol().parse_price(b"\x00" * 32)

    def test_crafted_price_in_window(self):
        price = UniswapV3Protocol().parse_price(slot0_payload(sqrt_price_x96_for(2000)))
        assert math.isfinite(price)
        assert price == pytest.approx(2000.0, rel=1e-9)

    def test_exactly_32_bytes_is_enough(self):
        raw = word(sqrt_price_x96_for(3500))
        assert UniswapV3Protocol().parse_price(raw) == pytest.approx(3500.0, rel=1e-9)

    def test_tiny_sqrt_price_out_of_range(self):
        raw = bytes(25) + b"\x01" + bytes(6)  # 2**48
        with pytest.raises(OutOfRange):
            UniswapV3Protocol().parse_price(raw)

    @pytest.mark.parametrize("price", [500, 50_000])
    def test_out_of_window(self, price):
        with pytest.raises(OutOfRange):
            UniswapV3Protocol().parse_price(slot0_payload(sqrt_price_x96_for(price)))

    def test_layout_base_is_token0(self):
        # WETH(18) as token0, USDC(6) as token1
        sqrt_price = math.isqrt(2000 * (1 << 192) // 10**12)
        layout = PoolLayout(token0_decimals=18, token1_decimals=6, base_is_token0=True)
        price = UniswapV3Protocol(layout=layout).parse_price(word(sqrt_price))
        assert price == pytest.approx(2000.0, rel=1e-9)


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

class TestCreateProtocol:
    def test_all_registered(self):
        for name in PROTOCOLS:
            assert create_protocol(name).protocol_name == name

    def test_unknown(self):
        with pytest.raises(KeyError, match="Unknown protocol"):
            create_protocol("curve")

    def test_options(self):
        p = create_protocol(
            "uniswap_v2",
            {"window": [10, 1000], "layout": {"token0_decimals": 18, "token1_decimals": 6, "base_is_token0": True}},
        )
        assert p.window == SanityWindow(10.0, 1000.0)
        assert p.layout == PoolLayout(18, 6, True)

    def test_trader_joe_options(self):
        p = create_protocol("trader_joe", {"pool_window": [5, 50], "multiplier": 100})
        assert p.pool_window == SanityWindow(5.0, 50.0)
        assert p.multiplier == 100.0

    def test_unsupported_option(self):
        with pytest.raises(ValueError, match="Unsupported options"):
            create_protocol("uniswap_v3", {"multiplier": 2})

    def test_window_must_be_ordered(self):
        with pytest.raises(ValueError):
            create_protocol("uniswap_v2", {"window": [100, 10]})
