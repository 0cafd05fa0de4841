from __future__ import annotations

import unittest

from suidex.domain.services.token_symbols import extract_symbol, extract_token_pair
from suidex.domain.services.tvl_estimation import estimate_tvl


USDC_TYPE = "0x5d4b302506645c37ff133b98c4b50a5ae14841659738d6d733d59d0d217a93bf::coin::COIN"


class TokenSymbolTests(unittest.TestCase):
    def test_extract_symbol_uses_last_segment(self):
        self.assertEqual(extract_symbol("0x2::sui::SUI"), "SUI")
        self.assertEqual(extract_symbol("0xdba3::usdc::USDC"), "USDC")

    def test_extract_symbol_falls_back_to_known_table_for_generic_wrappers(self):
        self.assertEqual(extract_symbol(USDC_TYPE), "USDC")

    def test_extract_symbol_returns_placeholders(self):
        self.assertEqual(extract_symbol(""), "UNKNOWN")
        self.assertEqual(extract_symbol(None), "UNKNOWN")
        self.assertEqual(extract_symbol("0xfeed::coin::COIN"), "TOKEN")

    def test_extract_token_pair_splits_nested_generics(self):
        type_repr = (
            "0x1eab::pool::Pool<0x2::sui::SUI, "
            "0xabc::wrapper::Wrapped<0xdef::weth::WETH>, 0x9::fee::Tier>"
        )
        self.assertEqual(extract_token_pair(type_repr), ("SUI", "WRAPPED"))


class TvlEstimationTests(unittest.TestCase):
    def test_native_side_is_doubled_at_native_price(self):
        tvl = estimate_tvl(
            reserve_a=2_000e9,
            reserve_b=5_000e6,
            symbol_a="SUI",
            symbol_b="USDC",
            native_price_usd=4.0,
        )
        self.assertAlmostEqual(tvl, 16_000.0)

    def test_stable_side_is_rescaled_from_six_decimals(self):
        tvl = estimate_tvl(
            reserve_a=1e9,
            reserve_b=3_000e6,
            symbol_a="WETH",
            symbol_b="USDC",
            native_price_usd=4.0,
        )
        self.assertAlmostEqual(tvl, 6_000.0)

    def test_stable_token_on_first_side_is_used(self):
        tvl = estimate_tvl(
            reserve_a=1_000e6,
            reserve_b=7e9,
            symbol_a="USDT",
            symbol_b="WBTC",
            native_price_usd=4.0,
        )
        self.assertAlmostEqual(tvl, 2_000.0)

    def test_other_pairs_use_larger_reserve_at_native_price(self):
        tvl = estimate_tvl(
            reserve_a=10e9,
            reserve_b=30e9,
            symbol_a="DEEP",
            symbol_b="WAL",
            native_price_usd=2.0,
        )
        self.assertAlmostEqual(tvl, 120.0)


if __name__ == "__main__":
    unittest.main()
