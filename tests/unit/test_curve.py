"""Tests for bonding curve / global account decoding and quotes"""
import pytest
from solders.pubkey import Pubkey

from pumpbot.core.curve import (
    BondingCurveState,
    calculate_with_slippage_buy,
    calculate_with_slippage_sell,
    decode_bonding_curve_account,
    decode_global_account,
)


def small_curve(**overrides):
    fields = dict(
        virtual_token_reserves=1000,
        virtual_sol_reserves=100,
        real_token_reserves=1000,
        real_sol_reserves=0,
        token_total_supply=1000,
        complete=False,
    )
    fields.update(overrides)
    return BondingCurveState(**fields)


class TestDecodeBondingCurve:
    def test_decodes_fields_and_creator(self, curve_bytes, creator):
        state = decode_bonding_curve_account(curve_bytes())

        assert state is not None
        assert state.virtual_token_reserves == 1_073_000_000_000_000
        assert state.virtual_sol_reserves == 30_000_000_000
        assert state.real_token_reserves == 793_100_000_000_000
        assert state.real_sol_reserves == 0
        assert state.token_total_supply == 1_000_000_000_000_000
        assert state.complete is False
        assert state.creator == creator

    def test_legacy_layout_has_no_creator(self, curve_bytes):
        state = decode_bonding_curve_account(curve_bytes(with_creator=False))

        assert state is not None
        assert state.creator is None

    def test_complete_flag(self, curve_bytes):
        state = decode_bonding_curve_account(curve_bytes(complete=True))
        assert state.complete is True

    def test_wrong_discriminator_rejected(self, curve_bytes):
        data = b"\x00" * 8 + curve_bytes()[8:]
        assert decode_bonding_curve_account(data) is None

    def test_truncated_data_rejected(self, curve_bytes):
        assert decode_bonding_curve_account(curve_bytes()[:20]) is None


class TestDecodeGlobal:
    def test_decodes_fee_fields(self, global_bytes, fee_recipient):
        account = decode_global_account(global_bytes(fee_basis_points=95))

        assert account is not None
        assert account.initialized is True
        assert account.authority == Pubkey.default()
        assert account.fee_recipient == fee_recipient
        assert account.fee_basis_points == 95
        assert account.initial_virtual_sol_reserves == 30_000_000_000

    def test_truncated_global_rejected(self, global_bytes):
        assert decode_global_account(global_bytes()[:40]) is None


class TestQuotes:
    def test_buy_price_constant_product(self):
        # k = 100 * 1000; new sol = 200; new tokens = 500 + 1
        assert small_curve().get_buy_price(100) == 499

    def test_buy_price_capped_by_real_reserves(self):
        assert small_curve(real_token_reserves=300).get_buy_price(100) == 300

    def test_buy_price_zero_amount(self):
        assert small_curve().get_buy_price(0) == 0

    def test_sell_price_without_fee(self):
        # 1000 * 100 // (1000 + 1000)
        assert small_curve().get_sell_price(1000, 0) == 50

    def test_sell_price_deducts_fee(self):
        assert small_curve().get_sell_price(1000, 1000) == 45

    def test_complete_curve_cannot_be_quoted(self):
        curve = small_curve(complete=True)
        with pytest.raises(ValueError):
            curve.get_buy_price(100)
        with pytest.raises(ValueError):
            curve.get_sell_price(100, 100)


class TestSlippage:
    def test_buy_bound_adds_basis_points(self):
        assert calculate_with_slippage_buy(100_000, 100) == 101_000

    def test_sell_bound_subtracts_basis_points(self):
        assert calculate_with_slippage_sell(50, 500) == 48

    def test_zero_slippage_is_identity(self):
        assert calculate_with_slippage_buy(12345, 0) == 12345
        assert calculate_with_slippage_sell(12345, 0) == 12345
