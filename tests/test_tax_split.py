"""Tests for tax split policies and the decimal helpers they rely on."""

from decimal import Decimal

import pytest

from procure_pricing.config.settings import Settings
from procure_pricing.core.money import round2, to_decimal
from procure_pricing.domain.services.tax_split import (
    INTER_STATE,
    INTRA_STATE,
    UNION_TERRITORY,
    policy_for,
)


class TestPolicyLookup:

    @pytest.mark.parametrize(
        "regime, expected",
        [
            ("intra_state", INTRA_STATE),
            ("INTER_STATE", INTER_STATE),
            (" union_territory ", UNION_TERRITORY),
        ],
    )
    def test_known_regimes(self, regime, expected):
        assert policy_for(regime) is expected

    @pytest.mark.parametrize("regime", [None, "", "export"])
    def test_unknown_regime_falls_back_to_intra_state(self, regime):
        assert policy_for(regime) is INTRA_STATE

    def test_regime_from_environment(self, monkeypatch):
        monkeypatch.setenv("TAX_REGIME", "inter_state")
        assert policy_for(Settings().TAX_REGIME) is INTER_STATE


class TestBuildCharges:

    def test_intra_state_split(self):
        charges = INTRA_STATE.build_charges(Decimal("18"), Decimal("180"))
        assert [(c.charge_name, c.tax_field, c.charge_value) for c in charges] == [
            ("cgst @9%", "cgst", Decimal("9")),
            ("sgst @9%", "sgst", Decimal("9")),
        ]
        assert all(c.status == 1 and c.nature == "percent" and c.charge_on == "item" for c in charges)

    def test_inter_state_keeps_full_rate(self):
        (charge,) = INTER_STATE.build_charges("28", Decimal("100"))
        assert charge.charge_name == "igst @28%"
        assert charge.charge_amount == Decimal("28")

    def test_fractional_share_is_rounded_in_value_only(self):
        charges = INTRA_STATE.build_charges("0.25", Decimal("1000"))
        assert charges[0].charge_name == "cgst @0.125%"
        assert charges[0].charge_value == Decimal("0.13")

    @pytest.mark.parametrize("rate", [0, None, "", "n/a"])
    def test_no_rate_no_charges(self, rate):
        assert INTRA_STATE.build_charges(rate, Decimal("100")) == []


class TestDecimalHelpers:

    @pytest.mark.parametrize(
        "raw, expected",
        [
            (None, Decimal("0")),
            ("", Decimal("0")),
            (" 12.50 ", Decimal("12.5")),
            (7, Decimal("7")),
            (0.1, Decimal("0.1")),
            (True, Decimal("1")),
            ("abc", Decimal("0")),
            ("Infinity", Decimal("0")),
            ([1], Decimal("0")),
        ],
    )
    def test_to_decimal(self, raw, expected):
        assert to_decimal(raw) == expected

    def test_round2_half_up(self):
        assert round2(Decimal("2.345")) == Decimal("2.35")
        assert round2(Decimal("-2.345")) == Decimal("-2.35")

    def test_round2_passes_values_beyond_precision(self):
        huge = Decimal("1e27") * 100
        assert round2(huge) == huge

    def test_round2_passes_non_finite(self):
        assert round2(Decimal("Infinity")).is_infinite()
