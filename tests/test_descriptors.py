"""
Descriptor tokens: additive, intensity-scaled, clamped back into [0, 1].
"""
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest
from boom808.core.types import ParameterSet
from boom808.params.descriptors import apply_descriptors, DESCRIPTOR_MAP
from boom808.params.resolve import resolve_params


@pytest.mark.parametrize("token", sorted(DESCRIPTOR_MAP))
def test_full_intensity_adds_mapped_amount(token):
    field, amount = DESCRIPTOR_MAP[token]
    out = apply_descriptors({}, {token: 1.0})
    assert getattr(out, field) == pytest.approx(min(1.0, amount) if field != "master_gain_db" else amount)


def test_intensity_scales_amount():
    assert apply_descriptors({}, {"sub": 0.5}).sub_amount == pytest.approx(0.3)
    assert apply_descriptors({}, {"punchy": 0.25}).punch == pytest.approx(0.2)


def test_tokens_sharing_a_field_accumulate_and_clamp():
    assert apply_descriptors({}, {"sub": 1.0, "deep": 1.0}).sub_amount == 1.0
    assert apply_descriptors({}, {"sub": 0.5, "deep": 0.5}).sub_amount == pytest.approx(0.5)


def test_added_to_base_then_clamped():
    out = apply_descriptors({"shortness": 0.5, "detune": 0.1}, {"short": 1.0, "detuned": 0.5})
    assert out.shortness == 1.0
    assert out.detune == pytest.approx(0.5)


def test_saturated_adds_half_db():
    out = apply_descriptors({"master_gain_db": -3.0}, {"saturated": 1.0})
    assert out.master_gain_db == pytest.approx(-2.5)


def test_intensity_clamped_and_nan_ignored():
    assert apply_descriptors({}, {"punchy": 3.0}).punch == pytest.approx(0.8)
    assert apply_descriptors({}, {"punchy": -1.0}).punch == 0.0
    assert apply_descriptors({}, {"punchy": float("nan")}).punch == 0.0


def test_unknown_tokens_ignored():
    base = {"seed": 4, "growl": 0.2}
    assert apply_descriptors(base, {"wobbly": 1.0, "low": 0.5}) == resolve_params(base)
    assert apply_descriptors(base, {}) == resolve_params(base)
    assert apply_descriptors(base, None) == resolve_params(base)


def test_tokens_are_case_insensitive():
    assert apply_descriptors({}, {"SUB": 1.0}).sub_amount == pytest.approx(0.6)


def test_base_is_not_modified():
    base = ParameterSet(seed=9, growl=0.1)
    raw = {"growl": 0.1}
    apply_descriptors(base, {"growl": 1.0})
    apply_descriptors(raw, {"growl": 1.0})
    assert base.growl == 0.1
    assert raw == {"growl": 0.1}
