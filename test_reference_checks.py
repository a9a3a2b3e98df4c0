#!/usr/bin/env python3
"""
Tests for the reference set precondition checks.
"""

import numpy as np
import mpmath
import pytest

from bands import Band, constant_amplitude, constant_weight
from barycentric_kernel import barycentric_weights, compute_delta
from reference_checks import (
    DegenerateReferenceError,
    ReferenceSetError,
    check_aligned,
    check_delta,
    check_weights,
    find_degenerate_weights,
    validate_reference_set,
)

LOWPASS = [
    Band(-1.0, 0.0, constant_amplitude(0.0), constant_weight(1.0)),
    Band(0.0, 0.5, constant_amplitude(0.5), constant_weight(0.0)),
    Band(0.5, 1.0, constant_amplitude(1.0), constant_weight(1.0)),
]


def test_valid_reference_set_passes():
    validate_reference_set([-1.0, -0.7, -0.2, 0.6, 1.0], LOWPASS)


@pytest.mark.parametrize("nodes, message", [
    ([0.6], "at least 2"),
    ([-0.7, -0.7, 0.6], "strictly increasing"),
    ([0.6, -0.7], "strictly increasing"),
    ([-0.7, 0.6, 1.5], "not covered"),
    ([-0.7, 0.25, 0.6], "weight is zero"),
])
def test_invalid_reference_sets(nodes, message):
    with pytest.raises(ReferenceSetError, match=message):
        validate_reference_set(nodes, LOWPASS)


def test_rounding_collision_rejected():
    """Nodes that collapse under float rounding are caught before the kernel."""
    a = 0.1 + 0.2
    b = 0.3 + 5e-17
    assert a == b
    with pytest.raises(ReferenceSetError):
        validate_reference_set([-0.5, a, b], [Band(-1.0, 1.0, constant_amplitude(1.0), constant_weight(1.0))])


def test_check_aligned():
    check_aligned([1, 2], [3, 4], [5, 6])
    with pytest.raises(ReferenceSetError):
        check_aligned([1, 2], [3])


def test_degenerate_weights_detected():
    x = np.array([-0.5, 0.2, 0.2, 0.9])
    w = barycentric_weights(x)
    assert find_degenerate_weights(w) == [1, 2]
    with pytest.raises(DegenerateReferenceError):
        check_weights(w)

    bands = [Band(-1.0, 1.0, constant_amplitude(1.0), constant_weight(1.0))]
    with pytest.raises(DegenerateReferenceError):
        check_delta(compute_delta(x, bands))


def test_check_delta_passes_finite_values():
    assert check_delta(0.125) == 0.125
    assert check_delta(mpmath.mpf("1e-40")) == mpmath.mpf("1e-40")
    with pytest.raises(DegenerateReferenceError):
        check_delta(mpmath.nan)
    check_weights([1.0, -2.0, mpmath.mpf(3)])
