#!/usr/bin/env python3
"""
Tests for the vectorized (JAX) grid evaluation against the scalar kernel.
"""

import numpy as np

from bands import Band, constant_amplitude, constant_weight
from barycentric_grid import approx_grid, barycentric_eval, error_grid, ideal_on_grid
from barycentric_kernel import ReferenceIterate, compute_approx, compute_error

LOWPASS = [
    Band(-1.0, 0.0, constant_amplitude(0.0), constant_weight(1.0)),
    Band(0.0, 0.5, constant_amplitude(0.5), constant_weight(0.0)),
    Band(0.5, 1.0, constant_amplitude(1.0), constant_weight(1.0)),
]
NODES = np.array([-1.0, -0.7, -0.2, 0.6, 1.0])


def test_scalar_eval_exact_at_nodes():
    it = ReferenceIterate.from_nodes(NODES, LOWPASS)
    for i, xi in enumerate(NODES):
        result = barycentric_eval(xi, NODES, it.response, it.weights)
        assert float(result) == it.response[i]
        assert np.isfinite(result)


def test_grid_matches_scalar_kernel():
    it = ReferenceIterate.from_nodes(NODES, LOWPASS)
    grid = np.linspace(-1.0, 1.0, 57)
    approx = approx_grid(grid, it.nodes, it.response, it.weights)
    expected = [compute_approx(g, it.nodes, it.response, it.weights) for g in grid]
    np.testing.assert_allclose(approx, expected, rtol=1e-12, atol=1e-14,
        err_msg="Grid evaluation differs from scalar kernel")


def test_error_grid_matches_scalar_kernel():
    it = ReferenceIterate.from_nodes(NODES, LOWPASS)
    grid = np.concatenate([np.linspace(-1.0, 1.0, 41), NODES])
    approx, error = error_grid(grid, it.delta, it.nodes, it.response, it.weights, LOWPASS)
    expected = [compute_error(g, it.delta, it.nodes, it.response, it.weights, LOWPASS) for g in grid]
    np.testing.assert_allclose(error, expected, rtol=1e-10, atol=1e-13)
    assert approx.shape == grid.shape


def test_error_grid_exact_at_nodes():
    it = ReferenceIterate.from_nodes(NODES, LOWPASS)
    _, error = error_grid(NODES, it.delta, it.nodes, it.response, it.weights, LOWPASS)
    expected = it.delta * np.array([1.0, -1.0, 1.0, -1.0, 1.0])
    np.testing.assert_array_equal(error, expected)


def test_ideal_on_grid_nan_outside():
    D, W = ideal_on_grid(np.array([-0.5, 0.25, 2.0]), LOWPASS)
    np.testing.assert_array_equal(D[:2], [0.0, 0.5])
    np.testing.assert_array_equal(W[:2], [1.0, 0.0])
    assert np.isnan(D[2]) and np.isnan(W[2])
