#!/usr/bin/env python3
"""
Vectorized evaluation of the barycentric interpolant over a grid.

The exchange loop scans the weighted error on a dense grid to find its
local extrema. The scalar kernel walks the nodes in Python for each query;
here the whole grid is evaluated at once with a jitted, vmapped JAX
function (float64 only).

Exact node hits behave as in the scalar kernel: a grid point equal to a
node returns that node's C value, and its weighted error is the levelled
ripple -reference_sign(i) * delta. Sums are plain, so off-node values can
differ from the scalar (FMA) path in the last bits.
"""

import numpy as np
import jax
import jax.numpy as jnp
from jax import config

from barycentric_kernel import ideal_response_and_weight, reference_sign

# Configure JAX to use 64-bit precision to match numpy
config.update("jax_enable_x64", True)


@jax.jit
def barycentric_eval(x, zj, fj, wj):
    """
    Second form barycentric formula at a scalar ``x``.

    Args:
        x: Evaluation point (scalar)
        zj: Reference nodes (array)
        fj: Values at the nodes (array)
        wj: Barycentric weights (array)

    Returns:
        Interpolant value at x, exactly fj[i] when x == zj[i]
    """
    diff = x - zj
    hit = diff == 0.0

    # keep 1/diff out of the 0/0 branch entirely
    inv = jnp.where(hit, 0.0, 1.0 / jnp.where(hit, 1.0, diff))
    num = jnp.sum(wj * inv * fj)
    den = jnp.sum(wj * inv)

    result_exact = fj[jnp.argmax(hit)]
    return jnp.where(jnp.any(hit), result_exact, num / den)


_barycentric_eval_grid = jax.jit(jax.vmap(barycentric_eval, in_axes=(0, None, None, None)))


@jax.jit
def _node_hits(grid, zj):
    hits = grid[:, None] == zj[None, :]
    return jnp.any(hits, axis=1), jnp.argmax(hits, axis=1)


def approx_grid(grid, x, C, w):
    """Interpolant values at every point of ``grid`` (numpy float64 array)."""
    grid = jnp.asarray(np.asarray(grid, dtype=np.float64))
    zj = jnp.asarray(np.asarray(x, dtype=np.float64))
    fj = jnp.asarray(np.asarray(C, dtype=np.float64))
    wj = jnp.asarray(np.asarray(w, dtype=np.float64))
    return np.asarray(_barycentric_eval_grid(grid, zj, fj, wj))


def ideal_on_grid(grid, bands):
    """Ideal amplitude and weight arrays on ``grid``; NaN outside all bands."""
    D = np.full(len(grid), np.nan)
    W = np.full(len(grid), np.nan)
    for k, x_val in enumerate(grid):
        d, wt = ideal_response_and_weight(x_val, bands)
        if d is not None:
            D[k] = float(d)
            W[k] = float(wt)
    return D, W


def error_grid(grid, delta, x, C, w, bands):
    """
    Weighted error (approx - D) * W at every point of ``grid``.

    Returns:
        Tuple of (approx, error) numpy arrays
    """
    grid = np.asarray(grid, dtype=np.float64)
    approx = approx_grid(grid, x, C, w)
    D, W = ideal_on_grid(grid, bands)
    error = (approx - D) * W

    hit, idx = _node_hits(jnp.asarray(grid), jnp.asarray(np.asarray(x, dtype=np.float64)))
    hit = np.asarray(hit)
    idx = np.asarray(idx)
    signs = np.array([-reference_sign(i) for i in range(len(x))], dtype=np.float64)
    error[hit] = signs[idx[hit]] * float(delta)
    return approx, error
