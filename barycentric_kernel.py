#!/usr/bin/env python3
"""
Barycentric Lagrange interpolation kernel for the Parks-McClellan exchange.

At every iteration of the Remez exchange the current reference set is
turned into barycentric weights, the levelled reference error ``delta`` and
the response values ``C`` that the interpolant takes at the nodes. The
interpolant and the weighted error are then evaluated at many candidate
points to locate the next set of extrema.

Two precisions share one implementation:

- fixed width (numpy float64): barycentric_weights, compute_delta, ...
- arbitrary precision (mpmath): mp_barycentric_weights, mp_compute_delta,
  ... each taking ``prec`` (bits, default 165)

See Berrut & Trefethen (2004) and Pachon & Trefethen (2009).
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from bands import BandLookup
from numeric_backends import DEFAULT_PRECISION, FLOAT64, MPArithmetic

logger = logging.getLogger(__name__)

# nodes multiplied together per interleaved group in the weight product
WEIGHT_GROUP_SIZE = 15


def reference_sign(index):
    """
    Sign attached to reference node ``index`` in the levelled error equation.

    -1 for even indices, +1 for odd ones. Successive nodes alternate, which
    is how the equioscillation of the optimal error enters the delta
    denominator. The weighted error of the interpolant at node ``index`` is
    ``-reference_sign(index) * delta``.
    """
    return -1 if index % 2 == 0 else 1


def weight_group_step(n):
    """Number of interleaved groups used to accumulate the weight products."""
    return (n - 2) // WEIGHT_GROUP_SIZE + 1


def ideal_response_and_weight(x_val, bands):
    """
    Ideal amplitude D and weight W at ``x_val``.

    Bands are scanned in order and the first one containing ``x_val``
    (bounds inclusive) answers. Returns ``(None, None)`` when no band
    contains the point; callers guarantee coverage.
    """
    if isinstance(bands, BandLookup):
        return bands.lookup(x_val)
    for band in bands:
        if band.start <= x_val <= band.stop:
            return band.amplitude(band.space, x_val), band.weight(band.space, x_val)
    return None, None


class BarycentricKernel:
    """Kernel operations bound to one arithmetic backend."""

    def __init__(self, arithmetic):
        self.arithmetic = arithmetic

    def weights(self, x):
        """
        Barycentric weights w_i = 1 / prod_{k != i} 2 (x_i - x_k).

        The product for each node is taken over ``step`` interleaved groups
        of the other nodes (k = j, j + step, j + 2 step, ...) instead of in
        index order, which keeps the partial products from drifting towards
        overflow or underflow on large reference sets.
        """
        ar = self.arithmetic
        with ar.scope():
            x = ar.vector(x)
            n = len(x)
            step = weight_group_step(n)
            one = ar.convert(1)
            w = ar.zeros(n)
            for i in range(n):
                denom = one
                xi = x[i]
                for j in range(step):
                    for k in range(j, n, step):
                        if k != i:
                            denom *= ar.double(xi - x[k])
                w[i] = ar.divide(one, denom)
            return w

    def delta(self, x, bands, weights=None):
        """
        Levelled reference error.

            delta = sum_i w_i D_i / sum_i s_i w_i / W_i,  s_i = reference_sign(i)

        Weights are derived from ``x`` when not supplied.
        """
        ar = self.arithmetic
        with ar.scope():
            x = ar.vector(x)
            if weights is None:
                w = self.weights(x)
            else:
                w = ar.vector(weights)
            num = ar.convert(0)
            denom = ar.convert(0)
            for i in range(len(w)):
                D, W = ideal_response_and_weight(x[i], bands)
                num = ar.fma(w[i], ar.convert(D), num)
                buffer = ar.divide(w[i], ar.convert(W))
                if reference_sign(i) < 0:
                    buffer = -buffer
                denom += buffer
            delta = ar.divide(num, denom)
            if not ar.is_finite(delta):
                logger.warning("Non-finite reference error (%s) for %d nodes, "
                               "reference set is degenerate", delta, len(x))
            else:
                logger.debug("delta=%s n=%d backend=%r", delta, len(x), ar)
            return delta

    def response(self, delta, x, bands):
        """
        Values C_i = D_i + delta / W_i' taken by the interpolant at the
        nodes, with W_i' = W_i on even and -W_i on odd indices.
        """
        ar = self.arithmetic
        with ar.scope():
            x = ar.vector(x)
            delta = ar.convert(delta)
            C = ar.zeros(len(x))
            for i in range(len(x)):
                D, W = ideal_response_and_weight(x[i], bands)
                W = ar.convert(W)
                if i % 2 != 0:
                    W = -W
                C[i] = ar.convert(D) + ar.divide(delta, W)
            return C

    def approx(self, x_val, x, C, w):
        """
        Second form barycentric formula at ``x_val``.

        A query equal to a node returns that node's C value exactly, not
        rounded to this kernel's precision, so C computed at a wider
        precision comes back unchanged.
        """
        ar = self.arithmetic
        with ar.scope():
            x_val = ar.convert(x_val)
            num = ar.convert(0)
            denom = ar.convert(0)
            for i in range(len(x)):
                xi = ar.convert(x[i])
                if x_val == xi:
                    return ar.exact(C[i])
                buff = ar.divide(ar.convert(w[i]), x_val - xi)
                num = ar.fma(buff, ar.convert(C[i]), num)
                denom += buff
            return ar.divide(num, denom)

    def error(self, x_val, delta, x, C, w, bands):
        """
        Weighted error (approx(x_val) - D(x_val)) * W(x_val).

        At a node the interpolant reproduces the levelled ripple exactly, so
        ``-reference_sign(i) * delta`` is returned without evaluating.
        """
        ar = self.arithmetic
        with ar.scope():
            x_val = ar.convert(x_val)
            delta = ar.convert(delta)
            for i in range(len(x)):
                if x_val == ar.convert(x[i]):
                    return -delta if reference_sign(i) > 0 else +delta
            D, W = ideal_response_and_weight(x_val, bands)
            error = self.approx(x_val, x, C, w)
            error -= ar.convert(D)
            error *= ar.convert(W)
            return error


_FLOAT64_KERNEL = BarycentricKernel(FLOAT64)


def _mp_kernel(prec):
    return BarycentricKernel(MPArithmetic(prec))


# -----------------------------------------------------------------------------
# Fixed precision entry points
# -----------------------------------------------------------------------------

def barycentric_weights(x):
    """Barycentric weights of the reference set ``x`` (float64)."""
    return _FLOAT64_KERNEL.weights(x)


def compute_delta(x, bands, weights=None):
    """Current reference error; pass ``weights`` to reuse known weights."""
    return _FLOAT64_KERNEL.delta(x, bands, weights)


def compute_c(delta, x, bands):
    return _FLOAT64_KERNEL.response(delta, x, bands)


def compute_approx(x_val, x, C, w):
    return _FLOAT64_KERNEL.approx(x_val, x, C, w)


def compute_error(x_val, delta, x, C, w, bands):
    return _FLOAT64_KERNEL.error(x_val, delta, x, C, w, bands)


# -----------------------------------------------------------------------------
# Arbitrary precision entry points (mpmath)
# -----------------------------------------------------------------------------

def mp_barycentric_weights(x, prec=DEFAULT_PRECISION):
    """Barycentric weights of ``x`` computed with ``prec`` bits."""
    return _mp_kernel(prec).weights(x)


def mp_compute_delta(x, bands, weights=None, prec=DEFAULT_PRECISION):
    return _mp_kernel(prec).delta(x, bands, weights)


def mp_compute_c(delta, x, bands, prec=DEFAULT_PRECISION):
    return _mp_kernel(prec).response(delta, x, bands)


def mp_compute_approx(x_val, x, C, w, prec=DEFAULT_PRECISION):
    return _mp_kernel(prec).approx(x_val, x, C, w)


def mp_compute_error(x_val, delta, x, C, w, bands, prec=DEFAULT_PRECISION):
    return _mp_kernel(prec).error(x_val, delta, x, C, w, bands)


@dataclass(frozen=True, eq=False)
class ReferenceIterate:
    """
    Nodes, weights, response values and delta of one exchange iteration.

    The four are only meaningful together, so an iterate is always built
    from its nodes with ``from_nodes``. ``prec`` is None for the float64
    path and the bit width otherwise.
    """

    nodes: Sequence[Any]
    weights: Sequence[Any]
    response: Sequence[Any]
    delta: Any
    prec: Optional[int] = None

    @classmethod
    def from_nodes(cls, nodes, bands, prec=None):
        kernel = _FLOAT64_KERNEL if prec is None else _mp_kernel(prec)
        ar = kernel.arithmetic
        with ar.scope():
            nodes = ar.vector(nodes)
            weights = kernel.weights(nodes)
            delta = kernel.delta(nodes, bands, weights)
            response = kernel.response(delta, nodes, bands)
        return cls(nodes, weights, response, delta, prec)

    @property
    def kernel(self):
        return _FLOAT64_KERNEL if self.prec is None else _mp_kernel(self.prec)

    def __len__(self):
        return len(self.nodes)

    def approx(self, x_val):
        return self.kernel.approx(x_val, self.nodes, self.response, self.weights)

    def error(self, x_val, bands):
        return self.kernel.error(x_val, self.delta, self.nodes, self.response,
                                 self.weights, bands)
