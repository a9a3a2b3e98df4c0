#!/usr/bin/env python3
"""
Precondition checks for reference sets, meant for the exchange loop.

The barycentric kernel is unchecked: bad input gives inf/NaN or meaningless
numbers, never an exception. Callers that want to reject a reference set
before (or after) handing it to the kernel use the helpers here.
"""

import logging

import numpy as np
import mpmath

from barycentric_kernel import ideal_response_and_weight

logger = logging.getLogger(__name__)


class ReferenceSetError(ValueError):
    """Raised when a reference set violates the kernel preconditions."""


class DegenerateReferenceError(ArithmeticError):
    """Raised when kernel output is non-finite for a reference set."""


def _is_finite(value):
    if isinstance(value, (mpmath.mpf, mpmath.mpc)):
        return bool(mpmath.isfinite(value))
    return bool(np.isfinite(value))


def validate_reference_set(x, bands):
    """
    Check that ``x`` can be handed to the kernel together with ``bands``.

    Requires at least two nodes in strictly increasing order (this also
    rejects nodes that collapsed onto each other through rounding), each
    inside some band with a nonzero weight there.

    Raises:
        ReferenceSetError: describing the first violation found
    """
    n = len(x)
    if n < 2:
        raise ReferenceSetError(f"reference set needs at least 2 nodes, got {n}")

    for i in range(1, n):
        if not x[i - 1] < x[i]:
            logger.warning("Rejecting reference set: nodes %d and %d out of order "
                           "(%s, %s)", i - 1, i, x[i - 1], x[i])
            raise ReferenceSetError(
                f"nodes must be strictly increasing: x[{i - 1}]={x[i - 1]} >= x[{i}]={x[i]}"
            )

    for i, x_val in enumerate(x):
        D, W = ideal_response_and_weight(x_val, bands)
        if D is None:
            logger.warning("Rejecting reference set: node %d (%s) outside all bands", i, x_val)
            raise ReferenceSetError(f"node {i} ({x_val}) is not covered by any band")
        if W == 0:
            logger.warning("Rejecting reference set: node %d (%s) has zero weight", i, x_val)
            raise ReferenceSetError(f"node {i} ({x_val}) lies where the weight is zero")


def check_aligned(*vectors):
    """Raise ReferenceSetError unless all vectors have the same length."""
    lengths = [len(v) for v in vectors]
    if len(set(lengths)) > 1:
        raise ReferenceSetError(f"vectors are not index aligned: lengths {lengths}")


def find_degenerate_weights(w):
    """Indices of non-finite barycentric weights."""
    return [i for i, wi in enumerate(w) if not _is_finite(wi)]


def check_weights(w):
    bad = find_degenerate_weights(w)
    if bad:
        raise DegenerateReferenceError(f"non-finite barycentric weights at indices {bad}")


def check_delta(delta):
    """Raise DegenerateReferenceError when the reference error is inf or NaN."""
    if not _is_finite(delta):
        raise DegenerateReferenceError(f"reference error is not finite: {delta}")
    return delta
