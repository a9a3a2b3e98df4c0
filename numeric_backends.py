#!/usr/bin/env python3
"""
Numeric backends for the barycentric kernel.

The kernel algorithms are written once against a small arithmetic
interface; this module provides the two concrete instances:

- Float64Arithmetic: numpy float64, fast fixed-width path
- MPArithmetic: mpmath mpf with a caller-selected bit width

Each backend exposes a ``scope()`` context manager that every kernel entry
point enters for the duration of the call. For mpmath this is
``mp.workprec(prec)``, which installs the requested precision and restores
the caller's precision on every exit path.
"""

import math
from contextlib import contextmanager
from fractions import Fraction

import numpy as np
import mpmath
from mpmath import mp

DEFAULT_PRECISION = 165


def _fraction_fma(a, b, c):
    """Correctly rounded a*b + c for float64 using exact rationals."""
    return float(Fraction(a) * Fraction(b) + Fraction(c))


# math.fma only exists on Python 3.13+
_exact_fma = getattr(math, "fma", _fraction_fma)


def _float_fma(a, b, c):
    if not (math.isfinite(a) and math.isfinite(b) and math.isfinite(c)):
        return a * b + c
    try:
        return _exact_fma(a, b, c)
    except OverflowError:
        return a * b + c


class Float64Arithmetic:
    """IEEE double precision arithmetic on numpy float64 scalars."""

    name = "float64"
    prec = 53

    def convert(self, value):
        return np.float64(value)

    def exact(self, value):
        return np.float64(value)

    def vector(self, values):
        return np.asarray(values, dtype=np.float64)

    def zeros(self, n):
        return np.zeros(n, dtype=np.float64)

    def fma(self, a, b, c):
        return np.float64(_float_fma(float(a), float(b), float(c)))

    def double(self, value):
        # exact: only the exponent changes
        return np.float64(np.ldexp(value, 1))

    def divide(self, a, b):
        return np.float64(a) / np.float64(b)

    def is_finite(self, value):
        return bool(np.isfinite(value))

    @contextmanager
    def scope(self):
        # inf/NaN are the documented outcome of degenerate reference sets
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            yield self

    def __repr__(self):
        return "Float64Arithmetic()"


class MPArithmetic:
    """
    Arbitrary precision arithmetic on mpmath numbers.

    Args:
        prec: Working precision in bits (mantissa width)
    """

    name = "mpmath"

    def __init__(self, prec=DEFAULT_PRECISION):
        prec = int(prec)
        if prec < 2:
            raise ValueError(f"precision must be at least 2 bits, got {prec}")
        self.prec = prec

    def convert(self, value):
        # rounds to the working precision of the enclosing scope
        return mp.mpf(value)

    def exact(self, value):
        # an mpf is returned as stored, whatever precision it was made at
        if isinstance(value, mpmath.mpf):
            return value
        return mp.mpf(value)

    def vector(self, values):
        return [mp.mpf(v) for v in values]

    def zeros(self, n):
        return [mp.zero] * n

    def fma(self, a, b, c):
        # exact product, single rounding on the addition
        return mp.fadd(c, mp.fmul(a, b, exact=True))

    def double(self, value):
        return mp.ldexp(value, 1)

    def divide(self, a, b):
        if b == 0:
            # mpmath raises on division by zero; float semantics instead
            if a > 0:
                return mp.inf
            if a < 0:
                return mp.ninf
            return mp.nan
        return a / b

    def is_finite(self, value):
        return bool(mpmath.isfinite(value))

    @contextmanager
    def scope(self):
        with mp.workprec(self.prec):
            yield self

    def __repr__(self):
        return f"MPArithmetic(prec={self.prec})"


FLOAT64 = Float64Arithmetic()
