#!/usr/bin/env python3
"""
Band model for equiripple filter design.

A band is an interval of the approximation domain carrying an ideal
amplitude and an error weight. Bands live either in the angular frequency
domain [0, pi] (BandSpace.FREQ) or in the transformed domain x = cos(omega)
on [-1, 1] (BandSpace.CHEBY), which is where the barycentric kernel works.
"""

import bisect
import math
import enum
from dataclasses import dataclass, replace
from typing import Any, Callable, List, Optional, Sequence, Tuple

import mpmath


class BandSpace(enum.Enum):
    FREQ = "freq"
    CHEBY = "cheby"


@dataclass(frozen=True)
class Band:
    """
    One band of the ideal response.

    ``amplitude`` and ``weight`` are called as ``f(space, x)`` where ``x`` is
    a coordinate inside ``[start, stop]`` expressed in ``space``.
    """

    start: Any
    stop: Any
    amplitude: Callable[[BandSpace, Any], Any]
    weight: Callable[[BandSpace, Any], Any]
    space: BandSpace = BandSpace.CHEBY

    def contains(self, x):
        return self.start <= x <= self.stop


def constant_amplitude(value):
    """Amplitude callable returning ``value`` everywhere in the band."""
    return lambda space, x: value


def constant_weight(value):
    """Weight callable returning ``value`` everywhere in the band."""
    return lambda space, x: value


def _cos(x):
    if isinstance(x, mpmath.mpf):
        return mpmath.cos(x)
    return math.cos(x)


def _acos(x):
    if isinstance(x, mpmath.mpf):
        return mpmath.acos(max(-1, min(1, x)))
    return math.acos(min(1.0, max(-1.0, float(x))))


def _in_space(func, own_space, to_own):
    """Wrap ``func`` so that it always sees coordinates in ``own_space``."""

    def wrapped(space, x):
        if space is own_space:
            return func(own_space, x)
        return func(own_space, to_own(x))

    return wrapped


def convert_bands(bands: Sequence[Band], space: BandSpace) -> List[Band]:
    """
    Convert a band list to ``space``.

    The map between the two domains is x = cos(omega), which is decreasing,
    so the bounds of each band swap and the band order is reversed to keep
    the list ascending. Amplitude and weight callables are wrapped so they
    keep receiving coordinates of the space they were defined in.
    """
    converted = []
    for band in bands:
        if band.space is space:
            converted.append(band)
            continue
        if space is BandSpace.CHEBY:
            start, stop = _cos(band.stop), _cos(band.start)
            to_own = _acos
        else:
            start, stop = _acos(band.stop), _acos(band.start)
            to_own = _cos
        converted.append(replace(
            band,
            start=start,
            stop=stop,
            amplitude=_in_space(band.amplitude, band.space, to_own),
            weight=_in_space(band.weight, band.space, to_own),
            space=space,
        ))
    converted.sort(key=lambda b: b.start)
    return converted


class BandLookup:
    """
    Bisect-based band search.

    Returns the same (amplitude, weight) pair as a linear scan over the
    bands in the order given, in O(log n) per query for non-overlapping
    bands. Iteration yields the bands in that original order.
    """

    def __init__(self, bands: Sequence[Band]):
        self.bands = list(bands)
        self._order = sorted(range(len(self.bands)), key=lambda k: self.bands[k].start)
        self._starts = [self.bands[k].start for k in self._order]

    def __iter__(self):
        return iter(self.bands)

    def __len__(self):
        return len(self.bands)

    def find(self, x) -> Optional[Band]:
        pos = bisect.bisect_right(self._starts, x) - 1
        # several bands can hold x at a shared edge: lowest caller index wins
        best = None
        while pos >= 0 and self.bands[self._order[pos]].contains(x):
            k = self._order[pos]
            if best is None or k < best:
                best = k
            pos -= 1
        return None if best is None else self.bands[best]

    def lookup(self, x) -> Tuple[Any, Any]:
        band = self.find(x)
        if band is None:
            return None, None
        return band.amplitude(band.space, x), band.weight(band.space, x)
