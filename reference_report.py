#!/usr/bin/env python3
"""
Tabular diagnostics for a reference iterate.
"""

import numpy as np
import pandas as pd
from scipy.signal import find_peaks

from barycentric_grid import error_grid
from barycentric_kernel import ideal_response_and_weight, reference_sign


def reference_table(iterate, bands):
    """One row per reference node: weight, ideal response, C and error."""
    rows = []
    for i, x_val in enumerate(iterate.nodes):
        D, W = ideal_response_and_weight(x_val, bands)
        rows.append({
            'index': i,
            'x': float(x_val),
            'weight': float(iterate.weights[i]),
            'ideal': float(D),
            'ideal_weight': float(W),
            'response': float(iterate.response[i]),
            'error': float(iterate.error(x_val, bands)),
            'sign': -reference_sign(i),
        })
    return pd.DataFrame(rows)


def scan_table(iterate, bands, grid):
    """Interpolant and weighted error on ``grid``."""
    grid = np.asarray(grid, dtype=np.float64)
    if iterate.prec is None:
        approx, error = error_grid(grid, iterate.delta, iterate.nodes,
                                   iterate.response, iterate.weights, bands)
    else:
        approx = np.array([float(iterate.approx(g)) for g in grid])
        error = np.array([float(iterate.error(g, bands)) for g in grid])
    return pd.DataFrame({'x': grid, 'approx': approx, 'error': error})


def local_extrema(table):
    """Rows of a scan table where |error| has a local maximum."""
    magnitude = np.nan_to_num(np.abs(table['error'].to_numpy()), nan=0.0)
    peaks, _ = find_peaks(magnitude)
    idx = set(peaks.tolist())
    if len(magnitude) > 1:
        if magnitude[0] > magnitude[1]:
            idx.add(0)
        if magnitude[-1] > magnitude[-2]:
            idx.add(len(magnitude) - 1)
    return table.iloc[sorted(idx)].reset_index(drop=True)


def summarize(iterate, bands, grid):
    """One-row summary comparing the scanned error with |delta|."""
    scan = scan_table(iterate, bands, grid)
    delta = float(iterate.delta)
    max_abs_error = float(np.nanmax(np.abs(scan['error'].to_numpy())))
    return pd.DataFrame([{
        'n_nodes': len(iterate),
        'delta': delta,
        'max_abs_error': max_abs_error,
        'ratio': max_abs_error / abs(delta) if delta != 0 else np.inf,
    }])
