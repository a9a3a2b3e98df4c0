#!/usr/bin/env python3
"""
Compute one reference iterate for a lowpass specification and report it.
Settings come from kernel_config.json and can be overridden on the command line.
"""

import argparse
import datetime
import logging
import math
import os
import sys

import numpy as np
import pandas as pd

from bands import Band, BandSpace, constant_amplitude, constant_weight, convert_bands
from barycentric_kernel import ReferenceIterate
from kernel_config import CONFIG_FILE, load_config
from reference_checks import check_delta, validate_reference_set
from reference_report import local_extrema, reference_table, scan_table, summarize


def setup_logging(log_dir, level="INFO"):
    """Setup logging to both file and console."""
    os.makedirs(log_dir, exist_ok=True)

    # Create log file with timestamp
    timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = os.path.join(log_dir, f"reference_demo_{timestamp}.log")

    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler(sys.stdout)
        ]
    )

    return log_file


def lowpass_bands(passband_edge, stopband_edge):
    """
    Pass, transition and stop bands of a lowpass filter in the cosine domain.

    Edges are fractions of pi. The transition band has zero weight, so its
    amplitude never matters.
    """
    freq_bands = [
        Band(0.0, passband_edge * math.pi, constant_amplitude(1.0), constant_weight(1.0), BandSpace.FREQ),
        Band(passband_edge * math.pi, stopband_edge * math.pi,
             constant_amplitude(0.5), constant_weight(0.0), BandSpace.FREQ),
        Band(stopband_edge * math.pi, math.pi, constant_amplitude(0.0), constant_weight(1.0), BandSpace.FREQ),
    ]
    return convert_bands(freq_bands, BandSpace.CHEBY)


def chebyshev_nodes(n, bands):
    """
    ``n`` Chebyshev extrema spread over the bands with nonzero weight.

    The weighted bands are laid end to end, the Chebyshev points of that
    total length are placed on it and then mapped back into their bands.
    """
    active = [b for b in bands if float(b.weight(b.space, b.start)) != 0.0]
    lengths = [float(b.stop) - float(b.start) for b in active]
    total = sum(lengths)

    nodes = []
    for k in range(n):
        u = total * (1.0 - math.cos(k * math.pi / (n - 1))) / 2.0
        for band, length in zip(active, lengths):
            if u <= length or band is active[-1]:
                nodes.append(min(float(band.start) + u, float(band.stop)))
                break
            u -= length
    return np.array(sorted(nodes))


def main():
    parser = argparse.ArgumentParser(description="Reference iterate for a lowpass filter")
    parser.add_argument('--config', default=CONFIG_FILE, help='Path to the JSON configuration')
    parser.add_argument('--nodes', type=int, help='Number of reference nodes')
    parser.add_argument('--prec', type=int, help='Use mpmath with this many bits')
    parser.add_argument('--grid-size', type=int, help='Points in the error scan')
    parser.add_argument('--log-dir', help='Directory for log files')
    args = parser.parse_args()

    config = load_config(args.config)
    demo = config['demo']
    log_file = setup_logging(args.log_dir or config['logging']['log_dir'],
                             config['logging']['level'])

    prec = args.prec
    if prec is None and config['use_arbitrary_precision']:
        prec = config['precision_bits']
    n = args.nodes or demo['node_count']
    grid_size = args.grid_size or demo['grid_size']

    logging.info(f"Log file: {log_file}")
    logging.info(f"Lowpass edges: pass {demo['passband_edge']}pi, stop {demo['stopband_edge']}pi")

    bands = lowpass_bands(demo['passband_edge'], demo['stopband_edge'])
    nodes = chebyshev_nodes(n, bands)
    validate_reference_set(nodes, bands)

    iterate = ReferenceIterate.from_nodes(nodes, bands, prec=prec)
    check_delta(iterate.delta)
    precision = "float64" if prec is None else f"{prec} bits"
    logging.info(f"delta = {iterate.delta} ({n} nodes, {precision})")

    grid = np.linspace(-1.0, 1.0, grid_size)
    with pd.option_context('display.float_format', '{:.6e}'.format, 'display.width', 120):
        print("\nReference set")
        print(reference_table(iterate, bands).to_string(index=False))
        print("\nError extrema on the scan grid")
        print(local_extrema(scan_table(iterate, bands, grid)).to_string(index=False))
        print("\nSummary")
        print(summarize(iterate, bands, grid).to_string(index=False))


if __name__ == "__main__":
    main()
