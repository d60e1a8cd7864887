#!/usr/bin/env python3
"""
Module: pipeline.py
Purpose: Command-line interface for geodesic distances and interpolation.

Each command reads CSV or parquet tables, runs one operation of the
distance/interpolation engine and writes the result.

Commands
--------
# Distances
distance : Distance between two points
    Options: --from LON LAT, --to LON LAT, --function
dist_pairs : Distance between coordinate column pairs of one table
    Options: --input, --output, --x-lon, --x-lat, --y-lon, --y-lat
dist_matrix : Distance matrix between the rows of two tables
    Options: --x, --y, --output

# Interpolation
weighted_mean : Inverse-distance (optionally population) weighted mean
    Options: --x, --y, --measure, --pop, --transform, --decay, --output
min_distance : Distance from each x row to the nearest y row
    Options: --x, --y, --output

Global options
--------------
--config : YAML file overriding defaults (function, transform, decay,
           column names, workers)
--log-level : Logging level (default: INFO)

Usage
-----
    python src/pipeline.py distance --from -74.006 40.7128 --to -118.2437 34.0522
    python src/pipeline.py weighted_mean --x tracts.csv --y monitors.csv \\
        --measure pm25 --output data_work/pm25_tracts.csv
    python src/pipeline.py min_distance --x tracts.csv --y hospitals.csv \\
        --function Vincenty --output data_work/hospital_dist.parquet

Notes
-----
Ctrl-C during weighted_mean/min_distance cancels the computation; no
partial output is written.
"""
from __future__ import annotations

import argparse
import signal
import sys
from pathlib import Path
from typing import Callable

# Add src directory for imports when run as a script
sys.path.insert(0, str(Path(__file__).parent))

from config import LOG_LEVEL, load_overrides


def parse_args(argv: list[str] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    p = argparse.ArgumentParser(
        description='Geodesic distance and interpolation pipeline',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    p.add_argument('--config', default=None, help='YAML file overriding defaults')
    p.add_argument('--log-level', default=LOG_LEVEL, help='Logging level')
    sub = p.add_subparsers(dest='cmd', required=True)

    def add_function(parser):
        parser.add_argument(
            '--function', '-f',
            default=None,
            help='Distance function: Haversine or Vincenty'
        )

    def add_xy(parser):
        parser.add_argument('--x', required=True, help='Query points table (csv/parquet)')
        parser.add_argument('--y', required=True, help='Reference points table (csv/parquet)')
        parser.add_argument('--output', '-o', required=True, help='Output table (csv/parquet)')
        parser.add_argument('--x-id', default=None, help='Id column in x')
        parser.add_argument('--lon', default=None, help='Longitude column in x and y')
        parser.add_argument('--lat', default=None, help='Latitude column in x and y')
        parser.add_argument('--workers', type=int, default=None, help='Worker threads')

    # Distance Commands
    p_dist = sub.add_parser('distance', help='Distance between two points')
    p_dist.add_argument('--from', dest='origin', nargs=2, type=float, required=True,
                        metavar=('LON', 'LAT'))
    p_dist.add_argument('--to', dest='dest', nargs=2, type=float, required=True,
                        metavar=('LON', 'LAT'))
    add_function(p_dist)

    p_pairs = sub.add_parser('dist_pairs', help='Distance between column pairs of one table')
    p_pairs.add_argument('--input', '-i', required=True, help='Input table (csv/parquet)')
    p_pairs.add_argument('--output', '-o', required=True, help='Output table (csv/parquet)')
    p_pairs.add_argument('--x-lon', required=True)
    p_pairs.add_argument('--x-lat', required=True)
    p_pairs.add_argument('--y-lon', required=True)
    p_pairs.add_argument('--y-lat', required=True)
    p_pairs.add_argument('--column', default='distance', help='Name of the new column')
    add_function(p_pairs)

    p_mtom = sub.add_parser('dist_matrix', help='Distance matrix between two tables')
    add_xy(p_mtom)
    add_function(p_mtom)

    # Interpolation Commands
    p_wm = sub.add_parser('weighted_mean', help='Inverse-distance weighted mean')
    add_xy(p_wm)
    add_function(p_wm)
    p_wm.add_argument('--measure', '-m', required=True, help='Measure column in y')
    p_wm.add_argument('--pop', default=None,
                      help='Population column in y (enables population weighting)')
    p_wm.add_argument('--transform', '-t', default=None, help='Weight transform: level or log')
    p_wm.add_argument('--decay', type=float, default=None, help='Distance decay exponent')

    p_min = sub.add_parser('min_distance', help='Distance to nearest reference point')
    add_xy(p_min)
    add_function(p_min)

    return p.parse_args(argv)


def _pick(value, default):
    return default if value is None else value


def run_cancellable(fn: Callable):
    """Run ``fn(token)`` with Ctrl-C mapped to cancelling the token."""
    from spatial import CancellationToken

    token = CancellationToken()
    previous = signal.signal(signal.SIGINT, lambda signum, frame: token.cancel())
    try:
        return fn(token)
    finally:
        signal.signal(signal.SIGINT, previous)


def cmd_distance(args, settings: dict) -> float:
    from spatial import distance_one_to_one
    from utils.helpers import format_meters

    funname = _pick(args.function, settings['dist_function'])
    dist = distance_one_to_one(*args.origin, *args.dest, funname)
    print(f"  {funname}: {format_meters(dist)} ({dist:.3f} m)")
    return dist


def cmd_dist_pairs(args, settings: dict) -> Path:
    from spatial import dist_df
    from utils.helpers import load_data, save_data

    print(f"\n  Loading: {args.input}")
    df = load_data(args.input)
    print(f"    -> {len(df):,} rows")

    df[args.column] = dist_df(
        df, args.x_lon, args.x_lat, args.y_lon, args.y_lat,
        dist_function=_pick(args.function, settings['dist_function']),
    )
    out = save_data(df, args.output)
    print(f"  Saved: {out}")
    return out


def _load_xy(args):
    from utils.helpers import load_data

    print(f"\n  Loading: {args.x}")
    x_df = load_data(args.x)
    print(f"    -> {len(x_df):,} rows")
    print(f"  Loading: {args.y}")
    y_df = load_data(args.y)
    print(f"    -> {len(y_df):,} rows")
    return x_df, y_df


def cmd_dist_matrix(args, settings: dict) -> Path:
    from spatial import dist_mtom_df
    from utils.helpers import save_data

    x_df, y_df = _load_xy(args)
    lon = _pick(args.lon, settings['lon_col'])
    lat = _pick(args.lat, settings['lat_col'])
    x_id = _pick(args.x_id, settings['id_col'])

    matrix = dist_mtom_df(
        x_df, y_df, lon, lat, lon, lat,
        dist_function=_pick(args.function, settings['dist_function']),
    )
    if x_id in x_df.columns:
        matrix.index = x_df[x_id].to_numpy()
    matrix.columns = [str(c) for c in matrix.columns]
    out = save_data(matrix, args.output, index=True)
    print(f"  Saved {matrix.shape[0]:,} x {matrix.shape[1]:,} matrix: {out}")
    return out


def cmd_weighted_mean(args, settings: dict) -> Path:
    from spatial import dist_weighted_mean, popdist_weighted_mean
    from utils.helpers import save_data

    x_df, y_df = _load_xy(args)
    lon = _pick(args.lon, settings['lon_col'])
    lat = _pick(args.lat, settings['lat_col'])
    kwargs = dict(
        measure_col=args.measure,
        x_id=_pick(args.x_id, settings['id_col']),
        x_lon_col=lon,
        x_lat_col=lat,
        y_lon_col=lon,
        y_lat_col=lat,
        dist_function=_pick(args.function, settings['dist_function']),
        dist_transform=_pick(args.transform, settings['dist_transform']),
        decay=_pick(args.decay, settings['decay']),
        n_workers=_pick(args.workers, settings['n_workers']),
    )

    if args.pop:
        print(f"\n  Population-weighted mean of '{args.measure}' (pop: '{args.pop}')...")
        result = run_cancellable(
            lambda token: popdist_weighted_mean(x_df, y_df, pop_col=args.pop, token=token, **kwargs)
        )
    else:
        print(f"\n  Distance-weighted mean of '{args.measure}'...")
        result = run_cancellable(lambda token: dist_weighted_mean(x_df, y_df, token=token, **kwargs))

    n_missing = int(result['wmeasure'].isna().sum())
    if n_missing:
        print(f"    WARNING: {n_missing:,} rows without a defined weighted mean")
    out = save_data(result, args.output)
    print(f"  Saved: {out}")
    return out


def cmd_min_distance(args, settings: dict) -> Path:
    from spatial import dist_min
    from utils.helpers import save_data

    x_df, y_df = _load_xy(args)
    lon = _pick(args.lon, settings['lon_col'])
    lat = _pick(args.lat, settings['lat_col'])

    print("\n  Minimum distance...")
    result = run_cancellable(
        lambda token: dist_min(
            x_df, y_df,
            x_id=_pick(args.x_id, settings['id_col']),
            x_lon_col=lon,
            x_lat_col=lat,
            y_lon_col=lon,
            y_lat_col=lat,
            dist_function=_pick(args.function, settings['dist_function']),
            token=token,
            n_workers=_pick(args.workers, settings['n_workers']),
        )
    )
    out = save_data(result, args.output)
    print(f"  Saved: {out}")
    return out


COMMANDS = {
    'distance': cmd_distance,
    'dist_pairs': cmd_dist_pairs,
    'dist_matrix': cmd_dist_matrix,
    'weighted_mean': cmd_weighted_mean,
    'min_distance': cmd_min_distance,
}


def main(argv: list[str] = None) -> int:
    """Main entry point."""
    from spatial import OperationCancelled, SpatialError
    from utils.helpers import configure_logging

    args = parse_args(argv)
    configure_logging(args.log_level)

    try:
        settings = load_overrides(args.config)
        COMMANDS[args.cmd](args, settings)
    except OperationCancelled:
        print('  Cancelled; no output written.', file=sys.stderr)
        return 130
    except (SpatialError, FileNotFoundError, ValueError) as e:
        print(f'  ERROR: {e}', file=sys.stderr)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
