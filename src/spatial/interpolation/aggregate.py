"""
Row-wise interpolation over a reference coordinate set.

For every query point the distance to every reference point is computed
(brute force, O(n * k)) and reduced to one value:

- ``weighted_mean``: inverse-distance-weighted mean of a measure, optionally
  also weighted by reference population
- ``minimum_distance``: distance to the nearest reference point

Rows are independent, so they are split into contiguous blocks and run on a
thread pool. Each block writes only its own slice of the output array.

Usage
-----
    from spatial.interpolation import weighted_mean, minimum_distance

    result = weighted_mean(xlon, xlat, ylon, ylat, measure, ids=tract_ids)
    result = weighted_mean(xlon, xlat, ylon, ylat, measure, population=pop,
                           dist_function='Vincenty', dist_transform='log')
    nearest = minimum_distance(xlon, xlat, ylon, ylat, ids=tract_ids)
"""

from __future__ import annotations

import logging
import multiprocessing
import threading
import warnings
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Optional, Sequence

import numpy as np
import pandas as pd

from config import (
    CANCEL_CHECK_EVERY,
    DEFAULT_DECAY,
    DEFAULT_DIST_FUNCTION,
    DEFAULT_DIST_TRANSFORM,
    MIN_DISTANCE_COL,
    PARALLEL_ENABLED,
    PARALLEL_MAX_WORKERS,
    PARALLEL_MIN_ROWS_PER_WORKER,
    VINCENTY_MAX_ITER,
    VINCENTY_STRICT,
    WEIGHTED_MEAN_COL,
)
from spatial.core.distance import (
    FunctionName,
    coordinate_set,
    resolve_distance_kernel,
)
from spatial.core.errors import (
    ConvergenceError,
    InvalidArgumentError,
    VincentyConvergenceWarning,
)
from spatial.interpolation.cancel import CancellationToken
from spatial.interpolation.weights import (
    TransformName,
    check_decay,
    relative_weights,
    resolve_transform,
)

logger = logging.getLogger(__name__)


# ============================================================
# ROW EXECUTION
# ============================================================

def _worker_count(n_rows: int, n_workers: Optional[int]) -> int:
    """Number of workers to use for ``n_rows`` query rows."""
    if n_workers is not None:
        if n_workers < 1:
            raise InvalidArgumentError(f"n_workers must be positive: {n_workers}")
        return max(1, min(n_workers, n_rows))

    if not PARALLEL_ENABLED:
        return 1
    n_workers = PARALLEL_MAX_WORKERS or multiprocessing.cpu_count()
    return max(1, min(n_workers, n_rows // PARALLEL_MIN_ROWS_PER_WORKER))


def _row_blocks(n_rows: int, n_blocks: int) -> list[tuple[int, int]]:
    """Split ``range(n_rows)`` into ``n_blocks`` contiguous (start, stop) ranges."""
    edges = np.linspace(0, n_rows, n_blocks + 1).astype(int)
    return [(int(a), int(b)) for a, b in zip(edges[:-1], edges[1:]) if b > a]


def run_rows(
    n_rows: int,
    row_fn: Callable[[int], float],
    token: Optional[CancellationToken] = None,
    n_workers: Optional[int] = None,
    check_every: int = CANCEL_CHECK_EVERY,
) -> np.ndarray:
    """
    Evaluate ``row_fn(i)`` for every row and collect the results.

    Parameters
    ----------
    n_rows : int
        Number of query rows.
    row_fn : Callable
        Computes the value of one row. Must only read shared state.
    token : CancellationToken, optional
        Checked by each worker every ``check_every`` rows.
    n_workers : int, optional
        Number of worker threads. Default picks from config and row count.
    check_every : int, optional
        Row cadence of cancellation checks.

    Returns
    -------
    np.ndarray
        Float array of length ``n_rows``.

    Raises
    ------
    OperationCancelled
        If the token is cancelled while rows remain. No partial result is
        returned.
    """
    if check_every < 1:
        raise InvalidArgumentError(f"check_every must be positive: {check_every}")

    out = np.full(n_rows, np.nan)
    stop = threading.Event()

    def work(start: int, end: int) -> None:
        for i in range(start, end):
            if (i - start) % check_every == 0:
                if token is not None:
                    token.raise_if_cancelled()
                if stop.is_set():
                    return
            out[i] = row_fn(i)

    if token is not None:
        token.raise_if_cancelled()

    workers = _worker_count(n_rows, n_workers)
    if workers <= 1:
        work(0, n_rows)
        return out

    blocks = _row_blocks(n_rows, workers)
    logger.debug("Running %d rows in %d blocks", n_rows, len(blocks))

    error = None
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(work, start, end) for start, end in blocks]
        for future in as_completed(futures):
            try:
                future.result()
            except Exception as e:
                stop.set()
                if error is None:
                    error = e

    if error is not None:
        raise error

    return out


# ============================================================
# VALIDATION
# ============================================================

def _check_length(values, expected: int, what: str, against: str) -> None:
    if len(values) != expected:
        raise InvalidArgumentError(
            f"{what} length ({len(values)}) does not match {against} ({expected})"
        )


def _prepare_ids(ids: Optional[Sequence], n_rows: int) -> np.ndarray:
    if ids is None:
        return np.arange(n_rows)
    ids = np.asarray(ids)
    if ids.ndim != 1:
        raise InvalidArgumentError("ids must be a 1-D sequence")
    _check_length(ids, n_rows, "ids", "query points")
    return ids


# ============================================================
# DISTANCE ROWS
# ============================================================

class _DistanceRows:
    """
    Distances from each query point to the reference set, with the Vincenty
    non-convergence policy applied once per call rather than once per row.

    Rows that hit the iteration cap are flagged in ``failed``; each row writes
    only its own flag. With ``VINCENTY_STRICT`` the first such row raises
    ``ConvergenceError`` instead.
    """

    def __init__(self, dist_function: FunctionName, xlon, xlat, ylon, ylat):
        self.kernel = resolve_distance_kernel(dist_function)
        self.name = getattr(dist_function, 'value', dist_function)
        self.xlon, self.xlat = xlon, xlat
        self.ylon, self.ylat = ylon, ylat
        self.failed = np.zeros(len(xlon), dtype=bool)

    def __call__(self, i: int) -> np.ndarray:
        dist, n_failed = self.kernel(float(self.xlon[i]), float(self.xlat[i]), self.ylon, self.ylat)
        if n_failed:
            if VINCENTY_STRICT:
                raise ConvergenceError(
                    f"Vincenty did not converge for {n_failed} reference point(s) "
                    f"of query row {i} within {VINCENTY_MAX_ITER} iterations",
                    n_failed=n_failed,
                )
            self.failed[i] = True
        return np.atleast_1d(dist)

    def report(self) -> None:
        n_failed = int(self.failed.sum())
        if not n_failed:
            return
        message = (
            f"Vincenty did not converge for {n_failed} of {len(self.failed)} query rows "
            f"within {VINCENTY_MAX_ITER} iterations (near-antipodal points); "
            f"last-iteration distances used"
        )
        logger.warning(message)
        warnings.warn(message, VincentyConvergenceWarning, stacklevel=3)


# ============================================================
# AGGREGATIONS
# ============================================================

def weighted_mean(
    xlon,
    xlat,
    ylon,
    ylat,
    measure,
    ids: Optional[Sequence] = None,
    population=None,
    dist_function: FunctionName = DEFAULT_DIST_FUNCTION,
    dist_transform: TransformName = DEFAULT_DIST_TRANSFORM,
    decay: float = DEFAULT_DECAY,
    token: Optional[CancellationToken] = None,
    n_workers: Optional[int] = None,
    check_every: int = CANCEL_CHECK_EVERY,
) -> pd.DataFrame:
    """
    Interpolate inverse-distance-weighted measures at query points.

    Each query point ``x[i]`` gets ``sum(w * measure) / sum(w)`` over all
    reference points ``y``, where ``w`` is the inverse-distance weight,
    multiplied by the reference population when ``population`` is given.

    Parameters
    ----------
    xlon, xlat : array-like
        Query coordinates (n points).
    ylon, ylat : array-like
        Reference coordinates where ``measure`` was taken (k points).
    measure : array-like
        Measured values at the reference points (k).
    ids : sequence, optional
        Identifier of each query point. Defaults to 0..n-1.
    population : array-like, optional
        Non-negative population at each reference point (k). A reference
        point with zero population contributes nothing.
    dist_function : str, optional
        "Haversine" (default) or "Vincenty".
    dist_transform : str, optional
        "level" (default) or "log"; see ``inverse_distance_weights``.
    decay : float, optional
        Distance decay exponent. Default is 2.
    token : CancellationToken, optional
        Cooperative cancellation token.
    n_workers : int, optional
        Worker threads. Default chosen from config and the number of rows.
    check_every : int, optional
        Rows between cancellation checks.

    Returns
    -------
    pd.DataFrame
        Columns ``id`` and ``wmeasure``, one row per query point in input order.

    Raises
    ------
    InvalidArgumentError
        Unknown function or transform name, mismatched lengths, negative
        population, or invalid decay. Raised before any row is computed.
    OperationCancelled
        If ``token`` is cancelled during the computation.

    Notes
    -----
    - A query point that coincides with one or more reference points takes the
      mean measure of those points (population-weighted if ``population`` is
      given). The distance transform is not applied in that case. Coincident
      points with zero population carry no weight and are ignored.
    - Weights are scaled per row so the largest is 1 (see ``relative_weights``),
      so large decays over long distances stay finite.
    - A row whose total weight is zero (all populations zero, or no reference
      points) gets ``NaN``. The number of such rows is logged as a warning.
    - Vincenty rows that hit the iteration cap are counted and reported with
      one warning per call.
    """
    transform = resolve_transform(dist_transform)
    decay = check_decay(decay)

    xlon, xlat = coordinate_set(xlon, xlat, "x")
    ylon, ylat = coordinate_set(ylon, ylat, "y")
    n, k = len(xlon), len(ylon)
    ids = _prepare_ids(ids, n)
    distances = _DistanceRows(dist_function, xlon, xlat, ylon, ylat)

    measure = np.asarray(measure, dtype=float)
    _check_length(measure, k, "measure", "reference points")

    if population is not None:
        population = np.asarray(population, dtype=float)
        _check_length(population, k, "population", "reference points")
        if np.any(population < 0):
            raise InvalidArgumentError("population values must be non-negative")

    degenerate = np.zeros(n, dtype=bool)

    def row(i: int) -> float:
        dist = distances(i)

        exact = dist == 0
        if population is not None:
            exact &= population > 0
        if exact.any():
            if population is None:
                return float(measure[exact].mean())
            w = population[exact]
            m = measure[exact]
        else:
            w = relative_weights(dist, decay, transform, population)
            m = measure

        w_sum = w.sum()
        if w_sum == 0 or not np.isfinite(w_sum):
            degenerate[i] = True
            return np.nan
        return float(np.dot(w, m) / w_sum)

    logger.debug(
        "Weighted mean: %d query x %d reference points (%s, %s, decay=%g, population=%s)",
        n, k, distances.name, transform.value, decay, population is not None,
    )
    out = run_rows(n, row, token=token, n_workers=n_workers, check_every=check_every)
    distances.report()

    n_degenerate = int(degenerate.sum())
    if n_degenerate:
        logger.warning(
            "%d of %d rows have zero total weight; weighted mean set to NaN",
            n_degenerate, n,
        )

    return pd.DataFrame({'id': ids, WEIGHTED_MEAN_COL: out})


def popweighted_mean(
    xlon,
    xlat,
    ylon,
    ylat,
    measure,
    population,
    ids: Optional[Sequence] = None,
    **kwargs,
) -> pd.DataFrame:
    """Population- and inverse-distance-weighted mean; see ``weighted_mean``."""
    if population is None:
        raise InvalidArgumentError("population is required for population weighting")
    return weighted_mean(
        xlon, xlat, ylon, ylat, measure, ids=ids, population=population, **kwargs
    )


def minimum_distance(
    xlon,
    xlat,
    ylon,
    ylat,
    ids: Optional[Sequence] = None,
    dist_function: FunctionName = DEFAULT_DIST_FUNCTION,
    token: Optional[CancellationToken] = None,
    n_workers: Optional[int] = None,
    check_every: int = CANCEL_CHECK_EVERY,
) -> pd.DataFrame:
    """
    Find the distance from each query point to its nearest reference point.

    Parameters
    ----------
    xlon, xlat : array-like
        Query coordinates (n points).
    ylon, ylat : array-like
        Candidate end points (k points).
    ids : sequence, optional
        Identifier of each query point. Defaults to 0..n-1.
    dist_function : str, optional
        "Haversine" (default) or "Vincenty".
    token, n_workers, check_every
        As in ``weighted_mean``.

    Returns
    -------
    pd.DataFrame
        Columns ``id`` and ``mindist`` (meters). ``NaN`` when the reference
        set is empty.

    Notes
    -----
    Vincenty rows that hit the iteration cap keep their last-iteration
    distance and are reported with one warning per call.
    """
    xlon, xlat = coordinate_set(xlon, xlat, "x")
    ylon, ylat = coordinate_set(ylon, ylat, "y")
    n, k = len(xlon), len(ylon)
    ids = _prepare_ids(ids, n)
    distances = _DistanceRows(dist_function, xlon, xlat, ylon, ylat)

    if k == 0:
        logger.warning("Reference set is empty; minimum distance set to NaN")

    def row(i: int) -> float:
        if k == 0:
            return np.nan
        return float(distances(i).min())

    logger.debug("Minimum distance: %d query x %d reference points (%s)", n, k, distances.name)
    out = run_rows(n, row, token=token, n_workers=n_workers, check_every=check_every)
    distances.report()

    return pd.DataFrame({'id': ids, MIN_DISTANCE_COL: out})
