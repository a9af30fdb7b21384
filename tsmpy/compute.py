# STUMPY
# Copyright 2019 TD Ameritrade. Released under the terms of the 3-Clause BSD license.
# STUMPY is a trademark of TD Ameritrade IP Company, Inc. All rights reserved.

import logging
import time

import numpy as np

from . import config, core
from .errors import InvalidSeries
from .mparray import MatrixProfileResult
from .mstamp import mstamp
from .scrimp import scrimp
from .stamp import stamp
from .stomp import stomp

logger = logging.getLogger(__name__)

_ALGORITHMS = ("stamp", "stomp", "scrimp", "mstamp")


def _check_fraction(name, value, closed_left=False):
    lower_ok = value >= 0.0 if closed_left else value > 0.0
    if isinstance(value, bool) or not (lower_ok and value <= 1.0):
        interval = "[0, 1]" if closed_left else "(0, 1]"
        raise ValueError(f"`{name}` must be in {interval} but found {value!r}")


def _is_multivariate(T):
    return T.ndim == 2 and T.shape[0] > 1


def compute_matrix_profile(
    series,
    window_size,
    algorithm="stomp",
    exclusion_zone=None,
    query_series=None,
    n_workers=1,
    verbose=False,
    s_size=None,
    k_dimensions=None,
    percentage=None,
    pre_scrimp=True,
    max_iter=None,
    time_limit=None,
    client=None,
):
    """
    Compute the matrix profile of `series`

    This is the primary entry point that validates all options and dispatches to
    `stamp`, `stomp`, `scrimp`, or `mstamp`.

    Parameters
    ----------
    series : numpy.ndarray
        The time series for which to compute the matrix profile. A 2-D array (where
        each row is a dimension) or a `DataFrame` (where each column is a dimension)
        is a multi-dimensional time series.

    window_size : int
        Window size

    algorithm : str, default "stomp"
        One of "stamp", "stomp", "scrimp", or "mstamp". Multi-dimensional time
        series are computed with "mstamp" when "stamp" or "mstamp" is requested.

    exclusion_zone : float, default None
        The half width of the exclusion zone as a fraction of `window_size`. When
        `None`, `config.TSMPY_EXCL_ZONE` (0.25) is used.

    query_series : numpy.ndarray, default None
        The time series that is searched for the nearest neighbor of every
        subsequence of `series` (i.e., an AB-join). When `None`, a self-join of
        `series` is computed.

    n_workers : int, default 1
        The number of threads (or `dask` chunks for "stamp" and "mstamp")

    verbose : bool, default False
        Log the progress at the `INFO` level instead of the `DEBUG` level

    s_size : float, default None
        The preSCRIMP sampling interval as a fraction of `window_size`. When `None`,
        `config.TSMPY_PRESCRIMP_S_SIZE` (0.25) is used.

    k_dimensions : int, default None
        The number of multi-dimensional matrix profiles to compute ("mstamp" only)

    percentage : float, default None
        The fraction of the distance matrix that SCRIMP computes per update. When
        `None`, `config.TSMPY_SCRIMP_PERCENTAGE` (0.01) is used.

    pre_scrimp : bool, default True
        Seed SCRIMP with preSCRIMP

    max_iter : int, default None
        The maximum number of SCRIMP updates. When `None`, SCRIMP runs until it
        converges.

    time_limit : float, default None
        The SCRIMP time budget in seconds

    client : client, default None
        A `dask.distributed` client for "stamp" and "mstamp"

    Returns
    -------
    out : MatrixProfileResult
        The matrix profile with the (preprocessed) `series` (and `query_series`)
        attached as `data`

    Raises
    ------
    InvalidWindow
        If `window_size` is not an integer, is smaller than two, or is not smaller
        than the length of both time series

    InvalidSeries
        If a time series is not numeric, is shorter than two windows, has a
        different number of dimensions than the other time series, or is
        multi-dimensional for a univariate algorithm

    NumericInstability
        If the matrix profile contains `np.nan` or negative values

    ValueError
        If an option is invalid
    """
    level = logging.INFO if verbose else logging.DEBUG

    algorithm = str(algorithm).lower()
    if algorithm not in _ALGORITHMS:
        raise ValueError(
            f"`algorithm` must be one of {', '.join(_ALGORITHMS)} but found "
            f"{algorithm!r}"
        )
    if exclusion_zone is None:
        exclusion_zone = config.TSMPY_EXCL_ZONE
    if s_size is None:
        s_size = config.TSMPY_PRESCRIMP_S_SIZE
    if percentage is None:
        percentage = config.TSMPY_SCRIMP_PERCENTAGE
    _check_fraction("exclusion_zone", exclusion_zone, closed_left=True)
    _check_fraction("s_size", s_size)
    _check_fraction("percentage", percentage)
    if isinstance(n_workers, bool) or not isinstance(n_workers, (int, np.integer)):
        raise ValueError(f"`n_workers` must be an integer but found {n_workers!r}")
    if n_workers < 1:
        raise ValueError(f"`n_workers` must be at least 1 but found {n_workers}")
    if k_dimensions is not None and (
        isinstance(k_dimensions, bool)
        or not isinstance(k_dimensions, (int, np.integer))
    ):
        msg = f"`k_dimensions` must be an integer but found {k_dimensions!r}"
        raise ValueError(msg)

    T_A = core._preprocess(series, name="series")
    T_B = None
    if query_series is not None:
        T_B = core._preprocess(query_series, name="query_series")

    multivariate = _is_multivariate(T_A) or (T_B is not None and _is_multivariate(T_B))
    if multivariate or k_dimensions is not None:
        if algorithm == "stamp":
            algorithm = "mstamp"
        elif algorithm != "mstamp":
            raise InvalidSeries(
                f"The '{algorithm}' algorithm only supports 1-dimensional time series. "
                "Use `algorithm='mstamp'` for multi-dimensional time series."
            )

    core.check_window_size(window_size)
    excl_zone = core.get_excl_zone(window_size, exclusion_zone)
    ignore_trivial = T_B is None

    logger.log(
        level,
        "Computing the %s matrix profile of a %s with window size %d (%s)",
        "self-join" if ignore_trivial else "AB-join",
        "x".join(str(size) for size in T_A.shape),
        window_size,
        algorithm,
    )
    start = time.perf_counter()

    if algorithm == "stamp":
        result = stamp(
            T_A,
            window_size,
            T_B=T_B,
            ignore_trivial=ignore_trivial,
            excl_zone=excl_zone,
            n_workers=n_workers,
            client=client,
        )
    elif algorithm == "mstamp":
        result = mstamp(
            T_A,
            window_size,
            T_B=T_B,
            k_dimensions=k_dimensions,
            excl_zone=excl_zone,
            n_workers=n_workers,
            client=client,
        )
    elif algorithm == "stomp":
        result = stomp(
            T_A,
            window_size,
            T_B=T_B,
            ignore_trivial=ignore_trivial,
            excl_zone=excl_zone,
            n_workers=n_workers,
        )
    else:
        approx = scrimp(
            T_A,
            window_size,
            T_B=T_B,
            ignore_trivial=ignore_trivial,
            percentage=percentage,
            pre_scrimp=pre_scrimp,
            s=max(1, int(np.floor(s_size * window_size))),
            excl_zone=excl_zone,
            n_workers=n_workers,
        )
        approx.run(max_iter=max_iter, time_limit=time_limit)
        logger.log(
            level,
            "SCRIMP processed %d diagonal(s) (converged=%s)",
            approx.n_processed_,
            approx.converged_,
        )
        P = approx.P_
        core._check_P(P)
        result = MatrixProfileResult(
            P_=P,
            I_=approx.I_,
            left_I_=approx.left_I_,
            right_I_=approx.right_I_,
            m=window_size,
            excl_zone=approx.excl_zone,
            algorithm="scrimp",
            join="self" if approx.ignore_trivial else "ab",
            converged=approx.converged_,
        )

    logger.log(level, "Finished in %.3f seconds", time.perf_counter() - start)

    if T_B is None:
        return result.with_data(T_A)

    return result.with_data(T_A, T_B)
