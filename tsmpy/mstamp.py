# STUMPY
# Copyright 2019 TD Ameritrade. Released under the terms of the 3-Clause BSD license.
# STUMPY is a trademark of TD Ameritrade IP Company, Inc. All rights reserved.

import logging
import numbers

import numpy as np

from . import core
from .errors import InvalidSeries
from .mparray import MatrixProfileResult, ResultKind
from .stamp import _execute

logger = logging.getLogger(__name__)


def _preprocess_multi(T, name="T"):
    """
    Convert a (possibly one-dimensional) time series into a 2-D array where each
    row is a dimension
    """
    T = core._preprocess(T, name=name)
    if T.ndim == 1:
        T = T.reshape(1, -1)

    return T


def _multi_distance_profile(
    query_idx,
    T_A,
    T_B,
    T_B_fft,
    m,
    μ_Q,
    σ_Q,
    Q_subseq_isconstant,
    M_T,
    Σ_T,
    T_subseq_isconstant,
):
    """
    Compute the per-dimension distance profiles for the query
    `T_A[:, query_idx : query_idx + m]`

    Returns
    -------
    D : numpy.ndarray
        A `(d, l)` array where row `k` is the distance profile of dimension `k`
    """
    d = T_A.shape[0]
    D = np.empty((d, M_T.shape[1]), dtype=np.float64)
    for k in range(d):
        QT = core.sliding_dot_product(
            T_A[k, query_idx : query_idx + m], T_B[k], T_B_fft[k]
        )
        D[k] = core.calculate_distance_profile(
            m,
            QT,
            μ_Q[k, query_idx],
            σ_Q[k, query_idx],
            M_T[k],
            Σ_T[k],
            Q_subseq_isconstant[k, query_idx],
            T_subseq_isconstant[k],
        )

    return D


def _mstamp(
    T_A,
    T_B,
    T_B_fft,
    m,
    μ_Q,
    σ_Q,
    Q_subseq_isconstant,
    M_T,
    Σ_T,
    T_subseq_isconstant,
    k_dimensions,
    ignore_trivial,
    excl_zone,
    start,
    stop,
):
    """
    Compute the multi-dimensional matrix profile for the queries
    `T_A[:, i : i + m]` with `start <= i < stop`

    Returns
    -------
    P : numpy.ndarray
        The multi-dimensional matrix profile with `k_dimensions` rows

    I : numpy.ndarray
        The multi-dimensional matrix profile indices with `k_dimensions` rows

    Notes
    -----
    `DOI: 10.1109/ICDM.2017.66 \
    <https://www.cs.ucr.edu/~eamonn/Motif_Discovery_ICDM.pdf>`__

    See mSTAMP Algorithm
    """
    P = np.full((k_dimensions, stop - start), np.inf, dtype=np.float64)
    I = np.full((k_dimensions, stop - start), -1, dtype=np.int64)
    # Divisors for the mean of the `k` smallest distances
    k_range = np.arange(1, T_A.shape[0] + 1, dtype=np.float64)[:, np.newaxis]

    for i in range(start, stop):
        D = _multi_distance_profile(
            i,
            T_A,
            T_B,
            T_B_fft,
            m,
            μ_Q,
            σ_Q,
            Q_subseq_isconstant,
            M_T,
            Σ_T,
            T_subseq_isconstant,
        )
        if ignore_trivial:
            core.apply_exclusion_zone(D, i, excl_zone, np.inf)

        D.sort(axis=0)
        D_prime = np.cumsum(D, axis=0) / k_range
        for k in range(k_dimensions):
            nn_idx = np.argmin(D_prime[k])
            if D_prime[k, nn_idx] < np.inf:
                P[k, i - start] = D_prime[k, nn_idx]
                I[k, i - start] = nn_idx

    return P, I


def mstamp(
    T, m, T_B=None, k_dimensions=None, excl_zone=None, n_workers=1, client=None
):
    """
    Compute the multi-dimensional z-normalized matrix profile with mSTAMP

    Parameters
    ----------
    T : numpy.ndarray
        The time series or sequence for which to compute the multi-dimensional
        matrix profile. Each row in `T` represents data from the same dimension
        while each column in `T` represents data from a different dimension. A
        `DataFrame` with one column per dimension is transposed automatically.

    m : int
        Window size

    T_B : numpy.ndarray, default None
        The multi-dimensional time series that will be used to annotate `T`. It must
        have the same number of dimensions as `T`. When `None`, a self-join of `T`
        is computed.

    k_dimensions : int, default None
        The number of matrix profiles to return, i.e., the matrix profiles that use
        the `1, 2, ..., k_dimensions` best matching dimensions. When `None`, all
        dimensions are used.

    excl_zone : int, default None
        The half width of the exclusion zone of a self-join. When `None`, this is
        `core.get_excl_zone(m)`.

    n_workers : int, default 1
        The number of chunks (and threads) that the queries are split into

    client : client, default None
        A `dask.distributed` client that the chunks are submitted to

    Returns
    -------
    out : MatrixProfileResult
        The multi-dimensional matrix profile. Each row of `P_` corresponds to the
        matrix profile for a given number of dimensions (i.e., the first row is the
        1-D matrix profile and the second row is the 2-D matrix profile). The left
        and right matrix profile indices are not computed and set to `-1`.

    Notes
    -----
    `DOI: 10.1109/ICDM.2017.66 \
    <https://www.cs.ucr.edu/~eamonn/Motif_Discovery_ICDM.pdf>`__

    See mSTAMP Algorithm

    The `k`-dimensional distance is the mean of the `k` smallest per-dimension
    distances and, therefore, the `k`-dimensional matrix profile never decreases
    with `k`.
    """
    T_A = _preprocess_multi(T, name="T")
    if T_B is None:
        T_B = T_A
        ignore_trivial = True
    else:
        T_B = _preprocess_multi(T_B, name="T_B")
        if T_A.shape[0] != T_B.shape[0]:
            msg = f"`T` has {T_A.shape[0]} dimension(s) while `T_B` has "
            msg += f"{T_B.shape[0]} dimension(s)"
            raise InvalidSeries(msg)
        ignore_trivial = core.check_ignore_trivial(T_A, T_B, False)

    d, n_A = T_A.shape
    n_B = T_B.shape[1]
    core.check_window_size(
        m,
        max_size=min(n_A, n_B) - 1,
        n=n_A if ignore_trivial else None,
        excl_zone=excl_zone,
    )
    core.check_series_length(T_A, m, name="T")
    core.check_series_length(T_B, m, name="T_B")
    if excl_zone is None:
        excl_zone = core.get_excl_zone(m)

    if k_dimensions is None:
        k_dimensions = d
    if isinstance(k_dimensions, bool) or not isinstance(k_dimensions, numbers.Integral):
        msg = f"`k_dimensions` must be an integer but found {k_dimensions!r}"
        raise ValueError(msg)
    if not 1 <= k_dimensions <= d:
        msg = f"`k_dimensions` must be between 1 and {d} but found {k_dimensions}"
        raise ValueError(msg)
    if n_workers is None or n_workers < 1:
        raise ValueError(f"`n_workers` must be a positive integer, found {n_workers}")

    self_join = T_B is T_A
    T_A, μ_Q, σ_Q, Q_subseq_isconstant = core.preprocess(core._center(T_A), m)
    if self_join:
        T_B, M_T, Σ_T, T_subseq_isconstant = T_A, μ_Q, σ_Q, Q_subseq_isconstant
    else:
        T_B, M_T, Σ_T, T_subseq_isconstant = core.preprocess(core._center(T_B), m)
    T_B_fft = core._rfft_T(T_B, m)

    l = n_A - m + 1
    logger.debug(
        "mSTAMP with %d dimension(s), %d queries and k_dimensions=%d",
        d,
        l,
        k_dimensions,
    )
    args = (
        T_A,
        T_B,
        T_B_fft,
        m,
        μ_Q,
        σ_Q,
        Q_subseq_isconstant,
        M_T,
        Σ_T,
        T_subseq_isconstant,
        k_dimensions,
        ignore_trivial,
        excl_zone,
    )
    P, I = _execute(_mstamp, args, l, n_workers, client)

    core._check_P(P)

    return MatrixProfileResult(
        P_=P,
        I_=I,
        left_I_=np.full_like(I, -1),
        right_I_=np.full_like(I, -1),
        m=m,
        excl_zone=excl_zone,
        algorithm="mstamp",
        join="self" if ignore_trivial else "ab",
        kinds=(ResultKind.MULTI_MATRIX_PROFILE,),
    )
