# STUMPY
# Copyright 2019 TD Ameritrade. Released under the terms of the 3-Clause BSD license.
# STUMPY is a trademark of TD Ameritrade IP Company, Inc. All rights reserved.

import logging
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from . import core
from .mparray import MatrixProfileResult

logger = logging.getLogger(__name__)


def _mass_PI(
    m,
    QT,
    μ_Q,
    σ_Q,
    Q_subseq_isconstant,
    M_T,
    Σ_T,
    T_subseq_isconstant,
    trivial_idx=None,
    excl_zone=0,
):
    """
    Compute the nearest neighbor of a single query from its sliding dot product with
    `T` ("Mueen's Algorithm for Similarity Search", MASS)

    Parameters
    ----------
    m : int
        Window size

    QT : numpy.ndarray
        Sliding dot product between the query and `T`

    μ_Q : float
        Mean of the query

    σ_Q : float
        Standard deviation of the query

    Q_subseq_isconstant : bool
        A boolean value that indicates whether the query is constant (True)

    M_T : numpy.ndarray
        Sliding mean for `T`

    Σ_T : numpy.ndarray
        Sliding standard deviation for `T`

    T_subseq_isconstant : numpy.ndarray
        A boolean array that indicates whether a subsequence in `T` is constant (True)

    trivial_idx : int, default None
        Index for the start of the trivial self-join

    excl_zone : int, default 0
        The half width for the exclusion zone relative to the `trivial_idx`.
        If the `trivial_idx` is `None` then this parameter is ignored.

    Returns
    -------
    P : float
        Matrix profile value

    I : int
        Matrix profile index

    IL : int
        Left matrix profile index

    IR : int
        Right matrix profile index
    """
    D = core.calculate_distance_profile(
        m, QT, μ_Q, σ_Q, M_T, Σ_T, Q_subseq_isconstant, T_subseq_isconstant
    )

    IL = -1
    IR = -1
    if trivial_idx is not None:
        core.apply_exclusion_zone(D, trivial_idx, excl_zone, np.inf)

        # Get left and right matrix profiles
        if D[:trivial_idx].size:
            IL = np.argmin(D[:trivial_idx])
            if D[IL] == np.inf:
                IL = -1

        if D[trivial_idx + 1 :].size:
            IR = trivial_idx + 1 + np.argmin(D[trivial_idx + 1 :])
            if D[IR] == np.inf:
                IR = -1

    # Element-wise Min
    I = np.argmin(D)
    P = D[I]
    if P == np.inf:
        I = -1

    return P, I, IL, IR


def _stamp(
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
    ignore_trivial,
    excl_zone,
    start,
    stop,
):
    """
    Compute the matrix profile for the queries `T_A[i : i + m]` with
    `start <= i < stop`

    Parameters
    ----------
    T_A : numpy.ndarray
        The (preprocessed) time series or sequence for which to compute the matrix
        profile

    T_B : numpy.ndarray
        The (preprocessed) time series that is used to annotate `T_A`

    T_B_fft : numpy.ndarray
        The real FFT of the (preprocessed) time series that is used to annotate `T_A`

    m : int
        Window size

    μ_Q : numpy.ndarray
        Sliding mean of `T_A`

    σ_Q : numpy.ndarray
        Sliding standard deviation of `T_A`

    Q_subseq_isconstant : numpy.ndarray
        A boolean array that indicates whether a subsequence in `T_A` is constant

    M_T : numpy.ndarray
        Sliding mean of `T_B`

    Σ_T : numpy.ndarray
        Sliding standard deviation of `T_B`

    T_subseq_isconstant : numpy.ndarray
        A boolean array that indicates whether a subsequence in `T_B` is constant

    ignore_trivial : bool
        `True` if this is a self-join and `False` otherwise (i.e., AB-join)

    excl_zone : int
        The half width of the exclusion zone

    start : int
        The first query index

    stop : int
        The (exclusive) last query index

    Returns
    -------
    P : numpy.ndarray
        Matrix profile

    I : numpy.ndarray
        A three row array with the matrix profile indices followed by the left and
        right matrix profile indices
    """
    P = np.full(stop - start, np.inf, dtype=np.float64)
    I = np.full((3, stop - start), -1, dtype=np.int64)

    for i in range(start, stop):
        QT = core.sliding_dot_product(T_A[i : i + m], T_B, T_B_fft)
        P[i - start], I[0, i - start], I[1, i - start], I[2, i - start] = _mass_PI(
            m,
            QT,
            μ_Q[i],
            σ_Q[i],
            Q_subseq_isconstant[i],
            M_T,
            Σ_T,
            T_subseq_isconstant,
            trivial_idx=i if ignore_trivial else None,
            excl_zone=excl_zone,
        )

    return P, I


def stamp(
    T_A, m, T_B=None, ignore_trivial=True, excl_zone=None, n_workers=1, client=None
):
    """
    Compute matrix profile and indices using the "Scalable Time series
    Anytime Matrix Profile" (STAMP) algorithm and MASS (2017 - with FFT).

    Parameters
    ----------
    T_A : numpy.ndarray
        The time series or sequence for which the matrix profile will be returned

    m : int
        Window size

    T_B : numpy.ndarray, default None
        The time series or sequence that will be used to annotate T_A. For every
        subsequence in T_A, its nearest neighbor in T_B will be recorded. When
        `None`, a self-join of `T_A` is computed.

    ignore_trivial : bool, default True
        `True` if this is a self join and `False` otherwise (i.e., AB-join).

    excl_zone : int, default None
        The half width of the exclusion zone of a self-join. When `None`, this is
        `core.get_excl_zone(m)`.

    n_workers : int, default 1
        The number of chunks that the queries are split into. With more than one
        chunk, the chunks are computed in a thread pool of this size.

    client : client, default None
        A `dask.distributed` client that the chunks are submitted to instead of a
        thread pool. The arrays are scattered to (broadcast to) all of its workers.
        When `n_workers` is one, one chunk per worker of the client is submitted.

    Returns
    -------
    out : MatrixProfileResult
        The matrix profile, its indices and, for self-joins, the left and right
        matrix profile indices

    Notes
    -----
    `DOI: 10.1109/ICDM.2016.0179 \
    <https://www.cs.ucr.edu/~eamonn/PID4481997_extend_Matrix%20Profile_I.pdf>`__

    See Table III

    Timeseries, T_A, will be annotated with the distance location
    (or index) of all its subsequences in another times series, T_B.

    For every subsequence, Q, in T_A, you will get a distance and index for
    the closest subsequence in T_B. Thus, the array returned will have length
    T_A.shape[0]-m+1
    """
    T_A, T_B, ignore_trivial, excl_zone = core._preprocess_join(
        T_A, m, T_B, ignore_trivial, excl_zone
    )
    self_join = T_B is T_A
    if n_workers is None or n_workers < 1:
        raise ValueError(f"`n_workers` must be a positive integer, found {n_workers}")

    T_A, μ_Q, σ_Q, Q_subseq_isconstant = core.preprocess(core._center(T_A), m)
    if self_join:
        T_B, M_T, Σ_T, T_subseq_isconstant = T_A, μ_Q, σ_Q, Q_subseq_isconstant
    else:
        T_B, M_T, Σ_T, T_subseq_isconstant = core.preprocess(core._center(T_B), m)
    T_B_fft = core._rfft_T(T_B, m)

    l = T_A.shape[0] - m + 1
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
        ignore_trivial,
        excl_zone,
    )

    logger.debug("STAMP with %d queries against %d subsequences", l, M_T.shape[0])
    P, I = _execute(_stamp, args, l, n_workers, client)

    core._check_P(P)

    return MatrixProfileResult(
        P_=P,
        I_=I[0],
        left_I_=I[1],
        right_I_=I[2],
        m=m,
        excl_zone=excl_zone,
        algorithm="stamp",
        join="self" if ignore_trivial else "ab",
    )


def _submit(executor, func, args, l, n_chunks):
    """
    Submit one `func` task per chunk of the `l` queries to the `executor` and merge
    the results by position along the last axis
    """
    futures = []
    for start, stop in core._get_ranges(l, n_chunks):
        if stop > start:
            futures.append(executor.submit(func, *args, start, stop))

    results = [future.result() for future in futures]
    P = np.concatenate([result[0] for result in results], axis=-1)
    I = np.concatenate([result[1] for result in results], axis=-1)

    return P, I


def _execute(func, args, l, n_workers=1, client=None):
    """
    Compute `func(*args, start, stop)` for contiguous chunks of the `l` queries
    either in the calling thread, a thread pool of `n_workers` threads, or on a
    `dask.distributed` client

    Parameters
    ----------
    func : function
        A function that returns a `(P, I)` tuple for the queries `start:stop`

    args : tuple
        The leading positional arguments of `func`

    l : int
        The total number of queries

    n_workers : int, default 1
        The number of chunks (and threads)

    client : client, default None
        A `dask.distributed` client. When `n_workers` is one, one chunk per worker
        of the client is submitted.

    Returns
    -------
    P : numpy.ndarray
        The merged matrix profile(s)

    I : numpy.ndarray
        The merged matrix profile indices
    """
    if client is not None:
        n_chunks = n_workers if n_workers > 1 else max(1, len(client.ncores()))
    else:
        n_chunks = min(n_workers, l)
    logger.debug("Splitting %d queries into %d chunk(s)", l, n_chunks)

    if client is None and n_chunks == 1:
        return func(*args, 0, l)

    if client is None:
        with ThreadPoolExecutor(max_workers=n_chunks) as executor:
            return _submit(executor, func, args, l, n_chunks)

    # Each array is sent to every worker once instead of once per chunk
    args = tuple(
        client.scatter(arg, broadcast=True, hash=False)
        if isinstance(arg, np.ndarray)
        else arg
        for arg in args
    )

    return _submit(client, func, args, l, n_chunks)
