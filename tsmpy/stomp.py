# STUMPY
# Copyright 2019 TD Ameritrade. Released under the terms of the 3-Clause BSD license.
# STUMPY is a trademark of TD Ameritrade IP Company, Inc. All rights reserved.

import logging

import numpy as np
from numba import njit, prange

from . import config, core
from .mparray import MatrixProfileResult

logger = logging.getLogger(__name__)


@njit(parallel=True, fastmath=config.TSMPY_FASTMATH_FLAGS)
def _stomp(
    T_A,
    T_B,
    m,
    μ_Q,
    σ_Q,
    Q_subseq_isconstant,
    M_T,
    Σ_T,
    T_subseq_isconstant,
    QT,
    QT_first,
    ignore_trivial,
    excl_zone,
):
    """
    A Numba JIT-compiled version of the "Scalable Time series Ordered-search Matrix
    Profile" (STOMP)

    Parameters
    ----------
    T_A : numpy.ndarray
        The (preprocessed) time series or sequence for which to compute the matrix
        profile

    T_B : numpy.ndarray
        The (preprocessed) time series or sequence that will be used to annotate T_A

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

    QT : numpy.ndarray
        Dot product between `T_A[:m]` and every subsequence of `T_B`

    QT_first : numpy.ndarray
        Dot product between `T_B[:m]` and every subsequence of `T_A`

    ignore_trivial : bool
        `True` if this is a self-join and `False` otherwise (i.e., AB-join)

    excl_zone : int
        The half width of the exclusion zone

    Returns
    -------
    P : numpy.ndarray
        Matrix profile

    I : numpy.ndarray
        A three row array with the matrix profile indices followed by the left and
        right matrix profile indices

    Notes
    -----
    `DOI: 10.1109/ICDM.2016.0085 \
    <https://www.cs.ucr.edu/~eamonn/STOMP_GPU_final_submission_camera_ready.pdf>`__

    See Table II, Figure 5, and Figure 6

    Row `i` of the dot products only depends on row `i - 1` so two buffers are
    alternated and every column of a row is updated in parallel.
    """
    l = T_A.shape[0] - m + 1
    w = T_B.shape[0] - m + 1

    P = np.full(l, np.inf, dtype=np.float64)
    I = np.full((3, l), -1, dtype=np.int64)
    D = np.empty(w, dtype=np.float64)
    QT_odd = QT.copy()
    QT_even = QT.copy()

    for i in range(l):
        if i > 0:
            for j in prange(1, w):
                if i % 2 == 0:
                    QT_even[j] = (
                        QT_odd[j - 1]
                        - T_A[i - 1] * T_B[j - 1]
                        + T_A[i + m - 1] * T_B[j + m - 1]
                    )
                else:
                    QT_odd[j] = (
                        QT_even[j - 1]
                        - T_A[i - 1] * T_B[j - 1]
                        + T_A[i + m - 1] * T_B[j + m - 1]
                    )
            if i % 2 == 0:
                QT_even[0] = QT_first[i]
            else:
                QT_odd[0] = QT_first[i]

        for j in prange(w):
            if i % 2 == 0:
                QT_j = QT_even[j]
            else:
                QT_j = QT_odd[j]
            D[j] = np.sqrt(
                core._calculate_squared_distance(
                    m,
                    QT_j,
                    μ_Q[i],
                    σ_Q[i],
                    M_T[j],
                    Σ_T[j],
                    Q_subseq_isconstant[i],
                    T_subseq_isconstant[j],
                )
            )

        if ignore_trivial:
            core._apply_exclusion_zone(D, i, excl_zone, np.inf)

        nn_idx = np.argmin(D)
        if D[nn_idx] < np.inf:
            P[i] = D[nn_idx]
            I[0, i] = nn_idx

        if ignore_trivial:
            if i > 0:
                left_idx = np.argmin(D[:i])
                if D[left_idx] < np.inf:
                    I[1, i] = left_idx
            if i + 1 < w:
                right_idx = i + 1 + np.argmin(D[i + 1 :])
                if D[right_idx] < np.inf:
                    I[2, i] = right_idx

    return P, I


def stomp(T_A, m, T_B=None, ignore_trivial=True, excl_zone=None, n_workers=None):
    """
    Compute the matrix profile with the "Scalable Time series Ordered-search Matrix
    Profile" (STOMP)

    This is a convenience wrapper around the Numba JIT-compiled parallelized
    `_stomp` function which computes the matrix profile row by row while only the
    first row (and first column) of dot products are computed with FFT convolution.

    Parameters
    ----------
    T_A : numpy.ndarray
        The time series or sequence for which to compute the matrix profile

    m : int
        Window size

    T_B : numpy.ndarray, default None
        The time series or sequence that will be used to annotate T_A. For every
        subsequence in T_A, its nearest neighbor in T_B will be recorded. Default is
        `None` which corresponds to a self-join.

    ignore_trivial : bool, default True
        Set to `True` if this is a self-join. Otherwise, for AB-join, set this
        to `False`.

    excl_zone : int, default None
        The half width of the exclusion zone of a self-join. When `None`, this is
        `core.get_excl_zone(m)`.

    n_workers : int, default None
        The number of Numba threads. When `None`, the current Numba setting is used.

    Returns
    -------
    out : MatrixProfileResult
        The matrix profile, its indices and, for self-joins, the left and right
        matrix profile indices

    Notes
    -----
    `DOI: 10.1109/ICDM.2016.0085 \
    <https://www.cs.ucr.edu/~eamonn/STOMP_GPU_final_submission_camera_ready.pdf>`__

    See Table II

    Timeseries, T_A, will be annotated with the distance location
    (or index) of all its subsequences in another times series, T_B.

    Note: Unlike in the Table II where T_A.shape is expected to be equal
    to T_B.shape, this implementation is generalized so that the shapes of
    T_A and T_B can be different. In the case where T_A.shape == T_B.shape,
    then our algorithm reduces down to the same algorithm found in Table II.

    Both time series are centered on their (finite) mean first, which leaves all
    z-normalized distances unchanged.
    """
    T_A, T_B, ignore_trivial, excl_zone = core._preprocess_join(
        T_A, m, T_B, ignore_trivial, excl_zone
    )
    self_join = T_B is T_A

    T_A, μ_Q, σ_Q, Q_subseq_isconstant = core.preprocess(core._center(T_A), m)
    if self_join:
        T_B, M_T, Σ_T, T_subseq_isconstant = T_A, μ_Q, σ_Q, Q_subseq_isconstant
    else:
        T_B, M_T, Σ_T, T_subseq_isconstant = core.preprocess(core._center(T_B), m)

    QT = core.sliding_dot_product(T_A[:m], T_B)
    QT_first = core.sliding_dot_product(T_B[:m], T_A)

    with core._numba_threads(n_workers) as n_threads:
        logger.debug(
            "STOMP with %d rows and %d columns on %d thread(s)",
            μ_Q.shape[0],
            M_T.shape[0],
            n_threads,
        )
        P, I = _stomp(
            T_A,
            T_B,
            m,
            μ_Q,
            σ_Q,
            Q_subseq_isconstant,
            M_T,
            Σ_T,
            T_subseq_isconstant,
            QT,
            QT_first,
            ignore_trivial,
            excl_zone,
        )

    core._check_P(P)

    return MatrixProfileResult(
        P_=P,
        I_=I[0],
        left_I_=I[1],
        right_I_=I[2],
        m=m,
        excl_zone=excl_zone,
        algorithm="stomp",
        join="self" if ignore_trivial else "ab",
    )
