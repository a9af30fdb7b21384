# STUMPY
# Copyright 2019 TD Ameritrade. Released under the terms of the 3-Clause BSD license.
# STUMPY is a trademark of TD Ameritrade IP Company, Inc. All rights reserved.

import logging
import time

import numpy as np
from numba import njit, prange

from . import config, core

logger = logging.getLogger(__name__)


def _preprocess_diagonal(T_A, m, T_B=None, ignore_trivial=True, excl_zone=None):
    """
    Validate and preprocess the time series for the diagonal traversal algorithms

    Parameters
    ----------
    T_A : numpy.ndarray
        The time series or sequence for which to compute the matrix profile

    m : int
        Window size

    T_B : numpy.ndarray, default None
        The time series or sequence that will be used to annotate T_A. When `None`,
        a self-join of `T_A` is performed.

    ignore_trivial : bool, default True
        Set to `True` if this is a self-join. Otherwise, for AB-join, set this
        to `False`.

    excl_zone : int, default None
        The half width of the exclusion zone

    Returns
    -------
    T_A : numpy.ndarray
        The centered time series `T_A` where non-finite values are set to zero

    T_B : numpy.ndarray
        The centered time series `T_B` where non-finite values are set to zero

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
        The (corrected) ignore_trivial value

    excl_zone : int
        The half width of the exclusion zone
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

    return (
        T_A,
        T_B,
        μ_Q,
        σ_Q,
        Q_subseq_isconstant,
        M_T,
        Σ_T,
        T_subseq_isconstant,
        ignore_trivial,
        excl_zone,
    )


@njit(fastmath=config.TSMPY_FASTMATH_FLAGS)
def _compute_PI(
    T_A,
    T_B,
    m,
    μ_Q,
    σ_Q,
    Q_subseq_isconstant,
    M_T,
    Σ_T,
    T_subseq_isconstant,
    indices,
    start,
    stop,
    thread_idx,
    s,
    P,
    I,
    excl_zone,
    ignore_trivial,
):
    """
    Compute (Numba JIT-compiled) and update the approximate matrix profile and
    matrix profile indices for the sampled queries `indices[start:stop]`

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

    indices : numpy.ndarray
        The sampled query indices

    start : int
        The first position in `indices` to process

    stop : int
        The (exclusive) last position in `indices` to process

    thread_idx : int
        The thread index

    s : int
        The sampling interval that defaults to `int(np.round(m/4))`

    P : numpy.ndarray
        The per-thread matrix profiles that are updated inplace

    I : numpy.ndarray
        The per-thread matrix profile indices that are updated inplace

    excl_zone : int
        The half width of the exclusion zone

    ignore_trivial : bool
        `True` if this is a self-join and `False` otherwise (i.e., AB-join)

    Returns
    -------
    None

    Notes
    -----
    `DOI: 10.1109/ICDM.2018.00099 \
    <https://www.cs.ucr.edu/~eamonn/SCRIMP_ICDM_camera_ready_updated.pdf>`__

    See Algorithm 2
    """
    l = T_A.shape[0] - m + 1
    w = T_B.shape[0] - m + 1
    distance_profile = np.empty(w, dtype=np.float64)

    for idx in range(start, stop):
        i = indices[idx]
        QT = core._sliding_dot_product(T_A[i : i + m], T_B)
        distance_profile[:] = np.sqrt(
            core._calculate_squared_distance_profile(
                m,
                QT,
                μ_Q[i],
                σ_Q[i],
                M_T,
                Σ_T,
                Q_subseq_isconstant[i],
                T_subseq_isconstant,
            )
        )
        if ignore_trivial:
            core._apply_exclusion_zone(distance_profile, i, excl_zone, np.inf)

        nn_i = np.argmin(distance_profile)
        if distance_profile[nn_i] == np.inf:
            continue

        if distance_profile[nn_i] < P[thread_idx, i]:
            P[thread_idx, i] = distance_profile[nn_i]
            I[thread_idx, i] = nn_i

        j = nn_i
        # Propagate along the diagonal to the right neighbors of both
        # `T_A[i : i + m]` and `T_B[j : j + m]`
        QT_j = QT[j]
        for g in range(1, min(s, l - i, w - j)):
            QT_j = (
                QT_j
                - T_A[i + g - 1] * T_B[j + g - 1]
                + T_A[i + g + m - 1] * T_B[j + g + m - 1]
            )
            D = np.sqrt(
                core._calculate_squared_distance(
                    m,
                    QT_j,
                    μ_Q[i + g],
                    σ_Q[i + g],
                    M_T[j + g],
                    Σ_T[j + g],
                    Q_subseq_isconstant[i + g],
                    T_subseq_isconstant[j + g],
                )
            )
            if D < P[thread_idx, i + g]:
                P[thread_idx, i + g] = D
                I[thread_idx, i + g] = j + g
            if ignore_trivial and D < P[thread_idx, j + g]:
                P[thread_idx, j + g] = D
                I[thread_idx, j + g] = i + g

        # Propagate along the diagonal to the left neighbors
        QT_j = QT[j]
        for g in range(1, min(s, i + 1, j + 1)):
            QT_j = QT_j - T_A[i - g + m] * T_B[j - g + m] + T_A[i - g] * T_B[j - g]
            D = np.sqrt(
                core._calculate_squared_distance(
                    m,
                    QT_j,
                    μ_Q[i - g],
                    σ_Q[i - g],
                    M_T[j - g],
                    Σ_T[j - g],
                    Q_subseq_isconstant[i - g],
                    T_subseq_isconstant[j - g],
                )
            )
            if D < P[thread_idx, i - g]:
                P[thread_idx, i - g] = D
                I[thread_idx, i - g] = j - g
            if ignore_trivial and D < P[thread_idx, j - g]:
                P[thread_idx, j - g] = D
                I[thread_idx, j - g] = i - g

        # For a self-join, the distance between `T_A[i : i + m]` and
        # `T_A[j : j + m]` is also a candidate for subsequence `j`
        if ignore_trivial:
            for k in range(w):
                if distance_profile[k] < P[thread_idx, k]:
                    P[thread_idx, k] = distance_profile[k]
                    I[thread_idx, k] = i


@njit(parallel=True, fastmath=config.TSMPY_FASTMATH_FLAGS)
def _prescrimp(
    T_A,
    T_B,
    m,
    μ_Q,
    σ_Q,
    Q_subseq_isconstant,
    M_T,
    Σ_T,
    T_subseq_isconstant,
    indices,
    s,
    excl_zone,
    ignore_trivial,
    n_threads,
):
    """
    A Numba JIT-compiled implementation of the preSCRIMP algorithm.

    The sampled queries are split evenly across `n_threads` private matrix profiles,
    which are merged at the end. For equal distances, the lower thread index wins.

    Returns
    -------
    P : numpy.ndarray
        The approximate matrix profile

    I : numpy.ndarray
        The approximate matrix profile indices

    Notes
    -----
    `DOI: 10.1109/ICDM.2018.00099 \
    <https://www.cs.ucr.edu/~eamonn/SCRIMP_ICDM_camera_ready_updated.pdf>`__

    See Algorithm 2
    """
    l = T_A.shape[0] - m + 1
    P = np.full((n_threads, l), np.inf, dtype=np.float64)
    I = np.full((n_threads, l), -1, dtype=np.int64)

    idx_ranges = core._get_ranges(indices.shape[0], n_threads)
    for thread_idx in prange(n_threads):
        _compute_PI(
            T_A,
            T_B,
            m,
            μ_Q,
            σ_Q,
            Q_subseq_isconstant,
            M_T,
            Σ_T,
            T_subseq_isconstant,
            indices,
            idx_ranges[thread_idx, 0],
            idx_ranges[thread_idx, 1],
            thread_idx,
            s,
            P,
            I,
            excl_zone,
            ignore_trivial,
        )

    for thread_idx in range(1, n_threads):
        core._merge_PI(P[0], P[thread_idx], I[0], I[thread_idx])

    return P[0], I[0]


def _get_s(s, excl_zone):
    if s is None:
        s = excl_zone
    if isinstance(s, bool) or not isinstance(s, (int, np.integer)):
        raise ValueError(f"The sampling interval `s` must be an integer, found {s!r}")

    return max(1, int(s))


def prescrimp(T_A, m, T_B=None, s=None, excl_zone=None, n_workers=None):
    """
    A convenience wrapper around the Numba JIT-compiled parallelized `_prescrimp`
    function which computes the approximate matrix profile according to the
    preSCRIMP algorithm

    Parameters
    ----------
    T_A : numpy.ndarray
        The time series or sequence for which to compute the matrix profile

    m : int
        Window size

    T_B : numpy.ndarray, default None
        The time series or sequence that will be used to annotate T_A. For every
        subsequence in T_A, its nearest neighbor in T_B will be recorded.

    s : int, default None
        The sampling interval that defaults to the half width of the exclusion zone
        (but at least one)

    excl_zone : int, default None
        The half width of the exclusion zone of a self-join. When `None`, this is
        `core.get_excl_zone(m)`.

    n_workers : int, default None
        The number of Numba threads. When `None`, the current Numba setting is used.

    Returns
    -------
    P : numpy.ndarray
        The approximate matrix profile

    I : numpy.ndarray
        The approximate matrix profile indices

    Notes
    -----
    `DOI: 10.1109/ICDM.2018.00099 \
    <https://www.cs.ucr.edu/~eamonn/SCRIMP_ICDM_camera_ready_updated.pdf>`__

    See Algorithm 2
    """
    (
        T_A,
        T_B,
        μ_Q,
        σ_Q,
        Q_subseq_isconstant,
        M_T,
        Σ_T,
        T_subseq_isconstant,
        ignore_trivial,
        excl_zone,
    ) = _preprocess_diagonal(T_A, m, T_B, T_B is None, excl_zone)
    s = _get_s(s, excl_zone)

    l = T_A.shape[0] - m + 1
    indices = np.random.permutation(range(0, l, s)).astype(np.int64)

    with core._numba_threads(n_workers) as n_threads:
        P, I = _prescrimp(
            T_A,
            T_B,
            m,
            μ_Q,
            σ_Q,
            Q_subseq_isconstant,
            M_T,
            Σ_T,
            T_subseq_isconstant,
            indices,
            s,
            excl_zone,
            ignore_trivial,
            n_threads,
        )

    core._check_P(P)

    return P, I


@njit(parallel=True, fastmath=config.TSMPY_FASTMATH_FLAGS)
def _scrimp(
    T_A,
    T_B,
    m,
    μ_Q,
    σ_Q,
    Q_subseq_isconstant,
    M_T,
    Σ_T,
    T_subseq_isconstant,
    diags,
    diags_ranges,
    ignore_trivial,
):
    """
    A Numba JIT-compiled version of SCRIMP that traverses the diagonals `diags`
    of the distance matrix

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

    diags : numpy.ndarray
        The diagonal indices `k` (i.e., the pairs `T_A[i : i + m]` and
        `T_B[i + k : i + k + m]`)

    diags_ranges : numpy.ndarray
        The start and (exclusive) stop positions in `diags` for each thread

    ignore_trivial : bool
        `True` if this is a self-join and `False` otherwise (i.e., AB-join)

    Returns
    -------
    P : numpy.ndarray
        A three row array with the matrix profile followed by the left and right
        matrix profiles

    I : numpy.ndarray
        A three row array with the matrix profile indices followed by the left and
        right matrix profile indices

    Notes
    -----
    `DOI: 10.1109/ICDM.2018.00099 \
    <https://www.cs.ucr.edu/~eamonn/SCRIMP_ICDM_camera_ready_updated.pdf>`__

    See Algorithm 1
    """
    n_threads = diags_ranges.shape[0]
    l = T_A.shape[0] - m + 1
    w = T_B.shape[0] - m + 1

    P = np.full((n_threads, 3, l), np.inf, dtype=np.float64)
    I = np.full((n_threads, 3, l), -1, dtype=np.int64)

    for thread_idx in prange(n_threads):
        start, stop = diags_ranges[thread_idx]
        for diag_idx in range(start, stop):
            k = diags[diag_idx]
            if k >= 0:
                iter_start = 0
            else:
                iter_start = -k
            iter_stop = min(l, w - k)

            QT = 0.0
            for i in range(iter_start, iter_stop):
                j = i + k
                if i == iter_start:
                    QT = np.dot(T_A[i : i + m], T_B[j : j + m])
                else:
                    QT = (
                        QT
                        - T_A[i - 1] * T_B[j - 1]
                        + T_A[i + m - 1] * T_B[j + m - 1]
                    )
                D = np.sqrt(
                    core._calculate_squared_distance(
                        m,
                        QT,
                        μ_Q[i],
                        σ_Q[i],
                        M_T[j],
                        Σ_T[j],
                        Q_subseq_isconstant[i],
                        T_subseq_isconstant[j],
                    )
                )

                if D < P[thread_idx, 0, i]:
                    P[thread_idx, 0, i] = D
                    I[thread_idx, 0, i] = j

                # Self-join diagonals are all above the exclusion zone (i.e., j > i)
                # so `j` is a right neighbor of `i` and `i` is a left neighbor of `j`
                if ignore_trivial:
                    if D < P[thread_idx, 2, i]:
                        P[thread_idx, 2, i] = D
                        I[thread_idx, 2, i] = j
                    if D < P[thread_idx, 0, j]:
                        P[thread_idx, 0, j] = D
                        I[thread_idx, 0, j] = i
                    if D < P[thread_idx, 1, j]:
                        P[thread_idx, 1, j] = D
                        I[thread_idx, 1, j] = i

    for thread_idx in range(1, n_threads):
        for row in range(3):
            core._merge_PI(
                P[0, row], P[thread_idx, row], I[0, row], I[thread_idx, row]
            )

    return P[0], I[0]


class scrimp:
    """
    Compute an approximate matrix profile with SCRIMP, which can be refined
    incrementally (i.e., an anytime algorithm)

    This is a convenience class around the Numba JIT-compiled parallelized
    `_prescrimp` and `_scrimp` functions. Every call to `update` processes one more
    chunk of diagonals of the distance matrix.

    Parameters
    ----------
    T_A : numpy.ndarray
        The time series or sequence for which to compute the matrix profile

    m : int
        Window size

    T_B : numpy.ndarray, default None
        The time series or sequence that will be used to annotate T_A. For every
        subsequence in T_A, its nearest neighbor in T_B will be recorded.

    ignore_trivial : bool, default True
        Set to `True` if this is a self-join. Otherwise, for AB-join, set this to
        `False`.

    percentage : float, default None
        Approximate percentage of the distance matrix that is computed by a single
        `update`. When `None`, `config.TSMPY_SCRIMP_PERCENTAGE` is used.

    pre_scrimp : bool, default True
        A flag for whether or not to perform the preSCRIMP calculation prior to
        computing SCRIMP.

    s : int, default None
        The sampling interval of preSCRIMP that defaults to the half width of the
        exclusion zone (but at least one)

    excl_zone : int, default None
        The half width of the exclusion zone of a self-join. When `None`, this is
        `core.get_excl_zone(m)`.

    n_workers : int, default None
        The number of Numba threads. When `None`, the current Numba setting is used.

    Attributes
    ----------
    P_ : numpy.ndarray
        The updated matrix profile

    I_ : numpy.ndarray
        The updated matrix profile indices

    left_I_ : numpy.ndarray
        The updated left matrix profile indices

    right_I_ : numpy.ndarray
        The updated right matrix profile indices

    converged_ : bool
        `True` once every diagonal of the distance matrix has been processed

    n_processed_ : int
        The number of diagonals that have been processed

    Methods
    -------
    update()
        Update the matrix profile and the matrix profile indices by computing
        additional new distances (limited by `percentage`) that make up the full
        distance matrix.

    run(max_iter=None, time_limit=None)
        Call `update` until the matrix profile converges, `max_iter` updates have
        been made, or `time_limit` seconds have elapsed.

    Notes
    -----
    `DOI: 10.1109/ICDM.2018.00099 \
    <https://www.cs.ucr.edu/~eamonn/SCRIMP_ICDM_camera_ready_updated.pdf>`__

    See Algorithm 1 and Algorithm 2
    """

    def __init__(
        self,
        T_A,
        m,
        T_B=None,
        ignore_trivial=True,
        percentage=None,
        pre_scrimp=True,
        s=None,
        excl_zone=None,
        n_workers=None,
    ):
        """
        Initialize the `scrimp` object

        Parameters
        ----------
        T_A : numpy.ndarray
            The time series or sequence for which to compute the matrix profile

        m : int
            Window size

        T_B : numpy.ndarray, default None
            The time series or sequence that will be used to annotate T_A. For every
            subsequence in T_A, its nearest neighbor in T_B will be recorded.

        ignore_trivial : bool, default True
            Set to `True` if this is a self-join. Otherwise, for AB-join, set this to
            `False`.

        percentage : float, default None
            Approximate percentage of the distance matrix that is computed by a
            single `update`

        pre_scrimp : bool, default True
            A flag for whether or not to perform the preSCRIMP calculation prior to
            computing SCRIMP.

        s : int, default None
            The sampling interval of preSCRIMP

        excl_zone : int, default None
            The half width of the exclusion zone of a self-join

        n_workers : int, default None
            The number of Numba threads
        """
        if percentage is None:
            percentage = config.TSMPY_SCRIMP_PERCENTAGE
        if not 0.0 < percentage <= 1.0:
            raise ValueError(f"`percentage` must be in (0, 1] but found {percentage}")

        (
            self._T_A,
            self._T_B,
            self._μ_Q,
            self._σ_Q,
            self._Q_subseq_isconstant,
            self._M_T,
            self._Σ_T,
            self._T_subseq_isconstant,
            self._ignore_trivial,
            self._excl_zone,
        ) = _preprocess_diagonal(T_A, m, T_B, ignore_trivial, excl_zone)

        self._m = m
        self._n_workers = n_workers
        self._n_A = self._T_A.shape[0]
        self._n_B = self._T_B.shape[0]
        self._l = self._n_A - self._m + 1
        self._w = self._n_B - self._m + 1

        self._P = np.full(self._l, np.inf, dtype=np.float64)
        self._PL = np.full(self._l, np.inf, dtype=np.float64)
        self._PR = np.full(self._l, np.inf, dtype=np.float64)
        self._I = np.full(self._l, -1, dtype=np.int64)
        self._IL = np.full(self._l, -1, dtype=np.int64)
        self._IR = np.full(self._l, -1, dtype=np.int64)

        if pre_scrimp:
            s = _get_s(s, self._excl_zone)
            indices = np.random.permutation(range(0, self._l, s)).astype(np.int64)
            with core._numba_threads(self._n_workers) as n_threads:
                P, I = _prescrimp(
                    self._T_A,
                    self._T_B,
                    self._m,
                    self._μ_Q,
                    self._σ_Q,
                    self._Q_subseq_isconstant,
                    self._M_T,
                    self._Σ_T,
                    self._T_subseq_isconstant,
                    indices,
                    s,
                    self._excl_zone,
                    self._ignore_trivial,
                    n_threads,
                )
            core._merge_PI(self._P, P, self._I, I)

        if self._ignore_trivial:
            self._diags = np.random.permutation(
                range(self._excl_zone + 1, self._l)
            ).astype(np.int64)
        else:
            self._diags = np.random.permutation(
                range(-(self._l - 1), self._w)
            ).astype(np.int64)

        self._ndist_counts = core._count_diagonal_ndist(
            self._diags, self._m, self._n_A, self._n_B
        )
        if self._diags.shape[0] > 0:
            chunk_diags_ranges = core._get_array_ranges(
                self._ndist_counts, int(np.ceil(1.0 / percentage)), True
            )
            # Every update must process at least one diagonal
            self._chunk_diags_ranges = chunk_diags_ranges[
                chunk_diags_ranges[:, 1] > chunk_diags_ranges[:, 0]
            ]
        else:
            self._chunk_diags_ranges = np.empty((0, 2), dtype=np.int64)
        self._n_chunks = self._chunk_diags_ranges.shape[0]
        self._chunk_idx = 0
        self._n_processed = 0

        logger.debug(
            "SCRIMP with %d diagonals in %d chunk(s) (pre_scrimp=%s)",
            self._diags.shape[0],
            self._n_chunks,
            pre_scrimp,
        )

    def update(self):
        """
        Update the matrix profile and the matrix profile indices by computing
        additional new distances (limited by `percentage`) that make up the full
        distance matrix. Nothing happens once all diagonals have been processed.

        Parameters
        ----------
        None

        Returns
        -------
        None
        """
        if self._chunk_idx < self._n_chunks:
            start_idx, stop_idx = self._chunk_diags_ranges[self._chunk_idx]
            with core._numba_threads(self._n_workers) as n_threads:
                diags_ranges = core._get_array_ranges(
                    self._ndist_counts[start_idx:stop_idx], n_threads, False
                )
                P, I = _scrimp(
                    self._T_A,
                    self._T_B,
                    self._m,
                    self._μ_Q,
                    self._σ_Q,
                    self._Q_subseq_isconstant,
                    self._M_T,
                    self._Σ_T,
                    self._T_subseq_isconstant,
                    self._diags[start_idx:stop_idx],
                    diags_ranges,
                    self._ignore_trivial,
                )

            core._merge_PI(self._P, P[0], self._I, I[0])
            core._merge_PI(self._PL, P[1], self._IL, I[1])
            core._merge_PI(self._PR, P[2], self._IR, I[2])

            self._chunk_idx += 1
            self._n_processed += stop_idx - start_idx
            logger.debug(
                "SCRIMP chunk %d/%d processed %d diagonal(s)",
                self._chunk_idx,
                self._n_chunks,
                stop_idx - start_idx,
            )

    def run(self, max_iter=None, time_limit=None):
        """
        Call `update` repeatedly

        Parameters
        ----------
        max_iter : int, default None
            The maximum number of updates. When `None`, there is no limit.

        time_limit : float, default None
            The time budget in seconds. No new update is started after the time
            budget has been spent. When `None`, there is no limit.

        Returns
        -------
        self : scrimp
            The `scrimp` object
        """
        start = time.perf_counter()
        n_iter = 0
        while not self.converged_:
            if max_iter is not None and n_iter >= max_iter:
                break
            if time_limit is not None and time.perf_counter() - start >= time_limit:
                break
            self.update()
            n_iter += 1

        logger.debug(
            "SCRIMP stopped after %d update(s) in %.3f seconds (converged=%s)",
            n_iter,
            time.perf_counter() - start,
            self.converged_,
        )

        return self

    @property
    def P_(self):
        """
        Get the updated matrix profile
        """
        return self._P.astype(np.float64)

    @property
    def I_(self):
        """
        Get the updated matrix profile indices
        """
        return self._I.astype(np.int64)

    @property
    def left_I_(self):
        """
        Get the updated left matrix profile indices
        """
        return self._IL.astype(np.int64)

    @property
    def right_I_(self):
        """
        Get the updated right matrix profile indices
        """
        return self._IR.astype(np.int64)

    @property
    def converged_(self):
        """
        `True` once every diagonal has been processed
        """
        return self._chunk_idx >= self._n_chunks

    @property
    def n_processed_(self):
        """
        The number of diagonals that have been processed
        """
        return self._n_processed

    @property
    def m(self):
        return self._m

    @property
    def excl_zone(self):
        return self._excl_zone

    @property
    def ignore_trivial(self):
        return self._ignore_trivial
