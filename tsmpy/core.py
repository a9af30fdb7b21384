# STUMPY
# Copyright 2019 TD Ameritrade. Released under the terms of the 3-Clause BSD license.  # noqa: E501
# STUMPY is a trademark of TD Ameritrade IP Company, Inc. All rights reserved.

import contextlib
import numbers
import warnings

import numba
import numpy as np
from numba import njit, prange
from scipy import fft

from . import config
from .errors import InvalidSeries, InvalidWindow, NumericInstability


def z_norm(a, axis=0, threshold=None):
    """
    Calculate the z-normalized input array `a` by subtracting the mean and
    dividing by the standard deviation along a given axis.

    Parameters
    ----------
    a : numpy.ndarray
        NumPy array

    axis : int, default 0
        NumPy array axis

    threshold : float, default None
        A non-nan std value being less than `threshold` will be replaced with 1.0.
        When `None`, `config.TSMPY_STDDEV_THRESHOLD` is used.

    Returns
    -------
    output : numpy.ndarray
        An array with z-normalized values computed along a specified axis.
    """
    if threshold is None:
        threshold = config.TSMPY_STDDEV_THRESHOLD

    std = np.std(a, axis, keepdims=True)
    std[np.less(std, threshold, where=~np.isnan(std))] = 1.0

    return (a - np.mean(a, axis, keepdims=True)) / std


def transpose_dataframe(df):
    """
    Check if the input is a column-wise pandas `DataFrame`. If `True`, return a
    transposed dataframe since tsmpy assumes that each row represents data from a
    different dimension while each column represents data from the same dimension.
    If `False`, return `df` unchanged. Pandas `Series` do not need to be transposed.

    Note that this function has zero dependency on Pandas (not even a soft dependency).

    Parameters
    ----------
    df : DataFrame
        pandas dataframe

    Returns
    -------
    output : df
        If `df` is a Pandas `DataFrame` then return `df.T`. Otherwise, return `df`
    """
    if type(df).__name__ == "DataFrame":
        return df.transpose()

    return df


def are_arrays_equal(a, b):
    """
    Check if two arrays are equal; first by comparing memory addresses,
    and secondly by their values.

    Parameters
    ----------
    a : numpy.ndarray
        NumPy array

    b : numpy.ndarray
        NumPy array

    Returns
    -------
    output : bool
        This is `True` if the arrays are equal and `False` otherwise.
    """
    if id(a) == id(b):
        return True

    if a.shape != b.shape:
        return False

    return bool(((a == b) | (np.isnan(a) & np.isnan(b))).all())


def are_distances_too_small(a, threshold=10e-6):
    """
    Check the distance values from a matrix profile.

    If the values are smaller than the threshold (i.e., less than 10e-6) then
    it could suggest that this is a self-join.

    Parameters
    ----------
    a : numpy.ndarray
        NumPy array

    threshold : float, default 10e-6
        Minimum value in which to compare the matrix profile to

    Returns
    -------
    output : bool
        This is `True` if the matrix profile distances are all below the
        threshold and `False` if they are all above the threshold.
    """
    if a.size == 0:
        return False

    if a.mean() < threshold or np.all(a < threshold):
        return True

    return False


def _preprocess(T, copy=True, name="T"):
    """
    Creates a copy of the time series when `copy` is True, transposes all dataframes,
    converts to a `numpy.ndarray` of `np.float64` and checks that the values are
    numeric

    Parameters
    ----------
    T : numpy.ndarray
        Time series or sequence

    copy : bool, default True
        A boolean value that indicates whether the process should be done on
        input `T` (False) or its copy (True).

    name : str, default "T"
        The name of the input that is used in error messages

    Returns
    -------
    T : numpy.ndarray
        Modified time series

    Raises
    ------
    InvalidSeries
        If `T` is not numeric, is empty, or has more than two dimensions
    """
    if copy and hasattr(T, "copy"):
        T = T.copy()

    T = transpose_dataframe(T)

    try:
        T = np.asarray(T)
    except (TypeError, ValueError) as err:
        raise InvalidSeries(f"`{name}` could not be converted to an array") from err

    if (
        T.dtype == np.bool_
        or not np.issubdtype(T.dtype, np.number)
        or np.issubdtype(T.dtype, np.complexfloating)
    ):
        msg = f"`{name}` must contain real numbers but found dtype {T.dtype}"
        raise InvalidSeries(msg)

    T = T.astype(np.float64, copy=False)

    if T.ndim == 0 or T.ndim > 2:
        raise InvalidSeries(f"`{name}` is {T.ndim}-dimensional and must be 1 or 2-D")

    if T.size == 0:
        raise InvalidSeries(f"`{name}` is empty")

    return T


def check_univariate(T, name="T"):
    """
    Check that `T` is one-dimensional. A two-dimensional `T` with a single row
    (e.g., a single column `DataFrame`) is flattened.

    Parameters
    ----------
    T : numpy.ndarray
        Time series or sequence

    name : str, default "T"
        The name of the input that is used in error messages

    Returns
    -------
    T : numpy.ndarray
        A one-dimensional time series
    """
    if T.ndim == 2 and T.shape[0] == 1:
        T = T.flatten()

    if T.ndim != 1:
        msg = f"`{name}` is {T.ndim}-dimensional and must be 1-dimensional. "
        msg += "For multidimensional time series use `tsmpy.mstamp`"
        raise InvalidSeries(msg)

    return T


def get_excl_zone(m, exclusion_zone=None):
    """
    Get the half width of the exclusion zone for a self-join

    Parameters
    ----------
    m : int
        Window size

    exclusion_zone : float, default None
        The exclusion zone expressed as a fraction of the window size. When `None`,
        `config.TSMPY_EXCL_ZONE` is used.

    Returns
    -------
    excl_zone : int
        The half width of the exclusion zone, `round(exclusion_zone * m)`. Note that
        ties are rounded to the nearest even integer.
    """
    if exclusion_zone is None:
        exclusion_zone = config.TSMPY_EXCL_ZONE

    return int(np.round(exclusion_zone * m))


def check_window_size(m, max_size=None, n=None, excl_zone=None):
    """
    Check the window size and ensure that it is an integer greater than or equal to
    two and, if ``max_size`` is provided, ensure that the window size is less than or
    equal to the ``max_size``. Furthermore, if ``n`` is provided, then a self-join is
    assumed and it checks whether all subsequences have at least one non-trivial
    neighbor.

    Parameters
    ----------
    m : int
        Window size

    max_size : int, default None
        The maximum window size allowed

    n : int, default None
        The length of the time series in the case of a self-join.
        ``n`` should not be supplied (or set to ``None``) in the case of an AB-join.

    excl_zone : int, default None
        The half width of the exclusion zone of the self-join. When ``None``, this
        is computed with ``get_excl_zone``.

    Returns
    -------
    None

    Raises
    ------
    InvalidWindow
        If the window size is not an integer, is smaller than two, or is larger than
        ``max_size``
    """
    if isinstance(m, bool) or not isinstance(m, numbers.Integral):
        raise InvalidWindow(f"The window size must be an integer but found {m!r}")

    if m < 2:
        raise InvalidWindow(
            "All window sizes must be greater than or equal to two. A window size of "
            "one produces a standard deviation of zero for every subsequence."
        )

    if max_size is not None and m > max_size:
        raise InvalidWindow(f"The window size must be less than or equal to {max_size}")

    if n is not None:
        if excl_zone is None:
            excl_zone = get_excl_zone(m)

        # The central-most subsequence has the closest farthest neighbor, which is
        # located `l // 2` index positions away
        l = n - m + 1
        if l // 2 <= excl_zone:
            msg = (
                f"The window size, 'm = {m}', may be too large and could lead to "
                + "meaningless results. Consider reducing 'm' where necessary"
            )
            warnings.warn(msg)


def check_series_length(T, m, name="T"):
    """
    Check that the time series is at least two windows long

    Parameters
    ----------
    T : numpy.ndarray
        Time series or sequence. The length is taken from the last axis.

    m : int
        Window size

    name : str, default "T"
        The name of the input that is used in error messages

    Returns
    -------
    None

    Raises
    ------
    InvalidSeries
        If `T` is shorter than `2 * m`
    """
    if T.shape[-1] < 2 * m:
        msg = f"`{name}` has length {T.shape[-1]} and is too short relative to the "
        msg += f"window size, 'm = {m}'. At least {2 * m} values are required."
        raise InvalidSeries(msg)


def check_ignore_trivial(T_A, T_B, ignore_trivial):
    """
    Check inputs and verify the appropriateness for self-joins vs AB-joins and
    provides relevant warnings.

    Parameters
    ----------
    T_A : numpy.ndarray
        The time series or sequence for which to compute the matrix profile

    T_B : numpy.ndarray
        The time series or sequence that will be used to annotate T_A

    ignore_trivial : bool
        Set to `True` if this is a self-join. Otherwise, for AB-join, set this
        to `False`.

    Returns
    -------
    ignore_trivial : bool
        The (corrected) ignore_trivial value
    """
    if ignore_trivial is False and are_arrays_equal(T_A, T_B):
        msg = "Arrays T_A, T_B are equal, which implies a self-join. "
        msg += "Try setting `ignore_trivial = True`."
        warnings.warn(msg)

    if ignore_trivial and are_arrays_equal(T_A, T_B) is False:
        msg = "Arrays T_A, T_B are not equal, which implies an AB-join. "
        msg += "`ignore_trivial` has been automatically set to `False`."
        warnings.warn(msg)
        ignore_trivial = False

    return ignore_trivial


def _preprocess_join(T_A, m, T_B=None, ignore_trivial=True, excl_zone=None):
    """
    Validate the inputs of a univariate self-join or AB-join

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
        The half width of the exclusion zone. When `None`, `get_excl_zone(m)` is used.

    Returns
    -------
    T_A : numpy.ndarray
        A 1-D `np.float64` copy of `T_A`

    T_B : numpy.ndarray
        A 1-D `np.float64` copy of `T_B` (the same object as `T_A` when `T_B` is
        `None`)

    ignore_trivial : bool
        The (corrected) ignore_trivial value

    excl_zone : int
        The half width of the exclusion zone

    Raises
    ------
    InvalidWindow
        If `m` is not an integer, is smaller than two, or is not smaller than the
        length of both time series

    InvalidSeries
        If a time series is not numeric, is not 1-D, or is shorter than `2 * m`
    """
    T_A = check_univariate(_preprocess(T_A, name="T_A"), name="T_A")
    if T_B is None:
        T_B = T_A
        ignore_trivial = True
    else:
        T_B = check_univariate(_preprocess(T_B, name="T_B"), name="T_B")
        ignore_trivial = check_ignore_trivial(T_A, T_B, ignore_trivial)

    n_A = T_A.shape[0]
    n_B = T_B.shape[0]
    check_window_size(
        m,
        max_size=min(n_A, n_B) - 1,
        n=n_A if ignore_trivial else None,
        excl_zone=excl_zone,
    )
    if excl_zone is None:
        excl_zone = get_excl_zone(m)

    check_series_length(T_A, m, name="T_A")
    check_series_length(T_B, m, name="T_B")

    return T_A, T_B, ignore_trivial, excl_zone


def _fft_len(n, m):
    """
    The transform length used for the linear convolution of a length `m` query with
    a length `n` time series
    """
    return fft.next_fast_len(n + m - 1, real=True)


def _rfft_T(T, m):
    """
    Compute the real FFT of `T` once so that it can be reused for every query of
    length `m` (see `sliding_dot_product`)

    Parameters
    ----------
    T : numpy.ndarray
        Time series or sequence

    m : int
        Window size

    Returns
    -------
    T_fft : numpy.ndarray
        The zero padded real FFT of `T`
    """
    return fft.rfft(T, _fft_len(T.shape[-1], m), axis=-1)


@njit(fastmath=config.TSMPY_FASTMATH_FLAGS)
def _sliding_dot_product(Q, T):
    """
    A Numba JIT-compiled implementation of the sliding window dot product.

    Parameters
    ----------
    Q : numpy.ndarray
        Query array or subsequence

    T : numpy.ndarray
        Time series or sequence

    Returns
    -------
    out : numpy.ndarray
        Sliding dot product between `Q` and `T`.
    """
    m = Q.shape[0]
    l = T.shape[0] - m + 1
    out = np.empty(l)
    for i in range(l):
        out[i] = np.dot(Q, T[i : i + m])

    return out


def sliding_dot_product(Q, T, T_fft=None):
    """
    Use FFT convolution to calculate the sliding window dot product.

    Parameters
    ----------
    Q : numpy.ndarray
        Query array or subsequence

    T : numpy.ndarray
        Time series or sequence

    T_fft : numpy.ndarray, default None
        The precomputed output of `_rfft_T(T, len(Q))`. It is computed when `None`.

    Returns
    -------
    output : numpy.ndarray
        Sliding dot product between `Q` and `T`.

    Notes
    -----
    `DOI: 10.1109/ICDM.2016.0179 \
    <https://www.cs.ucr.edu/~eamonn/PID4481997_extend_Matrix%20Profile_I.pdf>`__

    See Table I, Figure 4

    Both inputs are zero padded to the next efficient transform length that is
    at least `n + m - 1` so that the circular convolution equals the linear one.
    Following the inverse FFT, only cells [m-1:n] contain valid dot products.
    """
    n = T.shape[0]
    m = Q.shape[0]
    nfft = _fft_len(n, m)
    if T_fft is None:
        T_fft = fft.rfft(T, nfft)
    Qr = np.flipud(Q)  # Reverse/flip Q
    QT = fft.irfft(fft.rfft(Qr, nfft) * T_fft, nfft)

    return QT[m - 1 : n]


def rolling_isfinite(a, w):
    """
    Determine if all elements in each rolling window are finite for 1-D and 2-D arrays

    Parameters
    ----------
    a : numpy.ndarray
        The input array

    w : int
        The length of the rolling window

    Returns
    -------
    output : numpy.ndarray
        A boolean array of length `a.shape[-1] - w + 1` that records whether each
        rolling window subsequence contain all finite values
    """
    a_isnotfinite = (~np.isfinite(a)).astype(np.int64)
    zeros = np.zeros(a.shape[:-1] + (1,), dtype=np.int64)
    cumsum = np.cumsum(np.concatenate([zeros, a_isnotfinite], axis=-1), axis=-1)

    return (cumsum[..., w:] - cumsum[..., :-w]) == 0


@njit(parallel=True, fastmath=config.TSMPY_FASTMATH_FLAGS)
def _rolling_isconstant(a, w, threshold):
    """
    Compute the rolling isconstant for 1-D array.

    This is accomplished by comparing the min and max within each window and
    assigning `True` when the min and max are equal and `False` otherwise. A window
    whose (population) standard deviation is below `threshold` is also considered
    constant since its z-normalization is dominated by rounding errors. If a
    subsequence contains at least one NaN, then the subsequence is not constant.

    Parameters
    ----------
    a : numpy.ndarray
        The input array

    w : int
        The rolling window size

    threshold : float
        The standard deviation below which a window is considered constant

    Returns
    -------
    output : numpy.ndarray
        Rolling window isconstant.
    """
    l = a.shape[0] - w + 1
    out = np.empty(l, dtype=np.bool_)
    for i in prange(l):
        out[i] = np.ptp(a[i : i + w]) == 0 or np.std(a[i : i + w]) < threshold

    return out


def rolling_isconstant(a, w, threshold=None):
    """
    Compute the rolling isconstant for 1-D and 2-D arrays (rolled along the last axis).

    Parameters
    ----------
    a : numpy.ndarray
        The input array

    w : int
        The rolling window size

    threshold : float, default None
        A window with a standard deviation below `threshold` is constant. When
        `None`, `config.TSMPY_STDDEV_THRESHOLD` is used.

    Returns
    -------
    a_subseq_isconstant : numpy.ndarray
        Rolling window isconstant
    """
    if threshold is None:
        threshold = config.TSMPY_STDDEV_THRESHOLD

    a = np.asarray(a, dtype=np.float64)
    if a.ndim == 1:
        return _rolling_isconstant(a, w, threshold)

    return np.apply_along_axis(
        lambda a_row, w: _rolling_isconstant(a_row, w, threshold),
        axis=a.ndim - 1,
        arr=a,
        w=w,
    )


def compute_mean_std(T, m):
    """
    Compute the sliding mean and standard deviation for the array `T` with
    a window size of `m`

    Parameters
    ----------
    T : numpy.ndarray
        Time series or sequence. A 2-D array is rolled along its last axis.

    m : int
        Window size

    Returns
    -------
    M_T : numpy.ndarray
        Sliding mean. All nan values are replaced with np.inf

    Σ_T : numpy.ndarray
        Sliding (population) standard deviation. Subsequences that contain a
        `np.nan`/`np.inf` have a standard deviation of zero.

    Raises
    ------
    InvalidWindow
        If `m` is smaller than two or larger than the length of `T`

    Notes
    -----
    `DOI: 10.1109/ICDM.2016.0179 \
    <https://www.cs.ucr.edu/~eamonn/PID4481997_extend_Matrix%20Profile_I.pdf>`__

    See Table II

    The running sums of `T` and `T ** 2` suffer from catastrophic cancellation when
    the values in `T` have a large offset. Therefore, the (finite) mean of `T` is
    subtracted and `T` is scaled to unit variance before the cumulative sums are
    taken and the scale is restored afterwards. The sample variance is corrected by
    the factor `(m - 1) / m` to obtain the population variance.
    """
    T = np.asarray(T, dtype=np.float64)
    if T.ndim > 2:
        raise InvalidSeries("T has to be one or two dimensional!")

    check_window_size(m, max_size=T.shape[-1])

    T_isfinite = np.isfinite(T)
    T_subseq_isfinite = rolling_isfinite(T, m)
    count = np.maximum(T_isfinite.sum(axis=-1, keepdims=True), 1)

    X = np.where(T_isfinite, T, 0.0)
    offset = X.sum(axis=-1, keepdims=True) / count
    X = np.where(T_isfinite, X - offset, 0.0)
    scale = np.sqrt(np.square(X).sum(axis=-1, keepdims=True) / count)
    scale[scale == 0] = 1.0
    X = X / scale

    zeros = np.zeros(T.shape[:-1] + (1,))
    X_cumsum = np.cumsum(np.concatenate([zeros, X], axis=-1), axis=-1)
    X_squared_cumsum = np.cumsum(np.concatenate([zeros, X * X], axis=-1), axis=-1)
    X_sum = X_cumsum[..., m:] - X_cumsum[..., :-m]
    X_squared_sum = X_squared_cumsum[..., m:] - X_squared_cumsum[..., :-m]

    M_T = X_sum / m
    var = (X_squared_sum - X_sum * X_sum / m) / (m - 1)  # Sample variance
    var = var * ((m - 1) / m)  # Population variance
    var[var < 0] = 0.0

    M_T = M_T * scale + offset
    Σ_T = np.sqrt(var) * scale

    M_T[~T_subseq_isfinite] = np.inf
    Σ_T[~T_subseq_isfinite] = 0.0

    return M_T, Σ_T


def _finite_mean(T):
    """
    Compute the mean of the finite values of `T` along its last axis (keepdims)
    """
    T_isfinite = np.isfinite(T)
    count = np.maximum(T_isfinite.sum(axis=-1, keepdims=True), 1)

    return np.where(T_isfinite, T, 0.0).sum(axis=-1, keepdims=True) / count


def _center(T):
    """
    Subtract the mean of the finite values from `T`. Since the z-normalized distance
    does not depend on the offset of a time series, this only limits the loss of
    precision in the dot products.

    Parameters
    ----------
    T : numpy.ndarray
        Time series or sequence. A 2-D array is centered row by row.

    Returns
    -------
    T : numpy.ndarray
        A centered copy of `T`
    """
    return T - _finite_mean(T)


def preprocess(T, m, copy=True, M_T=None, Σ_T=None, T_subseq_isconstant=None):
    """
    Creates a copy of the time series where all NaN and inf values
    are replaced with zero. Also computes mean and standard deviation
    for every subsequence. Every subsequence that contains at least
    one NaN or inf value, will have a mean of np.inf. For the standard
    deviation these values are ignored. Also, compute the rolling isconstant,
    a boolean array that indicates if a subsequence is constant (True) or not
    (False).

    Parameters
    ----------
    T : numpy.ndarray
        Time series or sequence

    m : int
        Window size

    copy : bool, default True
        A boolean value that indicates whether the process should be done on
        input `T` (False) or its copy (True).

    M_T : numpy.ndarray, default None
        Rolling mean

    Σ_T : numpy.ndarray, default None
        Rolling standard deviation

    T_subseq_isconstant : numpy.ndarray, default None
        A boolean array that indicates whether a subsequence in `T` is constant (True)

    Returns
    -------
    T : numpy.ndarray
        Modified time series

    M_T : numpy.ndarray
        Rolling mean

    Σ_T : numpy.ndarray
        Rolling standard deviation

    T_subseq_isconstant : numpy.ndarray
        A boolean array that indicates whether a subsequence in `T` is constant (True)
    """
    T = _preprocess(T, copy)
    check_window_size(m, max_size=T.shape[-1])

    T[np.isinf(T)] = np.nan

    if T_subseq_isconstant is None:
        T_subseq_isconstant = rolling_isconstant(T, m)
    if M_T is None or Σ_T is None:
        M_T, Σ_T = compute_mean_std(T, m)
    T[np.isnan(T)] = 0

    return T, M_T, Σ_T, T_subseq_isconstant


@njit(fastmath=config.TSMPY_FASTMATH_FLAGS)
def _calculate_squared_distance(
    m, QT, μ_Q, σ_Q, M_T, Σ_T, Q_subseq_isconstant, T_subseq_isconstant
):
    """
    Compute a single squared distance given all scalar inputs.

    Parameters
    ----------
    m : int
        Window size

    QT : float
        Pre-computed dot product between `Q` and the ith subsequence in `T`, each with
        length `m`

    μ_Q : float
        Mean of `Q`

    σ_Q : float
        Standard deviation of `Q`

    M_T : float
        Mean of the ith subsequence in `T`

    Σ_T : float
        Standard deviation of the ith subsequence in `T`

    Q_subseq_isconstant : bool
        A boolean value that indicates whether the subsequence `Q` is constant (True)

    T_subseq_isconstant : bool
        A boolean value that indicates whether the ith subsequence in `T` is
        constant (True)

    Returns
    -------
    D_squared : float
        Squared distance

    Notes
    -----
    `DOI: 10.1109/ICDM.2016.0179 \
    <https://www.cs.ucr.edu/~eamonn/PID4481997_extend_Matrix%20Profile_I.pdf>`__

    See Equation on Page 4

    Two constant subsequences are identical after z-normalization and have a
    distance of zero. A constant subsequence and a non-constant subsequence have
    a squared distance of `m`.
    """
    if np.isinf(M_T) or np.isinf(μ_Q):
        D_squared = np.inf
    elif Q_subseq_isconstant and T_subseq_isconstant:
        D_squared = 0.0
    elif Q_subseq_isconstant or T_subseq_isconstant:
        D_squared = float(m)
    else:
        denom = (σ_Q * Σ_T) * m
        denom = max(denom, config.TSMPY_DENOM_THRESHOLD)

        ρ = (QT - (μ_Q * M_T) * m) / denom
        ρ = min(ρ, 1.0)

        D_squared = np.abs(2 * m * (1.0 - ρ))

    return D_squared


@njit(fastmath=config.TSMPY_FASTMATH_FLAGS)
def _calculate_squared_distance_profile(
    m, QT, μ_Q, σ_Q, M_T, Σ_T, Q_subseq_isconstant, T_subseq_isconstant
):
    """
    Compute the squared distance profile

    Parameters
    ----------
    m : int
        Window size

    QT : numpy.ndarray
        Dot product between `Q` and `T`

    μ_Q : float
        Mean of `Q`

    σ_Q : float
        Standard deviation of `Q`

    M_T : numpy.ndarray
        Sliding mean of `T`

    Σ_T : numpy.ndarray
        Sliding standard deviation of `T`

    Q_subseq_isconstant : bool
        A boolean value that indicates whether the subsequence `Q` is constant (True)

    T_subseq_isconstant : numpy.ndarray
        A boolean array that indicates whether a subsequence in `T` is constant (True)

    Returns
    -------
    D_squared : numpy.ndarray
        Squared distance profile
    """
    k = M_T.shape[0]
    D_squared = np.empty(k, dtype=np.float64)

    for i in range(k):
        D_squared[i] = _calculate_squared_distance(
            m,
            QT[i],
            μ_Q,
            σ_Q,
            M_T[i],
            Σ_T[i],
            Q_subseq_isconstant,
            T_subseq_isconstant[i],
        )

    return D_squared


@njit(fastmath=config.TSMPY_FASTMATH_FLAGS)
def calculate_distance_profile(
    m, QT, μ_Q, σ_Q, M_T, Σ_T, Q_subseq_isconstant, T_subseq_isconstant
):
    """
    Compute the distance profile

    Parameters
    ----------
    m : int
        Window size

    QT : numpy.ndarray
        Dot product between `Q` and `T`

    μ_Q : float
        Mean of `Q`

    σ_Q : float
        Standard deviation of `Q`

    M_T : numpy.ndarray
        Sliding mean of `T`

    Σ_T : numpy.ndarray
        Sliding standard deviation of `T`

    Q_subseq_isconstant : bool
        A boolean value that indicates whether the subsequence `Q` is constant (True)

    T_subseq_isconstant : numpy.ndarray
        A boolean array that indicates whether a subsequence in `T` is constant (True)

    Returns
    -------
    output : numpy.ndarray
        Distance profile
    """
    D_squared = _calculate_squared_distance_profile(
        m, QT, μ_Q, σ_Q, M_T, Σ_T, Q_subseq_isconstant, T_subseq_isconstant
    )

    return np.sqrt(D_squared)


def mass(Q, T, M_T=None, Σ_T=None, T_subseq_isconstant=None, query_idx=None):
    """
    Compute the distance profile using the MASS algorithm

    Parameters
    ----------
    Q : numpy.ndarray
        Query array or subsequence.

    T : numpy.ndarray
        Time series or sequence.

    M_T : numpy.ndarray, default None
        Sliding mean of ``T``.

    Σ_T : numpy.ndarray, default None
        Sliding standard deviation of ``T``.

    T_subseq_isconstant : numpy.ndarray, default None
        A boolean array that indicates whether a subsequence in ``T`` is constant
        (``True``).

    query_idx : int, default None
        This is the index position along the time series, ``T``, where the query
        subsequence, ``Q``, is located. If ``query_idx`` is provided, the distance
        between ``Q`` and ``T[query_idx : query_idx + m]`` will automatically be set to
        zero.

    Returns
    -------
    distance_profile : numpy.ndarray
        Distance profile.

    Notes
    -----
    `DOI: 10.1109/ICDM.2016.0179 \
    <https://www.cs.ucr.edu/~eamonn/PID4481997_extend_Matrix%20Profile_I.pdf>`__

    See Table II

    Note: Unlike the Matrix Profile I paper, here, ``M_T``, ``Σ_T`` can be calculated
    once for all subsequences of ``T`` and passed in so the redundancy is removed

    Examples
    --------
    >>> import tsmpy
    >>> import numpy as np
    >>> tsmpy.mass(
    ...     np.array([-11.1, 23.4, 79.5, 1001.0]),
    ...     np.array([584., -11., 23., 79., 1001., 0., -19.]))
    array([3.18792463e+00, 1.11297393e-03, 3.23874018e+00, 3.34470195e+00])
    """
    Q = check_univariate(_preprocess(Q, name="Q"), name="Q")
    m = Q.shape[0]
    T = check_univariate(_preprocess(T), name="T")
    n = T.shape[0]

    check_window_size(m, max_size=n)

    distance_profile = np.empty(n - m + 1, dtype=np.float64)
    if np.any(~np.isfinite(Q)):
        distance_profile[:] = np.inf
        return distance_profile

    # `QT - m * μ_Q * M_T` cancels catastrophically for series with a large offset
    Q = Q - Q.mean()
    T_offset = _finite_mean(T)
    T = T - T_offset
    if M_T is not None:
        M_T = M_T - T_offset

    T, M_T, Σ_T, T_subseq_isconstant = preprocess(
        T,
        m,
        copy=False,
        M_T=M_T,
        Σ_T=Σ_T,
        T_subseq_isconstant=T_subseq_isconstant,
    )
    μ_Q, σ_Q = compute_mean_std(Q, m)
    Q_subseq_isconstant = rolling_isconstant(Q, m)

    QT = sliding_dot_product(Q, T)
    distance_profile[:] = calculate_distance_profile(
        m,
        QT,
        μ_Q[0],
        σ_Q[0],
        M_T,
        Σ_T,
        Q_subseq_isconstant[0],
        T_subseq_isconstant,
    )

    if query_idx is not None:
        distance_profile[int(query_idx)] = 0

    return distance_profile


@njit(fastmath=config.TSMPY_FASTMATH_FLAGS)
def _apply_exclusion_zone(a, idx, excl_zone, val):
    """
    Apply an exclusion zone to an array (inplace), i.e. set all values
    to `val` in a window around a given index.

    All values in a in [idx - excl_zone, idx + excl_zone] (endpoints included)
    will be set to `val`.

    Parameters
    ----------
    a : numpy.ndarray
        The array you want to apply the exclusion zone to

    idx : int
        The index around which the window should be centered

    excl_zone : int
        Size of the exclusion zone.

    val : float or bool
        The elements within the exclusion zone will be set to this value

    Returns
    -------
    None
    """
    zone_start = max(0, idx - excl_zone)
    zone_stop = min(a.shape[-1], idx + excl_zone)
    a[..., zone_start : zone_stop + 1] = val


def apply_exclusion_zone(a, idx, excl_zone, val):
    """
    Apply an exclusion zone to an array (inplace), i.e. set all values
    to `val` in a window around a given index.

    All values in a in [idx - excl_zone, idx + excl_zone] (endpoints included)
    will be set to `val`. This is a convenience wrapper around the Numba JIT-compiled
    `_apply_exclusion_zone` function.

    Parameters
    ----------
    a : numpy.ndarray
        The array you want to apply the exclusion zone to

    idx : int
        The index around which the window should be centered

    excl_zone : int
        Size of the exclusion zone.

    val : float or bool
        The elements within the exclusion zone will be set to this value

    Returns
    -------
    None
    """
    _apply_exclusion_zone(a, idx, excl_zone, val)


@njit(fastmath=config.TSMPY_FASTMATH_FLAGS)
def _count_diagonal_ndist(diags, m, n_A, n_B):
    """
    Count the number of distances that would be computed for each diagonal index
    referenced in `diags`

    Parameters
    ----------
    diags : numpy.ndarray
        The diagonal indices of interest

    m : int
        Window size

    n_A : int
        The length of time series `T_A`

    n_B : int
        The length of time series `T_B`

    Returns
    -------
    diag_ndist_counts : numpy.ndarray
        Counts of distances computed along each diagonal of interest
    """
    diag_ndist_counts = np.zeros(diags.shape[0], dtype=np.int64)
    for diag_idx in range(diags.shape[0]):
        k = diags[diag_idx]
        if k >= 0:
            diag_ndist_counts[diag_idx] = min(n_B - m + 1 - k, n_A - m + 1)
        else:
            diag_ndist_counts[diag_idx] = min(n_B - m + 1, n_A - m + 1 + k)

    return diag_ndist_counts


@njit(fastmath=config.TSMPY_FASTMATH_FLAGS)
def _get_array_ranges(a, n_chunks, truncate):
    """
    Given an input array, split it into `n_chunks`.

    Parameters
    ----------
    a : numpy.ndarray
        An array to be split

    n_chunks : int
        Number of chunks to split the array into

    truncate : bool
        If `truncate=True`, truncate the rows of `array_ranges` if there are not enough
        elements in `a` to be chunked up into `n_chunks`.  Otherwise, if
        `truncate=False`, all extra chunks will have their start and stop indices set
        to `a.shape[0]`.

    Returns
    -------
    array_ranges : numpy.ndarray
        A two column array where each row consists of a start and (exclusive) stop index
        pair. The first column contains the start indices and the second column
        contains the stop indices.
    """
    array_ranges = np.zeros((n_chunks, 2), dtype=np.int64)
    if a.shape[0] > 0 and n_chunks > 0:
        cumsum = a.cumsum() / a.sum()
        insert = np.linspace(0, 1, n_chunks + 1)[1:-1]
        idx = 1 + np.searchsorted(cumsum, insert)
        array_ranges[1:, 0] = idx  # Fill the first column with start indices
        array_ranges[:-1, 1] = idx  # Fill the second column with exclusive stop indices
        array_ranges[-1, 1] = a.shape[0]  # Handle the stop index for the final chunk

        diff_idx = np.diff(idx)
        if np.any(diff_idx == 0):
            row_truncation_idx = np.argmin(diff_idx) + 2
            array_ranges[row_truncation_idx:, 0] = a.shape[0]
            array_ranges[row_truncation_idx - 1 :, 1] = a.shape[0]
            if truncate:
                array_ranges = array_ranges[:row_truncation_idx]

    return array_ranges


@njit(fastmath=config.TSMPY_FASTMATH_FLAGS)
def _get_ranges(size, n_chunks):
    """
    Split `range(size)` evenly into `n_chunks` contiguous chunks. Chunks that would be
    empty have identical start and stop indices.

    Parameters
    ----------
    size : int
        The size or length of an array to chunk

    n_chunks : int
        Number of chunks to split the array into

    Returns
    -------
    array_ranges : numpy.ndarray
        A two column array where each row consists of a start and (exclusive) stop index
        pair.
    """
    bounds = np.linspace(0, size, n_chunks + 1).astype(np.int64)
    array_ranges = np.empty((n_chunks, 2), dtype=np.int64)
    array_ranges[:, 0] = bounds[:-1]
    array_ranges[:, 1] = bounds[1:]

    return array_ranges


@njit(fastmath=config.TSMPY_FASTMATH_FLAGS)
def _merge_PI(PA, PB, IA, IB):
    """
    Merge the matrix profile `PB` and its indices `IB` into `PA` and `IA` (inplace)
    by keeping the elementwise minimum. `PA` is only replaced when `PB` is strictly
    smaller so that, for equal distances, the neighbor already stored in `IA` wins.

    Parameters
    ----------
    PA : numpy.ndarray
        The matrix profile that is updated

    PB : numpy.ndarray
        The matrix profile that is merged into `PA`

    IA : numpy.ndarray
        The matrix profile indices that are updated

    IB : numpy.ndarray
        The matrix profile indices that correspond to `PB`

    Returns
    -------
    None
    """
    for i in range(PA.shape[0]):
        if PB[i] < PA[i]:
            PA[i] = PB[i]
            IA[i] = IB[i]


@contextlib.contextmanager
def _numba_threads(n_workers=None):
    """
    Temporarily set the number of threads used by Numba parallel regions

    Parameters
    ----------
    n_workers : int, default None
        The number of threads. It is clipped to `numba.config.NUMBA_NUM_THREADS`.
        When `None`, the current setting is kept.

    Yields
    ------
    n_threads : int
        The number of threads in use
    """
    previous = numba.get_num_threads()
    if n_workers is None:
        yield previous
        return

    n_threads = max(1, min(int(n_workers), numba.config.NUMBA_NUM_THREADS))
    numba.set_num_threads(n_threads)
    try:
        yield n_threads
    finally:
        numba.set_num_threads(previous)


def _check_P(P, threshold=config.EPS):
    """
    Check that a finished matrix profile only contains non-negative distances or
    `np.inf` and log a warning if the values are too small.

    Parameters
    ----------
    P : numpy.ndarray
        A matrix profile

    threshold : float, default config.EPS
        A distance threshold

    Returns
    -------
    None

    Raises
    ------
    NumericInstability
        If `P` contains `np.nan` or negative values
    """
    if np.any(np.isnan(P)):
        msg = f"The matrix profile contains {np.isnan(P).sum()} NaN value(s)"
        raise NumericInstability(msg)

    if np.any(P < 0):
        msg = f"The matrix profile contains {(P < 0).sum()} negative value(s)"
        raise NumericInstability(msg)

    if are_distances_too_small(P[np.isfinite(P)], threshold=threshold):
        msg = f"A large number of values in `P` are smaller than {threshold}.\n"
        msg += "For a self-join, try setting `ignore_trivial=True`."
        warnings.warn(msg)
