import numba
import naive
import numpy as np
import numpy.testing as npt
import pandas as pd
import pytest

from tsmpy import config, core
from tsmpy.errors import InvalidSeries, InvalidWindow, NumericInstability


def naive_rolling_window_dot_product(Q, T):
    window = len(Q)
    result = np.zeros(len(T) - window + 1)
    for i in range(len(result)):
        result[i] = np.dot(T[i : i + window], Q)
    return result


test_data = [
    (np.array([-1, 1, 2], dtype=np.float64), np.array(range(5), dtype=np.float64)),
    (
        np.array([9, 8100, -60], dtype=np.float64),
        np.array([584, -11, 23, 79, 1001, 0, -19], dtype=np.float64),
    ),
    (np.random.uniform(-1000, 1000, [8]), np.random.uniform(-1000, 1000, [64])),
]


def test_z_norm():
    T = np.random.uniform(-1000, 1000, [64])
    ref = naive.z_norm(T)
    comp = core.z_norm(T)
    npt.assert_almost_equal(ref, comp)

    T = naive.rolling_window(T, 8)
    ref = naive.z_norm(T, 1)
    comp = core.z_norm(T, 1)
    npt.assert_almost_equal(ref, comp)


def test_z_norm_constant():
    T = np.full(10, 3.0)
    npt.assert_almost_equal(np.zeros(10), core.z_norm(T))


def test_transpose_dataframe():
    df = pd.DataFrame(np.random.rand(10, 3))
    comp = core.transpose_dataframe(df)
    npt.assert_array_equal(df.to_numpy().T, np.asarray(comp))

    T = np.random.rand(3, 10)
    assert core.transpose_dataframe(T) is T


def test_are_arrays_equal():
    T = np.random.rand(10)
    assert core.are_arrays_equal(T, T)
    assert core.are_arrays_equal(T, T.copy())
    assert not core.are_arrays_equal(T, T[:-1])

    T_nan = T.copy()
    T_nan[3] = np.nan
    assert core.are_arrays_equal(T_nan, T_nan.copy())
    assert not core.are_arrays_equal(T, T_nan)


def test_are_distances_too_small():
    assert core.are_distances_too_small(np.full(10, 1e-9))
    assert not core.are_distances_too_small(np.random.uniform(1, 2, [10]))
    assert not core.are_distances_too_small(np.array([], dtype=np.float64))


def test_preprocess_int_input():
    comp = core._preprocess(np.arange(10))
    assert comp.dtype == np.float64
    npt.assert_array_equal(np.arange(10, dtype=np.float64), comp)


def test_preprocess_copy():
    T = np.random.rand(10)
    comp = core._preprocess(T)
    comp[0] = np.nan
    assert np.isfinite(T[0])


def test_preprocess_list_input():
    comp = core._preprocess([1, 2, 3.5])
    npt.assert_array_equal(np.array([1.0, 2.0, 3.5]), comp)


@pytest.mark.parametrize(
    "T",
    [
        np.array([True, False, True]),
        np.array(["a", "b", "c"]),
        np.array([1 + 1j, 2 + 0j]),
        np.array(1.0),
        np.random.rand(2, 3, 4),
        np.array([], dtype=np.float64),
    ],
)
def test_preprocess_invalid_series(T):
    with pytest.raises(InvalidSeries):
        core._preprocess(T)


def test_preprocess_dataframe():
    df = pd.DataFrame(np.random.rand(10, 3))
    comp = core._preprocess(df)
    assert comp.shape == (3, 10)
    npt.assert_array_equal(df.to_numpy().T, comp)


def test_check_univariate():
    T = np.random.rand(1, 10)
    comp = core.check_univariate(T)
    assert comp.ndim == 1
    npt.assert_array_equal(T[0], comp)

    with pytest.raises(InvalidSeries):
        core.check_univariate(np.random.rand(2, 10))


@pytest.mark.parametrize(
    "m, ref", [(3, 1), (4, 1), (6, 2), (10, 2), (14, 4), (20, 5), (50, 12)]
)
def test_get_excl_zone(m, ref):
    # Ties are rounded to the nearest even integer (e.g., 2.5 -> 2 and 1.5 -> 2)
    assert core.get_excl_zone(m) == ref


def test_get_excl_zone_fraction():
    assert core.get_excl_zone(10, 0.5) == 5
    assert core.get_excl_zone(10, 0.0) == 0


def test_check_window_size():
    for m in range(-1, 2):
        with pytest.raises(InvalidWindow):
            core.check_window_size(m)

    for m in [2.0, 3.5, "3", None, True]:
        with pytest.raises(InvalidWindow):
            core.check_window_size(m)

    core.check_window_size(np.int64(3))


def test_check_window_size_is_value_error():
    with pytest.raises(ValueError):
        core.check_window_size(1)


def test_check_max_window_size():
    for m in range(4, 7):
        with pytest.raises(InvalidWindow):
            core.check_window_size(m, max_size=3)


def test_check_window_size_excl_zone():
    # For `len(T) == 20` and `m == 14`, there are 7 subsequences and the exclusion
    # zone is round(14 / 4) = 4. The central subsequence (index 3) has no neighbor
    # outside of its exclusion zone.
    T = np.random.rand(20)
    m = 14

    with pytest.warns(UserWarning):
        core.check_window_size(m, max_size=len(T), n=len(T))


def test_check_series_length():
    core.check_series_length(np.random.rand(10), 5)
    with pytest.raises(InvalidSeries):
        core.check_series_length(np.random.rand(9), 5)
    with pytest.raises(InvalidSeries):
        core.check_series_length(np.random.rand(3, 9), 5)


def test_check_ignore_trivial():
    T = np.random.rand(10)

    with pytest.warns(UserWarning):
        assert core.check_ignore_trivial(T, T.copy(), False) is False

    with pytest.warns(UserWarning):
        assert core.check_ignore_trivial(T, np.random.rand(10), True) is False

    assert core.check_ignore_trivial(T, T, True) is True


def test_preprocess_join_self_join():
    T = np.random.rand(20)
    T_A, T_B, ignore_trivial, excl_zone = core._preprocess_join(T, 4)
    assert T_B is T_A
    assert ignore_trivial is True
    assert excl_zone == 1
    npt.assert_array_equal(T, T_A)


def test_preprocess_join_A_B_join():
    T_A = np.random.rand(20)
    T_B = np.random.rand(30)
    comp_T_A, comp_T_B, ignore_trivial, excl_zone = core._preprocess_join(
        T_A, 4, T_B, ignore_trivial=False, excl_zone=3
    )
    assert ignore_trivial is False
    assert excl_zone == 3
    npt.assert_array_equal(T_A, comp_T_A)
    npt.assert_array_equal(T_B, comp_T_B)


def test_preprocess_join_invalid():
    T = np.random.rand(20)

    with pytest.raises(InvalidWindow):
        core._preprocess_join(T, 1)

    with pytest.raises(InvalidWindow):
        core._preprocess_join(T, 20)

    with pytest.raises(InvalidWindow):
        core._preprocess_join(T, 10, np.random.rand(10), ignore_trivial=False)

    with pytest.raises(InvalidSeries):
        core._preprocess_join(T, 11)

    with pytest.raises(InvalidSeries):
        core._preprocess_join(np.random.rand(2, 20), 4)


@pytest.mark.parametrize("Q, T", test_data)
def test_njit_sliding_dot_product(Q, T):
    ref_mp = naive_rolling_window_dot_product(Q, T)
    comp_mp = core._sliding_dot_product(Q, T)
    npt.assert_almost_equal(ref_mp, comp_mp)


@pytest.mark.parametrize("Q, T", test_data)
def test_sliding_dot_product(Q, T):
    ref_mp = naive_rolling_window_dot_product(Q, T)
    comp_mp = core.sliding_dot_product(Q, T)
    npt.assert_almost_equal(ref_mp, comp_mp)


@pytest.mark.parametrize("Q, T", test_data)
def test_sliding_dot_product_precomputed_fft(Q, T):
    m = Q.shape[0]
    ref_mp = naive_rolling_window_dot_product(Q, T)
    comp_mp = core.sliding_dot_product(Q, T, core._rfft_T(T, m))
    npt.assert_almost_equal(ref_mp, comp_mp)


def test_rolling_isfinite():
    a = np.arange(12).astype(np.float64)
    w = 3

    a[1] = np.nan
    a[5] = np.inf
    a[7] = -np.inf

    ref = np.array([np.all(np.isfinite(a[i : i + w])) for i in range(10)])
    comp = core.rolling_isfinite(a, w)
    npt.assert_array_equal(ref, comp)


def test_rolling_isconstant():
    a = np.array([1, 1, 1, 2, 3, 3, 3, 3, np.nan, 5, 5, 5], dtype=np.float64)
    for w in range(2, 6):
        ref = naive.rolling_isconstant(a, w)
        comp = core.rolling_isconstant(a, w)
        npt.assert_array_equal(ref, comp)


def test_rolling_isconstant_2d():
    a = np.array(
        [[1, 1, 1, 2, 3, 3, 3, 3], [4, 4, 5, 5, 5, 6, 7, 7]], dtype=np.float64
    )
    w = 3
    comp = core.rolling_isconstant(a, w)
    for i in range(a.shape[0]):
        npt.assert_array_equal(naive.rolling_isconstant(a[i], w), comp[i])


def test_rolling_isconstant_near_constant():
    a = np.concatenate((np.random.rand(10), 5.0 + np.arange(10) * 1e-13))
    w = 4

    ref = naive.rolling_isconstant(a, w)
    comp = core.rolling_isconstant(a, w)
    npt.assert_array_equal(ref, comp)
    assert np.all(comp[10:])

    comp = core.rolling_isconstant(a, w, threshold=0.0)
    assert not np.any(comp[10:])


@pytest.mark.parametrize("Q, T", test_data)
def test_compute_mean_std(Q, T):
    m = Q.shape[0]

    ref_μ_Q, ref_σ_Q = naive.compute_mean_std(Q, m)
    ref_M_T, ref_Σ_T = naive.compute_mean_std(T, m)
    comp_μ_Q, comp_σ_Q = core.compute_mean_std(Q, m)
    comp_M_T, comp_Σ_T = core.compute_mean_std(T, m)

    npt.assert_almost_equal(ref_μ_Q, comp_μ_Q)
    npt.assert_almost_equal(ref_σ_Q, comp_σ_Q)
    npt.assert_almost_equal(ref_M_T, comp_M_T)
    npt.assert_almost_equal(ref_Σ_T, comp_Σ_T)


@pytest.mark.parametrize("Q, T", test_data)
def test_compute_mean_std_multidimensional(Q, T):
    m = Q.shape[0]

    T = np.array([T, T, T])
    ref_μ_Q, ref_σ_Q = naive.compute_mean_std(T[0], m)
    comp_μ_Q, comp_σ_Q = core.compute_mean_std(T, m)

    for i in range(T.shape[0]):
        npt.assert_almost_equal(ref_μ_Q, comp_μ_Q[i])
        npt.assert_almost_equal(ref_σ_Q, comp_σ_Q[i])


def test_compute_mean_std_non_finite():
    T = np.array([0, np.nan, 2, 3, 4, 5, 6, 7, np.inf, 9], dtype=np.float64)
    m = 3

    ref_M_T, ref_Σ_T = naive.compute_mean_std(T, m)
    comp_M_T, comp_Σ_T = core.compute_mean_std(T, m)

    npt.assert_almost_equal(ref_M_T, comp_M_T)
    npt.assert_almost_equal(ref_Σ_T, comp_Σ_T)
    assert np.all(np.isinf(comp_M_T[[0, 1, 6, 7]]))
    npt.assert_array_equal(np.zeros(4), comp_Σ_T[[0, 1, 6, 7]])


def test_compute_mean_std_catastrophic_cancellation():
    T = np.random.rand(64) + 1e8
    m = 5

    ref_M_T, ref_Σ_T = naive.compute_mean_std(T, m)
    comp_M_T, comp_Σ_T = core.compute_mean_std(T, m)

    npt.assert_almost_equal(ref_M_T, comp_M_T, config.TSMPY_TEST_PRECISION)
    npt.assert_almost_equal(ref_Σ_T, comp_Σ_T, config.TSMPY_TEST_PRECISION)


def test_mass_catastrophic_cancellation():
    T = np.random.RandomState(0).normal(0.0, 1.0, 500) + 1e8
    m = 50
    Q = T[100 : 100 + m]

    ref = naive.distance_profile(Q, T, m)
    comp = core.mass(Q, T)
    npt.assert_almost_equal(ref, comp, config.TSMPY_TEST_PRECISION)

    M_T, Σ_T = core.compute_mean_std(T, m)
    comp = core.mass(Q, T, M_T, Σ_T)
    npt.assert_almost_equal(ref, comp, config.TSMPY_TEST_PRECISION)

    # The z-normalized distance does not depend on the offset of `Q`
    comp = core.mass(Q - 1e8, T)
    npt.assert_almost_equal(ref, comp, config.TSMPY_TEST_PRECISION)


def test_compute_mean_std_constant():
    T = np.array([5, 5, 5, 5, 1, 2, 3], dtype=np.float64)
    M_T, Σ_T = core.compute_mean_std(T, 3)
    npt.assert_almost_equal(np.array([5, 5, 11 / 3, 8 / 3, 2]), M_T)
    npt.assert_almost_equal(np.zeros(2), Σ_T[:2])
    assert np.all(Σ_T >= 0.0)


def test_compute_mean_std_invalid_window():
    with pytest.raises(InvalidWindow):
        core.compute_mean_std(np.random.rand(10), 1)

    with pytest.raises(InvalidWindow):
        core.compute_mean_std(np.random.rand(10), 11)


def test_center():
    T = np.array([1, 2, np.nan, 3, np.inf], dtype=np.float64)
    comp = core._center(T)
    npt.assert_almost_equal(np.array([-1, 0, np.nan, 1, np.inf]), comp)

    T = np.array([[1, 2, 3], [10, 20, 30]], dtype=np.float64)
    comp = core._center(T)
    npt.assert_almost_equal(np.array([[-1, 0, 1], [-10, 0, 10]]), comp)


def test_preprocess():
    T = np.array([0, np.nan, 2, 3, 4, 5, 6, 7, np.inf, 9])
    m = 3

    ref_T = np.array([0, 0, 2, 3, 4, 5, 6, 7, 0, 9], dtype=float)
    ref_M_T, ref_Σ_T = naive.compute_mean_std(T, m)
    ref_T_subseq_isconstant = naive.rolling_isconstant(T, m)

    comp_T, comp_M_T, comp_Σ_T, comp_T_subseq_isconstant = core.preprocess(T, m)

    npt.assert_almost_equal(ref_T, comp_T)
    npt.assert_almost_equal(ref_M_T, comp_M_T)
    npt.assert_almost_equal(ref_Σ_T, comp_Σ_T)
    npt.assert_array_equal(ref_T_subseq_isconstant, comp_T_subseq_isconstant)

    # The input must be left untouched
    assert np.isnan(T[1])
    assert np.isinf(T[8])


@pytest.mark.parametrize("Q, T", test_data)
def test_calculate_squared_distance_profile(Q, T):
    m = Q.shape[0]
    ref = naive.distance_profile(Q, T, m) ** 2

    QT = core.sliding_dot_product(Q, T)
    μ_Q, σ_Q = core.compute_mean_std(Q, m)
    M_T, Σ_T = core.compute_mean_std(T, m)
    Q_subseq_isconstant = core.rolling_isconstant(Q, m)[0]
    T_subseq_isconstant = core.rolling_isconstant(T, m)
    comp = core._calculate_squared_distance_profile(
        m,
        QT,
        μ_Q[0],
        σ_Q[0],
        M_T,
        Σ_T,
        Q_subseq_isconstant,
        T_subseq_isconstant,
    )

    npt.assert_almost_equal(ref, comp, decimal=4)


@pytest.mark.parametrize("Q, T", test_data)
def test_calculate_distance_profile(Q, T):
    m = Q.shape[0]
    ref = naive.distance_profile(Q, T, m)

    QT = core.sliding_dot_product(Q, T)
    μ_Q, σ_Q = core.compute_mean_std(Q, m)
    M_T, Σ_T = core.compute_mean_std(T, m)
    Q_subseq_isconstant = core.rolling_isconstant(Q, m)[0]
    T_subseq_isconstant = core.rolling_isconstant(T, m)
    comp = core.calculate_distance_profile(
        m,
        QT,
        μ_Q[0],
        σ_Q[0],
        M_T,
        Σ_T,
        Q_subseq_isconstant,
        T_subseq_isconstant,
    )

    npt.assert_almost_equal(ref, comp)


def test_calculate_squared_distance_constant():
    m = 5
    QT = 0.0
    μ_Q = 1.0
    M_T = 2.0

    # Two constant subsequences
    D_squared = core._calculate_squared_distance(m, QT, μ_Q, 0.0, M_T, 0.0, True, True)
    assert D_squared == 0.0

    # One constant subsequence
    D_squared = core._calculate_squared_distance(
        m, QT, μ_Q, 0.0, M_T, 1.0, True, False
    )
    assert D_squared == m
    D_squared = core._calculate_squared_distance(
        m, QT, μ_Q, 1.0, M_T, 0.0, False, True
    )
    assert D_squared == m

    # A subsequence with a non-finite value
    D_squared = core._calculate_squared_distance(
        m, QT, μ_Q, 1.0, np.inf, 0.0, False, False
    )
    assert np.isinf(D_squared)


@pytest.mark.parametrize("Q, T", test_data)
def test_mass(Q, T):
    m = Q.shape[0]
    ref = naive.distance_profile(Q, T, m)
    comp = core.mass(Q, T)
    npt.assert_almost_equal(ref, comp)


@pytest.mark.parametrize("Q, T", test_data)
def test_mass_precomputed_mean_std(Q, T):
    m = Q.shape[0]
    ref = naive.distance_profile(Q, T, m)
    M_T, Σ_T = core.compute_mean_std(T, m)
    comp = core.mass(Q, T, M_T, Σ_T)
    npt.assert_almost_equal(ref, comp)


def test_mass_example():
    comp = core.mass(
        np.array([-11.1, 23.4, 79.5, 1001.0]),
        np.array([584.0, -11.0, 23.0, 79.0, 1001.0, 0.0, -19.0]),
    )
    ref = np.array([3.18792463e00, 1.11297393e-03, 3.23874018e00, 3.34470195e00])
    npt.assert_almost_equal(ref, comp)


def test_mass_query_idx():
    T = np.random.uniform(-1000, 1000, [64])
    m = 5
    comp = core.mass(T[10 : 10 + m], T, query_idx=10)
    assert comp[10] == 0.0


@pytest.mark.parametrize("Q, T", test_data)
def test_mass_Q_nan(Q, T):
    Q = Q.copy()
    Q[1] = np.nan
    m = Q.shape[0]

    ref = naive.distance_profile(Q, T, m)
    comp = core.mass(Q, T)

    assert np.all(np.isinf(comp))
    naive.replace_inf(ref)
    naive.replace_inf(comp)
    npt.assert_almost_equal(ref, comp)


@pytest.mark.parametrize("Q, T", test_data)
def test_mass_T_inf(Q, T):
    T = T.copy()
    T[1] = np.inf
    m = Q.shape[0]

    ref = naive.distance_profile(Q, T, m)
    comp = core.mass(Q, T)

    assert np.all(np.isinf(comp[: min(2, comp.shape[0])]))
    naive.replace_inf(ref)
    naive.replace_inf(comp)
    npt.assert_almost_equal(ref, comp)


def test_mass_constant_subsequences():
    Q = np.array([1.0, 1.0, 1.0])
    T = np.array([5, 5, 5, 1, 2, 3, 7, 7, 7], dtype=np.float64)
    m = Q.shape[0]

    ref = naive.distance_profile(Q, T, m)
    comp = core.mass(Q, T)

    npt.assert_almost_equal(ref, comp)
    assert comp[0] == 0.0
    assert comp[6] == 0.0
    npt.assert_almost_equal(np.sqrt(m), comp[3])


def test_mass_invalid():
    with pytest.raises(InvalidWindow):
        core.mass(np.random.rand(10), np.random.rand(5))

    with pytest.raises(InvalidWindow):
        core.mass(np.random.rand(1), np.random.rand(5))

    with pytest.raises(InvalidSeries):
        core.mass(np.random.rand(3), np.random.rand(2, 10))


def test_apply_exclusion_zone():
    T = np.array([0, 1, 2, 3, 4, 5, 6, 7, 8, 9], dtype=np.float64)
    ref = np.empty(T.shape, dtype=np.float64)
    comp = np.empty(T.shape, dtype=np.float64)
    exclusion_zone = 2

    for i in range(T.shape[0]):
        ref[:] = T[:]
        naive.apply_exclusion_zone(ref, i, exclusion_zone, np.inf)

        comp[:] = T[:]
        core.apply_exclusion_zone(comp, i, exclusion_zone, np.inf)

        naive.replace_inf(ref)
        naive.replace_inf(comp)
        npt.assert_array_equal(ref, comp)


def test_apply_exclusion_zone_bounds():
    a = np.zeros(10)
    core.apply_exclusion_zone(a, 4, 2, np.inf)
    npt.assert_array_equal(np.isinf(a), [0, 0, 1, 1, 1, 1, 1, 0, 0, 0])

    a = np.zeros(10)
    core.apply_exclusion_zone(a, 0, 2, np.inf)
    npt.assert_array_equal(np.isinf(a), [1, 1, 1, 0, 0, 0, 0, 0, 0, 0])

    a = np.zeros(10)
    core.apply_exclusion_zone(a, 9, 3, np.inf)
    npt.assert_array_equal(np.isinf(a), [0, 0, 0, 0, 0, 0, 1, 1, 1, 1])


def test_apply_exclusion_zone_multidimensional():
    T = np.array(
        [[0, 1, 2, 3, 4, 5, 6, 7, 8, 9], [0, 1, 2, 3, 4, 5, 6, 7, 8, 9]],
        dtype=np.float64,
    )
    ref = np.empty(T.shape, dtype=np.float64)
    comp = np.empty(T.shape, dtype=np.float64)
    exclusion_zone = 2

    for i in range(T.shape[1]):
        ref[:, :] = T[:, :]
        naive.apply_exclusion_zone(ref, i, exclusion_zone, np.inf)

        comp[:, :] = T[:, :]
        core.apply_exclusion_zone(comp, i, exclusion_zone, np.inf)

        naive.replace_inf(ref)
        naive.replace_inf(comp)
        npt.assert_array_equal(ref, comp)


def test_count_diagonal_ndist():
    for n_A in range(10, 15):
        for n_B in range(10, 15):
            for m in range(3, 6):
                diags = np.random.permutation(
                    range(-(n_A - m + 1) + 1, n_B - m + 1)
                ).astype(np.int64)
                ones_matrix = np.ones((n_A - m + 1, n_B - m + 1), dtype=np.int64)
                ref_ndist_counts = np.empty(len(diags))
                for i, diag in enumerate(diags):
                    ref_ndist_counts[i] = ones_matrix.diagonal(offset=diag).sum()

                comp_ndist_counts = core._count_diagonal_ndist(diags, m, n_A, n_B)

                npt.assert_almost_equal(ref_ndist_counts, comp_ndist_counts)


def test_get_array_ranges():
    x = np.array([3, 9, 2, 1, 5, 4, 7, 7, 8, 6], dtype=np.int64)
    for n_chunks in range(2, 5):
        ref = naive.get_array_ranges(x, n_chunks)

        cmp = core._get_array_ranges(x, n_chunks, False)
        npt.assert_almost_equal(ref, cmp)


def test_get_array_ranges_exhausted():
    x = np.array([3, 3, 3, 11, 11, 11], dtype=np.int64)
    n_chunks = 6

    ref = np.array([[0, 3], [3, 4], [4, 5], [5, 6], [6, 6], [6, 6]])

    cmp = core._get_array_ranges(x, n_chunks, False)
    npt.assert_almost_equal(ref, cmp)


def test_get_array_ranges_exhausted_truncated():
    x = np.array([3, 3, 3, 11, 11, 11], dtype=np.int64)
    n_chunks = 6

    ref = np.array([[0, 3], [3, 4], [4, 5], [5, 6]])

    cmp = core._get_array_ranges(x, n_chunks, True)
    npt.assert_almost_equal(ref, cmp)


def test_get_array_ranges_empty_array():
    x = np.array([], dtype=np.int64)
    n_chunks = 6

    ref = np.zeros((n_chunks, 2), dtype=np.int64)

    cmp = core._get_array_ranges(x, n_chunks, False)
    npt.assert_almost_equal(ref, cmp)


def test_get_ranges():
    ref = np.array([[0, 3], [3, 6]])
    size = 6
    n_chunks = 2
    cmp = core._get_ranges(size, n_chunks)
    npt.assert_almost_equal(ref, cmp)


def test_get_ranges_exhausted():
    ref = np.array([[0, 0], [0, 1], [1, 2], [2, 3], [3, 3], [3, 4], [4, 5], [5, 6]])
    size = 6
    n_chunks = 8
    cmp = core._get_ranges(size, n_chunks)
    npt.assert_almost_equal(ref, cmp)


def test_merge_PI():
    PA = np.array([1.0, 2.0, np.inf, 4.0])
    IA = np.array([10, 20, -1, 40])
    PB = np.array([0.5, 2.0, 3.0, np.inf])
    IB = np.array([11, 21, 31, -1])

    core._merge_PI(PA, PB, IA, IB)

    # For equal distances, the existing index wins
    npt.assert_almost_equal(np.array([0.5, 2.0, 3.0, 4.0]), PA)
    npt.assert_array_equal(np.array([11, 20, 31, 40]), IA)


def test_numba_threads():
    ref = numba.get_num_threads()

    with core._numba_threads(1) as n_threads:
        assert n_threads == 1
        assert numba.get_num_threads() == 1

    assert numba.get_num_threads() == ref

    with core._numba_threads(numba.config.NUMBA_NUM_THREADS + 10) as n_threads:
        assert n_threads == numba.config.NUMBA_NUM_THREADS

    with core._numba_threads(None) as n_threads:
        assert n_threads == ref

    assert numba.get_num_threads() == ref


def test_check_P():
    core._check_P(np.array([1.0, 2.0, np.inf]))

    with pytest.raises(NumericInstability):
        core._check_P(np.array([1.0, np.nan, 2.0]))

    with pytest.raises(NumericInstability):
        core._check_P(np.array([1.0, -1.0, 2.0]))

    with pytest.raises(ArithmeticError):
        core._check_P(np.array([np.nan]))

    with pytest.warns(UserWarning):
        core._check_P(np.full(10, 1e-10))
