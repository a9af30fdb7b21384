import numpy as np
import pytest

from tsmpy import config, core


def test_change_excl_zone():
    assert core.get_excl_zone(10) == 2

    config.TSMPY_EXCL_ZONE = 0.5
    assert core.get_excl_zone(10) == 5

    config._reset("TSMPY_EXCL_ZONE")
    assert core.get_excl_zone(10) == 2


def test_reset_one_var():
    ref = config.TSMPY_EXCL_ZONE

    config.TSMPY_EXCL_ZONE += 1
    config._reset("TSMPY_EXCL_ZONE")

    assert config.TSMPY_EXCL_ZONE == ref


def test_reset_all_vars():
    ref_excl_zone = config.TSMPY_EXCL_ZONE
    ref_s_size = config.TSMPY_PRESCRIMP_S_SIZE
    ref_percentage = config.TSMPY_SCRIMP_PERCENTAGE

    config.TSMPY_EXCL_ZONE += 1
    config.TSMPY_PRESCRIMP_S_SIZE /= 2
    config.TSMPY_SCRIMP_PERCENTAGE *= 10

    config._reset()
    assert config.TSMPY_EXCL_ZONE == ref_excl_zone
    assert config.TSMPY_PRESCRIMP_S_SIZE == ref_s_size
    assert config.TSMPY_SCRIMP_PERCENTAGE == ref_percentage


def test_reset_unrecognized_var():
    with pytest.warns(UserWarning, match="unrecognized"):
        config._reset("TSMPY_DOES_NOT_EXIST")


def test_eps():
    np.testing.assert_almost_equal(np.sqrt(np.finfo(np.float64).eps), config.EPS)

    config._reset()
    assert config.EPS == float(np.sqrt(np.finfo(np.float64).eps))
