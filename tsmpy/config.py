# STUMPY
# Copyright 2019 TD Ameritrade. Released under the terms of the 3-Clause BSD license.
# STUMPY is a trademark of TD Ameritrade IP Company, Inc. All rights reserved.

import warnings

import numpy as np

_TSMPY_DEFAULTS = {
    "TSMPY_EXCL_ZONE": 0.25,
    "TSMPY_PRESCRIMP_S_SIZE": 0.25,
    "TSMPY_SCRIMP_PERCENTAGE": 0.01,
    "TSMPY_DENOM_THRESHOLD": 1e-14,
    "TSMPY_STDDEV_THRESHOLD": 1e-7,
    "TSMPY_TEST_PRECISION": 5,
    "TSMPY_FASTMATH_FLAGS": {"nsz", "arcp", "contract", "afn", "reassoc"},
}

TSMPY_EXCL_ZONE = _TSMPY_DEFAULTS["TSMPY_EXCL_ZONE"]
TSMPY_PRESCRIMP_S_SIZE = _TSMPY_DEFAULTS["TSMPY_PRESCRIMP_S_SIZE"]
TSMPY_SCRIMP_PERCENTAGE = _TSMPY_DEFAULTS["TSMPY_SCRIMP_PERCENTAGE"]
TSMPY_DENOM_THRESHOLD = _TSMPY_DEFAULTS["TSMPY_DENOM_THRESHOLD"]
TSMPY_STDDEV_THRESHOLD = _TSMPY_DEFAULTS["TSMPY_STDDEV_THRESHOLD"]
TSMPY_TEST_PRECISION = _TSMPY_DEFAULTS["TSMPY_TEST_PRECISION"]
TSMPY_FASTMATH_FLAGS = _TSMPY_DEFAULTS["TSMPY_FASTMATH_FLAGS"]

# Machine tolerance shared by the whole process. It is not a tunable and
# `_reset` never touches it.
EPS = float(np.sqrt(np.finfo(np.float64).eps))


def _reset(var=None):
    """
    Reset the value of a configuration variable(s) to their default value(s)

    Parameters
    ----------
    var : str, default None
        The name of the configuration variable. If None, then all
        configuration variables are reset to their default values.

    Returns
    -------
    None
    """
    config_vars = [
        k for k, _ in globals().items() if k.isupper() and k.startswith("TSMPY")
    ]

    if var is None:
        for config_var in config_vars:
            globals()[config_var] = _TSMPY_DEFAULTS[config_var]
    elif var in config_vars:
        globals()[var] = _TSMPY_DEFAULTS[var]
    else:
        msg = "Configuration reset was skipped for unrecognized "
        msg += f"'_TSMPY_DEFAULT[{var}]'"
        warnings.warn(msg)

    return
