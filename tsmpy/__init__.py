# STUMPY
# Copyright 2019 TD Ameritrade. Released under the terms of the 3-Clause BSD license.
# STUMPY is a trademark of TD Ameritrade IP Company, Inc. All rights reserved.

import os.path
from importlib.metadata import distribution
from site import getsitepackages

from . import config  # noqa: F401
from .compute import compute_matrix_profile  # noqa: F401
from .core import compute_mean_std, get_excl_zone, mass, z_norm  # noqa: F401
from .errors import (  # noqa: F401
    InvalidSeries,
    InvalidWindow,
    NumericInstability,
    TsmpyError,
)
from .mparray import MatrixProfileResult, ResultKind  # noqa: F401
from .mstamp import mstamp  # noqa: F401
from .scrimp import prescrimp, scrimp  # noqa: F401
from .stamp import stamp  # noqa: F401
from .stomp import stomp  # noqa: F401

try:
    _dist = distribution("tsmpy")
    # Normalize case for Windows systems
    dist_loc = os.path.normcase(getsitepackages()[0])
    here = os.path.normcase(__file__)
    if not here.startswith(os.path.join(dist_loc, "tsmpy")):
        # not installed, but there is another version that *is*
        raise ModuleNotFoundError  # pragma: no cover
except ModuleNotFoundError:  # pragma: no cover
    __version__ = "Please install this project with setup.py"
else:  # pragma: no cover
    __version__ = _dist.version
