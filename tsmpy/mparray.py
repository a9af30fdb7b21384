# STUMPY
# Copyright 2019 TD Ameritrade. Released under the terms of the 3-Clause BSD license.
# STUMPY is a trademark of TD Ameritrade IP Company, Inc. All rights reserved.

import enum
import warnings
from dataclasses import dataclass, field, replace

import numpy as np


class ResultKind(enum.Enum):
    """
    The kinds of results that a matrix profile may be annotated with. The
    similarity-search engine only produces `MATRIX_PROFILE` and
    `MULTI_MATRIX_PROFILE` while the remaining kinds are attached by downstream
    pattern-mining consumers.
    """

    MATRIX_PROFILE = "matrix_profile"
    MULTI_MATRIX_PROFILE = "multi_matrix_profile"
    FLUSS = "fluss"
    CHAIN = "chain"
    MOTIF = "motif"
    MULTI_MOTIF = "multi_motif"
    ARC_COUNT = "arc_count"
    SALIENT = "salient"


def _readonly(a, dtype):
    a = np.array(a, dtype=dtype, copy=True)
    a.flags.writeable = False
    return a


@dataclass(frozen=True, eq=False)
class MatrixProfileResult:
    """
    An immutable matrix profile result

    Parameters
    ----------
    P_ : numpy.ndarray
        The matrix profile. For a multi-dimensional matrix profile, row `k - 1`
        holds the `k`-dimensional matrix profile.

    I_ : numpy.ndarray
        The matrix profile indices (`-1` when no neighbor was found)

    left_I_ : numpy.ndarray
        The left matrix profile indices (self-joins only, `-1` otherwise)

    right_I_ : numpy.ndarray
        The right matrix profile indices (self-joins only, `-1` otherwise)

    m : int
        Window size

    excl_zone : int
        The half width of the exclusion zone that was applied to a self-join

    algorithm : str
        The name of the algorithm that computed the matrix profile

    join : str, default "self"
        Either "self" for a self-join or "ab" for an AB-join

    converged : bool, default True
        Whether the matrix profile is exact. Only an interrupted `scrimp` run
        produces an approximate (`False`) matrix profile.

    kinds : tuple, default (ResultKind.MATRIX_PROFILE,)
        The history of `ResultKind` annotations with the current kind first
    """

    P_: np.ndarray
    I_: np.ndarray
    left_I_: np.ndarray
    right_I_: np.ndarray
    m: int
    excl_zone: int
    algorithm: str
    join: str = "self"
    converged: bool = True
    kinds: tuple = (ResultKind.MATRIX_PROFILE,)
    _data: tuple = field(default=(), repr=False)

    def __post_init__(self):
        # Arrays are copied so that the caller's buffers are never frozen
        object.__setattr__(self, "P_", _readonly(self.P_, np.float64))
        object.__setattr__(self, "I_", _readonly(self.I_, np.int64))
        object.__setattr__(self, "left_I_", _readonly(self.left_I_, np.int64))
        object.__setattr__(self, "right_I_", _readonly(self.right_I_, np.int64))
        object.__setattr__(self, "kinds", tuple(ResultKind(k) for k in self.kinds))
        if len(self.kinds) == 0:
            raise ValueError("A result must have at least one kind")
        if self.join not in ("self", "ab"):
            raise ValueError(f"`join` must be 'self' or 'ab' but found {self.join!r}")

    @property
    def kind(self):
        """
        The current `ResultKind`
        """
        return self.kinds[0]

    @property
    def data(self):
        """
        The raw time series attached with `with_data` (an empty tuple by default)
        """
        return self._data

    def with_data(self, *series):
        """
        Return a new result with the raw time series attached

        Parameters
        ----------
        *series : numpy.ndarray
            The time series (e.g., `T_A` followed by `T_B` for an AB-join)

        Returns
        -------
        out : MatrixProfileResult
            A copy of this result whose `data` are the (read-only) `series`
        """
        data = tuple(_readonly(T, np.float64) for T in series)
        if len(data) > 0:
            expected = self.P_.shape[-1] + self.m - 1
            if data[0].shape[-1] != expected:
                msg = f"The attached series has length {data[0].shape[-1]} but the "
                msg += f"matrix profile implies a length of {expected}"
                warnings.warn(msg)

        return replace(self, _data=data)

    def with_kind(self, kind):
        """
        Return a new result that is annotated with `kind`, which becomes the current
        kind
        """
        kind = ResultKind(kind)
        kinds = (kind,) + tuple(k for k in self.kinds if k != kind)

        return replace(self, kinds=kinds)

    def as_kind(self, kind):
        """
        Checked narrowing to a kind that this result has been annotated with

        Parameters
        ----------
        kind : ResultKind
            The requested kind

        Returns
        -------
        out : MatrixProfileResult
            A copy of this result where `kind` is the current kind. All other
            annotations are kept.

        Raises
        ------
        TypeError
            If the result has never been annotated with `kind`
        """
        kind = ResultKind(kind)
        if kind not in self.kinds:
            msg = f"This result is a {self.kind.name} and has never been a {kind.name}"
            raise TypeError(msg)

        return self.with_kind(kind)
