# STUMPY
# Copyright 2019 TD Ameritrade. Released under the terms of the 3-Clause BSD license.
# STUMPY is a trademark of TD Ameritrade IP Company, Inc. All rights reserved.


class TsmpyError(Exception):
    """
    Base class for all errors raised by `tsmpy`
    """


class InvalidWindow(TsmpyError, ValueError):
    """
    The window size is not usable for the given time series, i.e., it is smaller
    than two or it is not smaller than the length of the time series.
    """


class InvalidSeries(TsmpyError, ValueError):
    """
    The time series (or query series) cannot be processed, i.e., it is not numeric,
    it has the wrong number of dimensions, its dimensions do not match the other
    series, or it is too short for the requested window size.
    """


class NumericInstability(TsmpyError, ArithmeticError):
    """
    A finished matrix profile contains values that no valid input can produce (i.e.,
    `np.nan` or negative distances).
    """
