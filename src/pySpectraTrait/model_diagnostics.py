#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Created on Fri Oct  9 21:03:24 2026

@author: pySpectraTrait developers
"""

import numpy as np
import pandas as pd
from scipy.stats import rankdata, shapiro
from scipy.special import erfinv


def percentiles(data):
    # same as scipy.stats.percentileofscore with kind='mean' for each value
    data = np.asarray(data, dtype='float')
    return (rankdata(data) - 0.5) / len(data) * 100


def theo_residual_percentiles(residuals):
    # Calculation with the probit function,
    # see https://en.wikipedia.org/wiki/Probit
    return np.sqrt(2)*erfinv(2*percentiles(residuals)/100-1)


def residual_statistics(residuals):
    """
    Summarize the residuals of a model.

    Parameters
    ----------
    residuals : array_like
        The residuals (fitted - observed).

    Returns
    -------
    Series
        Number of residuals, mean, standard deviation, RMSE and the p-value
        of the Shapiro-Wilk test for normality. Keep in mind that the test
        fails in about 5 % of the cases also for normally distributed
        residuals at a significance level of 0.05.

    """
    residuals = np.asarray(residuals, dtype='float')
    shapiro_p = shapiro(residuals).pvalue if len(residuals) >= 3 else np.nan

    return pd.Series({'n': len(residuals),
                      'mean': residuals.mean(),
                      'std': residuals.std(ddof=1),
                      'rmse': np.sqrt(np.mean(residuals**2)),
                      'shapiro_p': shapiro_p})
