# -*- coding: utf-8 -*-
"""
Created on Wed Oct  7 18:40:02 2026

@author: pySpectraTrait developers
"""

import logging
import time

import numpy as np
import pandas as pd
from joblib import Parallel, delayed, cpu_count
from scipy.stats import ttest_ind

from .partial_least_squares_regression import pls_regression

logger = logging.getLogger(__name__)


def press_iteration(dataset, max_components=20, segments=5,
                    segment_type='random', subsample_fraction=0.7,
                    random_state=None):
    """
    Cross-validate a PLSR model on a random subsample of a dataset.

    Parameters
    ----------
    dataset : plsr_dataset
        The samples used for modeling.
    max_components : int, optional
        The upper limit of components. The default is 20.
    segments : int, optional
        The number of cross-validation segments. The default is 5.
    segment_type : str, optional
        See cv_segments. The default is 'random'.
    subsample_fraction : float, optional
        Fraction of the samples drawn without replacement. The default is
        0.7.
    random_state : None, int, numpy.random.SeedSequence or Generator
        Source for the subsample draw and random segments. The default is
        None.

    Returns
    -------
    Series
        The PRESS values, index is the number of components. May be shorter
        than max_components if the subsample is small.

    """
    rng = np.random.default_rng(random_state)
    n_sub = int(np.floor(subsample_fraction * len(dataset)))
    rows = np.sort(rng.choice(len(dataset), size=n_sub, replace=False))
    subsample = dataset.subset(rows)

    plsr = pls_regression(subsample.spectra, subsample.y)
    return plsr.plsr_cv(max_components=max_components, segments=segments,
                        segment_type=segment_type, random_state=rng)


def jackknife_press(dataset, max_components=20, iterations=50, segments=5,
                    segment_type='random', subsample_fraction=0.7, seed=None,
                    n_jobs=None):
    """
    Collect PRESS curves of repeated subsampled cross-validations.

    The iterations are independent of each other and are distributed over
    worker processes. Each iteration gets its own random generator spawned
    from seed, so the result for a given seed does not depend on n_jobs.

    Parameters
    ----------
    dataset : plsr_dataset
        The samples used for modeling.
    max_components : int, optional
        The upper limit of components. The default is 20.
    iterations : int, optional
        The number of subsamples. The default is 50.
    segments : int, optional
        The number of cross-validation segments. The default is 5.
    segment_type : str, optional
        See cv_segments. The default is 'random'.
    subsample_fraction : float, optional
        Fraction of the samples used in each iteration. The default is 0.7.
    seed : None or int, optional
        Seed of the random subsamples. The default is None, giving different
        results in every call.
    n_jobs : None or int, optional
        Number of worker processes. The default is None, meaning the number
        of CPUs minus one.

    Raises
    ------
    ValueError
        If iterations or subsample_fraction are out of range.

    Returns
    -------
    press : DataFrame
        The PRESS matrix in the shape (iterations, max_components). Index is
        the iteration, columns are the number of components. Entries are
        NaN where an iteration evaluated fewer components.

    """
    if iterations < 1:
        raise ValueError('iterations must be at least 1, but is {}.'.format(
            iterations))
    if not 0 < subsample_fraction <= 1:
        raise ValueError('subsample_fraction must be in (0, 1], but is '
                         '{}.'.format(subsample_fraction))
    if n_jobs is None:
        n_jobs = max(1, cpu_count() - 1)

    press = pd.DataFrame(
        np.nan, index=pd.RangeIndex(1, iterations+1, name='iteration'),
        columns=pd.Index(np.arange(1, max_components+1), name='n_components'))

    logger.info('Starting %d PRESS iterations with %d workers', iterations,
                n_jobs)
    start_time = time.perf_counter()
    child_seeds = np.random.SeedSequence(seed).spawn(iterations)
    results = Parallel(n_jobs=n_jobs, return_as='generator')(
        delayed(press_iteration)(
            dataset, max_components=max_components, segments=segments,
            segment_type=segment_type, subsample_fraction=subsample_fraction,
            random_state=curr_seed)
        for curr_seed in child_seeds)
    for ii, curr_press in enumerate(results, start=1):
        press.loc[ii, curr_press.index] = curr_press.to_numpy()
        logger.info('Iteration: %d', ii)
    logger.info('PRESS iterations finished after %.1f s',
                time.perf_counter() - start_time)

    return press


def press_long_format(press):
    """
    Melt a PRESS matrix into (n_components, press) pairs.

    Missing entries are dropped.
    """
    return press.melt(var_name='n_components',
                      value_name='press').dropna().reset_index(drop=True)


def press_ttests(press):
    """
    Compare the PRESS distributions of neighboring component numbers.

    For every number of components c, a two-sample t-test (Welch) between
    the PRESS values of c and c+1 components is performed. A small p-value
    means that adding one more component still changes the prediction
    error significantly.

    Parameters
    ----------
    press : DataFrame
        A PRESS matrix as returned by jackknife_press.

    Returns
    -------
    DataFrame
        Columns 'component', 'comparator' and 'p_value', one row for every
        c between 1 and max_components-1.
        The p-value is NaN where the t-test is undefined, e.g. for fewer
        than two PRESS values of c or c+1 components or zero variance. A
        warning is logged in this case.

    """
    press_long = press_long_format(press)
    max_components = int(press.columns.max())

    results = []
    for comp, comparator in zip(range(1, max_components),
                                range(2, max_components+1)):
        p_value = ttest_ind(
            press_long.loc[press_long['n_components'] == comp, 'press'],
            press_long.loc[press_long['n_components'] == comparator, 'press'],
            equal_var=False).pvalue
        results.append([comp, comparator, p_value])

    p_values = pd.DataFrame(results, columns=['component', 'comparator',
                                              'p_value'])
    undefined = p_values.loc[p_values['p_value'].isna(), 'component']
    if not undefined.empty:
        logger.warning('t-test undefined for components %s, p-value is NaN',
                       undefined.to_list())

    return p_values


def select_components(p_values, alpha=0.05):
    """
    Pick the number of components from the t-test results.

    The first number of components c is selected whose PRESS is not
    significantly different from that of c+1 components, i.e. the p-value
    is not smaller than alpha. This is one possible rule, the p-values
    should be inspected together with the PRESS box plot.

    Parameters
    ----------
    p_values : DataFrame
        As returned by press_ttests.
    alpha : float, optional
        The significance level. The default is 0.05.

    Raises
    ------
    ValueError
        If p_values is empty.

    Returns
    -------
    int
        The selected number of components. If all differences are
        significant, the largest tested number of components.

    """
    if p_values.empty:
        raise ValueError('No p-values given for component selection.')

    for curr_row in p_values.itertuples():
        # NaN (e.g. a single iteration) does not indicate an improvement
        if not curr_row.p_value < alpha:
            return int(curr_row.component)

    return int(p_values['comparator'].iloc[-1])
