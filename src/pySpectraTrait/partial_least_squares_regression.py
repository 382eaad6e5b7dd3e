# -*- coding: utf-8 -*-
"""
Created on Fri Apr 14 14:50:48 2023

@author: pySpectraTrait developers
"""

import logging

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
from sklearn.cross_decomposition import PLSRegression
from sklearn.preprocessing import StandardScaler
from sklearn.metrics import mean_squared_error, r2_score

from .exceptions import FitError

logger = logging.getLogger(__name__)

SEGMENT_TYPES = ['random', 'interleaved', 'consecutive']


def cv_segments(n_samples, segments, segment_type='random',
                random_state=None):
    """
    Divide sample indices into segments for cross-validation.

    Parameters
    ----------
    n_samples : int
        The number of samples.
    segments : int
        The number of segments. Must be between 2 and n_samples.
    segment_type : str, optional
        'random' deals a random permutation of the samples out to the
        segments in turn, 'interleaved' puts sample i into segment
        i % segments, 'consecutive' uses contiguous blocks. The default is
        'random'.
    random_state : None, int or numpy.random.Generator, optional
        Source of randomness for segment_type 'random'. The default is None,
        resulting in different segments for every call.

    Raises
    ------
    ValueError
        If segment_type is unknown or segments is out of range.

    Returns
    -------
    list of ndarray
        The sample indices of each segment.

    """
    if segment_type not in SEGMENT_TYPES:
        raise ValueError('No valid segment_type given. Should be an element '
                         'of {}, but is \'{}\'.'.format(SEGMENT_TYPES,
                                                        segment_type))
    if not 2 <= segments <= n_samples:
        raise ValueError('segments must be between 2 and the number of '
                         'samples ({}), but is {}.'.format(n_samples,
                                                           segments))

    if segment_type == 'random':
        order = np.random.default_rng(random_state).permutation(n_samples)
        return [np.sort(order[ii::segments]) for ii in range(segments)]
    elif segment_type == 'interleaved':
        return [np.arange(ii, n_samples, segments) for ii in range(segments)]
    else:
        return np.array_split(np.arange(n_samples), segments)


class pls_regression():
    """Class for performing partial least squares regression."""

    def __init__(self, x, y, scale_std=False):
        """
        Store input data and initialize results DataFrames.

        The spectra are always mean centered, scaling to unit variance is
        optional.

        Parameters
        ----------
        x : ndarray or DataFrame
            Sample training data in the shape (n_samples, n_variables). If a
            DataFrame, the columns are used as variable names.
        y : ndarray or Series
            Target values in the shape (n_samples,).
        scale_std : bool, optional
            True means the data will be scaled to unit variance. Default is
            False.

        Raises
        ------
        ValueError
            If x and y contain a different number of samples or y has more
            than one target.
        FitError
            If less than two samples are given.

        Returns
        -------
        None.

        """
        if isinstance(x, pd.DataFrame):
            self.x_names = x.columns
        else:
            self.x_names = pd.Index(
                ['factor_{}'.format(ii) for ii in range(1, np.shape(x)[1]+1)])
        self.x_raw = np.asarray(x, dtype='float')
        self.y = np.asarray(y, dtype='float')
        if self.y.ndim == 2 and self.y.shape[1] == 1:
            self.y = self.y[:, 0]
        if self.y.ndim != 1:
            raise ValueError('Only a single target is supported, but y has '
                             'the shape {}.'.format(self.y.shape))
        self.n_samples, self.n_variables = self.x_raw.shape
        if len(self.y) != self.n_samples:
            raise ValueError(
                'Number of responses does not match number of samples. '
                'Number of responses is {} and sample number is {}.'.format(
                    len(self.y), self.n_samples))
        if self.n_samples < 2:
            raise FitError('At least two samples are needed for PLSR, but '
                           '{} were given.'.format(self.n_samples))
        self.scale_std = scale_std

        self.scaler = StandardScaler(with_std=self.scale_std)
        self.x = self.scaler.fit_transform(self.x_raw)

        metrics_index = pd.MultiIndex.from_product(
            [['r2', 'rmse', 'press'], ['c', 'cv']],
            names=['result_name', 'cal_or_crossval'])
        self.component_index = pd.Index([], name='n_components',
                                        dtype='int64')
        self.plsr_metrics = pd.DataFrame([], index=metrics_index,
                                         columns=self.component_index,
                                         dtype='float')
        self.plsr_y_c = pd.DataFrame([], index=range(self.n_samples))
        self.plsr_y_cv = pd.DataFrame([], index=range(self.n_samples))
        self.plsr_object = None
        self.segments = None

    def plsr_fit(self, max_components=20):
        """
        Calibrate a PLSR model on all samples.

        One NIPALS fit with max_components is done. Because later components
        do not change earlier ones, the fitted values for all smaller numbers
        of components are derived from the same fit.

        Parameters
        ----------
        max_components : int, optional
            The number of components of the model. The default is 20.

        Raises
        ------
        FitError
            If max_components exceeds the number of samples minus one or the
            number of variables, or the solver fails.

        Returns
        -------
        DataFrame
            The metrics ('r2', 'rmse', 'press') of the calibration ('c') and
            of a cross-validation ('cv') if already done. The DataFrame
            columns give the number of components.

        """
        upper_limit = min(self.n_samples - 1, self.n_variables)
        if not 1 <= max_components <= upper_limit:
            raise FitError(
                'Invalid number of components {}, must be between 1 and {} '
                'for {} samples with {} variables.'.format(
                    max_components, upper_limit, self.n_samples,
                    self.n_variables))

        self.plsr_object = self._fit_plsr(self.x, self.y, max_components)
        self.x_mean = self.x.mean(axis=0)
        self.y_mean = self.y.mean()
        y_c = component_predictions(self.plsr_object, self.x_mean,
                                    self.y_mean, self.x)

        self.plsr_y_c = pd.DataFrame(
            y_c, columns=pd.Index(np.arange(1, max_components+1),
                                  name='n_components'))
        self._store_metrics('c', y_c)

        return self.plsr_metrics

    def plsr_cv(self, max_components=20, segments=10, segment_type='random',
                random_state=None):
        """
        Cross-validate PLSR models with segmented cross-validation.

        For each segment, a model is fitted on the remaining samples and the
        samples in the segment are predicted for every number of components
        up to max_components. The prediction error sum of squares (PRESS) is
        the sum of the squared differences between these predictions and the
        target values.

        The number of components is reduced if a training set would be too
        small, so that every training set has at least one sample more than
        the number of components.

        Parameters
        ----------
        max_components : int, optional
            The upper limit of components. The default is 20.
        segments : int, optional
            The number of cross-validation segments. The default is 10.
        segment_type : str, optional
            'random', 'interleaved' or 'consecutive', see cv_segments. The
            default is 'random'.
        random_state : None, int or numpy.random.Generator, optional
            Used for random segments. The default is None.

        Raises
        ------
        FitError
            If there are fewer samples than segments, not even one component
            can be cross-validated or the solver fails.

        Returns
        -------
        Series
            The PRESS values, index is the number of components.

        """
        if segments > self.n_samples:
            raise FitError(
                'Too few samples ({}) for cross-validation with {} '
                'segments.'.format(self.n_samples, segments))
        self.segments = cv_segments(self.n_samples, segments,
                                    segment_type=segment_type,
                                    random_state=random_state)
        longest_segment = max(len(curr_seg) for curr_seg in self.segments)
        n_components = min(max_components,
                           self.n_samples - longest_segment - 1,
                           self.n_variables)
        if n_components < 1:
            raise FitError(
                'Too few samples ({}) for cross-validation with {} '
                'segments.'.format(self.n_samples, segments))
        if n_components < max_components:
            logger.warning('Reducing number of components to %d because of '
                           'the training set size', n_components)

        y_cv = np.empty((self.n_samples, n_components))
        all_samples = np.arange(self.n_samples)
        for curr_seg in self.segments:
            train = np.setdiff1d(all_samples, curr_seg)
            curr_model = self._fit_plsr(self.x[train], self.y[train],
                                        n_components)
            y_cv[curr_seg] = component_predictions(
                curr_model, self.x[train].mean(axis=0), self.y[train].mean(),
                self.x[curr_seg])

        self.plsr_y_cv = pd.DataFrame(
            y_cv, columns=pd.Index(np.arange(1, n_components+1),
                                   name='n_components'))
        self._store_metrics('cv', y_cv)

        return self.plsr_metrics.loc[('press', 'cv')].dropna()

    def predict(self, samples, n_components, scale=True):
        """
        Predict unknown sample target values.

        Parameters
        ----------
        samples : ndarray
            Sample data in the shape (n_samples, n_variables).
        n_components : int
            Number of components used in the PLSR model for the prediction.
        scale : bool, optional
            Defines if the sample data is scaled like the input data or not.
            If called from within the class, should be False. Default is True.

        Returns
        -------
        prediction : ndarray
            Predicted target values in the shape (n_samples,).

        """
        self._check_fitted(n_components)
        samples = np.asarray(samples, dtype='float')
        if scale:
            samples = self.scaler.transform(samples)

        return component_predictions(
            self.plsr_object, self.x_mean, self.y_mean,
            samples)[:, n_components-1]

    def coefficients(self, n_components):
        """
        Regression coefficients for the unscaled input data.

        Parameters
        ----------
        n_components : int
            Number of components used in the PLSR model.

        Returns
        -------
        Series
            The intercept followed by one coefficient per variable, so that
            prediction = intercept + x @ coefficients.

        """
        self._check_fitted(n_components)
        coefs = (self.plsr_object.x_rotations_[:, :n_components] @
                 self.plsr_object.y_loadings_[0, :n_components])
        if self.scaler.scale_ is not None:
            coefs = coefs / self.scaler.scale_
        offset = self.scaler.mean_ + self.x_mean * (
            1 if self.scaler.scale_ is None else self.scaler.scale_)
        intercept = self.y_mean - offset @ coefs

        return pd.Series(np.append(intercept, coefs),
                         index=np.append(['Intercept'], self.x_names))

    def generate_plots(self, plot_names, **kwargs):
        """
        Generate some basic plots of partial least squares regression results.

        Parameters
        ----------
        plot_names : list of str
            List of plots to be generated. Allowed entries are
            'r2_vs_comp' (coefficient of determination vs. number of
            components), 'rmse_vs_comp' (root mean squared error vs. number
            of components) and 'press_vs_comp' (PRESS vs. number of
            components).
        **kwargs :
            cv : boolean
                State if cross-validation data should be plotted, too.
                Default is True.
        Returns
        -------
        plots : list of matplotlib figures
            One figure per entry in plot_names.

        """
        plot_cv_data = kwargs.get('cv', True)
        y_labels = {'r2_vs_comp': ('r2', '$R^{2}$'),
                    'rmse_vs_comp': ('rmse', 'RMSE'),
                    'press_vs_comp': ('press', 'PRESS')}
        plots = []
        for curr_name in plot_names:
            if curr_name not in y_labels:
                raise ValueError('Unknown plot name \'{}\', allowed are '
                                 '{}.'.format(curr_name, list(y_labels)))
            metric, label = y_labels[curr_name]
            fig, ax = plt.subplots(figsize=(9, 5))
            ax.plot(self.plsr_metrics.loc[(metric, 'c')], linestyle='--',
                    marker='o', label='Calibration')
            if plot_cv_data:
                ax.plot(self.plsr_metrics.loc[(metric, 'cv')],
                        linestyle='--', marker='o', label='Cross-validation')
            ax.set_ylabel(label)
            ax.set_xlabel('Number of components')
            ax.legend()
            plots.append(fig)

        return plots

    def _fit_plsr(self, x, y, n_components):
        plsr_object = PLSRegression(n_components=n_components, scale=False)
        try:
            plsr_object.fit(x, y)
        except (ValueError, np.linalg.LinAlgError) as exc:
            raise FitError('PLSR fit with {} components on {} samples '
                           'failed: {}'.format(n_components, len(y),
                                               exc)) from exc
        return plsr_object

    def _check_fitted(self, n_components):
        if self.plsr_object is None:
            raise ValueError('No calibrated model present, call plsr_fit '
                             'first.')
        if not 1 <= n_components <= self.plsr_object.n_components:
            raise ValueError(
                'n_components must be between 1 and {}, but is {}.'.format(
                    self.plsr_object.n_components, n_components))

    def _store_metrics(self, cal_or_crossval, y_pred):
        comps = np.arange(1, y_pred.shape[1]+1)
        y_true = np.tile(self.y[:, np.newaxis], (1, len(comps)))
        press = np.sum((y_pred - y_true)**2, axis=0)

        self.component_index = pd.Index(
            np.arange(1, max(len(comps), len(self.component_index))+1),
            name='n_components')
        self.plsr_metrics = self.plsr_metrics.reindex(
            columns=self.component_index)
        for curr_name, curr_values in [
                ('r2', r2_score(y_true, y_pred, multioutput='raw_values')),
                ('rmse', np.sqrt(mean_squared_error(
                    y_true, y_pred, multioutput='raw_values'))),
                ('press', press)]:
            self.plsr_metrics.loc[(curr_name, cal_or_crossval), :] = np.nan
            self.plsr_metrics.loc[(curr_name, cal_or_crossval),
                                  comps] = curr_values


def component_predictions(plsr_object, x_mean, y_mean, x):
    """
    Predict target values for every number of components of a PLSR model.

    Parameters
    ----------
    plsr_object : sklearn.cross_decomposition.PLSRegression
        A fitted model with a single target and scale=False.
    x_mean : ndarray
        Mean of the training data the model was fitted on.
    y_mean : float
        Mean of the training targets.
    x : ndarray
        Sample data in the shape (n_samples, n_variables).

    Returns
    -------
    ndarray
        Predictions in the shape (n_samples, n_components). Column k holds
        the prediction with k+1 components.

    """
    scores = (x - x_mean) @ plsr_object.x_rotations_
    return y_mean + np.cumsum(scores * plsr_object.y_loadings_[0], axis=1)
