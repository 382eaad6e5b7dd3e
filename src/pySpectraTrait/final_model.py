# -*- coding: utf-8 -*-
"""
Created on Thu Oct  8 09:05:47 2026

@author: pySpectraTrait developers
"""

import logging
import os

from .exceptions import FitError
from .partial_least_squares_regression import pls_regression

logger = logging.getLogger(__name__)


class final_model_result():
    """Final PLSR model and its fitted values."""

    def __init__(self, plsr, dataset, n_components):
        """
        Collect fitted values and metrics of a calibrated PLSR model.

        Parameters
        ----------
        plsr : pls_regression
            A pls_regression instance after plsr_fit and plsr_cv.
        dataset : plsr_dataset
            The samples the model was fitted on.
        n_components : int
            The number of components used for the fitted values.

        Returns
        -------
        None.

        """
        self.model = plsr
        self.n_components = n_components
        self.trait = dataset.trait

        self.fitted = dataset.sample_info.copy()
        self.fitted['Fitted'] = plsr.plsr_y_c[n_components].to_numpy()
        self.fitted['Residuals'] = (self.fitted['Fitted'] -
                                    self.fitted[self.trait])

        self.r2 = plsr.plsr_metrics.at[('r2', 'cv'), n_components]
        self.rmsep = plsr.plsr_metrics.at[('rmse', 'cv'), n_components]
        self.coefficients = plsr.coefficients(n_components)

    def to_csv(self, folder):
        self.fitted.to_csv(os.path.join(folder, 'fitted_values.csv'))
        self.coefficients.to_csv(os.path.join(folder, 'coefficients.csv'),
                                 header=['coefficient'])


def fit_final_model(dataset, n_components, segments=30,
                    segment_type='interleaved', scale_std=False):
    """
    Fit the final PLSR model on all samples.

    The model is calibrated with n_components and validated by segmented
    cross-validation. With interleaved or consecutive segments, the result
    is deterministic.

    Parameters
    ----------
    dataset : plsr_dataset
        The samples used for modeling.
    n_components : int
        The number of components of the final model.
    segments : int, optional
        The number of cross-validation segments. The default is 30.
    segment_type : str, optional
        See cv_segments. The default is 'interleaved'.
    scale_std : bool, optional
        Scale the spectra to unit variance. The default is False.

    Raises
    ------
    FitError
        If the training sets of the cross-validation are too small for
        n_components.

    Returns
    -------
    final_model_result
        Fitted values, residuals (fitted - observed), cross-validated R2 and
        RMSEP and the model coefficients.

    """
    logger.info('Fitting final model with %d components and %d %s CV '
                'segments', n_components, segments, segment_type)
    plsr = pls_regression(dataset.spectra, dataset.y, scale_std=scale_std)
    plsr.plsr_fit(n_components)
    press = plsr.plsr_cv(max_components=n_components, segments=segments,
                         segment_type=segment_type)
    if len(press) < n_components:
        raise FitError(
            'Only {} components can be cross-validated with {} segments on '
            '{} samples, but the final model has {}.'.format(
                len(press), segments, len(dataset), n_components))
    result = final_model_result(plsr, dataset, n_components)
    logger.info('Final model: R2 (CV) = %.3f, RMSEP = %.3f', result.r2,
                result.rmsep)

    return result
