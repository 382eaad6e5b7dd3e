# -*- coding: utf-8 -*-
"""
Created on Wed Oct 14 15:20:11 2026

@author: pySpectraTrait developers
"""

import os
import tempfile
import unittest

import numpy as np
import pandas as pd

from pySpectraTrait import FitError
from pySpectraTrait.dataset_assembly import assemble_plsr_dataset
from pySpectraTrait.final_model import fit_final_model
from synthetic_data import synthetic_raw_table


class TestFinalModel(unittest.TestCase):

    def setUp(self):
        raw = synthetic_raw_table(n_samples=60, start_wave=500, end_wave=560)
        self.dataset = assemble_plsr_dataset(raw, start_wave=500,
                                             end_wave=560)

    def test_deterministic(self):
        result_1 = fit_final_model(self.dataset, 4, segments=10)
        result_2 = fit_final_model(self.dataset, 4, segments=10)

        pd.testing.assert_frame_equal(result_1.fitted, result_2.fitted)
        self.assertEqual(result_1.r2, result_2.r2)
        self.assertEqual(result_1.rmsep, result_2.rmsep)

    def test_residuals(self):
        result = fit_final_model(self.dataset, 3, segments=10)
        fitted = result.fitted

        self.assertEqual(fitted.columns.to_list()[-2:],
                         ['Fitted', 'Residuals'])
        np.testing.assert_array_equal(
            fitted['Residuals'].to_numpy(),
            fitted['Fitted'].to_numpy() - fitted['LMA_gDW_m2'].to_numpy())
        np.testing.assert_array_equal(fitted['LMA_gDW_m2'], self.dataset.y)
        np.testing.assert_allclose(
            fitted['Fitted'], result.model.predict(self.dataset.x, 3))
        pd.testing.assert_index_equal(fitted.index,
                                      self.dataset.sample_info.index)

    def test_metrics(self):
        result = fit_final_model(self.dataset, 3, segments=10)

        self.assertEqual(result.n_components, 3)
        self.assertGreater(result.r2, 0.8)
        self.assertGreater(result.rmsep, 0)
        self.assertEqual(len(result.coefficients), 1 + 61)
        self.assertEqual(result.model.plsr_metrics.loc[('r2', 'cv')].size, 3)

    def test_to_csv(self):
        result = fit_final_model(self.dataset, 2, segments=6,
                                 segment_type='consecutive')
        with tempfile.TemporaryDirectory() as folder:
            result.to_csv(folder)
            fitted = pd.read_csv(os.path.join(folder, 'fitted_values.csv'),
                                 index_col=0)
            coefs = pd.read_csv(os.path.join(folder, 'coefficients.csv'),
                                index_col=0)
        self.assertEqual(len(fitted), 60)
        self.assertEqual(coefs.index[0], 'Intercept')

    def test_components_beyond_cv_limit(self):
        small = self.dataset.subset(np.arange(20))
        # longest segment has 5 samples, so only 14 components can be
        # cross-validated
        with self.assertRaises(FitError):
            fit_final_model(small, 15, segments=4,
                            segment_type='interleaved')

        result = fit_final_model(small, 14, segments=4,
                                 segment_type='interleaved')
        self.assertFalse(np.isnan(result.r2))
        self.assertFalse(np.isnan(result.rmsep))
