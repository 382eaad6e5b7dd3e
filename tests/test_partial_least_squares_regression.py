# -*- coding: utf-8 -*-
"""
Created on Mon Oct 12 14:02:10 2026

@author: pySpectraTrait developers
"""

import numpy as np
import unittest
from sklearn.cross_decomposition import PLSRegression

from pySpectraTrait import FitError
from pySpectraTrait.dataset_assembly import assemble_plsr_dataset
from pySpectraTrait.partial_least_squares_regression import (
    pls_regression, cv_segments)
from synthetic_data import synthetic_raw_table


class TestCvSegments(unittest.TestCase):

    def test_interleaved(self):
        segs = cv_segments(10, 3, segment_type='interleaved')
        self.assertEqual([curr_seg.tolist() for curr_seg in segs],
                         [[0, 3, 6, 9], [1, 4, 7], [2, 5, 8]])

    def test_consecutive(self):
        segs = cv_segments(10, 3, segment_type='consecutive')
        self.assertEqual([curr_seg.tolist() for curr_seg in segs],
                         [[0, 1, 2, 3], [4, 5, 6], [7, 8, 9]])

    def test_random(self):
        segs = cv_segments(23, 5, segment_type='random', random_state=42)
        self.assertEqual(len(segs), 5)
        self.assertEqual(sorted(np.concatenate(segs).tolist()),
                         list(range(23)))
        self.assertEqual(sorted(len(curr_seg) for curr_seg in segs),
                         [4, 4, 5, 5, 5])

        segs_again = cv_segments(23, 5, segment_type='random',
                                 random_state=42)
        for curr_seg, curr_again in zip(segs, segs_again):
            np.testing.assert_array_equal(curr_seg, curr_again)

    def test_invalid(self):
        with self.assertRaises(ValueError):
            cv_segments(10, 3, segment_type='leave_one_out')
        with self.assertRaises(ValueError):
            cv_segments(10, 1)
        with self.assertRaises(ValueError):
            cv_segments(10, 11)


class TestPlsRegression(unittest.TestCase):

    def setUp(self):
        raw = synthetic_raw_table(n_samples=60, start_wave=500, end_wave=560)
        self.dataset = assemble_plsr_dataset(raw, start_wave=500,
                                             end_wave=560)

    def test_calibration_matches_sklearn(self):
        plsr = pls_regression(self.dataset.spectra, self.dataset.y)
        plsr.plsr_fit(8)

        # fitted values of k components equal a separate k component model
        for n_components in [1, 3, 8]:
            reference = PLSRegression(n_components=n_components, scale=False)
            reference.fit(self.dataset.x, self.dataset.y)
            np.testing.assert_allclose(
                plsr.plsr_y_c[n_components],
                np.ravel(reference.predict(self.dataset.x)), rtol=1e-6)
            np.testing.assert_allclose(
                plsr.predict(self.dataset.x, n_components),
                np.ravel(reference.predict(self.dataset.x)), rtol=1e-6)

    def test_coefficients(self):
        for scale_std in [False, True]:
            plsr = pls_regression(self.dataset.spectra, self.dataset.y,
                                  scale_std=scale_std)
            plsr.plsr_fit(5)
            coefs = plsr.coefficients(4)

            self.assertEqual(coefs.index[0], 'Intercept')
            self.assertEqual(coefs.index[1], 'Wave_500')
            np.testing.assert_allclose(
                coefs.iloc[0] + self.dataset.x @ coefs.iloc[1:].to_numpy(),
                plsr.predict(self.dataset.x, 4), rtol=1e-8)

    def test_cross_validation(self):
        plsr = pls_regression(self.dataset.spectra, self.dataset.y)
        press = plsr.plsr_cv(max_components=10, segments=5,
                             segment_type='interleaved')

        self.assertEqual(press.index.to_list(), list(range(1, 11)))
        self.assertTrue((press >= 0).all())
        np.testing.assert_allclose(
            press.to_numpy(),
            ((plsr.plsr_y_cv.to_numpy() -
              self.dataset.y[:, np.newaxis])**2).sum(axis=0))
        # cross-validated error is larger than the calibration error
        plsr.plsr_fit(10)
        self.assertTrue(np.all(
            plsr.plsr_metrics.loc[('press', 'cv')] >
            plsr.plsr_metrics.loc[('press', 'c')]))
        # the synthetic trait depends on three bands
        self.assertLess(press[3], press[1])

    def test_cross_validation_deterministic(self):
        press_1 = pls_regression(self.dataset.spectra, self.dataset.y).plsr_cv(
            max_components=6, segments=4, segment_type='interleaved')
        press_2 = pls_regression(self.dataset.spectra, self.dataset.y).plsr_cv(
            max_components=6, segments=4, segment_type='interleaved')
        np.testing.assert_array_equal(press_1, press_2)

    def test_reduced_components(self):
        small = self.dataset.subset(np.arange(12))
        plsr = pls_regression(small.spectra, small.y)
        # longest segment has 4 samples, so 12 - 4 - 1 = 7 components
        press = plsr.plsr_cv(max_components=10, segments=3,
                             segment_type='consecutive')
        self.assertEqual(len(press), 7)
        self.assertEqual(plsr.plsr_y_cv.shape, (12, 7))

    def test_fit_errors(self):
        tiny = self.dataset.subset([0, 1])
        with self.assertRaises(FitError):
            pls_regression(tiny.spectra, tiny.y).plsr_cv(
                max_components=2, segments=2)

        small = self.dataset.subset(np.arange(5))
        with self.assertRaises(FitError):
            pls_regression(small.spectra, small.y).plsr_fit(5)
        with self.assertRaises(FitError):
            pls_regression(small.spectra, small.y).plsr_cv(
                max_components=2, segments=6)

        empty = self.dataset.subset([])
        with self.assertRaises(FitError):
            pls_regression(empty.spectra, empty.y)

    def test_input_validation(self):
        with self.assertRaises(ValueError):
            pls_regression(self.dataset.x, self.dataset.y[:-1])
        with self.assertRaises(ValueError):
            pls_regression(self.dataset.x,
                           np.tile(self.dataset.y[:, np.newaxis], (1, 2)))

        plsr = pls_regression(self.dataset.x, self.dataset.y)
        with self.assertRaises(ValueError):
            plsr.predict(self.dataset.x, 2)
        self.assertEqual(plsr.x_names[0], 'factor_1')

    def test_generate_plots(self):
        plsr = pls_regression(self.dataset.spectra, self.dataset.y)
        plsr.plsr_fit(5)
        plsr.plsr_cv(max_components=5, segments=5,
                     segment_type='interleaved')
        plots = plsr.generate_plots(['r2_vs_comp', 'rmse_vs_comp',
                                     'press_vs_comp'])
        self.assertEqual(len(plots), 3)
        with self.assertRaises(ValueError):
            plsr.generate_plots(['mse_vs_comp'])
