# -*- coding: utf-8 -*-
"""
Created on Fri Oct 16 08:55:14 2026

@author: pySpectraTrait developers
"""

import os
import tempfile
import unittest
from unittest import mock

import matplotlib
matplotlib.use('Agg')

from pySpectraTrait import NetworkError
from pySpectraTrait.config import analysis_config
from pySpectraTrait.pipeline import run_analysis, main
from synthetic_data import synthetic_raw_table

SMALL_RUN = {'start_wave': 500, 'end_wave': 540, 'max_components': 5,
             'iterations': 4, 'cv_segments': 5, 'final_segments': 10,
             'seed': 0, 'n_jobs': 1}


class TestAnalysisConfig(unittest.TestCase):

    def test_defaults(self):
        config = analysis_config()
        self.assertEqual((config.start_wave, config.end_wave), (500, 2400))
        self.assertEqual(config.max_components, 20)
        self.assertEqual(config.iterations, 50)
        self.assertEqual(config.cv_segments, 5)
        self.assertEqual(config.cv_segment_type, 'random')
        self.assertEqual(config.subsample_fraction, 0.7)
        self.assertEqual(config.final_segments, 30)
        self.assertEqual(config.final_segment_type, 'interleaved')
        self.assertIsNone(config.selected_components)
        self.assertIsNone(config.seed)

    def test_validation(self):
        for curr_options in [{'start_wave': 600, 'end_wave': 500},
                             {'iterations': 0},
                             {'cv_segments': 1},
                             {'cv_segment_type': 'shuffled'},
                             {'subsample_fraction': 0},
                             {'selection_alpha': 1},
                             {'selected_components': 21}]:
            with self.assertRaises(ValueError):
                analysis_config(**curr_options)

    def test_from_dict(self):
        config = analysis_config.from_dict({'iterations': 10,
                                            'group_by': ['Domain']})
        self.assertEqual(config.iterations, 10)
        self.assertEqual(config.group_by, ('Domain',))
        self.assertEqual(config.to_dict()['iterations'], 10)
        with self.assertRaises(ValueError):
            analysis_config.from_dict({'iteration': 10})


class TestRunAnalysis(unittest.TestCase):

    def setUp(self):
        self.raw = synthetic_raw_table(n_samples=50, start_wave=500,
                                       end_wave=540)

    def test_run(self):
        with tempfile.TemporaryDirectory() as folder:
            config = analysis_config(output_dir=folder, **SMALL_RUN)
            result = run_analysis(config, raw=self.raw)
            self.assertTrue(os.path.isfile(
                os.path.join(folder, 'press_ttests.csv')))
            self.assertTrue(all(os.path.isfile(curr_file)
                                for curr_file in result.written_files))

        self.assertEqual(result.press.shape, (4, 5))
        self.assertEqual(len(result.p_values), 4)
        self.assertTrue(1 <= result.n_components <= 5)
        self.assertEqual(result.final_result.n_components,
                         result.n_components)
        self.assertEqual(len(result.final_result.fitted), 50)

    def test_selected_components(self):
        config = analysis_config(selected_components=2, **SMALL_RUN)
        result = run_analysis(config, raw=self.raw)

        self.assertEqual(result.n_components, 2)
        self.assertEqual(result.written_files, [])

    @mock.patch('pySpectraTrait.pipeline.assemble_plsr_dataset')
    @mock.patch('pySpectraTrait.data_loader.requests.get')
    def test_network_error_stops_run(self, mock_get, mock_assemble):
        mock_get.return_value = mock.Mock(status_code=404, text='')
        with self.assertRaises(NetworkError):
            run_analysis(analysis_config(**SMALL_RUN))
        mock_assemble.assert_not_called()

    def test_main(self):
        with tempfile.TemporaryDirectory() as folder:
            input_path = os.path.join(folder, 'export.csv')
            self.raw.to_csv(input_path, index=False)
            output_dir = os.path.join(folder, 'output')
            exit_code = main(['--input', input_path, '--start-wave', '500',
                              '--end-wave', '540', '--max-components', '4',
                              '--iterations', '3', '--final-segments', '10',
                              '--seed', '1', '--n-jobs', '1',
                              '--output-dir', output_dir,
                              '--group-by', 'Domain'])
            self.assertEqual(exit_code, 0)
            self.assertTrue(os.path.isfile(
                os.path.join(output_dir, 'observed_vs_predicted_Domain.png')))

    def test_invalid_segment_type_argument(self):
        with mock.patch('sys.stderr'):
            with self.assertRaises(SystemExit):
                main(['--cv-segment-type', 'blocks'])
            with self.assertRaises(SystemExit):
                main(['--final-segment-type', 'blocks'])
