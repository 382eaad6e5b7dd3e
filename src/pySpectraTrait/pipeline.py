# -*- coding: utf-8 -*-
"""
Created on Sat Oct 10 16:22:09 2026

@author: pySpectraTrait developers
"""

import argparse
import logging
import sys

from .config import analysis_config
from .data_loader import download_ecosis_dataset, read_spectra_table
from .dataset_assembly import assemble_plsr_dataset
from .component_selection import (jackknife_press, press_ttests,
                                  select_components)
from .final_model import fit_final_model
from .partial_least_squares_regression import SEGMENT_TYPES
from .reporting import write_report

logger = logging.getLogger(__name__)


class analysis_result():
    """Everything produced by run_analysis."""

    def __init__(self, config, dataset, press, p_values, n_components,
                 final_result, written_files):
        self.config = config
        self.dataset = dataset
        self.press = press
        self.p_values = p_values
        self.n_components = n_components
        self.final_result = final_result
        self.written_files = written_files


def run_analysis(config=None, raw=None):
    """
    Run the complete analysis from download to report.

    Parameters
    ----------
    config : analysis_config or None, optional
        The analysis options. The default is None, meaning the default
        options.
    raw : DataFrame or None, optional
        An already loaded raw table. The default is None, meaning that the
        dataset given in config is downloaded.

    Returns
    -------
    analysis_result

    """
    if config is None:
        config = analysis_config()

    if raw is None:
        raw = download_ecosis_dataset(config.dataset_id, host=config.host,
                                      timeout=config.timeout)
    dataset = assemble_plsr_dataset(raw, start_wave=config.start_wave,
                                    end_wave=config.end_wave)

    press = jackknife_press(
        dataset, max_components=config.max_components,
        iterations=config.iterations, segments=config.cv_segments,
        segment_type=config.cv_segment_type,
        subsample_fraction=config.subsample_fraction, seed=config.seed,
        n_jobs=config.n_jobs)
    p_values = press_ttests(press)
    logger.info('t-test p-values of c vs. c+1 components:\n%s',
                p_values.to_string(index=False))

    if config.selected_components is None:
        n_components = select_components(p_values,
                                         alpha=config.selection_alpha)
        logger.info('Selected %d components automatically (alpha = %g)',
                    n_components, config.selection_alpha)
    else:
        n_components = config.selected_components
        logger.info('Using %d components as configured', n_components)

    final_result = fit_final_model(dataset, n_components,
                                   segments=config.final_segments,
                                   segment_type=config.final_segment_type)

    written_files = []
    if config.output_dir is not None:
        written_files = write_report(config.output_dir, dataset, final_result,
                                     press=press, p_values=p_values,
                                     group_by=config.group_by)

    return analysis_result(config, dataset, press, p_values, n_components,
                           final_result, written_files)


def build_parser():
    defaults = analysis_config()
    parser = argparse.ArgumentParser(
        prog='pyspectratrait',
        description='Fit a PLSR model relating leaf reflectance spectra to '
                    'a leaf trait.')
    parser.add_argument('--input', default=None,
                        help='Read the raw table from this CSV file instead '
                             'of downloading it.')
    parser.add_argument('--dataset-id', default=defaults.dataset_id)
    parser.add_argument('--host', default=defaults.host)
    parser.add_argument('--start-wave', type=int, default=defaults.start_wave)
    parser.add_argument('--end-wave', type=int, default=defaults.end_wave)
    parser.add_argument('--max-components', type=int,
                        default=defaults.max_components)
    parser.add_argument('--iterations', type=int,
                        default=defaults.iterations)
    parser.add_argument('--cv-segments', type=int,
                        default=defaults.cv_segments)
    parser.add_argument('--cv-segment-type', choices=SEGMENT_TYPES,
                        default=defaults.cv_segment_type)
    parser.add_argument('--subsample-fraction', type=float,
                        default=defaults.subsample_fraction)
    parser.add_argument('--selected-components', type=int, default=None,
                        help='Number of components of the final model. If '
                             'not given, it is picked from the t-tests.')
    parser.add_argument('--selection-alpha', type=float,
                        default=defaults.selection_alpha)
    parser.add_argument('--final-segments', type=int,
                        default=defaults.final_segments)
    parser.add_argument('--final-segment-type', choices=SEGMENT_TYPES,
                        default=defaults.final_segment_type)
    parser.add_argument('--seed', type=int, default=None)
    parser.add_argument('--n-jobs', type=int, default=None)
    parser.add_argument('--timeout', type=float, default=None)
    parser.add_argument('--output-dir', default='plsr_output')
    parser.add_argument('--group-by', nargs='*', default=list(
        defaults.group_by))
    parser.add_argument('-v', '--verbose', action='store_true')
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(name)s %(levelname)s: %(message)s')

    options = vars(args)
    input_path = options.pop('input')
    options.pop('verbose')
    config = analysis_config.from_dict(options)

    raw = None if input_path is None else read_spectra_table(input_path)
    result = run_analysis(config, raw=raw)
    logger.info('Final model with %d components, R2 (CV) = %.3f',
                result.n_components, result.final_result.r2)
    return 0


if __name__ == '__main__':
    sys.exit(main())
