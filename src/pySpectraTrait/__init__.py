# -*- coding: utf-8 -*-
from .exceptions import SpectraTraitError, NetworkError, SchemaError, FitError
from .data_loader import (ecosis_export_url, download_ecosis_dataset,
                          read_spectra_table)
from .dataset_assembly import plsr_dataset, assemble_plsr_dataset
from .partial_least_squares_regression import pls_regression, cv_segments
from .component_selection import (jackknife_press, press_ttests,
                                  select_components)
from .final_model import fit_final_model
from .model_diagnostics import theo_residual_percentiles, percentiles
from . import reporting
from .config import analysis_config
from .pipeline import run_analysis
