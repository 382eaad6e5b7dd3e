# -*- coding: utf-8 -*-
"""
Created on Sun Oct 18 11:37:02 2026

@author: pySpectraTrait developers
"""

import logging

import matplotlib.pyplot as plt

from pySpectraTrait import (download_ecosis_dataset, assemble_plsr_dataset,
                            jackknife_press, press_ttests, select_components,
                            fit_final_model, reporting)

# This example builds a PLSR model estimating leaf mass per area (LMA) from
# fresh leaf spectra collected over NEON domains in the eastern United
# States, see https://ecosis.org/package/fresh-leaf-spectra-to-estimate-lma-
# over-neon-domains-in-eastern-united-states
logging.basicConfig(level=logging.INFO)

raw = download_ecosis_dataset('5617da17-c925-49fb-b395-45a51291bd2d')
dataset = assemble_plsr_dataset(raw, start_wave=500, end_wave=2400)
reporting.spectra_summary_plot(dataset)

# The number of components is found with repeated cross-validations on 70 %
# subsamples. Because the subsamples are random, the result may change
# slightly between runs unless a seed is given.
press = jackknife_press(dataset, max_components=20, iterations=50,
                        segments=5, segment_type='random',
                        subsample_fraction=0.7, seed=None)
reporting.press_boxplot(press)
p_values = press_ttests(press)
print(p_values)

# Inspect the p-values and the box plot, the automatic selection below is
# only one way to pick the first minimum.
n_components = select_components(p_values, alpha=0.05)

# Interleaved segments are used for the final model given the large number
# of samples. For fewer samples (e.g. < 100), leave-one-out cross-validation
# is preferable, i.e. as many segments as samples.
final = fit_final_model(dataset, n_components, segments=30,
                        segment_type='interleaved')
for curr_group in [None, 'Functional_type', 'Domain']:
    reporting.observed_vs_predicted_plot(
        final.fitted, dataset.trait, final.r2, final.rmsep,
        group_by=curr_group, limits=(0, 275))
    reporting.residual_histogram(final.fitted, group_by=curr_group)

plt.show()
