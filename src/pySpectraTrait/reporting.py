# -*- coding: utf-8 -*-
"""Plots and tables summarizing a spectra-trait PLSR analysis."""

import logging
import os

import numpy as np
import matplotlib.pyplot as plt

from .model_diagnostics import theo_residual_percentiles, residual_statistics

logger = logging.getLogger(__name__)

FIGSIZE = (9, 5)
DPI = 150


def spectra_summary_plot(dataset, group_by=None, ylim=75, save_path=None):
    """
    Plot mean reflectance with quantile band and min/max lines.

    Parameters
    ----------
    dataset : plsr_dataset
        The assembled dataset.
    group_by : str or None, optional
        A column of dataset.sample_info. If given, the mean spectrum of each
        group is drawn in addition. The default is None.
    ylim : float, optional
        Upper limit of the reflectance axis in %. The default is 75.
    save_path : str or None, optional
        If given, the figure is saved to this path. The default is None.

    Returns
    -------
    fig : matplotlib figure

    """
    wv = dataset.wavelengths
    mean_spec = dataset.spectra.mean().to_numpy() * 100
    spectra_quantiles = dataset.spectra.quantile(
        [0, 0.025, 0.05, 0.5, 0.95, 0.975, 1]) * 100

    fig, ax = plt.subplots(figsize=FIGSIZE)
    ax.fill_between(wv, spectra_quantiles.loc[0.05],
                    spectra_quantiles.loc[0.95], color='#99CC99',
                    linewidth=0, label='5-95 % quantiles')
    ax.plot(wv, mean_spec, lw=3, ls='-', color='black',
            label='Mean reflectance')
    ax.plot(wv, spectra_quantiles.loc[0], lw=1.85, ls=':', color='grey',
            label='Min/Max')
    ax.plot(wv, spectra_quantiles.loc[1], lw=1.85, ls=':', color='grey')
    if group_by is not None:
        for curr_name, curr_spectra in dataset.spectra.groupby(
                dataset.sample_info[group_by]):
            ax.plot(wv, curr_spectra.mean().to_numpy() * 100, lw=1,
                    label=str(curr_name))
    ax.set_ylim(0, ylim)
    ax.set_xlabel('Wavelength (nm)')
    ax.set_ylabel('Reflectance (%)')
    ax.legend(loc='upper right', frameon=False)

    return _finish(fig, save_path)


def press_boxplot(press, save_path=None):
    """Box plot of the PRESS values for each number of components."""
    fig, ax = plt.subplots(figsize=FIGSIZE)
    positions = press.columns.to_numpy()
    ax.boxplot([press[curr_comp].dropna().to_numpy()
                for curr_comp in positions], positions=positions, notch=True)
    ax.set_xticks(positions)
    ax.set_xticklabels(positions)
    ax.set_xlabel('Number of Components')
    ax.set_ylabel('PRESS')

    return _finish(fig, save_path)


def observed_vs_predicted_plot(fitted, trait, r2, rmsep, group_by=None,
                               limits=None, save_path=None):
    """
    Scatter plot of observed vs. predicted trait values.

    Parameters
    ----------
    fitted : DataFrame
        Contains the columns trait and 'Fitted', e.g.
        final_model_result.fitted.
    trait : str
        The column with the observed values.
    r2 : float
        Coefficient of determination written into the plot.
    rmsep : float
        Root mean squared error of prediction written into the plot.
    group_by : str or None, optional
        A categorical column used to color the points. The default is None.
    limits : tuple or None, optional
        Axis limits for both axes. The default is None, meaning the range of
        the data.
    save_path : str or None, optional
        If given, the figure is saved to this path. The default is None.

    Returns
    -------
    fig : matplotlib figure

    """
    if limits is None:
        all_values = np.concatenate([fitted['Fitted'], fitted[trait]])
        limits = (min(0, np.nanmin(all_values)), np.nanmax(all_values)*1.05)

    with plt.style.context(('ggplot')):
        fig, ax = plt.subplots(figsize=(6, 6))
        if group_by is None:
            ax.scatter(fitted['Fitted'], fitted[trait], c='black', s=12)
        else:
            for curr_name, curr_group in fitted.groupby(group_by):
                ax.scatter(curr_group['Fitted'], curr_group[trait], s=40,
                           alpha=0.6, edgecolors='k', label=str(curr_name))
            ax.legend(loc='upper left', title=group_by)
        ax.plot(limits, limits, color='darkgrey', ls='--', lw=1.5)
        ax.text(0.95, 0.05, '$R^{{2}}$ = {:.2f}\nRMSEP = {:.2f}'.format(
            r2, rmsep), transform=ax.transAxes, ha='right', va='bottom')
        ax.set_xlim(limits)
        ax.set_ylim(limits)
        ax.set_xlabel('Predicted {}'.format(trait))
        ax.set_ylabel('Observed {}'.format(trait))

    return _finish(fig, save_path)


def residual_histogram(fitted, group_by=None, bins='auto', save_path=None):
    """Histogram of the residuals, optionally one per group."""
    fig, ax = plt.subplots(figsize=FIGSIZE)
    if group_by is None:
        ax.hist(fitted['Residuals'], bins=bins, alpha=0.5, color='grey')
    else:
        bin_edges = np.histogram_bin_edges(fitted['Residuals'], bins=bins)
        for curr_name, curr_group in fitted.groupby(group_by):
            ax.hist(curr_group['Residuals'], bins=bin_edges, alpha=0.5,
                    label=str(curr_name))
        ax.legend(loc='upper right', title=group_by)
    ax.axvline(0, color='black', ls='--', lw=1)
    ax.set_xlabel('Residuals')
    ax.set_ylabel('Count')

    return _finish(fig, save_path)


def residual_probability_plot(fitted, save_path=None):
    """Residuals vs. theoretical quantiles of a normal distribution."""
    residuals = fitted['Residuals'].to_numpy()
    fig, ax = plt.subplots(figsize=(6, 6))
    ax.plot(residuals, theo_residual_percentiles(residuals), ls='none',
            marker='o')
    ax.set_xlabel('Residuals')
    ax.set_ylabel('Theoretical quantiles')

    return _finish(fig, save_path)


def write_report(output_dir, dataset, final_result, press=None,
                 p_values=None, group_by=('Functional_type', 'Domain')):
    """
    Write all tables and plots of an analysis into a folder.

    Parameters
    ----------
    output_dir : str
        The folder, created if it does not exist.
    dataset : plsr_dataset
        The assembled dataset.
    final_result : final_model_result
        The final model.
    press : DataFrame or None, optional
        The PRESS matrix from jackknife_press. The default is None.
    p_values : DataFrame or None, optional
        The t-test results from press_ttests. The default is None.
    group_by : iterable of str, optional
        Categorical columns for which grouped plots are made. The default is
        ('Functional_type', 'Domain').

    Returns
    -------
    list of str
        The paths of all written files.

    """
    os.makedirs(output_dir, exist_ok=True)
    written = []

    def path(file_name):
        written.append(os.path.join(output_dir, file_name))
        return written[-1]

    if press is not None:
        press.to_csv(path('press_matrix.csv'))
        _close(press_boxplot(press, save_path=path('press_boxplot.png')))
    if p_values is not None:
        p_values.to_csv(path('press_ttests.csv'), index=False)

    final_result.to_csv(output_dir)
    written.extend([os.path.join(output_dir, 'fitted_values.csv'),
                    os.path.join(output_dir, 'coefficients.csv')])
    residual_statistics(final_result.fitted['Residuals']).to_csv(
        path('residual_statistics.csv'), header=['value'])

    fitted = final_result.fitted
    trait = final_result.trait
    _close(spectra_summary_plot(dataset, save_path=path('spectra.png')))
    _close(observed_vs_predicted_plot(
        fitted, trait, final_result.r2, final_result.rmsep,
        save_path=path('observed_vs_predicted.png')))
    _close(residual_histogram(fitted, save_path=path('residuals.png')))
    _close(residual_probability_plot(
        fitted, save_path=path('residual_probability.png')))
    for curr_plot, curr_name in zip(
            final_result.model.generate_plots(['rmse_vs_comp',
                                               'r2_vs_comp']),
            ['rmse_vs_components.png', 'r2_vs_components.png']):
        _close(_finish(curr_plot, path(curr_name)))

    for curr_group in group_by:
        if curr_group not in fitted.columns:
            logger.warning('Skipping plots grouped by %s, column not '
                           'present', curr_group)
            continue
        _close(observed_vs_predicted_plot(
            fitted, trait, final_result.r2, final_result.rmsep,
            group_by=curr_group,
            save_path=path('observed_vs_predicted_{}.png'.format(
                curr_group))))
        _close(residual_histogram(
            fitted, group_by=curr_group,
            save_path=path('residuals_{}.png'.format(curr_group))))

    logger.info('Wrote %d files to %s', len(written), output_dir)
    return written


def _finish(fig, save_path):
    if save_path is not None:
        fig.savefig(save_path, dpi=DPI, bbox_inches='tight')
    return fig


def _close(fig):
    plt.close(fig)
