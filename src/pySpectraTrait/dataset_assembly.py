# -*- coding: utf-8 -*-
"""
Created on Tue Oct  6 10:12:31 2026

@author: pySpectraTrait developers
"""

import logging

import numpy as np
import pandas as pd

from .exceptions import SchemaError

logger = logging.getLogger(__name__)

# source column name -> column name used in the analysis, the last entry is
# the trait to be modeled
DEFAULT_METADATA_COLUMNS = {'Domain': 'Domain',
                            'Functional_type': 'Functional_type',
                            'Sample_ID': 'Sample_ID',
                            'USDA Symbol': 'USDA_Species_Code',
                            'LMA': 'LMA_gDW_m2'}
# full range of the spectroradiometer, all other columns are metadata
FULL_RANGE = (350, 2500)
WAVE_PREFIX = 'Wave_'


class plsr_dataset():
    """Spectra and sample information of the samples used for modeling."""

    def __init__(self, spectra, sample_info, trait):
        """
        Store spectral matrix and metadata of the same samples.

        Parameters
        ----------
        spectra : DataFrame
            Reflectance in the shape (n_samples, n_wavelengths). Columns are
            named 'Wave_<n>' in ascending wavelength order.
        sample_info : DataFrame
            Metadata in the shape (n_samples, n_fields). Must have the same
            index as spectra.
        trait : str
            The column in sample_info containing the modeled trait.

        Raises
        ------
        ValueError
            If the indices of spectra and sample_info differ.
        SchemaError
            If trait is not a column of sample_info.

        Returns
        -------
        None.

        """
        if not spectra.index.equals(sample_info.index):
            raise ValueError('spectra and sample_info must share the same '
                             'index, but have {} and {} rows.'.format(
                                 len(spectra), len(sample_info)))
        if trait not in sample_info.columns:
            raise SchemaError('Trait column \'{}\' not found in sample info '
                              'columns {}.'.format(
                                  trait, sample_info.columns.to_list()))
        self.spectra = spectra
        self.sample_info = sample_info
        self.trait = trait

    def __len__(self):
        return len(self.spectra)

    @property
    def wavelengths(self):
        return np.array([int(curr_col[len(WAVE_PREFIX):])
                         for curr_col in self.spectra.columns])

    @property
    def x(self):
        return self.spectra.to_numpy(dtype='float')

    @property
    def y(self):
        return self.sample_info[self.trait].to_numpy(dtype='float')

    @property
    def data(self):
        """Sample info and spectra in one DataFrame with two column levels."""
        return pd.concat([self.sample_info, self.spectra], axis=1,
                         keys=['sample_info', 'Spectra'])

    def subset(self, rows):
        """Return a new plsr_dataset with the rows at positions rows."""
        return plsr_dataset(self.spectra.iloc[rows], self.sample_info.iloc[rows],
                            self.trait)


def wavelength_columns(raw):
    """
    Identify the columns of a raw table that hold reflectance values.

    Parameters
    ----------
    raw : DataFrame
        The raw table as downloaded from EcoSIS.

    Returns
    -------
    dict
        Maps the column labels to the integer wavelengths. Only labels that
        are integral numbers are included, e.g. '500' or 500.

    """
    wave_cols = {}
    for curr_col in raw.columns:
        try:
            curr_value = float(curr_col)
        except (TypeError, ValueError):
            continue
        if np.isfinite(curr_value) and curr_value.is_integer():
            wave_cols[curr_col] = int(curr_value)
    return wave_cols


def assemble_plsr_dataset(raw, start_wave=500, end_wave=2400,
                          metadata_columns=None, trait=None,
                          full_range=FULL_RANGE, drop_incomplete=True):
    """
    Split a raw table into spectral matrix and sample information.

    Parameters
    ----------
    raw : DataFrame
        The raw table, one row per sample.
    start_wave : int, optional
        First wavelength used for modeling in nm. The default is 500.
    end_wave : int, optional
        Last wavelength used for modeling in nm, inclusive. The default is
        2400.
    metadata_columns : dict or None, optional
        Maps source metadata columns to the names used in the analysis. The
        default is None, meaning DEFAULT_METADATA_COLUMNS.
    trait : str or None, optional
        The renamed column holding the trait to be modeled. The default is
        None, meaning the last value in metadata_columns.
    full_range : tuple of int, optional
        Wavelength range of the instrument. Wavelength columns in this range
        are never treated as metadata. The default is (350, 2500).
    drop_incomplete : bool, optional
        If True, samples with a missing trait value or a missing reflectance
        value are dropped. The default is True.

    Raises
    ------
    ValueError
        If end_wave is smaller than start_wave.
    SchemaError
        If a wavelength of the requested range or a metadata column is
        missing in raw.

    Returns
    -------
    plsr_dataset
        The assembled dataset.

    """
    if end_wave < start_wave:
        raise ValueError('end_wave must not be smaller than start_wave, but '
                         'they are {} and {}.'.format(end_wave, start_wave))
    if metadata_columns is None:
        metadata_columns = DEFAULT_METADATA_COLUMNS
    if trait is None:
        trait = list(metadata_columns.values())[-1]

    wave_cols = wavelength_columns(raw)
    col_by_wave = {curr_wave: curr_col
                   for curr_col, curr_wave in wave_cols.items()}
    wv = np.arange(start_wave, end_wave + 1)
    missing_waves = [curr_wave for curr_wave in wv
                     if curr_wave not in col_by_wave]
    if missing_waves:
        raise SchemaError(
            '{} wavelengths between {} and {} nm are missing in the raw '
            'table, e.g. {}.'.format(len(missing_waves), start_wave,
                                     end_wave, missing_waves[:5]))

    spectra = raw[[col_by_wave[curr_wave] for curr_wave in wv]].apply(
        pd.to_numeric, errors='coerce')
    spectra.columns = ['{}{}'.format(WAVE_PREFIX, curr_wave)
                       for curr_wave in wv]

    instrument_cols = [curr_col for curr_col, curr_wave in wave_cols.items()
                       if full_range[0] <= curr_wave <= full_range[1]]
    sample_info = raw.drop(columns=instrument_cols)
    missing_meta = [curr_col for curr_col in metadata_columns
                    if curr_col not in sample_info.columns]
    if missing_meta:
        raise SchemaError('Metadata columns {} are missing in the raw '
                          'table.'.format(missing_meta))
    sample_info = sample_info[list(metadata_columns)].rename(
        columns=metadata_columns)
    sample_info[trait] = pd.to_numeric(sample_info[trait], errors='coerce')

    if drop_incomplete:
        complete = sample_info[trait].notna() & spectra.notna().all(axis=1)
        if not complete.all():
            logger.warning('Dropping %d of %d samples with missing %s or '
                           'reflectance values', (~complete).sum(),
                           len(complete), trait)
        spectra = spectra[complete]
        sample_info = sample_info[complete]

    logger.info('Assembled %d samples with %d wavelengths (%d-%d nm)',
                len(spectra), spectra.shape[1], start_wave, end_wave)

    return plsr_dataset(spectra, sample_info, trait)
