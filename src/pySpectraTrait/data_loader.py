# -*- coding: utf-8 -*-
"""
Download of spectra and trait tables from the EcoSIS spectral library.

@author: pySpectraTrait developers
"""

import io
import logging

import pandas as pd
import requests

from .exceptions import NetworkError

logger = logging.getLogger(__name__)

ECOSIS_HOST = 'ecosis.org'
# Fresh leaf spectra to estimate LMA over NEON domains in eastern US
NEON_LMA_DATASET = '5617da17-c925-49fb-b395-45a51291bd2d'


def ecosis_export_url(dataset_id, host=ECOSIS_HOST, metadata=True):
    """
    Construct the export URL of an EcoSIS package.

    Parameters
    ----------
    dataset_id : str
        The package identifier.
    host : str, optional
        The host serving the EcoSIS API. The default is 'ecosis.org'.
    metadata : bool, optional
        If True, the metadata columns are exported together with the
        spectra. The default is True.

    Returns
    -------
    str
        The export URL.

    """
    return 'https://{}/api/package/{}/export?metadata={}'.format(
        host, dataset_id, str(metadata).lower())


def download_ecosis_dataset(dataset_id=NEON_LMA_DATASET, host=ECOSIS_HOST,
                            timeout=None, session=None):
    """
    Download an EcoSIS package export and parse it into a DataFrame.

    Exactly one GET request is made, there is no retry.

    Parameters
    ----------
    dataset_id : str, optional
        The package identifier. The default is the NEON LMA dataset.
    host : str, optional
        The host serving the EcoSIS API. The default is 'ecosis.org'.
    timeout : float or None, optional
        Timeout of the request in seconds. The default is None, meaning that
        the call blocks until the server answers.
    session : requests.Session or None, optional
        Session used for the request, e.g. for connection reuse or testing.
        The default is None which uses requests.get.

    Raises
    ------
    NetworkError
        If the request fails or the server answers with a non-success
        status code.

    Returns
    -------
    DataFrame
        The raw table, one row per sample, wavelength columns together with
        all metadata columns.

    """
    url = ecosis_export_url(dataset_id, host=host)
    getter = requests.get if session is None else session.get

    logger.info('Downloading data from %s', url)
    try:
        response = getter(url, timeout=timeout)
    except requests.RequestException as exc:
        raise NetworkError(
            'Request to {} failed: {}'.format(url, exc), url=url) from exc

    if not 200 <= response.status_code < 300:
        raise NetworkError(
            'Download of {} failed with HTTP status {}.'.format(
                url, response.status_code),
            url=url, status_code=response.status_code)

    response.encoding = 'utf-8'
    raw = parse_spectra_table(response.text)
    logger.info('Download complete, %d samples and %d columns',
                *raw.shape)

    return raw


def parse_spectra_table(text, sep=','):
    """Parse delimited text with a header row into a DataFrame."""
    return pd.read_csv(io.StringIO(text), sep=sep)


def read_spectra_table(path, sep=','):
    """
    Read a previously saved EcoSIS export from disk.

    Parameters
    ----------
    path : str or path-like
        Path of the delimited text file.
    sep : str, optional
        The column delimiter. The default is ','.

    Returns
    -------
    DataFrame
        The raw table.

    """
    raw = pd.read_csv(path, sep=sep)
    logger.info('Read %d samples and %d columns from %s',
                raw.shape[0], raw.shape[1], path)
    return raw
