# -*- coding: utf-8 -*-
"""Exceptions raised during a spectra-trait PLSR analysis."""


class SpectraTraitError(Exception):
    """Base class for all errors of the analysis."""


class NetworkError(SpectraTraitError):
    """The dataset could not be downloaded."""

    def __init__(self, message, url=None, status_code=None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class SchemaError(SpectraTraitError, KeyError):
    """A required metadata or wavelength column is missing."""

    def __str__(self):
        # KeyError would otherwise print the repr of the message
        return str(self.args[0]) if self.args else ''


class FitError(SpectraTraitError):
    """The PLSR solver failed or the data cannot support the fit."""
