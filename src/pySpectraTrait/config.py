# -*- coding: utf-8 -*-
"""Options of a spectra-trait PLSR analysis."""

from dataclasses import dataclass, field, fields, asdict

from .data_loader import ECOSIS_HOST, NEON_LMA_DATASET
from .partial_least_squares_regression import SEGMENT_TYPES


@dataclass
class analysis_config:
    """
    All options of one analysis run.

    selected_components=None means that the number of components of the
    final model is picked automatically from the t-test p-values with
    selection_alpha, see component_selection.select_components.
    """

    dataset_id: str = NEON_LMA_DATASET
    host: str = ECOSIS_HOST
    start_wave: int = 500
    end_wave: int = 2400
    max_components: int = 20
    iterations: int = 50
    cv_segments: int = 5
    cv_segment_type: str = 'random'
    subsample_fraction: float = 0.7
    selected_components: int = None
    selection_alpha: float = 0.05
    final_segments: int = 30
    final_segment_type: str = 'interleaved'
    seed: int = None
    n_jobs: int = None
    timeout: float = None
    output_dir: str = None
    group_by: tuple = field(
        default_factory=lambda: ('Functional_type', 'Domain'))

    def __post_init__(self):
        self.group_by = tuple(self.group_by)
        self.validate()

    def validate(self):
        """
        Check the option values.

        Raises
        ------
        ValueError
            If an option is out of its allowed range.

        Returns
        -------
        None.

        """
        if self.end_wave < self.start_wave:
            raise ValueError('end_wave must not be smaller than start_wave, '
                             'but they are {} and {}.'.format(
                                 self.end_wave, self.start_wave))
        for curr_name in ['max_components', 'iterations']:
            if getattr(self, curr_name) < 1:
                raise ValueError('{} must be at least 1, but is {}.'.format(
                    curr_name, getattr(self, curr_name)))
        for curr_name in ['cv_segments', 'final_segments']:
            if getattr(self, curr_name) < 2:
                raise ValueError('{} must be at least 2, but is {}.'.format(
                    curr_name, getattr(self, curr_name)))
        for curr_name in ['cv_segment_type', 'final_segment_type']:
            if getattr(self, curr_name) not in SEGMENT_TYPES:
                raise ValueError(
                    'No valid {} given. Should be an element of {}, but is '
                    '\'{}\'.'.format(curr_name, SEGMENT_TYPES,
                                     getattr(self, curr_name)))
        if not 0 < self.subsample_fraction <= 1:
            raise ValueError('subsample_fraction must be in (0, 1], but is '
                             '{}.'.format(self.subsample_fraction))
        if not 0 < self.selection_alpha < 1:
            raise ValueError('selection_alpha must be in (0, 1), but is '
                             '{}.'.format(self.selection_alpha))
        if (self.selected_components is not None) and (
                not 1 <= self.selected_components <= self.max_components):
            raise ValueError(
                'selected_components must be between 1 and max_components '
                '({}), but is {}.'.format(self.max_components,
                                          self.selected_components))

    @classmethod
    def from_dict(cls, options):
        """Create a configuration, unknown option names raise ValueError."""
        known = {curr_field.name for curr_field in fields(cls)}
        unknown = sorted(set(options) - known)
        if unknown:
            raise ValueError('Unknown options {}, allowed are {}.'.format(
                unknown, sorted(known)))
        return cls(**options)

    def to_dict(self):
        return asdict(self)
