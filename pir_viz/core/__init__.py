"""Record model, polar projection and auto-ranging."""
from .records import CanonicalRecord, RecordStore, clamp_trigger
from .polar import (ProjectionParams, project, unproject, to_screen, from_screen,
                    round_point, marker_position)
from .auto_range import GridSpec, compute_range, compute_projection

__all__ = [
    'CanonicalRecord', 'RecordStore', 'clamp_trigger',
    'ProjectionParams', 'project', 'unproject', 'to_screen', 'from_screen', 'round_point',
    'marker_position',
    'GridSpec', 'compute_range', 'compute_projection',
]
