"""
Bezier stripes library modules - curve model, scanline mapping and rendering.
"""

from .errors import StripesError, InputError, EncodingError
from .curve_model import CurveModel
from .scanline_mapper import ScanlineMap, build as build_scanline_map
from .stripe_renderer import render as render_stripes, draw_sample_markers
from .coordinator import DualResolutionCoordinator, StripeSession
from .overlay import draw_curve_overlay
from . import image_io

__all__ = [
    'StripesError',
    'InputError',
    'EncodingError',
    'CurveModel',
    'ScanlineMap',
    'build_scanline_map',
    'render_stripes',
    'draw_sample_markers',
    'DualResolutionCoordinator',
    'StripeSession',
    'draw_curve_overlay',
    'image_io',
]
