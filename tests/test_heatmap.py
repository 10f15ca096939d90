import numpy as np

from lightcone.config import DiagramConfig
from lightcone.constants import BACKGROUND_COLOR
from lightcone.data_models import ReferenceFrame
from lightcone.heatmap import compute_heatmap, velocity_colors


def test_velocity_color_ramp():
    rgb, alpha = velocity_colors(np.array([0.0, 0.5, 0.99, 1.0]), 0.5, 1.0)
    assert rgb[0].tolist() == [0, 0, 255]
    assert rgb[1].tolist() == [0, 255, 0]
    assert rgb[2, 0] > 240 and rgb[2, 1] < 15
    assert alpha.tolist()[:3] == [1.0, 1.0, 1.0]
    assert alpha[3] == 0


def test_heatmap_colours_only_the_future_cone(view):
    config = DiagramConfig(resolution=1)
    pixels = compute_heatmap([ReferenceFrame(0, 0)], view, config)
    assert pixels.shape == (138, 100, 3)
    assert pixels.dtype == np.uint8
    # Column at x = -3 near the top of the view: slow, hence blue
    assert pixels[68, 0, 2] > 200
    # Below the origin: untouched background
    assert tuple(pixels[68, 99]) == BACKGROUND_COLOR
    # Far outside the cone: untouched background
    assert tuple(pixels[0, 90]) == BACKGROUND_COLOR


def test_past_cone_is_optional(view):
    config = DiagramConfig(resolution=1, show_past_cone=True)
    pixels = compute_heatmap([ReferenceFrame(0, 0)], view, config)
    assert tuple(pixels[68, 99]) != BACKGROUND_COLOR
