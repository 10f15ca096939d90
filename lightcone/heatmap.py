#!/usr/bin/env python3
"""
Velocity heat map of the light cones.

Every cell of the viewport is coloured by the velocity an observer leaving a
frame needs to reach it: blue at rest, green at green_limit, red at
red_limit, fading out towards c. Cones are alpha-composited in frame order,
non-origin cones slightly dimmed.

The result is a (columns, rows, 3) uint8 array in pygame surfarray order, one
entry per pixel_size x pixel_size block.
"""
import numpy as np

from .constants import BACKGROUND_COLOR

CHILD_CONE_MODULATION = 0.8


def velocity_colors(v: np.ndarray, green_limit: float, red_limit: float):
    """
    RGBA ramp for velocity ratios in [0, 1].

    Returns:
        (rgb, alpha): float arrays of shape v.shape + (3,) in 0..255 and v.shape in 0..1.
    """
    v = np.asarray(v, dtype=float)
    rgb = np.zeros(v.shape + (3,))
    alpha = np.ones(v.shape)

    low = v < green_limit
    mid = (v >= green_limit) & (v < red_limit)
    high = (v >= red_limit) & (v < 1)
    with np.errstate(divide="ignore", invalid="ignore"):
        t_low = np.clip(v / green_limit, 0, 1) if green_limit > 0 else np.zeros_like(v)
        t_mid = np.clip((v - green_limit) / (red_limit - green_limit), 0, 1) if red_limit > green_limit else np.zeros_like(v)
        t_high = np.clip((v - red_limit) / (1 - red_limit), 0, 1) if red_limit < 1 else np.ones_like(v)

    rgb[..., 1] = np.where(low, 255 * t_low, rgb[..., 1])
    rgb[..., 2] = np.where(low, 255 * (1 - t_low), rgb[..., 2])
    rgb[..., 0] = np.where(mid, 255 * t_mid, rgb[..., 0])
    rgb[..., 1] = np.where(mid, 255 * (1 - t_mid), rgb[..., 1])
    rgb[..., 0] = np.where(high, 255 * (1 - t_high), rgb[..., 0])
    alpha = np.where(high, 1 - t_high, alpha)
    alpha = np.where(v >= 1, 0.0, alpha)
    return rgb, alpha


def compute_heatmap(frames, view, config, background=BACKGROUND_COLOR) -> np.ndarray:
    ps = config.pixel_size
    w, h = view.viewport_size
    px, py = np.meshgrid(np.arange(0, w, ps), np.arange(0, h, ps), indexing="ij")
    x, t = view.to_spacetime(px, py)

    rgb = np.zeros(px.shape + (3,))
    alpha = np.zeros(px.shape)
    for index, frame in enumerate(frames):
        rel_x = x - frame.x
        rel_t = t - frame.t
        visible = rel_t > 0
        if config.show_past_cone:
            visible |= rel_t < 0
        # calculate_velocity_ratio, vectorised
        abs_t = np.abs(rel_t)
        with np.errstate(divide="ignore", invalid="ignore"):
            ratio = np.where(abs_t > 0, np.minimum(1.0, np.abs(rel_x) / abs_t), 0.0)

        color, cone_alpha = velocity_colors(ratio, config.green_limit, config.red_limit)
        modulation = 1.0 if index == 0 else CHILD_CONE_MODULATION
        new_alpha = np.where(visible, cone_alpha * modulation, 0.0)
        out_alpha = new_alpha + alpha * (1 - new_alpha)
        with np.errstate(divide="ignore", invalid="ignore"):
            new_weight = np.where(out_alpha > 0, new_alpha / out_alpha, 0.0)
            old_weight = np.where(out_alpha > 0, alpha * (1 - new_alpha) / out_alpha, 0.0)
        rgb = color * modulation * new_weight[..., None] + rgb * old_weight[..., None]
        alpha = out_alpha

    bg = np.array(background, dtype=float)
    out = rgb * alpha[..., None] + bg * (1 - alpha[..., None])
    return np.clip(out, 0, 255).astype(np.uint8)
