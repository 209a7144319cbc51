"""
In-place luminance grayscale for RGB(A) pixel buffers.
"""

from __future__ import annotations

import numpy as np

# ITU-R BT.601 luma weights
LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114], dtype=np.float64)


def to_grayscale(buffer: np.ndarray) -> np.ndarray:
    """
    Replace R, G and B of every pixel with L = 0.299R + 0.587G + 0.114B.

    Args:
        buffer: H x W x C uint8 array with C == 3 (RGB) or C == 4 (RGBA).
            Alpha, when present, is left untouched.

    Returns:
        The same array, modified in place.

    L is rounded to the nearest integer, so applying the transform to an
    already gray buffer leaves it unchanged.
    """
    if buffer.ndim != 3 or buffer.shape[2] not in (3, 4):
        raise ValueError(f"Expected an H x W x 3|4 buffer, got shape {buffer.shape}")

    rgb = buffer[..., :3]
    luminance = np.rint(rgb @ LUMA_WEIGHTS)
    np.clip(luminance, 0, 255, out=luminance)
    rgb[...] = luminance.astype(buffer.dtype)[..., np.newaxis]
    return buffer
