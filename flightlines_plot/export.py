from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image


def save_png(frame: np.ndarray, path: str | Path) -> Path:
    if frame.ndim != 3 or frame.shape[2] != 4 or frame.dtype != np.uint8:
        raise ValueError("frame must be an RGBA uint8 array of shape (H, W, 4)")
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(frame).save(out, format="PNG")
    return out
