from PIL import Image
import numpy as np
from skimage.color import rgb2hsv
from typing import Union
from pathlib import Path

# Pixels at or below these HSV thresholds are treated as near-gray or near-black
MIN_SATURATION = 0.5
MIN_VALUE = 0.5


def load_image(path: Union[str, Path]) -> Image.Image:
    """
    Open and fully decode an image file.

    Args:
        path (str | Path): Path to a PNG/JPEG (or any Pillow-decodable) image.

    Returns:
        PIL.Image.Image: The decoded image.

    Raises:
        FileNotFoundError: If the path does not exist.
        PIL.UnidentifiedImageError: If Pillow cannot identify the format.
        OSError: If the file is truncated or otherwise fails to decode.
    """
    image = Image.open(path)
    image.load()  # Image.open is lazy; surface decode errors here
    return image


def image_to_rgb_array(image: Image.Image) -> np.ndarray:
    """
    Convert a PIL image to an (H, W, 3) float64 array of R/G/B in [0, 1].

    Transparency is composited over black (alpha-premultiplied), so fully
    transparent pixels come out as black and never pass the value filter.
    """
    rgba = np.asarray(image.convert("RGBA"), dtype=np.float64) / 255.0
    return rgba[..., :3] * rgba[..., 3:4]


def extract_samples(
    image: Image.Image,
    min_saturation: float = MIN_SATURATION,
    min_value: float = MIN_VALUE
) -> np.ndarray:
    """
    Collect the working sample set for clustering.

    Every pixel is visited in row-major order and kept only when its HSV
    saturation and value are both strictly above the thresholds.

    Args:
        image (PIL.Image.Image): Decoded input image.
        min_saturation (float): Saturation must be greater than this.
        min_value (float): Value (brightness) must be greater than this.

    Returns:
        np.ndarray: Read-only float64 array of shape (N, 3). N may be 0.
    """
    rgb = image_to_rgb_array(image)
    if rgb.size == 0:
        samples = np.empty((0, 3), dtype=np.float64)
    else:
        hsv = rgb2hsv(rgb)
        keep = (hsv[..., 1] > min_saturation) & (hsv[..., 2] > min_value)
        samples = np.ascontiguousarray(rgb[keep], dtype=np.float64)  # boolean indexing is row-major

    samples.setflags(write=False)
    return samples
