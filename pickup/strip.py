from PIL import Image, ImageDraw
from typing import Optional

from pickup.palette_tools import to_rgb255

BLOCK_WIDTH = 160
STRIP_HEIGHT = 320


def create_strip_image(colors, block_width: int = BLOCK_WIDTH, height: int = STRIP_HEIGHT) -> Optional[Image.Image]:
    """
    Creates a horizontal palette strip PIL Image object.

    Args:
        colors (list or np.ndarray): Palette in display order, each item an R/G/B
                                     triple with channels in [0, 1].
        block_width (int): Width of each color block in pixels.
        height (int): Height of the strip in pixels.

    Returns:
        PIL.Image.Image: RGB image `block_width * len(colors)` wide, or None if
                         the palette is empty.
    """
    num_colors = len(colors)
    if num_colors == 0:
        return None
    if block_width < 1 or height < 1:
        raise ValueError(f"Strip dimensions must be positive, got block_width={block_width}, height={height}.")

    image = Image.new("RGB", (block_width * num_colors, height), color=(0, 0, 0))
    draw = ImageDraw.Draw(image)

    for idx, color in enumerate(colors):
        x_start = idx * block_width
        # rectangle bounds are inclusive
        draw.rectangle(
            [x_start, 0, x_start + block_width - 1, height - 1],
            fill=to_rgb255(color)
        )

    return image
