from pathlib import Path
from PIL import Image, PngImagePlugin
from typing import Optional, Dict, Union
import re

PNG_METADATA_PREFIX = "pickupcolor:"
OUTPUT_SUFFIX = "-pickupcolor"


def derive_output_path(input_path: Union[str, Path], cluster_count: int) -> Path:
    """`<dir>/<stem>-pickupcolor<k>.png`, next to the input image."""
    input_path = Path(input_path)
    return input_path.with_name(f"{input_path.stem}{OUTPUT_SUFFIX}{cluster_count}.png")


def _metadata_keyword(key: str) -> str:
    """Keyword for one metadata entry, e.g. "User Note" -> "pickupcolor:User_Note"."""
    name = "_".join(re.findall(r"[A-Za-z0-9]+", key)) or "value"
    if name[0].isdigit():
        name = "_" + name
    # tEXt keywords are limited to 79 bytes, prefix included
    return f"{PNG_METADATA_PREFIX}{name}"[:79]


def save_palette_png(
    image_to_save: Image.Image,
    output_path: Union[str, Path],
    command_line_invocation: Optional[str] = None,
    additional_metadata: Optional[Dict[str, str]] = None
) -> Path:
    """
    Saves a PIL Image object as a PNG file, embedding specified metadata.

    Existing files are overwritten. Output is deterministic: the same image and
    metadata always produce the same bytes.

    Raises:
        OSError: If the file cannot be written.
    """
    output_path = Path(output_path)

    if not output_path.parent.exists():
        output_path.parent.mkdir(parents=True, exist_ok=True)

    png_info = PngImagePlugin.PngInfo()

    if command_line_invocation:
        png_info.add_text(f"{PNG_METADATA_PREFIX}command_line", command_line_invocation)

    png_info.add_text("Software", "pickupcolor")

    if additional_metadata:
        for key, value in additional_metadata.items():
            png_info.add_text(_metadata_keyword(key), str(value))

    image_to_save.save(output_path, "PNG", pnginfo=png_info)
    return output_path


def read_palette_metadata(path: Union[str, Path]) -> Dict[str, str]:
    """Return the pickupcolor tEXt entries of a PNG, with the prefix stripped."""
    with Image.open(path) as img:
        return {
            key[len(PNG_METADATA_PREFIX):]: value
            for key, value in img.info.items()
            if isinstance(key, str) and key.startswith(PNG_METADATA_PREFIX)
        }
