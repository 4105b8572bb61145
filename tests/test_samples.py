# tests/test_samples.py
import numpy as np
import pytest
from PIL import Image, ImageDraw
from pickup import samples


def test_extract_samples_keeps_only_saturated_bright_pixels():
    img = Image.new("RGB", (4, 1))
    img.putpixel((0, 0), (255, 0, 0))      # saturated, bright -> kept
    img.putpixel((1, 0), (128, 128, 128))  # gray -> dropped (S = 0)
    img.putpixel((2, 0), (100, 0, 0))      # dark red -> dropped (V < 0.5)
    img.putpixel((3, 0), (0, 0, 255))      # saturated, bright -> kept

    result = samples.extract_samples(img)

    assert result.shape == (2, 3)
    assert np.allclose(result[0], [1.0, 0.0, 0.0])
    assert np.allclose(result[1], [0.0, 0.0, 1.0])


def test_extract_samples_is_row_major():
    img = Image.new("RGB", (2, 2))
    img.putpixel((0, 0), (255, 0, 0))
    img.putpixel((1, 0), (0, 255, 0))
    img.putpixel((0, 1), (0, 0, 255))
    img.putpixel((1, 1), (255, 255, 0))

    result = samples.extract_samples(img)

    expected = np.array([
        [1.0, 0.0, 0.0],
        [0.0, 1.0, 0.0],
        [0.0, 0.0, 1.0],
        [1.0, 1.0, 0.0],
    ])
    assert np.allclose(result, expected)


def test_thresholds_are_strict():
    # (254, 127, 127) has S == 0.5 exactly, which is not above the threshold
    img = Image.new("RGB", (2, 1))
    img.putpixel((0, 0), (254, 127, 127))
    img.putpixel((1, 0), (254, 126, 126))
    result = samples.extract_samples(img, min_saturation=0.5, min_value=0.5)
    assert result.shape == (1, 3)
    assert np.allclose(result[0], [254 / 255, 126 / 255, 126 / 255])


def test_all_black_image_yields_no_samples():
    img = Image.new("RGB", (16, 16), color=(0, 0, 0))
    result = samples.extract_samples(img)
    assert result.shape == (0, 3)


def test_samples_are_read_only():
    img = Image.new("RGB", (3, 3), color=(255, 0, 0))
    result = samples.extract_samples(img)
    with pytest.raises(ValueError):
        result[0, 0] = 0.5


def test_transparent_pixels_are_dropped():
    img = Image.new("RGBA", (2, 1))
    img.putpixel((0, 0), (255, 0, 0, 0))      # fully transparent red
    img.putpixel((1, 0), (0, 255, 0, 255))    # opaque green
    result = samples.extract_samples(img)
    assert result.shape == (1, 3)
    assert np.allclose(result[0], [0.0, 1.0, 0.0])


def test_load_image_decodes_file(tmp_path):
    path = tmp_path / "input.png"
    img = Image.new("RGB", (20, 10), color=(10, 200, 30))
    ImageDraw.Draw(img).rectangle([(0, 0), (4, 4)], fill=(255, 0, 255))
    img.save(path)

    loaded = samples.load_image(path)
    assert loaded.size == (20, 10)
    assert samples.extract_samples(loaded).shape[0] == 200


def test_load_image_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        samples.load_image(tmp_path / "nope.png")


def test_load_image_rejects_non_image(tmp_path):
    path = tmp_path / "not_an_image.png"
    path.write_text("definitely not a PNG")
    with pytest.raises(OSError):  # UnidentifiedImageError is an OSError
        samples.load_image(path)
