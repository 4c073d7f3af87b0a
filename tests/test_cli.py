import numpy as np
import pytest
from PIL import Image

from palette_kmeans.cli import main, parse_args
from palette_kmeans.image_io import load_image


def test_default_k_is_four():
    args = parse_args(["-i", "in.png", "-o", "out.png"])
    assert args.k == 4


@pytest.mark.parametrize("k", ["0", "-3", "abc"])
def test_invalid_k_is_a_usage_error(k):
    with pytest.raises(SystemExit) as excinfo:
        parse_args(["-i", "in.png", "-o", "out.png", "-k", k])
    assert excinfo.value.code == 2


def test_quantizes_image(write_image, tmp_path, rng, capsys):
    pixels = rng.integers(0, 256, size=(8, 12, 3)).astype(np.uint8)
    source = write_image(pixels)
    target = tmp_path / "out.png"

    code = main(["--input", str(source), "--output", str(target), "-k", "3"])

    assert code == 0
    output = load_image(target)
    assert (output.width, output.height) == (12, 8)
    assert len(np.unique(output.samples, axis=0)) <= 3
    assert "3 colors" in capsys.readouterr().out


def test_k_larger_than_image_is_fatal(write_image, tmp_path, primaries_image, capsys):
    source = write_image(primaries_image)
    target = tmp_path / "out.png"

    code = main(["-i", str(source), "-o", str(target), "-k", "5"])

    assert code == 1
    assert not target.exists()
    assert "exceeds" in capsys.readouterr().err


def test_missing_input_is_fatal(tmp_path, capsys):
    code = main(["-i", str(tmp_path / "missing.png"), "-o", str(tmp_path / "o.png")])

    assert code == 1
    assert "error:" in capsys.readouterr().err


def test_unwritable_output_is_fatal(write_image, tmp_path, primaries_image, capsys):
    source = write_image(primaries_image)

    code = main(["-i", str(source), "-o", str(tmp_path / "no" / "dir" / "o.png")])

    assert code == 1
    assert "Failed to write" in capsys.readouterr().err


def test_oversized_image_is_fatal(write_image, tmp_path, primaries_image, monkeypatch, capsys):
    source = write_image(primaries_image)
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1)

    code = main(["-i", str(source), "-o", str(tmp_path / "o.png")])

    assert code == 1
    assert "error:" in capsys.readouterr().err
