"""
명령줄 진입점 테스트
"""

import numpy as np
import pytest
from PIL import Image

import main


def test_main_converts_image(tmp_path):
    source = tmp_path / "photo.png"
    Image.new("RGB", (900, 300), (250, 250, 250)).save(source)
    output = tmp_path / "out.png"

    code = main.main([str(source), "-o", str(output), "--style", "outline"])

    assert code == 0
    with Image.open(output) as result:
        assert result.size == (500, 166)
        pixels = np.array(result)
    assert np.all(pixels == 255)


def test_main_full_size(tmp_path):
    source = tmp_path / "photo.png"
    Image.new("RGB", (600, 20), (10, 200, 30)).save(source)
    output = tmp_path / "out.png"

    assert main.main([str(source), "-o", str(output), "--full-size", "--blur", "2"]) == 0
    with Image.open(output) as result:
        assert result.size == (600, 20)


def test_main_rejects_non_image(tmp_path):
    source = tmp_path / "readme.txt"
    source.write_text("hello")
    assert main.main([str(source), "-o", str(tmp_path / "out.png")]) == 1
    assert not (tmp_path / "out.png").exists()


def test_main_rejects_out_of_range_arguments(tmp_path):
    with pytest.raises(SystemExit):
        main.main([str(tmp_path / "photo.png"), "--blur", "21"])
    with pytest.raises(SystemExit):
        main.main([str(tmp_path / "photo.png"), "--contrast", "0"])
