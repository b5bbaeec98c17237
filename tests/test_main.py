"""Tests for the main.py command line."""

from __future__ import annotations

import base64

import main


class TestDraw:
    """Test cases for the draw command."""

    def test_writes_png(self, tmp_path) -> None:
        out = tmp_path / "captcha.png"
        code = main.main(["-q", "draw", "Candy", "-f", "b,l", "--seed", "1", "-o", str(out)])
        assert code == 0
        assert out.read_bytes().startswith(b"\x89PNG")

    def test_base64_output(self, capsys) -> None:
        code = main.main(["-q", "draw", "abc", "-f", "c", "--font-rotation", "0", "--base64"])
        assert code == 0
        data = base64.b64decode(capsys.readouterr().out.strip())
        assert data.startswith(b"\x89PNG")

    def test_random_pair_when_no_fuzzers(self, tmp_path) -> None:
        out = tmp_path / "pair.png"
        assert main.main(["-q", "draw", "hi", "--seed", "3", "-o", str(out)]) == 0
        assert out.exists()

    def test_output_size_matches_text(self, tmp_path) -> None:
        from PIL import Image

        out = tmp_path / "size.png"
        main.main(["-q", "draw", "abcd", "-f", "a", "--font-rotation", "0", "-o", str(out)])
        with Image.open(out) as img:
            assert img.size == (24 * 4, 50)

    def test_unknown_fuzzer_fails(self, tmp_path, capsys) -> None:
        code = main.main(["-q", "draw", "x", "-f", "z", "-o", str(tmp_path / "x.png")])
        assert code == 1
        assert "unknown fuzzer" in capsys.readouterr().err

    def test_bad_color_fails(self, tmp_path, capsys) -> None:
        code = main.main(["-q", "draw", "x", "--color", "red", "-o", str(tmp_path / "x.png")])
        assert code == 1
        assert "Error" in capsys.readouterr().err


class TestHelp:
    """Test cases for the help command."""

    def test_help(self, capsys) -> None:
        assert main.main(["help"]) == 0
        assert "draw" in capsys.readouterr().out

    def test_no_command_prints_help(self, capsys) -> None:
        assert main.main([]) == 0
        assert "gotcha" in capsys.readouterr().out
