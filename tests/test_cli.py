from __future__ import annotations

import json

import pytest
from PIL import Image

from design_thumbnail import __version__
from design_thumbnail.cli import format_color, main


@pytest.fixture
def source_file(tmp_path):
    path = tmp_path / "shirt.png"
    image = Image.new("RGB", (120, 60), (10, 20, 30))
    image.paste((250, 250, 0), (40, 10, 80, 50))
    image.save(path)
    return path


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("DESIGNTHUMB_CROP_SIZE", raising=False)
    monkeypatch.delenv("DESIGNTHUMB_BUCKET", raising=False)


def test_format_color() -> None:
    assert format_color((10, 20, 30, 255)) == "#0a141eff"


def test_version(capsys) -> None:
    main(["--version"])
    assert capsys.readouterr().out.strip() == __version__


def test_background_command(source_file, capsys) -> None:
    main(["background", str(source_file)])
    assert capsys.readouterr().out.strip() == "#0a141eff"


def test_render_command_writes_every_profile(source_file, tmp_path, capsys) -> None:
    profiles = tmp_path / "profiles.json"
    profiles.write_text(
        json.dumps(
            {
                "tiny": {"size": 50, "path": "{model}/{id}/50.jpg"},
                "original": {"size": 0, "path": "{model}/{id}/original.png", "format": "png"},
            }
        )
    )
    outdir = tmp_path / "out"

    main(["render", str(source_file), "--outdir", str(outdir), "--profiles", str(profiles), "--workers", "2"])

    assert Image.open(outdir / "shirt_tiny.jpg").size == (50, 50)
    assert Image.open(outdir / "shirt_original.png").size == (120, 60)
    assert "[background] #0a141eff" in capsys.readouterr().out


def test_render_command_exits_non_zero_on_profile_failure(source_file, tmp_path) -> None:
    profiles = tmp_path / "profiles.json"
    profiles.write_text(
        json.dumps(
            {
                "ok": {"size": 20, "path": "a.jpg"},
                "bad": {"size": -3, "path": "b.jpg"},
            }
        )
    )
    outdir = tmp_path / "out"

    with pytest.raises(SystemExit) as exc:
        main(["render", str(source_file), "--outdir", str(outdir), "--profiles", str(profiles)])

    assert exc.value.code == 1
    assert (outdir / "shirt_ok.jpg").exists()


def test_process_command_with_local_root(source_file, tmp_path) -> None:
    root = tmp_path / "store"
    key_dir = root / "uploads" / "designs" / "9"
    key_dir.mkdir(parents=True)
    (key_dir / "shirt.png").write_bytes(source_file.read_bytes())

    main(["process", "uploads", "designs/9/shirt.png", "--root", str(root), "--output-bucket", "thumbs"])

    assert Image.open(root / "thumbs" / "designs" / "9" / "300.jpg").size == (300, 300)
    assert Image.open(root / "thumbs" / "designs" / "9" / "1200.jpg").size == (1200, 1200)


def test_bad_key_exits_with_error(tmp_path) -> None:
    with pytest.raises(SystemExit) as exc:
        main(["process", "uploads", "avatars/1/x.png", "--root", str(tmp_path)])
    assert exc.value.code == 1


def test_missing_source_exits_with_error(tmp_path) -> None:
    with pytest.raises(SystemExit) as exc:
        main(["background", str(tmp_path / "missing.png")])
    assert exc.value.code == 2


def test_missing_stored_object_exits_with_error(tmp_path, capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        main(["process", "uploads", "designs/1/missing.png", "--root", str(tmp_path)])
    assert exc.value.code == 1
    assert "uploads/designs/1/missing.png" in capsys.readouterr().err
