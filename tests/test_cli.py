from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

import numpy as np
from PIL import Image
import pytest

from color_reference.cli import main

REPO_ROOT = Path(__file__).resolve().parents[1]


def test_cli_extract_smoke(tmp_path):
    image = np.zeros((80, 80, 3), dtype=np.uint8)
    image[:, :] = [30, 120, 210]
    image_path = tmp_path / "cli.png"
    Image.fromarray(image, mode="RGB").save(image_path)

    catalog_path = tmp_path / "catalog.csv"
    catalog_path.write_text(
        "id,brand,name,code,hex\n1,Acme,Azure,AC-AZURE,#1E78D2\n", encoding="utf-8"
    )
    out_path = tmp_path / "result.json"

    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(
        [str(REPO_ROOT / "src"), env.get("PYTHONPATH", "")]
    )
    cmd = [
        sys.executable,
        "-m",
        "color_reference",
        "--catalog",
        str(catalog_path),
        "--out",
        str(out_path),
        "extract",
        "--image",
        str(image_path),
        "--max-colors",
        "1",
    ]

    completed = subprocess.run(
        cmd, cwd=REPO_ROOT, env=env, check=True, capture_output=True, text=True
    )

    assert completed.returncode == 0
    payload = json.loads(out_path.read_text(encoding="utf-8"))
    assert payload["colors"] == ["#1E78D2"]
    assert payload["matches"][0]["name"] == "Azure"
    assert payload["matches"][0]["accuracy"] == 100.0


def test_cli_match_prints_json(capsys):
    main(["--catalog", "pencils", "match", "#c41e3a", "--top-k", "3"])

    payload = json.loads(capsys.readouterr().out)
    assert payload["target"] == "#C41E3A"
    assert len(payload["matches"]) == 3
    assert payload["matches"][0]["code"] == "PC924"


def test_cli_mix_with_pigment_file(tmp_path, capsys):
    pigments = tmp_path / "pigments.csv"
    pigments.write_text("name,hex\nWhite,#FFFFFF\nBlack,#000000\n", encoding="utf-8")

    main(["mix", "#808080", "--pigments", str(pigments)])

    payload = json.loads(capsys.readouterr().out)
    assert payload["medium"] == "custom"
    assert payload["mixes"][0]["hex"] == "#808080"
    assert payload["mixes"][0]["recipe"] == "1 part White, 1 part Black"


def test_cli_catalog_and_describe(capsys):
    main(["--catalog", "oil_paints", "catalog", "--search", "blue"])
    payload = json.loads(capsys.readouterr().out)
    assert [entry["code"] for entry in payload["entries"]] == ["OP003", "OP011"]

    main(["describe", "#000080"])
    assert json.loads(capsys.readouterr().out)["name"] == "Blue"


def test_cli_reports_bad_color():
    with pytest.raises(SystemExit) as exc_info:
        main(["match", "#F00"])
    assert exc_info.value.code == 2


def test_cli_reports_unknown_medium():
    with pytest.raises(SystemExit):
        main(["mix", "#808080", "--medium", "gouache"])


def test_cli_catalog_lists_brands(capsys):
    main(["--catalog", "pencils", "catalog", "--brands"])

    payload = json.loads(capsys.readouterr().out)
    assert payload == {"brands": ["Prismacolor", "Faber-Castell", "Caran d'Ache"]}
