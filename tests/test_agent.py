import json
import os

from scorecard.agent import main


def test_cli_ranks_and_writes_json(tmp_path, scorecard_bytes):
    book = tmp_path / "Scorecard Enero.xlsx"
    book.write_bytes(scorecard_bytes)
    out = tmp_path / "scorecard.json"

    code = main([str(book), "--mode", "normalized", "--json", str(out), "--logs",
                 "--log-dir", str(tmp_path)])

    assert code == 0
    payload = json.loads(out.read_text(encoding="utf-8"))
    assert [u["id"] for u in payload["units"]][:2] == ["belisario", "cabra_andaluz"]
    assert "super_8_y_cien_fuegos" in payload["roi_tir"]
    assert any(name.startswith("scorecard_Scorecard Enero_")
               for name in os.listdir(tmp_path / "Logs"))


def test_cli_filters_run_cleanly(tmp_path, scorecard_bytes):
    book = tmp_path / "book.xlsx"
    book.write_bytes(scorecard_bytes)

    assert main([str(book), "--type", "disco", "--search", "nothing-matches"]) == 0


def test_cli_missing_file(tmp_path):
    assert main([str(tmp_path / "missing.xlsx")]) == 1


def test_cli_workbook_without_scorecard_sheets(tmp_path, make_workbook):
    book = tmp_path / "other.xlsx"
    book.write_bytes(make_workbook({"Hoja1": [["nada"]]}))

    assert main([str(book)]) == 1


def test_cli_unwritable_json_path(tmp_path, scorecard_bytes):
    book = tmp_path / "book.xlsx"
    book.write_bytes(scorecard_bytes)

    assert main([str(book), "--json", str(tmp_path / "no-such-dir" / "out.json")]) == 1
