import json
from pathlib import Path

from PIL import Image

from orchestrator.main import main
from utils import acquire_output_lock


def write_config(tmp_path: Path) -> Path:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "\n".join(
            [
                "paths:",
                f"  logs: \"{(tmp_path / 'logs').as_posix()}\"",
                "export:",
                "  progress_log_interval: 1",
            ]
        ),
        encoding="utf-8",
    )
    return config_path


def write_archive(tmp_path: Path) -> tuple[Path, Path]:
    dump = tmp_path / "objekte.jsonl"
    rows = [
        {"objid": 2, "objparent": 1, "objtype": 1, "objshort": "Cabinet"},
        {"objid": 3, "objparent": 2, "objtype": 2, "objshort": "Contracts/2020"},
        {"objid": 10, "objparent": 3, "objtype": 255, "objshort": "Lease", "objdoc": 3101},
        {"objid": 11, "objparent": 3, "objtype": 255, "objshort": "No file", "objdoc": 3102},
    ]
    dump.write_text("\n".join(json.dumps(row) for row in rows) + "\n", encoding="utf-8")
    files = tmp_path / "Archivdata"
    bucket = files / "DMS_1" / "UP000003"
    bucket.mkdir(parents=True)
    Image.new("RGB", (10, 10), color="white").save(bucket / "00000C1D.TIF", format="TIFF")
    return dump, files


def test_cli_exports_and_writes_report(tmp_path: Path) -> None:
    dump, files = write_archive(tmp_path)
    output = tmp_path / "export"

    exit_code = main([str(dump), str(files), "-o", str(output), "--config", str(write_config(tmp_path))])

    assert exit_code == 0
    assert (output / "Contracts-2020" / "Lease.pdf").exists()
    reports = list((tmp_path / "logs").glob("export_report_*.json"))
    assert len(reports) == 1
    report = json.loads(reports[0].read_text(encoding="utf-8"))
    assert report["exported"] == 1
    assert report["error_count"] == 1
    assert report["errors"][0]["document_id"] == 11


def test_cli_rejects_missing_inputs(tmp_path: Path) -> None:
    config_path = write_config(tmp_path)

    exit_code = main([str(tmp_path / "missing.mdb"), str(tmp_path), "--config", str(config_path)])

    assert exit_code == 1


def test_cli_refuses_locked_output(tmp_path: Path) -> None:
    dump, files = write_archive(tmp_path)
    output = tmp_path / "export"
    lock = acquire_output_lock(output)
    try:
        exit_code = main([str(dump), str(files), "-o", str(output), "--config", str(write_config(tmp_path))])
    finally:
        lock.release()

    assert exit_code == 1
    assert not (output / "exported_ids.txt").exists()
