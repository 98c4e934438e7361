import json
from pathlib import Path

from PIL import Image

from archive import ArchiveObject, ArchiveReader, BlobLocator, HierarchyResolver
from conversion import ConversionRegistry, ImageConverter
from export import BlobNotFoundError, DocumentExportError, ExportDriver, ExportOrganizer
from ledger import ExportLedger


def write_dump(path: Path, rows: list[dict]) -> None:
    path.write_text("\n".join(json.dumps(row) for row in rows) + "\n", encoding="utf-8")


def write_blob(files_root: Path, relative: str, tiff: bool = True) -> Path:
    blob = files_root / relative
    blob.parent.mkdir(parents=True, exist_ok=True)
    if tiff:
        Image.new("RGB", (12, 12), color=(0, 128, 0)).save(blob, format="TIFF")
    else:
        blob.write_bytes(b"plain text content")
    return blob


def build_driver(tmp_path: Path, folders: dict[int, ArchiveObject]) -> ExportDriver:
    output = tmp_path / "out"
    registry = ConversionRegistry.with_image_conversion(ImageConverter())
    organizer = ExportOrganizer(output, registry)
    organizer.initialize()
    return ExportDriver(
        HierarchyResolver(folders),
        BlobLocator(tmp_path / "files"),
        ExportLedger(output / "exported_ids.txt"),
        organizer,
        progress_log_interval=1,
    )


def test_end_to_end_three_level_tree(tmp_path: Path) -> None:
    dump = tmp_path / "objekte.jsonl"
    write_dump(
        dump,
        [
            {"objid": 2, "objparent": 1, "objtype": 1, "objshort": "Root", "objstatus": 0},
            {"objid": 3, "objparent": 2, "objtype": 2, "objshort": "A", "objstatus": 0},
            {"objid": 4, "objparent": 3, "objtype": 3, "objshort": "B", "objstatus": 0},
            {"objid": 10, "objparent": 4, "objtype": 255, "objshort": "Doc", "objstatus": 0, "objdoc": 3101},
        ],
    )
    write_blob(tmp_path / "files", "DMS_1/UP000003/00000C1D.TIF")
    reader = ArchiveReader(dump)
    driver = build_driver(tmp_path, reader.folders())

    stats = driver.run(reader.documents())

    exported = tmp_path / "out" / "A" / "B" / "Doc.pdf"
    assert stats.exported == 1
    assert stats.errors == []
    assert exported.read_bytes().startswith(b"%PDF")
    assert (tmp_path / "out" / "exported_ids.txt").read_text(encoding="utf-8") == "10\n"


def test_rerun_skips_exported_documents(tmp_path: Path) -> None:
    folders = {2: ArchiveObject(id=2, parent_id=1, kind=1, label="Cabinet")}
    documents = [
        ArchiveObject(id=20, parent_id=2, kind=300, label="Same", blob_id=1),
        ArchiveObject(id=21, parent_id=2, kind=300, label="Same", blob_id=2),
    ]
    write_blob(tmp_path / "files", "DMS_1/UP000000/00000001.tif")
    write_blob(tmp_path / "files", "DMS_1/UP000000/00000002.txt", tiff=False)

    first = build_driver(tmp_path, folders).run(documents)
    second = build_driver(tmp_path, folders).run(documents)

    assert first.exported == 2
    assert second.exported == 0
    assert second.already_exported == 2
    assert sorted(path.name for path in (tmp_path / "out").iterdir()) == [
        "Same.pdf",
        "Same.txt",
        "exported_ids.txt",
    ]


def test_duplicate_names_get_suffixes(tmp_path: Path) -> None:
    folders = {
        2: ArchiveObject(id=2, parent_id=1, kind=1, label="Cabinet"),
        3: ArchiveObject(id=3, parent_id=2, kind=1, label="F"),
    }
    documents = [
        ArchiveObject(id=30, parent_id=3, kind=300, label="name", blob_id=1),
        ArchiveObject(id=31, parent_id=3, kind=300, label="name:", blob_id=1),
    ]
    write_blob(tmp_path / "files", "DMS_1/UP000000/00000001.TIF")

    stats = build_driver(tmp_path, folders).run(documents)

    assert stats.exported == 2
    assert (tmp_path / "out" / "F" / "name.pdf").exists()
    assert (tmp_path / "out" / "F" / "name_1.pdf").exists()


def test_missing_blobs_and_failures_are_per_document(tmp_path: Path) -> None:
    folders: dict[int, ArchiveObject] = {}
    documents = [
        ArchiveObject(id=40, parent_id=2, kind=300, label="empty"),
        ArchiveObject(id=41, parent_id=2, kind=300, label="missing", blob_id=5000),
        ArchiveObject(id=42, parent_id=2, kind=300, label="broken", blob_id=7),
        ArchiveObject(id=43, parent_id=2, kind=300, label="fine", blob_id=8),
    ]
    broken = tmp_path / "files" / "DMS_1" / "UP000000" / "00000007.TIF"
    broken.parent.mkdir(parents=True)
    broken.write_bytes(b"not a tiff")
    write_blob(tmp_path / "files", "DMS_1/UP000000/00000008.TIF")

    stats = build_driver(tmp_path, folders).run(documents)

    assert stats.total == 4
    assert stats.skipped_no_content == 1
    assert stats.exported == 1
    assert [error.document_id for error in stats.errors] == [41, 42]
    missing, failed = stats.errors
    assert isinstance(missing, BlobNotFoundError)
    assert missing.source_path == tmp_path / "files" / "DMS_1" / "UP000004" / "00001388"
    assert missing.target_path == "missing"
    assert isinstance(failed, DocumentExportError)
    assert failed.source_path == broken
    assert "42" in str(failed)
    ledger = ExportLedger(tmp_path / "out" / "exported_ids.txt")
    assert ledger.is_exported(43) and not ledger.is_exported(42)
    assert stats.to_dict()["error_count"] == 2


def test_limit_stops_after_exports(tmp_path: Path) -> None:
    documents = [
        ArchiveObject(id=50 + index, parent_id=2, kind=300, label=f"d{index}", blob_id=9)
        for index in range(3)
    ]
    write_blob(tmp_path / "files", "DMS_1/UP000000/00000009.txt", tiff=False)
    driver = build_driver(tmp_path, {})
    driver.limit = 2

    stats = driver.run(documents)

    assert stats.exported == 2
    assert stats.total == 2
