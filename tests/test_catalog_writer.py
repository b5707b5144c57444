from domains.semconv.catalog_writer import CatalogWriter
from domains.semconv.constant_emitter import RenderedFile


def test_write_creates_nested_files(tmp_path):
    writer = CatalogWriter(str(tmp_path / "out"))
    written = writer.write(
        [RenderedFile("metric.go", "package semconv\n"), RenderedFile("httpconv/metric.go", "package httpconv\n")]
    )
    assert written == [str(tmp_path / "out" / "metric.go"), str(tmp_path / "out" / "httpconv" / "metric.go")]
    assert (tmp_path / "out" / "httpconv" / "metric.go").read_text(encoding="utf-8") == "package httpconv\n"
    # no temporary files left next to the outputs
    assert sorted(p.name for p in (tmp_path / "out").iterdir()) == ["httpconv", "metric.go"]


def test_write_replaces_existing_file(tmp_path):
    target = tmp_path / "metric.go"
    target.write_text("old\n", encoding="utf-8")
    CatalogWriter(str(tmp_path)).write([RenderedFile("metric.go", "new\n")])
    assert target.read_text(encoding="utf-8") == "new\n"


def test_check_reports_nothing_when_up_to_date(tmp_path):
    files = [RenderedFile("metric.go", "package semconv\n")]
    writer = CatalogWriter(str(tmp_path))
    writer.write(files)
    assert writer.check(files) == []


def test_check_reports_missing_file(tmp_path):
    [drift] = CatalogWriter(str(tmp_path)).check([RenderedFile("metric.go", "package semconv\n")])
    assert drift.missing
    assert drift.path == str(tmp_path / "metric.go")
    assert "+package semconv" in drift.diff


def test_check_reports_unified_diff(tmp_path):
    (tmp_path / "metric.go").write_text('const A = "a"\nconst B = "b"\n', encoding="utf-8")
    [drift] = CatalogWriter(str(tmp_path)).check([RenderedFile("metric.go", 'const A = "a"\nconst B = "c"\n')])
    assert not drift.missing
    assert drift.diff.startswith("--- a/metric.go\n+++ b/metric.go\n")
    assert '-const B = "b"\n' in drift.diff
    assert '+const B = "c"\n' in drift.diff


def test_write_removes_generated_files_no_longer_rendered(tmp_path):
    writer = CatalogWriter(str(tmp_path))
    writer.write([RenderedFile("httpconv/metric.go", "package httpconv\n"), RenderedFile("dbconv/metric.go", "package dbconv\n")])
    (tmp_path / "dbconv" / "notes.txt").write_text("kept\n", encoding="utf-8")
    (tmp_path / "systemconv").mkdir()
    (tmp_path / "systemconv" / "metric.go").write_text("package systemconv\n", encoding="utf-8")
    (tmp_path / "other").mkdir()
    (tmp_path / "other" / "metric.go").write_text("package other\n", encoding="utf-8")

    writer.write([RenderedFile("httpconv/metric.go", "package httpconv\n")])

    assert not (tmp_path / "systemconv").exists()
    assert not (tmp_path / "dbconv" / "metric.go").exists()
    assert (tmp_path / "dbconv" / "notes.txt").exists()
    assert (tmp_path / "other" / "metric.go").exists()


def test_write_single_file_replaces_split_layout(tmp_path):
    writer = CatalogWriter(str(tmp_path))
    writer.write([RenderedFile("httpconv/metric.go", "package httpconv\n")])
    writer.write([RenderedFile("metric.go", "package semconv\n")])
    assert sorted(p.name for p in tmp_path.iterdir()) == ["metric.go"]


def test_stale_files_ignore_other_targets(tmp_path):
    (tmp_path / "httpconv").mkdir()
    (tmp_path / "httpconv" / "metric.py").write_text("# python\n", encoding="utf-8")
    writer = CatalogWriter(str(tmp_path))
    assert writer.stale_files([RenderedFile("metric.go", "package semconv\n")]) == []


def test_check_reports_stale_file(tmp_path):
    files = [RenderedFile("httpconv/metric.go", "package httpconv\n")]
    writer = CatalogWriter(str(tmp_path))
    writer.write(files)
    (tmp_path / "systemconv").mkdir()
    (tmp_path / "systemconv" / "metric.go").write_text("package systemconv\n", encoding="utf-8")

    [drift] = writer.check(files)
    assert drift.stale
    assert drift.path == str(tmp_path / "systemconv" / "metric.go")
    assert drift.diff.startswith("--- a/systemconv/metric.go\n+++ /dev/null\n")
    assert "-package systemconv\n" in drift.diff
