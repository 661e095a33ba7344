import io
import sys
from pathlib import Path

from xml_schema_infer.cli import main

FIXTURE = Path(__file__).resolve().parent / "fixtures" / "xml" / "books.xml"


def test_struct_definitions_to_stdout(capsys):
    assert main(["-G", "-t", str(FIXTURE)]) == 0
    out = capsys.readouterr().out
    assert out.startswith("type XCatalog struct {")
    assert "AttrAvailable bool" in out


def test_conversion_code_embeds_absolute_source(capsys):
    assert main(["-W", "-p", str(FIXTURE)]) == 0
    out = capsys.readouterr().out
    assert f'var filename = "{FIXTURE}"' in out
    assert "json.MarshalIndent" in out


def test_naming_flags(capsys):
    assert main(["-G", "-e", "Doc", "-s", "T", "-a", "At", str(FIXTURE)]) == 0
    out = capsys.readouterr().out
    assert "type DocBookT struct {" in out
    assert "AtId string" in out


def test_java_project_written(tmp_path, capsys):
    base = tmp_path / "out"
    assert main(["-J", "-D", str(base), "-k", "books", str(FIXTURE)]) == 0

    assert (base / "pom.xml").exists()
    assert (base / "src/main/java/io/xmlschemainfer/books/xml/XBook.java").exists()
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "✓" in captured.err


def test_reads_standard_input(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(b"<r><a/></r>")))
    assert main(["-W", "-c"]) == 0
    out = capsys.readouterr().out
    assert 'var filename = "<stdin>"' in out


def test_output_mode_required(capsys):
    assert main([str(FIXTURE)]) == 2
    assert "✗" in capsys.readouterr().err


def test_output_modes_mutually_exclusive(capsys):
    assert main(["-G", "-J", str(FIXTURE)]) == 2
    assert "mutually exclusive" in capsys.readouterr().err


def test_input_required(capsys):
    assert main(["-G"]) == 2
    assert "Missing XML source" in capsys.readouterr().err


def test_stdin_and_file_conflict(capsys):
    assert main(["-G", "-c", str(FIXTURE)]) == 2


def test_invalid_prefix_is_configuration_error(capsys):
    assert main(["-G", "-e", "lower", str(FIXTURE)]) == 2


def test_missing_file_fails(tmp_path, capsys):
    assert main(["-G", str(tmp_path / "missing.xml")]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("✗ Cannot open")


def test_malformed_input_writes_nothing(tmp_path, capsys):
    source = tmp_path / "bad.xml"
    source.write_text("<r><a></r>")
    assert main(["-G", str(source)]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Malformed XML" in captured.err


def test_java_output_untouched_on_failure(tmp_path, capsys):
    base = tmp_path / "out"
    base.mkdir()
    (base / "keep.txt").write_text("keep")
    source = tmp_path / "bad.xml"
    source.write_text("<r>")

    assert main(["-J", "-D", str(base), str(source)]) == 1
    assert (base / "keep.txt").exists()
