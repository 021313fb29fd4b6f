import json
import logging

import pytest

fitz = pytest.importorskip("pymupdf")

from pagediff.__main__ import main


def _make_pdf(path, squares=(), pages=1):
    doc = fitz.open()
    for _ in range(pages):
        page = doc.new_page(width=100, height=100)
        for rect in squares:
            page.draw_rect(fitz.Rect(*rect), color=(1, 0, 0), fill=(1, 0, 0))
    doc.save(str(path))
    doc.close()


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    package_logger = logging.getLogger("pagediff")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


@pytest.fixture
def pdfs(tmp_path, monkeypatch):
    for name in ("DPI", "CHANNEL_TOLERANCE", "GRAYSCALE", "MARK_DIFFERENCES", "SKIP_IDENTICAL"):
        monkeypatch.delenv(f"PAGEDIFF_{name}", raising=False)
    monkeypatch.chdir(tmp_path)
    blank = tmp_path / "blank.pdf"
    blank_copy = tmp_path / "blank_copy.pdf"
    square = tmp_path / "square.pdf"
    _make_pdf(blank)
    _make_pdf(blank_copy)
    _make_pdf(square, squares=[(5, 5, 15, 15)])
    return blank, blank_copy, square


def test_identical_exit_code(pdfs):
    blank, blank_copy, _ = pdfs
    assert main(["--dpi=72", str(blank), str(blank_copy)]) == 0


def test_different_exit_code(pdfs):
    blank, _, square = pdfs
    assert main(["--dpi=72", "--channel-tolerance=0", str(blank), str(square)]) == 1


def test_verbose_reports_pages(pdfs, capsys):
    blank, _, square = pdfs
    assert main(["-v", "--dpi=72", str(blank), str(square)]) == 1
    out = capsys.readouterr().out
    assert "page 1 differs" in out
    assert "1 of 1 pages differ." in out


def test_quiet_by_default(pdfs, capsys):
    blank, _, square = pdfs
    main(["--dpi=72", str(blank), str(square)])
    assert capsys.readouterr().out == ""


@pytest.mark.parametrize(
    "option",
    ["--dpi=0", "--dpi=2401", "--dpi=abc", "--channel-tolerance=-1", "--channel-tolerance=256"],
)
def test_out_of_range_options(pdfs, option, capsys):
    blank, blank_copy, _ = pdfs
    with pytest.raises(SystemExit) as excinfo:
        main([option, str(blank), str(blank_copy)])
    assert excinfo.value.code == 2
    assert capsys.readouterr().err


def test_insufficient_arguments(pdfs):
    blank, _, _ = pdfs
    with pytest.raises(SystemExit) as excinfo:
        main([str(blank)])
    assert excinfo.value.code == 2


def test_unknown_option(pdfs):
    blank, blank_copy, _ = pdfs
    with pytest.raises(SystemExit) as excinfo:
        main(["--frobnicate", str(blank), str(blank_copy)])
    assert excinfo.value.code == 2


def test_help(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--help"])
    assert excinfo.value.code == 0
    assert "--channel-tolerance" in capsys.readouterr().out


def test_invalid_environment_default(pdfs, monkeypatch):
    blank, blank_copy, _ = pdfs
    monkeypatch.setenv("PAGEDIFF_DPI", "9000")
    with pytest.raises(SystemExit) as excinfo:
        main([str(blank), str(blank_copy)])
    assert excinfo.value.code == 2


def test_environment_default_is_used(pdfs, monkeypatch):
    blank, _, square = pdfs
    monkeypatch.setenv("PAGEDIFF_CHANNEL_TOLERANCE", "255")
    assert main(["--dpi=72", str(blank), str(square)]) == 0


def test_missing_document(pdfs, tmp_path, capsys):
    blank, _, _ = pdfs
    missing = tmp_path / "missing.pdf"
    assert main([str(blank), str(missing)]) == 3
    err = capsys.readouterr().err
    assert "Error opening" in err
    assert str(missing) in err


def test_output_diff_and_report(pdfs, tmp_path):
    blank, _, square = pdfs
    out = tmp_path / "diff.pdf"
    report = tmp_path / "reports" / "result.json"

    code = main(
        [
            "-m",
            "-g",
            "--dpi=72",
            f"--output-diff={out}",
            f"--report={report}",
            str(blank),
            str(square),
        ]
    )

    assert code == 1
    with fitz.open(str(out)) as doc:
        assert doc.page_count == 1
        assert len(doc[0].get_images()) == 1
    data = json.loads(report.read_text(encoding="utf-8"))
    assert data["identical"] is False
    assert data["differences"] == [True]
    assert data["params"]["grayscale"] is True
    assert data["params"]["mark_differences"] is True
    assert data["files"] == [str(blank), str(square)]


def test_page_count_mismatch_report(pdfs, tmp_path):
    blank, _, _ = pdfs
    longer = tmp_path / "longer.pdf"
    _make_pdf(longer, pages=3)
    report = tmp_path / "result.json"

    assert main(["--dpi=72", f"--report={report}", str(blank), str(longer)]) == 1

    data = json.loads(report.read_text(encoding="utf-8"))
    assert data["pages_differ"] == 2
    assert data["pages_total"] == 3
    assert data["differences"] == [False, True, True]


def test_thumbnails_option(pdfs, tmp_path):
    blank, _, square = pdfs
    thumbs = tmp_path / "thumbs"
    assert main(["--dpi=72", f"--thumbnails={thumbs}", str(blank), str(square)]) == 1
    assert (thumbs / "page-0001.png").exists()
