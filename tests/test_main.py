from __future__ import annotations

from pathlib import Path

import pytest

from linkpromise.__main__ import main, summarize


def test_summarize() -> None:
    assert summarize("hello world\nsecond line here\n") == (
        "lines: 2\nwords: 5\ncharacters: 29\nfirst line: HELLO WORLD"
    )


def test_summarize_empty_text() -> None:
    assert summarize("") == "lines: 0\nwords: 0\ncharacters: 0\nfirst line: "


def test_main_prints_summary(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    path = tmp_path / "input.txt"
    path.write_text("one two\nthree\n", encoding="utf-8")
    main([str(path)])
    out, err = capsys.readouterr()
    assert out.splitlines() == [
        "lines: 2",
        "words: 3",
        "characters: 14",
        "first line: ONE TWO",
    ]
    assert err == ""


def test_main_reports_missing_file(
    tmp_path: Path, capsys: pytest.CaptureFixture
) -> None:
    with pytest.raises(SystemExit) as exc:
        main([str(tmp_path / "missing.txt")])

    assert exc.value.code == 1
    out, err = capsys.readouterr()
    assert out == ""
    assert err.startswith("error: ")
    assert "missing.txt" in err
