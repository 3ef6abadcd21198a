import io
import mmap
import platform
import subprocess
import sys
from pathlib import Path

import pytest

import reporter
from constants import RECORD_FIELDS
from errors import ProbeError
from json_helpers import parse_record
from portability import PORTABILITY, current_target

ROOT = Path(__file__).resolve().parent.parent

common_posix = pytest.mark.skipif(
    not sys.platform.startswith("linux")
    or platform.machine() not in ("x86_64", "aarch64"),
    reason="valores exatos só em Linux x86_64/aarch64",
)


def test_collect_record_has_all_fields():
    record = reporter.collect_record()
    assert tuple(record) == RECORD_FIELDS
    assert all(isinstance(v, int) for v in record.values())


def test_stat_offset_within_bounds():
    record = reporter.collect_record()
    assert 0 <= record["statOffset"]
    assert record["statOffset"] + 8 <= record["statSize"]


def test_report_writes_single_line():
    out = io.StringIO()
    reporter.report(out)
    text = out.getvalue()
    assert text.endswith("\n")
    assert text.count("\n") == 1
    assert parse_record(text) == reporter.collect_record()


def test_report_is_deterministic():
    first, second = io.StringIO(), io.StringIO()
    reporter.report(first)
    reporter.report(second)
    assert first.getvalue() == second.getvalue()


@common_posix
def test_common_posix_values():
    record = reporter.collect_record()
    assert record["O_RDONLY"] == 0
    assert record["O_WRONLY"] == 1
    assert record["O_RDWR"] == 2
    assert record["PROT_READ"] == 1
    assert record["PROT_WRITE"] == 2
    assert record["MAP_SHARED"] == 1
    assert record["MAP_FAILED"] == -1


def test_live_record_matches_known_target():
    target = current_target()
    if target not in PORTABILITY:
        pytest.skip(f"alvo {target} sem registro conhecido")
    assert reporter.collect_record() == PORTABILITY[target]


def test_main_uses_c_program_on_unknown_machine(monkeypatch, capsys):
    calls = []

    def fake_compile():
        calls.append(True)
        return {"statOffset": 48, "statSize": 104}

    monkeypatch.setattr(platform, "machine", lambda: "ppc64le")
    monkeypatch.setattr(reporter, "compile_and_run", fake_compile)

    assert reporter.main() == 0
    captured = capsys.readouterr()
    assert calls == [True]
    assert captured.out.count("\n") == 1
    record = parse_record(captured.out)
    assert record["statOffset"] == 48
    assert record["statSize"] == 104
    assert "ppc64le" in captured.err


def test_main_reports_c_program_failure(monkeypatch, capsys):
    def fail():
        raise ProbeError("Compilador 'cc' não encontrado")

    monkeypatch.setattr(platform, "machine", lambda: "ppc64le")
    monkeypatch.setattr(reporter, "compile_and_run", fail)

    assert reporter.main() == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Compilador 'cc' não encontrado" in captured.err


@pytest.mark.skipif(not hasattr(mmap, "MADV_DONTNEED"), reason="requer madvise")
def test_main_reports_missing_constant(monkeypatch, capsys):
    monkeypatch.delattr(mmap, "MADV_DONTNEED")

    assert reporter.main() == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "mmap.MADV_DONTNEED" in captured.err


def test_cli_ignores_arguments():
    outputs = []
    for args in ([], ["--help", "extra"]):
        result = subprocess.run(
            [sys.executable, str(ROOT / "reporter.py"), *args],
            cwd=ROOT,
            capture_output=True,
            check=True,
        )
        outputs.append(result.stdout)
    assert outputs[0] == outputs[1]
    assert outputs[0].count(b"\n") == 1
    parse_record(outputs[0].decode())
