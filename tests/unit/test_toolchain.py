"""Tests for the cc invocation built by assemble_and_link (no real compiler needed)."""

import subprocess

import pytest

from funcc.config import Target
from funcc.toolchain import ToolchainError, assemble_and_link


def _capture_run(monkeypatch, returncode=0, stderr=""):
    calls = []

    def fake_run(cmd, **kwargs):
        calls.append(cmd)
        return subprocess.CompletedProcess(cmd, returncode, stdout="", stderr=stderr)

    monkeypatch.setattr(subprocess, "run", fake_run)
    return calls


class TestAssembleAndLink:
    def test_elf_links_non_pie(self, monkeypatch, tmp_path):
        calls = _capture_run(monkeypatch)
        out = assemble_and_link("    ret\n", tmp_path / "prog", target=Target.ELF)
        assert out == tmp_path / "prog"
        assert calls[0][:4] == ["cc", "-no-pie", "-o", str(tmp_path / "prog")]
        assert calls[0][-1].endswith("program.s")

    def test_macho_omits_no_pie(self, monkeypatch, tmp_path):
        calls = _capture_run(monkeypatch)
        assemble_and_link("    ret\n", tmp_path / "prog", cc="clang", target=Target.MACHO)
        assert calls[0][:3] == ["clang", "-o", str(tmp_path / "prog")]
        assert "-no-pie" not in calls[0]

    def test_nonzero_exit_raises_with_stderr(self, monkeypatch, tmp_path):
        _capture_run(monkeypatch, returncode=1, stderr="bad instruction")
        with pytest.raises(ToolchainError, match="bad instruction"):
            assemble_and_link("    bogus\n", tmp_path / "prog", target=Target.ELF)
