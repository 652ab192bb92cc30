"""Tests for the go/git adapters, with subprocess mocked out."""

import json
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from pcritical.errors import BuildError, MeasurementError, ResolutionError, RevisionError
from pcritical.toolchain.golist import GoListResolver, go_root
from pcritical.toolchain.gosize import GoSizeResolver, count_text_symbols
from pcritical.toolchain.revision import environment_fingerprint, make_fingerprint, revision_of

GO_LIST_JSON = json.dumps({
    "Dir": "/src/repo/cmd/tool",
    "ImportPath": "example.com/repo/cmd/tool",
    "Name": "main",
    "Root": "/src/repo",
    "Imports": ["C", "example.com/repo/internal/x", "fmt"],
    "Deps": ["errors", "fmt"],
})

NM_OUTPUT = """\
  4a2c0 T main.main
         U fmt.Println
  4a300 t type..eq.main.pair
  5b000 R go:string.hello
  5b100 D main.counter
pkg.a(_go_.o):  4a400 T main.helper
"""


def _done(args, stdout=""):
    return subprocess.CompletedProcess(args, 0, stdout=stdout, stderr="")


def _failed(args, stderr="boom"):
    return subprocess.CalledProcessError(1, args, output="", stderr=stderr)


# ── go list ───────────────────────────────────────────────────

class TestGoListResolver:
    def test_parses_metadata(self):
        with patch("pcritical.toolchain.golist.subprocess.run",
                   return_value=_done([], GO_LIST_JSON)) as run:
            info = GoListResolver().resolve("./cmd/tool")
        assert run.call_args.args[0] == ["go", "list", "-json", "./cmd/tool"]
        assert info.import_path == "example.com/repo/cmd/tool"
        assert info.root == "/src/repo"
        assert info.standard is False
        assert info.imports == ["C", "example.com/repo/internal/x", "fmt"]

    def test_standard_package_without_imports(self):
        payload = json.dumps({"ImportPath": "unsafe", "Root": "/go", "Standard": True})
        with patch("pcritical.toolchain.golist.subprocess.run", return_value=_done([], payload)):
            info = GoListResolver().resolve("unsafe")
        assert info.standard is True
        assert info.imports == []

    def test_command_failure(self):
        with patch("pcritical.toolchain.golist.subprocess.run",
                   side_effect=_failed([], "cannot find package")):
            with pytest.raises(ResolutionError, match="cannot find package") as exc_info:
                GoListResolver().resolve("nope")
        assert exc_info.value.identity == "nope"

    def test_unparsable_output(self):
        with patch("pcritical.toolchain.golist.subprocess.run", return_value=_done([], "{}{}")):
            with pytest.raises(ResolutionError, match="unmarshal"):
                GoListResolver().resolve("fmt")

    def test_missing_go_binary(self):
        with patch("pcritical.toolchain.golist.subprocess.run", side_effect=FileNotFoundError()):
            with pytest.raises(ResolutionError, match="not found"):
                GoListResolver(go="/no/go").resolve("fmt")

    def test_go_root_failure_names_go_env(self):
        with patch("pcritical.toolchain.golist.subprocess.run",
                   side_effect=_failed([], "GOROOT not set")):
            with pytest.raises(ResolutionError) as exc_info:
                go_root()
        assert str(exc_info.value).startswith("go env GOROOT: ")
        assert "go list" not in str(exc_info.value)

    def test_go_root(self):
        with patch("pcritical.toolchain.golist.subprocess.run",
                   return_value=_done([], "/usr/local/go\n")):
            assert go_root() == "/usr/local/go"


# ── sizes ─────────────────────────────────────────────────────

class TestCountTextSymbols:
    def test_counts_text_symbols(self):
        assert count_text_symbols("main", NM_OUTPUT) == 3

    def test_empty_output(self):
        assert count_text_symbols("main", "") == 0

    def test_unparsable_line(self):
        with pytest.raises(MeasurementError):
            count_text_symbols("main", "???\n")


class TestGoSizeResolver:
    def test_measures_archive(self):
        def fake_run(args, **kwargs):
            if args[1] == "build":
                Path(args[3]).write_bytes(b"x" * 1234)
                return _done(args)
            return _done(args, NM_OUTPUT)

        with patch("pcritical.toolchain.gosize.subprocess.run", side_effect=fake_run):
            size = GoSizeResolver().measure("example.com/repo/internal/x")
        assert size.estimated_cost == 1234
        assert size.function_count == 3

    def test_build_failure(self):
        with patch("pcritical.toolchain.gosize.subprocess.run",
                   side_effect=_failed([], "undefined: foo")):
            with pytest.raises(BuildError, match="undefined: foo"):
                GoSizeResolver().measure("broken")

    def test_missing_artifact(self):
        with patch("pcritical.toolchain.gosize.subprocess.run", return_value=_done([])):
            with pytest.raises(MeasurementError, match="no artifact"):
                GoSizeResolver().measure("ghost")

    def test_nm_failure(self):
        def fake_run(args, **kwargs):
            if args[1] == "build":
                Path(args[3]).write_bytes(b"x")
                return _done(args)
            raise _failed(args)

        with patch("pcritical.toolchain.gosize.subprocess.run", side_effect=fake_run):
            with pytest.raises(MeasurementError):
                GoSizeResolver().measure("pkg")


# ── revisions ─────────────────────────────────────────────────

class TestRevision:
    def test_soft_lookup_without_git(self, tmp_path):
        assert revision_of(tmp_path, soft=True) == str(tmp_path)

    def test_hard_lookup(self, tmp_path):
        with patch("pcritical.toolchain.revision.subprocess.run",
                   return_value=_done([], "abc1234 fix things\n")) as run:
            assert revision_of(tmp_path) == "abc1234 fix things"
        assert run.call_args.kwargs["cwd"] == tmp_path

    def test_hard_lookup_failure(self, tmp_path):
        with patch("pcritical.toolchain.revision.subprocess.run",
                   side_effect=_failed([], "not a git repository")):
            with pytest.raises(RevisionError, match="not a git repository"):
                revision_of(tmp_path)

    def test_fingerprint_for_standard_library_target(self, tmp_path):
        goroot = str(tmp_path)
        assert environment_fingerprint(goroot, goroot) == make_fingerprint(goroot, goroot)

    def test_fingerprint_combines_both_revisions(self, tmp_path):
        repo = tmp_path / "repo"
        repo.mkdir()
        goroot = tmp_path / "go"
        goroot.mkdir()
        with patch("pcritical.toolchain.revision.subprocess.run",
                   return_value=_done([], "def5678 repo head\n")):
            fp = environment_fingerprint(str(repo), str(goroot))
        assert fp == make_fingerprint("def5678 repo head", str(goroot))

    def test_fingerprint_changes_with_revision(self, tmp_path):
        with patch("pcritical.toolchain.revision.subprocess.run",
                   side_effect=[_done([], "aaa\n"), _done([], "bbb\n")]):
            first = environment_fingerprint(str(tmp_path / "r"), str(tmp_path / "go"))
            second = environment_fingerprint(str(tmp_path / "r"), str(tmp_path / "go"))
        assert first != second
