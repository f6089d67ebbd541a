"""Tests for the protected directory table and matcher."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest

from healthcheck.paths.errors import ProtectedDirectoryAccess
from healthcheck.paths.protected import (
    POSIX_PROTECTED_DIRS,
    ProtectedDirectoryTable,
    build_table,
    check_protected,
    platform_table,
    posix_table,
    windows_table,
)


class TestPosixMatch:
    @pytest.mark.parametrize("prefix", POSIX_PROTECTED_DIRS)
    def test_exact_match(self, prefix: str) -> None:
        assert posix_table().match(prefix) == prefix

    @pytest.mark.parametrize("prefix", POSIX_PROTECTED_DIRS)
    def test_nested_match(self, prefix: str) -> None:
        assert posix_table().match(prefix + "/anything/deeper") == prefix

    @pytest.mark.parametrize("path", ["/etc-backup", "/binary", "/library", "/rooted", "/devices/x", "/usr/bin2"])
    def test_shared_text_prefix_is_not_protected(self, path: str) -> None:
        assert posix_table().match(path) is None

    def test_root_and_home_are_not_protected(self) -> None:
        table = posix_table()
        assert table.match("/") is None
        assert table.match("/home/user/project") is None
        assert table.match("/tmp/output") is None

    def test_trailing_separator_ignored(self) -> None:
        assert posix_table().match("/etc/") == "/etc"

    def test_case_sensitive(self) -> None:
        assert posix_table().match("/ETC") is None

    def test_extra_entries(self) -> None:
        table = posix_table(["/srv/data"])
        assert table.match("/srv/data/out") == "/srv/data"
        assert table.match("/srv/database") is None


class TestWindowsMatch:
    def test_case_insensitive(self) -> None:
        table = windows_table(environ={})
        assert table.match("C:\\Windows") == "c:\\windows"
        assert table.match("C:\\WINDOWS\\System32\\drivers") == "c:\\windows"
        assert table.match("c:\\Program Files\\Vendor\\app") == "c:\\program files"
        assert table.match("C:\\Program Files (x86)\\Vendor") == "c:\\program files (x86)"
        assert table.match("C:\\ProgramData\\Microsoft\\Crypto") == "c:\\programdata\\microsoft"

    def test_boundary_safe(self) -> None:
        table = windows_table(environ={})
        assert table.match("C:\\Windows-backup") is None
        assert table.match("C:\\Program Filesystem") is None
        assert table.match("C:\\ProgramData\\Vendor") is None
        assert table.match("D:\\Windows") is None

    def test_environment_roots(self) -> None:
        table = windows_table(environ={"SystemRoot": "D:\\WINNT", "ProgramFiles": "D:\\Apps"})
        assert table.match("D:\\WinNT\\system32") == "d:\\winnt"
        assert table.match("d:\\apps\\tool") == "d:\\apps"

    def test_environment_duplicates_collapse(self) -> None:
        table = windows_table(environ={"SystemRoot": "C:\\Windows"})
        assert table.prefixes.count("c:\\windows") == 1

    def test_table_shape(self) -> None:
        table = windows_table(environ={})
        assert table.case_insensitive
        assert table.separator == "\\"


class TestBuildTable:
    def test_preserves_order_and_dedupes(self) -> None:
        table = build_table(["/b", "/a", "/b/"])
        assert table.prefixes == ("/b", "/a")

    def test_table_is_immutable(self) -> None:
        table = posix_table()
        with pytest.raises(AttributeError):
            table.prefixes = ()  # type: ignore[misc]

    @pytest.mark.skipif(sys.platform == "win32", reason="symlinks need elevated rights on Windows")
    def test_resolve_links_adds_canonical_form(self, tmp_path: Path) -> None:
        real = tmp_path / "real_system"
        real.mkdir()
        link = tmp_path / "system"
        link.symlink_to(real)
        table = build_table([str(link)], resolve_links=True)
        assert str(link) in table.prefixes
        assert str(real.resolve()) in table.prefixes
        assert table.match(str(real.resolve() / "conf")) == str(real.resolve())


class TestPlatformTable:
    def test_built_once(self) -> None:
        assert platform_table() is platform_table()

    def test_extra_entries_included(self, tmp_path: Path) -> None:
        protected = str(tmp_path.resolve() / "guarded")
        table = platform_table((protected,))
        assert table.match(protected + ("\\" if sys.platform == "win32" else "/") + "x") is not None

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX table")
    def test_posix_defaults_present(self) -> None:
        table = platform_table()
        for prefix in POSIX_PROTECTED_DIRS:
            assert prefix in table.prefixes
        assert not table.case_insensitive


class TestCheckProtected:
    def test_allows_unprotected(self) -> None:
        check_protected("/home/user/bin", posix_table())

    def test_rejects_nested(self) -> None:
        with pytest.raises(ProtectedDirectoryAccess) as exc_info:
            check_protected("/etc/nginx", posix_table())
        assert exc_info.value.path == "/etc/nginx"
        assert exc_info.value.protected == "/etc"
        assert "/etc" in str(exc_info.value)

    def test_logs_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        with (
            caplog.at_level(logging.WARNING, logger="healthcheck.paths.protected"),
            pytest.raises(ProtectedDirectoryAccess),
        ):
            check_protected("/proc/self", posix_table())
        assert any("/proc/self" in r.getMessage() for r in caplog.records)

    def test_empty_table_allows_everything(self) -> None:
        check_protected("/etc", ProtectedDirectoryTable(prefixes=()))
