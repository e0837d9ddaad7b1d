"""
Tests for the process scanner — fake /proc trees, no real processes.
"""

from pathlib import Path

from restartmonkey.core.models.process import ProcessRecord
from restartmonkey.core.services.scanner import (
    ProcessScanner,
    library_index,
    vanished_libraries,
)


def _install(libdir: Path, name: str) -> str:
    path = libdir / name
    path.write_text("ELF")
    return str(path)


class TestReadProcess:
    def test_reads_libraries_exe_and_cmdline(self, fake_proc, libdir):
        ssl = _install(libdir, "libssl.so.3")
        fake_proc.add(100, "/usr/sbin/nginx", libraries=[ssl], cmdline=["nginx", "-g", "daemon off;"])

        record = ProcessScanner(fake_proc.root).read_process(100)

        assert record is not None
        assert record.pid == 100
        assert ssl in record.mapped_libraries
        assert record.executable_path == "/usr/sbin/nginx"
        assert record.executable_deleted is False
        assert record.command_line == ("nginx", "-g", "daemon off;")

    def test_anonymous_mappings_ignored(self, fake_proc):
        fake_proc.add(100, "/usr/sbin/nginx")
        record = ProcessScanner(fake_proc.root).read_process(100)
        assert record.mapped_libraries == frozenset()

    def test_deleted_mapping_reported_under_plain_path(self, fake_proc, libdir):
        stale = str(libdir / "libcrypto.so.3")
        fake_proc.add(100, "/usr/sbin/nginx", deleted_libraries=[stale])
        record = ProcessScanner(fake_proc.root).read_process(100)
        assert record.mapped_libraries == frozenset({stale})

    def test_deleted_executable_flagged(self, fake_proc):
        fake_proc.add(200, "/usr/sbin/sshd", deleted=True)
        record = ProcessScanner(fake_proc.root).read_process(200)
        assert record.executable_deleted is True
        assert record.executable_path == "/usr/sbin/sshd"

    def test_vanished_process_returns_none(self, fake_proc):
        fake_proc.add_vanished_process(300)
        assert ProcessScanner(fake_proc.root).read_process(300) is None

    def test_pids_ignores_non_numeric(self, fake_proc):
        fake_proc.add(12, "/usr/sbin/a")
        fake_proc.add(3, "/usr/sbin/b")
        assert ProcessScanner(fake_proc.root).pids() == [3, 12]


class TestLibraryIndex:
    def test_index_and_vanished(self):
        records = [
            ProcessRecord(pid=1, mapped_libraries=frozenset({"/lib/a.so", "/lib/b.so"})),
            ProcessRecord(pid=2, mapped_libraries=frozenset({"/lib/b.so"})),
        ]
        index = library_index(records)
        assert index == {"/lib/a.so": {1}, "/lib/b.so": {1, 2}}

        gone = vanished_libraries(index, exists=lambda p: p != "/lib/b.so")
        assert gone == {"/lib/b.so": {1, 2}}


class TestScan:
    def test_clean_system(self, fake_proc, libdir):
        ssl = _install(libdir, "libssl.so.3")
        fake_proc.add(100, "/usr/sbin/nginx", libraries=[ssl])

        result = ProcessScanner(fake_proc.root).scan()

        assert result.clean
        assert result.affected_executables == []
        assert result.pids_scanned == 1

    def test_vanished_library(self, fake_proc, libdir):
        ssl = _install(libdir, "libssl.so.3")
        old_ssl = str(libdir / "libssl.so.1.1")
        fake_proc.add(100, "/usr/sbin/nginx", libraries=[ssl, old_ssl])
        fake_proc.add(200, "/usr/sbin/crond", libraries=[ssl])

        result = ProcessScanner(fake_proc.root).scan()

        assert result.vanished_libraries == {old_ssl: {100}}
        assert result.affected_executables == ["/usr/sbin/nginx"]

    def test_vanished_libraries_really_gone_and_mapped(self, fake_proc, libdir):
        kept = _install(libdir, "libz.so.1")
        gone_a = str(libdir / "libssl.so.1.1")
        gone_b = str(libdir / "libcrypto.so.1.1")
        fake_proc.add(100, "/usr/sbin/nginx", libraries=[kept, gone_a, gone_b])
        fake_proc.add(101, "/usr/sbin/postfix", libraries=[gone_a])
        fake_proc.add(102, "/usr/sbin/crond", libraries=[kept])

        scanner = ProcessScanner(fake_proc.root)
        result = scanner.scan()

        assert set(result.vanished_libraries) == {gone_a, gone_b}
        for lib, pids in result.vanished_libraries.items():
            assert not Path(lib).exists()
            for pid in pids:
                assert lib in scanner.read_process(pid).mapped_libraries

    def test_updated_executable(self, fake_proc):
        fake_proc.add(300, "/usr/sbin/sshd", cmdline=["/usr/sbin/sshd", "-D"], deleted=True)

        result = ProcessScanner(fake_proc.root).scan()

        assert result.updated_pids == [300]
        assert result.affected_executables == ["/usr/sbin/sshd"]

    def test_interpreter_resolved_to_script(self, fake_proc):
        fake_proc.add(
            400, "/usr/bin/python3.11",
            cmdline=["/usr/bin/python3.11", "-s", "/usr/bin/fail2ban-server", "-xf", "start"],
            deleted=True,
        )
        result = ProcessScanner(fake_proc.root).scan()
        assert result.affected_executables == ["/usr/bin/fail2ban-server"]

    def test_deduplicates_by_resolved_path(self, fake_proc):
        fake_proc.add(500, "/usr/sbin/httpd", deleted=True)
        fake_proc.add(501, "/usr/sbin/httpd", deleted=True)
        fake_proc.add(502, "/usr/sbin/httpd", deleted=True)

        result = ProcessScanner(fake_proc.root).scan()

        assert result.affected_executables == ["/usr/sbin/httpd"]
        assert [a.pid for a in result.affected] == [500, 501, 502]

    def test_sorted_output(self, fake_proc):
        fake_proc.add(10, "/usr/sbin/zebra", deleted=True)
        fake_proc.add(20, "/usr/sbin/auditd", deleted=True)
        result = ProcessScanner(fake_proc.root).scan()
        assert result.affected_executables == ["/usr/sbin/auditd", "/usr/sbin/zebra"]

    def test_vanished_pid_does_not_abort(self, fake_proc):
        fake_proc.add_vanished_process(600)
        fake_proc.add(601, "/usr/sbin/sshd", deleted=True)

        result = ProcessScanner(fake_proc.root).scan()

        assert result.pids_scanned == 1
        assert result.affected_executables == ["/usr/sbin/sshd"]

    def test_deleted_executables_never_report_marker(self, fake_proc):
        fake_proc.add(700, "/usr/bin/perl", cmdline=["perl", "-e", "sleep"], deleted=True)
        fake_proc.add(701, "/usr/sbin/rsyslogd", deleted=True)

        result = ProcessScanner(fake_proc.root).scan()

        for path in result.affected_executables:
            assert "(deleted)" not in path
            assert path.startswith("/")

    def test_missing_proc_root(self, tmp_path):
        result = ProcessScanner(tmp_path / "nope").scan()
        assert result.clean
        assert result.pids_scanned == 0
