from pathlib import Path

import pytest

from sysprobe.clock import system_time
from sysprobe.procfs import (
    ProcessState,
    ProcIO,
    ProcStat,
    ProcStatm,
    ProcStatus,
    parse_cmdline,
    parse_comm,
    parse_environ,
    parse_io,
    parse_stat,
    parse_statm,
    parse_status,
    parse_uids,
    state_char,
    uptime,
)

STAT_LINE = (
    "4242 (my (odd) proc) S 1 4242 4242 0 -1 4194560 1500 2000 3 4 "
    "11 12 13 14 20 0 7 0 98765 123456789 2048 18446744073709551615 "
    "1 2 3 4 5 0 0 4096 81920 0 0 0 17 3 0 0 21 22 23\n"
)

STATUS_TEXT = (
    "Name:\tbash\n"
    "Umask:\t0022\n"
    "State:\tS (sleeping)\n"
    "Tgid:\t4242\n"
    "Ngid:\t0\n"
    "Pid:\t4242\n"
    "PPid:\t1\n"
    "TracerPid:\t0\n"
    "Uid:\t1000\t1001\t1002\t1003\n"
    "Gid:\t100\t101\t102\t103\n"
    "FDSize:\t256\n"
    "Groups:\t4 24 27\n"
    "NStgid:\t4242\n"
    "VmPeak:\t   10000 kB\n"
    "VmRSS:\t    5000 kB\n"
    "Threads:\t7\n"
    "SigCgt:\t000000004b813efb\n"
    "CapBnd:\t000001ffffffffff\n"
)


def _write(root: Path, pid: str, name: str, content: str) -> None:
    directory = root / pid
    directory.mkdir(parents=True, exist_ok=True)
    (directory / name).write_text(content)


def test_process_state_names_and_chars():
    assert str(ProcessState.TracingStop) == "TracingStop"
    assert str(ProcessState.DiskSleep) == "DiskSleep"
    assert state_char(ProcessState.Running) == "R"
    assert state_char(ProcessState.TracingStop) == "t"
    assert state_char(None) == "\0"


@pytest.mark.parametrize("state", list(ProcessState))
def test_state_char_round_trip(state):
    assert ProcessState(state_char(state)) is state


def test_parse_stat_full_line(tmp_path):
    _write(tmp_path, "4242", "stat", STAT_LINE)
    stat = parse_stat(4242, tmp_path)
    assert stat.pid == 4242
    assert stat.comm == "my (odd) proc"
    assert stat.state == "S"
    assert stat.ppid == 1
    assert stat.tty_nr == 0
    assert stat.tpgid == -1
    assert stat.nb_threads == 7
    assert stat.starttime == 98765
    assert stat.vsize == 123456789
    assert stat.rsslim == 18446744073709551615
    assert stat.wchan == 0
    assert stat.exit_signal == 17
    assert stat.processor == 3
    assert stat.cguest_time == 23


def test_parse_stat_accepts_string_pid(tmp_path):
    _write(tmp_path, "self", "stat", STAT_LINE)
    assert parse_stat("self", tmp_path) == parse_stat("self", tmp_path)
    assert parse_stat("self", tmp_path).pid == 4242


def test_parse_stat_truncated_leaves_zeros(tmp_path):
    _write(tmp_path, "7", "stat", "7 (sh) R 3\n")
    stat = parse_stat(7, tmp_path)
    assert (stat.pid, stat.comm, stat.state, stat.ppid) == (7, "sh", "R", 3)
    assert stat.starttime == 0
    assert stat.nb_threads == 0


def test_parse_stat_missing_file(tmp_path):
    assert parse_stat(99, tmp_path) == ProcStat()


def test_parse_io(tmp_path):
    _write(
        tmp_path,
        "5",
        "io",
        "rchar: 100\nwchar: 200\nsyscr: 3\nsyscw: 4\n"
        "read_bytes: 4096\nwrite_bytes: 8192\ncancelled_write_bytes: 0\n",
    )
    assert parse_io(5, tmp_path) == ProcIO(100, 200, 3, 4, 4096, 8192, 0)


def test_parse_io_missing(tmp_path):
    assert parse_io(5, tmp_path) == ProcIO()


def test_parse_statm(tmp_path):
    _write(tmp_path, "5", "statm", "1000 200 50 10 300 0 0\n")
    assert parse_statm(5, tmp_path) == ProcStatm(1000, 200, 50, 10, 300)


def test_parse_statm_missing(tmp_path):
    assert parse_statm(5, tmp_path) == ProcStatm()


def test_parse_uids():
    assert parse_uids("1000\t1001\t1002\t1003") == (1000, 1001, 1002, 1003)
    assert parse_uids("") == (0, 0, 0, 0)
    assert parse_uids("1000 1001 1002 1003") == (0, 0, 0, 0)


def test_parse_status(tmp_path):
    _write(tmp_path, "4242", "status", STATUS_TEXT)
    status = parse_status(4242, tmp_path)
    assert status.name == "bash"
    assert status.umask == 0o022
    assert status.state is ProcessState.Sleeping
    assert status.tgid == 4242
    assert status.ppid == 1
    assert (status.ruid, status.euid, status.suid, status.fuid) == (1000, 1001, 1002, 1003)
    assert (status.rgid, status.egid, status.sgid, status.fgid) == (100, 101, 102, 103)
    assert status.fd_size == 256
    assert status.groups == "4 24 27"
    assert status.nstgid == 4242
    assert status.vm_peak == 10000
    assert status.vm_rss == 5000
    assert status.threads == 7
    assert status.sigcgt == 0x000000004B813EFB
    assert status.capbnd == 0x000001FFFFFFFFFF
    assert status.vm_swap == 0


def test_parse_status_missing(tmp_path):
    status = parse_status(1, tmp_path)
    assert status == ProcStatus()
    assert status.state is None


def test_parse_status_unknown_state(tmp_path):
    _write(tmp_path, "2", "status", "Name:\tkworker\nState:\tI (idle)\n")
    status = parse_status(2, tmp_path)
    assert status.name == "kworker"
    assert status.state is None


def test_parse_status_malformed_number(tmp_path):
    _write(tmp_path, "3", "status", "Name:\tx\nThreads:\tmany\n")
    with pytest.raises(ValueError):
        parse_status(3, tmp_path)


def test_environ_and_cmdline_are_raw(tmp_path):
    _write(tmp_path, "8", "environ", "HOME=/root\0LANG=C\0")
    _write(tmp_path, "8", "cmdline", "sleep\x0010\x00")
    assert parse_environ(8, tmp_path).split("\0") == ["HOME=/root", "LANG=C", ""]
    assert parse_cmdline(8, tmp_path) == "sleep\x0010\x00"


def test_comm_is_trimmed(tmp_path):
    _write(tmp_path, "8", "comm", "sleep\n")
    assert parse_comm(8, tmp_path) == "sleep"
    assert parse_comm(9, tmp_path) == ""


def test_uptime_gives_boot_time(tmp_path):
    (tmp_path / "uptime").write_text("100.5 200.0\n")
    before = system_time()
    boot = uptime(tmp_path)
    after = system_time()
    offset = 100_500_000_000
    assert before - offset <= boot <= after - offset


def test_uptime_missing_or_bad(tmp_path):
    assert uptime(tmp_path) == 0
    (tmp_path / "uptime").write_text("garbage\n")
    assert uptime(tmp_path) == 0