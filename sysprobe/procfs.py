"""Readers for the per-process files of the proc filesystem."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import Path

from sysprobe.clock import system_time
from sysprobe.util import read_lines, read_text, to_i64, to_u64, trim

__all__ = [
    "PROC_ROOT",
    "ProcessState",
    "state_char",
    "ProcStat",
    "ProcIO",
    "ProcStatm",
    "ProcStatus",
    "uptime",
    "parse_uids",
    "parse_stat",
    "parse_io",
    "parse_statm",
    "parse_status",
    "parse_environ",
    "parse_cmdline",
    "parse_comm",
]

PROC_ROOT = "/proc"

Pid = int | str
Root = str | os.PathLike[str]


class ProcessState(Enum):
    """Scheduling state of a process as reported by the kernel."""

    Running = "R"
    Sleeping = "S"
    DiskSleep = "D"
    Zombie = "Z"
    Stopped = "T"
    TracingStop = "t"
    Dead = "X"

    def __str__(self) -> str:
        return self.name


def state_char(state: ProcessState | None) -> str:
    """The kernel's letter for a state, or a NUL character for none."""
    return state.value if isinstance(state, ProcessState) else "\0"


@dataclass
class ProcStat:
    """Fields of /proc/[pid]/stat."""

    pid: int = 0
    comm: str = ""
    state: str = ""
    ppid: int = 0
    pgrp: int = 0
    session: int = 0
    tty_nr: int = 0
    tpgid: int = 0
    flags: int = 0
    minflt: int = 0
    cminflt: int = 0
    majflt: int = 0
    cmajflt: int = 0
    utime: int = 0
    stime: int = 0
    cutime: int = 0
    cstime: int = 0
    priority: int = 0
    nice: int = 0
    nb_threads: int = 0
    starttime: int = 0
    vsize: int = 0
    rss: int = 0
    rsslim: int = 0
    startcode: int = 0
    endcode: int = 0
    startstack: int = 0
    kstkesp: int = 0
    kstkeip: int = 0
    wchan: int = 0
    exit_signal: int = 0
    processor: int = 0
    rt_priority: int = 0
    policy: int = 0
    blkio_ticks: int = 0
    guest_time: int = 0
    cguest_time: int = 0


@dataclass
class ProcIO:
    """Fields of /proc/[pid]/io."""

    rchar: int = 0
    wchar: int = 0
    syscr: int = 0
    syscw: int = 0
    read_bytes: int = 0
    write_bytes: int = 0
    cancelled_write_bytes: int = 0


@dataclass
class ProcStatm:
    """Memory usage from /proc/[pid]/statm, in pages."""

    size: int = 0
    resident: int = 0
    shared: int = 0
    text: int = 0
    data: int = 0


@dataclass
class ProcStatus:
    """Fields of /proc/[pid]/status; memory sizes are in kB."""

    name: str = ""
    umask: int = 0
    state: ProcessState | None = None
    tgid: int = 0
    ngid: int = 0
    pid: int = 0
    ppid: int = 0
    tracer_pid: int = 0
    ruid: int = 0
    euid: int = 0
    suid: int = 0
    fuid: int = 0
    rgid: int = 0
    egid: int = 0
    sgid: int = 0
    fgid: int = 0
    fd_size: int = 0
    groups: str = ""
    nstgid: int = 0
    nspid: int = 0
    nspgid: int = 0
    nssid: int = 0
    vm_peak: int = 0
    vm_size: int = 0
    vm_lck: int = 0
    vm_pin: int = 0
    vm_hwm: int = 0
    vm_rss: int = 0
    rss_anon: int = 0
    rss_file: int = 0
    rss_shmem: int = 0
    vm_data: int = 0
    vm_stk: int = 0
    vm_exe: int = 0
    vm_lib: int = 0
    vm_pte: int = 0
    vm_swap: int = 0
    hugetlb_pages: int = 0
    core_dumping: int = 0
    threads: int = 0
    sigpnd: int = 0
    shdpnd: int = 0
    sigblk: int = 0
    sigign: int = 0
    sigcgt: int = 0
    capinh: int = 0
    capprm: int = 0
    capeff: int = 0
    capbnd: int = 0
    capamb: int = 0
    extra: dict[str, str] = field(default_factory=dict, repr=False)


# Fields following "pid (comm)" in the stat file; None marks a field that is skipped.
_STAT_FIELDS: tuple[str | None, ...] = (
    "state", "ppid", "pgrp", "session", "tty_nr", "tpgid",
    "flags", "minflt", "cminflt", "majflt", "cmajflt",
    "utime", "stime", "cutime", "cstime",
    "priority", "nice", "nb_threads",
    None,  # itrealvalue
    "starttime", "vsize", "rss",
    "rsslim", "startcode", "endcode", "startstack", "kstkesp", "kstkeip",
    None, None, None, None,  # signal, blocked, sigignore, sigcatch
    "wchan",
    None, None,  # nswap, cnswap
    "exit_signal", "processor", "rt_priority", "policy",
    "blkio_ticks", "guest_time", "cguest_time",
)

_IO_FIELDS = frozenset(f.name for f in fields(ProcIO))

# status field -> (key in the file, numeric base, signed)
_STATUS_NUMBERS: tuple[tuple[str, str, int, bool], ...] = (
    ("umask", "Umask", 8, False),
    ("tgid", "Tgid", 10, True),
    ("ngid", "Ngid", 10, True),
    ("pid", "Pid", 10, True),
    ("ppid", "PPid", 10, True),
    ("tracer_pid", "TracerPid", 10, True),
    ("fd_size", "FDSize", 10, True),
    ("nstgid", "NStgid", 10, True),
    ("nspid", "NSpid", 10, True),
    ("nspgid", "NSpgid", 10, True),
    ("nssid", "NSsid", 10, True),
    ("vm_peak", "VmPeak", 10, False),
    ("vm_size", "VmSize", 10, False),
    ("vm_lck", "VmLck", 10, False),
    ("vm_pin", "VmPin", 10, False),
    ("vm_hwm", "VmHWM", 10, False),
    ("vm_rss", "VmRSS", 10, False),
    ("rss_anon", "RssAnon", 10, False),
    ("rss_file", "RssFile", 10, False),
    ("rss_shmem", "RssShmem", 10, False),
    ("vm_data", "VmData", 10, False),
    ("vm_stk", "VmStk", 10, False),
    ("vm_exe", "VmExe", 10, False),
    ("vm_lib", "VmLib", 10, False),
    ("vm_pte", "VmPTE", 10, False),
    ("vm_swap", "VmSwap", 10, False),
    ("hugetlb_pages", "HugetlbPages", 10, False),
    ("core_dumping", "CoreDumping", 10, True),
    ("threads", "Threads", 10, True),
    ("sigpnd", "SigPnd", 16, False),
    ("shdpnd", "ShdPnd", 16, False),
    ("sigblk", "SigBlk", 16, False),
    ("sigign", "SigIgn", 16, False),
    ("sigcgt", "SigCgt", 16, False),
    ("capinh", "CapInh", 16, False),
    ("capprm", "CapPrm", 16, False),
    ("capeff", "CapEff", 16, False),
    ("capbnd", "CapBnd", 16, False),
    ("capamb", "CapAmb", 16, False),
)


def _proc_file(pid: Pid, name: str, proc_root: Root) -> Path:
    return Path(proc_root) / str(pid) / name


def uptime(proc_root: Root = PROC_ROOT) -> int:
    """Boot time in nanoseconds since the epoch, from the system uptime; 0 on failure."""
    tokens = read_text(Path(proc_root) / "uptime").split()
    if not tokens:
        return 0
    try:
        seconds = float(tokens[0])
    except ValueError:
        return 0
    return system_time() - int(seconds * 1_000_000_000)


def parse_uids(text: str) -> tuple[int, int, int, int]:
    """Parse the real, effective, saved and filesystem ids of a Uid/Gid line."""
    parts = text.split("\t")
    if len(parts) == 4 and all(part.isascii() and part.isdigit() for part in parts):
        real, effective, saved, filesystem = (int(part) for part in parts)
        return real, effective, saved, filesystem
    return 0, 0, 0, 0


def parse_stat(pid: Pid, proc_root: Root = PROC_ROOT) -> ProcStat:
    """Parse /proc/[pid]/stat; fields that cannot be read stay zero."""
    text = read_text(_proc_file(pid, "stat", proc_root))

    open_paren = text.find("(")
    close_paren = text.rfind(")")
    if 0 <= open_paren < close_paren:
        head = text[:open_paren]
        comm = text[open_paren + 1 : close_paren]
        rest = text[close_paren + 1 :].split()
    else:
        tokens = text.split()
        head = tokens[0] if tokens else ""
        comm = ""
        rest = tokens[2:]

    try:
        values: dict[str, object] = {"pid": int(head)}
    except ValueError:
        return ProcStat()
    values["comm"] = comm

    for name, token in zip(_STAT_FIELDS, rest):
        if name is None:
            continue
        if name == "state":
            values[name] = token[0]
            continue
        try:
            values[name] = int(token)
        except ValueError:
            break

    return ProcStat(**values)  # type: ignore[arg-type]


def parse_io(pid: Pid, proc_root: Root = PROC_ROOT) -> ProcIO:
    """Parse the I/O counters of /proc/[pid]/io."""
    values: dict[str, int] = {}
    for line in read_lines(_proc_file(pid, "io", proc_root)):
        key, sep, value = line.partition(":")
        key = key.strip()
        if not sep or key not in _IO_FIELDS:
            continue
        number = to_u64(value)
        if number is not None:
            values[key] = number
    return ProcIO(**values)


def parse_statm(pid: Pid, proc_root: Root = PROC_ROOT) -> ProcStatm:
    """Parse /proc/[pid]/statm; fields that cannot be read stay zero."""
    tokens = read_text(_proc_file(pid, "statm", proc_root)).split()
    values: dict[str, int] = {}
    for spec, token in zip(fields(ProcStatm), tokens):
        try:
            values[spec.name] = int(token)
        except ValueError:
            break
    return ProcStatm(**values)


def parse_status(pid: Pid, proc_root: Root = PROC_ROOT) -> ProcStatus:
    """Parse /proc/[pid]/status; raises ValueError on a malformed numeric field."""
    mapping: dict[str, str] = {}
    for line in read_lines(_proc_file(pid, "status", proc_root)):
        key, sep, value = line.partition(":")
        if sep:
            mapping[key] = value[1:]  # skip the tab after the colon

    if not mapping:
        return ProcStatus()

    values: dict[str, object] = {
        "name": mapping.get("Name", ""),
        "groups": mapping.get("Groups", ""),
        "extra": mapping,
    }

    state_text = mapping.get("State", "")
    try:
        values["state"] = ProcessState(state_text[:1]) if state_text else None
    except ValueError:
        values["state"] = None

    for attr, key, base, signed in _STATUS_NUMBERS:
        if key not in mapping:
            continue
        raw = mapping[key]
        number = to_i64(raw, base) if signed else to_u64(raw, base)
        if number is None:
            raise ValueError(f"malformed {key} field: {raw!r}")
        values[attr] = number

    values["ruid"], values["euid"], values["suid"], values["fuid"] = parse_uids(
        mapping.get("Uid", "")
    )
    values["rgid"], values["egid"], values["sgid"], values["fgid"] = parse_uids(
        mapping.get("Gid", "")
    )

    return ProcStatus(**values)  # type: ignore[arg-type]


def parse_environ(pid: Pid, proc_root: Root = PROC_ROOT) -> str:
    """The raw, NUL-separated environment of a process."""
    return read_text(_proc_file(pid, "environ", proc_root))


def parse_cmdline(pid: Pid, proc_root: Root = PROC_ROOT) -> str:
    """The raw, NUL-separated command line of a process."""
    return read_text(_proc_file(pid, "cmdline", proc_root))


def parse_comm(pid: Pid, proc_root: Root = PROC_ROOT) -> str:
    """The command name of a process."""
    return trim(read_text(_proc_file(pid, "comm", proc_root)))