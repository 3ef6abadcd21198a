import ctypes
import platform
import sys
from collections import namedtuple

from errors import UnsupportedPlatformError

StatLayout = namedtuple("StatLayout", ["offset", "size", "field_size"])


class timespec(ctypes.Structure):
    _fields_ = [
        ("tv_sec", ctypes.c_long),
        ("tv_nsec", ctypes.c_long),
    ]


# struct stat do x86_64 (<bits/struct_stat.h>)
class stat_linux_x86_64(ctypes.Structure):
    _fields_ = [
        ("st_dev", ctypes.c_ulong),
        ("st_ino", ctypes.c_ulong),
        ("st_nlink", ctypes.c_ulong),
        ("st_mode", ctypes.c_uint),
        ("st_uid", ctypes.c_uint),
        ("st_gid", ctypes.c_uint),
        ("__pad0", ctypes.c_int),
        ("st_rdev", ctypes.c_ulong),
        ("st_size", ctypes.c_long),
        ("st_blksize", ctypes.c_long),
        ("st_blocks", ctypes.c_long),
        ("st_atim", timespec),
        ("st_mtim", timespec),
        ("st_ctim", timespec),
        ("__glibc_reserved", ctypes.c_long * 3),
    ]


# struct stat genérica do kernel (<asm-generic/stat.h>), usada por
# aarch64, riscv64 e loongarch64
class stat_linux_generic(ctypes.Structure):
    _fields_ = [
        ("st_dev", ctypes.c_ulong),
        ("st_ino", ctypes.c_ulong),
        ("st_mode", ctypes.c_uint),
        ("st_nlink", ctypes.c_uint),
        ("st_uid", ctypes.c_uint),
        ("st_gid", ctypes.c_uint),
        ("st_rdev", ctypes.c_ulong),
        ("__pad1", ctypes.c_ulong),
        ("st_size", ctypes.c_long),
        ("st_blksize", ctypes.c_int),
        ("__pad2", ctypes.c_int),
        ("st_blocks", ctypes.c_long),
        ("st_atim", timespec),
        ("st_mtim", timespec),
        ("st_ctim", timespec),
        ("__glibc_reserved", ctypes.c_int * 2),
    ]


# struct stat com inode de 64 bits (_DARWIN_FEATURE_64_BIT_INODE)
class stat_darwin(ctypes.Structure):
    _fields_ = [
        ("st_dev", ctypes.c_int32),
        ("st_mode", ctypes.c_uint16),
        ("st_nlink", ctypes.c_uint16),
        ("st_ino", ctypes.c_uint64),
        ("st_uid", ctypes.c_uint32),
        ("st_gid", ctypes.c_uint32),
        ("st_rdev", ctypes.c_int32),
        ("st_atimespec", timespec),
        ("st_mtimespec", timespec),
        ("st_ctimespec", timespec),
        ("st_birthtimespec", timespec),
        ("st_size", ctypes.c_int64),
        ("st_blocks", ctypes.c_int64),
        ("st_blksize", ctypes.c_int32),
        ("st_flags", ctypes.c_uint32),
        ("st_gen", ctypes.c_uint32),
        ("st_lspare", ctypes.c_int32),
        ("st_qspare", ctypes.c_int64 * 2),
    ]


# (sys.platform, arquitetura normalizada) -> layout
STAT_STRUCTS = {
    ("linux", "x86_64"): stat_linux_x86_64,
    ("linux", "aarch64"): stat_linux_generic,
    ("linux", "riscv64"): stat_linux_generic,
    ("linux", "loongarch64"): stat_linux_generic,
    ("darwin", "x86_64"): stat_darwin,
    ("darwin", "aarch64"): stat_darwin,
}

MACHINE_ALIASES = {
    "amd64": "x86_64",
    "arm64": "aarch64",
}


def normalize_machine(machine: str) -> str:
    machine = machine.lower()
    return MACHINE_ALIASES.get(machine, machine)


def stat_struct(system=None, machine=None):
    """Escolhe a struct stat da plataforma informada (ou da atual)."""
    # Os layouts acima assumem c_long de 64 bits
    if ctypes.sizeof(ctypes.c_void_p) != 8:
        raise UnsupportedPlatformError(
            system or sys.platform, f"{machine or platform.machine()} (32 bits)"
        )
    system = system or sys.platform
    machine = normalize_machine(machine or platform.machine())
    try:
        return STAT_STRUCTS[(system, machine)]
    except KeyError:
        raise UnsupportedPlatformError(system, machine) from None


def describe_stat(system=None, machine=None) -> StatLayout:
    """Offset e tamanho de st_size, e o tamanho total da struct stat."""
    struct = stat_struct(system, machine)
    field = struct.st_size
    return StatLayout(field.offset, ctypes.sizeof(struct), field.size)


def read_st_size(buffer, layout: StatLayout) -> int:
    """Lê st_size de um buffer preenchido por fstat(2)."""
    if len(buffer) < layout.size:
        raise ValueError(
            f"Buffer de {len(buffer)} bytes menor que struct stat ({layout.size})"
        )
    raw = bytes(buffer[layout.offset : layout.offset + layout.field_size])
    return int.from_bytes(raw, sys.byteorder, signed=True)
