import platform
import sys

from json_helpers import format_record
from probe import DEFAULT_CC, compile_and_run
from stat_layout import normalize_machine

_POSIX_COMMON = {
    "O_RDONLY": 0,
    "O_WRONLY": 1,
    "O_RDWR": 2,
    "PROT_READ": 1,
    "PROT_WRITE": 2,
    "MADV_NORMAL": 0,
    "MADV_RANDOM": 1,
    "MADV_SEQUENTIAL": 2,
    "MADV_WILLNEED": 3,
    "MADV_DONTNEED": 4,
    "MAP_FAILED": -1,
    "MAP_SHARED": 1,
}

# Registros conhecidos por alvo; alvos ausentes são detectados com o programa C
PORTABILITY = {
    "x86_64-unknown-linux-gnu": {"statOffset": 48, "statSize": 144, **_POSIX_COMMON},
    "aarch64-unknown-linux-gnu": {"statOffset": 48, "statSize": 128, **_POSIX_COMMON},
    "x86_64-apple-darwin": {"statOffset": 96, "statSize": 144, **_POSIX_COMMON},
    "aarch64-apple-darwin": {"statOffset": 96, "statSize": 144, **_POSIX_COMMON},
}


def current_target():
    """Retorna o alvo da plataforma atual, ex: x86_64-unknown-linux-gnu."""
    machine = normalize_machine(platform.machine())
    if sys.platform == "darwin":
        return f"{machine}-apple-darwin"
    if sys.platform.startswith("linux"):
        libc, _ = platform.libc_ver()
        env = "gnu" if libc == "glibc" else "musl"
        return f"{machine}-unknown-linux-{env}"
    if sys.platform == "win32":
        return f"{machine}-pc-windows-msvc"
    return f"{machine}-unknown-{sys.platform}"


def get_portability(target=None, cc=DEFAULT_CC):
    """Retorna o registro do alvo, compilando o programa C se ele for desconhecido."""
    target = target or current_target()
    if target in PORTABILITY:
        return dict(PORTABILITY[target])

    sys.stderr.write(
        f"Constantes de portabilidade não encontradas para {target},\n"
        "tentando compilar um pequeno programa C para detectá-las.\n"
    )
    record = compile_and_run(cc)
    sys.stderr.write(
        f"Adicione o seguinte a PORTABILITY em {__file__}:\n\n"
        f'  "{target}": {format_record(record)},\n\n'
    )
    return record
