import ctypes
import mmap
import os

from errors import MissingConstantError

# Ordem dos campos no registro impresso
RECORD_FIELDS = (
    "statOffset",
    "statSize",
    "O_RDONLY",
    "O_WRONLY",
    "O_RDWR",
    "PROT_READ",
    "PROT_WRITE",
    "MADV_NORMAL",
    "MADV_RANDOM",
    "MADV_SEQUENTIAL",
    "MADV_WILLNEED",
    "MADV_DONTNEED",
    "MAP_FAILED",
    "MAP_SHARED",
)


def lookup(module, name):
    """Lê uma constante de um módulo, falhando se a plataforma não a define."""
    try:
        return getattr(module, name)
    except AttributeError:
        raise MissingConstantError(module.__name__, name) from None


# --- Dicionários de Constantes ---


def _table(module, names):
    return {name: lookup(module, name) for name in names}


# Modos de acesso para open(2) - são mutuamente exclusivos
# Obtido de <fcntl.h> e disponível no módulo os
def open_access_modes():
    return _table(os, ("O_RDONLY", "O_WRONLY", "O_RDWR"))


# Flags de proteção de memória para mmap(2)
def mmap_prot():
    return _table(mmap, ("PROT_READ", "PROT_WRITE"))


# Conselhos para madvise(2) - não são bitmasks
def madvise_advice():
    return _table(
        mmap,
        (
            "MADV_NORMAL",
            "MADV_RANDOM",
            "MADV_SEQUENTIAL",
            "MADV_WILLNEED",
            "MADV_DONTNEED",
        ),
    )


# Flags de mapeamento para mmap(2)
def mmap_flags():
    return _table(mmap, ("MAP_SHARED",))


def map_failed() -> int:
    """Retorna MAP_FAILED ((void *) -1) como inteiro com sinal de 64 bits."""
    # O ponteiro volta como unsigned do tamanho de um ponteiro;
    # reinterpreta com sinal antes de estender para 64 bits.
    raw = ctypes.c_void_p(-1).value
    signed = ctypes.c_ssize_t(raw).value
    return ctypes.c_longlong(signed).value
