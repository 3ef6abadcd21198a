import os
import sys
from subprocess import CalledProcessError, run
from tempfile import TemporaryDirectory

from errors import ProbeError, RecordFormatError
from json_helpers import parse_record

DEBUG = False

DEFAULT_CC = "cc"

# Programa C que imprime o registro direto dos headers da plataforma
PROBE_SOURCE = r"""#include <fcntl.h>
#include <stddef.h>
#include <stdio.h>
#include <sys/stat.h>
#include <sys/mman.h>

int main(int argc, char **argv) {
  printf(
    "{\"statOffset\": %zu, \"statSize\": %lu, \"O_RDONLY\": %d, \"O_WRONLY\": %d, \"O_RDWR\": %d, \"PROT_READ\": %d, \"PROT_WRITE\": %d, \"MADV_NORMAL\": %d, \"MADV_RANDOM\": %d, \"MADV_SEQUENTIAL\": %d, \"MADV_WILLNEED\": %d, \"MADV_DONTNEED\": %d, \"MAP_FAILED\": %lld, \"MAP_SHARED\": %d}\n",
    offsetof(struct stat, st_size),
    (unsigned long) sizeof(struct stat),
    O_RDONLY,
    O_WRONLY,
    O_RDWR,
    PROT_READ,
    PROT_WRITE,
    MADV_NORMAL,
    MADV_RANDOM,
    MADV_SEQUENTIAL,
    MADV_WILLNEED,
    MADV_DONTNEED,
    (long long) MAP_FAILED,
    MAP_SHARED
  );
  return 0;
}
"""


def compile_and_run(cc=DEFAULT_CC):
    """Compila e executa o programa C de detecção, retornando o registro."""
    # O diretório temporário é removido mesmo se a compilação falhar
    with TemporaryDirectory(prefix="mmap-offsets-") as tmp_dir:
        source = os.path.join(tmp_dir, "offset.c")
        binary = os.path.join(tmp_dir, "offset")
        with open(source, "w") as f:
            f.write(PROBE_SOURCE)

        command = [cc, source, "-o", binary]
        if DEBUG:
            sys.stderr.write(f"Compilando: {' '.join(command)}\n")
        try:
            run(command, check=True, capture_output=True, text=True)
        except FileNotFoundError as e:
            raise ProbeError(f"Compilador '{cc}' não encontrado") from e
        except CalledProcessError as e:
            sys.stderr.write(e.stderr or "")
            raise ProbeError(
                f"Falha ao compilar o programa de detecção (código {e.returncode})"
            ) from e

        try:
            result = run([binary], check=True, capture_output=True, text=True)
        except (OSError, CalledProcessError) as e:
            raise ProbeError(f"Falha ao executar o programa de detecção: {e}") from e

    try:
        return parse_record(result.stdout.strip())
    except RecordFormatError as e:
        raise ProbeError(f"Saída inesperada do programa de detecção: {e}") from e
