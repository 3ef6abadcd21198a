import sys

import constants
from errors import PortabilityError, UnsupportedPlatformError
from json_helpers import format_record
from probe import compile_and_run
from stat_layout import describe_stat


def stat_fields():
    """Offset de st_size e tamanho da struct stat da plataforma atual."""
    try:
        layout = describe_stat()
    except UnsupportedPlatformError as e:
        # Sem layout ctypes conhecido: os headers do sistema respondem
        sys.stderr.write(f"{e}, usando o programa C de detecção.\n")
        probed = compile_and_run()
        return probed["statOffset"], probed["statSize"]
    return layout.offset, layout.size


def collect_record():
    """Reúne as constantes da plataforma atual no registro de saída."""
    stat_offset, stat_size = stat_fields()
    record = {
        "statOffset": stat_offset,
        "statSize": stat_size,
    }
    record.update(constants.open_access_modes())
    record.update(constants.mmap_prot())
    record.update(constants.madvise_advice())
    record["MAP_FAILED"] = constants.map_failed()
    record.update(constants.mmap_flags())
    return {name: record[name] for name in constants.RECORD_FIELDS}


def report(stream=None):
    """Escreve o registro numa única linha (em sys.stdout se stream for None)."""
    # sys.stdout é lido na chamada para respeitar redirecionamentos
    stream = stream or sys.stdout
    stream.write(format_record(collect_record()) + "\n")
    stream.flush()


def main():
    # Argumentos de linha de comando são ignorados
    try:
        report()
    except PortabilityError as e:
        sys.stderr.write(f"Erro ao detectar as constantes: {e}\n")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
