import json
import os

from constants import RECORD_FIELDS
from errors import RecordFormatError


def format_record(record):
    """Formata o registro numa única linha JSON, na ordem de RECORD_FIELDS."""
    ordered = {name: record[name] for name in RECORD_FIELDS}
    # Mesmos separadores do printf original: ", " e ": "
    return json.dumps(ordered, separators=(", ", ": "))


def parse_record(text):
    """Lê uma linha JSON e valida que é um registro plano com os campos esperados."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise RecordFormatError(f"Registro não é um JSON válido: {e}") from e

    if not isinstance(data, dict):
        raise RecordFormatError("Registro deve ser um objeto JSON")

    missing = [name for name in RECORD_FIELDS if name not in data]
    extra = [name for name in data if name not in RECORD_FIELDS]
    if missing or extra:
        raise RecordFormatError(
            f"Campos inválidos no registro (faltando: {missing}, extras: {extra})"
        )

    for name in RECORD_FIELDS:
        value = data[name]
        # bool é subclasse de int, mas não é um valor válido aqui
        if isinstance(value, bool) or not isinstance(value, int):
            raise RecordFormatError(f"Campo '{name}' não é inteiro: {value!r}")

    return {name: data[name] for name in RECORD_FIELDS}


# Função para ler o registro de um arquivo JSON
def read_record_file(filename):
    with open(filename, "r") as file:
        return parse_record(file.read())


# Função para guardar o registro num arquivo JSON
def save_record_file(record, filename):
    directory = os.path.dirname(filename)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(filename, "w") as f:
        f.write(format_record(record) + "\n")
