class PortabilityError(Exception):
    """Classe base para os erros de detecção de constantes."""


class MissingConstantError(PortabilityError):
    """A plataforma não define uma das constantes do registro."""

    def __init__(self, module, name):
        self.module = module
        self.name = name
        super().__init__(f"{module}.{name} não está disponível nesta plataforma")


class UnsupportedPlatformError(PortabilityError):
    """Não há layout conhecido de struct stat para a plataforma."""

    def __init__(self, system, machine):
        self.system = system
        self.machine = machine
        super().__init__(
            f"Layout de struct stat desconhecido para {system}/{machine}"
        )


class RecordFormatError(PortabilityError):
    pass


class ProbeError(PortabilityError):
    pass
