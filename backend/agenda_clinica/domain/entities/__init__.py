from .paciente import Paciente, Empresa
from .clinica import Clinica, Especialidade
from .appointment import Agendamento, Observacoes

__all__ = [
    "Paciente",
    "Empresa",
    "Clinica",
    "Especialidade",
    "Agendamento",
    "Observacoes",
]
