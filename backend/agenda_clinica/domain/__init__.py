"""Camada de domínio da agenda de clínicas."""

from .enums import Decisao, ModoAtendimento, StatusAgendamento, TipoEspecialidade
from .entities import Agendamento, Clinica, Empresa, Especialidade, Observacoes, Paciente
from .services import AgendamentoService, BlocoLayout, Elegibilidade
from .exceptions import DomainError, LiberacaoError, SchedulingError, ValidationError

__all__ = [
    "Decisao",
    "ModoAtendimento",
    "StatusAgendamento",
    "TipoEspecialidade",
    "Agendamento",
    "Clinica",
    "Empresa",
    "Especialidade",
    "Observacoes",
    "Paciente",
    "AgendamentoService",
    "BlocoLayout",
    "Elegibilidade",
    "DomainError",
    "LiberacaoError",
    "SchedulingError",
    "ValidationError",
]
