from __future__ import annotations
from dataclasses import dataclass, field, replace
from datetime import date, time
import re
from typing import Optional
import uuid

from ..enums import ModoAtendimento, StatusAgendamento
from ..exceptions import ValidationError


@dataclass(frozen=True)
class Observacoes:
    """Campos que o armazenamento guarda como marcadores no texto livre."""

    texto: str = ""
    online: bool = False
    modo: ModoAtendimento = ModoAtendimento.HORA_MARCADA
    justificativa: Optional[str] = None

    def __post_init__(self) -> None:
        if self.justificativa is not None:
            object.__setattr__(self, "justificativa", normalizar_justificativa(self.justificativa) or None)

    @property
    def ordem_chegada(self) -> bool:
        return self.modo == ModoAtendimento.ORDEM_CHEGADA


@dataclass(frozen=True)
class Agendamento:
    id: str
    paciente_id: Optional[str]
    clinica_id: Optional[str]
    especialidade_id: Optional[str]
    data: date
    hora_inicio: Optional[time] = None
    hora_fim: Optional[time] = None
    status: StatusAgendamento = StatusAgendamento.AGENDADO
    observacoes: Observacoes = field(default_factory=Observacoes)
    profissional: Optional[str] = None
    empresa_id: Optional[str] = None

    def com_status(self, status: StatusAgendamento) -> "Agendamento":
        return replace(self, status=status)

    def alterar(self, **campos) -> "Agendamento":
        novo = replace(self, **campos)
        _validar_horario(novo.hora_inicio, novo.hora_fim)
        return novo

    @staticmethod
    def novo(
        paciente_id: str,
        clinica_id: str,
        especialidade_id: str,
        data: date,
        hora_inicio: Optional[time],
        hora_fim: Optional[time],
        status: StatusAgendamento = StatusAgendamento.AGENDADO,
        observacoes: Optional[Observacoes] = None,
        profissional: Optional[str] = None,
        empresa_id: Optional[str] = None,
    ) -> "Agendamento":
        _validar_horario(hora_inicio, hora_fim)
        return Agendamento(
            id=str(uuid.uuid4()),
            paciente_id=paciente_id,
            clinica_id=clinica_id,
            especialidade_id=especialidade_id,
            data=data,
            hora_inicio=hora_inicio,
            hora_fim=hora_fim,
            status=status,
            observacoes=observacoes or Observacoes(),
            profissional=(profissional or "").strip() or None,
            empresa_id=empresa_id,
        )


def _validar_horario(inicio: Optional[time], fim: Optional[time]) -> None:
    if inicio is not None and fim is not None and inicio > fim:
        raise ValidationError("Intervalo inválido: início deve ser menor ou igual ao fim.")


def normalizar_justificativa(texto: str) -> str:
    """Reduz linhas em branco a uma quebra simples; elas delimitam o bloco da justificativa."""
    return re.sub(r"\n\s*\n", "\n", texto.strip())
