"""Regras que decidem se um paciente pode ser agendado numa especialidade.

Ordem de avaliação (a primeira que dispara vence):

1. ADMISSIONAL, DEMISSIONAL e PSICOTESTE não sofrem a penalidade por falta.
2. Penalidade: falta (``faltou``) nos últimos 15 dias, contando o 15º dia.
3. Validade: exame (ou consulta de oftalmologia) já realizado dentro da
   janela de 6 meses (12 para oftalmologia).
4. Caso contrário, liberado.

O motor é puro: recebe o histórico já carregado e nunca faz I/O.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from datetime import date, timedelta
import logging
from typing import Iterable, List, Mapping, Optional, Protocol

from dateutil.relativedelta import relativedelta

from ..entities import Agendamento, Especialidade
from ..entities.appointment import normalizar_justificativa
from ..enums import Decisao, StatusAgendamento, TipoEspecialidade
from ..exceptions import LiberacaoError, ValidationError

logger = logging.getLogger(__name__)

DIAS_PENALIDADE = 15
MESES_VALIDADE = 6
MESES_VALIDADE_OFTALMO = 12

TIPOS_ISENTOS_PENALIDADE = frozenset(
    {TipoEspecialidade.ADMISSIONAL, TipoEspecialidade.DEMISSIONAL, TipoEspecialidade.PSICOTESTE}
)
STATUS_HISTORICO = frozenset({StatusAgendamento.COMPARECEU, StatusAgendamento.FALTOU})
DECISOES_BLOQUEIO = frozenset({Decisao.BLOQUEADO_PENALIDADE, Decisao.BLOQUEADO_VALIDADE})

MENSAGENS = {
    Decisao.BLOQUEADO_PENALIDADE: "Paciente faltou a um agendamento nos últimos 15 dias.",
    Decisao.BLOQUEADO_VALIDADE: "Procedimento ainda dentro do prazo de validade de {meses} meses.",
    Decisao.PENDENTE: "Histórico do paciente ainda não carregado.",
    Decisao.NAO_APLICAVEL: "Selecione paciente e especialidade.",
}


class HistoricoPort(Protocol):
    def carregar_historico(self, paciente_id: str, meses: int, hoje: Optional[date] = None) -> List[Agendamento]:
        """Agendamentos ``compareceu``/``faltou`` do paciente na janela, mais recentes primeiro."""


@dataclass(frozen=True)
class Elegibilidade:
    decisao: Decisao
    meses_janela: int = MESES_VALIDADE
    justificativa: Optional[str] = None

    def __post_init__(self) -> None:
        if self.justificativa is not None and self.decisao not in DECISOES_BLOQUEIO:
            raise LiberacaoError("Só é possível liberar um agendamento bloqueado.")

    @property
    def bloqueado(self) -> bool:
        return self.decisao in DECISOES_BLOQUEIO

    @property
    def liberado(self) -> bool:
        """Bloqueado, mas liberado manualmente com justificativa."""
        return self.bloqueado and bool(self.justificativa)

    @property
    def pode_agendar(self) -> bool:
        return self.decisao == Decisao.LIBERADO or self.liberado

    @property
    def motivo(self) -> Optional[str]:
        if self.decisao == Decisao.BLOQUEADO_PENALIDADE:
            return "penalidade"
        if self.decisao == Decisao.BLOQUEADO_VALIDADE:
            return "validade"
        return None

    @property
    def mensagem(self) -> Optional[str]:
        modelo = MENSAGENS.get(self.decisao)
        return modelo.format(meses=self.meses_janela) if modelo else None

    def liberar(self, justificativa: Optional[str]) -> "Elegibilidade":
        if not self.bloqueado:
            raise LiberacaoError("Só é possível liberar um agendamento bloqueado.")
        texto = normalizar_justificativa(justificativa or "")
        if not texto:
            raise LiberacaoError("Informe a justificativa para liberar o agendamento.")
        logger.warning("Agendamento liberado apesar de bloqueio por %s", self.motivo)
        return replace(self, justificativa=texto)


def eh_oftalmologia(especialidade: Especialidade) -> bool:
    """Consulta de oftalmologia, reconhecida pelo nome (o campo tipo nem sempre é confiável)."""
    nome = especialidade.nome.lower()
    if "oftalmo" not in nome:
        return False
    return especialidade.tipo in (None, TipoEspecialidade.CONSULTA) or "consulta" in nome


def eh_exame(especialidade: Especialidade) -> bool:
    if especialidade.tipo == TipoEspecialidade.EXAME:
        return True
    if especialidade.tipo in TIPOS_ISENTOS_PENALIDADE:
        return False
    return "exam" in especialidade.nome.lower()


def meses_janela(especialidade: Optional[Especialidade]) -> int:
    if especialidade is not None and eh_oftalmologia(especialidade):
        return MESES_VALIDADE_OFTALMO
    return MESES_VALIDADE


def sujeito_a_penalidade(especialidade: Especialidade) -> bool:
    return especialidade.tipo not in TIPOS_ISENTOS_PENALIDADE


def sujeito_a_validade(especialidade: Especialidade) -> bool:
    return eh_exame(especialidade) or eh_oftalmologia(especialidade)


def inicio_da_janela(hoje: date, meses: int) -> date:
    return hoje - relativedelta(months=meses)


def _considerados(
    historico: Iterable[Agendamento], excluir_id: Optional[str], desde: date
) -> List[Agendamento]:
    return [
        a
        for a in historico
        if a.id != excluir_id and a.status in STATUS_HISTORICO and a.data >= desde
    ]


def avaliar(
    paciente_id: Optional[str],
    especialidade_id: Optional[str],
    historico: Optional[Iterable[Agendamento]],
    especialidades: Mapping[str, Especialidade],
    excluir_agendamento_id: Optional[str] = None,
    hoje: Optional[date] = None,
) -> Elegibilidade:
    if not paciente_id or not especialidade_id:
        return Elegibilidade(Decisao.NAO_APLICAVEL)

    especialidade = especialidades.get(especialidade_id)
    if especialidade is None:
        logger.debug("Especialidade %s fora do catálogo; decisão pendente", especialidade_id)
        return Elegibilidade(Decisao.PENDENTE)

    meses = meses_janela(especialidade)
    if historico is None:
        return Elegibilidade(Decisao.PENDENTE, meses)

    hoje = hoje or date.today()
    registros = _considerados(historico, excluir_agendamento_id, inicio_da_janela(hoje, meses))

    if sujeito_a_penalidade(especialidade):
        limite = hoje - timedelta(days=DIAS_PENALIDADE)
        if any(a.status == StatusAgendamento.FALTOU and a.data >= limite for a in registros):
            logger.info("Paciente %s bloqueado por penalidade (falta desde %s)", paciente_id, limite)
            return Elegibilidade(Decisao.BLOQUEADO_PENALIDADE, meses)

    if sujeito_a_validade(especialidade):
        if any(
            a.status == StatusAgendamento.COMPARECEU and a.especialidade_id == especialidade_id
            for a in registros
        ):
            logger.info(
                "Paciente %s bloqueado por validade em %s (%d meses)", paciente_id, especialidade.nome, meses
            )
            return Elegibilidade(Decisao.BLOQUEADO_VALIDADE, meses)

    logger.debug("Paciente %s liberado para %s", paciente_id, especialidade.nome)
    return Elegibilidade(Decisao.LIBERADO, meses)


def validar_submissao(elegibilidade: Elegibilidade) -> None:
    """Impede que um agendamento bloqueado chegue ao armazenamento sem liberação."""
    if elegibilidade.decisao == Decisao.NAO_APLICAVEL:
        raise ValidationError("Paciente e especialidade são obrigatórios.")
    if elegibilidade.decisao == Decisao.PENDENTE:
        raise ValidationError("Elegibilidade ainda não determinada.")
    if elegibilidade.bloqueado and not elegibilidade.liberado:
        raise LiberacaoError(elegibilidade.mensagem or "Agendamento bloqueado.")
