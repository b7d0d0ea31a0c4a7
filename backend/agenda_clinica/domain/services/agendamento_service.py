from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field, replace
from datetime import date, time
import logging
from typing import Dict, List, Optional, Tuple

from ..entities import Agendamento, Especialidade, Observacoes, Paciente
from ..enums import Decisao, StatusAgendamento
from ..exceptions import ValidationError
from .elegibilidade import (
    STATUS_HISTORICO,
    Elegibilidade,
    avaliar,
    inicio_da_janela,
    meses_janela,
    validar_submissao,
)
from .layout import ALTURA_MINIMA, INICIO_DIA_MINUTOS, PIXELS_POR_MINUTO, BlocoLayout, layout_dia
from .temporal import duracao_padrao, hora_fim_padrao

logger = logging.getLogger(__name__)

_SEM_ALTERACAO = object()


@dataclass
class AgendamentoService:
    """Regras de negócio de agendamentos (coleções em memória)."""

    agendamentos: Dict[str, Agendamento] = field(default_factory=dict)
    especialidades: Dict[str, Especialidade] = field(default_factory=dict)

    # --- catálogo ---
    def adicionar_especialidade(self, especialidade: Especialidade) -> Especialidade:
        self.especialidades[especialidade.id] = especialidade
        return especialidade

    def obter_especialidade(self, especialidade_id: str) -> Especialidade:
        if especialidade_id not in self.especialidades:
            raise ValidationError("Especialidade não encontrada.")
        return self.especialidades[especialidade_id]

    def duracoes(self) -> Dict[str, int]:
        return {e.id: duracao_padrao(e) for e in self.especialidades.values()}

    # --- histórico / elegibilidade ---
    def carregar_historico(self, paciente_id: str, meses: int, hoje: Optional[date] = None) -> List[Agendamento]:
        desde = inicio_da_janela(hoje or date.today(), meses)
        historico = [
            a
            for a in self.agendamentos.values()
            if a.paciente_id == paciente_id and a.status in STATUS_HISTORICO and a.data >= desde
        ]
        historico.sort(key=lambda a: (a.data, a.hora_inicio or time.min), reverse=True)
        return historico

    def verificar(
        self,
        paciente_id: Optional[str],
        especialidade_id: Optional[str],
        excluir_agendamento_id: Optional[str] = None,
        hoje: Optional[date] = None,
    ) -> Elegibilidade:
        if not paciente_id or not especialidade_id:
            return Elegibilidade(Decisao.NAO_APLICAVEL)
        especialidade = self.especialidades.get(especialidade_id)
        historico = None
        if especialidade is not None:
            historico = self.carregar_historico(paciente_id, meses_janela(especialidade), hoje)
        return avaliar(
            paciente_id,
            especialidade_id,
            historico,
            self.especialidades,
            excluir_agendamento_id=excluir_agendamento_id,
            hoje=hoje,
        )

    def _liberar_se_preciso(self, elegibilidade: Elegibilidade, justificativa: Optional[str]) -> Elegibilidade:
        if elegibilidade.bloqueado and justificativa is not None:
            elegibilidade = elegibilidade.liberar(justificativa)
        validar_submissao(elegibilidade)
        return elegibilidade

    # --- agendamento ---
    def agendar(
        self,
        paciente: Paciente,
        clinica_id: str,
        especialidade_id: str,
        data: date,
        hora_inicio: time,
        hora_fim: Optional[time] = None,
        profissional: Optional[str] = None,
        observacoes: Optional[Observacoes] = None,
        justificativa: Optional[str] = None,
        hoje: Optional[date] = None,
    ) -> Agendamento:
        hoje = hoje or date.today()
        if data < hoje:
            raise ValidationError("Não é possível agendar em datas passadas.")
        especialidade = self._especialidade_da_clinica(especialidade_id, clinica_id)
        if hora_inicio is None:
            raise ValidationError("Selecione o horário de início.")
        if hora_fim is None:
            hora_fim = hora_fim_padrao(hora_inicio, duracao_padrao(especialidade))

        elegibilidade = self._liberar_se_preciso(
            self.verificar(paciente.id, especialidade_id, hoje=hoje), justificativa
        )
        obs = observacoes or Observacoes()
        if elegibilidade.liberado:
            obs = replace(obs, justificativa=elegibilidade.justificativa)

        agendamento = Agendamento.novo(
            paciente.id,
            clinica_id,
            especialidade_id,
            data,
            hora_inicio,
            hora_fim,
            observacoes=obs,
            profissional=profissional,
            empresa_id=paciente.empresa_id,
        )
        self.agendamentos[agendamento.id] = agendamento
        logger.info("Agendamento %s criado para paciente %s em %s", agendamento.id, paciente.id, data)
        return agendamento

    def editar(
        self,
        agendamento_id: str,
        clinica_id: Optional[str] = None,
        especialidade_id: Optional[str] = None,
        data: Optional[date] = None,
        hora_inicio: Optional[time] = None,
        hora_fim=_SEM_ALTERACAO,
        profissional: Optional[str] = None,
        observacoes: Optional[Observacoes] = None,
        justificativa: Optional[str] = None,
        hoje: Optional[date] = None,
    ) -> Agendamento:
        atual = self.obter(agendamento_id)
        clinica_id = clinica_id or atual.clinica_id
        especialidade_id = especialidade_id or atual.especialidade_id
        especialidade = self._especialidade_da_clinica(especialidade_id, clinica_id)
        inicio = hora_inicio or atual.hora_inicio
        fim = atual.hora_fim if hora_fim is _SEM_ALTERACAO else hora_fim
        if fim is None and inicio is not None:
            fim = hora_fim_padrao(inicio, duracao_padrao(especialidade))

        obs = observacoes or atual.observacoes
        # uma liberação já registrada continua valendo na edição
        if justificativa is None:
            justificativa = obs.justificativa or atual.observacoes.justificativa
        elegibilidade = self._liberar_se_preciso(
            self.verificar(atual.paciente_id, especialidade_id, excluir_agendamento_id=atual.id, hoje=hoje),
            justificativa,
        )
        obs = replace(obs, justificativa=elegibilidade.justificativa if elegibilidade.liberado else None)

        novo = atual.alterar(
            clinica_id=clinica_id,
            especialidade_id=especialidade_id,
            data=data or atual.data,
            hora_inicio=inicio,
            hora_fim=fim,
            profissional=(profissional or "").strip() or atual.profissional,
            observacoes=obs,
        )
        self.agendamentos[novo.id] = novo
        return novo

    def atualizar_status(self, agendamento_id: str, status: StatusAgendamento) -> Agendamento:
        agendamento = self.obter(agendamento_id).com_status(status)
        self.agendamentos[agendamento.id] = agendamento
        logger.info("Agendamento %s marcado como %s", agendamento_id, status.value)
        return agendamento

    def excluir(self, agendamento_id: str) -> None:
        self.obter(agendamento_id)
        del self.agendamentos[agendamento_id]

    # --- consultas ---
    def listar(
        self,
        data: Optional[date] = None,
        clinica_id: Optional[str] = None,
        especialidade_nome: Optional[str] = None,
    ) -> List[Agendamento]:
        itens = list(self.agendamentos.values())
        if data:
            itens = [a for a in itens if a.data == data]
        if clinica_id:
            itens = [a for a in itens if a.clinica_id == clinica_id]
        if especialidade_nome:
            itens = [a for a in itens if self._nome_especialidade(a) == especialidade_nome]
        itens.sort(key=lambda a: (a.data, a.hora_inicio or time.min))
        return itens

    def layout(
        self,
        data: date,
        clinica_id: Optional[str] = None,
        especialidade_nome: Optional[str] = None,
        inicio_dia_minutos: int = INICIO_DIA_MINUTOS,
        pixels_por_minuto: float = PIXELS_POR_MINUTO,
        altura_minima: float = ALTURA_MINIMA,
    ) -> List[BlocoLayout]:
        return layout_dia(
            self.listar(data, clinica_id, especialidade_nome),
            self.duracoes(),
            inicio_dia_minutos=inicio_dia_minutos,
            pixels_por_minuto=pixels_por_minuto,
            altura_minima=altura_minima,
        )

    def pendentes_do_paciente(self, paciente_id: str) -> List[Agendamento]:
        pendentes = [
            a
            for a in self.agendamentos.values()
            if a.paciente_id == paciente_id and a.status == StatusAgendamento.AGENDADO
        ]
        pendentes.sort(key=lambda a: (a.data, a.hora_inicio or time.min))
        return pendentes

    def historico_do_paciente(self, paciente_id: str) -> List[Agendamento]:
        historico = [a for a in self.agendamentos.values() if a.paciente_id == paciente_id]
        historico.sort(key=lambda a: (a.data, a.hora_inicio or time.min), reverse=True)
        return historico

    def relatorio_atendimentos(self, clinica_id: str, inicio: date, fim: date) -> List[Tuple[str, int]]:
        """Atendimentos realizados por especialidade, do mais frequente ao menos frequente."""
        if inicio > fim:
            raise ValidationError("A data final não pode ser menor que a data inicial.")
        contagem = Counter(
            self._nome_especialidade(a) or "Não informada"
            for a in self.agendamentos.values()
            if a.clinica_id == clinica_id
            and a.status == StatusAgendamento.COMPARECEU
            and inicio <= a.data <= fim
        )
        return sorted(contagem.items(), key=lambda item: (-item[1], item[0]))

    def _nome_especialidade(self, agendamento: Agendamento) -> Optional[str]:
        especialidade = self.especialidades.get(agendamento.especialidade_id or "")
        return especialidade.nome if especialidade else None

    def _especialidade_da_clinica(self, especialidade_id: Optional[str], clinica_id: Optional[str]) -> Especialidade:
        if not clinica_id:
            raise ValidationError("Selecione uma clínica.")
        if not especialidade_id:
            raise ValidationError("Selecione uma especialidade.")
        especialidade = self.obter_especialidade(especialidade_id)
        if especialidade.clinica_id and especialidade.clinica_id != clinica_id:
            raise ValidationError("Especialidade não pertence à clínica selecionada.")
        return especialidade

    def obter(self, agendamento_id: str) -> Agendamento:
        if agendamento_id not in self.agendamentos:
            raise ValidationError("Agendamento não encontrado.")
        return self.agendamentos[agendamento_id]
