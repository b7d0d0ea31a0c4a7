"""Posicionamento dos agendamentos de um dia na grade da agenda.

Agendamentos que se sobrepõem no tempo ficam lado a lado em colunas. A
alocação é gulosa (menor número de colunas para intervalos sobrepostos) e
cada grupo de sobreposição ("cluster") divide a largura apenas pelas colunas
que realmente usa.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
from typing import Dict, List, Mapping, Optional, Sequence

from ..entities import Agendamento
from .temporal import resolver_intervalo

logger = logging.getLogger(__name__)

INICIO_DIA_MINUTOS = 6 * 60
PIXELS_POR_MINUTO = 2.0
ALTURA_MINIMA = 40.0
FRACAO_LARGURA = 0.9


@dataclass(frozen=True)
class Intervalo:
    chave: str
    inicio: int
    fim: int

    @property
    def duracao(self) -> int:
        return self.fim - self.inicio


@dataclass(frozen=True)
class BlocoLayout:
    agendamento_id: str
    inicio_minutos: int
    fim_minutos: int
    top: float
    height: float
    coluna: int
    colunas_no_cluster: int
    left: float
    width: float


def ordenar(intervalos: Sequence[Intervalo]) -> List[Intervalo]:
    # sorted() é estável: empates totais mantêm a ordem de entrada
    return sorted(intervalos, key=lambda i: (i.inicio, -i.duracao))


def alocar_colunas(intervalos: Sequence[Intervalo]) -> Dict[str, int]:
    """Coluna de cada intervalo; reaproveita a primeira coluna livre da esquerda."""
    fins_por_coluna: List[int] = []
    colunas: Dict[str, int] = {}
    for item in ordenar(intervalos):
        for indice, fim in enumerate(fins_por_coluna):
            if fim <= item.inicio:
                fins_por_coluna[indice] = item.fim
                colunas[item.chave] = indice
                break
        else:
            fins_por_coluna.append(item.fim)
            colunas[item.chave] = len(fins_por_coluna) - 1
    return colunas


def agrupar_clusters(intervalos: Sequence[Intervalo]) -> List[List[Intervalo]]:
    clusters: List[List[Intervalo]] = []
    fim_cluster: Optional[int] = None
    for item in ordenar(intervalos):
        if fim_cluster is None or item.inicio >= fim_cluster:
            clusters.append([item])
            fim_cluster = item.fim
        else:
            clusters[-1].append(item)
            fim_cluster = max(fim_cluster, item.fim)
    return clusters


def intervalo_do_agendamento(agendamento: Agendamento, duracao: Optional[int] = None) -> Intervalo:
    inicio, fim = resolver_intervalo(agendamento.hora_inicio, agendamento.hora_fim, duracao)
    return Intervalo(chave=agendamento.id, inicio=inicio, fim=fim)


def layout_dia(
    agendamentos: Sequence[Agendamento],
    duracoes: Optional[Mapping[str, int]] = None,
    inicio_dia_minutos: int = INICIO_DIA_MINUTOS,
    pixels_por_minuto: float = PIXELS_POR_MINUTO,
    altura_minima: float = ALTURA_MINIMA,
) -> List[BlocoLayout]:
    """Geometria de cada agendamento do dia, na ordem de exibição.

    ``duracoes`` mapeia ``especialidade_id`` para minutos; especialidades
    ausentes usam 30 minutos.
    """
    duracoes = duracoes or {}
    intervalos = [
        intervalo_do_agendamento(a, duracoes.get(a.especialidade_id or ""))
        for a in agendamentos
    ]
    colunas = alocar_colunas(intervalos)

    blocos: List[BlocoLayout] = []
    for cluster in agrupar_clusters(intervalos):
        total = len({colunas[i.chave] for i in cluster})
        for item in cluster:
            coluna = colunas[item.chave]
            blocos.append(
                BlocoLayout(
                    agendamento_id=item.chave,
                    inicio_minutos=item.inicio,
                    fim_minutos=item.fim,
                    top=(item.inicio - inicio_dia_minutos) * pixels_por_minuto,
                    height=max(item.duracao * pixels_por_minuto, altura_minima),
                    coluna=coluna,
                    colunas_no_cluster=total,
                    left=coluna / total,
                    width=FRACAO_LARGURA / total,
                )
            )
    logger.debug("Layout calculado para %d agendamentos", len(blocos))
    return blocos
