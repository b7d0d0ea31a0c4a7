"""Derivação de horários e durações compartilhada pela agenda e pelo formulário."""

from __future__ import annotations
from datetime import time
from typing import Optional, Tuple, Union

from ..entities import Especialidade
from ..entities.clinica import DURACAO_PADRAO_MINUTOS

HORA_INICIO_FALLBACK = time(8, 0)
ULTIMO_MINUTO_DO_DIA = 23 * 60 + 59


def parse_hora(valor: Union[str, time, None]) -> Optional[time]:
    """Converte "HH:MM" ou "HH:MM:SS" em ``time``; devolve None para valores inválidos."""
    if valor is None:
        return None
    if isinstance(valor, time):
        return valor.replace(second=0, microsecond=0)
    partes = str(valor).strip().split(":")
    if len(partes) < 2:
        return None
    try:
        horas, minutos = int(partes[0]), int(partes[1])
    except ValueError:
        return None
    if not (0 <= horas < 24 and 0 <= minutos < 60):
        return None
    return time(horas, minutos)


def formatar_hora(valor: Optional[time]) -> str:
    if valor is None:
        return "--:--"
    return valor.strftime("%H:%M")


def minutos_do_dia(valor: time) -> int:
    return valor.hour * 60 + valor.minute


def hora_de_minutos(minutos: int) -> time:
    minutos = max(0, min(minutos, ULTIMO_MINUTO_DO_DIA))
    return time(minutos // 60, minutos % 60)


def duracao_padrao(especialidade: Optional[Especialidade]) -> int:
    if especialidade is None or not especialidade.duracao_minutos:
        return DURACAO_PADRAO_MINUTOS
    return especialidade.duracao_minutos


def hora_fim_padrao(inicio: time, duracao: int = DURACAO_PADRAO_MINUTOS) -> time:
    # Não atravessa a meia-noite: a agenda trabalha com um único dia.
    return hora_de_minutos(minutos_do_dia(inicio) + duracao)


def resolver_intervalo(
    hora_inicio: Union[str, time, None],
    hora_fim: Union[str, time, None],
    duracao: Optional[int] = None,
) -> Tuple[int, int]:
    """Intervalo em minutos do dia; horários ausentes viram 08:00 + duração."""
    inicio = parse_hora(hora_inicio) or HORA_INICIO_FALLBACK
    inicio_min = minutos_do_dia(inicio)
    fim = parse_hora(hora_fim)
    if fim is not None and minutos_do_dia(fim) > inicio_min:
        return inicio_min, minutos_do_dia(fim)
    return inicio_min, inicio_min + (duracao or DURACAO_PADRAO_MINUTOS)
