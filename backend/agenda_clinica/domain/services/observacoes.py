"""Adaptador do campo ``observacoes`` persistido.

O armazenamento guarda as marcações como texto:
``"LIBERADO COM JUSTIFICATIVA: <texto>\\n\\n"`` (sempre no início),
``"[ONLINE] "`` e ``"[CHEGADA] "``. Dentro do domínio elas são campos de
:class:`Observacoes`.
"""

from __future__ import annotations
from typing import Optional

from ..entities import Observacoes
from ..enums import ModoAtendimento

PREFIXO_JUSTIFICATIVA = "LIBERADO COM JUSTIFICATIVA:"
MARCADOR_ONLINE = "[ONLINE]"
MARCADOR_CHEGADA = "[CHEGADA]"
SEPARADOR_BLOCO = "\n\n"


def compor_observacoes(justificativa: str, observacoes: Optional[str] = None) -> str:
    texto = f"{PREFIXO_JUSTIFICATIVA} {justificativa}{SEPARADOR_BLOCO}"
    return texto + (observacoes or "")


def ler_observacoes(bruto: Optional[str]) -> Observacoes:
    texto = bruto or ""
    justificativa = None
    if texto.startswith(PREFIXO_JUSTIFICATIVA):
        bloco, _, texto = texto.partition(SEPARADOR_BLOCO)
        justificativa = bloco[len(PREFIXO_JUSTIFICATIVA):].strip() or None

    online = MARCADOR_ONLINE in texto
    chegada = MARCADOR_CHEGADA in texto
    return Observacoes(
        texto=limpar_marcadores(texto),
        online=online,
        modo=ModoAtendimento.ORDEM_CHEGADA if chegada else ModoAtendimento.HORA_MARCADA,
        justificativa=justificativa,
    )


def gravar_observacoes(obs: Observacoes) -> str:
    corpo = ""
    if obs.online:
        corpo += f"{MARCADOR_ONLINE} "
    if obs.ordem_chegada:
        corpo += f"{MARCADOR_CHEGADA} "
    corpo += obs.texto or ""
    if obs.justificativa:
        return compor_observacoes(obs.justificativa, corpo)
    return corpo


def limpar_marcadores(texto: Optional[str]) -> str:
    if not texto:
        return ""
    return texto.replace(MARCADOR_ONLINE, "").replace(MARCADOR_CHEGADA, "").strip()


def rotulo_modo(obs: Observacoes) -> str:
    return "ORDEM DE CHEGADA" if obs.ordem_chegada else "HORA MARCADA"
