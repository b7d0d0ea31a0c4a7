from .agendamento_service import AgendamentoService
from .elegibilidade import Elegibilidade, HistoricoPort, avaliar, validar_submissao
from .layout import BlocoLayout, layout_dia

__all__ = [
    "AgendamentoService",
    "Elegibilidade",
    "HistoricoPort",
    "avaliar",
    "validar_submissao",
    "BlocoLayout",
    "layout_dia",
]
