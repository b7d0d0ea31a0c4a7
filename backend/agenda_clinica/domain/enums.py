from enum import Enum


class StatusAgendamento(str, Enum):
    AGENDADO = "agendado"
    COMPARECEU = "compareceu"
    FALTOU = "faltou"
    CANCELADO = "cancelado"
    REAGENDADO = "reagendado"


class TipoEspecialidade(str, Enum):
    CONSULTA = "CONSULTA"
    EXAME = "EXAME"
    ADMISSIONAL = "ADMISSIONAL"
    DEMISSIONAL = "DEMISSIONAL"
    PSICOTESTE = "PSICOTESTE"


class Decisao(str, Enum):
    LIBERADO = "liberado"
    PENDENTE = "pendente"
    NAO_APLICAVEL = "nao-aplicavel"
    BLOQUEADO_PENALIDADE = "bloqueado-penalidade"
    BLOQUEADO_VALIDADE = "bloqueado-validade"


class ModoAtendimento(str, Enum):
    HORA_MARCADA = "hora-marcada"
    ORDEM_CHEGADA = "ordem-chegada"
