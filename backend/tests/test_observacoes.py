from datetime import time

from agenda_clinica.domain import Especialidade, ModoAtendimento, Observacoes
from agenda_clinica.domain.services.observacoes import (
    gravar_observacoes,
    ler_observacoes,
    limpar_marcadores,
    rotulo_modo,
)
from agenda_clinica.domain.services.temporal import (
    duracao_padrao,
    hora_fim_padrao,
    parse_hora,
    resolver_intervalo,
)


def test_ler_observacoes_com_todos_os_marcadores():
    obs = ler_observacoes("LIBERADO COM JUSTIFICATIVA: Pedido do médico\n\n[ONLINE] [CHEGADA] Trazer exames")
    assert obs.justificativa == "Pedido do médico"
    assert obs.online
    assert obs.modo == ModoAtendimento.ORDEM_CHEGADA
    assert obs.texto == "Trazer exames"
    assert rotulo_modo(obs) == "ORDEM DE CHEGADA"


def test_ler_observacoes_sem_marcadores():
    obs = ler_observacoes("Paciente com mobilidade reduzida")
    assert obs == Observacoes(texto="Paciente com mobilidade reduzida")
    assert rotulo_modo(obs) == "HORA MARCADA"
    assert ler_observacoes(None) == Observacoes()


def test_gravar_observacoes_poe_a_justificativa_na_frente():
    obs = Observacoes(texto="Trazer exames", online=True, justificativa="Urgente")
    assert gravar_observacoes(obs) == "LIBERADO COM JUSTIFICATIVA: Urgente\n\n[ONLINE] Trazer exames"


def test_gravar_e_ler_preservam_os_campos():
    obs = Observacoes(texto="Jejum de 8h", online=False, modo=ModoAtendimento.ORDEM_CHEGADA, justificativa="Ok")
    assert ler_observacoes(gravar_observacoes(obs)) == obs


def test_limpar_marcadores():
    assert limpar_marcadores("[ONLINE] [CHEGADA] Texto") == "Texto"
    assert limpar_marcadores(None) == ""


def test_parse_hora():
    assert parse_hora("08:30") == time(8, 30)
    assert parse_hora("08:30:00") == time(8, 30)
    assert parse_hora(time(9, 15, 42)) == time(9, 15)
    assert parse_hora("25:00") is None
    assert parse_hora("abc") is None
    assert parse_hora("") is None
    assert parse_hora(None) is None


def test_duracao_e_fim_padrao():
    assert duracao_padrao(None) == 30
    assert duracao_padrao(Especialidade("e", "Exame", None, None, None)) == 30
    assert duracao_padrao(Especialidade("e", "Exame", None, None, 45)) == 45
    assert hora_fim_padrao(time(8, 45)) == time(9, 15)
    assert hora_fim_padrao(time(23, 50), 30) == time(23, 59)


def test_resolver_intervalo():
    assert resolver_intervalo("08:00", "09:00") == (480, 540)
    assert resolver_intervalo("08:00", "07:00", 20) == (480, 500)
    assert resolver_intervalo("lixo", None) == (480, 510)


def test_justificativa_com_linha_em_branco_nao_vaza_para_o_texto():
    obs = Observacoes(texto="trazer exames", online=True, justificativa="linha1\n\nlinha2")
    assert obs.justificativa == "linha1\nlinha2"
    lida = ler_observacoes(gravar_observacoes(obs))
    assert lida == obs
    assert lida.texto == "trazer exames"
    assert Observacoes(justificativa=" \n\n ").justificativa is None
