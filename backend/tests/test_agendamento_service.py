from datetime import date, time, timedelta

import pytest

from agenda_clinica.domain import (
    Agendamento,
    AgendamentoService,
    Decisao,
    Especialidade,
    LiberacaoError,
    Observacoes,
    Paciente,
    StatusAgendamento,
    TipoEspecialidade,
    ValidationError,
)

HOJE = date(2025, 3, 10)


@pytest.fixture
def servico():
    s = AgendamentoService()
    s.adicionar_especialidade(Especialidade("clinico", "Clínico Geral", "centro", TipoEspecialidade.CONSULTA, 30))
    s.adicionar_especialidade(Especialidade("audio", "Audiometria", "centro", TipoEspecialidade.EXAME, 20))
    s.adicionar_especialidade(Especialidade("psico", "Psicoteste", "centro", TipoEspecialidade.PSICOTESTE, 60))
    return s


@pytest.fixture
def paciente():
    return Paciente.novo("João da Silva", empresa_id="acme")


def _historico(servico, paciente, especialidade_id, dias, status):
    item = Agendamento.novo(
        paciente.id, "centro", especialidade_id, HOJE - timedelta(days=dias), time(9, 0), time(9, 30), status=status
    )
    servico.agendamentos[item.id] = item
    return item


def test_agendar_deriva_fim_da_duracao(servico, paciente):
    ag = servico.agendar(paciente, "centro", "audio", HOJE, time(8, 0), profissional="Dra. Ana", hoje=HOJE)
    assert ag.hora_fim == time(8, 20)
    assert ag.status == StatusAgendamento.AGENDADO
    assert ag.empresa_id == "acme"
    assert servico.agendamentos[ag.id] == ag


def test_agendar_rejeita_data_passada(servico, paciente):
    with pytest.raises(ValidationError):
        servico.agendar(paciente, "centro", "clinico", HOJE - timedelta(days=1), time(8, 0), hoje=HOJE)


def test_agendar_rejeita_fim_antes_do_inicio(servico, paciente):
    with pytest.raises(ValidationError):
        servico.agendar(paciente, "centro", "clinico", HOJE, time(9, 0), time(8, 0), hoje=HOJE)


def test_especialidade_de_outra_clinica(servico, paciente):
    with pytest.raises(ValidationError):
        servico.agendar(paciente, "norte", "clinico", HOJE, time(8, 0), hoje=HOJE)


def test_bloqueio_sem_justificativa_nao_persiste(servico, paciente):
    _historico(servico, paciente, "clinico", 3, StatusAgendamento.FALTOU)
    antes = len(servico.agendamentos)
    with pytest.raises(LiberacaoError):
        servico.agendar(paciente, "centro", "clinico", HOJE, time(8, 0), hoje=HOJE)
    with pytest.raises(LiberacaoError):
        servico.agendar(paciente, "centro", "clinico", HOJE, time(8, 0), justificativa="  ", hoje=HOJE)
    assert len(servico.agendamentos) == antes


def test_liberacao_grava_justificativa(servico, paciente):
    _historico(servico, paciente, "clinico", 3, StatusAgendamento.FALTOU)
    ag = servico.agendar(
        paciente,
        "centro",
        "clinico",
        HOJE,
        time(8, 0),
        observacoes=Observacoes(texto="Y"),
        justificativa="X",
        hoje=HOJE,
    )
    assert ag.observacoes.justificativa == "X"
    assert ag.observacoes.texto == "Y"


def test_justificativa_ignorada_quando_liberado(servico, paciente):
    ag = servico.agendar(paciente, "centro", "clinico", HOJE, time(8, 0), justificativa="sem motivo", hoje=HOJE)
    assert ag.observacoes.justificativa is None


def test_verificar_carrega_janela_do_historico(servico, paciente):
    _historico(servico, paciente, "audio", 40, StatusAgendamento.COMPARECEU)
    assert servico.verificar(paciente.id, "audio", hoje=HOJE).decisao == Decisao.BLOQUEADO_VALIDADE
    assert servico.verificar(paciente.id, "psico", hoje=HOJE).decisao == Decisao.LIBERADO
    assert servico.verificar(paciente.id, "inexistente", hoje=HOJE).decisao == Decisao.PENDENTE
    assert servico.verificar(None, "audio", hoje=HOJE).decisao == Decisao.NAO_APLICAVEL


def test_carregar_historico_filtra_e_ordena(servico, paciente):
    antigo = _historico(servico, paciente, "audio", 200, StatusAgendamento.COMPARECEU)
    recente = _historico(servico, paciente, "clinico", 10, StatusAgendamento.FALTOU)
    meio = _historico(servico, paciente, "audio", 50, StatusAgendamento.COMPARECEU)
    _historico(servico, paciente, "audio", 20, StatusAgendamento.CANCELADO)

    historico = servico.carregar_historico(paciente.id, 6, HOJE)
    assert [a.id for a in historico] == [recente.id, meio.id]
    assert antigo.id in {a.id for a in servico.carregar_historico(paciente.id, 12, HOJE)}


def test_editar_nao_se_bloqueia(servico, paciente):
    ag = servico.agendar(paciente, "centro", "clinico", HOJE, time(8, 0), hoje=HOJE)
    servico.atualizar_status(ag.id, StatusAgendamento.FALTOU)
    editado = servico.editar(ag.id, hora_inicio=time(10, 0), hora_fim=time(10, 30), hoje=HOJE)
    assert editado.hora_inicio == time(10, 0)
    assert editado.hora_fim == time(10, 30)
    assert editado.status == StatusAgendamento.FALTOU


def test_editar_rejeita_inicio_depois_do_fim(servico, paciente):
    ag = servico.agendar(paciente, "centro", "clinico", HOJE, time(8, 0), hoje=HOJE)
    with pytest.raises(ValidationError):
        servico.editar(ag.id, hora_inicio=time(10, 0), hoje=HOJE)


def test_editar_preserva_liberacao(servico, paciente):
    _historico(servico, paciente, "clinico", 3, StatusAgendamento.FALTOU)
    ag = servico.agendar(paciente, "centro", "clinico", HOJE, time(8, 0), justificativa="Urgência", hoje=HOJE)
    editado = servico.editar(ag.id, profissional="Dr. Bruno", observacoes=Observacoes(texto="novo"), hoje=HOJE)
    assert editado.observacoes.justificativa == "Urgência"
    assert editado.observacoes.texto == "novo"
    assert editado.profissional == "Dr. Bruno"


def test_editar_limpa_fim_e_recalcula(servico, paciente):
    ag = servico.agendar(paciente, "centro", "clinico", HOJE, time(8, 0), time(9, 0), hoje=HOJE)
    editado = servico.editar(ag.id, especialidade_id="audio", hora_fim=None, hoje=HOJE)
    assert editado.hora_fim == time(8, 20)


def test_pendentes_e_historico(servico, paciente):
    amanha = servico.agendar(paciente, "centro", "clinico", HOJE + timedelta(days=1), time(8, 0), hoje=HOJE)
    hoje = servico.agendar(paciente, "centro", "audio", HOJE, time(9, 0), hoje=HOJE)
    passado = _historico(servico, paciente, "clinico", 30, StatusAgendamento.COMPARECEU)

    assert [a.id for a in servico.pendentes_do_paciente(paciente.id)] == [hoje.id, amanha.id]
    assert [a.id for a in servico.historico_do_paciente(paciente.id)] == [amanha.id, hoje.id, passado.id]


def test_layout_do_dia_usa_duracoes_do_catalogo(servico, paciente):
    outro = Paciente.novo("Maria Oliveira")
    a = servico.agendar(paciente, "centro", "audio", HOJE, time(8, 0), hoje=HOJE)
    b = servico.agendar(outro, "centro", "clinico", HOJE, time(8, 10), hoje=HOJE)
    blocos = {bl.agendamento_id: bl for bl in servico.layout(HOJE)}
    assert blocos[a.id].fim_minutos == 8 * 60 + 20
    assert blocos[a.id].coluna == 0
    assert blocos[b.id].coluna == 1
    assert servico.layout(HOJE + timedelta(days=1)) == []


def test_relatorio_atendimentos(servico, paciente):
    _historico(servico, paciente, "audio", 5, StatusAgendamento.COMPARECEU)
    _historico(servico, paciente, "audio", 6, StatusAgendamento.COMPARECEU)
    _historico(servico, paciente, "clinico", 7, StatusAgendamento.COMPARECEU)
    _historico(servico, paciente, "clinico", 8, StatusAgendamento.FALTOU)

    relatorio = servico.relatorio_atendimentos("centro", HOJE - timedelta(days=30), HOJE)
    assert relatorio == [("Audiometria", 2), ("Clínico Geral", 1)]
    with pytest.raises(ValidationError):
        servico.relatorio_atendimentos("centro", HOJE, HOJE - timedelta(days=1))


def test_excluir_e_status_de_inexistente(servico):
    with pytest.raises(ValidationError):
        servico.obter("nao-existe")
    with pytest.raises(ValidationError):
        servico.excluir("nao-existe")
    with pytest.raises(ValidationError):
        servico.atualizar_status("nao-existe", StatusAgendamento.COMPARECEU)
