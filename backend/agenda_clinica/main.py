import logging
from datetime import date
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import config
from .domain import Clinica, Empresa, ModoAtendimento, Observacoes, Paciente
from .domain.exceptions import DomainError
from .domain.services.observacoes import gravar_observacoes, ler_observacoes, limpar_marcadores, rotulo_modo
from .domain.services.temporal import formatar_hora
from .schemas import (
    AgendamentoOut,
    AgendamentoRequest,
    BlocoLayoutOut,
    ClinicaCreate,
    ClinicaOut,
    EditarAgendamentoRequest,
    ElegibilidadeOut,
    EmpresaCreate,
    EmpresaOut,
    EspecialidadeCreate,
    EspecialidadeOut,
    PacienteCreate,
    PacienteOut,
    PacienteUpdate,
    RelatorioItem,
    RelatorioOut,
    StatusRequest,
)
from .storage import store

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Agenda Clínica", version="1.0.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def erro_nao_tratado(request: Request, exc: Exception):
    logger.exception("Erro não tratado em %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Erro interno do servidor"})


def _serializar_agendamento(agendamento) -> AgendamentoOut:
    pac = store.pacientes.get(agendamento.paciente_id or "")
    esp = store.servico.especialidades.get(agendamento.especialidade_id or "")
    obs = agendamento.observacoes
    bruto = gravar_observacoes(obs)
    return AgendamentoOut(
        id=agendamento.id,
        paciente_id=agendamento.paciente_id,
        paciente_nome=pac.nome if pac else "Paciente não informado",
        clinica_id=agendamento.clinica_id,
        especialidade_id=agendamento.especialidade_id,
        especialidade_nome=esp.nome if esp else None,
        data=agendamento.data,
        hora_inicio=agendamento.hora_inicio,
        hora_fim=agendamento.hora_fim,
        status=agendamento.status,
        profissional=agendamento.profissional,
        empresa_id=agendamento.empresa_id,
        observacoes=bruto,
        observacoes_limpas=limpar_marcadores(bruto),
        online=obs.online,
        modo=obs.modo,
        modo_rotulo=rotulo_modo(obs),
        horario=f"{formatar_hora(agendamento.hora_inicio)} - {formatar_hora(agendamento.hora_fim)}",
        justificativa=obs.justificativa,
    )


def _observacoes(texto: Optional[str], online: bool, ordem_chegada: bool) -> Observacoes:
    # o texto pode chegar já com marcadores do formato persistido
    lidas = ler_observacoes(texto)
    return Observacoes(
        texto=lidas.texto,
        online=online or lidas.online,
        modo=ModoAtendimento.ORDEM_CHEGADA if ordem_chegada or lidas.ordem_chegada else ModoAtendimento.HORA_MARCADA,
    )


def _handle_domain_error(err: DomainError) -> None:
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(err)) from err


# --- cadastros ---
@app.get("/clinicas", response_model=List[ClinicaOut])
def listar_clinicas(ativas: bool = Query(default=False)):
    clinicas = sorted(store.clinicas.values(), key=lambda c: c.nome)
    if ativas:
        clinicas = [c for c in clinicas if c.ativa]
    return [ClinicaOut.model_validate(c) for c in clinicas]


@app.post("/clinicas", response_model=ClinicaOut, status_code=status.HTTP_201_CREATED)
def criar_clinica(payload: ClinicaCreate):
    try:
        clinica = store.adicionar_clinica(Clinica.nova(payload.nome, payload.endereco, payload.telefone))
        return ClinicaOut.model_validate(clinica)
    except DomainError as err:
        _handle_domain_error(err)


@app.post("/clinicas/{clinica_id}/ativar", response_model=ClinicaOut)
def ativar_clinica(clinica_id: str):
    try:
        clinica = store.obter_clinica(clinica_id)
        clinica.ativar()
        return ClinicaOut.model_validate(clinica)
    except DomainError as err:
        _handle_domain_error(err)


@app.post("/clinicas/{clinica_id}/desativar", response_model=ClinicaOut)
def desativar_clinica(clinica_id: str):
    try:
        clinica = store.obter_clinica(clinica_id)
        clinica.desativar()
        return ClinicaOut.model_validate(clinica)
    except DomainError as err:
        _handle_domain_error(err)


@app.get("/empresas", response_model=List[EmpresaOut])
def listar_empresas():
    return [EmpresaOut.model_validate(e) for e in sorted(store.empresas.values(), key=lambda e: e.nome)]


@app.post("/empresas", response_model=EmpresaOut, status_code=status.HTTP_201_CREATED)
def criar_empresa(payload: EmpresaCreate):
    try:
        empresa = store.adicionar_empresa(Empresa.nova(payload.nome, payload.telefone, payload.email))
        return EmpresaOut.model_validate(empresa)
    except DomainError as err:
        _handle_domain_error(err)


@app.get("/especialidades", response_model=List[EspecialidadeOut])
def listar_especialidades(clinica_id: Optional[str] = Query(default=None)):
    return [EspecialidadeOut.model_validate(e) for e in store.especialidades_da_clinica(clinica_id)]


@app.post("/especialidades", response_model=List[EspecialidadeOut], status_code=status.HTTP_201_CREATED)
def criar_especialidade(payload: EspecialidadeCreate):
    try:
        criadas = store.adicionar_especialidade(
            payload.nome, payload.clinica_ids, tipo=payload.tipo, duracao_minutos=payload.duracao_minutos
        )
        return [EspecialidadeOut.model_validate(e) for e in criadas]
    except DomainError as err:
        _handle_domain_error(err)


@app.get("/pacientes", response_model=List[PacienteOut])
def listar_pacientes():
    return [PacienteOut.model_validate(p) for p in sorted(store.pacientes.values(), key=lambda p: p.nome)]


@app.post("/pacientes", response_model=PacienteOut, status_code=status.HTTP_201_CREATED)
def criar_paciente(payload: PacienteCreate):
    try:
        paciente = Paciente.novo(
            payload.nome, payload.empresa_id, cpf=payload.cpf, telefone=payload.telefone, email=payload.email
        )
        return PacienteOut.model_validate(store.adicionar_paciente(paciente))
    except DomainError as err:
        _handle_domain_error(err)


@app.put("/pacientes/{paciente_id}", response_model=PacienteOut)
def atualizar_paciente(paciente_id: str, payload: PacienteUpdate):
    try:
        paciente = store.atualizar_paciente(paciente_id, **payload.model_dump(exclude_unset=True))
        return PacienteOut.model_validate(paciente)
    except DomainError as err:
        _handle_domain_error(err)


@app.delete("/pacientes/{paciente_id}", status_code=status.HTTP_204_NO_CONTENT)
def excluir_paciente(paciente_id: str):
    try:
        store.excluir_paciente(paciente_id)
    except DomainError as err:
        _handle_domain_error(err)


@app.get("/pacientes/{paciente_id}/pendentes", response_model=List[AgendamentoOut])
def pendentes_do_paciente(paciente_id: str):
    try:
        paciente = store.obter_paciente(paciente_id)
        return [_serializar_agendamento(a) for a in store.servico.pendentes_do_paciente(paciente.id)]
    except DomainError as err:
        _handle_domain_error(err)


@app.get("/pacientes/{paciente_id}/historico", response_model=List[AgendamentoOut])
def historico_do_paciente(paciente_id: str):
    try:
        paciente = store.obter_paciente(paciente_id)
        return [_serializar_agendamento(a) for a in store.servico.historico_do_paciente(paciente.id)]
    except DomainError as err:
        _handle_domain_error(err)


# --- agendamentos ---
@app.get("/elegibilidade", response_model=ElegibilidadeOut)
def verificar_elegibilidade(
    paciente_id: Optional[str] = Query(default=None),
    especialidade_id: Optional[str] = Query(default=None),
    agendamento_id: Optional[str] = Query(default=None, description="Agendamento em edição"),
):
    elegibilidade = store.servico.verificar(paciente_id, especialidade_id, excluir_agendamento_id=agendamento_id)
    return ElegibilidadeOut.model_validate(elegibilidade)


@app.get("/agendamentos", response_model=List[AgendamentoOut])
def listar_agendamentos(
    data: Optional[date] = Query(default=None),
    clinica_id: Optional[str] = Query(default=None),
    especialidade: Optional[str] = Query(default=None, description="Nome da especialidade"),
):
    agendamentos = store.servico.listar(data, clinica_id, especialidade)
    return [_serializar_agendamento(a) for a in agendamentos]


@app.post("/agendamentos", response_model=AgendamentoOut, status_code=status.HTTP_201_CREATED)
def agendar(payload: AgendamentoRequest):
    try:
        paciente = store.obter_paciente(payload.paciente_id)
        store.obter_clinica(payload.clinica_id)
        agendamento = store.servico.agendar(
            paciente,
            payload.clinica_id,
            payload.especialidade_id,
            payload.data,
            payload.hora_inicio,
            payload.hora_fim,
            profissional=payload.profissional,
            observacoes=_observacoes(payload.observacoes, payload.online, payload.ordem_chegada),
            justificativa=payload.justificativa,
        )
        return _serializar_agendamento(agendamento)
    except DomainError as err:
        _handle_domain_error(err)


@app.put("/agendamentos/{agendamento_id}", response_model=AgendamentoOut)
def editar_agendamento(agendamento_id: str, payload: EditarAgendamentoRequest):
    try:
        if payload.clinica_id:
            store.obter_clinica(payload.clinica_id)
        campos = payload.model_dump(exclude_unset=True)
        observacoes = None
        if {"observacoes", "online", "ordem_chegada"} & campos.keys():
            atual = store.servico.obter(agendamento_id).observacoes
            observacoes = _observacoes(
                payload.observacoes if "observacoes" in campos else atual.texto,
                payload.online if payload.online is not None else atual.online,
                payload.ordem_chegada if payload.ordem_chegada is not None else atual.ordem_chegada,
            )
        extras = {"hora_fim": payload.hora_fim} if "hora_fim" in campos else {}
        agendamento = store.servico.editar(
            agendamento_id,
            clinica_id=payload.clinica_id,
            especialidade_id=payload.especialidade_id,
            data=payload.data,
            hora_inicio=payload.hora_inicio,
            profissional=payload.profissional,
            observacoes=observacoes,
            justificativa=payload.justificativa,
            **extras,
        )
        return _serializar_agendamento(agendamento)
    except DomainError as err:
        _handle_domain_error(err)


@app.post("/agendamentos/{agendamento_id}/status", response_model=AgendamentoOut)
def atualizar_status(agendamento_id: str, payload: StatusRequest):
    try:
        return _serializar_agendamento(store.servico.atualizar_status(agendamento_id, payload.status))
    except DomainError as err:
        _handle_domain_error(err)


@app.delete("/agendamentos/{agendamento_id}", status_code=status.HTTP_204_NO_CONTENT)
def excluir_agendamento(agendamento_id: str):
    try:
        store.servico.excluir(agendamento_id)
    except DomainError as err:
        _handle_domain_error(err)


@app.get("/agenda/{data}/layout", response_model=List[BlocoLayoutOut])
def layout_do_dia(
    data: date,
    clinica_id: Optional[str] = Query(default=None),
    especialidade: Optional[str] = Query(default=None),
):
    blocos = store.servico.layout(
        data,
        clinica_id,
        especialidade,
        inicio_dia_minutos=config.AGENDA_INICIO_DIA_MINUTOS,
        pixels_por_minuto=config.AGENDA_PIXELS_POR_MINUTO,
        altura_minima=config.AGENDA_ALTURA_MINIMA,
    )
    return [BlocoLayoutOut.model_validate(b) for b in blocos]


@app.get("/relatorios/atendimentos", response_model=RelatorioOut)
def relatorio_atendimentos(clinica_id: str, inicio: date, fim: date):
    try:
        clinica = store.obter_clinica(clinica_id)
        itens = store.servico.relatorio_atendimentos(clinica.id, inicio, fim)
        return RelatorioOut(
            clinica_nome=clinica.nome,
            inicio=inicio,
            fim=fim,
            total_atendimentos=sum(total for _, total in itens),
            especialidades=[RelatorioItem(nome=nome, total=total) for nome, total in itens],
        )
    except DomainError as err:
        _handle_domain_error(err)
