from datetime import date, time
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .domain import Decisao, ModoAtendimento, StatusAgendamento, TipoEspecialidade


class ClinicaCreate(BaseModel):
    nome: str
    endereco: Optional[str] = None
    telefone: Optional[str] = None


class ClinicaOut(ClinicaCreate):
    id: str
    ativa: bool = True

    model_config = ConfigDict(from_attributes=True)


class EmpresaCreate(BaseModel):
    nome: str
    telefone: Optional[str] = None
    email: Optional[str] = None


class EmpresaOut(EmpresaCreate):
    id: str

    model_config = ConfigDict(from_attributes=True)


class PacienteCreate(BaseModel):
    nome: str
    empresa_id: Optional[str] = None
    cpf: Optional[str] = None
    telefone: Optional[str] = None
    email: Optional[str] = None


class PacienteUpdate(BaseModel):
    nome: Optional[str] = None
    empresa_id: Optional[str] = None
    telefone: Optional[str] = None


class PacienteOut(PacienteCreate):
    id: str

    model_config = ConfigDict(from_attributes=True)


class EspecialidadeCreate(BaseModel):
    nome: str
    clinica_ids: List[str] = Field(..., min_length=1, description="Clínicas que oferecem a especialidade")
    tipo: Optional[TipoEspecialidade] = None
    duracao_minutos: Optional[int] = Field(30, ge=5, description="Duração padrão do atendimento")


class EspecialidadeOut(BaseModel):
    id: str
    nome: str
    clinica_id: Optional[str] = None
    tipo: Optional[TipoEspecialidade] = None
    duracao_minutos: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class AgendamentoRequest(BaseModel):
    paciente_id: str
    clinica_id: str
    especialidade_id: str
    data: date
    hora_inicio: time
    hora_fim: Optional[time] = None
    profissional: str = Field(..., min_length=1, description="Nome do profissional")
    observacoes: Optional[str] = None
    online: bool = False
    ordem_chegada: bool = False
    justificativa: Optional[str] = Field(None, description="Obrigatória para liberar um agendamento bloqueado")


class EditarAgendamentoRequest(BaseModel):
    clinica_id: Optional[str] = None
    especialidade_id: Optional[str] = None
    data: Optional[date] = None
    hora_inicio: Optional[time] = None
    hora_fim: Optional[time] = None
    profissional: Optional[str] = None
    observacoes: Optional[str] = None
    online: Optional[bool] = None
    ordem_chegada: Optional[bool] = None
    justificativa: Optional[str] = None


class StatusRequest(BaseModel):
    status: StatusAgendamento


class AgendamentoOut(BaseModel):
    id: str
    paciente_id: Optional[str]
    paciente_nome: str
    clinica_id: Optional[str]
    especialidade_id: Optional[str]
    especialidade_nome: Optional[str] = None
    data: date
    hora_inicio: Optional[time] = None
    hora_fim: Optional[time] = None
    status: StatusAgendamento
    profissional: Optional[str] = None
    empresa_id: Optional[str] = None
    observacoes: str = ""
    observacoes_limpas: str = ""
    online: bool = False
    modo: ModoAtendimento = ModoAtendimento.HORA_MARCADA
    modo_rotulo: str = "HORA MARCADA"
    horario: str = ""
    justificativa: Optional[str] = None


class ElegibilidadeOut(BaseModel):
    decisao: Decisao
    meses_janela: int
    bloqueado: bool
    pode_agendar: bool
    motivo: Optional[str] = None
    mensagem: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class BlocoLayoutOut(BaseModel):
    agendamento_id: str
    inicio_minutos: int
    fim_minutos: int
    top: float
    height: float
    coluna: int
    colunas_no_cluster: int
    left: float
    width: float

    model_config = ConfigDict(from_attributes=True)


class RelatorioItem(BaseModel):
    nome: str
    total: int


class RelatorioOut(BaseModel):
    clinica_nome: str
    inicio: date
    fim: date
    total_atendimentos: int
    especialidades: List[RelatorioItem]
