from datetime import date, time, timedelta
from typing import Dict, List, Optional

from .domain import (
    Agendamento,
    AgendamentoService,
    Clinica,
    Empresa,
    Especialidade,
    Observacoes,
    Paciente,
    StatusAgendamento,
    TipoEspecialidade,
)
from .domain.exceptions import ValidationError


class MemoryStore:
    """Armazena clínicas, pacientes, empresas e agendamentos em memória."""

    def __init__(self, seed: bool = True) -> None:
        self.clinicas: Dict[str, Clinica] = {}
        self.empresas: Dict[str, Empresa] = {}
        self.pacientes: Dict[str, Paciente] = {}
        self.servico = AgendamentoService()
        if seed:
            self._seed()

    # --- cadastros ---
    def adicionar_clinica(self, clinica: Clinica) -> Clinica:
        self.clinicas[clinica.id] = clinica
        return clinica

    def adicionar_empresa(self, empresa: Empresa) -> Empresa:
        self.empresas[empresa.id] = empresa
        return empresa

    def adicionar_paciente(self, paciente: Paciente) -> Paciente:
        if paciente.empresa_id:
            self.obter_empresa(paciente.empresa_id)
        self.pacientes[paciente.id] = paciente
        return paciente

    def adicionar_especialidade(
        self,
        nome: str,
        clinica_ids: List[str],
        tipo: Optional[TipoEspecialidade] = None,
        duracao_minutos: Optional[int] = 30,
    ) -> List[Especialidade]:
        """Cria um registro da especialidade para cada clínica informada."""
        if not clinica_ids:
            raise ValidationError("Selecione ao menos uma clínica.")
        criadas = []
        for clinica_id in clinica_ids:
            self.obter_clinica(clinica_id)
            especialidade = Especialidade.nova(nome, clinica_id, tipo=tipo, duracao_minutos=duracao_minutos)
            criadas.append(self.servico.adicionar_especialidade(especialidade))
        return criadas

    def obter_clinica(self, clinica_id: str) -> Clinica:
        if clinica_id not in self.clinicas:
            raise ValidationError("Clínica não encontrada.")
        return self.clinicas[clinica_id]

    def obter_empresa(self, empresa_id: str) -> Empresa:
        if empresa_id not in self.empresas:
            raise ValidationError("Empresa não encontrada.")
        return self.empresas[empresa_id]

    def obter_paciente(self, paciente_id: str) -> Paciente:
        if paciente_id not in self.pacientes:
            raise ValidationError("Paciente não encontrado.")
        return self.pacientes[paciente_id]

    def atualizar_paciente(self, paciente_id: str, **campos) -> Paciente:
        """Altera nome, empresa_id ou telefone; campos ausentes ficam como estão."""
        paciente = self.obter_paciente(paciente_id)
        if campos.get("empresa_id"):
            self.obter_empresa(campos["empresa_id"])
        if "nome" in campos:
            paciente.nome = campos["nome"]
        if "empresa_id" in campos:
            paciente.empresa_id = campos["empresa_id"]
        if "telefone" in campos:
            paciente.telefone = campos["telefone"]
        return paciente

    def excluir_paciente(self, paciente_id: str) -> None:
        self.obter_paciente(paciente_id)
        del self.pacientes[paciente_id]

    def especialidades_da_clinica(self, clinica_id: Optional[str] = None) -> List[Especialidade]:
        """Especialidades de uma clínica; sem clínica, uma por nome."""
        especialidades = sorted(self.servico.especialidades.values(), key=lambda e: e.nome)
        if clinica_id:
            return [e for e in especialidades if e.clinica_id == clinica_id]
        vistos = set()
        unicas = []
        for e in especialidades:
            if e.nome not in vistos:
                vistos.add(e.nome)
                unicas.append(e)
        return unicas

    # --- dados iniciais ---
    def _seed(self) -> None:
        centro = self.adicionar_clinica(Clinica.nova("Clínica Centro", endereco="Rua Principal, 100"))
        norte = self.adicionar_clinica(Clinica.nova("Clínica Norte"))
        acme = self.adicionar_empresa(Empresa.nova("Acme Transportes", email="rh@acme.com"))

        clinico = self.adicionar_especialidade("Clínico Geral", [centro.id, norte.id], TipoEspecialidade.CONSULTA)[0]
        oftalmo = self.adicionar_especialidade(
            "Consulta Oftalmológica", [centro.id], TipoEspecialidade.CONSULTA, duracao_minutos=40
        )[0]
        audiometria = self.adicionar_especialidade(
            "Audiometria", [centro.id], TipoEspecialidade.EXAME, duracao_minutos=20
        )[0]
        self.adicionar_especialidade("Psicoteste", [centro.id], TipoEspecialidade.PSICOTESTE, duracao_minutos=60)

        joao = self.adicionar_paciente(Paciente.novo("João da Silva", empresa_id=acme.id, telefone="11922223333"))
        maria = self.adicionar_paciente(Paciente.novo("Maria Oliveira", telefone="21911114444"))
        self.adicionar_paciente(Paciente.novo("Carlos Souza", empresa_id=acme.id))

        hoje = date.today()
        historico = [
            Agendamento.novo(joao.id, centro.id, audiometria.id, hoje - timedelta(days=60), time(9, 0), time(9, 20),
                             status=StatusAgendamento.COMPARECEU, empresa_id=acme.id),
            Agendamento.novo(maria.id, centro.id, clinico.id, hoje - timedelta(days=5), time(10, 0), time(10, 30),
                             status=StatusAgendamento.FALTOU),
        ]
        for item in historico:
            self.servico.agendamentos[item.id] = item

        self.servico.agendar(joao, centro.id, clinico.id, hoje, time(8, 0), profissional="Dra. Ana Cardoso")
        self.servico.agendar(
            joao, centro.id, oftalmo.id, hoje, time(8, 15), profissional="Dr. Bruno Silva",
            observacoes=Observacoes(texto="Trazer óculos atuais"),
        )
        self.servico.agendar(
            maria, centro.id, audiometria.id, hoje, time(9, 0), profissional="Dra. Ana Cardoso",
            justificativa="Solicitação do médico do trabalho",
        )


store = MemoryStore()
