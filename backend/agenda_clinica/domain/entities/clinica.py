from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
import uuid

from ..enums import TipoEspecialidade
from ..exceptions import ValidationError

DURACAO_PADRAO_MINUTOS = 30
DURACAO_MINIMA_MINUTOS = 5


@dataclass
class Clinica:
    _id: str
    _nome: str
    _endereco: Optional[str] = None
    _telefone: Optional[str] = None
    _ativa: bool = True

    @property
    def id(self) -> str:
        return self._id

    @property
    def nome(self) -> str:
        return self._nome

    @property
    def endereco(self) -> Optional[str]:
        return self._endereco

    @property
    def telefone(self) -> Optional[str]:
        return self._telefone

    @property
    def ativa(self) -> bool:
        return self._ativa

    def desativar(self) -> None:
        self._ativa = False

    def ativar(self) -> None:
        self._ativa = True

    @staticmethod
    def nova(nome: str, endereco: Optional[str] = None, telefone: Optional[str] = None) -> "Clinica":
        if not nome or not nome.strip():
            raise ValidationError("Nome da clínica é obrigatório.")
        return Clinica(
            _id=str(uuid.uuid4()),
            _nome=nome.strip(),
            _endereco=(endereco or "").strip() or None,
            _telefone=(telefone or "").strip() or None,
        )


@dataclass(frozen=True)
class Especialidade:
    id: str
    nome: str
    clinica_id: Optional[str] = None
    tipo: Optional[TipoEspecialidade] = None
    duracao_minutos: Optional[int] = DURACAO_PADRAO_MINUTOS

    @staticmethod
    def nova(
        nome: str,
        clinica_id: Optional[str],
        tipo: Optional[TipoEspecialidade] = None,
        duracao_minutos: Optional[int] = DURACAO_PADRAO_MINUTOS,
    ) -> "Especialidade":
        if not nome or not nome.strip():
            raise ValidationError("Nome da especialidade é obrigatório.")
        if duracao_minutos is not None and duracao_minutos < DURACAO_MINIMA_MINUTOS:
            raise ValidationError("Duração mínima é 5 minutos.")
        return Especialidade(
            id=str(uuid.uuid4()),
            nome=nome.strip(),
            clinica_id=clinica_id,
            tipo=tipo,
            duracao_minutos=duracao_minutos,
        )
