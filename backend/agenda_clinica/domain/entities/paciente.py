from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
import uuid

from ..exceptions import ValidationError


@dataclass
class Empresa:
    _id: str
    _nome: str
    _telefone: Optional[str] = None
    _email: Optional[str] = None

    @property
    def id(self) -> str:
        return self._id

    @property
    def nome(self) -> str:
        return self._nome

    @property
    def telefone(self) -> Optional[str]:
        return self._telefone

    @property
    def email(self) -> Optional[str]:
        return self._email

    @staticmethod
    def nova(nome: str, telefone: Optional[str] = None, email: Optional[str] = None) -> "Empresa":
        if not nome or not nome.strip():
            raise ValidationError("Nome da empresa é obrigatório.")
        return Empresa(
            _id=str(uuid.uuid4()),
            _nome=nome.strip(),
            _telefone=(telefone or "").strip() or None,
            _email=(email or "").lower().strip() or None,
        )


@dataclass
class Paciente:
    _id: str
    _nome: str
    _empresa_id: Optional[str] = None
    _cpf: Optional[str] = None
    _telefone: Optional[str] = None
    _email: Optional[str] = None

    @property
    def id(self) -> str:
        return self._id

    @property
    def nome(self) -> str:
        return self._nome

    @nome.setter
    def nome(self, novo: str) -> None:
        if not novo or len(novo.strip()) < 3:
            raise ValidationError("Nome inválido.")
        self._nome = novo.strip()

    @property
    def empresa_id(self) -> Optional[str]:
        return self._empresa_id

    @empresa_id.setter
    def empresa_id(self, novo: Optional[str]) -> None:
        self._empresa_id = novo or None

    @property
    def cpf(self) -> Optional[str]:
        return self._cpf

    @property
    def telefone(self) -> Optional[str]:
        return self._telefone

    @telefone.setter
    def telefone(self, novo: Optional[str]) -> None:
        self._telefone = (novo or "").strip() or None

    @property
    def email(self) -> Optional[str]:
        return self._email

    @staticmethod
    def novo(
        nome: str,
        empresa_id: Optional[str] = None,
        cpf: Optional[str] = None,
        telefone: Optional[str] = None,
        email: Optional[str] = None,
    ) -> "Paciente":
        if not nome or len(nome.strip()) < 3:
            raise ValidationError("Nome inválido.")
        return Paciente(
            _id=str(uuid.uuid4()),
            _nome=nome.strip(),
            _empresa_id=empresa_id or None,
            _cpf=(cpf or "").strip() or None,
            _telefone=(telefone or "").strip() or None,
            _email=(email or "").lower().strip() or None,
        )
