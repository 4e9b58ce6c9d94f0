from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, Field, StringConstraints

from marketplace.domain.users.entities import IssuedToken, User

RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]


class RegisterRequestDTO(BaseModel):
    nome: RequiredText
    email: RequiredText
    # Passwords are taken verbatim, surrounding spaces included.
    senha: str = Field(min_length=1)
    telefone: Annotated[str, StringConstraints(strip_whitespace=True, max_length=32)] | None = None


class LoginRequestDTO(BaseModel):
    email: RequiredText
    senha: str = Field(min_length=1)


class UserDTO(BaseModel):
    id: int
    nome: str
    email: str

    @classmethod
    def from_entity(cls, user: User) -> UserDTO:
        return cls(**user.public_view())


class CurrentUserDTO(UserDTO):
    telefone: str | None = None

    @classmethod
    def from_entity(cls, user: User) -> CurrentUserDTO:
        return cls(**user.public_view(), telefone=user.phone)


class LoginResponseDTO(BaseModel):
    token: str
    user: UserDTO

    @classmethod
    def build(cls, issued: IssuedToken, user: User) -> LoginResponseDTO:
        return cls(token=issued.token, user=UserDTO.from_entity(user))
