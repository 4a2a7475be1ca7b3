"""Shared fixtures for validly tests."""

from __future__ import annotations

import re

import pytest

from validly import Validator, reset_global_validator

pytest_plugins = ("pytest_asyncio",)

CPF_PATTERN = re.compile(r"^\d{3}\.\d{3}\.\d{3}-\d{2}$")


@pytest.fixture(autouse=True)
def fresh_global_validator():
    """Give every test its own global validator."""
    reset_global_validator()
    yield
    reset_global_validator()


@pytest.fixture
def validator() -> Validator:
    return Validator()


@pytest.fixture
def signup_rules() -> dict[str, str]:
    return {
        "name": "required|alpha_spaces|min:3",
        "email": "required|email",
        "password": "required|min:8",
        "password_confirmation": "required|confirmed",
    }


@pytest.fixture
def valid_signup() -> dict[str, str]:
    return {
        "name": "Ana Souza",
        "email": "ana@example.com",
        "password": "s3cret-pass",
        "password_confirmation": "s3cret-pass",
    }


@pytest.fixture
def pt_br_translations() -> dict[str, str]:
    """Brazilian form messages, as an app would ship them."""
    return {
        "cpf": "O campo {field} deve ser um CPF válido.",
        "phone.pattern": "Telefone deve estar no formato (00) 00000-0000",
        "email.required": "Informe seu e-mail",
    }


@pytest.fixture
def cpf_check():
    def cpf(value):
        return CPF_PATTERN.match(value) is not None

    return cpf
