"""Tests for the factory functions."""

from __future__ import annotations

import pytest

from validly import (
    FormValidator,
    SimpleValidator,
    Validator,
    create_form_validator,
    create_simple_validator,
    create_validator,
)


class TestCreateValidator:
    def test_options(self):
        validator = create_validator(locale="pt-BR", stop_on_first_failure=True)
        assert isinstance(validator, Validator)
        assert validator.get_locale() == "pt-BR"
        assert validator.get_global_config().stop_on_first_failure is True

    def test_unknown_options_ignored(self):
        assert create_validator(not_an_option=1).get_locale() == "en"


class TestFormValidator:
    @pytest.fixture
    def form(self) -> FormValidator:
        return create_form_validator(
            {"email": "required|email", "password": "required|min:8"},
            initial_data={"email": ""},
            scope="signup",
        )

    def test_initial_state(self, form):
        assert form.scope == "signup"
        assert form.get_data("signup") == {"email": ""}
        assert form.has_rules("email", "signup")

    def test_submit_error(self, form):
        received = {}
        ok = form.submit(on_success=pytest.fail, on_error=received.update)
        assert ok is False
        assert received == {
            "signup.email": ["The Email field is required."],
            "signup.password": ["The Password field is required."],
        }

    def test_submit_success(self, form):
        form.field("email").set_value("ana@example.com")
        form.field("password").set_value("s3cret-pass")
        received = []
        assert form.submit(on_success=received.append) is True
        assert received == [{"email": "ana@example.com", "password": "s3cret-pass"}]

    def test_field_handle(self, form):
        email = form.field("email")
        assert email.key == "signup.email"
        email.set_label("E-mail")
        email.set_value("bad")
        assert email.validate() is False
        assert email.has_error()
        assert email.get_error() == "The E-mail field must be a valid email address."
        assert email.get_value() == "bad"
        assert not form.field("password").has_error()

    def test_custom_messages(self):
        form = create_form_validator(
            {"email": "required"},
            messages={"email.required": "Informe seu e-mail"},
        )
        form.submit()
        assert form.errors().first("email") == "Informe seu e-mail"

    @pytest.mark.asyncio
    async def test_asubmit(self, form):
        received = []
        form.set_data({"email": "ana@example.com", "password": "s3cret-pass"}, "signup")
        assert await form.asubmit(on_success=received.append) is True
        assert received[0]["email"] == "ana@example.com"


class TestSimpleValidator:
    def test_single_value(self):
        is_adult = create_simple_validator("required|integer|min_value:18")
        assert isinstance(is_adult, SimpleValidator)
        assert is_adult.validate("21") is True
        assert is_adult.validate("17") is False
        assert is_adult.errors().first("value") == "The Value field must be at least 18."

    def test_state_reset_between_calls(self):
        simple = create_simple_validator("required")
        simple.validate("")
        assert not simple.is_valid()
        simple.validate("x")
        assert simple.is_valid()

    def test_list_rules(self):
        simple = create_simple_validator(["required", {"max": 3}])
        assert simple.validate("abcd") is False

    def test_mapping_rules(self):
        simple = create_simple_validator({"email": "required|email", "age": "integer"})
        assert simple.validate({"email": "ana@example.com", "age": "30"}) is True
        assert simple.validate({"email": "x", "age": "3.5"}) is False
        assert simple.errors().keys() == ["email", "age"]

    def test_locale(self):
        simple = create_simple_validator("required", locale="es")
        simple.validate(None)
        assert simple.errors().first("value") == "El campo Value es obligatorio."
