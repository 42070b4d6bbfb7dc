"""
Testes abrangentes para o módulo FSM.

- Testamos comportamento e contrato público
- Um teste cobre múltiplos componentes relacionados
- Foco em cenários válidos + inválidos + bordas
"""

import pytest

from fsm import (
    CONFIRM_STEPS,
    ENTRY_STEPS,
    FLOW_ENTRY,
    FLOW_STEPS,
    PUBLIC_STEPS,
    VALID_TRANSITIONS,
    Flow,
    GuardResult,
    IllegalTransitionError,
    InputKind,
    StateTransition,
    Step,
    StepMachine,
    TransitionResult,
    evaluate_guards,
    expected_input,
    flow_of,
    is_public,
    is_transition_valid,
    parse_step,
    validate_transition_map,
)
from fsm.rules import (
    looks_like_email,
    validate_amount,
    validate_email,
    validate_input,
    validate_network,
    validate_otp,
    validate_wallet_address,
)
from utils.errors import ValidationError

# ══════════════════════════════════════════════════════════════════════════════
# Passos e fluxos
# ══════════════════════════════════════════════════════════════════════════════


class TestSteps:
    """Catálogo de passos e fluxos."""

    def test_every_step_belongs_to_one_flow(self) -> None:
        listed = [step for steps in FLOW_STEPS.values() for step in steps]
        assert sorted(listed) == sorted(Step)
        assert len(listed) == len(set(listed))

    def test_flow_entry_is_first_step(self) -> None:
        assert FLOW_ENTRY[Flow.AUTH] == Step.AUTH_EMAIL
        assert FLOW_ENTRY[Flow.SEND_WALLET] == Step.SEND_WALLET_ADDRESS
        assert FLOW_ENTRY[Flow.WALLET_SELECTION] == Step.SELECT_DEFAULT_WALLET
        assert len(ENTRY_STEPS) == len(Flow)

    def test_flow_of(self) -> None:
        assert flow_of(Step.AUTH_OTP) == Flow.AUTH
        assert flow_of(Step.CONFIRM_BANK_WITHDRAWAL) == Flow.WITHDRAW_BANK

    def test_public_steps_are_auth_only(self) -> None:
        assert PUBLIC_STEPS == {Step.AUTH_EMAIL, Step.AUTH_OTP}
        assert is_public(None)
        assert not is_public(Step.SEND_EMAIL_ADDRESS)

    def test_expected_input(self) -> None:
        assert expected_input(Step.AUTH_OTP) == InputKind.TEXT
        assert expected_input(Step.SELECT_DEFAULT_WALLET) == InputKind.SELECTION
        for step in CONFIRM_STEPS:
            assert expected_input(step) == InputKind.CONFIRMATION

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("auth_otp", Step.AUTH_OTP), (None, None), ("", None), ("legacy_state", None)],
    )
    def test_parse_step(self, value, expected) -> None:
        assert parse_step(value) == expected


# ══════════════════════════════════════════════════════════════════════════════
# Transições
# ══════════════════════════════════════════════════════════════════════════════


class TestTransitions:
    """Tabela de transições."""

    def test_map_is_consistent(self) -> None:
        assert validate_transition_map() == []

    def test_idle_reaches_every_entry(self) -> None:
        assert VALID_TRANSITIONS[None] == {None, *ENTRY_STEPS}

    @pytest.mark.parametrize("step", list(Step))
    def test_every_step_can_return_to_idle(self, step: Step) -> None:
        assert is_transition_valid(step, None)

    @pytest.mark.parametrize("step", list(Step))
    def test_every_step_can_enter_any_flow(self, step: Step) -> None:
        for entry in ENTRY_STEPS:
            assert is_transition_valid(step, entry)

    def test_forward_edges(self) -> None:
        assert is_transition_valid(Step.AUTH_EMAIL, Step.AUTH_OTP)
        assert is_transition_valid(Step.SEND_WALLET_NETWORK, Step.SEND_WALLET_AMOUNT)

    def test_skipping_steps_is_invalid(self) -> None:
        assert not is_transition_valid(Step.SEND_EMAIL_ADDRESS, Step.CONFIRM_EMAIL_TRANSFER)
        assert not is_transition_valid(None, Step.AUTH_OTP)
        assert not is_transition_valid(Step.SEND_EMAIL_AMOUNT, Step.CONFIRM_BANK_WITHDRAWAL)


# ══════════════════════════════════════════════════════════════════════════════
# Guards
# ══════════════════════════════════════════════════════════════════════════════


class TestGuards:
    """Guards de autenticação."""

    def test_unauthenticated_cannot_enter_money_flow(self) -> None:
        result = evaluate_guards(None, Step.SEND_EMAIL_ADDRESS, authenticated=False)
        assert result.allowed is False
        assert result.reason

    def test_unauthenticated_can_enter_auth(self) -> None:
        assert evaluate_guards(None, Step.AUTH_EMAIL, authenticated=False).allowed

    def test_idle_is_always_allowed(self) -> None:
        assert evaluate_guards(Step.SEND_EMAIL_AMOUNT, None, authenticated=False).allowed

    def test_custom_guard_list(self) -> None:
        deny = lambda f, t, a: GuardResult.deny("blocked")  # noqa: E731
        result = evaluate_guards(None, Step.AUTH_EMAIL, True, guards=[deny])
        assert result.reason == "blocked"


# ══════════════════════════════════════════════════════════════════════════════
# StepMachine
# ══════════════════════════════════════════════════════════════════════════════


class TestStepMachine:
    """Máquina de passos."""

    def test_starts_idle(self) -> None:
        machine = StepMachine()
        assert machine.is_idle
        assert machine.history == []

    def test_advance_records_history(self) -> None:
        machine = StepMachine(authenticated=True, user_id="u1")

        machine.advance(Step.WITHDRAW_BANK_AMOUNT, "withdraw_bank")
        machine.advance(Step.CONFIRM_BANK_WITHDRAWAL, "amount_entered")
        machine.advance(None, "confirmed")

        assert machine.is_idle
        assert [t.trigger for t in machine.history] == ["withdraw_bank", "amount_entered", "confirmed"]

    def test_invalid_transition_returns_failure(self) -> None:
        machine = StepMachine(Step.SEND_EMAIL_ADDRESS, authenticated=True)

        result = machine.transition(Step.CONFIRM_EMAIL_TRANSFER, "skip")

        assert result.success is False
        assert "inválida" in result.error_reason
        assert machine.current_step == Step.SEND_EMAIL_ADDRESS

    def test_guard_denial_returns_failure(self) -> None:
        machine = StepMachine(authenticated=False)

        result = machine.transition(Step.SEND_EMAIL_ADDRESS, "send_email")

        assert result.success is False
        assert machine.is_idle

    def test_advance_raises_on_denial(self) -> None:
        machine = StepMachine(authenticated=False)

        with pytest.raises(IllegalTransitionError):
            machine.advance(Step.WITHDRAW_BANK_AMOUNT, "withdraw_bank")

    def test_state_summary(self) -> None:
        machine = StepMachine(Step.AUTH_OTP, user_id="u1")
        summary = machine.get_state_summary()
        assert summary == {
            "user_id": "u1",
            "current_step": "auth_otp",
            "authenticated": False,
            "transition_count": 0,
        }


# ══════════════════════════════════════════════════════════════════════════════
# Tipos
# ══════════════════════════════════════════════════════════════════════════════


class TestTypes:
    """StateTransition e TransitionResult."""

    def test_empty_trigger_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            StateTransition(from_step=None, to_step=Step.AUTH_EMAIL, trigger=" ")

    def test_log_dict_uses_idle(self) -> None:
        transition = StateTransition(from_step=Step.AUTH_OTP, to_step=None, trigger="authenticated")
        data = transition.to_log_dict()
        assert data["from_step"] == "auth_otp"
        assert data["to_step"] == "idle"

    def test_result_invariants(self) -> None:
        with pytest.raises(ValueError):
            TransitionResult(success=True)
        with pytest.raises(ValueError):
            TransitionResult(success=False)


# ══════════════════════════════════════════════════════════════════════════════
# Validação de entrada
# ══════════════════════════════════════════════════════════════════════════════


class TestInputValidation:
    """Formato da entrada de texto de cada passo."""

    @pytest.mark.parametrize("value", ["a@b.co", "  user.name+tag@example.com "])
    def test_valid_email(self, value: str) -> None:
        assert validate_email(value) == value.strip()
        assert looks_like_email(value)

    @pytest.mark.parametrize("value", ["", "user", "user@", "@example.com", "a b@c.com", "a@b"])
    def test_invalid_email(self, value: str) -> None:
        with pytest.raises(ValidationError):
            validate_email(value)

    @pytest.mark.parametrize("value", ["12a456", "12345", "1234567", "", "12 456"])
    def test_invalid_otp(self, value: str) -> None:
        with pytest.raises(ValidationError):
            validate_otp(value)

    def test_valid_otp(self) -> None:
        assert validate_otp(" 123456 ") == "123456"

    @pytest.mark.parametrize("value", ["100", "0.5", "12.345678"])
    def test_valid_amount(self, value: str) -> None:
        assert validate_amount(value) == value

    @pytest.mark.parametrize("value", ["0", "0.0", "-1", "abc", "1e3", "1,5", ".5", ""])
    def test_invalid_amount(self, value: str) -> None:
        with pytest.raises(ValidationError):
            validate_amount(value)

    @pytest.mark.parametrize(
        ("value", "network"),
        [("1", "solana"), ("2", "ethereum"), ("Solana", "solana"), (" ETHEREUM ", "ethereum")],
    )
    def test_network_aliases(self, value: str, network: str) -> None:
        assert validate_network(value) == network

    def test_unknown_network(self) -> None:
        with pytest.raises(ValidationError):
            validate_network("3")

    def test_wallet_address(self) -> None:
        assert validate_wallet_address(" 0xabc ") == "0xabc"
        with pytest.raises(ValidationError):
            validate_wallet_address("0x abc")

    def test_validate_input_dispatches_by_step(self) -> None:
        assert validate_input(Step.SEND_WALLET_NETWORK, "2") == "ethereum"
        with pytest.raises(KeyError):
            validate_input(Step.CONFIRM_EMAIL_TRANSFER, "yes")
