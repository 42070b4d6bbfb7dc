"""Fluxo de autenticação por email + OTP."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.constants import bot_texts as texts
from app.protocols.models import Reply
from app.sessions.scratch import AuthScratch
from app.use_cases.conversation import keyboards
from fsm import Flow, Step
from utils.errors import BackendCallError

if TYPE_CHECKING:
    from app.domain.payouts import AuthResult, KycStatus, UserProfile
    from app.use_cases.conversation.context import FlowContext

logger = logging.getLogger(__name__)


def start_login(ctx: FlowContext, trigger: str = "login") -> Reply:
    if ctx.session.is_authenticated:
        return Reply(texts.ALREADY_LOGGED_IN, keyboard=keyboards.MAIN_MENU)
    ctx.enter(Flow.AUTH, trigger)
    return Reply(texts.LOGIN_PROMPT, keyboard=keyboards.CANCEL_ONLY)


async def handle_email(ctx: FlowContext, email: str) -> Reply:
    """auth_email: solicita OTP para o email já validado e avança para auth_otp.

    Falha ao solicitar OTP mantém o passo (usuário pode reenviar).
    """
    try:
        challenge = await ctx.backend.request_otp(email)
    except BackendCallError as exc:
        logger.warning(
            "otp_request_failed",
            extra={"user_id": ctx.session.user_id, "status_code": exc.status_code},
        )
        return Reply(texts.OTP_REQUEST_FAILED, keyboard=keyboards.CANCEL_ONLY)

    ctx.advance(
        Step.AUTH_OTP,
        "otp_requested",
        AuthScratch(email=email, exchange_id=challenge.exchange_id),
    )
    logger.info("otp_requested", extra={"user_id": ctx.session.user_id})
    return Reply(texts.otp_sent(email), keyboard=keyboards.CANCEL_ONLY)


async def handle_otp(ctx: FlowContext, otp: str) -> Reply:
    """auth_otp: autentica com o OTP já validado e volta para idle.

    Falha de autenticação mantém o passo.
    """
    scratch = ctx.session.scratch_as(AuthScratch)
    if scratch is None or not scratch.email:
        ctx.finish("auth_session_error")
        return Reply(texts.LOGIN_SESSION_ERROR)

    try:
        result = await ctx.backend.authenticate(scratch.email, otp, scratch.exchange_id or "")
    except BackendCallError as exc:
        logger.warning(
            "authentication_failed",
            extra={"user_id": ctx.session.user_id, "status_code": exc.status_code},
        )
        return Reply(texts.AUTH_FAILED, keyboard=keyboards.CANCEL_ONLY)

    return await _complete_login(ctx, scratch.email, result)


async def _complete_login(ctx: FlowContext, email: str, result: AuthResult) -> Reply:
    session = ctx.session
    session.auth_token = result.access_token
    session.organization_id = result.organization_id
    session.email = email
    ctx.finish("authenticated")
    logger.info(
        "user_authenticated",
        extra={"user_id": session.user_id, "organization_id": session.organization_id},
    )

    profile = await _load_profile(ctx, result.user)
    if session.organization_id:
        await ctx.on_authenticated(
            session.user_id,
            session.organization_id,
            session.destination,
            session.auth_token,
        )

    text = texts.login_success(profile.display_name)
    kyc = await _latest_kyc(ctx)
    if kyc is not None and not kyc.is_approved:
        text = f"{text}\n\n{texts.kyc_warning(kyc.status)}"
    return Reply(text, keyboard=keyboards.MAIN_MENU)


async def _load_profile(ctx: FlowContext, fallback: UserProfile) -> UserProfile:
    try:
        return await ctx.backend.get_profile(ctx.token)
    except BackendCallError:
        logger.warning("profile_fetch_failed", extra={"user_id": ctx.session.user_id})
        return fallback


async def _latest_kyc(ctx: FlowContext) -> KycStatus | None:
    """Status do KYC mais recente (o primeiro da lista); falha é tolerada."""
    try:
        statuses = await ctx.backend.get_kyc_status(ctx.token)
    except BackendCallError:
        logger.warning("kyc_fetch_failed", extra={"user_id": ctx.session.user_id})
        return None
    return statuses[0] if statuses else None


async def logout(ctx: FlowContext) -> Reply:
    session = ctx.session
    if session.organization_id:
        await ctx.on_logged_out(session.user_id, session.organization_id)
    ctx.finish("logout")
    session.reset()
    logger.info("user_logged_out", extra={"user_id": session.user_id})
    return Reply(texts.LOGGED_OUT, parse_mode=None)
