# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from credgate.application.use_cases.users.authenticate_token import AuthenticateTokenUseCase
from credgate.application.use_cases.users.login_user import LoginUserUseCase
from credgate.application.use_cases.users.register_user import RegisterUserUseCase
from credgate.domain.users.exceptions import DuplicateEmailError, InvalidCredentialsError
from credgate.infrastructure.audit import AuditAction, audit_log
from credgate.interfaces.http.dto.auth import (
    LoginRequestDTO,
    MeDTO,
    RegisterRequestDTO,
    RegisterSuccessDTO,
    TokenDTO,
)
from credgate.interfaces.http.guards import client_ip, current_claims, make_auth_required
from credgate.shared.errors.validation import raise_validation_error
from credgate.shared.logging import logger


class AuthController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
        authenticate_use_case: AuthenticateTokenUseCase,
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._auth_required = make_auth_required(authenticate_use_case)

    def register(self) -> tuple[Response, int]:
        try:
            dto = RegisterRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        try:
            record = self._register_use_case.execute(dto.name, dto.email, dto.password)
        except DuplicateEmailError:
            audit_log(
                AuditAction.REGISTER_FAILED,
                ip_address=client_ip(),
                details={"reason": "duplicate_email"},
                success=False,
            )
            raise

        audit_log(AuditAction.REGISTER, user_id=record.user_id, ip_address=client_ip())
        payload = RegisterSuccessDTO(user_id=record.user_id).model_dump()
        return jsonify(payload), 200

    def login(self) -> tuple[Response, int]:
        try:
            dto = LoginRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        ip_address = client_ip()
        try:
            issued = self._login_use_case.execute(dto.email, dto.password)
        except InvalidCredentialsError:
            audit_log(AuditAction.LOGIN_FAILED, ip_address=ip_address, success=False)
            raise

        audit_log(AuditAction.LOGIN_SUCCESS, ip_address=ip_address)
        expires_in = max(0, int((issued.expires_at - issued.issued_at).total_seconds()))
        payload = TokenDTO(
            access_token=issued.access_token,
            token_type=issued.token_type,
            expires_in=expires_in,
        ).model_dump()
        return jsonify(payload), 200

    def me(self) -> tuple[Response, int]:
        claims = current_claims()
        logger.debug("auth.me: ok")
        return jsonify(MeDTO(email=claims.subject).model_dump()), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/api/auth")
        bp.add_url_rule("/register", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/me", view_func=self._auth_required(self.me), methods=["GET"])
        return bp
