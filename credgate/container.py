"""Application dependency container."""

from __future__ import annotations

from functools import cached_property

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from credgate.application.services.password_hashing import (
    PooledPasswordHasher,
    WerkzeugPasswordHasher,
)
from credgate.application.services.tokens import (
    JoseTokenIssuer,
    JoseTokenValidator,
    ttl_from_seconds,
)
from credgate.application.use_cases.users.authenticate_token import AuthenticateTokenUseCase
from credgate.application.use_cases.users.login_user import LoginUserUseCase
from credgate.application.use_cases.users.register_user import RegisterUserUseCase
from credgate.domain.users.repositories import CredentialStore, PasswordHasher
from credgate.infrastructure.db import build_engine, build_session_factory
from credgate.infrastructure.hashing_pool import HashingPool
from credgate.infrastructure.repositories.users.sqlalchemy_credential_store import (
    SqlAlchemyCredentialStore,
)
from credgate.interfaces.http.controllers.auth_controller import AuthController
from credgate.interfaces.http.controllers.misc_controller import MiscController
from credgate.shared.config import AppConfig
from credgate.shared.utils.clock import Clock, utc_now


class Container:
    def __init__(self, config: AppConfig, *, clock: Clock = utc_now) -> None:
        self.config = config
        self.clock = clock

    @cached_property
    def engine(self) -> Engine:
        return build_engine(self.config.database)

    @cached_property
    def session_factory(self) -> sessionmaker[Session]:
        return build_session_factory(self.engine)

    @cached_property
    def hashing_pool(self) -> HashingPool:
        return HashingPool(self.config.hashing.workers)

    @cached_property
    def password_hasher(self) -> PasswordHasher:
        return PooledPasswordHasher(
            WerkzeugPasswordHasher(
                method=self.config.hashing.method,
                salt_length=self.config.hashing.salt_length,
            ),
            self.hashing_pool,
        )

    @cached_property
    def credential_store(self) -> CredentialStore:
        return SqlAlchemyCredentialStore(self.session_factory)

    @cached_property
    def token_issuer(self) -> JoseTokenIssuer:
        return JoseTokenIssuer(
            self.config.auth.jwt_secret.get_secret_value(),
            algorithm=self.config.auth.jwt_algorithm,
        )

    @cached_property
    def token_validator(self) -> JoseTokenValidator:
        return JoseTokenValidator(
            self.config.auth.jwt_secret.get_secret_value(),
            algorithm=self.config.auth.jwt_algorithm,
        )

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            credentials=self.credential_store,
            password_hasher=self.password_hasher,
            clock=self.clock,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            credentials=self.credential_store,
            password_hasher=self.password_hasher,
            tokens=self.token_issuer,
            token_ttl=ttl_from_seconds(self.config.auth.access_token_ttl_seconds),
            clock=self.clock,
        )

    @cached_property
    def authenticate_token_use_case(self) -> AuthenticateTokenUseCase:
        return AuthenticateTokenUseCase(validator=self.token_validator, clock=self.clock)

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
            authenticate_use_case=self.authenticate_token_use_case,
        )

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController(engine=self.engine)

    def close(self) -> None:
        if "hashing_pool" in self.__dict__:
            self.hashing_pool.shutdown()
        if "engine" in self.__dict__:
            self.engine.dispose()
