# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import timedelta
from functools import cached_property

from marketplace.application.use_cases.providers.create_provider import CreateProviderUseCase
from marketplace.application.use_cases.providers.get_provider import GetProviderUseCase
from marketplace.application.use_cases.providers.list_reviews import ListReviewsUseCase
from marketplace.application.use_cases.providers.search_providers import \
    SearchProvidersUseCase
from marketplace.application.use_cases.providers.submit_review import SubmitReviewUseCase
from marketplace.application.use_cases.providers.update_provider import UpdateProviderUseCase
from marketplace.application.use_cases.users.get_current_user import GetCurrentUserUseCase
from marketplace.application.use_cases.users.login_user import LoginUserUseCase
from marketplace.application.use_cases.users.register_user import RegisterUserUseCase
from marketplace.infrastructure.db import Database
from marketplace.infrastructure.repositories.providers import (SqlAlchemyProviderRepository,
                                                               SqlAlchemyReviewRepository)
from marketplace.infrastructure.repositories.users import SqlAlchemyUserRepository
from marketplace.infrastructure.resilience import BoundedExecutor
from marketplace.infrastructure.security.password_hashing import BcryptPasswordHasher
from marketplace.infrastructure.security.tokens import JwtTokenIssuer
from marketplace.interfaces.http.controllers.auth_controller import AuthController
from marketplace.interfaces.http.controllers.misc_controller import MiscController
from marketplace.interfaces.http.controllers.providers_controller import ProvidersController
from marketplace.shared.config import AppConfig


class Container:
    def __init__(self, *, config: AppConfig, database: Database) -> None:
        self.config = config
        self.database = database

    # Security

    @cached_property
    def hash_executor(self) -> BoundedExecutor:
        return BoundedExecutor(
            max_workers=self.config.auth.hash_workers,
            timeout=self.config.auth.hash_timeout_seconds,
            name="bcrypt",
        )

    @cached_property
    def password_hasher(self) -> BcryptPasswordHasher:
        return BcryptPasswordHasher(executor=self.hash_executor)

    @cached_property
    def token_issuer(self) -> JwtTokenIssuer:
        return JwtTokenIssuer(
            secret=self.config.auth.jwt_secret,
            algorithm=self.config.auth.jwt_algorithm,
            lifetime=timedelta(hours=self.config.auth.jwt_expires_hours),
        )

    # Repositories

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(self.database)

    @cached_property
    def provider_repository(self) -> SqlAlchemyProviderRepository:
        return SqlAlchemyProviderRepository(self.database)

    @cached_property
    def review_repository(self) -> SqlAlchemyReviewRepository:
        return SqlAlchemyReviewRepository(self.database)

    # User use cases

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            users=self.user_repository,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            password_hasher=self.password_hasher,
            tokens=self.token_issuer,
        )

    @cached_property
    def get_current_user_use_case(self) -> GetCurrentUserUseCase:
        return GetCurrentUserUseCase(users=self.user_repository)

    # Provider use cases

    @cached_property
    def create_provider_use_case(self) -> CreateProviderUseCase:
        return CreateProviderUseCase(providers=self.provider_repository)

    @cached_property
    def update_provider_use_case(self) -> UpdateProviderUseCase:
        return UpdateProviderUseCase(providers=self.provider_repository)

    @cached_property
    def search_providers_use_case(self) -> SearchProvidersUseCase:
        return SearchProvidersUseCase(providers=self.provider_repository)

    @cached_property
    def get_provider_use_case(self) -> GetProviderUseCase:
        return GetProviderUseCase(providers=self.provider_repository)

    @cached_property
    def submit_review_use_case(self) -> SubmitReviewUseCase:
        return SubmitReviewUseCase(
            providers=self.provider_repository,
            reviews=self.review_repository,
        )

    @cached_property
    def list_reviews_use_case(self) -> ListReviewsUseCase:
        return ListReviewsUseCase(
            providers=self.provider_repository,
            reviews=self.review_repository,
        )

    # Controllers

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
            current_user_use_case=self.get_current_user_use_case,
            tokens=self.token_issuer,
        )

    @cached_property
    def providers_controller(self) -> ProvidersController:
        return ProvidersController(
            create_use_case=self.create_provider_use_case,
            search_use_case=self.search_providers_use_case,
            get_use_case=self.get_provider_use_case,
            update_use_case=self.update_provider_use_case,
            submit_review_use_case=self.submit_review_use_case,
            list_reviews_use_case=self.list_reviews_use_case,
            tokens=self.token_issuer,
        )

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController(database=self.database)

    def shutdown(self) -> None:
        if "hash_executor" in self.__dict__:
            self.hash_executor.shutdown()
