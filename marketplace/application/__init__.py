# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .use_cases.providers.create_provider import CreateProviderInput, CreateProviderUseCase
from .use_cases.providers.get_provider import GetProviderUseCase
from .use_cases.providers.list_reviews import ListReviewsUseCase
from .use_cases.providers.search_providers import SearchProvidersUseCase
from .use_cases.providers.submit_review import SubmitReviewUseCase
from .use_cases.providers.update_provider import UpdateProviderUseCase
from .use_cases.users.get_current_user import GetCurrentUserUseCase
from .use_cases.users.login_user import LoginUserUseCase
from .use_cases.users.register_user import RegisterUserUseCase

__all__ = [
    "CreateProviderInput",
    "CreateProviderUseCase",
    "GetCurrentUserUseCase",
    "GetProviderUseCase",
    "ListReviewsUseCase",
    "LoginUserUseCase",
    "RegisterUserUseCase",
    "SearchProvidersUseCase",
    "SubmitReviewUseCase",
    "UpdateProviderUseCase",
]
