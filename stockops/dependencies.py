from contextlib import AbstractAsyncContextManager
from functools import partial
from typing import Callable

from fastapi import Depends, Request

from stockops.core.config import Settings
from stockops.services.identity import IdentityVerifier
from stockops.services.salary_access import SalaryAccessGate
from stockops.services.store import ElevatedStore, open_elevated_store

StoreFactory = Callable[[], AbstractAsyncContextManager[ElevatedStore]]


def get_app_settings(request: Request) -> Settings:
    """Settings validated once in create_app()."""
    return request.app.state.settings


def get_salary_gate(request: Request) -> SalaryAccessGate:
    return request.app.state.salary_gate


def get_identity_verifier(settings: Settings = Depends(get_app_settings)) -> IdentityVerifier:
    return IdentityVerifier.from_settings(settings)


def get_store_factory(settings: Settings = Depends(get_app_settings)) -> StoreFactory:
    """
    Returns a factory rather than an open store so the elevated session is
    only opened inside the route, after authentication has passed.
    """
    return partial(open_elevated_store, settings)
