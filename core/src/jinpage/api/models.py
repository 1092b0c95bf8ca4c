from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ApiError(BaseModel):
    code: str
    message: str
    details: Any | None = None


class ApiResponse[T](BaseModel):
    ok: bool
    data: T | None = None
    error: ApiError | None = None


def ok[T](data: T) -> ApiResponse[T]:
    return ApiResponse(ok=True, data=data)


def fail(*, code: str, message: str, details: Any | None = None) -> ApiResponse[None]:
    return ApiResponse(ok=False, error=ApiError(code=code, message=message, details=details))


def status_to_code(status_code: int) -> str:
    if status_code == 404:
        return "not_found"
    if status_code == 405:
        return "method_not_allowed"
    if status_code == 422:
        return "validation_error"
    if 400 <= status_code < 500:
        return "client_error"
    return "server_error"


class Parameter(BaseModel):
    name: str
    value: str


class ParameterList(BaseModel):
    count: int
    items: list[Parameter] = Field(default_factory=list)


class PluginEntry(BaseModel):
    index: int
    classname: str
    short_name: str


class PluginList(BaseModel):
    count: int
    items: list[PluginEntry] = Field(default_factory=list)


class Preferences(BaseModel):
    username: str
    overrides: dict[str, str] = Field(default_factory=dict)


class PreferencesUpdate(BaseModel):
    overrides: dict[str, Any] = Field(default_factory=dict)
