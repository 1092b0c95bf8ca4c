from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from jinpage import __version__
from jinpage.api.models import (
    ApiResponse,
    Parameter,
    ParameterList,
    PluginEntry,
    PluginList,
    Preferences,
    PreferencesUpdate,
    fail,
    ok,
)
from jinpage.params import AppletPage
from jinpage.plugins import read_plugin_classnames, short_classname
from jinpage.prefs import (
    InvalidPreferencesError,
    InvalidUsernameError,
    PreferencesStore,
    UserContext,
)

router = APIRouter(prefix="/v1", tags=["v1"])


class SystemInfo(BaseModel):
    version: str
    jinpage_home: str
    prefs_enabled: bool
    paths: dict[str, str]


def _get_page(request: Request) -> AppletPage:
    page = getattr(request.app.state, "applet_page", None)
    if page is None:
        raise HTTPException(status_code=500, detail="Applet page not initialized")
    return page


def _get_prefs_store(request: Request) -> PreferencesStore:
    config = getattr(request.app.state, "jinpage_config", None)
    if config is None or not config.prefs.enabled:
        raise HTTPException(status_code=404, detail="Preferences are disabled")
    return request.app.state.prefs_store


def _validation_error_json(*, message: str, details: Any) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content=fail(
            code="validation_error",
            message=message,
            details=details,
        ).model_dump(mode="json"),
    )


@router.get("/parameters", response_model=ApiResponse[ParameterList])
async def parameters_list(request: Request) -> ApiResponse[ParameterList]:
    params = _get_page(request).parameters
    items = [Parameter(name=name, value=value) for name, value in params]
    return ok(ParameterList(count=len(items), items=items))


@router.get("/plugins", response_model=ApiResponse[PluginList])
async def plugins_list(request: Request) -> ApiResponse[PluginList]:
    classnames = read_plugin_classnames(_get_page(request).parameters)
    items = [
        PluginEntry(index=i, classname=name, short_name=short_classname(name))
        for i, name in enumerate(classnames)
    ]
    return ok(PluginList(count=len(items), items=items))


@router.get("/system/info", response_model=ApiResponse[SystemInfo])
async def system_info(request: Request) -> ApiResponse[SystemInfo]:
    home = getattr(request.app.state, "jinpage_home", None)
    paths = getattr(request.app.state, "jinpage_paths", None)
    config = getattr(request.app.state, "jinpage_config", None)

    info = SystemInfo(
        version=__version__,
        jinpage_home=str(home) if home is not None else "",
        prefs_enabled=bool(config is not None and config.prefs.enabled),
        paths={
            "config_dir": str(paths.config_dir) if paths is not None else "",
            "logs_dir": str(paths.logs_dir) if paths is not None else "",
            "prefs_dir": str(paths.prefs_dir) if paths is not None else "",
        },
    )
    return ok(info)


@router.get("/prefs/{username}", response_model=ApiResponse[Preferences])
async def prefs_get(
    request: Request, username: str
) -> ApiResponse[Preferences] | JSONResponse:
    store = _get_prefs_store(request)
    try:
        overrides = store.load_preferences(UserContext(username=username))
    except InvalidUsernameError as e:
        return _validation_error_json(message=str(e), details=None)
    except InvalidPreferencesError as e:
        return _validation_error_json(message=str(e), details=e.details)
    return ok(Preferences(username=username, overrides=overrides))


@router.put("/prefs/{username}", response_model=ApiResponse[Preferences])
async def prefs_put(
    request: Request,
    username: str,
    payload: PreferencesUpdate,
) -> ApiResponse[Preferences] | JSONResponse:
    store = _get_prefs_store(request)
    user = UserContext(username=username)
    try:
        store.save_preferences(user, payload.overrides)
    except InvalidUsernameError as e:
        return _validation_error_json(message=str(e), details=None)
    except InvalidPreferencesError as e:
        return _validation_error_json(message=str(e), details=e.details)
    return ok(Preferences(username=username, overrides=store.load_preferences(user)))
