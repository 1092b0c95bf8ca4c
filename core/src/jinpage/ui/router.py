from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request
from starlette.responses import Response

from jinpage.params import AppletPage
from jinpage.prefs import InvalidPreferencesError, InvalidUsernameError, UserContext
from jinpage.render import render_applet_page

logger = logging.getLogger(__name__)

HTML_MEDIA_TYPE = "text/html; charset=utf-8"

router = APIRouter(tags=["ui"])


def _page_for_request(request: Request) -> AppletPage:
    page = getattr(request.app.state, "applet_page", None)
    if page is None:
        raise HTTPException(status_code=500, detail="Applet page not initialized")

    config = request.app.state.jinpage_config
    username = (request.query_params.get("user") or "").strip()
    if not config.prefs.enabled or not username:
        return page

    try:
        store = request.app.state.prefs_store
        overrides = store.load_preferences(UserContext(username=username))
    except InvalidUsernameError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except InvalidPreferencesError as e:
        # A broken prefs file must not take the page down; serve the defaults.
        logger.warning("Ignoring preferences for %s: %s", username, e)
        return page
    return page.with_overrides(overrides)


@router.get("/applet", response_class=Response)
async def applet_page(request: Request) -> Response:
    body = render_applet_page(_page_for_request(request))
    return Response(content=body, media_type=HTML_MEDIA_TYPE)
