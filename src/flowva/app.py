# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Optional

from fastapi import Body, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from flowva.auth.service import AuthService
from flowva.auth.session import TokenService
from flowva.config import Settings
from flowva.core.validation import (
    AuthRequest,
    OnboardingPayload,
    check_email,
    check_new_password,
    check_password,
    parse,
)
from flowva.errors import InputError
from flowva.infra.db import Database
from flowva.infra.onboarding_repo import OnboardingStore
from flowva.infra.user_repo import CredentialStore, UserRecord
from flowva.permissions import (
    HOME_PATH,
    clear_session_cookie,
    current_session,
    session_gate,
    set_session_cookie,
    unauthorized,
)
from flowva.services.onboarding_service import (
    dashboard_context,
    landing_path,
    submit_onboarding,
    wizard_context,
)

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))


def _ok(**payload: Any) -> JSONResponse:
    return JSONResponse({"success": True, **payload})


def _fail(message: str, status_code: int, *, field: Optional[str] = None) -> JSONResponse:
    body = {"success": False, "message": message}
    if field:
        body["field"] = field
    return JSONResponse(body, status_code=status_code)


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    database = database or Database(settings.database_url)
    database.init_schema()

    tokens = TokenService(settings.secret_key, max_age=settings.session_max_age)
    users = CredentialStore(database)
    onboarding = OnboardingStore(database)
    auth = AuthService(users, tokens)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        yield
        database.dispose()

    app = FastAPI(lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database
    app.state.auth = auth
    app.state.onboarding = onboarding

    @app.middleware("http")
    async def _gate(request: Request, call_next):
        return await session_gate(request, call_next, tokens=tokens, settings=settings)

    @app.exception_handler(RequestValidationError)
    async def _bad_request(request: Request, exc: RequestValidationError):
        return _fail("Invalid request body", 400)

    def _render(request: Request, template_name: str, ctx: dict):
        return templates.TemplateResponse(request, template_name, {"request": request, **(ctx or {})})

    def _go_home_signed_out() -> RedirectResponse:
        return clear_session_cookie(RedirectResponse(url=HOME_PATH, status_code=303), settings)

    def _session_user(request: Request) -> Optional[UserRecord]:
        sess = current_session(request)
        if sess is None:
            return None
        return users.get_by_id(sess.user_id)

    # ------------------ API ------------------

    @app.post("/api/auth")
    def auth_api(payload: Any = Body(None)):
        try:
            req = parse(AuthRequest, payload)
            action = req.action

            if action == "signin":
                result = auth.sign_in(check_email(req.email), check_password(req.password))
                if not result:
                    return _fail("Invalid credentials", 401)
                return set_session_cookie(_ok(user=result.user), settings, result.token)

            if action == "signup":
                result = auth.sign_up(check_email(req.email), check_new_password(req.password))
                if not result:
                    return _fail("Email already in use", 400)
                return set_session_cookie(_ok(user=result.user), settings, result.token)

            if action == "reset":
                if auth.reset_password(check_email(req.email)):
                    return _ok(message="Password reset email sent")
                return _fail("Email not found", 400)

            if action == "signout":
                return clear_session_cookie(_ok(), settings)

            return _fail("Invalid action", 400)
        except InputError as e:
            return _fail(e.message, 400, field=e.field)
        except Exception:
            logger.exception("Auth API error")
            return _fail("Server error", 500)

    @app.get("/api/onboarding")
    def onboarding_get(request: Request):
        try:
            user = _session_user(request)
            if user is None:
                return clear_session_cookie(unauthorized(), settings)
            record = onboarding.get(user.id)
            return _ok(data=record.to_dict() if record else None)
        except Exception:
            logger.exception("Onboarding API error")
            return _fail("Server error", 500)

    @app.post("/api/onboarding")
    def onboarding_post(request: Request, payload: Any = Body(None)):
        try:
            user = _session_user(request)
            if user is None:
                return clear_session_cookie(unauthorized(), settings)
            answers = parse(OnboardingPayload, payload)
            record = submit_onboarding(onboarding, user.id, answers)
            logger.info("Onboarding saved for user %s (%s)", user.id, record.use_case)
            return _ok(data=record.to_dict())
        except InputError as e:
            return _fail(e.message, 400, field=e.field)
        except Exception:
            logger.exception("Onboarding API error")
            return _fail("Server error", 500)

    # ------------------ Pages ------------------

    @app.get("/", response_class=HTMLResponse)
    def home(request: Request):
        token = request.cookies.get(settings.cookie_name, "")
        if token:
            user = auth.user_for_token(token)
            if user is not None:
                return RedirectResponse(url=landing_path(onboarding.get(user.id)), status_code=303)
            return clear_session_cookie(_render(request, "home.html", {}), settings)
        return _render(request, "home.html", {})

    @app.get("/onboarding", response_class=HTMLResponse)
    def onboarding_page(request: Request):
        user = _session_user(request)
        if user is None:
            return _go_home_signed_out()
        record = onboarding.get(user.id)
        if record is not None and record.completed:
            return RedirectResponse(url="/dashboard", status_code=303)
        return _render(request, "onboarding.html", wizard_context(record))

    @app.get("/dashboard", response_class=HTMLResponse)
    def dashboard_page(request: Request):
        user = _session_user(request)
        if user is None:
            return _go_home_signed_out()
        record = onboarding.get(user.id)
        if record is None or not record.completed:
            return RedirectResponse(url="/onboarding", status_code=303)
        return _render(request, "dashboard.html", dashboard_context(user, record))

    @app.post("/logout")
    def logout_post():
        return _go_home_signed_out()

    return app
