"""Console routes; every page except login sits behind the guard."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import RedirectResponse
from pydantic import BaseModel

from castpro_console.domain.models import (  # noqa: TC001
    CastingCallInput,
    CastingCallUpdate,
)
from castpro_console.domain.notices import Notice
from castpro_console.domain.workflow import StatusAction
from castpro_console.errors import NavigationInterrupted, NotFoundError
from castpro_console.services.casting_calls import DELETE_KIND
from castpro_console.services.filters import ApplicationFilter
from castpro_console.services.navigation import (
    APPLICATIONS_PATH,
    CASTING_CALLS_PATH,
    DASHBOARD_PATH,
    LOGIN_PATH,
    ViewTicket,
)
from castpro_console.services.workflow import TRANSITION_KIND

if TYPE_CHECKING:
    from castpro_console.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["console"])


class LoginForm(BaseModel):
    email: str
    password: str


def _container(request: Request) -> AppContainer:
    return request.app.state.container


def require_session(request: Request) -> ViewTicket:
    """Guard dependency: resolves before any protected data is fetched."""
    container = _container(request)
    decision = container.guard.authorize(request.url.path)
    if not decision.allowed or decision.ticket is None:
        raise NavigationInterrupted(decision.redirect_to or LOGIN_PATH)
    return decision.ticket


def _see_other(location: str) -> RedirectResponse:
    return RedirectResponse(location, status_code=status.HTTP_303_SEE_OTHER)


@router.get("")
async def admin_root() -> RedirectResponse:
    return _see_other(DASHBOARD_PATH)


@router.get("/login", response_model=None)
async def login_page(request: Request) -> RedirectResponse | dict[str, object]:
    """Show the login form unless an admin is already signed in."""
    decision = _container(request).guard.authorize_login_page()
    if not decision.allowed:
        return _see_other(decision.redirect_to or DASHBOARD_PATH)
    return {"view": "login"}


@router.post("/login", response_model=None)
async def login(
    form: LoginForm, request: Request
) -> RedirectResponse | dict[str, object]:
    container = _container(request)
    decision = container.guard.authorize_login_page()
    if not decision.allowed:
        return _see_other(decision.redirect_to or DASHBOARD_PATH)
    session = await container.session_store.login(form.email, form.password)
    container.navigator.begin_view(DASHBOARD_PATH)
    greeting = "Successfully logged in to CastPro Admin"
    if session.admin is not None and session.admin.name:
        greeting = f"{greeting} as {session.admin.name}"
    return jsonable_encoder(
        {
            "redirect": DASHBOARD_PATH,
            "admin": session.admin,
            "notice": Notice.success("Welcome Back!", greeting),
        }
    )


@router.post("/logout")
async def logout(request: Request) -> dict[str, object]:
    container = _container(request)
    await container.session_store.logout()
    container.navigator.begin_view(LOGIN_PATH)
    return {"redirect": LOGIN_PATH}


@router.get("/dashboard")
async def dashboard(
    request: Request, ticket: ViewTicket = Depends(require_session)
) -> dict[str, object]:
    view = await _container(request).views.dashboard(ticket)
    return jsonable_encoder(view)


@router.get("/casting-calls")
async def casting_calls(
    request: Request, ticket: ViewTicket = Depends(require_session)
) -> dict[str, object]:
    view = await _container(request).views.casting_call_list(ticket)
    return jsonable_encoder(
        {
            "casting_calls": view.casting_calls,
            "is_empty": view.is_empty,
            "notice": view.notice,
        }
    )


@router.post("/casting-calls")
async def create_casting_call(
    form: CastingCallInput,
    request: Request,
    ticket: ViewTicket = Depends(require_session),
) -> dict[str, object]:
    outcome = await _container(request).casting_call_service.save(form)
    return jsonable_encoder(
        {
            "casting_call": outcome.casting_call,
            "notice": outcome.notice,
            "redirect": CASTING_CALLS_PATH,
        }
    )


@router.get("/casting-calls/{casting_call_id}", response_model=None)
async def casting_call_detail(
    casting_call_id: int,
    request: Request,
    ticket: ViewTicket = Depends(require_session),
) -> RedirectResponse | dict[str, object]:
    try:
        view = await _container(request).views.casting_call_detail(
            ticket, casting_call_id
        )
    except NotFoundError:
        return _see_other(CASTING_CALLS_PATH)
    return jsonable_encoder(view)


@router.get("/casting-calls/{casting_call_id}/edit", response_model=None)
async def edit_casting_call(
    casting_call_id: int,
    request: Request,
    ticket: ViewTicket = Depends(require_session),
) -> RedirectResponse | dict[str, object]:
    container = _container(request)
    try:
        form = await container.casting_call_service.load_form(casting_call_id)
    except NotFoundError:
        return _see_other(CASTING_CALLS_PATH)
    container.navigator.ensure_current(ticket)
    return jsonable_encoder({"casting_call_id": casting_call_id, "form": form})


@router.put("/casting-calls/{casting_call_id}")
async def update_casting_call(
    casting_call_id: int,
    form: CastingCallUpdate,
    request: Request,
    ticket: ViewTicket = Depends(require_session),
) -> dict[str, object]:
    outcome = await _container(request).casting_call_service.save(
        form, casting_call_id
    )
    return jsonable_encoder(
        {
            "casting_call": outcome.casting_call,
            "notice": outcome.notice,
            "redirect": CASTING_CALLS_PATH,
        }
    )


@router.post("/casting-calls/{casting_call_id}/delete", response_model=None)
async def propose_casting_call_delete(
    casting_call_id: int,
    request: Request,
    ticket: ViewTicket = Depends(require_session),
) -> RedirectResponse | dict[str, object]:
    service = _container(request).casting_call_service
    try:
        call = await service.registry.get(casting_call_id)
    except NotFoundError:
        return _see_other(CASTING_CALLS_PATH)
    return jsonable_encoder({"confirmation": service.propose_delete(call)})


@router.get("/applications")
async def applications(
    request: Request,
    refresh: bool = False,
    ticket: ViewTicket = Depends(require_session),
) -> dict[str, object]:
    application_filter = ApplicationFilter.from_query(request.query_params)
    view = await _container(request).views.application_list(
        ticket, application_filter, refresh=refresh
    )
    filtered = view.filtered
    return jsonable_encoder(
        {
            "applications": filtered.items,
            "filter": filtered.filter.to_query(),
            "url": filtered.filter.url(),
            "total": filtered.total,
            "is_empty": filtered.is_empty,
            "status_options": filtered.options,
            "reset_url": filtered.reset_url,
            "notice": view.notice,
        }
    )


@router.get("/applications/{application_id}", response_model=None)
async def application_detail(
    application_id: int,
    request: Request,
    ticket: ViewTicket = Depends(require_session),
) -> RedirectResponse | dict[str, object]:
    try:
        view = await _container(request).views.application_detail(
            ticket, application_id
        )
    except NotFoundError:
        return _see_other(APPLICATIONS_PATH)
    return jsonable_encoder(view)


@router.post("/applications/{application_id}/actions/{action}", response_model=None)
async def propose_transition(
    application_id: int,
    action: str,
    request: Request,
    ticket: ViewTicket = Depends(require_session),
) -> RedirectResponse | dict[str, object]:
    container = _container(request)
    application = container.application_registry.cached(application_id)
    if application is None:
        try:
            application = await container.application_registry.get(application_id)
        except NotFoundError:
            return _see_other(APPLICATIONS_PATH)
    confirmation = container.workflow.propose(
        application, StatusAction.from_verb(action)
    )
    return jsonable_encoder({"confirmation": confirmation})


@router.post("/confirmations/{confirmation_id}/confirm")
async def confirm(
    confirmation_id: UUID,
    request: Request,
    ticket: ViewTicket = Depends(require_session),
) -> dict[str, object]:
    container = _container(request)
    pending = container.workflow.confirmations.peek(confirmation_id)
    if pending.kind == TRANSITION_KIND:
        outcome = await container.workflow.confirm(confirmation_id)
        return jsonable_encoder(
            {
                "application": container.views.describe_application(
                    outcome.application
                ),
                "notice": outcome.notice,
            }
        )
    notice = await container.casting_call_service.confirm_delete(confirmation_id)
    return jsonable_encoder({"notice": notice, "redirect": CASTING_CALLS_PATH})


@router.post("/confirmations/{confirmation_id}/cancel")
async def cancel(
    confirmation_id: UUID,
    request: Request,
    ticket: ViewTicket = Depends(require_session),
) -> dict[str, object]:
    container = _container(request)
    pending = container.workflow.confirmations.peek(confirmation_id)
    if pending.kind == DELETE_KIND:
        container.casting_call_service.cancel(confirmation_id)
    else:
        container.workflow.cancel(confirmation_id)
    return {"cancelled": True}
