"""GitHub webhook receiver that signs onboarding projects up for FOSSA."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Annotated, Final, TypeAlias

from fastapi import APIRouter, Depends, FastAPI, Header, HTTPException, Request
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from maintainerd.adapters.github import IssuesEvent, verify_signature
from maintainerd.domain.onboarding import project_name_from_title

log = logging.getLogger(__name__)

FOSSA_LABEL: Final[str] = "fossa"

SignUp: TypeAlias = Callable[[str], object]

router = APIRouter()


async def _verified_body(
    request: Request,
    x_hub_signature_256: Annotated[str | None, Header()] = None,
) -> bytes:
    """Return the raw body once its ``X-Hub-Signature-256`` checks out; 401 otherwise."""
    body = await request.body()
    if not verify_signature(request.app.state.webhook_secret, body, x_hub_signature_256):
        log.warning("Rejected webhook delivery with an invalid signature")
        raise HTTPException(status_code=401, detail="invalid signature")
    return body


def fossa_projects(event: IssuesEvent) -> list[str]:
    """Project names to sign up for FOSSA: the onboarding project of a ``fossa``-labeled issue."""

    if event.action != "labeled" or FOSSA_LABEL not in event.issue.label_names:
        return []
    try:
        return [project_name_from_title(event.issue.title)]
    except ValueError:
        log.warning("Failed to parse project name from issue #%d", event.issue.number)
        return []


@router.post("/webhook")
async def receive_webhook(
    request: Request,
    body: Annotated[bytes, Depends(_verified_body)],
    x_github_event: Annotated[str | None, Header()] = None,
) -> dict[str, object]:
    """Handle a GitHub delivery.

    Always returns 200 once the delivery is verified and parsed, so GitHub
    does not retry on sign-up failures; those are logged.
    """
    if x_github_event != "issues":
        try:
            json.loads(body)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail="could not parse event") from exc
        return {"received": True, "handled": []}

    try:
        event = IssuesEvent.model_validate_json(body)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail="could not parse event") from exc

    sign_up: SignUp = request.app.state.sign_up
    handled: list[str] = []
    for project_name in fossa_projects(event):
        try:
            await run_in_threadpool(sign_up, project_name)
        except Exception:
            log.exception("Failed to sign %s up for FOSSA", project_name)
            continue
        handled.append(project_name)
    return {"received": True, "handled": handled}


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


def create_webhook_app(*, secret: bytes, sign_up: SignUp) -> FastAPI:
    app = FastAPI(title="maintainerd webhook")
    app.state.webhook_secret = secret
    app.state.sign_up = sign_up
    app.include_router(router)
    return app
