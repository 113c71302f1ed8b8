"""Tool endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, Body, Depends, Header, HTTPException, Request, status

from nutrition_assistant.api.tools import TOOLS, call_tool

if TYPE_CHECKING:
    from nutrition_assistant.containers import AppContainer

router = APIRouter(prefix="/tools", tags=["tools"])


def _get_api_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.api_token


async def require_token(
    x_api_token: str | None = Header(default=None),
    api_token: str = Depends(_get_api_token),
) -> None:
    """Ensure requests include a valid API token."""
    if not x_api_token or x_api_token != api_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("", dependencies=[Depends(require_token)])
async def list_tools() -> dict[str, object]:
    """Return the definitions of all tools."""
    return {"tools": [tool.describe() for tool in TOOLS.values()]}


@router.post("/{name}", dependencies=[Depends(require_token)])
async def run_tool(
    name: str,
    request: Request,
    arguments: dict[str, Any] | None = Body(default=None),
    x_user_id: str | None = Header(default=None),
) -> dict[str, object]:
    """Run a tool on behalf of the user named in ``X-User-Id``."""
    tool = TOOLS.get(name)
    if tool is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown tool: {name}"
        )
    container: AppContainer = request.app.state.container
    return await call_tool(container, tool, arguments or {}, x_user_id)
