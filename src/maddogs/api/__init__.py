"""REST API and HTML dashboard for the team stats manager."""

from __future__ import annotations

from contextlib import asynccontextmanager
from html import escape
from typing import Any

import urllib.parse

from fastapi import FastAPI, Form, HTTPException, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from maddogs.api.schemas import LeadersResponse, PlayerCreatedResponse, PlayersResponse
from maddogs.config import TABLE_COLUMNS, Settings, get_metric, is_metric, load_settings
from maddogs.controller import DashboardController
from maddogs.errors import DeleteError, InsertError, ValidationError
from maddogs.gateway import PlayersGateway, RestPlayersGateway
from maddogs.models import DerivedPlayerStats, PlayerForm, PlayerInput, TeamAverages


# (field, label, input type)
FORM_FIELDS: list[tuple[str, str, str]] = [
    ("name", "Player", "text"),
    ("pa", "PA", "number"),
    ("hits", "Hits", "number"),
    ("double", "2B", "number"),
    ("triple", "3B", "number"),
    ("homerun", "HR", "number"),
    ("walks", "Walks", "number"),
    ("sb", "SB", "number"),
    ("sb_fail", "SB failed", "number"),
]

DELETE_CONFIRM_TEXT = "Delete this player? This cannot be undone."


def _render_page(body: str) -> str:
    return f"""<!DOCTYPE html>
<html lang=\"en\">
<head>
    <meta charset=\"utf-8\">
    <title>Mad Dogs Manager</title>
    <style>
        body {{ font-family: Arial, sans-serif; margin: 2rem; background: #020617; color: #f1f5f9; }}
        main {{ max-width: 1200px; margin: 0 auto; }}
        header {{ display: flex; justify-content: space-between; align-items: center; flex-wrap: wrap; gap: 1rem; margin-bottom: 2rem; }}
        h1 {{ margin: 0; color: #34d399; }}
        .badge {{ font-size: 0.7rem; padding: 0.1rem 0.5rem; border-radius: 4px; margin-left: 0.5rem; }}
        .badge.ok {{ background: #064e3b; color: #6ee7b7; border: 1px solid #047857; }}
        .badge.down {{ background: #7f1d1d; color: #fecaca; border: 1px solid #b91c1c; }}
        .summary {{ display: flex; gap: 1rem; background: #0f172a; padding: 0.75rem; border-radius: 12px; border: 1px solid #1e293b; }}
        .summary div {{ text-align: center; padding: 0 0.5rem; }}
        .summary small, .card small {{ display: block; font-size: 0.65rem; color: #64748b; }}
        .summary strong {{ font-family: monospace; }}
        form.player-form {{ display: grid; grid-template-columns: repeat(auto-fill, minmax(110px, 1fr)); gap: 1rem; background: #0f172a; border: 1px solid #1e293b; padding: 1.25rem; border-radius: 16px; margin-bottom: 2rem; }}
        form.player-form label {{ display: block; font-size: 0.75rem; color: #64748b; margin-bottom: 0.25rem; }}
        form.player-form input {{ width: 100%; box-sizing: border-box; background: #020617; color: #f1f5f9; border: 1px solid #334155; border-radius: 6px; padding: 0.5rem; }}
        button {{ padding: 0.5rem 1rem; border-radius: 6px; border: none; background: #059669; color: #fff; cursor: pointer; font-weight: 600; }}
        button.danger {{ background: transparent; color: #64748b; padding: 0.25rem 0.5rem; }}
        button.danger:hover {{ color: #f87171; }}
        .cards {{ display: grid; grid-template-columns: repeat(auto-fill, minmax(160px, 1fr)); gap: 1rem; margin-bottom: 2rem; }}
        .card {{ background: #0f172a; border: 1px solid #1e293b; border-radius: 12px; padding: 1rem; }}
        .card strong {{ display: block; font-size: 1.1rem; }}
        .card span {{ font-family: monospace; color: #34d399; }}
        table {{ border-collapse: collapse; width: 100%; background: #0f172a; border-radius: 12px; overflow: hidden; font-size: 0.85rem; }}
        th, td {{ padding: 0.5rem; border-bottom: 1px solid #1e293b; text-align: center; }}
        th a {{ color: #94a3b8; text-decoration: none; }}
        th.sorted a {{ color: #34d399; }}
        td.name {{ text-align: left; font-weight: 600; }}
        .notice {{ margin: 0.5rem 0 1rem; padding: 0.75rem 1rem; border-radius: 6px; }}
        .notice.success {{ background: #064e3b; color: #a7f3d0; }}
        .notice.error {{ background: #7f1d1d; color: #fecaca; }}
        .notice.warning {{ background: #78350f; color: #fde68a; }}
    </style>
</head>
<body>
    <main>{body}</main>
</body>
</html>"""


def _format_metric(key: str, value: float) -> str:
    return get_metric(key).format(value)


def _render_header(team: TeamAverages, connected: bool) -> str:
    badge = (
        "<span class=\"badge ok\">Online DB Connected</span>"
        if connected
        else "<span class=\"badge down\">Data service unavailable</span>"
    )
    return f"""
    <header>
        <div>
            <h1>Mad Dogs Manager</h1>
            <p>Team Stats &amp; Analytics {badge}</p>
        </div>
        <div class=\"summary\">
            <div><small>PLAYERS</small><strong>{team.player_count}</strong></div>
            <div><small>AVG</small><strong>{_format_metric('avg', team.team_avg_avg)}</strong></div>
            <div><small>OPS</small><strong>{_format_metric('ops', team.team_avg_ops)}</strong></div>
            <div><small>RC</small><strong>{_format_metric('runs_created', team.team_avg_rc)}</strong></div>
        </div>
    </header>
    """


def _render_form(form: PlayerForm) -> str:
    values = form.model_dump()
    min_attr = ' min="0"'
    inputs = "".join(
        f"""
        <div>
            <label for=\"field-{field}\">{escape(label)}</label>
            <input id=\"field-{field}\" type=\"{input_type}\" name=\"{field}\" value=\"{escape(str(values[field]))}\"{min_attr if input_type == 'number' else ''}>
        </div>
        """
        for field, label, input_type in FORM_FIELDS
    )
    return f"""
    <form class=\"player-form\" method=\"post\" action=\"/ui/players\">
        {inputs}
        <div><label>&nbsp;</label><button type=\"submit\">Save</button></div>
    </form>
    """


def _render_leaders(leaders: dict[str, DerivedPlayerStats]) -> str:
    cards = "".join(
        f"""
        <div class=\"card\">
            <small>{escape(get_metric(key).label)} leader</small>
            <strong>{escape(player.name)}</strong>
            <span>{_format_metric(key, getattr(player, key))}</span>
        </div>
        """
        for key, player in leaders.items()
    )
    return f"<section class=\"cards\">{cards}</section>"


def _render_table(players: list[DerivedPlayerStats], sort_key: str) -> str:
    sorted_attr = " class=\"sorted\""
    header_cells = "".join(
        f"<th{sorted_attr if key == sort_key else ''}>"
        f"<a href=\"/ui?sort={key}\" title=\"{escape(get_metric(key).description)}\">{escape(get_metric(key).label)}</a></th>"
        for key in TABLE_COLUMNS
    )
    confirm_js = escape(f"if (confirm({DELETE_CONFIRM_TEXT!r})) {{ this.confirmed.value = 'true'; return true; }} return false;")
    rows = "".join(
        f"<tr><td class=\"name\">{escape(player.name)}</td>"
        + "".join(f"<td>{_format_metric(key, getattr(player, key))}</td>" for key in TABLE_COLUMNS)
        + f"<td><form method=\"post\" action=\"/ui/players/{player.id}/delete\" onsubmit=\"{confirm_js}\">"
        f"<input type=\"hidden\" name=\"confirmed\" value=\"\">"
        f"<button type=\"submit\" class=\"danger\" title=\"Delete\">&#10005;</button></form></td></tr>"
        for player in players
    )
    if not players:
        rows = f"<tr><td colspan=\"{len(TABLE_COLUMNS) + 2}\">No players yet. Add one above.</td></tr>"
    return f"""
    <table>
        <thead><tr><th>Player</th>{header_cells}<th></th></tr></thead>
        <tbody>{rows}</tbody>
    </table>
    """


def _render_dashboard(
    controller: DashboardController,
    *,
    notice: str | None = None,
    error: str | None = None,
) -> str:
    notice_html = f"<p class=\"notice success\">{escape(notice)}</p>" if notice else ""
    error_html = f"<p class=\"notice error\">{escape(error)}</p>" if error else ""
    stale_html = (
        "<p class=\"notice warning\">Could not refresh players; showing the last loaded list.</p>"
        if controller.last_error
        else ""
    )
    body = (
        _render_header(controller.team(), connected=controller.last_error is None)
        + notice_html
        + error_html
        + stale_html
        + _render_form(controller.form)
        + _render_leaders(controller.leaders())
        + _render_table(controller.sorted_players(), controller.sort_key)
    )
    return _render_page(body)


def _render_delete_confirmation(player_id: int, name: str | None) -> str:
    label = escape(name) if name else f"player #{player_id}"
    body = f"""
    <h1>Delete {label}?</h1>
    <p>{escape(DELETE_CONFIRM_TEXT)}</p>
    <form method=\"post\" action=\"/ui/players/{player_id}/delete\">
        <input type=\"hidden\" name=\"confirmed\" value=\"true\">
        <button type=\"submit\">Delete</button>
        <a href=\"/ui\">Cancel</a>
    </form>
    """
    return _render_page(body)


def _redirect_to_dashboard(*, notice: str | None = None, error: str | None = None) -> RedirectResponse:
    params = {key: value for key, value in (("notice", notice), ("error", error)) if value}
    url = "/ui"
    if params:
        url += "?" + urllib.parse.urlencode(params)
    return RedirectResponse(url=url, status_code=303)


def create_app(
    gateway: PlayersGateway | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    settings = settings or load_settings()
    owned_gateway: RestPlayersGateway | None = None
    if gateway is None:
        gateway = owned_gateway = RestPlayersGateway.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        if owned_gateway is not None:
            await owned_gateway.aclose()

    app = FastAPI(title="Mad Dogs Manager", lifespan=lifespan)
    controller = DashboardController(gateway, sort_key=settings.default_sort)
    app.state.controller = controller

    def _resolve_sort(sort: str | None) -> str:
        if sort is None:
            return controller.sort_key
        if not is_metric(sort):
            raise HTTPException(status_code=400, detail=f"Unknown sort key: {sort}")
        return sort

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/players", response_model=PlayersResponse)
    async def list_players(sort: str | None = Query(None)):
        sort_key = _resolve_sort(sort)
        await controller.refresh()
        return PlayersResponse(
            sort_key=sort_key,
            team=controller.team(),
            players=controller.sorted_players(sort_key),
            error=controller.last_error,
        )

    @app.get("/players/leaders", response_model=LeadersResponse)
    async def list_leaders():
        await controller.refresh()
        return LeadersResponse(leaders=controller.leaders())

    @app.post("/players", response_model=PlayerCreatedResponse, status_code=201)
    async def create_player(payload: PlayerInput):
        try:
            inserted = await controller.insert(payload)
        except ValidationError as exc:
            raise HTTPException(status_code=400, detail=exc.message) from exc
        except InsertError as exc:
            raise HTTPException(status_code=502, detail=f"Save failed: {exc.message}") from exc
        if not inserted:
            raise HTTPException(status_code=409, detail="Another save is already in progress")
        return PlayerCreatedResponse(status="created", name=payload.name)

    @app.delete("/players/{player_id}", status_code=204)
    async def delete_player(player_id: int, confirm: bool = Query(False)):
        if not confirm:
            raise HTTPException(status_code=400, detail="Deletion must be confirmed with confirm=true")
        try:
            deleted = await controller.delete(player_id, confirmed=True)
        except DeleteError as exc:
            raise HTTPException(status_code=502, detail=exc.message) from exc
        if not deleted:
            raise HTTPException(status_code=409, detail="Deletion already in progress")
        return Response(status_code=204)

    @app.get("/ui", response_class=HTMLResponse)
    async def ui_index(request: Request, sort: str | None = Query(None)):
        controller.set_sort_key(_resolve_sort(sort))
        await controller.refresh()
        content = _render_dashboard(
            controller,
            notice=request.query_params.get("notice"),
            error=request.query_params.get("error"),
        )
        return HTMLResponse(content)

    @app.post("/ui/players", response_class=HTMLResponse)
    async def ui_add_player(
        name: str = Form(""),
        pa: int = Form(0),
        hits: int = Form(0),
        double: int = Form(0),
        triple: int = Form(0),
        homerun: int = Form(0),
        walks: int = Form(0),
        sb: int = Form(0),
        sb_fail: int = Form(0),
    ):
        values: dict[str, Any] = {
            "name": name,
            "pa": pa,
            "hits": hits,
            "double": double,
            "triple": triple,
            "homerun": homerun,
            "walks": walks,
            "sb": sb,
            "sb_fail": sb_fail,
        }
        try:
            inserted = await controller.submit(PlayerForm(**values))
        except ValidationError as exc:
            return HTMLResponse(_render_dashboard(controller, error=exc.message))
        except InsertError as exc:
            return HTMLResponse(_render_dashboard(controller, error=f"Save failed: {exc.message}"))
        if not inserted:
            return HTMLResponse(_render_dashboard(controller, error="A save is already in progress."))
        return _redirect_to_dashboard(notice=f"Saved {name.strip()}.")

    @app.post("/ui/players/{player_id}/delete", response_class=HTMLResponse)
    async def ui_delete_player(player_id: int, confirmed: str = Form("")):
        if confirmed != "true":
            known = {player.id: player.name for player in controller.players}
            return HTMLResponse(_render_delete_confirmation(player_id, known.get(player_id)))
        try:
            deleted = await controller.delete(player_id, confirmed=True)
        except DeleteError as exc:
            return _redirect_to_dashboard(error=exc.message)
        if not deleted:
            return _redirect_to_dashboard(error="Deletion already in progress.")
        return _redirect_to_dashboard(notice="Player deleted.")

    return app
