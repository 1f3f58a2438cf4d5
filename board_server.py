#!/usr/bin/env python3
"""
Charity Board Server
--------------------
JSON API over a single in-memory charity board workspace.

Usage:
    python board_server.py
    python board_server.py --port 3000 --config charityboard.yaml

Access:
    Local:  http://localhost:3000

API:
    GET  /                          → portal links
    POST /api/login/admin           → JSON body: { username, password }
    POST /api/login/charity         → JSON body: { username, password }
    POST /api/logout
    GET  /api/session               → current user, theme, font size
    GET  /api/navigation            → sidebar entries for the current user
    POST /api/describe              → JSON body: { title } → { description }

    Admin portal (role ADMIN):
    GET|POST   /api/admin/charities
    GET|PATCH  /api/admin/charities/<id>         → detail: employees, tasks, summary
    GET|POST   /api/admin/tasks
    GET|POST   /api/admin/mail, POST /api/admin/mail/<id>/read
    GET        /api/admin/stats
    GET|POST   /api/admin/settings

    Charity portal (CHARITY_MANAGER or EMPLOYEE):
    GET        /api/charity/board
    POST       /api/charity/tasks
    POST       /api/charity/tasks/<id>/move       → { status }
    GET|POST   /api/charity/tasks/<id>/activity   → { content }
    GET|POST   /api/charity/projects              (POST needs manage_projects)
    GET|POST   /api/charity/team                  (POST needs manage_team)
    GET|POST   /api/charity/mail, POST /api/charity/mail/<id>/read

The workspace is per application instance: one demo session per server.
"""

import argparse
import logging
import sys
from dataclasses import asdict
from functools import wraps

from flask import Blueprint, Flask, current_app, jsonify, request

from charityboard.access import (
    portal_redirect, require_permission, visible_navigation,
)
from charityboard.board import COLUMNS
from charityboard.config import Config
from charityboard.errors import AccessDenied, ConfigError, InvalidTransition
from charityboard.schema import (
    ALL_PERMISSION_IDS, ADMIN_MAILBOX, Charity, JobRole, Portal, TaskStatus,
)
from charityboard.stats import (
    admin_overview, charity_summary, inbox, outbox, project_progress, unread_count,
)
from charityboard.workspace import Workspace

logger = logging.getLogger("board_server")

api = Blueprint("api", __name__)


# ── Helpers ──────────────────────────────────────────────────────────────────

def _ws() -> Workspace:
    return current_app.config["WORKSPACE"]


def _body() -> dict:
    """JSON object body; anything else (array, scalar, bad JSON) reads as empty."""
    data = request.get_json(force=True, silent=True)
    return data if isinstance(data, dict) else {}


def _member_count(data: dict):
    """memberCount as an int, or None when it is not a number."""
    try:
        return int(data.get("memberCount", 0) or 0)
    except (TypeError, ValueError):
        return None


def _missing(data: dict, *keys: str):
    """Return a 400 response naming the first blank required field, else None."""
    for key in keys:
        value = data.get(key)
        if value is None or (isinstance(value, str) and not value.strip()):
            return jsonify({"error": f"{key} is required"}), 400
    return None


def require_portal(portal: Portal):
    """Decorator: apply the portal route guard before the view runs."""
    def decorator(f):
        @wraps(f)
        def decorated(*args, **kwargs):
            user = _ws().current_user
            target = portal_redirect(user, portal)
            if target is not None:
                if user is None:
                    return jsonify({"error": "Not logged in", "redirect": target}), 401
                return jsonify({"error": "Wrong portal", "redirect": target}), 403
            return f(*args, **kwargs)
        return decorated
    return decorator


def require_login(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        if _ws().current_user is None:
            return jsonify({"error": "Not logged in", "redirect": "/"}), 401
        return f(*args, **kwargs)
    return decorated


def _mail_payload(ws: Workspace, owner_id: str) -> dict:
    return {
        "inbox": [m.to_dict() for m in inbox(ws.store, owner_id)],
        "outbox": [m.to_dict() for m in outbox(ws.store, owner_id)],
        "unread": unread_count(ws.store, owner_id),
    }


def _mark_read(ws: Workspace, owner_id: str, message_id: str):
    message = ws.store.get_message(message_id)
    if message is None or message.receiver_id != owner_id:
        return jsonify({"error": "Message not found"}), 404
    ws.store.mark_message_read(message_id)
    return jsonify({"message": ws.store.get_message(message_id).to_dict()})


def _charity_task_or_404(ws: Workspace, task_id: str):
    task = ws.store.get_task(task_id)
    if task is None or task.charity_id != ws.current_user.charity_id:
        return None
    return task


# ── Landing & session ────────────────────────────────────────────────────────

@api.route("/")
def index():
    return jsonify({
        "name": "Charity Board",
        "portals": {"admin": "/api/login/admin", "charity": "/api/login/charity"},
    })


def _login(portal: Portal):
    data = _body()
    ws = _ws()
    if not ws.login(str(data.get("username", "")), str(data.get("password", "")), portal):
        return jsonify({"error": "Invalid username or password"}), 401
    user = ws.current_user
    return jsonify({
        "user": user.to_dict(),
        "navigation": [asdict(e) for e in visible_navigation(user)],
        "redirect": "/admin" if portal == Portal.ADMIN else "/charity",
    })


@api.route("/api/login/admin", methods=["POST"])
def login_admin():
    return _login(Portal.ADMIN)


@api.route("/api/login/charity", methods=["POST"])
def login_charity():
    return _login(Portal.CHARITY)


@api.route("/api/logout", methods=["POST"])
def logout():
    _ws().logout()
    return jsonify({"redirect": "/"})


@api.route("/api/session")
def session_state():
    return jsonify(_ws().state.to_dict())


@api.route("/api/navigation")
@require_login
def navigation():
    entries = visible_navigation(_ws().current_user)
    return jsonify({"navigation": [asdict(e) for e in entries]})


@api.route("/api/describe", methods=["POST"])
@require_login
def describe():
    data = _body()
    error = _missing(data, "title")
    if error:
        return error
    return jsonify({"description": _ws().describer.generate(data["title"])})


# ── Admin portal ─────────────────────────────────────────────────────────────

@api.route("/api/admin/charities", methods=["GET"])
@require_portal(Portal.ADMIN)
def admin_charities():
    ws = _ws()
    return jsonify({"charities": [c.to_dict() for c in ws.store.charities]})


@api.route("/api/admin/charities", methods=["POST"])
@require_portal(Portal.ADMIN)
def admin_create_charity():
    data = _body()
    error = _missing(data, "name", "username", "password")
    if error:
        return error
    member_count = _member_count(data)
    if member_count is None:
        return jsonify({"error": "memberCount must be an integer"}), 400
    charity = _ws().create_charity(
        name=data["name"],
        username=data["username"],
        password=data["password"],
        logo=data.get("logo", ""),
        member_count=member_count,
    )
    return jsonify({"charity": charity.to_dict()}), 201


@api.route("/api/admin/charities/<charity_id>", methods=["GET"])
@require_portal(Portal.ADMIN)
def admin_charity_detail(charity_id):
    ws = _ws()
    charity = ws.store.get_charity(charity_id)
    if charity is None:
        return jsonify({"error": "Charity not found"}), 404
    return jsonify({
        "charity": charity.to_dict(),
        "employees": [u.to_dict() for u in ws.store.users_for_charity(charity_id)],
        "tasks": [t.to_dict() for t in ws.store.tasks_for_charity(charity_id)],
        "summary": charity_summary(ws.store, charity_id),
    })


@api.route("/api/admin/charities/<charity_id>", methods=["PATCH"])
@require_portal(Portal.ADMIN)
def admin_update_charity(charity_id):
    ws = _ws()
    charity = ws.store.get_charity(charity_id)
    if charity is None:
        return jsonify({"error": "Charity not found"}), 404
    data = _body()
    if "memberCount" in data and _member_count(data) is None:
        return jsonify({"error": "memberCount must be an integer"}), 400

    editable = ("name", "username", "password", "logo", "memberCount")
    merged = Charity.from_dict({
        **charity.to_dict(),
        **{key: data[key] for key in editable if key in data},
    })
    ws.store.update_charity(
        charity_id,
        name=merged.name,
        username=merged.username,
        password=merged.password,
        logo=merged.logo,
        member_count=merged.member_count,
    )
    return jsonify({"charity": ws.store.get_charity(charity_id).to_dict()})


@api.route("/api/admin/tasks", methods=["GET"])
@require_portal(Portal.ADMIN)
def admin_tasks():
    ws = _ws()
    charity_id = request.args.get("charityId")
    tasks = ws.store.tasks_for_charity(charity_id) if charity_id else ws.store.tasks
    return jsonify({"tasks": [t.to_dict() for t in tasks], "count": len(tasks)})


@api.route("/api/admin/tasks", methods=["POST"])
@require_portal(Portal.ADMIN)
def admin_assign_task():
    data = _body()
    error = _missing(data, "title", "charityId")
    if error:
        return error
    ws = _ws()
    if ws.store.get_charity(data["charityId"]) is None:
        return jsonify({"error": "Charity not found"}), 404
    task = ws.create_task(
        title=data["title"],
        charity_id=data["charityId"],
        description=data.get("description", ""),
    )
    return jsonify({"task": task.to_dict()}), 201


@api.route("/api/admin/mail", methods=["GET"])
@require_portal(Portal.ADMIN)
def admin_mail():
    return jsonify(_mail_payload(_ws(), ADMIN_MAILBOX))


@api.route("/api/admin/mail", methods=["POST"])
@require_portal(Portal.ADMIN)
def admin_send_mail():
    data = _body()
    error = _missing(data, "receiverId", "subject", "content")
    if error:
        return error
    message = _ws().send_mail(data["receiverId"], data["subject"], data["content"])
    return jsonify({"message": message.to_dict()}), 201


@api.route("/api/admin/mail/<message_id>/read", methods=["POST"])
@require_portal(Portal.ADMIN)
def admin_read_mail(message_id):
    return _mark_read(_ws(), ADMIN_MAILBOX, message_id)


@api.route("/api/admin/stats")
@require_portal(Portal.ADMIN)
def admin_stats():
    return jsonify(admin_overview(_ws().store))


@api.route("/api/admin/settings", methods=["GET"])
@require_portal(Portal.ADMIN)
def admin_settings():
    return jsonify(_ws().state.to_dict())


@api.route("/api/admin/settings", methods=["POST"])
@require_portal(Portal.ADMIN)
def admin_toggle_setting():
    ws = _ws()
    toggle = _body().get("toggle", "")
    if toggle == "theme":
        ws.toggle_theme()
    elif toggle == "fontSize":
        ws.toggle_font_size()
    else:
        return jsonify({"error": "toggle must be 'theme' or 'fontSize'"}), 400
    return jsonify(ws.state.to_dict())


# ── Charity portal ───────────────────────────────────────────────────────────

@api.route("/api/charity/board")
@require_portal(Portal.CHARITY)
def charity_board():
    ws = _ws()
    charity_id = ws.current_user.charity_id
    buckets = ws.board.columns(charity_id)
    return jsonify({
        "columns": [
            {"id": col.id.value, "title": col.title,
             "tasks": [t.to_dict() for t in buckets[col.id]]}
            for col in COLUMNS
        ],
        "summary": charity_summary(ws.store, charity_id),
    })


@api.route("/api/charity/tasks", methods=["POST"])
@require_portal(Portal.CHARITY)
def charity_create_task():
    data = _body()
    error = _missing(data, "title")
    if error:
        return error
    ws = _ws()
    task = ws.create_task(
        title=data["title"],
        charity_id=ws.current_user.charity_id,
        description=data.get("description", ""),
        project_id=data.get("projectId"),
        assignee_id=data.get("assigneeId"),
    )
    return jsonify({"task": task.to_dict()}), 201


@api.route("/api/charity/tasks/<task_id>/move", methods=["POST"])
@require_portal(Portal.CHARITY)
def charity_move_task(task_id):
    ws = _ws()
    if _charity_task_or_404(ws, task_id) is None:
        return jsonify({"error": "Task not found"}), 404

    status = str(_body().get("status", "")).strip().upper()
    try:
        target = TaskStatus(status)
    except ValueError:
        return jsonify({"error": f"Invalid status: {status}"}), 400

    try:
        moved = ws.board.move(task_id, target)
    except InvalidTransition as e:
        return jsonify({"error": str(e)}), 400
    return jsonify({"moved": moved, "task": ws.store.get_task(task_id).to_dict()})


@api.route("/api/charity/tasks/<task_id>/activity", methods=["GET"])
@require_portal(Portal.CHARITY)
def charity_task_activity(task_id):
    ws = _ws()
    if _charity_task_or_404(ws, task_id) is None:
        return jsonify({"error": "Task not found"}), 404
    return jsonify({"activity": [a.to_dict() for a in ws.activity.timeline(task_id)]})


@api.route("/api/charity/tasks/<task_id>/activity", methods=["POST"])
@require_portal(Portal.CHARITY)
def charity_comment(task_id):
    ws = _ws()
    if _charity_task_or_404(ws, task_id) is None:
        return jsonify({"error": "Task not found"}), 404
    activity = ws.activity.add_comment(task_id, str(_body().get("content", "")))
    if activity is None:
        return jsonify({"error": "content is required"}), 400
    return jsonify({"activity": activity.to_dict()}), 201


@api.route("/api/charity/projects", methods=["GET"])
@require_portal(Portal.CHARITY)
def charity_projects():
    ws = _ws()
    projects = []
    for project in ws.store.projects_for_charity(ws.current_user.charity_id):
        data = project.to_dict()
        data["progress"] = project_progress(ws.store.tasks, project.id)
        projects.append(data)
    return jsonify({"projects": projects})


@api.route("/api/charity/projects", methods=["POST"])
@require_portal(Portal.CHARITY)
def charity_create_project():
    ws = _ws()
    require_permission(ws.current_user, "manage_projects")
    data = _body()
    error = _missing(data, "title")
    if error:
        return error
    project = ws.create_project(
        title=data["title"],
        deadline=data.get("deadline", ""),
        manager_id=data.get("managerId"),
    )
    return jsonify({"project": project.to_dict()}), 201


@api.route("/api/charity/team", methods=["GET"])
@require_portal(Portal.CHARITY)
def charity_team():
    ws = _ws()
    members = ws.store.users_for_charity(ws.current_user.charity_id)
    return jsonify({"team": [u.to_dict() for u in members]})


@api.route("/api/charity/team", methods=["POST"])
@require_portal(Portal.CHARITY)
def charity_add_member():
    ws = _ws()
    require_permission(ws.current_user, "manage_team")
    data = _body()
    error = _missing(data, "name", "username", "password")
    if error:
        return error
    permissions = list(data.get("permissions") or [])
    unknown = [p for p in permissions if p not in ALL_PERMISSION_IDS]
    if unknown:
        return jsonify({"error": f"Unknown permissions: {unknown}"}), 400
    employee = ws.create_employee(
        name=data["name"],
        username=data["username"],
        password=data["password"],
        job_role=JobRole.from_str(data.get("jobRole") or "EMPLOYEE"),
        permissions=permissions,
    )
    return jsonify({"user": employee.to_dict()}), 201


@api.route("/api/charity/mail", methods=["GET"])
@require_portal(Portal.CHARITY)
def charity_mail():
    ws = _ws()
    return jsonify(_mail_payload(ws, ws.current_user.charity_id))


@api.route("/api/charity/mail", methods=["POST"])
@require_portal(Portal.CHARITY)
def charity_send_mail():
    data = _body()
    error = _missing(data, "subject", "content")
    if error:
        return error
    message = _ws().send_mail(data.get("receiverId") or ADMIN_MAILBOX,
                              data["subject"], data["content"])
    return jsonify({"message": message.to_dict()}), 201


@api.route("/api/charity/mail/<message_id>/read", methods=["POST"])
@require_portal(Portal.CHARITY)
def charity_read_mail(message_id):
    ws = _ws()
    return _mark_read(ws, ws.current_user.charity_id, message_id)


@api.route("/health")
def health():
    ws = _ws()
    return jsonify({
        "status": "ok",
        "charities": len(ws.store.charities),
        "tasks": len(ws.store.tasks),
        "strict_workflow": ws.config.strict_workflow,
    })


@api.app_errorhandler(AccessDenied)
def access_denied(e):
    return jsonify({"error": str(e)}), 403


# ── App factory ──────────────────────────────────────────────────────────────

def create_app(config: Config = None, workspace: Workspace = None) -> Flask:
    """Build the Flask app around a freshly opened workspace."""
    app = Flask(__name__)
    ws = workspace or Workspace(config or Config())
    app.config["WORKSPACE"] = ws.open()
    app.register_blueprint(api)
    return app


# ── Main ─────────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Charity Board Server")
    parser.add_argument("--host", default="127.0.0.1",
                        help="Bind address (use 0.0.0.0 to expose on network)")
    parser.add_argument("--port", type=int, default=3000)
    parser.add_argument("--config", help="Path to YAML config (overrides CHARITYBOARD_CONFIG)")
    args = parser.parse_args()

    try:
        config = Config.load(args.config)
    except ConfigError as e:
        print(f"Config error: {e}", file=sys.stderr)
        sys.exit(1)

    logging.basicConfig(
        level=getattr(logging, str(config.log_level).upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    app = create_app(config)
    logger.info("Charity board on http://%s:%s (strict workflow: %s)",
                args.host, args.port, config.strict_workflow)
    app.run(host=args.host, port=args.port, debug=False, threaded=False)
