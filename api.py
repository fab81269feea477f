"""
api.py
JSON HTTP handlers: owner register/login and the signed-in owner's member list.
Run: python api.py
"""

from __future__ import annotations

import logging

from flask import Blueprint, Flask, current_app, g, jsonify, request

import auth
import config
import members as member_ops
import utils
from models import VIEW_ALL, Member, member_to_dict
from store import MemberStore, SqliteMemberStore, SqliteUserStore, UserStore

log = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/api")
members_bp = Blueprint("members", __name__, url_prefix="/api")

# JSON keys accepted on create / edit -> Member field names
FIELD_MAP = {
    "name": "name",
    "phoneNumber": "phone_number",
    "startDate": "start_date",
    "duration": "duration",
    "price": "price",
}


def _error(message: str, status: int, **extra):
    return jsonify({"error": message, **extra}), status


def _json_body() -> dict | None:
    """
    The request's JSON object, {} when there is no body, None when the body is not an object.
    """
    data = request.get_json(silent=True)
    if data is None:
        return {}
    return data if isinstance(data, dict) else None


def _member_json(m: Member) -> dict:
    data = member_to_dict(m)
    data["daysRemaining"] = utils.days_remaining(m)
    data["status"] = utils.classify(m)
    return data


def _member_store() -> MemberStore:
    return current_app.config["MEMBER_STORE"]


def _current_owner() -> str | None:
    header = request.headers.get("Authorization", "")
    parts = header.split(" ")
    token = parts[1] if len(parts) > 1 else None
    return auth.verify_token(token, current_app.config["JWT_SECRET"])


# ---------- Auth ----------

@auth_bp.route("/auth", methods=["POST"])
def auth_action():
    data = _json_body()
    if data is None:
        return _error("Invalid request body", 400)
    action = data.get("action")
    email = data.get("email") or ""
    password = data.get("password") or ""
    users: UserStore = current_app.config["USER_STORE"]
    secret = current_app.config["JWT_SECRET"]

    if action not in ("register", "login"):
        return _error("Invalid action", 400)
    if not isinstance(email, str) or not isinstance(password, str):
        return _error("Email and password must be strings", 400)
    email = email.strip()
    if not email or not password:
        return _error("Email and password are required", 400)

    try:
        if action == "register":
            session = auth.register(users, email, password, secret)
        else:
            session = auth.login(users, email, password, secret)
    except auth.AuthError as e:
        return _error(str(e), 400)

    return jsonify({"token": session.token, "email": session.email}), 200


# ---------- Members ----------

@members_bp.before_request
def require_token():
    owner = _current_owner()
    if not owner:
        log.warning("Unauthorized %s %s", request.method, request.path)
        return _error("Unauthorized", 401)
    g.owner = owner


def _owner() -> str:
    return g.owner


@members_bp.route("/members", methods=["GET"])
def list_members():
    view = request.args.get("view", VIEW_ALL)
    search = request.args.get("search", "")
    try:
        rows = utils.filter_members(_member_store().load(_owner()), view)
    except utils.MembershipInputError as e:
        return _error(str(e), 400)
    rows = member_ops.search_members(rows, search)
    return jsonify([_member_json(m) for m in rows]), 200


@members_bp.route("/members", methods=["POST"])
def add_member():
    data = _json_body()
    if data is None:
        return _error("Invalid request body", 400)
    try:
        member = member_ops.create_member(
            name=data.get("name") or "",
            start_date=data.get("startDate"),
            duration=data.get("duration"),
            price=data.get("price"),
            phone_number=data.get("phoneNumber"),
        )
    except member_ops.InvalidMember as e:
        return _error("Invalid member", 400, details=e.errors)

    store = _member_store()
    store.save(_owner(), member_ops.add_member(store.load(_owner()), member))
    return jsonify(_member_json(member)), 200


@members_bp.route("/members", methods=["PUT"])
def update_member():
    data = _json_body()
    if data is None:
        return _error("Invalid request body", 400)
    data = dict(data)
    member_id = data.pop("id", None)
    fields = {FIELD_MAP.get(k, k): v for k, v in data.items()}

    store = _member_store()
    try:
        rows = member_ops.update_member(store.load(_owner()), member_id, **fields)
    except member_ops.MemberNotFound:
        return _error("Member not found", 404)
    except member_ops.InvalidMember as e:
        return _error("Invalid member", 400, details=e.errors)

    store.save(_owner(), rows)
    return jsonify(_member_json(member_ops.get_member(rows, member_id))), 200


@members_bp.route("/members", methods=["DELETE"])
def delete_member():
    data = _json_body()
    if data is None:
        return _error("Invalid request body", 400)
    store = _member_store()
    try:
        rows = member_ops.delete_member(store.load(_owner()), data.get("id"))
    except member_ops.MemberNotFound:
        return _error("Member not found", 404)
    store.save(_owner(), rows)
    return jsonify({"success": True}), 200


@members_bp.route("/members/<member_id>/renew", methods=["POST"])
def renew_member(member_id):
    data = _json_body()
    if data is None:
        return _error("Invalid request body", 400)
    store = _member_store()
    try:
        rows = member_ops.renew(
            store.load(_owner()),
            member_id,
            start_date=data.get("startDate") or utils.today_iso(),
            duration=data.get("duration"),
            price=data.get("price"),
        )
    except member_ops.MemberNotFound:
        return _error("Member not found", 404)
    except utils.MembershipInputError as e:
        return _error(str(e), 400)

    store.save(_owner(), rows)
    return jsonify(_member_json(member_ops.get_member(rows, member_id))), 200


def create_app(
    member_store: MemberStore | None = None,
    user_store: UserStore | None = None,
    secret: str | None = None,
) -> Flask:
    app = Flask(__name__)
    app.config["MEMBER_STORE"] = member_store or SqliteMemberStore()
    app.config["USER_STORE"] = user_store or SqliteUserStore()
    app.config["JWT_SECRET"] = secret or config.JWT_SECRET

    app.register_blueprint(auth_bp)
    app.register_blueprint(members_bp)

    @app.errorhandler(405)
    def method_not_allowed(e):
        return _error("Method not allowed", 405)

    @app.errorhandler(404)
    def not_found(e):
        return _error("Not found", 404)

    return app


if __name__ == "__main__":
    logging.basicConfig(format=config.LOG_FORMAT, level=config.LOG_LEVEL)
    create_app().run()
