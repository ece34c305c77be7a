# campsite/api/v1/content.py
from flask import current_app, g, request, jsonify

from campsite.application.content import blocks as block_cases
from campsite.application.content import history as history_cases
from campsite.application.content import sections as section_cases
from campsite.application.content.edit_session import commit_session
from campsite.normalizers.block import normalize_block, normalize_rows
from campsite.normalizers.history import normalize_history
from campsite.normalizers.pagination import normalize_pagination
from campsite.normalizers.section import normalize_section
from campsite.utils.decorators import actor_required, roles_required
from campsite.utils.pagination import parse_limit
from . import v1_bp


def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return None
    return data


def _optional_int(raw):
    if raw in (None, ""):
        return None
    try:
        return int(raw)
    except ValueError:
        return None


# ------------------------
# Sections
# ------------------------
@v1_bp.route("/page-sections/<page_section_id>/sections", methods=["GET"])
@actor_required
def list_sections(page_section_id):
    items = section_cases.list_sections(actor=g.current_user, page_section_id=page_section_id)

    return jsonify({
        "page_section_id": page_section_id,
        "sections": [
            normalize_section(item["section"], blocks=item["blocks"], can_edit=item["can_edit"])
            for item in items
        ]
    }), 200


@v1_bp.route("/page-sections/<page_section_id>/sections", methods=["POST"])
@actor_required
@roles_required("admin", "staff")
def create_section(page_section_id):
    data = _json_body() or {}

    section = section_cases.create_section(
        actor=g.current_user,
        page_section_id=page_section_id,
        title=data.get("title") or "",
    )

    return jsonify(normalize_section(section, blocks=[], can_edit=True)), 201


@v1_bp.route("/sections/<section_id>", methods=["GET"])
@actor_required
def get_section(section_id):
    result = section_cases.get_section(actor=g.current_user, section_id=section_id)

    data = normalize_section(result["section"], blocks=result["blocks"], can_edit=result["can_edit"])
    data["rows"] = normalize_rows(result["rows"])
    data["allowed_types"] = result["allowed_types"]
    return jsonify(data), 200


@v1_bp.route("/sections/<section_id>", methods=["PATCH"])
@actor_required
def update_section(section_id):
    data = _json_body()
    if data is None:
        return jsonify({"error": "Invalid request body"}), 400

    section = section_cases.update_section(actor=g.current_user, section_id=section_id, data=data)
    return jsonify(normalize_section(section)), 200


@v1_bp.route("/sections/<section_id>", methods=["DELETE"])
@actor_required
def delete_section(section_id):
    section_cases.delete_section(actor=g.current_user, section_id=section_id)
    return jsonify({"message": "Section deleted successfully"}), 200


@v1_bp.route("/sections/<section_id>/editors", methods=["PUT"])
@actor_required
@roles_required("admin")
def assign_editors(section_id):
    data = _json_body()
    if data is None or not isinstance(data.get("editor_ids"), list):
        return jsonify({"error": "editor_ids must be a list"}), 400

    section = section_cases.assign_editors(
        actor=g.current_user,
        section_id=section_id,
        editor_ids=data["editor_ids"],
    )
    return jsonify(normalize_section(section)), 200


# ------------------------
# Blocks (immediate mode)
# ------------------------
@v1_bp.route("/sections/<section_id>/blocks", methods=["GET"])
@actor_required
def list_blocks(section_id):
    result = section_cases.get_section(actor=g.current_user, section_id=section_id)

    return jsonify({
        "items": [normalize_block(b) for b in result["blocks"]],
        "rows": normalize_rows(result["rows"]),
    }), 200


@v1_bp.route("/sections/<section_id>/blocks", methods=["POST"])
@actor_required
def create_block(section_id):
    data = _json_body()
    if data is None:
        return jsonify({"error": "Invalid request body"}), 400

    block = block_cases.add_block(actor=g.current_user, section_id=section_id, data=data)
    return jsonify(normalize_block(block)), 201


@v1_bp.route("/blocks/<block_id>", methods=["PATCH"])
@actor_required
def update_block(block_id):
    data = _json_body()
    if data is None:
        return jsonify({"error": "Invalid request body"}), 400

    block = block_cases.update_block(actor=g.current_user, block_id=block_id, data=data)
    return jsonify(normalize_block(block)), 200


@v1_bp.route("/blocks/<block_id>", methods=["DELETE"])
@actor_required
def delete_block(block_id):
    block_cases.delete_block(actor=g.current_user, block_id=block_id)
    return jsonify({"message": "Block deleted successfully"}), 200


@v1_bp.route("/sections/<section_id>/blocks/reorder", methods=["POST"])
@actor_required
def reorder_blocks(section_id):
    data = _json_body()
    if data is None or not data.get("block_id"):
        return jsonify({"error": "block_id and index are required"}), 400

    blocks = block_cases.reorder_block(
        actor=g.current_user,
        section_id=section_id,
        block_id=data["block_id"],
        index=data.get("index"),
    )
    return jsonify({"items": [normalize_block(b) for b in blocks]}), 200


@v1_bp.route("/sections/<section_id>/uploads", methods=["POST"])
@actor_required
def upload(section_id):
    """
    multipart/form-data: ``target`` (image|replace|file|gallery|blob),
    ``file`` (one or more), optional ``block_id``, ``index``, ``width``.
    """
    form = request.form

    result = block_cases.upload(
        actor=g.current_user,
        section_id=section_id,
        target=form.get("target", "image"),
        files=request.files.getlist("file"),
        block_id=form.get("block_id") or None,
        index=_optional_int(form.get("index")),
        width=_optional_int(form.get("width")),
    )

    if "url" in result:
        return jsonify({"url": result["url"]}), 201
    return jsonify(normalize_block(result["block"]) if result["block"] else None), 201


# ------------------------
# Edit session
# ------------------------
@v1_bp.route("/sections/<section_id>/commit", methods=["POST"])
@actor_required
def commit(section_id):
    data = _json_body()
    if data is None:
        return jsonify({"error": "Invalid request body"}), 400

    result = commit_session(
        actor=g.current_user,
        section_id=section_id,
        operations=data.get("operations") or [],
        section_fields=data.get("section") or {},
    )

    outcome = result["outcome"]
    return jsonify({
        "section": normalize_section(result["section"], blocks=result["blocks"]),
        "outcome": {
            "created": outcome.created,
            "updated": outcome.updated,
            "deleted": outcome.deleted,
            "blobs_deleted": outcome.blobs_deleted,
            "history_recorded": outcome.history_recorded,
        } if outcome else None,
    }), 200


# ------------------------
# History
# ------------------------
@v1_bp.route("/sections/<section_id>/history", methods=["GET"])
@actor_required
def section_history(section_id):
    limit = parse_limit(request.args.get("limit"), current_app.config["HISTORY_PAGE_SIZE"])

    items, cursor = history_cases.section_history(
        actor=g.current_user,
        section_id=section_id,
        cursor=request.args.get("cursor"),
        limit=limit,
    )

    return jsonify(normalize_pagination(items, normalize_history, cursor=cursor)), 200


@v1_bp.route("/users/me/history", methods=["GET"])
@actor_required
def my_history():
    limit = parse_limit(request.args.get("limit"), current_app.config["HISTORY_PAGE_SIZE"])

    items, cursor = history_cases.user_history(
        actor=g.current_user,
        cursor=request.args.get("cursor"),
        limit=limit,
    )

    return jsonify(normalize_pagination(items, normalize_history, cursor=cursor)), 200
