from __future__ import annotations

from dataclasses import asdict

from flask import Flask, jsonify, request

from ..common.validators import require_enum
from ..core.enums import Gender, HomeGroup
from ..core.exceptions import ValidationError
from ..container import Container
from .model import Sewadar


def _sewadar_json(s: Sewadar) -> dict:
    data = asdict(s)
    data["gender"] = s.gender.value
    data["home_group"] = s.home_group.value
    return data


def register(app: Flask, container: Container) -> None:
    @app.route("/api/sewadars", methods=["GET"], endpoint="api_search_sewadars")
    def api_search_sewadars():
        gender = request.args.get("gender")
        group = request.args.get("group")
        rows = container.roster_service.search(
            request.args.get("q", ""),
            gender=require_enum(Gender, gender, "Gender") if gender else None,
            group=require_enum(HomeGroup, group, "Group") if group else None,
        )
        return jsonify({"success": True, "sewadars": [_sewadar_json(s) for s in rows]})

    @app.route("/api/sewadars", methods=["POST"], endpoint="api_register_sewadar")
    def api_register_sewadar():
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")
        sewadar = container.roster_service.register_custom(
            name=data.get("name") or "",
            gender=data.get("gender"),
            group=data.get("group"),
        )
        return jsonify({"success": True, "sewadar": _sewadar_json(sewadar)}), 201
