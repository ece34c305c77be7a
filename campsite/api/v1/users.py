# campsite/api/v1/users.py
from flask import jsonify
from campsite.models.user import User
from campsite.utils.decorators import actor_required, roles_required
from . import v1_bp


@v1_bp.route("/users", methods=["GET"])
@actor_required
@roles_required("admin")
def list_users():
    """Candidates for the editor assignment dialog."""
    users = User.query.filter_by(is_active=True).order_by(User.name.asc()).all()

    return jsonify([
        {
            "id": user.id,
            "email": user.email,
            "name": user.name,
            "role": user.role,
            "is_active": user.is_active
        }
        for user in users
    ]), 200
