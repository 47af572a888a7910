# shapeless_blog/routes/users.py
from flask import jsonify

from ..data import users
from ..middleware.auth import auth_required
from ..models import db
from ..services import accounts, blog_writer
from . import api_bp, auth_rate_limit, limiter
from .helpers import json_body, optional_str, optional_version, required_str


# ------------------------------------------------------------------- #
#                       LOGIN ENDPOINT
# ------------------------------------------------------------------- #
@api_bp.route('/authentication', methods=['POST'])
@limiter.limit(auth_rate_limit)
def create_token():
    """
    Exchange credentials for a bearer token.

    Request Body (JSON):
        {
            "username": "alice",
            "password": "secret1"
        }

    Returns:
        - 201: {user_id, token, expired_time}
        - 401: Wrong password
        - 404: Unknown username
    """
    data = json_body()
    username = required_str(data, 'username')
    password = required_str(data, 'password')

    token = accounts.authenticate(db.session, username, password)
    return jsonify(token.to_dict()), 201


# ------------------------------------------------------------------- #
#                       CREATE USER ENDPOINT
# ------------------------------------------------------------------- #
@api_bp.route('/user/', methods=['POST'])
@limiter.limit(auth_rate_limit)
@auth_required
def create_user(current_user_id):
    """
    Register a new user. Only an authenticated user can add another one.

    Returns:
        - 201: {id, username}
        - 409: Username already exists
    """
    data = json_body()
    username = required_str(data, 'username')
    password = required_str(data, 'password')

    user = accounts.register_user(db.session, username, password)
    return jsonify(user.to_dict()), 201


# ------------------------------------------------------------------- #
#                       GET USER ENDPOINT
# ------------------------------------------------------------------- #
@api_bp.route('/user/<int:user_id>', methods=['GET'])
@auth_required
def show_user(user_id, current_user_id):
    user = users.get(db.session, user_id)
    return jsonify(user.to_dict()), 200


# ------------------------------------------------------------------- #
#                       UPDATE USER ENDPOINT
# ------------------------------------------------------------------- #
@api_bp.route('/user/<int:user_id>', methods=['PUT'])
@auth_required
def update_user(user_id, current_user_id):
    """
    Change your own username and/or password.

    Request Body (JSON):
        {
            "username": "new_name",
            "password": "new_password",
            "version": 0
        }
    """
    data = json_body()
    accounts.update_account(
        db.session,
        current_user_id,
        user_id,
        username=optional_str(data, 'username'),
        password=optional_str(data, 'password'),
        version=optional_version(data),
    )
    return '', 204


# ------------------------------------------------------------------- #
#                       DELETE USER ENDPOINT
# ------------------------------------------------------------------- #
@api_bp.route('/user/<int:user_id>', methods=['DELETE'])
@auth_required
def delete_user(user_id, current_user_id):
    blog_writer.delete_user_with_content(db.session, current_user_id, user_id)
    return '', 204
