"""
REST routes for listing and creating users.
"""
import logging

from flask import Blueprint, jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from directory import get_engine
from directory.database import db_session
from directory.models import User
from directory.services import DirectoryError, UserFilter, list_users
from directory.utils.validators import extract_new_user

logger = logging.getLogger(__name__)

api_bp = Blueprint('api', __name__, url_prefix='/api')


@api_bp.route('/users', methods=['GET'])
def get_users():
    """Return every user, unfiltered."""
    users, error = list_users(get_engine(), UserFilter())
    if error is not None:
        return jsonify({'error': error.display_message}), 503
    return jsonify([user.to_dict() for user in users])


@api_bp.route('/users', methods=['POST'])
def create_user():
    """Insert one user from a JSON body."""
    fields, validation_error = extract_new_user(request.get_json(silent=True))
    if validation_error:
        return jsonify({'error': validation_error}), 400

    try:
        with db_session(get_engine()) as session:
            user = User(**fields)
            session.add(user)
            session.flush()
            inserted_id = user.user_id
    except SQLAlchemyError as exc:
        logger.error("[db] insert error", exc_info=True)
        return jsonify({'error': DirectoryError.from_exception(exc).display_message}), 503

    return jsonify({'insertedId': inserted_id}), 201
