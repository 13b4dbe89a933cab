# restaurant/routes/customer_routes.py
from flask import Blueprint, request, jsonify

from restaurant.routes import account_service

bp = Blueprint('customer', __name__, url_prefix='/customer')


@bp.route('/signup', methods=['POST'])
def signup():
    """
    POST /customer/signup
    Multipart form: username, email, phone, password, img (optional)
    """
    result = account_service().signup_customer(
        username=request.form.get('username'),
        email=request.form.get('email'),
        phone=request.form.get('phone'),
        password=request.form.get('password'),
        image=request.files.get('img'),
    )
    return jsonify(result), 201


@bp.route('/login', methods=['POST'])
def login():
    """
    POST /customer/login
    Form: email, password
    """
    result = account_service().login_customer(
        email=request.form.get('email'),
        password=request.form.get('password'),
    )
    return jsonify(result), 200


@bp.route('/update/<user_id>', methods=['PUT'])
def update_user(user_id):
    """
    PUT /customer/update/<id>
    Multipart form: username, img (optional)
    """
    result = account_service().update_user(
        user_id,
        username=request.form.get('username'),
        image=request.files.get('img'),
    )
    return jsonify(result), 200


@bp.route('/delete/<user_id>', methods=['DELETE'])
def delete_user(user_id):
    result = account_service().delete_user(user_id)
    return jsonify(result), 200


@bp.route('/users', methods=['GET'])
def list_users():
    return jsonify(account_service().list_users()), 200
