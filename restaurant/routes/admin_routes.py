# restaurant/routes/admin_routes.py
from flask import Blueprint, request, jsonify

from restaurant.routes import account_service

bp = Blueprint('admin', __name__, url_prefix='/admin')


@bp.route('/signup', methods=['POST'])
def signup():
    """
    POST /admin/signup
    Multipart form: username, email, password, phone, img (optional)
    """
    result = account_service().signup_admin(
        username=request.form.get('username'),
        email=request.form.get('email'),
        password=request.form.get('password'),
        phone=request.form.get('phone'),
        image=request.files.get('img'),
    )
    return jsonify(result), 201


@bp.route('/login', methods=['POST'])
def login():
    """
    POST /admin/login
    Form: email, password
    """
    result = account_service().login_admin(
        email=request.form.get('email'),
        password=request.form.get('password'),
    )
    return jsonify(result), 200


@bp.route('/add-vendor', methods=['POST'])
def add_vendor():
    """
    POST /admin/add-vendor
    Multipart form: username, email, phone, description, img (optional)
    """
    result = account_service().add_vendor(
        username=request.form.get('username'),
        email=request.form.get('email'),
        phone=request.form.get('phone'),
        description=request.form.get('description'),
        image=request.files.get('img'),
    )
    return jsonify(result), 201


@bp.route('/update-vendor/<vendor_id>', methods=['PUT'])
def update_vendor(vendor_id):
    """
    PUT /admin/update-vendor/<id>
    Multipart form: name, description, phone, img (optional)
    """
    result = account_service().update_vendor(
        vendor_id,
        name=request.form.get('name'),
        description=request.form.get('description'),
        phone=request.form.get('phone'),
        image=request.files.get('img'),
    )
    return jsonify(result), 200


@bp.route('/delete/<vendor_id>', methods=['DELETE'])
def delete_vendor(vendor_id):
    result = account_service().delete_vendor(vendor_id)
    return jsonify(result), 200


@bp.route('/list-vendors', methods=['GET'])
def list_vendors():
    return jsonify(account_service().list_vendors()), 200


@bp.route('/vendor/<vendor_id>', methods=['GET'])
def get_vendor(vendor_id):
    return jsonify(account_service().get_vendor(vendor_id)), 200
