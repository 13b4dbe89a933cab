import uuid

import pytest

from restaurant.errors import (
    AssetStoreError,
    ConflictError,
    InternalError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from restaurant.models import RoleId, User, Vendor, UserRole
from restaurant.utils.passwords import verify_password
from tests.conftest import make_upload, stored_path


def _roles(service, account_id):
    return service.identity.roles_of(account_id)


@pytest.mark.parametrize("signup, role", [
    (lambda s, email: s.signup_customer("Cat", email, "555", "pw123456"), RoleId.CUSTOMER),
    (lambda s, email: s.signup_admin("Ann", email, "pw123456", "555"), RoleId.ADMIN),
    (lambda s, email: s.add_vendor("Vic", email, "555", "Noodles"), RoleId.VENDOR),
])
def test_signup_tags_exactly_the_endpoint_role(service, signup, role):
    account = signup(service, "someone@x.com")

    uuid.UUID(account["id"])
    assert "password" not in account
    assert _roles(service, account["id"]) == {role}


def test_customer_password_is_hashed(service):
    account = service.signup_customer("Cat", "cat@x.com", "555", "secret123")

    stored = service.session.get(User, account["id"]).password
    assert stored != "secret123"
    assert verify_password(stored, "secret123")


def test_vendor_has_no_password_and_a_profile(service):
    account = service.add_vendor("Vic", "vic@x.com", "555", "Noodles")

    assert service.session.get(User, account["id"]).password is None
    assert service.session.get(Vendor, account["id"]).description == "Noodles"


@pytest.mark.parametrize("missing", ["username", "email", "phone", "password"])
def test_signup_requires_every_field(service, missing):
    fields = {"username": "Cat", "email": "cat@x.com", "phone": "555", "password": "pw"}
    fields[missing] = "   "
    with pytest.raises(ValidationError):
        service.signup_customer(**fields)


def test_repeated_signup_conflicts_whatever_the_payload(service):
    service.signup_admin("Ann", "a@x.com", "secret123", "555")

    with pytest.raises(ConflictError):
        service.signup_admin("Someone else", "a@x.com", "other-pass", "999")
    with pytest.raises(ConflictError):
        service.signup_customer("Cat", "a@x.com", "555", "pw")
    with pytest.raises(ConflictError):
        service.add_vendor("Vic", "a@x.com", "555", "Noodles")


def test_conflict_does_not_store_an_image(service, assets):
    service.signup_customer("Cat", "cat@x.com", "555", "pw")
    with pytest.raises(ConflictError):
        service.signup_customer("Cat", "cat@x.com", "555", "pw", image=make_upload())
    assert list(assets.iter_files()) == []


def test_failed_image_store_writes_no_rows(service, assets, monkeypatch):
    def broken_store(*args, **kwargs):
        raise AssetStoreError()

    monkeypatch.setattr(assets, "store", broken_store)
    with pytest.raises(InternalError):
        service.signup_customer("Cat", "cat@x.com", "555", "pw", image=make_upload())

    assert service.identity.find_by_email("cat@x.com") is None


def test_failed_role_insert_rolls_back_account_and_image(service, assets, monkeypatch):
    def broken_attach(*args, **kwargs):
        raise InternalError("Failed to assign role")

    monkeypatch.setattr(service.identity, "attach_role", broken_attach)
    with pytest.raises(InternalError):
        service.signup_customer("Cat", "cat@x.com", "555", "pw", image=make_upload())

    assert service.identity.find_by_email("cat@x.com") is None
    assert list(assets.iter_files()) == []


def test_customer_login(service):
    service.signup_customer("Cat", "cat@x.com", "555", "secret123")

    result = service.login_customer("cat@x.com", "secret123")
    assert result["email"] == "cat@x.com"
    assert "password" not in result

    with pytest.raises(UnauthorizedError) as wrong_password:
        service.login_customer("cat@x.com", "nope")
    with pytest.raises(UnauthorizedError) as unknown:
        service.login_customer("ghost@x.com", "secret123")
    # Same message either way
    assert wrong_password.value.message == unknown.value.message


def test_vendor_cannot_log_in_without_password(service):
    service.add_vendor("Vic", "vic@x.com", "555", "Noodles")
    with pytest.raises(UnauthorizedError):
        service.login_customer("vic@x.com", "anything")


def test_admin_login_requires_admin_role(service):
    service.signup_admin("Ann", "a@x.com", "secret123", "555")
    service.signup_customer("Cat", "cat@x.com", "555", "secret123")

    assert service.login_admin("a@x.com", "secret123")["email"] == "a@x.com"
    # A customer passes the customer endpoint but not the admin one
    assert service.login_customer("cat@x.com", "secret123")["email"] == "cat@x.com"
    with pytest.raises(UnauthorizedError) as exc:
        service.login_admin("cat@x.com", "secret123")
    assert exc.value.message == "You do not have admin privileges"


def test_admin_login_distinguishes_failures(service):
    service.signup_admin("Ann", "a@x.com", "secret123", "555")

    with pytest.raises(UnauthorizedError) as unknown:
        service.login_admin("ghost@x.com", "secret123")
    with pytest.raises(UnauthorizedError) as wrong:
        service.login_admin("a@x.com", "bad")
    assert unknown.value.message == "This user is not authorized"
    assert wrong.value.message == "Password is not correct"


def test_login_requires_fields(service):
    with pytest.raises(ValidationError):
        service.login_customer("", "pw")
    with pytest.raises(ValidationError):
        service.login_admin("a@x.com", None)


def test_update_user_replaces_image(service, assets):
    account = service.signup_customer("Cat", "cat@x.com", "555", "pw", image=make_upload("old.png"))
    old_path = stored_path(account["img"])
    assert assets.exists(old_path)

    updated = service.update_user(account["id"], username="Kitty", image=make_upload("new.jpg"))

    new_path = stored_path(updated["img"])
    assert updated["name"] == "Kitty"
    assert new_path.endswith(".jpg")
    assert assets.exists(new_path)
    assert not assets.exists(old_path)


def test_update_user_keeps_name_and_image_when_not_given(service):
    account = service.signup_customer("Cat", "cat@x.com", "555", "pw", image=make_upload())

    updated = service.update_user(account["id"], username="")

    assert updated["name"] == "Cat"
    assert updated["img"] == account["img"]


def test_update_tolerates_an_already_missing_old_image(service, assets):
    account = service.signup_customer("Cat", "cat@x.com", "555", "pw", image=make_upload())
    assets.delete(stored_path(account["img"]))

    updated = service.update_user(account["id"], image=make_upload())
    assert assets.exists(stored_path(updated["img"]))


def test_update_rolls_back_when_old_image_cannot_be_removed(service, assets, monkeypatch):
    account = service.signup_customer("Cat", "cat@x.com", "555", "pw", image=make_upload())
    old_path = stored_path(account["img"])
    real_delete = assets.delete

    def failing_delete(path):
        if path == old_path:
            raise AssetStoreError("Failed to delete image")
        real_delete(path)

    monkeypatch.setattr(assets, "delete", failing_delete)
    with pytest.raises(InternalError):
        service.update_user(account["id"], username="Kitty", image=make_upload())

    user = service.session.get(User, account["id"])
    assert user.name == "Cat"
    assert user.img == old_path
    assert list(assets.iter_files()) == [old_path]


def test_update_unknown_user(service):
    with pytest.raises(NotFoundError):
        service.update_user(str(uuid.uuid4()), username="x")
    with pytest.raises(ValidationError):
        service.update_user("", username="x")


def test_update_vendor(service, assets):
    account = service.add_vendor("Vic", "vic@x.com", "555", "Noodles", image=make_upload())
    old_path = stored_path(account["img"])

    updated = service.update_vendor(
        account["id"], name="Vic's", description="Ramen", phone="777", image=make_upload("n.png"),
    )

    assert updated["name"] == "Vic's"
    assert updated["description"] == "Ramen"
    assert not assets.exists(old_path)
    assert assets.exists(stored_path(updated["img"]))
    assert service.get_vendor(account["id"])["phone"] == "777"


def test_update_vendor_rejects_non_vendor(service):
    customer = service.signup_customer("Cat", "cat@x.com", "555", "pw")
    with pytest.raises(NotFoundError):
        service.update_vendor(customer["id"], name="x")


def test_delete_vendor_removes_profile_role_account_and_image(service, assets):
    account = service.add_vendor("Vic", "vic@x.com", "555", "Noodles", image=make_upload())
    vendor_id = account["id"]
    img_path = stored_path(account["img"])

    assert service.delete_vendor(vendor_id)["message"]

    assert service.session.get(Vendor, vendor_id) is None
    assert service.session.query(UserRole).filter_by(user_id=vendor_id).count() == 0
    assert service.session.get(User, vendor_id) is None
    assert not assets.exists(img_path)
    with pytest.raises(NotFoundError):
        service.get_vendor(vendor_id)


def test_delete_vendor_refuses_non_vendors(service):
    customer = service.signup_customer("Cat", "cat@x.com", "555", "pw")
    with pytest.raises(NotFoundError):
        service.delete_vendor(customer["id"])
    with pytest.raises(NotFoundError):
        service.delete_vendor(str(uuid.uuid4()))


def test_delete_user_removes_roles_and_image(service, assets):
    account = service.signup_customer("Cat", "cat@x.com", "555", "pw", image=make_upload())

    service.delete_user(account["id"])

    assert service.identity.get(account["id"]) is None
    assert _roles(service, account["id"]) == set()
    assert list(assets.iter_files()) == []
    with pytest.raises(NotFoundError):
        service.delete_user(account["id"])


def test_delete_user_rolls_back_on_filesystem_error(service, assets, monkeypatch):
    account = service.signup_customer("Cat", "cat@x.com", "555", "pw", image=make_upload())

    def failing_delete(path):
        raise AssetStoreError("Failed to delete image")

    monkeypatch.setattr(assets, "delete", failing_delete)
    with pytest.raises(InternalError):
        service.delete_user(account["id"])

    assert service.identity.get(account["id"]) is not None
    assert _roles(service, account["id"]) == {RoleId.CUSTOMER}


def test_lists(service):
    service.signup_customer("Cat", "cat@x.com", "555", "pw")
    vendor = service.add_vendor("Vic", "vic@x.com", "555", "Noodles")

    users = service.list_users()
    assert {u["email"] for u in users} == {"cat@x.com", "vic@x.com"}
    assert all("password" not in u for u in users)

    vendors = service.list_vendors()
    assert [(v["id"], v["description"]) for v in vendors] == [(vendor["id"], "Noodles")]


def test_long_wrong_password_is_unauthorized(service):
    service.signup_customer("Cat", "cat@x.com", "555", "secret123")
    service.signup_admin("Ann", "a@x.com", "secret123", "555")

    with pytest.raises(UnauthorizedError):
        service.login_customer("cat@x.com", "x" * 100)
    with pytest.raises(UnauthorizedError) as exc:
        service.login_admin("a@x.com", "x" * 100)
    assert exc.value.message == "Password is not correct"


def test_signup_with_overlong_password_is_a_validation_error(service):
    with pytest.raises(ValidationError):
        service.signup_customer("Cat", "cat@x.com", "555", "x" * 80)
    assert service.identity.find_by_email("cat@x.com") is None
