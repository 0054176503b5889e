import uuid

import pytest

from pipetrack.core.errors import NotFoundError, ValidationError
from pipetrack.schemas.auth import UserCreate, UserUpdate
from pipetrack.services.users import UserService


async def test_create_and_authenticate(db_session):
    service = UserService(db_session)
    user = await service.create_user(
        UserCreate(username="wang", password="pipes123", name="Wang", role="production")
    )
    assert user.is_active

    assert (await service.authenticate("wang", "pipes123")).id == user.id
    assert await service.authenticate("wang", "wrong-pass") is None
    assert await service.authenticate("nobody", "pipes123") is None


async def test_duplicate_username_is_rejected(db_session):
    service = UserService(db_session)
    payload = UserCreate(username="wang", password="pipes123", name="Wang", role="operator")
    await service.create_user(payload)
    with pytest.raises(ValidationError):
        await service.create_user(payload)


async def test_password_change_is_hashed(db_session):
    service = UserService(db_session)
    user = await service.create_user(
        UserCreate(username="wang", password="pipes123", name="Wang", role="operator")
    )
    updated = await service.update_user(user.id, UserUpdate(password="newpass1"))
    assert updated.hashed_password != "newpass1"
    assert await service.authenticate("wang", "newpass1") is not None


async def test_missing_user_and_self_delete(db_session):
    service = UserService(db_session)
    with pytest.raises(NotFoundError):
        await service.update_user(uuid.uuid4(), UserUpdate(name="x"))

    me = uuid.uuid4()
    with pytest.raises(ValidationError):
        await service.delete_user(me, acting_user_id=me)
    with pytest.raises(NotFoundError):
        await service.delete_user(uuid.uuid4(), acting_user_id=me)
