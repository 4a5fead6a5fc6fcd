"""Unit tests for IdentityService."""

from uuid import uuid4

import pytest

from commentary.config import AuthSettings
from commentary.domain.service import IdentityService
from commentary.domain.value import Role, UserId
from commentary.util.jwt import create_token
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestResolveViewer:
    """Tests for resolve_viewer."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", [Role.USER, Role.MODERATOR])
    async def test_issued_token_round_trips(self, unit_env, role):
        # Arrange
        identity_service = await unit_env.get(IdentityService)
        user_id = UserId(uuid4())
        token = identity_service.issue_token(user_id, role)

        # Act
        viewer = identity_service.resolve_viewer(token)

        # Assert
        assert viewer.id == user_id
        assert viewer.role is role

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", [None, "", "not-a-jwt"])
    async def test_missing_or_garbage_token_is_anonymous(self, unit_env, token):
        identity_service = await unit_env.get(IdentityService)

        viewer = identity_service.resolve_viewer(token)

        assert viewer.is_anonymous
        assert viewer.id is None

    @pytest.mark.asyncio
    async def test_token_signed_with_other_secret_is_anonymous(self, unit_env):
        # Arrange
        identity_service = await unit_env.get(IdentityService)
        foreign = AuthSettings(jwt_secret="someone-else")
        token = create_token(str(uuid4()), Role.MODERATOR.value, foreign)

        # Act
        viewer = identity_service.resolve_viewer(token)

        # Assert
        assert viewer.is_anonymous

    @pytest.mark.asyncio
    async def test_expired_token_is_anonymous(self, unit_env):
        # Arrange
        identity_service = await unit_env.get(IdentityService)
        settings = await unit_env.get(AuthSettings)
        expired = settings.model_copy(update={"jwt_expiry_days": -1})
        token = create_token(str(uuid4()), Role.USER.value, expired)

        # Act / Assert
        assert identity_service.resolve_viewer(token).is_anonymous

    @pytest.mark.asyncio
    async def test_unknown_role_is_anonymous(self, unit_env):
        identity_service = await unit_env.get(IdentityService)
        settings = await unit_env.get(AuthSettings)
        token = create_token(str(uuid4()), "superuser", settings)

        assert identity_service.resolve_viewer(token).is_anonymous

    @pytest.mark.asyncio
    async def test_malformed_user_id_is_anonymous(self, unit_env):
        identity_service = await unit_env.get(IdentityService)
        settings = await unit_env.get(AuthSettings)
        token = create_token("not-a-uuid", Role.USER.value, settings)

        assert identity_service.resolve_viewer(token).is_anonymous
