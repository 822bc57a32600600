"""
UserService / AuthService / TrackingService 业务逻辑测试
"""

import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import jwt

from promoradar.core.config import settings
from promoradar.core.exceptions import (
    AuthenticationException, ConflictException, NotFoundException, ValidationException
)
from promoradar.core.security import create_access_token, decode_access_token, hash_password, verify_password
from promoradar.models.behavior import TrackRequest
from promoradar.models.user import LoginRequest, SignupRequest
from promoradar.repositories.behavior_repository import BehaviorRepository
from promoradar.repositories.brand_repository import AdminBrandRepository
from promoradar.repositories.favorite_repository import FavoriteBrandRepository, FavoritePromotionRepository
from promoradar.repositories.usage_repository import UsageRepository
from promoradar.repositories.user_repository import UserRepository
from promoradar.services.auth_service import AuthService
from promoradar.services.tracking_service import TrackingService, guest_id
from promoradar.services.user_service import UserService


@pytest.mark.asyncio
class TestUserService:
    """UserService测试类"""

    @pytest.fixture
    def user_service(self, db_session):
        return UserService(
            user_repo=UserRepository(db_session),
            favorite_brand_repo=FavoriteBrandRepository(db_session),
            favorite_promotion_repo=FavoritePromotionRepository(db_session),
            admin_brand_repo=AdminBrandRepository(db_session),
            usage_repo=UsageRepository(db_session)
        )

    async def test_brand_favorites(self, user_service, factory):
        """测试关注品牌增删"""
        user = await factory.user()

        assert await user_service.add_brand_favorite(user.user_id, "  starbucks ") == ["starbucks"]
        await user_service.add_brand_favorite(user.user_id, "starbucks")
        assert await user_service.list_brand_favorites(user.user_id) == ["starbucks"]

        with pytest.raises(ValidationException):
            await user_service.add_brand_favorite(user.user_id, "   ")
        with pytest.raises(ValidationException):
            await user_service.add_brand_favorite(user.user_id, None)

        assert await user_service.remove_brand_favorite(user.user_id, "") == ["starbucks"]
        assert await user_service.remove_brand_favorite(user.user_id, "starbucks") == []

        await user_service.add_brand_favorite(user.user_id, "mcd")
        assert await user_service.clear_brand_favorites(user.user_id) == []

    async def test_promotion_favorites(self, user_service, factory):
        """测试收藏活动增删，无效ID移除时直接忽略"""
        await factory.brand()
        user = await factory.user()
        promo = await factory.promotion()

        assert await user_service.add_promotion_favorite(user.user_id, promo.promo_id) == [promo.promo_id]

        with pytest.raises(ValidationException):
            await user_service.add_promotion_favorite(user.user_id, 0)
        with pytest.raises(ValidationException):
            await user_service.add_promotion_favorite(user.user_id, None)

        assert await user_service.remove_promotion_favorite(user.user_id, -1) == [promo.promo_id]
        assert await user_service.remove_promotion_favorite(user.user_id, promo.promo_id) == []

        await user_service.add_promotion_favorite(user.user_id, promo.promo_id)
        assert await user_service.clear_promotion_favorites(user.user_id) == []

    async def test_profile(self, user_service, factory, db_session):
        """测试个人主页汇总"""
        await factory.brand()
        user = await factory.user("alice")
        await factory.admin(user, "starbucks")
        promo = await factory.promotion()
        await user_service.add_brand_favorite(user.user_id, "starbucks")
        await user_service.add_promotion_favorite(user.user_id, promo.promo_id)
        await UsageRepository(db_session).add_usage(user.user_id, promo.promo_id)

        profile = await user_service.get_profile(user.user_id)

        assert profile.user.username == "alice"
        assert profile.brand_favorites == ["starbucks"]
        assert profile.promotion_favorites == [promo.promo_id]
        assert profile.admin_brands == ["starbucks"]
        assert [item.promo_id for item in profile.usage] == [promo.promo_id]
        assert await user_service.admin_brands(user.user_id) == ["starbucks"]
        assert len(await user_service.promotion_usage(user.user_id)) == 1

        with pytest.raises(NotFoundException):
            await user_service.get_profile(9999)

    async def test_rankings_limit_clamped(self):
        usage_repo = AsyncMock(spec=UsageRepository)
        usage_repo.user_rankings.return_value = []
        service = UserService(
            user_repo=AsyncMock(spec=UserRepository),
            favorite_brand_repo=AsyncMock(spec=FavoriteBrandRepository),
            favorite_promotion_repo=AsyncMock(spec=FavoritePromotionRepository),
            admin_brand_repo=AsyncMock(spec=AdminBrandRepository),
            usage_repo=usage_repo
        )

        await service.user_rankings(limit=10000)
        usage_repo.user_rankings.assert_awaited_with(limit=500)
        await service.user_rankings(limit=0)
        usage_repo.user_rankings.assert_awaited_with(limit=1)


@pytest.mark.asyncio
class TestAuthService:
    """AuthService测试类"""

    async def test_signup_and_login(self, db_session):
        """测试注册后登录，令牌中带有用户信息"""
        service = AuthService(UserRepository(db_session))

        signup = await service.signup(SignupRequest(username=" alice ", email="Alice@Example.com", password="secret123"))
        await db_session.commit()

        assert signup.user.username == "alice"
        assert signup.user.email == "alice@example.com"
        assert not signup.user.is_admin
        payload = decode_access_token(signup.token)
        assert payload["userId"] == signup.user.user_id
        assert payload["isAdmin"] is False

        login = await service.login(LoginRequest(email="ALICE@example.com", password="secret123"))
        assert login.user.user_id == signup.user.user_id

    async def test_duplicate_email(self, db_session, factory):
        await factory.user("alice", email="alice@example.com")
        service = AuthService(UserRepository(db_session))

        with pytest.raises(ConflictException):
            await service.signup(SignupRequest(username="alice2", email="ALICE@example.com", password="secret123"))

    async def test_login_failures_share_message(self, db_session, factory):
        """测试邮箱不存在与密码错误返回相同提示"""
        await factory.user("alice", email="alice@example.com", password="secret123")
        service = AuthService(UserRepository(db_session))

        with pytest.raises(AuthenticationException) as wrong_password:
            await service.login(LoginRequest(email="alice@example.com", password="wrong-password"))
        with pytest.raises(AuthenticationException) as unknown_email:
            await service.login(LoginRequest(email="nobody@example.com", password="secret123"))
        assert wrong_password.value.message == unknown_email.value.message


class TestSecurity:
    """密码与令牌测试类"""

    def test_password_hash(self):
        hashed = hash_password("secret123")
        assert hashed != "secret123"
        assert verify_password("secret123", hashed)
        assert not verify_password("secret124", hashed)
        assert not verify_password("secret123", "not-a-bcrypt-hash")
        assert not verify_password("secret123", "")

    def test_expired_token(self):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"userId": 1, "iat": now - timedelta(hours=3), "exp": now - timedelta(hours=1)},
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm
        )
        with pytest.raises(AuthenticationException):
            decode_access_token(token)

    def test_tampered_token(self):
        token = create_access_token(1, "alice@example.com", False)
        with pytest.raises(AuthenticationException):
            decode_access_token(token + "x")

    def test_token_without_user_id(self):
        token = jwt.encode({"email": "alice@example.com"}, settings.jwt_secret, algorithm=settings.jwt_algorithm)
        with pytest.raises(AuthenticationException):
            decode_access_token(token)


@pytest.mark.asyncio
class TestTrackingService:
    """TrackingService测试类"""

    @pytest.fixture
    def mock_behavior_repo(self):
        repo = AsyncMock(spec=BehaviorRepository)
        repo.log_user_behavior.return_value = True
        return repo

    async def test_track_logged_in_user(self, mock_behavior_repo):
        service = TrackingService(mock_behavior_repo)

        logged = await service.track(
            TrackRequest(action="click_promo", promo_id="12", brand_name="starbucks"), user_id=7
        )

        assert logged
        kwargs = mock_behavior_repo.log_user_behavior.await_args.kwargs
        assert kwargs["user_id"] == "7"
        assert kwargs["action"] == "click_promo"
        assert kwargs["promo_id"] == "12"

    async def test_track_guest(self, mock_behavior_repo):
        service = TrackingService(mock_behavior_repo)

        await service.track(TrackRequest(action="search", search_keyword="咖啡"), client_ip="10.0.0.1")

        kwargs = mock_behavior_repo.log_user_behavior.await_args.kwargs
        assert kwargs["user_id"].startswith("guest_10.0.0.1_")
        assert guest_id(None).startswith("guest_unknown_")

    async def test_behavior_log_failure_is_swallowed(self):
        """测试日志库写入异常时返回False而不抛出"""
        manager = AsyncMock()
        manager.insert_document.side_effect = RuntimeError("connection lost")
        service = TrackingService(BehaviorRepository(manager))

        assert await service.track(TrackRequest(action="open_map"), user_id=1) is False

    async def test_behavior_document_is_compacted(self):
        """测试空字段不写入日志文档"""
        manager = AsyncMock()
        manager.insert_document.return_value = "abc"
        repo = BehaviorRepository(manager)

        assert await repo.log_admin_action(admin_id=3, action="create_promo", brand_name="starbucks", promo_id=9)

        collection, document = manager.insert_document.await_args.args
        assert collection == "admin_actions"
        assert document["admin_id"] == "3"
        assert document["promo_id"] == "9"
        assert "store_id" not in document
        assert "timestamp" in document
