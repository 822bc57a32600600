"""
活动、品牌、行为日志模型测试
"""

import pytest
from datetime import datetime, timedelta, timezone
from pydantic import ValidationError

from promoradar.core.exceptions import QuotaExceededException
from promoradar.core.timezone import day_bounds, ensure_utc, local_date, trailing_window_start
from promoradar.models.behavior import TrackRequest
from promoradar.models.brand import BrandCreate, BrandSummary, DEFAULT_PRIMARY_COLOR, DEFAULT_TEXT_COLOR
from promoradar.models.promotion import (
    Promotion, PromotionCreate, PromotionFilter, PromotionUpdate, remaining_quota
)
from promoradar.models.store import StoreCreate, StoreUpdate


def make_promotion(**overrides) -> Promotion:
    values = dict(
        promo_id=1,
        brand_name="starbucks",
        title="第二杯半价",
        promo_type="Second_Cup",
        event_tag="Weekend_Deal",
        start_datetime=datetime(2025, 3, 1, tzinfo=timezone.utc),
        end_datetime=datetime(2025, 3, 31, tzinfo=timezone.utc),
        status="Published",
    )
    values.update(overrides)
    return Promotion(**values)


class TestPromotionModels:
    """活动模型测试类"""

    def test_create_normalizes_brand(self):
        """测试创建请求的品牌代号标准化"""
        payload = PromotionCreate(
            brand_name="  StarBucks ",
            title="买一送一",
            promo_type="Buy1Get1",
            event_tag="Christmas",
            start_datetime=datetime(2025, 12, 20, tzinfo=timezone.utc),
            end_datetime=datetime(2025, 12, 26, tzinfo=timezone.utc),
        )
        assert payload.brand_name == "starbucks"
        assert payload.per_user_limit == 0
        assert payload.global_quota is None

    def test_create_rejects_end_before_start(self):
        """测试结束时间早于开始时间"""
        with pytest.raises(ValidationError):
            PromotionCreate(
                brand_name="starbucks",
                title="买一送一",
                promo_type="Buy1Get1",
                event_tag="Christmas",
                start_datetime=datetime(2025, 12, 26, tzinfo=timezone.utc),
                end_datetime=datetime(2025, 12, 26, tzinfo=timezone.utc),
            )

    def test_create_rejects_non_positive_quota(self):
        """测试名额必须为正数"""
        with pytest.raises(ValidationError):
            PromotionCreate(
                brand_name="starbucks",
                title="买一送一",
                promo_type="Buy1Get1",
                event_tag="Christmas",
                start_datetime=datetime(2025, 12, 20, tzinfo=timezone.utc),
                end_datetime=datetime(2025, 12, 26, tzinfo=timezone.utc),
                global_quota=0,
            )

    def test_create_accepts_camel_case_and_unknown_type_rejected(self):
        """测试camelCase输入以及非法枚举值"""
        payload = PromotionCreate.model_validate({
            "brandName": "mcd",
            "title": "早餐优惠",
            "promoType": "Discount",
            "eventTag": "Breakfast",
            "startDatetime": "2025-03-01T00:00:00Z",
            "endDatetime": "2025-03-02T00:00:00+08:00",
            "dailyQuota": 5,
        })
        assert payload.daily_quota == 5
        assert payload.end_datetime == datetime(2025, 3, 1, 16, tzinfo=timezone.utc)

        with pytest.raises(ValidationError):
            PromotionCreate.model_validate({
                "brandName": "mcd",
                "title": "早餐优惠",
                "promoType": "Mystery",
                "eventTag": "Breakfast",
                "startDatetime": "2025-03-01T00:00:00Z",
                "endDatetime": "2025-03-02T00:00:00Z",
            })

    def test_update_checks_period_only_when_both_given(self):
        """测试部分更新时的时间校验"""
        update = PromotionUpdate(end_datetime=datetime(2025, 1, 1, tzinfo=timezone.utc))
        assert update.model_dump(exclude_unset=True) == {
            "end_datetime": datetime(2025, 1, 1, tzinfo=timezone.utc)
        }

        with pytest.raises(ValidationError):
            PromotionUpdate(
                start_datetime=datetime(2025, 2, 1, tzinfo=timezone.utc),
                end_datetime=datetime(2025, 1, 1, tzinfo=timezone.utc),
            )

    def test_is_active_window_is_half_open(self):
        """测试活动时间窗 [start, end)"""
        promo = make_promotion()
        assert promo.is_active_at(datetime(2025, 3, 1, tzinfo=timezone.utc))
        assert promo.is_active_at(datetime(2025, 3, 30, 23, 59, tzinfo=timezone.utc))
        assert not promo.is_active_at(datetime(2025, 3, 31, tzinfo=timezone.utc))
        assert not promo.is_active_at(datetime(2025, 2, 28, 23, 59, tzinfo=timezone.utc))

    def test_naive_datetimes_are_treated_as_utc(self):
        """测试无时区的时间按UTC处理"""
        promo = make_promotion(start_datetime=datetime(2025, 3, 1), end_datetime=datetime(2025, 3, 2))
        assert promo.start_datetime.tzinfo == timezone.utc
        assert promo.is_active_at(datetime(2025, 3, 1, 12, tzinfo=timezone.utc))

    def test_serializes_camel_case(self):
        """测试JSON输出为camelCase"""
        data = make_promotion(per_user_limit=1, daily_quota=5).model_dump(mode="json", by_alias=True)
        assert data["promoId"] == 1
        assert data["brandName"] == "starbucks"
        assert data["perUserLimit"] == 1
        assert data["dailyQuota"] == 5
        assert data["globalQuota"] is None
        assert data["status"] == "Published"
        assert "promo_id" not in data

    def test_filter_normalizes_brand_names(self):
        """测试查询条件中的品牌标准化并去掉空值"""
        promo_filter = PromotionFilter(brand_names=[" Starbucks", "", "  ", "MCD"])
        assert promo_filter.brand_names == ["starbucks", "mcd"]

    def test_remaining_quota(self):
        """测试剩余名额计算"""
        assert remaining_quota(None, 10) is None
        assert remaining_quota(10, 3) == 7
        assert remaining_quota(3, 5) == 0


class TestBrandAndStoreModels:
    """品牌与门市模型测试类"""

    def test_brand_key_normalized(self):
        brand = BrandCreate(key=" CAMA ", display_name="CAMA咖啡", category="Coffee")
        assert brand.key == "cama"

    def test_brand_key_blank_rejected(self):
        with pytest.raises(ValidationError):
            BrandCreate(key="   ", display_name="CAMA咖啡", category="Coffee")

    def test_summary_defaults_without_brand(self):
        """测试缺少品牌资料时使用默认展示信息"""
        summary = BrandSummary.from_brand("unknown", None, [])
        assert summary.display_name == "unknown"
        assert summary.primary_color == DEFAULT_PRIMARY_COLOR
        assert summary.text_color == DEFAULT_TEXT_COLOR

    def test_store_brand_normalized(self):
        assert StoreCreate(brand_name="MCD ", name="信义店").brand_name == "mcd"
        assert StoreUpdate(brand_name="  ").brand_name is None

    def test_store_coordinates_validated(self):
        with pytest.raises(ValidationError):
            StoreCreate(brand_name="mcd", name="信义店", lat=120.0)


class TestTrackRequest:
    """行为上报模型测试类"""

    def test_numeric_promo_id_coerced(self):
        request = TrackRequest.model_validate({"action": "click_promo", "promoId": 12})
        assert request.promo_id == "12"

    def test_unknown_action_rejected(self):
        with pytest.raises(ValidationError):
            TrackRequest.model_validate({"action": "purchase"})


class TestQuotaExceededException:

    @pytest.mark.parametrize("quota_type", [
        QuotaExceededException.PER_USER,
        QuotaExceededException.DAILY,
        QuotaExceededException.GLOBAL,
    ])
    def test_carries_quota_type(self, quota_type):
        exc = QuotaExceededException(quota_type)
        assert exc.quota_type == quota_type
        assert exc.status_code == 400
        assert exc.message


class TestTimezone:
    """自然日划分测试类（UTC+8）"""

    def test_day_bounds_in_report_timezone(self):
        start, end = day_bounds(datetime(2025, 3, 1, 15, 59, tzinfo=timezone.utc))
        assert start == datetime(2025, 2, 28, 16, tzinfo=timezone.utc)
        assert end == datetime(2025, 3, 1, 16, tzinfo=timezone.utc)

    def test_day_rolls_over_at_local_midnight(self):
        assert local_date(datetime(2025, 3, 1, 15, 59, tzinfo=timezone.utc)).isoformat() == "2025-03-01"
        assert local_date(datetime(2025, 3, 1, 16, 0, tzinfo=timezone.utc)).isoformat() == "2025-03-02"

    def test_trailing_window_start(self):
        """测试窗口含今天共days个自然日"""
        now = datetime(2025, 3, 10, 4, tzinfo=timezone.utc)
        assert trailing_window_start(now, 7) == datetime(2025, 3, 3, 16, tzinfo=timezone.utc)
        assert trailing_window_start(now, 1) == datetime(2025, 3, 9, 16, tzinfo=timezone.utc)
        assert local_date(trailing_window_start(now, 30)).isoformat() == "2025-02-09"

    def test_ensure_utc_converts_offsets(self):
        value = datetime(2025, 3, 1, 8, tzinfo=timezone(timedelta(hours=8)))
        assert ensure_utc(value) == datetime(2025, 3, 1, 0, tzinfo=timezone.utc)
        assert ensure_utc(None) is None
