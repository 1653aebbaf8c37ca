import pytest

from pocketpacks.models.points import InsufficientPointsError, PointsAccount

HOUR_MS = 3_600_000


class TestSpend:
    def test_spend_deducts(self) -> None:
        account = PointsAccount(points=10)
        account.spend(6)
        assert account.points == 4

    def test_spend_exact_balance(self) -> None:
        account = PointsAccount(points=6)
        account.spend(6)
        assert account.points == 0

    def test_spend_more_than_balance_raises(self) -> None:
        account = PointsAccount(points=5)
        with pytest.raises(InsufficientPointsError) as exc_info:
            account.spend(6)
        assert exc_info.value.available == 5
        assert exc_info.value.required == 6
        assert account.points == 5


class TestRegenerate:
    def test_nothing_before_interval(self) -> None:
        account = PointsAccount(points=0, last_regen_ms=1_000)
        assert account.regenerate(1_000 + HOUR_MS - 1, HOUR_MS) == 0
        assert account.last_regen_ms == 1_000

    def test_one_point_per_interval(self) -> None:
        account = PointsAccount(points=2, last_regen_ms=0)
        assert account.regenerate(3 * HOUR_MS, HOUR_MS) == 3
        assert account.points == 5
        assert account.last_regen_ms == 3 * HOUR_MS

    def test_partial_progress_is_kept(self) -> None:
        account = PointsAccount(points=0, last_regen_ms=0)
        account.regenerate(HOUR_MS + 500, HOUR_MS)
        assert account.last_regen_ms == HOUR_MS
        assert account.ms_until_next(HOUR_MS + 500, HOUR_MS) == HOUR_MS - 500

    def test_ms_until_next_never_negative(self) -> None:
        account = PointsAccount(points=0, last_regen_ms=0)
        assert account.ms_until_next(5 * HOUR_MS, HOUR_MS) == 0
