from src.hrms_attendance.hrms_attendance.attendance.factory import WindowStrategyFactory
from src.hrms_attendance.hrms_attendance.attendance.strategies.early_strategy import EarlyStrategy
from src.hrms_attendance.hrms_attendance.attendance.strategies.late_strategy import LateStrategy
from src.hrms_attendance.hrms_attendance.attendance.strategies.normal_strategy import NormalStrategy
from src.hrms_attendance.hrms_attendance.core.enums import CheckInStatus, CheckOutStatus

START, END = 8 * 60, 10 * 60


def test_factory_before_window_is_early():
    strategy = WindowStrategyFactory().for_minutes(7 * 60 + 59, START, END)

    assert isinstance(strategy, EarlyStrategy)


def test_factory_inside_window_is_normal():
    factory = WindowStrategyFactory()

    assert isinstance(factory.for_minutes(START, START, END), NormalStrategy)
    assert isinstance(factory.for_minutes(END, START, END), NormalStrategy)


def test_factory_after_window_is_late():
    strategy = WindowStrategyFactory().for_minutes(END + 1, START, END)

    assert isinstance(strategy, LateStrategy)


def test_late_strategy_reports_overtime_on_checkout():
    decision = LateStrategy().decide_checkout(actual=19 * 60 + 30, start=17 * 60, end=19 * 60)

    assert decision.status == CheckOutStatus.OVER_TIME
    assert decision.duration == 30


def test_early_strategy_duration_is_negative():
    decision = EarlyStrategy().decide_checkin(actual=7 * 60 + 45, start=START, end=END)

    assert decision.status == CheckInStatus.EARLY
    assert decision.duration == -15
