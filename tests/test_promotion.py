import logging

import pytest

from schemas.grades import GradeRecord, PromotionStatus
from services.promotion import arm_letter, cumulative_average, evaluate_promotion, resolve_placement


def _history(student_id, averages, course_id="MTH101", year=2025):
    return [
        GradeRecord(id=f"{student_id}-t{term}", student_id=student_id, course_id=course_id, term=term, year=year,
                    total_score=avg, term_average=avg)
        for term, avg in enumerate(averages, start=1)
    ]


@pytest.mark.parametrize("name, arm", [("JSS1A", "A"), ("SSS2C", "C"), ("JSS1", ""), ("jss1a", ""), ("", "")])
def test_arm_letter(name, arm):
    assert arm_letter(name) == arm


def test_cumulative_average_excludes_missing_terms():
    assert cumulative_average([60, None, 40]) == 50
    assert cumulative_average([]) == 0


def test_cumulative_average_rounds_exact_half_up():
    assert cumulative_average([0.25, 0]) == 0.13


def test_three_term_scenario_is_promoted(fake_directory):
    result = evaluate_promotion("S1", "MTH101", 2025, _history("S1", [60, 55, 45]), fake_directory)
    assert result.cumulative_average == 53.33
    assert result.promotion_status == PromotionStatus.PROMOTED
    assert result.promoted_to_class == "JSS2A"


def test_exactly_pass_mark_is_not_promoted(fake_directory):
    result = evaluate_promotion("S1", "MTH101", 2025, _history("S1", [50, 50, 50]), fake_directory)
    assert result.cumulative_average == 50
    assert result.promotion_status == PromotionStatus.NOT_PROMOTED
    assert result.promoted_to_class == "JSS1A"


def test_just_above_pass_mark_is_promoted(fake_directory):
    result = evaluate_promotion("S1", "MTH101", 2025, _history("S1", [50.01]), fake_directory)
    assert result.cumulative_average == 50.01
    assert result.promotion_status == PromotionStatus.PROMOTED


def test_no_terms_gives_zero_and_not_promoted(fake_directory):
    result = evaluate_promotion("S1", "MTH101", 2025, [], fake_directory)
    assert result.cumulative_average == 0
    assert result.promotion_status == PromotionStatus.NOT_PROMOTED


def test_ignores_records_of_other_courses_and_years(fake_directory):
    records = (
        _history("S1", [80])
        + _history("S1", [10, 10, 10], course_id="ENG101")
        + _history("S1", [10], year=2024)
        + _history("S9", [0, 0])
    )
    result = evaluate_promotion("S1", "MTH101", 2025, records, fake_directory)
    assert result.cumulative_average == 80


def test_custom_pass_mark(fake_directory):
    result = evaluate_promotion("S1", "MTH101", 2025, _history("S1", [55]), fake_directory, pass_mark=60)
    assert result.promotion_status == PromotionStatus.NOT_PROMOTED


def test_missing_class_degrades_to_na_with_warning(fake_directory, caplog):
    with caplog.at_level(logging.WARNING, logger="services.promotion"):
        result = evaluate_promotion("S2", "MTH101", 2025, _history("S2", [90, 90, 90]), fake_directory)
    assert result.promotion_status == PromotionStatus.PROMOTED
    assert result.promoted_to_class == "N/A"
    assert "C_MISSING" in caplog.text


def test_unknown_student_or_no_class_is_na(fake_directory):
    assert resolve_placement("NOPE", True, fake_directory) == "N/A"
    assert resolve_placement("S4", False, fake_directory) == "N/A"


def test_final_class_level_has_no_promotion_target(fake_directory):
    assert resolve_placement("S3", True, fake_directory) == "N/A"
    assert resolve_placement("S3", False, fake_directory) == "JSS3C"


def test_missing_successor_level_is_na(fake_directory):
    fake_directory.levels["L1"].promoted_to_class_level_id = "L_GONE"
    assert resolve_placement("S1", True, fake_directory) == "N/A"
