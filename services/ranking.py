"""
services/ranking.py

- 한 과목/학기/학년도 범위의 성적을 학기 평균 내림차순으로 정렬해 석차 부여
- 동점자는 같은 석차, 다음 석차는 동점자 수만큼 건너뜀 (1, 1, 3)
- 석차 문자열 형식: "{석차}{서수 접미사} of {전체 인원}"
"""

from typing import List

from schemas.grades import GradeRecord


def ordinal_suffix(n: int) -> str:
    """1 → st, 2 → nd, 3 → rd, 나머지 th (단, 11/12/13으로 끝나면 th)"""
    last_digit, last_two = n % 10, n % 100
    if last_digit == 1 and last_two != 11:
        return "st"
    if last_digit == 2 and last_two != 12:
        return "nd"
    if last_digit == 3 and last_two != 13:
        return "rd"
    return "th"


def format_position(position: int, total: int) -> str:
    return f"{position}{ordinal_suffix(position)} of {total}"


def rank_records(records: List[GradeRecord]) -> List[GradeRecord]:
    """
    석차를 채운 새 레코드 목록을 정렬 순서대로 반환
    - 입력 레코드의 term_average는 미리 재계산되어 있어야 함
    - 동점은 입력 순서 유지 (sorted는 안정 정렬)
    """
    if not records:
        return []

    ordered = sorted(records, key=lambda r: r.term_average or 0, reverse=True)
    total = len(ordered)

    ranked = []
    current_position = 1
    tied_count = 0
    last_average = -1.0  # 평균은 0 이상이므로 실제 값과 겹치지 않음
    for record in ordered:
        average = record.term_average or 0
        if average != last_average:
            current_position += tied_count
            tied_count = 0
            last_average = average
        tied_count += 1
        ranked.append(record.model_copy(update={"term_position": format_position(current_position, total)}))

    return ranked
