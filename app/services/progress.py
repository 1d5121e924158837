"""
Подсчёт прогресса прохождения курса.

Чистые функции без обращений к базе: на вход число уроков курса и
множество пройденных уроков, прочитанное заново перед каждым решением.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable
from app.schemas.progress import CourseProgress, ProgressState

def compute_progress(total_lessons: int, completed_lesson_ids: Iterable[str]) -> CourseProgress:
    completed_count = len(set(completed_lesson_ids))
    
    if total_lessons == 0:
        percentage = 0
    else:
        ratio = Decimal(100 * completed_count) / Decimal(total_lessons)
        percentage = int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    
    # Курс без уроков никогда не считается пройденным
    is_complete = total_lessons > 0 and completed_count == total_lessons
    
    return CourseProgress(
        completed_count=completed_count,
        percentage=percentage,
        is_complete=is_complete
    )

def progress_state(progress: CourseProgress, has_certificate: bool) -> ProgressState:
    if has_certificate:
        return ProgressState.CERTIFIED
    if progress.is_complete:
        return ProgressState.COMPLETE_UNCERTIFIED
    if progress.completed_count > 0:
        return ProgressState.IN_PROGRESS
    return ProgressState.NOT_STARTED
