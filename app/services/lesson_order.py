"""Порядок уроков внутри курса: order_index всегда 1..N без пропусков"""
from typing import List
from app.schemas.lesson import LessonDraft

def normalize_order(lessons: List[LessonDraft]) -> List[LessonDraft]:
    """Перенумеровывает уроки по их текущему положению в списке"""
    return [
        lesson.model_copy(update={"order_index": position})
        for position, lesson in enumerate(lessons, start=1)
    ]

def sort_by_order(lessons: List[LessonDraft]) -> List[LessonDraft]:
    """Упорядочивает по присланному order_index (стабильно) и нормализует"""
    return normalize_order(sorted(lessons, key=lambda lesson: lesson.order_index))

def add_lesson(lessons: List[LessonDraft], lesson: LessonDraft) -> List[LessonDraft]:
    return normalize_order(list(lessons) + [lesson])

def remove_lesson(lessons: List[LessonDraft], index: int) -> List[LessonDraft]:
    if not 0 <= index < len(lessons):
        raise IndexError(f"Lesson index {index} out of range")
    remaining = list(lessons)
    del remaining[index]
    return normalize_order(remaining)

def move_lesson(lessons: List[LessonDraft], from_index: int, to_index: int) -> List[LessonDraft]:
    if not 0 <= from_index < len(lessons):
        raise IndexError(f"Lesson index {from_index} out of range")
    if not 0 <= to_index < len(lessons):
        raise IndexError(f"Lesson index {to_index} out of range")
    reordered = list(lessons)
    moved = reordered.pop(from_index)
    reordered.insert(to_index, moved)
    return normalize_order(reordered)

def is_contiguous(order_indexes: List[int]) -> bool:
    return sorted(order_indexes) == list(range(1, len(order_indexes) + 1))
