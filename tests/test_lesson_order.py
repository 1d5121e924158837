import pytest

from app.schemas.lesson import LessonDraft
from app.services.lesson_order import (
    add_lesson,
    is_contiguous,
    move_lesson,
    normalize_order,
    remove_lesson,
    sort_by_order
)

def drafts(*titles):
    return normalize_order([LessonDraft(title=title) for title in titles])

def titles(lessons):
    return [lesson.title for lesson in lessons]

def indexes(lessons):
    return [lesson.order_index for lesson in lessons]

def test_normalize_numbers_from_one():
    lessons = drafts("Intro", "Setup", "Basics")
    assert indexes(lessons) == [1, 2, 3]

def test_add_appends_with_next_index():
    lessons = add_lesson(drafts("Intro", "Setup"), LessonDraft(title="Basics", order_index=99))
    assert titles(lessons) == ["Intro", "Setup", "Basics"]
    assert indexes(lessons) == [1, 2, 3]

def test_remove_closes_the_gap():
    lessons = remove_lesson(drafts("Intro", "Setup", "Basics", "Wrap-up"), 1)
    assert titles(lessons) == ["Intro", "Basics", "Wrap-up"]
    assert indexes(lessons) == [1, 2, 3]

def test_move_renumbers_everything():
    lessons = move_lesson(drafts("Intro", "Setup", "Basics"), 2, 0)
    assert titles(lessons) == ["Basics", "Intro", "Setup"]
    assert indexes(lessons) == [1, 2, 3]

def test_out_of_range_indexes_raise():
    lessons = drafts("Intro")
    with pytest.raises(IndexError):
        remove_lesson(lessons, 1)
    with pytest.raises(IndexError):
        move_lesson(lessons, 0, 3)

def test_sort_by_order_fixes_gaps_and_duplicates():
    lessons = sort_by_order([
        LessonDraft(title="C", order_index=7),
        LessonDraft(title="A", order_index=2),
        LessonDraft(title="B", order_index=2),
    ])
    assert titles(lessons) == ["A", "B", "C"]
    assert is_contiguous(indexes(lessons))

def test_input_list_is_not_mutated():
    lessons = drafts("Intro", "Setup")
    remove_lesson(lessons, 0)
    assert titles(lessons) == ["Intro", "Setup"]

def test_is_contiguous():
    assert is_contiguous([])
    assert is_contiguous([2, 1, 3])
    assert not is_contiguous([1, 3])
    assert not is_contiguous([1, 1, 2])
