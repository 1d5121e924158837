"""
Сборка представлений из уже загруженных записей.

Здесь нет запросов к базе: сервисы и эндпоинты сначала читают строки,
затем передают их сюда. Так логику объединения легко проверять отдельно.
"""
from typing import Dict, Iterable, List, Optional, Set
from app.schemas.certificate import CertificateResponse, CertificateView
from app.schemas.course import (
    CourseCard,
    CourseDetail,
    CourseResponse,
    EnrollmentResponse,
    InstructorCourse,
    InstructorStats,
    StudentCourse
)
from app.schemas.lesson import LessonOutline
from app.schemas.progress import CourseViewer, ViewerLesson
from app.services.progress import compute_progress, progress_state

DEFAULT_STUDENT_NAME = "Student"

def build_course_viewer(course, lessons: Iterable, completed_ids: Set[str], certificate=None) -> CourseViewer:
    ordered = sorted(lessons, key=lambda lesson: lesson.order_index)
    viewer_lessons = [
        ViewerLesson.model_validate(lesson).model_copy(update={"is_completed": lesson.id in completed_ids})
        for lesson in ordered
    ]
    
    # Считаем только уроки этого курса
    lesson_ids = {lesson.id for lesson in ordered}
    progress = compute_progress(len(ordered), completed_ids & lesson_ids)
    
    current = next((lesson for lesson in viewer_lessons if not lesson.is_completed), None)
    if current is None and viewer_lessons:
        current = viewer_lessons[0]
    
    return CourseViewer(
        course=CourseResponse.model_validate(course),
        lessons=viewer_lessons,
        progress=progress,
        state=progress_state(progress, has_certificate=certificate is not None),
        current_lesson_id=current.id if current else None,
        certificate=CertificateResponse.model_validate(certificate) if certificate else None
    )

def build_certificate_view(certificate, course, student=None, instructor=None) -> CertificateView:
    return CertificateView(
        certificate_id=certificate.id,
        student_name=student.full_name if student and student.full_name else DEFAULT_STUDENT_NAME,
        course_title=course.title,
        instructor_name=instructor.full_name if instructor else "",
        issued_at=certificate.issued_at,
        certificate_url=certificate.certificate_url
    )

def build_course_cards(courses: Iterable, instructors: Dict, lesson_counts: Dict[str, int]) -> List[CourseCard]:
    cards = []
    for course in courses:
        instructor = instructors.get(course.instructor_id)
        card = CourseCard.model_validate(course).model_copy(update={
            "instructor_name": instructor.full_name if instructor else None,
            "lesson_count": lesson_counts.get(course.id, 0)
        })
        cards.append(card)
    return cards

def build_course_detail(course, instructor, lessons: Iterable, is_enrolled: bool) -> CourseDetail:
    ordered = sorted(lessons, key=lambda lesson: lesson.order_index)
    return CourseDetail.model_validate(course).model_copy(update={
        "instructor_name": instructor.full_name if instructor else None,
        "lesson_count": len(ordered),
        "lessons": [LessonOutline.model_validate(lesson) for lesson in ordered],
        "total_duration": sum(lesson.duration or 0 for lesson in ordered),
        "is_enrolled": is_enrolled
    })

def build_instructor_courses(
    courses: Iterable,
    enrollment_counts: Dict[str, int],
    lesson_counts: Dict[str, int]
) -> List[InstructorCourse]:
    return [
        InstructorCourse.model_validate(course).model_copy(update={
            "enrollment_count": enrollment_counts.get(course.id, 0),
            "lesson_count": lesson_counts.get(course.id, 0)
        })
        for course in courses
    ]

def build_instructor_stats(courses: Iterable, enrollment_counts: Dict[str, int]) -> InstructorStats:
    courses = list(courses)
    return InstructorStats(
        total_courses=len(courses),
        published_courses=sum(1 for course in courses if course.is_published),
        total_enrollments=sum(enrollment_counts.get(course.id, 0) for course in courses)
    )

def build_student_courses(enrollments: Iterable, courses: Optional[Dict] = None) -> List[StudentCourse]:
    """courses - словарь id -> курс; по умолчанию берётся enrollment.course"""
    result = []
    for enrollment in enrollments:
        course = courses.get(enrollment.course_id) if courses is not None else enrollment.course
        if course is None:
            continue
        result.append(StudentCourse(
            course=CourseResponse.model_validate(course),
            enrollment=EnrollmentResponse.model_validate(enrollment),
            status="Completed" if enrollment.completed_at else "In Progress"
        ))
    return result
