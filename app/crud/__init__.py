from .profile import (
    get_profile,
    get_profile_by_email,
    get_profiles_by_ids,
    authenticate_profile,
    create_profile,
    update_profile
)

from .course import (
    get_course,
    get_courses,
    get_categories,
    get_courses_by_instructor,
    count_lessons_by_course,
    create_course,
    update_course,
    set_published,
    set_thumbnail,
    delete_course
)

from .lesson import (
    get_lesson,
    get_lessons_by_course,
    replace_course_lessons
)

from .enrollment import (
    get_enrollment,
    get_user_enrollments,
    count_enrollments_by_course,
    create_enrollment,
    update_enrollment_progress
)

from .progress import (
    upsert_lesson_progress,
    get_completed_lesson_ids
)

from .certificate import (
    get_certificate,
    create_certificate
)
