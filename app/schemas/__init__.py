from .profile import (
    ProfileBase,
    ProfileCreate,
    ProfileUpdate,
    ProfileResponse,
    PublicProfile,
    Token
)

from .lesson import (
    LessonDraft,
    LessonResponse,
    LessonOutline,
    LessonProgressResponse,
    LessonCompleteRequest
)

from .course import (
    CourseBase,
    CourseCreate,
    CourseUpdate,
    CourseResponse,
    CourseCard,
    CourseDetail,
    InstructorCourse,
    InstructorStats,
    EnrollmentResponse,
    StudentCourse
)

from .certificate import (
    CertificateResponse,
    CertificateView
)

from .progress import (
    ProgressState,
    CourseProgress,
    ViewerLesson,
    CourseViewer,
    LessonCompletionResult
)
