"""Courses, enrollment, recommendations and concept maps."""

from __future__ import annotations

from flask import Blueprint

from db_stores import ConceptMapStore, CourseStore, EnrollmentStore, UserStore
from helpers import dicts, request_data, require_fields, success
from notifier import NotificationDispatcher
from recommendations import generate_course_recommendations
from uploads import save_many

bp = Blueprint("courses", __name__)


@bp.route("/api/courses", methods=["POST"])
def api_create_course():
    data = request_data()
    require_fields(data, "teacher_email", "course_name", "department")
    course = CourseStore.create(
        teacher_email=data["teacher_email"],
        course_name=data["course_name"],
        description=data.get("description", ""),
        department=data["department"],
        duration=data.get("duration", ""),
        files=save_many("files"),
    )

    NotificationDispatcher().notify_many(
        [s.email for s in UserStore.students(course.department)],
        "New Course Available",
        f'A new course "{course.course_name}" has been added to your department.',
    )
    return success("Course created successfully", course=course.to_dict())


@bp.route("/api/courses/<department>")
def api_department_courses(department):
    return success(courses=dicts(CourseStore.by_department(department)))


@bp.route("/api/all-courses")
def api_all_courses():
    return success(courses=dicts(CourseStore.all()))


@bp.route("/api/enroll", methods=["POST"])
def api_enroll():
    data = request_data()
    require_fields(data, "student_email", "course_id")
    enrollment = EnrollmentStore.enroll(data["student_email"], data["course_id"])

    course = CourseStore.get(enrollment.course_id)
    if course:
        NotificationDispatcher().notify(
            course.teacher_email,
            "New Student Enrollment",
            f'A student has enrolled in your course "{course.course_name}".',
        )
    return success("Enrolled successfully", enrollment=enrollment.to_dict())


@bp.route("/api/enrolled-courses/<student_email>")
def api_enrolled_courses(student_email):
    courses = []
    for enrollment in EnrollmentStore.for_student(student_email):
        course = CourseStore.get(enrollment.course_id)
        if course:
            courses.append({**course.to_dict(), "enrolled_date": enrollment.enrolled_date})
    return success(courses=courses)


@bp.route("/api/course-students/<course_id>")
def api_course_students(course_id):
    students = []
    for enrollment in EnrollmentStore.for_course(course_id):
        user = UserStore.get_by_email(enrollment.student_email)
        if user:
            students.append({
                "name": user.name,
                "email": user.email,
                "roll_number": user.roll_number,
                "photo": user.photo,
                "enrolled_date": enrollment.enrolled_date,
            })
    return success(students=students)


@bp.route("/api/course-recommendations/<student_email>")
def api_course_recommendations(student_email):
    return success(recommendations=dicts(generate_course_recommendations(student_email)))


@bp.route("/api/concept-map/<course_id>")
def api_concept_map(course_id):
    return success(concept_map=ConceptMapStore.get_or_generate(course_id).to_dict())
