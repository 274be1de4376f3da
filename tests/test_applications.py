"""Tests for applying, status updates and the applicant/employer views."""

import uuid

import pytest

from job_board.errors import (
    DuplicateApplication,
    Forbidden,
    NotFound,
    NotFoundOrForbidden,
    Unauthorized,
    ValidationError,
)
from job_board.models import Application, ApplicationStatus, Job, Notification
from job_board.services.applications import (
    apply_for_job,
    get_application,
    list_employer_applications,
    list_my_applications,
    parse_status,
    update_application_status,
)
from job_board.services.jobs import list_jobs
from job_board.services.notifications import list_notifications, mark_notification_read


class TestApplyForJob:
    def test_starts_pending_with_default_resume(self, db, make_employer, make_jobseeker, make_job):
        job_id = make_job(make_employer())
        application = apply_for_job(db, job_id, make_jobseeker(), "Hire me")
        assert application.status == "pending"
        assert application.resume_url == "sample-resume.pdf"
        assert application.cover_letter == "Hire me"

    def test_second_application_rejected(self, db, make_employer, make_jobseeker, make_job):
        job_id = make_job(make_employer())
        seeker = make_jobseeker()
        apply_for_job(db, job_id, seeker)
        with pytest.raises(DuplicateApplication):
            apply_for_job(db, job_id, seeker, "Again")
        assert db.query(Application).filter(Application.job_id == job_id).count() == 1

    def test_employer_cannot_apply(self, db, make_employer, make_job):
        employer = make_employer()
        job_id = make_job(employer)
        with pytest.raises(Unauthorized):
            apply_for_job(db, job_id, employer)

    def test_unknown_or_inactive_job(self, db, make_employer, make_jobseeker, make_job):
        seeker = make_jobseeker()
        with pytest.raises(NotFound):
            apply_for_job(db, uuid.uuid4(), seeker)

        job_id = make_job(make_employer())
        db.query(Job).update({Job.is_active: False})
        db.commit()
        with pytest.raises(NotFound):
            apply_for_job(db, job_id, seeker)

    def test_employer_notified(self, db, make_employer, make_jobseeker, make_job):
        employer = make_employer()
        job_id = make_job(employer)
        apply_for_job(db, job_id, make_jobseeker())
        notices = list_notifications(db, employer)
        assert len(notices) == 1
        assert "Jane Doe applied for Backend Engineer" == notices[0].message


class TestUpdateApplicationStatus:
    @pytest.fixture
    def applied(self, db, make_employer, make_jobseeker, make_job):
        employer = make_employer()
        seeker = make_jobseeker()
        application = apply_for_job(db, make_job(employer), seeker)
        return employer, seeker, application.id

    def test_any_transition_allowed(self, db, applied):
        employer, _, application_id = applied
        for status in ["accepted", "pending", "rejected", "interview", "reviewing", "pending"]:
            assert update_application_status(db, application_id, status, employer).status == status

    def test_unknown_status(self, db, applied):
        employer, _, application_id = applied
        with pytest.raises(ValidationError):
            update_application_status(db, application_id, "hired", employer)

    def test_other_employer_rejected(self, db, applied, make_employer):
        _, _, application_id = applied
        other = make_employer(email="b@other.test", company="Other")
        with pytest.raises(NotFoundOrForbidden):
            update_application_status(db, application_id, "accepted", other)
        db.expire_all()
        assert db.get(Application, application_id).status == "pending"

    def test_applicant_cannot_change_status(self, db, applied):
        _, seeker, application_id = applied
        with pytest.raises(Unauthorized):
            update_application_status(db, application_id, "accepted", seeker)

    def test_applicant_notified(self, db, applied):
        employer, seeker, application_id = applied
        update_application_status(db, application_id, "interview", employer)
        notices = list_notifications(db, seeker, unread_only=True)
        assert [n.message for n in notices] == ["Your application for Backend Engineer is now interview"]

        mark_notification_read(db, notices[0].id, seeker)
        assert list_notifications(db, seeker, unread_only=True) == []

    def test_notification_read_by_someone_else(self, db, applied):
        employer, seeker, application_id = applied
        update_application_status(db, application_id, "interview", employer)
        notice = db.query(Notification).filter(Notification.user_id == seeker.user_id).one()
        with pytest.raises(Forbidden):
            mark_notification_read(db, notice.id, employer)


class TestViews:
    def test_applicant_sees_own_application(self, db, make_employer, make_jobseeker, make_job):
        job_id = make_job(make_employer())
        seeker = make_jobseeker()
        application = apply_for_job(db, job_id, seeker)
        view = get_application(db, application.id, seeker)
        assert view["jobTitle"] == "Backend Engineer"
        assert view["company"] == "Acme"

    def test_other_user_forbidden(self, db, make_employer, make_jobseeker, make_job):
        job_id = make_job(make_employer())
        application = apply_for_job(db, job_id, make_jobseeker())
        stranger = make_jobseeker(email="other@example.com")
        with pytest.raises(Forbidden):
            get_application(db, application.id, stranger)

    def test_employer_view_includes_applicant(self, db, make_employer, make_jobseeker, make_job):
        employer = make_employer()
        job_id = make_job(employer)
        apply_for_job(db, job_id, make_jobseeker())
        rows = list_employer_applications(db, employer)
        assert len(rows) == 1
        assert rows[0]["applicantName"] == "Jane Doe"
        assert rows[0]["applicantEmail"] == "seeker@example.com"


class TestParseStatus:
    def test_case_and_whitespace(self):
        assert parse_status(" Interview ") is ApplicationStatus.INTERVIEW

    def test_none(self):
        with pytest.raises(ValidationError):
            parse_status(None)


class TestHiringScenario:
    def test_register_post_apply_interview(self, db, make_employer, make_jobseeker, make_job):
        employer = make_employer(email="employer123@example.com", company="Acme")
        job_id = make_job(employer, "Backend Engineer")

        listed = {job.id: job for job in list_jobs(db)}
        assert listed[job_id].is_active is True
        assert listed[job_id].is_approved is True

        seeker = make_jobseeker()
        application = apply_for_job(db, job_id, seeker, "I'd love to join")
        assert application.status == ApplicationStatus.PENDING.value

        update_application_status(db, application.id, "interview", employer)

        mine = list_my_applications(db, seeker)
        assert [(a["jobTitle"], a["status"]) for a in mine] == [("Backend Engineer", "interview")]
