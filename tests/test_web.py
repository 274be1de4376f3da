"""HTTP tests: sessions, the route guard and JSON error mapping."""

import uuid

import pytest
from fastapi.testclient import TestClient

from job_board.models import Application, Job, User
from job_board.web.app import create_app
from job_board.web.dependencies import get_db


@pytest.fixture
def app(db):
    app = create_app()

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


def register_employer(client, email="employer123@example.com", company="Acme"):
    response = client.post("/auth/register", data={
        "userType": "employer",
        "companyName": company,
        "email": email,
        "password": "employer123",
        "confirmPassword": "employer123",
    })
    assert response.status_code == 201, response.text


def register_jobseeker(client, email="seeker@example.com"):
    response = client.post("/auth/register", data={
        "userType": "jobseeker",
        "firstName": "Jane",
        "lastName": "Doe",
        "email": email,
        "password": "jobseeker123",
    })
    assert response.status_code == 201, response.text


def login(client, email, password, role, **extra):
    return client.post(
        "/auth/login",
        data={"email": email, "password": password, "userType": role, **extra},
        follow_redirects=False,
    )


def post_job(client, title="Backend Engineer", **fields):
    payload = {"title": title, "location": "Remote", "type": "Full-time", "tags": "Python, API", **fields}
    response = client.post("/api/jobs/create", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["jobId"]


@pytest.fixture
def employer(app):
    client = TestClient(app)
    register_employer(client)
    login(client, "employer123@example.com", "employer123", "employer")
    return client


@pytest.fixture
def seeker(app):
    client = TestClient(app)
    register_jobseeker(client)
    login(client, "seeker@example.com", "jobseeker123", "jobseeker")
    return client


class TestAuthRoutes:
    def test_register_duplicate_email(self, client):
        register_employer(client)
        response = client.post("/auth/register", data={
            "userType": "employer",
            "companyName": "Acme Again",
            "email": "employer123@example.com",
            "password": "employer123",
        })
        assert response.status_code == 409
        assert response.json() == {"error": "Email already in use"}

    def test_register_validation_error(self, client):
        response = client.post("/auth/register", data={"userType": "jobseeker", "email": "x@example.com"})
        assert response.status_code == 422
        assert "error" in response.json()

    def test_login_redirects_to_role_dashboard(self, client):
        register_employer(client)
        response = login(client, "employer123@example.com", "employer123", "employer")
        assert response.status_code == 303
        assert response.headers["location"] == "/dashboard/employer"
        assert "job_board_session=" in response.headers["set-cookie"]

    def test_login_honours_callback(self, client):
        register_employer(client)
        response = login(client, "employer123@example.com", "employer123", "employer",
                         callbackUrl="/dashboard/employer/profile")
        assert response.headers["location"] == "/dashboard/employer/profile"

    def test_login_ignores_offsite_callback(self, client):
        register_employer(client)
        response = login(client, "employer123@example.com", "employer123", "employer",
                         callbackUrl="//evil.example.com/")
        assert response.headers["location"] == "/dashboard/employer"

    def test_bad_password(self, client):
        register_employer(client)
        response = login(client, "employer123@example.com", "nope-nope", "employer")
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid email or password"}

    def test_role_mismatch(self, client):
        register_employer(client)
        response = login(client, "employer123@example.com", "employer123", "jobseeker")
        assert response.status_code == 403
        assert "registered as a employer" in response.json()["error"]

    def test_me_and_logout(self, employer):
        assert employer.get("/api/me").json()["role"] == "employer"
        response = employer.get("/auth/logout", follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/"
        assert employer.get("/api/me").status_code == 401


class TestRouteGuard:
    def test_anonymous_redirected_to_login(self, client):
        response = client.get("/dashboard/employer", follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/auth/login?callbackUrl=%2Fdashboard%2Femployer"

    def test_login_redirect_lands_on_login_form(self, client):
        response = client.get("/dashboard/employer")
        assert response.status_code == 200
        body = response.json()
        assert body["callbackUrl"] == "/dashboard/employer"
        assert body["fields"] == ["email", "password", "userType", "callbackUrl"]
        assert body["userTypes"] == ["jobseeker", "employer", "admin"]

    def test_login_form_drops_offsite_callback(self, client):
        assert client.get("/auth/login", params={"callbackUrl": "//evil.example.com/"}).json()["callbackUrl"] is None

    def test_login_form_when_signed_in(self, employer):
        response = employer.get("/auth/login", follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/dashboard/employer"

    def test_wrong_role_redirected_home(self, seeker):
        response = seeker.get("/dashboard/employer", follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/dashboard/jobseeker"

        response = seeker.get("/admin", follow_redirects=False)
        assert response.headers["location"] == "/dashboard/jobseeker"

    def test_right_role_passes(self, employer):
        response = employer.get("/dashboard/employer")
        assert response.status_code == 200
        assert response.json()["totalJobs"] == 0

    def test_tampered_cookie_is_anonymous(self, client):
        forged = "job_board_session=eyJyb2xlIjogImFkbWluIn0=.forged.sig"
        response = client.get("/admin", headers={"Cookie": forged}, follow_redirects=False)
        assert response.headers["location"].startswith("/auth/login")

    def test_post_job_form_redirects(self, employer, db):
        response = employer.post(
            "/employers/post-job",
            data={"title": "Form Job", "requirements": "A\nB"},
            follow_redirects=False,
        )
        assert response.status_code == 303
        assert response.headers["location"] == "/dashboard/employer"
        assert db.query(Job).filter(Job.title == "Form Job").one().requirements == ["A", "B"]


class TestJobRoutes:
    def test_listing_and_detail(self, employer, client):
        job_id = post_job(employer)
        listed = client.get("/api/jobs", params={"location": "Remote"}).json()
        assert [job["id"] for job in listed] == [job_id]
        assert listed[0]["postedAt"] == "Today"

        detail = client.get(f"/api/jobs/{job_id}").json()
        assert detail["viewsCount"] == 1
        assert client.get(f"/api/jobs/{job_id}").json()["viewsCount"] == 2

    def test_featured_on_landing(self, employer, client):
        post_job(employer)
        assert len(client.get("/").json()["featured"]) == 1

    def test_bad_ids_are_not_found(self, client):
        assert client.get("/api/jobs/not-a-uuid").status_code == 404
        assert client.get(f"/api/jobs/{uuid.uuid4()}").json() == {"error": "Job not found"}

    def test_invalid_query_parameter(self, client):
        response = client.get("/api/jobs", params={"limit": 0})
        assert response.status_code == 422
        assert "limit" in response.json()["error"]

    def test_anonymous_cannot_post(self, client):
        response = client.post("/api/jobs/create", json={"title": "Nope"})
        assert response.status_code == 401
        assert response.json() == {"error": "Not authenticated"}

    def test_update_by_owner(self, employer):
        job_id = post_job(employer)
        response = employer.put(f"/api/jobs/{job_id}", json={"title": "Renamed", "isActive": True})
        assert response.status_code == 200
        assert response.json()["title"] == "Renamed"
        assert response.json()["isActive"] is True

    def test_other_employer_cannot_delete(self, app, employer, seeker, db):
        job_id = post_job(employer)
        seeker.post(f"/api/jobs/{job_id}/apply", data={"coverLetter": "Hi"})

        rival = TestClient(app)
        register_employer(rival, email="rival@example.com", company="Rival")
        login(rival, "rival@example.com", "employer123", "employer")

        response = rival.delete(f"/api/jobs/{job_id}")
        assert response.status_code == 404
        assert db.get(Job, uuid.UUID(job_id)) is not None
        assert db.query(Application).count() == 1

        assert employer.delete(f"/api/jobs/{job_id}").json() == {"success": True}
        assert db.query(Application).count() == 0


class TestApplicationFlow:
    def test_hiring_scenario(self, employer, seeker):
        job_id = post_job(employer)

        response = seeker.post(f"/api/jobs/{job_id}/apply", data={"coverLetter": "Hire me"})
        assert response.status_code == 201
        application = response.json()["application"]
        assert application["status"] == "pending"

        again = seeker.post(f"/api/jobs/{job_id}/apply", data={"coverLetter": "Again"})
        assert again.status_code == 409
        assert again.json() == {"error": "You have already applied for this job"}

        employer_view = employer.get("/api/applications").json()
        assert employer_view[0]["applicantEmail"] == "seeker@example.com"

        response = employer.post(
            f"/api/applications/{application['id']}/status", json={"status": "interview"}
        )
        assert response.status_code == 200

        mine = seeker.get(f"/api/applications/{application['id']}").json()
        assert mine["status"] == "interview"
        assert seeker.get("/api/notifications").json()[0]["message"].endswith("is now interview")

    def test_seeker_cannot_set_status(self, employer, seeker):
        job_id = post_job(employer)
        application = seeker.post(f"/api/jobs/{job_id}/apply", data={}).json()["application"]
        response = seeker.post(f"/api/applications/{application['id']}/status", json={"status": "accepted"})
        assert response.status_code == 401

    def test_save_and_unsave(self, employer, seeker):
        job_id = post_job(employer)
        assert seeker.post(f"/api/jobs/{job_id}/save").status_code == 201
        assert seeker.post(f"/api/jobs/{job_id}/save").status_code == 409
        assert len(seeker.get("/api/saved-jobs").json()) == 1
        assert seeker.delete(f"/api/jobs/{job_id}/save").status_code == 200
        assert seeker.delete(f"/api/jobs/{job_id}/save").status_code == 404

    def test_jobseeker_dashboard(self, employer, seeker):
        job_id = post_job(employer)
        seeker.post(f"/api/jobs/{job_id}/apply", data={})
        data = seeker.get("/api/jobseeker/dashboard").json()
        assert data["totalApplications"] == 1


class TestEmployerProfile:
    def test_rename_propagates_to_jobs(self, employer, db):
        job_id = post_job(employer)
        response = employer.post(
            "/dashboard/employer/profile",
            data={"companyName": "Acme Corp", "industry": "Technology"},
            follow_redirects=False,
        )
        assert response.status_code == 303
        profile = employer.get("/dashboard/employer/profile").json()
        assert profile["name"] == "Acme Corp"
        db.expire_all()
        assert db.get(Job, uuid.UUID(job_id)).company_name == "Acme Corp"


class TestAdminAndSystem:
    @pytest.fixture
    def admin(self, app, client):
        assert client.post("/api/init-db").json() == {"success": True, "seeded": True}
        admin = TestClient(app)
        login(admin, "admin@example.com", "admin123", "admin")
        return admin

    def test_status_and_health(self, client):
        assert client.get("/api/check-db-status").json() == {"initialized": True}
        assert client.get("/health").json() == {"status": "ok"}

    def test_init_db_seeds_once(self, admin, client):
        assert client.post("/api/init-db").json() == {"success": True, "seeded": False}

    def test_admin_dashboard(self, admin):
        data = admin.get("/api/admin/dashboard").json()
        assert data["totalUsers"] == 3
        assert data["activeJobs"] == 3

    def test_approve_and_deactivate(self, admin, db):
        job = db.query(Job).first()
        response = admin.post(f"/api/admin/jobs/{job.id}/approve")
        assert response.json()["job"]["isApproved"] is True

        user = db.query(User).filter(User.email == "jobseeker@example.com").one()
        response = admin.post(f"/api/admin/users/{user.id}/status", json={"isActive": False})
        assert response.json()["user"]["isActive"] is False
        assert login(TestClient(admin.app), "jobseeker@example.com", "jobseeker123", "jobseeker").status_code == 403

    def test_non_admin_rejected(self, admin, seeker, db):
        user = db.query(User).filter(User.email == "jobseeker@example.com").one()
        response = seeker.post(f"/api/admin/users/{user.id}/status", json={"isActive": False})
        assert response.status_code == 401
