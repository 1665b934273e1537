import json

from django.contrib.auth.models import User
from rest_framework.test import APITestCase

from portfolio.models import CaseStudy, Education, Experience, Profile

from .factories import make_admin, make_case_study, make_education, make_experience


class AdminLoginTests(APITestCase):
    def setUp(self):
        self.admin = make_admin()

    def test_login_me_logout(self):
        response = self.client.post("/api/admin/login", {"username": "admin", "password": "s3cret-pass!"}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["username"], "admin")

        response = self.client.get("/api/admin/me")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["id"], self.admin.id)

        response = self.client.post("/api/admin/logout")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.client.get("/api/admin/me").status_code, 401)

    def test_wrong_password(self):
        response = self.client.post("/api/admin/login", {"username": "admin", "password": "nope"}, format="json")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"message": "Invalid credentials"})

    def test_non_staff_user_cannot_sign_in(self):
        User.objects.create_user(username="visitor", password="s3cret-pass!")
        response = self.client.post("/api/admin/login", {"username": "visitor", "password": "s3cret-pass!"}, format="json")
        self.assertEqual(response.status_code, 401)

    def test_missing_fields_is_validation_error(self):
        response = self.client.post("/api/admin/login", {"username": "admin"}, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["message"], "Validation error")
        self.assertIn("password", response.data["errors"])

    def test_passwords_are_hashed_with_bcrypt(self):
        self.assertTrue(self.admin.password.startswith("bcrypt_sha256$"))


class AnonymousAdminAccessTests(APITestCase):
    """Every admin route answers 401 without a session and changes nothing."""

    def setUp(self):
        self.experience = make_experience(sort_order=0)
        self.other = make_experience(job_title="Analyst", sort_order=1)
        self.education = make_education()
        self.study = make_case_study()
        profile = Profile.load()
        profile.tools_order = ["Jira"]
        profile.save()

    def assertUnauthorized(self, response):
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"message": "Authentication required"})

    def test_reads(self):
        for url in (
            "/api/admin/me",
            "/api/admin/experiences",
            f"/api/admin/experiences/{self.experience.id}",
            "/api/admin/education",
            "/api/admin/case-studies",
        ):
            with self.subTest(url=url):
                self.assertUnauthorized(self.client.get(url))

    def test_writes_do_not_mutate(self):
        self.assertUnauthorized(
            self.client.post("/api/admin/experiences", {"job_title": "X"}, format="json")
        )
        self.assertUnauthorized(
            self.client.patch(f"/api/admin/experiences/{self.experience.id}", {"job_title": "X"}, format="json")
        )
        self.assertUnauthorized(
            self.client.put(
                "/api/admin/experiences/reorder",
                {"experience_ids": [self.other.id, self.experience.id]},
                format="json",
            )
        )
        self.assertUnauthorized(self.client.delete(f"/api/admin/education/{self.education.id}"))
        self.assertUnauthorized(self.client.delete(f"/api/admin/case-studies/{self.study.id}"))
        self.assertUnauthorized(self.client.put("/api/admin/profile", {"name": "X"}, format="json"))
        self.assertUnauthorized(self.client.patch("/api/admin/tools-order", {"tools_order": []}, format="json"))
        self.assertUnauthorized(
            self.client.patch("/api/admin/industries-order", {"industries_order": ["A"]}, format="json")
        )
        self.assertUnauthorized(self.client.post("/api/upload-image", {}, format="multipart"))

        self.assertEqual(Experience.objects.count(), 2)
        self.experience.refresh_from_db()
        self.other.refresh_from_db()
        self.assertEqual(self.experience.job_title, "Product Manager")
        self.assertEqual((self.experience.sort_order, self.other.sort_order), (0, 1))
        self.assertTrue(Education.objects.filter(pk=self.education.pk).exists())
        self.assertTrue(CaseStudy.objects.filter(pk=self.study.pk).exists())
        profile = Profile.load()
        self.assertEqual(profile.name, "")
        self.assertEqual(profile.tools_order, ["Jira"])
        self.assertEqual(profile.industries_order, [])

    def test_non_staff_session_is_forbidden(self):
        user = User.objects.create_user(username="visitor", password="s3cret-pass!")
        self.client.force_login(user)
        response = self.client.delete(f"/api/admin/case-studies/{self.study.id}")
        self.assertEqual(response.status_code, 403)
        self.assertTrue(CaseStudy.objects.filter(pk=self.study.pk).exists())


class AdminTestCase(APITestCase):
    def setUp(self):
        self.client.force_login(make_admin())


class AdminExperienceTests(AdminTestCase):
    def test_create_stores_tools_as_embedded_strings(self):
        payload = {
            "job_title": "Head of Product",
            "industry": "Fintech",
            "start_date": "2022-02",
            "is_current_job": True,
            "description": "Owns product.",
            "accomplishments": "- Grew revenue",
            "tools": [{"name": "Amplitude", "usage": "Funnels"}, '{"name": "SQL", "usage": ""}'],
            "education": [{"name": "MBA", "category": "Degrees"}],
        }
        response = self.client.post("/api/admin/experiences", payload, format="json")
        self.assertEqual(response.status_code, 201, response.data)
        exp = Experience.objects.get(pk=response.data["id"])
        self.assertEqual(exp.company, "")
        self.assertEqual([json.loads(t) for t in exp.tools], [{"name": "Amplitude", "usage": "Funnels"}, {"name": "SQL", "usage": ""}])
        self.assertEqual(json.loads(exp.education[0]), {"name": "MBA", "category": "Degrees"})
        self.assertEqual(response.data["tools"][0], {"name": "Amplitude", "usage": "Funnels"})

    def test_new_rows_are_appended(self):
        make_experience(sort_order=4)
        payload = {
            "job_title": "PM",
            "industry": "Retail",
            "start_date": "2019-05",
            "description": "d",
            "accomplishments": "a",
        }
        response = self.client.post("/api/admin/experiences", payload, format="json")
        self.assertEqual(response.data["sort_order"], 5)

    def test_validation_error_envelope(self):
        response = self.client.post("/api/admin/experiences", {"start_date": "2020-13"}, format="json")
        self.assertEqual(response.status_code, 400)
        body = response.json()
        self.assertEqual(body["message"], "Validation error")
        for field in ("job_title", "industry", "start_date", "description", "accomplishments"):
            self.assertIn(field, body["errors"])

    def test_end_before_start_rejected(self):
        exp = make_experience()
        response = self.client.patch(f"/api/admin/experiences/{exp.id}", {"end_date": "2019-01"}, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertIn("end_date", response.data["errors"])

    def test_current_job_clears_end_date(self):
        exp = make_experience()
        response = self.client.patch(f"/api/admin/experiences/{exp.id}", {"is_current_job": True}, format="json")
        self.assertEqual(response.status_code, 200)
        exp.refresh_from_db()
        self.assertIsNone(exp.end_date)

    def test_end_date_closes_current_job(self):
        exp = make_experience(end_date=None, is_current_job=True)
        response = self.client.patch(f"/api/admin/experiences/{exp.id}", {"end_date": "2023-04"}, format="json")
        self.assertEqual(response.status_code, 200)
        exp.refresh_from_db()
        self.assertEqual((exp.end_date, exp.is_current_job), ("2023-04", False))
        self.assertEqual(response.data["date_range"], "Jan 2020 - Apr 2023")

    def test_delete(self):
        exp = make_experience()
        self.assertEqual(self.client.delete(f"/api/admin/experiences/{exp.id}").status_code, 204)
        self.assertFalse(Experience.objects.filter(pk=exp.pk).exists())
        self.assertEqual(self.client.delete(f"/api/admin/experiences/{exp.id}").status_code, 404)


class ReorderTests(AdminTestCase):
    def test_experience_reorder_is_reflected_in_admin_list(self):
        a = make_experience(job_title="A", sort_order=0)
        b = make_experience(job_title="B", sort_order=1)
        c = make_experience(job_title="C", sort_order=2)
        response = self.client.put("/api/admin/experiences/reorder", {"experience_ids": [c.id, a.id, b.id]}, format="json")
        self.assertEqual(response.status_code, 204)
        listed = self.client.get("/api/admin/experiences").data
        self.assertEqual([e["id"] for e in listed], [c.id, a.id, b.id])
        self.assertEqual([e["sort_order"] for e in listed], [0, 1, 2])

    def test_education_reorder(self):
        a = make_education(name="A", sort_order=0)
        b = make_education(name="B", sort_order=1)
        response = self.client.put("/api/admin/education/reorder", {"education_ids": [b.id, a.id]}, format="json")
        self.assertEqual(response.status_code, 204)
        listed = self.client.get("/api/education").data
        self.assertEqual([e["id"] for e in listed], [b.id, a.id])

    def test_unknown_ids_are_ignored(self):
        a = make_experience(sort_order=3)
        response = self.client.put("/api/admin/experiences/reorder", {"experience_ids": [9999, a.id]}, format="json")
        self.assertEqual(response.status_code, 204)
        a.refresh_from_db()
        self.assertEqual(a.sort_order, 1)

    def test_malformed_list_is_rejected(self):
        a = make_experience(sort_order=3)
        for payload in ({"experience_ids": "1,2"}, {"experience_ids": [a.id, a.id]}, {"experience_ids": []}, {}):
            with self.subTest(payload=payload):
                response = self.client.put("/api/admin/experiences/reorder", payload, format="json")
                self.assertEqual(response.status_code, 400)
        a.refresh_from_db()
        self.assertEqual(a.sort_order, 3)


class OrderArrayTests(AdminTestCase):
    def setUp(self):
        super().setUp()
        make_experience(
            industry="Healthcare",
            tools=[json.dumps({"name": "Jira", "usage": "Backlog"}), json.dumps({"name": "SQL", "usage": "Reports"})],
        )
        make_experience(industry="Fintech", start_date="2022-01", tools=[json.dumps({"name": "Figma", "usage": ""})])

    def test_tools_order_is_saved_and_applied(self):
        response = self.client.patch("/api/admin/tools-order", {"tools_order": ["SQL", "Jira"]}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(Profile.load().tools_order, ["SQL", "Jira"])
        groups = self.client.get("/api/experiences/tools").data
        self.assertEqual([g["name"] for g in groups], ["SQL", "Jira", "Figma"])
        self.assertEqual(groups[0]["experiences"][0]["usage"], "Reports")

    def test_stale_names_are_dropped_when_grouping(self):
        self.client.patch("/api/admin/industries-order", {"industries_order": ["Retail", "Healthcare"]}, format="json")
        groups = self.client.get("/api/experiences/industries").data
        self.assertEqual([g["name"] for g in groups], ["Healthcare", "Fintech"])
        self.assertEqual(groups[0]["experience_count"], 1)

    def test_non_list_is_rejected(self):
        response = self.client.patch("/api/admin/tools-order", {"tools_order": "SQL"}, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertIn("tools_order", response.data["errors"])


class AdminProfileTests(AdminTestCase):
    def test_partial_update(self):
        response = self.client.put(
            "/api/admin/profile",
            {"name": "Jordan Lee", "education_categories": ["Degrees", "Certifications"]},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        profile = Profile.load()
        self.assertEqual(profile.name, "Jordan Lee")
        self.assertEqual(profile.education_categories, ["Degrees", "Certifications"])
        self.assertEqual(Profile.objects.count(), 1)


class AdminCaseStudyTests(AdminTestCase):
    def test_slug_is_derived_from_title(self):
        response = self.client.post(
            "/api/admin/case-studies",
            {"title": "Hello, World! 2024", "description": "d"},
            format="json",
        )
        self.assertEqual(response.status_code, 201, response.data)
        self.assertEqual(response.data["slug"], "hello-world-2024")
        self.assertFalse(response.data["is_published"])

    def test_slug_clash_is_rejected(self):
        make_case_study(title="Hello World")
        response = self.client.post(
            "/api/admin/case-studies",
            {"title": "Hello  World!", "description": "d"},
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("slug", response.data["errors"])

    def test_drafts_are_listed(self):
        make_case_study(title="Draft", is_published=False)
        response = self.client.get("/api/admin/case-studies")
        self.assertEqual([c["slug"] for c in response.data], ["draft"])

    def test_content_round_trip(self):
        document = json.dumps(
            {
                "blocks": [
                    {"type": "quote", "data": {"text": "Hi", "caption": "Me"}},
                    {"type": "code", "data": {"code": "x < 1"}},
                    {"type": "delimiter", "data": {}},
                ]
            }
        )
        response = self.client.post(
            "/api/admin/case-studies",
            {"title": "Blocks", "description": "d", "content": document, "is_published": True},
            format="json",
        )
        self.assertEqual(response.status_code, 201)
        detail = self.client.get("/api/case-studies/blocks").data
        self.assertEqual(detail["content"], document)
        self.assertEqual(detail["block_types"], ["quote", "code", "delimiter"])
        self.assertIn("<pre><code>x &lt; 1</code></pre>", detail["content_html"])

    def test_put_with_blank_slug_rederives_it(self):
        study = make_case_study(title="Old Title")
        response = self.client.put(
            f"/api/admin/case-studies/{study.id}",
            {"title": "New Title", "slug": "", "description": "d"},
            format="json",
        )
        self.assertEqual(response.status_code, 200, response.data)
        study.refresh_from_db()
        self.assertEqual(study.slug, "new-title")

    def test_update_keeps_own_slug_but_rejects_a_taken_one(self):
        make_case_study(title="Taken")
        study = make_case_study(title="Mine")
        response = self.client.patch(f"/api/admin/case-studies/{study.id}", {"slug": "mine", "is_featured": True}, format="json")
        self.assertEqual(response.status_code, 200)
        response = self.client.patch(f"/api/admin/case-studies/{study.id}", {"slug": "taken"}, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertIn("slug", response.data["errors"])
        study.refresh_from_db()
        self.assertEqual(study.slug, "mine")

    def test_delete(self):
        study = make_case_study()
        self.assertEqual(self.client.delete(f"/api/admin/case-studies/{study.id}").status_code, 204)
        self.assertFalse(CaseStudy.objects.filter(pk=study.pk).exists())
        response = self.client.delete(f"/api/admin/case-studies/{study.id}")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"message": "Case study not found"})


class AdminEducationTests(AdminTestCase):
    def test_create_appends_within_category(self):
        make_education(name="BSc", category="Degrees", sort_order=0)
        make_education(name="MSc", category="Degrees", sort_order=3)
        make_education(name="PMP", category="Certifications", sort_order=7)
        response = self.client.post("/api/admin/education", {"name": "MBA", "category": "Degrees"}, format="json")
        self.assertEqual(response.status_code, 201, response.data)
        self.assertEqual(response.data["sort_order"], 4)
        response = self.client.post("/api/admin/education", {"name": "Bootcamp", "category": "Courses"}, format="json")
        self.assertEqual(response.data["sort_order"], 0)

    def test_create_keeps_explicit_sort_order(self):
        make_education(category="Degrees", sort_order=5)
        response = self.client.post(
            "/api/admin/education", {"name": "MBA", "category": "Degrees", "sort_order": 1}, format="json"
        )
        self.assertEqual(response.data["sort_order"], 1)

    def test_update_and_delete(self):
        edu = make_education()
        response = self.client.patch(
            f"/api/admin/education/{edu.id}",
            {"link": "https://school.example.com", "date": "2018"},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        edu.refresh_from_db()
        self.assertEqual((edu.link, edu.date), ("https://school.example.com", "2018"))
        response = self.client.patch(f"/api/admin/education/{edu.id}", {"link": "not a url"}, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertIn("link", response.data["errors"])
        self.assertEqual(self.client.delete(f"/api/admin/education/{edu.id}").status_code, 204)
        self.assertFalse(Education.objects.filter(pk=edu.pk).exists())

    def test_missing_row_is_404(self):
        response = self.client.get("/api/admin/education/9999")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"message": "Education not found"})
