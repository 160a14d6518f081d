import dataclasses
import tempfile
import unittest
from pathlib import Path

from fastapi.testclient import TestClient
from pydantic import ValidationError

from app.core.config import settings
from app.main import create_app
from app.onboarding.industries import industry_names, sub_industries_for
from app.schemas.onboarding import (
    BIO_TOO_SHORT,
    SKILLS_REQUIRED,
    SUB_INDUSTRY_MISMATCH,
    SUB_INDUSTRY_REQUIRED,
    YEARS_NEGATIVE,
    OnboardingSubmission,
    field_errors,
    parse_skills,
)
from app.services.onboarding_service import SUBMISSION_NOT_OBJECT
from app.users.store import UserStore


def _payload(**overrides):
    payload = {
        "industry": "Technology",
        "subIndustry": "Software Development",
        "yearsExperience": 3,
        "skills": "Go, Rust, C++",
        "bio": "Systems programmer who enjoys compilers.",
    }
    payload.update(overrides)
    return payload


class EchoClient:
    async def generate(self, prompt: str) -> str:
        return prompt


class BrokenStore(UserStore):
    def complete_onboarding(self, user_id, submission):
        raise RuntimeError("disk full")


class IndustryCatalogTests(unittest.TestCase):
    def test_technology_has_five_specializations(self):
        options = sub_industries_for("Technology")
        self.assertEqual(len(options), 5)
        self.assertIn("Software Development", options)

    def test_unknown_industry_has_no_options(self):
        self.assertEqual(sub_industries_for("Astrology"), [])

    def test_catalog_lists_six_industries(self):
        self.assertEqual(
            industry_names(),
            ["Technology", "Healthcare", "Finance", "Marketing", "Education", "Engineering"],
        )


class OnboardingSubmissionTests(unittest.TestCase):
    def _errors(self, **overrides) -> dict[str, str]:
        with self.assertRaises(ValidationError) as ctx:
            OnboardingSubmission.model_validate(_payload(**overrides))
        return field_errors(ctx.exception)

    def test_parse_skills_trims_and_drops_empty_entries(self):
        self.assertEqual(parse_skills("Go, Rust, C++"), ["Go", "Rust", "C++"])
        self.assertEqual(parse_skills(" SQL ,, ,Docker,"), ["SQL", "Docker"])
        self.assertEqual(parse_skills(" , "), [])

    def test_valid_submission_accepts_camel_case_and_snake_case(self):
        camel = OnboardingSubmission.model_validate(_payload())
        snake = OnboardingSubmission.model_validate(
            {
                "industry": "Technology",
                "sub_industry": "Software Development",
                "years_experience": 3,
                "skills": "Go, Rust, C++",
                "bio": "Systems programmer who enjoys compilers.",
            }
        )
        self.assertEqual(camel, snake)
        self.assertEqual(camel.skills_list, ["Go", "Rust", "C++"])
        self.assertEqual(camel.years_experience, 3.0)

    def test_negative_years_is_rejected(self):
        self.assertEqual(self._errors(yearsExperience=-1), {"years_experience": YEARS_NEGATIVE})

    def test_zero_years_is_allowed(self):
        submission = OnboardingSubmission.model_validate(_payload(yearsExperience=0))
        self.assertEqual(submission.years_experience, 0.0)

    def test_non_numeric_years_is_rejected(self):
        errors = self._errors(yearsExperience="lots")
        self.assertIn("years_experience", errors)

    def test_missing_sub_industry_is_reported(self):
        self.assertEqual(self._errors(subIndustry=""), {"sub_industry": SUB_INDUSTRY_REQUIRED})

    def test_sub_industry_must_belong_to_industry(self):
        self.assertEqual(self._errors(subIndustry="Nursing"), {"sub_industry": SUB_INDUSTRY_MISMATCH})

    def test_blank_skills_are_rejected(self):
        self.assertEqual(self._errors(skills=" , ,"), {"skills": SKILLS_REQUIRED})

    def test_short_bio_is_rejected(self):
        self.assertEqual(self._errors(bio="Too short"), {"bio": BIO_TOO_SHORT})

    def test_empty_payload_reports_every_field(self):
        with self.assertRaises(ValidationError) as ctx:
            OnboardingSubmission.model_validate({})
        errors = field_errors(ctx.exception)
        self.assertEqual(set(errors), {"industry", "sub_industry", "years_experience", "skills", "bio"})


class OnboardingApiTests(unittest.TestCase):
    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.db_path = Path(tmp.name) / "users.db"
        self.settings = dataclasses.replace(
            settings,
            ai_provider="gemini",
            users_db_path=str(self.db_path),
            auth_proxy_secret=None,
            auth_user_header="X-User-Id",
            post_onboarding_redirect="/dashboard",
        )
        self.headers = {"X-User-Id": "user_42"}

    def _client(self, store: UserStore) -> TestClient:
        app = create_app(app_settings=self.settings, user_store=store, ai_client=EchoClient())
        client = TestClient(app, follow_redirects=False)
        client.__enter__()
        self.addCleanup(client.__exit__, None, None, None)
        return client

    def test_form_descriptor_lists_industries(self):
        client = self._client(UserStore(self.db_path))
        response = client.get("/onboarding", headers=self.headers)
        self.assertEqual(response.status_code, 200)
        body = response.json()
        technology = next(item for item in body["industries"] if item["name"] == "Technology")
        self.assertIn("Software Development", technology["subcategories"])
        self.assertEqual(body["rules"]["years_experience"], YEARS_NEGATIVE)

    def test_sub_industry_options_endpoint(self):
        client = self._client(UserStore(self.db_path))
        response = client.get("/onboarding/industries/Technology", headers=self.headers)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.json()["subcategories"]), 5)

        missing = client.get("/onboarding/industries/Astrology", headers=self.headers)
        self.assertEqual(missing.status_code, 404)

    def test_invalid_submission_never_reaches_the_store(self):
        store = UserStore(self.db_path)
        client = self._client(store)
        response = client.post("/onboarding", json=_payload(yearsExperience=-1), headers=self.headers)
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json(), {"errors": {"years_experience": YEARS_NEGATIVE}})
        self.assertIsNone(store.get_onboarded("user_42"))

    def test_non_object_body_uses_field_error_shape(self):
        store = UserStore(self.db_path)
        client = self._client(store)
        response = client.post("/onboarding", json=[_payload()], headers=self.headers)
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json(), {"errors": {"__root__": SUBMISSION_NOT_OBJECT}})
        self.assertIsNone(store.get_onboarded("user_42"))

    def test_successful_submission_marks_user_onboarded(self):
        store = UserStore(self.db_path)
        client = self._client(store)

        before = client.get("/v1/profile", headers=self.headers)
        self.assertEqual(before.status_code, 307)

        response = client.post("/onboarding", json=_payload(), headers=self.headers)
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["message"], "Profile completed successfully!")
        self.assertEqual(body["redirect_url"], "/dashboard")
        self.assertEqual(body["profile"]["skills"], ["Go", "Rust", "C++"])
        self.assertTrue(store.get_onboarded("user_42"))

        after = client.get("/v1/profile", headers=self.headers)
        self.assertEqual(after.status_code, 200)
        self.assertEqual(after.json()["sub_industry"], "Software Development")

    def test_resubmission_updates_the_profile(self):
        store = UserStore(self.db_path)
        client = self._client(store)
        client.post("/onboarding", json=_payload(), headers=self.headers)
        client.post("/onboarding", json=_payload(skills="Python"), headers=self.headers)
        self.assertEqual(store.get_profile("user_42").skills, ["Python"])

    def test_action_failure_is_retryable(self):
        client = self._client(BrokenStore(self.db_path))
        with self.assertLogs("app.services.onboarding_service", level="ERROR"):
            response = client.post("/onboarding", json=_payload(), headers=self.headers)
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["detail"], "Failed to complete onboarding. Please try again.")

    def test_submission_requires_sign_in(self):
        client = self._client(UserStore(self.db_path))
        response = client.post("/onboarding", json=_payload())
        self.assertEqual(response.status_code, 307)
        self.assertIn("/sign-in?redirect_url=", response.headers["location"])


if __name__ == "__main__":
    unittest.main()
