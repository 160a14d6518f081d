import sqlite3
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from app.schemas.onboarding import OnboardingSubmission
from app.users.store import UserStore


class UserStoreTests(unittest.TestCase):
    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.store = UserStore(Path(tmp.name) / "nested" / "users.db")
        self.store.init_db()

    def test_unknown_user_has_no_record(self):
        self.assertIsNone(self.store.get_onboarded("nobody"))
        self.assertIsNone(self.store.get_profile("nobody"))

    def test_complete_onboarding_persists_parsed_skills(self):
        submission = OnboardingSubmission(
            industry="Healthcare",
            sub_industry="Pharmacy",
            years_experience=2.5,
            skills="Compounding,  Patient counseling ,",
            bio="Hospital pharmacist looking at informatics roles.",
        )
        self.store.complete_onboarding("user_7", submission)

        self.assertTrue(self.store.get_onboarded("user_7"))
        profile = self.store.get_profile("user_7")
        self.assertEqual(profile.skills, ["Compounding", "Patient counseling"])
        self.assertEqual(profile.years_experience, 2.5)
        self.assertEqual(profile.industry, "Healthcare")

    def test_connections_are_closed_after_each_call(self):
        opened: list[sqlite3.Connection] = []
        real_connect = sqlite3.connect

        def tracking_connect(*args, **kwargs):
            conn = real_connect(*args, **kwargs)
            opened.append(conn)
            return conn

        with patch("app.users.store.sqlite3.connect", side_effect=tracking_connect):
            self.store.get_onboarded("nobody")
            self.store.get_profile("nobody")

        self.assertEqual(len(opened), 2)
        for conn in opened:
            with self.assertRaises(sqlite3.ProgrammingError):
                conn.execute("SELECT 1")

    def test_init_db_is_idempotent(self):
        self.store.init_db()
        self.assertIsNone(self.store.get_onboarded("nobody"))


if __name__ == "__main__":
    unittest.main()
