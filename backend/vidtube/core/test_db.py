import ssl
import unittest

from vidtube.core.db import prepare_database_url


class TestPrepareDatabaseUrl(unittest.TestCase):

    def test_without_sslmode(self):
        url = "postgresql+asyncpg://u:p@db:5432/vidtube"
        self.assertEqual(prepare_database_url(url), (url, {}))

    def test_require_moves_to_connect_args(self):
        url, args = prepare_database_url(
            "postgresql+asyncpg://u:p@db:5432/vidtube?sslmode=require&application_name=api"
        )
        self.assertEqual(url, "postgresql+asyncpg://u:p@db:5432/vidtube?application_name=api")
        self.assertIsInstance(args["ssl"], ssl.SSLContext)
        self.assertEqual(args["ssl"].verify_mode, ssl.CERT_NONE)

    def test_verify_full_checks_certificates(self):
        _, args = prepare_database_url("postgresql+asyncpg://u:p@db/vidtube?sslmode=verify-full")
        self.assertEqual(args["ssl"].verify_mode, ssl.CERT_REQUIRED)

    def test_disable(self):
        url, args = prepare_database_url("postgresql+asyncpg://u:p@db/vidtube?sslmode=disable")
        self.assertEqual(url, "postgresql+asyncpg://u:p@db/vidtube")
        self.assertIs(args["ssl"], False)


if __name__ == "__main__":
    unittest.main()
