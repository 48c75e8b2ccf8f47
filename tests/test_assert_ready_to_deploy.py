"""
Script: tests/test_assert_ready_to_deploy.py
What: Tests the deploy gate in `release_tools/assert_ready_to_deploy.py`.
Doing: Feeds tag/version/SCM-tag combinations to the pure check and to `main()` via a patched environment.
Why: A regression here either blocks every release or lets a mismatched one through.
Goal: Keep the release tag rules and their failure messages stable.
"""

from __future__ import annotations

import os
import unittest
from unittest import mock

from release_tools.assert_ready_to_deploy import (
    GateResult,
    ReleaseInputs,
    check_release_gate,
    main,
    valid_tag,
    valid_version,
)
from release_tools.common import ReleaseToolError


def _inputs(
    git_tag: str | None = "v1.2.3-4",
    pom_version: str | None = "1.2.3-4",
    pom_scm_tag: str | None = "v1.2.3-4",
) -> ReleaseInputs:
    return ReleaseInputs(git_tag=git_tag, pom_version=pom_version, pom_scm_tag=pom_scm_tag)


class ReleasePatternTests(unittest.TestCase):
    def test_valid_tag(self) -> None:
        self.assertTrue(valid_tag("v1.2.3-4"))
        self.assertTrue(valid_tag("v0.0.0-0"))

    def test_rejects_malformed_tags(self) -> None:
        for tag in ("1.2.3-4", "v1.2.3", "v1.2-4", "v10.2.3-4", "v1.2.3-45", "v1_2_3-4", "v1.2.3-4\n", " v1.2.3-4"):
            with self.subTest(tag=tag):
                self.assertFalse(valid_tag(tag))

    def test_valid_version(self) -> None:
        self.assertTrue(valid_version("1.2.3-4"))

    def test_rejects_two_digit_components(self) -> None:
        # Single-digit components only; this is a fixed-width pattern.
        for version in ("1.23.3-4", "12.2.3-4", "1.2.30-4", "1.2.3-40", "v1.2.3-4", "1.2.3", "1.2.3-SNAPSHOT"):
            with self.subTest(version=version):
                self.assertFalse(valid_version(version))


class CheckReleaseGateTests(unittest.TestCase):
    def test_passes_when_everything_agrees(self) -> None:
        result = check_release_gate(_inputs())
        self.assertTrue(result.passed)
        self.assertEqual(result, GateResult())
        self.assertIsNone(result.message)

    def test_missing_tag(self) -> None:
        for git_tag in (None, ""):
            with self.subTest(git_tag=git_tag):
                result = check_release_gate(_inputs(git_tag=git_tag))
                self.assertEqual(result.check, "tag-present")
                self.assertEqual(result.message, "Skipping deployment: Not building a tag")

    def test_malformed_tag(self) -> None:
        result = check_release_gate(_inputs(git_tag="release-1"))
        self.assertEqual(result.check, "tag-format")
        self.assertEqual(
            result.message,
            "Skipping deployment: Tag 'release-1' is not a properly formatted release tag",
        )

    def test_missing_version(self) -> None:
        result = check_release_gate(_inputs(pom_version=None))
        self.assertEqual(result.check, "version-present")
        self.assertIn("Artifact version is not specified in the POM", result.message)

    def test_two_digit_version_fails_regardless_of_other_fields(self) -> None:
        result = check_release_gate(_inputs(pom_version="1.23.3-4", pom_scm_tag="v1.23.3-4"))
        self.assertFalse(result.passed)
        self.assertEqual(result.check, "version-format")
        self.assertEqual(result.message, "Skipping deployment: 1.23.3-4 is not a valid release version")

    def test_missing_scm_tag(self) -> None:
        result = check_release_gate(_inputs(pom_scm_tag=""))
        self.assertEqual(result.check, "scm-tag-present")
        self.assertIn("SCM tag is not specified in the POM", result.message)

    def test_scm_tag_must_match_build_tag(self) -> None:
        result = check_release_gate(_inputs(pom_scm_tag="v1.2.3-5"))
        self.assertEqual(result.check, "scm-tag-matches-tag")
        self.assertIn("'v1.2.3-5'", result.message)
        self.assertIn("'v1.2.3-4'", result.message)

    def test_scm_tag_must_match_version(self) -> None:
        result = check_release_gate(
            _inputs(git_tag="v1.2.3-9", pom_version="1.2.3-4", pom_scm_tag="v1.2.3-9")
        )
        self.assertEqual(result.check, "scm-tag-matches-version")
        self.assertEqual(
            result.message,
            "Skipping deployment: SCM tag 'v1.2.3-9' in the POM does not match version '1.2.3-4' in the POM",
        )

    def test_stops_at_first_failure(self) -> None:
        # Both the tag and the version are bad; the tag is reported.
        result = check_release_gate(_inputs(git_tag="v1.2", pom_version="oops"))
        self.assertEqual(result.check, "tag-format")


class MainTests(unittest.TestCase):
    def test_main_is_silent_on_success(self) -> None:
        env = {"TRAVIS_TAG": "v1.2.3-4", "POM_VERSION": "1.2.3-4", "POM_SCM_TAG": "v1.2.3-4"}
        with mock.patch.dict(os.environ, env, clear=True):
            self.assertIsNone(main([]))

    def test_main_raises_first_failure(self) -> None:
        env = {"POM_VERSION": "1.2.3-4", "POM_SCM_TAG": "v1.2.3-4"}
        with mock.patch.dict(os.environ, env, clear=True):
            with self.assertRaises(ReleaseToolError) as ctx:
                main([])
        self.assertEqual(str(ctx.exception), "Skipping deployment: Not building a tag")

    def test_from_env_treats_empty_as_missing(self) -> None:
        env = {"TRAVIS_TAG": "", "POM_VERSION": "1.2.3-4"}
        with mock.patch.dict(os.environ, env, clear=True):
            inputs = ReleaseInputs.from_env()
        self.assertEqual(inputs, ReleaseInputs(git_tag=None, pom_version="1.2.3-4", pom_scm_tag=None))


if __name__ == "__main__":
    unittest.main()
