"""
Script: release_tools/assert_ready_to_deploy.py
What: Decides whether a tagged build may be deployed.
Doing: Reads `TRAVIS_TAG`, `POM_VERSION`, and `POM_SCM_TAG`, checks their format, then checks they agree with each other.
Why: A deploy from an untagged build or a half-bumped POM publishes the wrong artifact.
Goal: Stop the pipeline before deployment unless tag, version, and SCM tag all line up.
"""

from __future__ import annotations

import argparse
import re
from typing import NamedTuple

from release_tools.common import ReleaseToolError, optional_env


TAG_ENV = "TRAVIS_TAG"
VERSION_ENV = "POM_VERSION"
SCM_TAG_ENV = "POM_SCM_TAG"

# One digit per component on purpose: `v10.0.0-1` is not a release tag here.
RELEASE_TAG_RE = re.compile(r"v[0-9]\.[0-9]\.[0-9]-[0-9]")
RELEASE_VERSION_RE = re.compile(r"[0-9]\.[0-9]\.[0-9]-[0-9]")

MESSAGE_PREFIX = "Skipping deployment: "


class ReleaseInputs(NamedTuple):
    """The three values the gate compares. Empty strings count as missing."""

    git_tag: str | None
    pom_version: str | None
    pom_scm_tag: str | None

    @classmethod
    def from_env(cls) -> "ReleaseInputs":
        return cls(
            git_tag=optional_env(TAG_ENV) or None,
            pom_version=optional_env(VERSION_ENV) or None,
            pom_scm_tag=optional_env(SCM_TAG_ENV) or None,
        )


class GateResult(NamedTuple):
    """
    Outcome of `check_release_gate`.

    `check` names the first failing check (for example `tag-format`) and
    `message` is the line shown to the operator. Both are `None` on success.
    """

    check: str | None = None
    message: str | None = None

    @property
    def passed(self) -> bool:
        return self.check is None


def valid_tag(tag: str) -> bool:
    """True for release tags like `v1.2.3-4`."""
    return RELEASE_TAG_RE.fullmatch(tag) is not None


def valid_version(version: str) -> bool:
    """True for release versions like `1.2.3-4`."""
    return RELEASE_VERSION_RE.fullmatch(version) is not None


def _fail(check: str, message: str) -> GateResult:
    return GateResult(check=check, message=MESSAGE_PREFIX + message)


def check_release_gate(inputs: ReleaseInputs) -> GateResult:
    """
    Run the deploy checks in order and stop at the first failure.

    This function only looks at `inputs`; reading the environment and exiting
    the process is left to `main()` so the rules are easy to test.
    """
    git_tag, pom_version, pom_scm_tag = inputs

    # Make sure we are building a valid release tag.
    if not git_tag:
        return _fail("tag-present", "Not building a tag")
    if not valid_tag(git_tag):
        return _fail("tag-format", f"Tag '{git_tag}' is not a properly formatted release tag")

    # The POM must declare a release version.
    if not pom_version:
        return _fail("version-present", "Artifact version is not specified in the POM")
    if not valid_version(pom_version):
        return _fail("version-format", f"{pom_version} is not a valid release version")

    # The POM must declare the SCM tag for this release.
    if not pom_scm_tag:
        return _fail("scm-tag-present", "SCM tag is not specified in the POM")

    # Git tag, POM version, and SCM tag must all agree.
    if pom_scm_tag != git_tag:
        return _fail(
            "scm-tag-matches-tag",
            f"SCM tag '{pom_scm_tag}' in the POM does not match the '{git_tag}' tag being built",
        )
    if pom_scm_tag != f"v{pom_version}":
        return _fail(
            "scm-tag-matches-version",
            f"SCM tag '{pom_scm_tag}' in the POM does not match version '{pom_version}' in the POM",
        )

    return GateResult()


def build_parser() -> argparse.ArgumentParser:
    return argparse.ArgumentParser(
        prog="release-tools assert-ready-to-deploy",
        description=(
            f"Exit non-zero unless {TAG_ENV}, {VERSION_ENV}, and {SCM_TAG_ENV} "
            "describe one consistent release."
        ),
    )


def main(argv: list[str] | None = None) -> None:
    # No options; parsing still gives `--help` and rejects stray arguments.
    build_parser().parse_args(argv)

    result = check_release_gate(ReleaseInputs.from_env())
    if not result.passed:
        raise ReleaseToolError(result.message)


if __name__ == "__main__":
    main()
