"""
Script: release_tools/pom_value.py
What: Prints one value from `pom.xml` selected by an XPath query.
Doing: Parses the POM, strips XML namespaces, runs the query, and insists on exactly one match.
Why: Later steps (for example the deploy gate) need `project/version` and `project/scm/tag` as plain strings.
Goal: Give build steps a strict single-value accessor that never guesses between matches.
"""

from __future__ import annotations

import argparse
import math
from decimal import Decimal
from pathlib import Path

from lxml import etree

from release_tools.common import ReleaseToolError, write_github_outputs


DEFAULT_MANIFEST = Path("pom.xml")


def load_manifest(path: Path) -> etree._Element:
    """Parse the manifest file and return its root element."""
    try:
        with open(path, "rb") as handle:
            tree = etree.parse(handle)
    except OSError as exc:
        raise ReleaseToolError(f"Failed to read manifest {path}: {exc.strerror or exc}") from exc
    except etree.XMLSyntaxError as exc:
        raise ReleaseToolError(f"Failed to read manifest {path}: {exc}") from exc
    return tree.getroot()


def strip_namespaces(root: etree._Element) -> None:
    """
    Drop namespace qualification from every element and attribute in place.

    A POM declares `xmlns="http://maven.apache.org/POM/4.0.0"`, so without this
    a query would need a prefix mapping just to reach `/project/version`.
    """
    for element in root.iter():
        # Comments and processing instructions have a factory function as tag.
        if not isinstance(element.tag, str):
            continue
        element.tag = etree.QName(element).localname
        for name in list(element.attrib):
            if name.startswith("{"):
                value = element.attrib.pop(name)
                element.attrib[etree.QName(name).localname] = value
    etree.cleanup_namespaces(root)


XSLT_NS = "http://www.w3.org/1999/XSL/Transform"

# `xpath()` on an element or tree uses the root element as context node, so
# `project/version` would miss. A template matching "/" runs the query from the
# document node instead. `select` on the variable is replaced per query.
QUERY_STYLESHEET = b"""\
<xsl:stylesheet version="1.0"
    xmlns:xsl="http://www.w3.org/1999/XSL/Transform"
    xmlns:exsl="http://exslt.org/common"
    exclude-result-prefixes="exsl">
  <xsl:template match="/">
    <xsl:variable name="matches" select="/.."/>
    <result>
      <xsl:attribute name="type">
        <xsl:value-of select="exsl:object-type($matches)"/>
      </xsl:attribute>
      <xsl:if test="exsl:object-type($matches) = 'node-set'">
        <xsl:attribute name="count">
          <xsl:value-of select="count($matches)"/>
        </xsl:attribute>
      </xsl:if>
      <xsl:value-of select="string($matches)"/>
    </result>
  </xsl:template>
</xsl:stylesheet>
"""


def _number_text(value: float) -> str:
    """Render a number the way XPath `string()` does: no exponent, no `.0`."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer():
        return str(int(value))
    return format(Decimal(repr(value)), "f")


def _evaluate(root: etree._Element, query: str) -> etree._Element:
    """Return a `<result type=".." count="..">text</result>` summary of `query`."""
    stylesheet = etree.fromstring(QUERY_STYLESHEET)
    stylesheet.find(f".//{{{XSLT_NS}}}variable").set("select", query)
    try:
        transform = etree.XSLT(stylesheet)
        summary = transform(root.getroottree()).getroot()
    except etree.XSLTError as exc:
        raise ReleaseToolError(f"Invalid XPath query '{query}': {exc}") from exc
    if summary is None:
        raise ReleaseToolError(f"Invalid XPath query '{query}'")
    return summary


def query_single_value(root: etree._Element, query: str) -> str:
    """
    Evaluate `query` against the document holding `root` and return the text of the one match.

    The context node is the document, so `project/version` and
    `/project/version` select the same node in a POM while `version` selects nothing.
    Element matches give their full text content; scalar results
    (`string(...)`, `count(...)`, boolean tests) count as one match unless empty.
    """
    summary = _evaluate(root, query)
    text = summary.text or ""

    if summary.get("type") == "node-set":
        count = int(summary.get("count"))
        if count == 0:
            raise ReleaseToolError("No match for the XPath query")
        if count > 1:
            raise ReleaseToolError("More than one match for the XPath query")
        return text

    if summary.get("type") == "number":
        text = _number_text(float(text))
    if text == "":
        raise ReleaseToolError("No match for the XPath query")
    return text


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="release-tools pom-value",
        description="Print the single value selected by an XPath query against pom.xml.",
    )
    # Optional here so a missing query gets our own message, not argparse's.
    parser.add_argument("query", nargs="?", help="XPath query, for example /project/version")
    parser.add_argument(
        "--manifest",
        type=Path,
        default=DEFAULT_MANIFEST,
        help="Manifest to read (default: pom.xml in the working directory).",
    )
    parser.add_argument(
        "--output-name",
        default="",
        help="Also write the value to GITHUB_OUTPUT under this step output name.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    if not args.query:
        raise ReleaseToolError("No XPath query provided")

    root = load_manifest(args.manifest)
    strip_namespaces(root)
    value = query_single_value(root, args.query)

    if args.output_name:
        # Step outputs are `name=value` lines; a newline would split the value.
        if "\n" in value:
            raise ReleaseToolError(
                f"Cannot write multi-line value to step output {args.output_name}"
            )
        write_github_outputs({args.output_name: value})

    print(value)


if __name__ == "__main__":
    main()
