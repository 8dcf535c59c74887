"""
JUnit XML reporting: one ``<testsuite>`` file per suite.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from xml.etree import ElementTree

from .models import CaseResult, TimeFrame
from .reporter import Reporter

logger = logging.getLogger(__name__)

FAILURE_TYPE = "FailedExpectation"


def _seconds(frame: TimeFrame) -> str:
    return f"{frame.duration_ms / 1000:.3f}"


def build_suite_element(results: list[CaseResult]) -> ElementTree.Element:
    """``<testsuite>`` element for the results of one suite."""
    suite = results[0].suite
    frame = TimeFrame(start=results[0].frame.start, end=results[0].frame.end)

    element = ElementTree.Element("testsuite", {
        "id": str(len(results)),
        "name": suite.name,
        "package": suite.package_name,
        "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
        "hostname": "localhost",
    })
    ElementTree.SubElement(element, "properties")

    failures = skipped = 0
    for result in results:
        frame.extend(result.frame)
        case = ElementTree.SubElement(element, "testcase", {
            "name": result.case.name,
            "classname": suite.full_name,
            "time": _seconds(result.frame),
        })

        if result.error is not None:
            failures += 1
            failure = ElementTree.SubElement(case, "failure", {
                "type": FAILURE_TYPE,
                "message": result.error.cause,
            })
            failure.text = (
                f"On Call #{result.error.call_num} - {result.error.cause}\n\n"
                f"{result.error.response_dump}"
            )

        if result.skipped:
            skipped += 1
            ElementTree.SubElement(case, "skipped", {"message": result.skipped_msg})

    element.set("time", _seconds(frame))
    element.set("tests", str(len(results)))
    element.set("failures", str(failures))
    element.set("errors", "0")
    element.set("skipped", str(skipped))
    ElementTree.SubElement(element, "system-out").text = ""
    ElementTree.SubElement(element, "system-err").text = ""
    return element


class JUnitXMLReporter(Reporter):
    """
    Writes ``<out_dir>/<suite full name>.xml`` for every reported suite.

    Example:
        reporter = JUnitXMLReporter("reports/junit")
    """

    def __init__(self, out_dir: str | Path):
        self.out_dir = Path(out_dir)

    def report(self, results: list[CaseResult]) -> None:
        if not results:
            return

        element = build_suite_element(results)
        self.out_dir.mkdir(parents=True, exist_ok=True)
        path = self.out_dir / f"{results[0].suite.full_name}.xml"
        ElementTree.ElementTree(element).write(path, encoding="utf-8", xml_declaration=True)
        logger.debug(f"JUnit report written to {path}")
