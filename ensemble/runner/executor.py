"""
Suite execution.

``SuiteRunner`` runs the cases of a suite one after another. Within a
case, calls run in order and share a ``Vars`` instance so that values
remembered from one response flow into later requests.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

from ..assertions import (
    AbsentExpectation,
    BodyExpectation,
    BodyPathExpectation,
    BodySchemaExpectation,
    ContentTypeExpectation,
    HeaderExpectation,
    PresentExpectation,
    ResponseExpectation,
    StatusCodeExpectation,
)
from ..query import QueryEngine
from ..reporting.models import CallTrace, CaseError, CaseResult, TimeFrame
from ..schema_parsing import Call, Case, Expect, On, Suite
from ..transport import BaseTransport, HTTPRequest, HTTPResponse, JSON_MEDIA_TYPE
from .vars import Vars

logger = logging.getLogger(__name__)


class CallError(Exception):
    """A call could not be prepared or completed."""
    pass


class SuiteRunner:
    """
    Executes suites against a transport.

    Example:
        async with HTTPTransport("http://localhost:8080") as transport:
            runner = SuiteRunner(transport, base_url="http://localhost:8080")
            results = await runner.run_suite(suite)
    """

    def __init__(
        self,
        transport: BaseTransport,
        engine: QueryEngine | None = None,
        base_url: str = "",
        environ: Mapping[str, str] | None = None,
    ):
        self.transport = transport
        self.engine = engine or QueryEngine()
        self.base_url = base_url
        self.environ = environ

    async def run_suite(self, suite: Suite) -> list[CaseResult]:
        logger.debug(f"Running suite {suite.full_name} ({len(suite.cases)} cases)")
        return [await self.run_case(suite, case) for case in suite.cases]

    async def run_case(self, suite: Suite, case: Case) -> CaseResult:
        result = CaseResult(suite=suite, case=case)

        if case.ignored:
            result.skipped = True
            result.skipped_msg = case.ignore or ""
            result.frame.finish()
            return result

        vars = Vars(base_url=self.base_url, environ=self.environ)

        for call_num, call in enumerate(case.calls, start=1):
            trace = await self.run_call(suite, call, vars)
            result.traces.append(trace)

            if trace.has_error:
                result.error = CaseError(
                    call_num=call_num,
                    cause=trace.error_message or "",
                    response_dump=trace.response_dump,
                )
                break

        result.frame.finish()
        return result

    async def run_call(self, suite: Suite, call: Call, vars: Vars) -> CallTrace:
        """
        Make one call and check its response.

        Never raises: failures end up on the returned trace.
        """
        trace = CallTrace(frame=TimeFrame())
        try:
            await self._run_call(suite, call, vars, trace)
        except CallError as e:
            trace.error_cause = str(e)
        except (OSError, ValueError) as e:
            trace.error_cause = f"{type(e).__name__}: {e}"
        finally:
            trace.frame.finish()

        if trace.terminated:
            logger.debug(f"Call {trace.method} {trace.url} terminated: {trace.error_cause}")
        return trace

    async def _run_call(self, suite: Suite, call: Call, vars: Vars, trace: CallTrace) -> None:
        vars.add_all(call.args)

        on = call.on.populate_with(vars)
        trace.method = on.method
        trace.url = on.url

        request = HTTPRequest(
            method=on.method,
            url=on.url,
            headers=dict(on.headers),
            params=dict(on.params),
            body=self._request_body(suite, on, vars),
        )
        if isinstance(on.body, (dict, list)) and not _has_header(request.headers, "Content-Type"):
            request.headers["Content-Type"] = JSON_MEDIA_TYPE
        trace.request_dump = request.dump()

        response = await self.transport.send(request)
        trace.response_dump = response.dump()
        if not response.success:
            raise CallError(str(response.error))

        expect = call.expect.populate_with(vars)
        for expectation in await self.expectations(suite, expect):
            result = expectation.check(response)
            trace.add_expectation(expectation.describe(), result.passed)
            if not result.passed:
                trace.failure = result.message
                return

        trace.failure = self.remember(response, call, vars)

    def _request_body(self, suite: Suite, on: On, vars: Vars) -> bytes | None:
        if on.body_file:
            path = suite.base_dir / on.body_file
            logger.debug(f"Reading request body from {path}")
            return vars.apply_to(path.read_text(encoding="utf-8")).encode("utf-8")

        if on.body is None:
            return None
        if isinstance(on.body, str):
            return on.body.encode("utf-8")
        return json.dumps(on.body, ensure_ascii=False).encode("utf-8")

    # ─────────────────────────────────────────────────────────────────────────
    # Expectations
    # ─────────────────────────────────────────────────────────────────────────

    async def expectations(self, suite: Suite, expect: Expect) -> list[ResponseExpectation]:
        """Expectations for a call, in evaluation order."""
        checks: list[ResponseExpectation] = []

        if expect.status_code is not None:
            checks.append(StatusCodeExpectation(expect.status_code))

        if expect.content_type:
            checks.append(ContentTypeExpectation(expect.content_type))

        for name, value in expect.headers.items():
            checks.append(HeaderExpectation(name, value))

        if expect.body_schema_file:
            checks.append(BodySchemaExpectation(
                self._load_schema_file(suite, expect.body_schema_file),
                display_name=expect.body_schema_file,
            ))

        if expect.body_schema_uri:
            checks.append(BodySchemaExpectation(
                await self._fetch_schema(expect.body_schema_uri),
                display_name=expect.body_schema_uri,
            ))

        if expect.body:
            checks.append(BodyPathExpectation(expect.body, self.engine))

        if expect.has_body_equals:
            checks.append(BodyExpectation(expect.body_equals, strict=expect.strict_body))

        if expect.absent:
            checks.append(AbsentExpectation(expect.absent, self.engine))

        if expect.present:
            checks.append(PresentExpectation(expect.present, self.engine))

        return checks

    def _load_schema_file(self, suite: Suite, name: str) -> dict[str, Any]:
        path = suite.base_dir / name
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise CallError(f"Invalid JSON schema {path}: {e}") from e

    async def _fetch_schema(self, uri: str) -> dict[str, Any]:
        response = await self.transport.send(HTTPRequest("GET", uri))
        if not response.success:
            raise CallError(f"Cannot load schema {uri}: {response.error}")
        if response.status_code >= 400:
            raise CallError(f"Cannot load schema {uri}: HTTP {response.status_code}")
        try:
            return json.loads(response.body)
        except ValueError as e:
            raise CallError(f"Invalid JSON schema {uri}: {e}") from e

    # ─────────────────────────────────────────────────────────────────────────
    # Remember
    # ─────────────────────────────────────────────────────────────────────────

    def remember(self, response: HTTPResponse, call: Call, vars: Vars) -> str | None:
        """
        Store remembered values in ``vars``.

        Returns:
            A failure message, or None when every value was found
        """
        if call.remember.body:
            body = response.parsed_body()
            for name, path in call.remember.body.items():
                result = self.engine.resolve(body, path)
                if not result.found:
                    return f"Remembered value not found, path: {path}"
                vars.add(name, result.value)

        for name, header in call.remember.headers.items():
            value = response.header(header)
            if not value:
                return f"Remembered value not found, path: {header}"
            vars.add(name, value)

        return None


def _has_header(headers: dict[str, str], name: str) -> bool:
    lowered = name.lower()
    return any(key.lower() == lowered for key in headers)
