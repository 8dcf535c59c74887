"""
Suite Runner

This package executes loaded suites: variable substitution, calls,
expectations, remembered values and parallel scheduling.

Usage:
    from ensemble.runner import SuiteRunner, run_parallel

    async with HTTPTransport(base_url) as transport:
        runner = SuiteRunner(transport, base_url=base_url)
        await run_parallel(suites, runner.run_suite, reporter, workers=4)
"""

from .executor import CallError, SuiteRunner
from .parallel import RunSuiteFunc, run_parallel
from .vars import BASE_URL_VAR, TEMPLATE_FUNCTIONS, TemplateError, Vars, render_template

__all__ = [
    # Execution
    "CallError",
    "SuiteRunner",
    # Scheduling
    "RunSuiteFunc",
    "run_parallel",
    # Variables
    "BASE_URL_VAR",
    "TEMPLATE_FUNCTIONS",
    "TemplateError",
    "Vars",
    "render_template",
]
