import os

import pytest


RUNNER_VARIABLES = ("GITHUB_OUTPUT", "GITHUB_STEP_SUMMARY")


@pytest.fixture(autouse=True)
def isolate_runner_environment(monkeypatch):
    """Hide any GitHub Actions variables of the surrounding environment.

    The action entry point appends to the files named by these variables and
    reads its inputs from ``INPUT_*``; a test run inside a workflow must not
    pick them up.
    """
    for name in RUNNER_VARIABLES:
        monkeypatch.delenv(name, raising=False)
    for name in list(os.environ):
        if name.startswith("INPUT_"):
            monkeypatch.delenv(name, raising=False)
    yield
