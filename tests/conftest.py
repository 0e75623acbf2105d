"""pytest configuration and fixtures for pyqt-metafields tests."""

import copy
import os

import pytest

# Headless test runs: use the offscreen Qt platform unless one is configured.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication

from pyqt_metafields.io.exceptions import ApiRequestError
from pyqt_metafields.protocols import form_config


@pytest.fixture(scope="session")
def qapp():
    """Create QApplication instance for tests."""
    app = QApplication.instance() or QApplication([])
    yield app
    # Don't quit - may cause issues with other tests


@pytest.fixture(autouse=True)
def default_config(monkeypatch):
    """Every test starts from the default configuration."""
    monkeypatch.setattr(form_config, "_config", None)


class FakeTransport:
    """In-memory JsonTransport.

    ``documents`` maps API paths to payloads; ``errors`` maps API paths to the
    ApiRequestError a request should raise. Every call is recorded.
    """

    def __init__(self, documents=None, errors=None, put_errors=None, echo=True):
        self.documents = dict(documents or {})
        self.errors = dict(errors or {})
        self.put_errors = dict(put_errors or {})
        self.echo = echo
        self.calls = []

    def get_json(self, path, allow_missing=False):
        self.calls.append(("GET", path))
        if path in self.errors:
            raise self.errors[path]
        if path not in self.documents:
            if allow_missing:
                return None
            raise ApiRequestError("Not Found", status_code=404)
        return copy.deepcopy(self.documents[path])

    def put_json(self, path, body):
        self.calls.append(("PUT", path))
        if path in self.put_errors:
            raise self.put_errors[path]
        self.documents[path] = copy.deepcopy(body)
        return copy.deepcopy(body) if self.echo else {"ok": True}

    def count(self, method, path):
        return self.calls.count((method, path))


class ImmediateTaskManager:
    """Runs background work synchronously with the BackgroundTaskManager interface."""

    is_pending = False

    def __init__(self):
        self.runs = []

    def run(self, target, args=(), kwargs=None, on_success=None, on_error=None,
            button=None, button_loading_text=None):
        self.runs.append(target)
        try:
            result = target(*args, **(kwargs or {}))
        except Exception as e:
            if on_error:
                on_error(e)
        else:
            if on_success:
                on_success(result)
        return True

    def cleanup(self):
        pass


class DeferredTaskManager(ImmediateTaskManager):
    """Holds the next run until complete() is called, to observe the pending state."""

    def __init__(self):
        super().__init__()
        self.is_pending = False
        self._held = None

    def run(self, target, args=(), kwargs=None, on_success=None, on_error=None,
            button=None, button_loading_text=None):
        if self.is_pending:
            return False
        self.is_pending = True
        self._held = (target, args, kwargs, on_success, on_error)
        return True

    def complete(self):
        target, args, kwargs, on_success, on_error = self._held
        self.is_pending = False
        self._held = None
        return ImmediateTaskManager.run(self, target, args, kwargs, on_success, on_error)


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def immediate_tasks():
    return ImmediateTaskManager()


@pytest.fixture
def deferred_tasks():
    return DeferredTaskManager()
