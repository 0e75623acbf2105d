"""Single-attempt background requests with pending-state button handling."""

import logging
from typing import Any, Callable, Optional

from PyQt6.QtCore import QThread, pyqtSignal
from PyQt6.QtWidgets import QPushButton

logger = logging.getLogger(__name__)

CLOSE_WAIT_MS = 200


class BackgroundTask(QThread):
    """
    Run one callable on a worker thread and report back on the event loop.

    Usage:
        task = BackgroundTask(accessor.fetch, args=(path,))
        task.succeeded.connect(on_loaded)
        task.failed.connect(on_failed)  # receives the Exception itself
        task.start()

    A failure is reported once through ``failed``; nothing is retried.
    """

    succeeded = pyqtSignal(object)
    failed = pyqtSignal(Exception)

    def __init__(self, target: Callable[..., Any], args: tuple = (),
                 kwargs: Optional[dict] = None, parent=None):
        super().__init__(parent)
        self._call = lambda: target(*args, **(kwargs or {}))
        self.detached = False

    def run(self):
        try:
            outcome = self._call()
        except Exception as error:
            if not self.detached:
                self.failed.emit(error)
            return
        if not self.detached:
            self.succeeded.emit(outcome)

    def detach(self):
        """Drop delivery of the outcome; the call itself still runs to completion."""
        self.detached = True


class _BusyButton:
    """Disables a button and swaps its caption until released."""

    def __init__(self, button: Optional[QPushButton], busy_text: Optional[str]):
        self._button = button
        self._idle_text = button.text() if button else None
        if button:
            button.setEnabled(False)
            button.setText(busy_text or f"{self._idle_text}...")

    def release(self):
        if self._button:
            self._button.setText(self._idle_text)
            self._button.setEnabled(True)


class BackgroundTaskManager:
    """
    Owns at most one in-flight request for a widget.

    While a request is pending, further ``run`` calls are refused and return
    False, so a double-clicked Save button issues a single request.

    Usage in widget:
        self._task_manager = BackgroundTaskManager()

        def save(self):
            return self._task_manager.run(
                self.accessor.save, args=(self.path, document),
                on_success=self._on_saved, on_error=self._on_save_failed,
                button=self.save_button, button_loading_text="Saving...",
            )

        def closeEvent(self, event):
            self._task_manager.cleanup()
            super().closeEvent(event)
    """

    def __init__(self):
        self._current_task: Optional[BackgroundTask] = None
        self._pending = False

    @property
    def is_pending(self) -> bool:
        return self._pending

    def run(
        self,
        target: Callable[..., Any],
        args: tuple = (),
        kwargs: Optional[dict] = None,
        on_success: Optional[Callable[[Any], None]] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
        button: Optional[QPushButton] = None,
        button_loading_text: Optional[str] = None,
    ) -> bool:
        """
        Start ``target`` on a worker thread unless a request is already pending.

        Args:
            target: Blocking callable to execute
            args: Positional arguments for target
            kwargs: Keyword arguments for target
            on_success: Called on the event loop with the result
            on_error: Called on the event loop with the raised Exception
            button: Disabled while pending, restored when the request settles
            button_loading_text: Caption while pending (default: caption + "...")

        Returns:
            True if the request started, False if one was already pending
        """
        if self.is_pending:
            logger.debug(f"Refusing {getattr(target, '__name__', target)}: request already pending")
            return False

        busy = _BusyButton(button, button_loading_text)
        task = BackgroundTask(target, args=args, kwargs=kwargs)

        def settle(callback, payload):
            self._pending = False
            busy.release()
            if callback:
                callback(payload)

        task.succeeded.connect(lambda result: settle(on_success, result))
        task.failed.connect(lambda error: settle(on_error, error))

        self._pending = True
        self._current_task = task
        task.start()
        return True

    def cleanup(self):
        """Detach the in-flight request and briefly wait for it. Call from closeEvent."""
        task = self._current_task
        self._pending = False
        if task is not None and task.isRunning():
            task.detach()
            task.wait(CLOSE_WAIT_MS)
