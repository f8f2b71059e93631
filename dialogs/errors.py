"""
Dialog engine errors.

Recognition failures are not errors; they flow through a prompt's
validator/retry path. Everything here aborts the current turn.
"""
from __future__ import annotations

from typing import Optional, Union


class DialogError(Exception):
    """Base exception for all dialog engine failures."""

    def __init__(self, message: str, dialog_id: str = ""):
        self.dialog_id = dialog_id
        super().__init__(message)


class DuplicateDialogId(DialogError):
    def __init__(self, dialog_id: str):
        super().__init__(f"A dialog with an id of '{dialog_id}' was already added.", dialog_id)


class DialogNotFound(DialogError):
    def __init__(self, dialog_id: str):
        super().__init__(f"Dialog '{dialog_id}' is not registered in this DialogSet.", dialog_id)


class StepExecutionFailure(DialogError):
    """
    Host-supplied code (a waterfall step, validator or render hook) raised.

    The original exception is chained as `__cause__`. State written by
    earlier steps is left as it is.
    """

    def __init__(self, dialog_id: str, step: Union[int, str], error: Optional[BaseException] = None):
        self.step = step
        self.error = error
        detail = f"{type(error).__name__}: {error}" if error is not None else "unknown error"
        super().__init__(f"Dialog '{dialog_id}' failed at step {step!r} ({detail})", dialog_id)
