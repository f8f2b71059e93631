from dialogs.component_dialog import ComponentDialog
from dialogs.dialog import Dialog, DialogInstance, DialogResult
from dialogs.dialog_context import DialogContext
from dialogs.dialog_set import STACK_KEY, DialogSet
from dialogs.errors import DialogError, DialogNotFound, DuplicateDialogId, StepExecutionFailure
from dialogs.turn import InputKind, TurnContext, classify_activity
from dialogs.waterfall import Waterfall

__all__ = [
    "STACK_KEY",
    "ComponentDialog",
    "Dialog",
    "DialogContext",
    "DialogError",
    "DialogInstance",
    "DialogNotFound",
    "DialogResult",
    "DialogSet",
    "DuplicateDialogId",
    "InputKind",
    "StepExecutionFailure",
    "TurnContext",
    "Waterfall",
    "classify_activity",
]
