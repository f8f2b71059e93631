"""
ComponentDialog — a dialog that runs its own private DialogSet.

The component's inner stack lives inside its own instance state, so a
component can be registered in any parent set without the parent
knowing about (or sharing a registry with) the dialogs it uses
internally. When the inner stack empties, the component ends and hands
the inner result to its parent.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from dialogs.dialog import Dialog, DialogResult
from dialogs.dialog_set import DialogSet

if TYPE_CHECKING:
    from dialogs.dialog_context import DialogContext

logger = structlog.get_logger()


class ComponentDialog(Dialog):

    def __init__(self, dialogs: DialogSet, initial_dialog_id: str):
        self.dialogs = dialogs
        self.initial_dialog_id = initial_dialog_id

    async def dialog_begin(self, dc: "DialogContext", options: Any = None) -> Any:
        inner = self.dialogs.create_context(dc.context, dc.active_dialog.state)
        await inner.begin_dialog(self.initial_dialog_id, options)
        return await self._end_if_done(dc, inner.dialog_result)

    async def dialog_continue(self, dc: "DialogContext") -> Any:
        inner = self.dialogs.create_context(dc.context, dc.active_dialog.state)
        await inner.continue_dialog()
        return await self._end_if_done(dc, inner.dialog_result)

    async def _end_if_done(self, dc: "DialogContext", inner_result: DialogResult) -> Any:
        if inner_result.active:
            return None
        logger.debug("component_completed",
                     dialog_id=dc.active_dialog.id,
                     initial_dialog_id=self.initial_dialog_id)
        return await dc.end_dialog(inner_result.result)
