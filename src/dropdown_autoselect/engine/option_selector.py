"""
Option Selector - Pick the first meaningful option of a resolved control.

Native <select> elements are driven through selectedIndex plus bubbling
change/input events. Everything else is treated as a custom widget: it is
clicked open and, after a settle delay, the first visible option-shaped
element is clicked. That second half runs as a separate task whose result
is reported through the sink.
"""

from typing import TYPE_CHECKING
import asyncio
import logging

from dropdown_autoselect.engine.models import (
    DEFAULT_SETTLE_DELAY_MS,
    SelectionOutcome,
    SelectionVia,
)
from dropdown_autoselect.engine.scripts import (
    OPEN_WIDGET_JS,
    PICK_VISIBLE_OPTION_JS,
    SELECT_NATIVE_JS,
    TAG_NAME_JS,
)
from dropdown_autoselect.exceptions import EmptyOptionsFailure, RuntimeFault

if TYPE_CHECKING:
    from dropdown_autoselect.engine.sink import ISelectionSink
    from dropdown_autoselect.engine.target_resolver import ResolvedElement
    from dropdown_autoselect.interfaces.document import IDocument

logger = logging.getLogger(__name__)


class OptionSelector:
    """
    Dispatch a resolved control to the native or custom-widget strategy.
    
    Example:
        >>> selector = OptionSelector(document, sink)
        >>> outcome = await selector.select(resolved)
        >>> if outcome.is_pending:
        ...     outcome = await outcome.pending
    """
    
    def __init__(
        self,
        document: "IDocument",
        sink: "ISelectionSink",
        settle_delay_ms: int = DEFAULT_SETTLE_DELAY_MS,
    ):
        self._document = document
        self._sink = sink
        self._settle_delay_ms = settle_delay_ms
    
    async def select(self, resolved: "ResolvedElement") -> SelectionOutcome:
        """
        Select the first meaningful option.
        
        Returns:
            SUCCESS for native selects, OPENED_PENDING_OPTIONS for widgets
            
        Raises:
            EmptyOptionsFailure: Native select without a selectable option
        """
        tag_name = await resolved.element.evaluate(TAG_NAME_JS)
        if str(tag_name or "").upper() == "SELECT":
            return await self._select_native(resolved)
        return await self._open_widget(resolved)
    
    async def _select_native(self, resolved: "ResolvedElement") -> SelectionOutcome:
        result = await resolved.element.evaluate(SELECT_NATIVE_JS) or {}
        if not result.get("ok"):
            raise EmptyOptionsFailure(
                f"Control '{resolved.target_id}' has no selectable option",
                reason=result.get("reason"),
            )
        
        label = result.get("label") or ""
        self._sink.log(f"Selected '{label}' (option {result.get('index')}) in native select")
        return SelectionOutcome.success(label, SelectionVia.NATIVE_SELECT)
    
    async def _open_widget(self, resolved: "ResolvedElement") -> SelectionOutcome:
        await resolved.element.evaluate(OPEN_WIDGET_JS)
        self._sink.log(
            f"Opened custom widget '{resolved.target_id}', "
            f"checking options in {self._settle_delay_ms} ms"
        )
        pending = asyncio.create_task(self._pick_visible_option(resolved.target_id))
        return SelectionOutcome.opened_pending(pending)
    
    async def _pick_visible_option(self, target_id: str) -> SelectionOutcome:
        await asyncio.sleep(self._settle_delay_ms / 1000)
        
        try:
            label = await self._document.evaluate(PICK_VISIBLE_OPTION_JS)
        except Exception as e:
            fault = RuntimeFault(f"Option check for '{target_id}' failed: {e}", cause=e)
            logger.warning(fault.message)
            self._sink.log(fault.message)
            return SelectionOutcome.not_found(reason=fault.message)
        
        if label is None:
            self._sink.log(f"No visible options after opening '{target_id}'")
            return SelectionOutcome.not_found(reason="no visible options")
        
        self._sink.log(f"Selected '{label}' in custom widget")
        return SelectionOutcome.success(label, SelectionVia.CUSTOM_WIDGET)
