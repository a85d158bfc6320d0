"""
Target Resolver - Multi-Strategy Control Resolution.

Strategies (tried in order, first match wins):
1. EXACT_ATTRIBUTE - data attribute equal to the identifier
2. ACCESSIBLE_LABEL - aria-label or title containing the identifier
3. STRUCTURAL_PROXIMITY - selection-shaped element inside a captioned
   control/filter container whose text contains the identifier

Specificity decreases down the list, so exact identity wins over labels and
labels win over layout heuristics when several controls share vocabulary.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Sequence, TYPE_CHECKING
import logging

from dropdown_autoselect.engine.scripts import (
    RESOLVE_BY_ATTRIBUTE_JS,
    RESOLVE_BY_LABEL_JS,
    RESOLVE_BY_PROXIMITY_JS,
)

if TYPE_CHECKING:
    from dropdown_autoselect.interfaces.document import IDocument, IDocumentElement

logger = logging.getLogger(__name__)


class ResolutionStrategy(Enum):
    """Which strategy resolved the target."""
    EXACT_ATTRIBUTE = "exact_attribute"
    ACCESSIBLE_LABEL = "accessible_label"
    STRUCTURAL_PROXIMITY = "structural_proximity"


RESOLUTION_ORDER = (
    ResolutionStrategy.EXACT_ATTRIBUTE,
    ResolutionStrategy.ACCESSIBLE_LABEL,
    ResolutionStrategy.STRUCTURAL_PROXIMITY,
)

STRATEGY_SCRIPTS: Dict[ResolutionStrategy, str] = {
    ResolutionStrategy.EXACT_ATTRIBUTE: RESOLVE_BY_ATTRIBUTE_JS,
    ResolutionStrategy.ACCESSIBLE_LABEL: RESOLVE_BY_LABEL_JS,
    ResolutionStrategy.STRUCTURAL_PROXIMITY: RESOLVE_BY_PROXIMITY_JS,
}


@dataclass
class ResolvedElement:
    """
    A control found for one attempt.
    
    Never cached: the page may replace the node before the next attempt.
    """
    element: "IDocumentElement"
    strategy: ResolutionStrategy
    target_id: str


class TargetResolver:
    """
    Resolve a control identifier against the current document state.
    
    Example:
        >>> resolver = TargetResolver()
        >>> resolved = await resolver.resolve("region", document)
        >>> resolved.strategy if resolved else None
        <ResolutionStrategy.EXACT_ATTRIBUTE: 'exact_attribute'>
    """
    
    def __init__(self, strategies: Sequence[ResolutionStrategy] = RESOLUTION_ORDER):
        self._strategies = tuple(strategies)
    
    @property
    def strategies(self) -> Sequence[ResolutionStrategy]:
        return self._strategies
    
    async def resolve(self, target_id: str, document: "IDocument") -> Optional[ResolvedElement]:
        """
        Find the control, or None if no strategy matches.
        
        Document errors propagate; the caller's attempt boundary handles them.
        """
        for strategy in self._strategies:
            element = await document.query_element(STRATEGY_SCRIPTS[strategy], target_id)
            if element is not None:
                logger.debug(f"{strategy.value.upper()} found '{target_id}'")
                return ResolvedElement(element=element, strategy=strategy, target_id=target_id)
        
        logger.debug(f"No strategy found '{target_id}'")
        return None
