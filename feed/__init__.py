"""
Quote feed engine.
Ordering and batching, autoscroll, swipe gestures, reactions and the feed session.
"""

from .ordering import FeedBatcher, ALL_CATEGORY, derive_categories, shuffle
from .surface import PresentingSurface, VirtualViewport, remaining_distance
from .autoscroll import AutoscrollTimer, AUTOSCROLL_JOB_ID
from .gesture import (
    SwipeAction, Idle, Dragging, Committed, Cancelled, IDLE,
    PointerDown, PointerMove, PointerUp, transition,
    DragState, CardTransform, SwipeStateMachine, PointerEventHub, SwipeRecognizer
)
from .reactions import ReactionStore
from .session import FeedSession, CorpusState, FeedViewState, QuoteCardView, CardRegion, ShareCollaborator
from .dashboard import SavedQuotesDashboard

__all__ = [
    'FeedBatcher', 'ALL_CATEGORY', 'derive_categories', 'shuffle',
    'PresentingSurface', 'VirtualViewport', 'remaining_distance',
    'AutoscrollTimer', 'AUTOSCROLL_JOB_ID',
    'SwipeAction', 'Idle', 'Dragging', 'Committed', 'Cancelled', 'IDLE',
    'PointerDown', 'PointerMove', 'PointerUp', 'transition',
    'DragState', 'CardTransform', 'SwipeStateMachine', 'PointerEventHub', 'SwipeRecognizer',
    'ReactionStore',
    'FeedSession', 'CorpusState', 'FeedViewState', 'QuoteCardView', 'CardRegion', 'ShareCollaborator',
    'SavedQuotesDashboard',
]
