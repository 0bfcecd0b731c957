"""
Saved quotes dashboard.
"""

from typing import List

from utils import reaction_logger, ValidationError, ErrorCodes
from database.models import Quote

from .reactions import ReactionStore


class SavedQuotesDashboard:
    """收藏列表视图"""

    def __init__(self, reactions: ReactionStore):
        self.reactions = reactions

    def entries(self) -> List[Quote]:
        return self.reactions.saved_quotes()

    @property
    def count(self) -> int:
        return self.reactions.saved_count

    @property
    def is_empty(self) -> bool:
        return self.count == 0

    def summary(self) -> str:
        return f"You have {self.count} saved quotes."

    def remove(self, quote_id: int) -> bool:
        removed = self.reactions.remove(quote_id)
        if not removed:
            reaction_logger.debug(f"[Dashboard] Quote {quote_id} was not saved, nothing to remove")
        return removed

    def copy_text(self, quote_id: int) -> str:
        """剪贴板文本，仅语录内容"""
        for quote in self.reactions.saved_quotes():
            if quote.id == quote_id:
                return quote.content
        raise ValidationError(
            f"Quote {quote_id} is not saved",
            ErrorCodes.VALIDATION_UNKNOWN_QUOTE,
            context={'quote_id': quote_id}
        )
