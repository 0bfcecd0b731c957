"""
Presenting surface abstraction.
The feed engine only needs a scrollable viewport of known extent.
"""

from typing import Callable, Optional, Protocol


class PresentingSurface(Protocol):
    """可滚动视口接口"""

    @property
    def scroll_top(self) -> float: ...

    @property
    def scroll_height(self) -> float: ...

    @property
    def client_height(self) -> float: ...

    def scroll_by(self, offset: float) -> None: ...

    def scroll_to(self, position: float) -> None: ...


def remaining_distance(surface: PresentingSurface) -> float:
    """距离内容底部的剩余滚动距离"""
    return surface.scroll_height - surface.scroll_top - surface.client_height


class VirtualViewport:
    """无界面的虚拟视口：每张卡片占一个视口高度"""

    def __init__(self, client_height: float = 800.0, item_count: Optional[Callable[[], int]] = None):
        if client_height <= 0:
            raise ValueError(f"client_height must be positive, got {client_height}")
        self._client_height = float(client_height)
        self._item_count = item_count or (lambda: 0)
        self._scroll_top = 0.0

    def bind(self, item_count: Callable[[], int]) -> None:
        """绑定内容数量来源"""
        self._item_count = item_count

    @property
    def client_height(self) -> float:
        return self._client_height

    @property
    def scroll_height(self) -> float:
        return max(self._item_count() * self._client_height, self._client_height)

    @property
    def max_scroll_top(self) -> float:
        return self.scroll_height - self._client_height

    @property
    def scroll_top(self) -> float:
        # 内容缩短后位置不会超过最大滚动距离
        return min(self._scroll_top, self.max_scroll_top)

    @property
    def current_index(self) -> int:
        """当前视口对应的卡片序号"""
        return int(self.scroll_top // self._client_height)

    def scroll_by(self, offset: float) -> None:
        self.scroll_to(self.scroll_top + offset)

    def scroll_to(self, position: float) -> None:
        self._scroll_top = min(max(0.0, float(position)), self.max_scroll_top)
