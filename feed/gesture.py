"""
Swipe gesture recognition for quote cards.

A horizontal drag on a card is tracked by an explicit state machine:

    Idle -> Dragging(start_x, current_x) -> Committed(LIKE | SAVE) | Cancelled -> Idle

Releasing past the threshold to the right likes the card, past the threshold
to the left saves it, anything shorter snaps back. ``transition`` is the only
place that decides outcomes; ``SwipeStateMachine`` holds the current state and
``SwipeRecognizer`` adapts touch and mouse input for one card.
"""

from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from utils import gesture_logger, config_manager, GestureConfig
from database.models import Quote


class SwipeAction(str, Enum):
    """滑动提交的动作"""
    LIKE = "like"  # 向右
    SAVE = "save"  # 向左


# ============================================================================
# 状态
# ============================================================================

@dataclass(frozen=True)
class Idle:
    """无拖动"""


@dataclass(frozen=True)
class Dragging:
    """拖动中"""
    start_x: float
    current_x: float

    @property
    def delta(self) -> float:
        return self.current_x - self.start_x


@dataclass(frozen=True)
class Committed:
    """松开时超过阈值"""
    action: SwipeAction
    delta: float


@dataclass(frozen=True)
class Cancelled:
    """松开时未超过阈值，卡片回弹"""
    delta: float


SwipeState = Union[Idle, Dragging, Committed, Cancelled]
SwipeOutcome = Union[Committed, Cancelled]

IDLE = Idle()


# ============================================================================
# 事件
# ============================================================================

@dataclass(frozen=True)
class PointerDown:
    x: float


@dataclass(frozen=True)
class PointerMove:
    x: float


@dataclass(frozen=True)
class PointerUp:
    pass


PointerEvent = Union[PointerDown, PointerMove, PointerUp]


def transition(state: SwipeState, event: PointerEvent, threshold: float) -> SwipeState:
    """状态转移函数"""
    if isinstance(state, (Committed, Cancelled)):
        state = IDLE

    if isinstance(event, PointerDown):
        # 输入由设备串行化，拖动中不会出现第二次按下
        if isinstance(state, Dragging):
            return state
        return Dragging(start_x=event.x, current_x=event.x)

    if isinstance(event, PointerMove):
        if isinstance(state, Dragging):
            return Dragging(start_x=state.start_x, current_x=event.x)
        return state

    if isinstance(event, PointerUp):
        if not isinstance(state, Dragging):
            return state
        delta = state.delta
        if delta > threshold:
            return Committed(SwipeAction.LIKE, delta)
        if delta < -threshold:
            return Committed(SwipeAction.SAVE, delta)
        return Cancelled(delta)

    raise TypeError(f"Unsupported pointer event: {event!r}")


# ============================================================================
# 视觉反馈
# ============================================================================

@dataclass(frozen=True)
class DragState:
    """卡片拖动状态"""
    is_dragging: bool = False
    start_x: float = 0.0
    current_x: float = 0.0


NEUTRAL_DRAG_STATE = DragState()


@dataclass(frozen=True)
class CardTransform:
    """卡片位移与旋转；animate 表示使用回弹过渡"""
    translate_x: float = 0.0
    rotation_deg: float = 0.0
    animate: bool = True


class SwipeStateMachine:
    """单张卡片的滑动状态机"""

    def __init__(self, gesture_config: Optional[GestureConfig] = None):
        self.config = gesture_config or config_manager.get_gesture_config()
        self._state: SwipeState = IDLE

    @property
    def state(self) -> SwipeState:
        return self._state

    @property
    def drag_state(self) -> DragState:
        if isinstance(self._state, Dragging):
            return DragState(True, self._state.start_x, self._state.current_x)
        return NEUTRAL_DRAG_STATE

    @property
    def delta(self) -> float:
        return self._state.delta if isinstance(self._state, Dragging) else 0.0

    def handle(self, event: PointerEvent) -> Optional[SwipeOutcome]:
        """处理输入事件；松开时返回结果并回到 Idle"""
        next_state = transition(self._state, event, self.config.swipe_threshold_px)
        if isinstance(next_state, (Committed, Cancelled)):
            self._state = IDLE
            return next_state
        self._state = next_state
        return None

    def card_transform(self) -> CardTransform:
        if not isinstance(self._state, Dragging):
            return CardTransform()
        delta = self._state.delta
        return CardTransform(
            translate_x=delta,
            rotation_deg=delta / self.config.rotation_divisor,
            animate=False
        )

    def overlay_opacity(self, action: SwipeAction) -> float:
        """LIKE 为右侧覆盖层，SAVE 为左侧覆盖层"""
        if not isinstance(self._state, Dragging):
            return 0.0

        delta = self._state.delta
        if abs(delta) < self.config.overlay_fade_start_px:
            return 0.0

        opacity = min(abs(delta) / self.config.overlay_full_px, self.config.overlay_max_opacity)
        if action is SwipeAction.LIKE and delta > 0:
            return opacity
        if action is SwipeAction.SAVE and delta < 0:
            return opacity
        return 0.0


# ============================================================================
# 输入适配
# ============================================================================

class PointerEventHub:
    """窗口级指针事件分发"""

    MOVE = "mousemove"
    UP = "mouseup"

    def __init__(self):
        self._listeners: Dict[str, List[Callable[..., Any]]] = defaultdict(list)

    def add_listener(self, event_type: str, callback: Callable[..., Any]) -> None:
        self._listeners[event_type].append(callback)

    def remove_listener(self, event_type: str, callback: Callable[..., Any]) -> None:
        listeners = self._listeners.get(event_type, [])
        if callback in listeners:
            listeners.remove(callback)

    def dispatch(self, event_type: str, *args: Any) -> None:
        # 回调中可能移除自身，遍历副本
        for callback in list(self._listeners.get(event_type, [])):
            callback(*args)

    def listener_count(self, event_type: Optional[str] = None) -> int:
        if event_type is not None:
            return len(self._listeners.get(event_type, []))
        return sum(len(listeners) for listeners in self._listeners.values())


class SwipeRecognizer:
    """把触摸和鼠标输入转换为单张卡片的滑动动作"""

    def __init__(self, quote: Quote, on_like: Callable[[int], Any], on_save: Callable[[Quote], Any],
                 on_swipe_next: Callable[[], Any], window: PointerEventHub,
                 on_gesture_start: Optional[Callable[[], Any]] = None,
                 gesture_config: Optional[GestureConfig] = None):
        self.quote = quote
        self.on_like = on_like
        self.on_save = on_save
        self.on_swipe_next = on_swipe_next
        self.on_gesture_start = on_gesture_start
        self.window = window
        self.machine = SwipeStateMachine(gesture_config)
        self._mouse_attached = False

    @property
    def drag_state(self) -> DragState:
        return self.machine.drag_state

    def card_transform(self) -> CardTransform:
        return self.machine.card_transform()

    def overlay_opacity(self, action: SwipeAction) -> float:
        return self.machine.overlay_opacity(action)

    # 触摸
    def touch_start(self, x: float, on_control: bool = False) -> None:
        if on_control:
            return
        self._begin(x)

    def touch_move(self, x: float) -> None:
        self.machine.handle(PointerMove(x))

    def touch_end(self) -> None:
        self._release()

    # 鼠标：移动和松开监听只在一次拖动期间挂在窗口上
    def mouse_down(self, x: float, on_control: bool = False) -> None:
        if on_control or self._mouse_attached:
            return
        self._begin(x)
        self.window.add_listener(PointerEventHub.MOVE, self._on_window_move)
        self.window.add_listener(PointerEventHub.UP, self._on_window_up)
        self._mouse_attached = True

    def _on_window_move(self, x: float) -> None:
        self.machine.handle(PointerMove(x))

    def _on_window_up(self, *_args: Any) -> None:
        self.window.remove_listener(PointerEventHub.MOVE, self._on_window_move)
        self.window.remove_listener(PointerEventHub.UP, self._on_window_up)
        self._mouse_attached = False
        self._release()

    def _begin(self, x: float) -> None:
        if self.on_gesture_start is not None:
            self.on_gesture_start()
        self.machine.handle(PointerDown(x))

    def _release(self) -> Optional[SwipeOutcome]:
        outcome = self.machine.handle(PointerUp())
        if isinstance(outcome, Committed):
            gesture_logger.debug(f"[Gesture] Quote {self.quote.id} swiped {outcome.action.value} ({outcome.delta:.0f}px)")
            if outcome.action is SwipeAction.LIKE:
                self.on_like(self.quote.id)
            else:
                self.on_save(self.quote)
            self.on_swipe_next()
        elif isinstance(outcome, Cancelled):
            gesture_logger.debug(f"[Gesture] Quote {self.quote.id} swipe cancelled ({outcome.delta:.0f}px)")
        return outcome
