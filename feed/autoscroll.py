"""
Autoscroll timer for the quote feed.
Uses APScheduler to advance the feed one viewport per interval.
"""

from typing import Callable, Optional

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from utils import autoscroll_logger, config_manager, FeedConfig

from .ordering import FeedBatcher
from .surface import PresentingSurface, remaining_distance

AUTOSCROLL_JOB_ID = "feed_autoscroll"

# 距离底部小于该值视为已到底
AT_END_TOLERANCE_PX = 1.0


class AutoscrollTimer:
    """自动滚动定时器"""

    def __init__(self, surface: PresentingSurface, batcher: FeedBatcher, advance: Callable[[], None],
                 interval_seconds: Optional[float] = None, scheduler: Optional[AsyncIOScheduler] = None,
                 job_id: str = AUTOSCROLL_JOB_ID, feed_config: Optional[FeedConfig] = None):
        feed_config = feed_config or config_manager.get_feed_config()
        self.surface = surface
        self.batcher = batcher
        self.advance = advance
        self.interval_seconds = (feed_config.autoscroll_interval_ms / 1000.0
                                 if interval_seconds is None else interval_seconds)
        self.scheduler = scheduler or AsyncIOScheduler()
        self.job_id = job_id
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        """启动自动滚动；已运行时为空操作"""
        if self._running:
            return

        if not self.scheduler.running:
            self.scheduler.start()

        self.scheduler.add_job(
            self._run_tick,
            trigger=IntervalTrigger(seconds=self.interval_seconds),
            id=self.job_id,
            replace_existing=True,
            max_instances=1,
            coalesce=True
        )
        self._running = True
        autoscroll_logger.info(f"[Autoscroll] Started with interval {self.interval_seconds:.1f}s")

    def stop(self) -> None:
        """停止自动滚动；已停止时为空操作"""
        if not self._running:
            return

        self._running = False
        try:
            self.scheduler.remove_job(self.job_id)
        except JobLookupError:
            autoscroll_logger.debug(f"[Autoscroll] Job {self.job_id} already removed")
        autoscroll_logger.info("[Autoscroll] Stopped")

    def toggle(self) -> bool:
        """切换自动滚动，返回切换后的状态"""
        if self._running:
            self.stop()
        else:
            self.start()
        return self._running

    async def _run_tick(self):
        # 停止后仍可能有已排队的触发
        if not self._running:
            return
        self.tick()

    def tick(self) -> bool:
        """执行一次滚动；返回是否回到了顶部"""
        at_end = remaining_distance(self.surface) < AT_END_TOLERANCE_PX
        if at_end and not self.batcher.has_more:
            self.surface.scroll_to(0)
            autoscroll_logger.debug("[Autoscroll] Reached end of feed, wrapping to top")
            return True

        self.advance()
        return False

    def shutdown(self) -> None:
        """停止并关闭调度器"""
        self.stop()
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
