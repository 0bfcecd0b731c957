"""
Main entry point for the Quote Feed.
Provides command-line interface and system initialization.
"""

import asyncio
import argparse
import random
import sys
from typing import Optional, List

from utils import feed_logger, config_manager, FeedSystemError

from database import DatabaseManager, KVStoreOperations, Quote
from data_sources import CorpusSourceFactory, BaseCorpusSource
from feed import FeedBatcher, FeedSession, ReactionStore, SavedQuotesDashboard, FeedViewState, ALL_CATEGORY


class QuoteFeedApp:
    """语录流应用主类"""

    def __init__(self, db_path: Optional[str] = None):
        self.config = config_manager
        self.db_path = db_path
        self.kv_store: Optional[KVStoreOperations] = None
        self.reactions: Optional[ReactionStore] = None
        self.source: Optional[BaseCorpusSource] = None

    async def initialize(self):
        """初始化存储、反馈状态和语录来源"""
        try:
            feed_logger.info("[Main] Initializing Quote Feed...")

            self.kv_store = KVStoreOperations(DatabaseManager(self.db_path))
            self.reactions = ReactionStore(self.kv_store)
            self.reactions.load()
            self.source = CorpusSourceFactory().create()

            feed_logger.info("[Main] Quote Feed initialized successfully")

        except Exception as e:
            feed_logger.error(f"[Main] Failed to initialize: {e}")
            raise

    def create_session(self, seed: Optional[int] = None) -> FeedSession:
        rng = random.Random(seed) if seed is not None else None
        return FeedSession(self.source, self.reactions, batcher=FeedBatcher(rng=rng))

    async def _load_corpus(self) -> List[Quote]:
        return await self.source.get_quotes()

    async def _find_quote(self, quote_id: int) -> Optional[Quote]:
        for quote in await self._load_corpus():
            if quote.id == quote_id:
                return quote
        return None

    async def list_categories(self):
        """显示分类列表"""
        session = self.create_session()
        state = await session.load()
        if session.view_state is FeedViewState.ERROR:
            print(f"Failed to load quotes: {session.error['message']}")
            return

        print(f"\n📚 Categories ({state.value}):")
        for category in session.categories:
            print(f"   {category}")

    async def show_feed(self, category: str = ALL_CATEGORY, count: Optional[int] = None, seed: Optional[int] = None):
        """按分类显示语录流"""
        session = self.create_session(seed)
        await session.load()
        if session.view_state is FeedViewState.ERROR:
            print(f"Failed to load quotes: {session.error['message']}")
            return

        session.select_category(category)
        target = count or session.batcher.batch_size
        while len(session.batcher.visible) < target and session.batcher.has_more:
            task = session.batcher.request_more()
            if task is not None:
                await task

        if session.view_state is FeedViewState.EMPTY:
            print(f"No quotes found in category '{category}'.")
            return

        cards = session.cards()[:target]
        print("\n" + "=" * 60)
        print(f"   {session.active_category}: {len(cards)} of {len(session.batcher.feed_order)} quotes")
        print("=" * 60)
        for card in cards:
            flags = ("❤️ " if card.is_liked else "") + ("💾" if card.is_saved else "")
            print(f"\n[{card.quote.id}] {session.copy_text(card.quote.id)} {flags}".rstrip())
        print()

    async def toggle_like(self, quote_id: int) -> bool:
        if await self._find_quote(quote_id) is None:
            print(f"Quote {quote_id} not found.")
            return False
        liked = self.reactions.toggle_like(quote_id)
        print(f"Quote {quote_id} {'liked' if liked else 'unliked'}.")
        return True

    async def toggle_save(self, quote_id: int) -> bool:
        quote = await self._find_quote(quote_id)
        if quote is None:
            print(f"Quote {quote_id} not found.")
            return False
        saved = self.reactions.toggle_save(quote)
        print(f"Quote {quote_id} {'saved' if saved else 'unsaved'}.")
        return True

    def show_saved(self):
        """显示收藏列表"""
        dashboard = SavedQuotesDashboard(self.reactions)
        print(f"\n💾 Saved Quotes\n   {dashboard.summary()}")
        if dashboard.is_empty:
            print("   You haven't saved any quotes yet.")
            return
        for quote in dashboard.entries():
            print(f"\n[{quote.id}] {quote.content}\n   #{quote.category}")
        print()

    def remove_saved(self, quote_id: int) -> bool:
        removed = SavedQuotesDashboard(self.reactions).remove(quote_id)
        print(f"Quote {quote_id} {'removed' if removed else 'was not saved'}.")
        return removed

    async def shutdown(self):
        """关闭系统"""
        try:
            feed_logger.info("[Main] Shutting down Quote Feed...")

            if self.source:
                await self.source.close()
                self.source = None

            if self.reactions:
                self.reactions.close()

            if self.kv_store:
                self.kv_store.close()
                self.kv_store = None

            feed_logger.info("[Main] Quote Feed shutdown completed")

        except Exception as e:
            feed_logger.error(f"[Main] Error during shutdown: {e}")


def create_parser():
    """创建命令行参数解析器"""
    parser = argparse.ArgumentParser(
        description="Quote Feed - 可滑动的语录流",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
使用示例:
  python main.py categories                        # 显示分类
  python main.py feed --category Stoic --count 3   # 显示语录流
  python main.py feed --seed 42                    # 固定随机顺序
  python main.py like 5                            # 切换点赞
  python main.py save 5                            # 切换收藏
  python main.py saved                             # 显示收藏列表
  python main.py remove 5                          # 移除收藏
        """
    )
    parser.add_argument('--db-path', help='状态数据库路径，默认使用配置文件')

    subparsers = parser.add_subparsers(dest='command', help='可用命令')

    subparsers.add_parser('categories', help='显示分类列表')

    feed_parser = subparsers.add_parser('feed', help='显示语录流')
    feed_parser.add_argument('--category', default=ALL_CATEGORY, help='分类名称')
    feed_parser.add_argument('--count', type=int, help='显示数量，默认一批')
    feed_parser.add_argument('--seed', type=int, help='随机种子')

    like_parser = subparsers.add_parser('like', help='切换点赞')
    like_parser.add_argument('quote_id', type=int, help='语录ID')

    save_parser = subparsers.add_parser('save', help='切换收藏')
    save_parser.add_argument('quote_id', type=int, help='语录ID')

    subparsers.add_parser('saved', help='显示收藏列表')

    remove_parser = subparsers.add_parser('remove', help='移除收藏')
    remove_parser.add_argument('quote_id', type=int, help='语录ID')

    return parser


async def main(argv: Optional[List[str]] = None):
    """主函数"""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    app = QuoteFeedApp(db_path=args.db_path)
    try:
        await app.initialize()

        if args.command == 'categories':
            await app.list_categories()

        elif args.command == 'feed':
            await app.show_feed(args.category, args.count, args.seed)

        elif args.command == 'like':
            await app.toggle_like(args.quote_id)

        elif args.command == 'save':
            await app.toggle_save(args.quote_id)

        elif args.command == 'saved':
            app.show_saved()

        elif args.command == 'remove':
            app.remove_saved(args.quote_id)

        else:
            parser.print_help()

    except KeyboardInterrupt:
        feed_logger.info("[Main] Received keyboard interrupt")
    except FeedSystemError as e:
        feed_logger.error(f"[Main] System error: {e}")
        print(f"Error: {e.message}")
        sys.exit(1)
    finally:
        await app.shutdown()


def cli():
    asyncio.run(main())


if __name__ == "__main__":
    cli()
