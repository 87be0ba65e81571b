"""Application wiring: ticker feed -> update processor -> monitor."""
import asyncio
import signal
from loguru import logger
from rich.console import Console
from rich.live import Live
from arbigraph.config import Config, config as default_config
from arbigraph.core.symbols import SymbolNormalizer
from arbigraph.core.rate_graph import RateGraph
from arbigraph.core.cycle_detector import CycleDetector
from arbigraph.core.update_processor import UpdateProcessor
from arbigraph.core.ticker_feed import TickerFeed
from arbigraph.monitoring.monitor import CycleMonitor
from arbigraph.infrastructure.performance import PerformanceMonitor


class ArbigraphApp:
    """Main orchestrator."""

    def __init__(self, config: Config = default_config, console: Console = None):
        """Build all components from configuration."""
        self.config = config
        self.console = console or Console()
        self.running = False

        self.monitor = CycleMonitor(self.console, history_size=config.history_size)
        self.performance = PerformanceMonitor()
        self.processor = UpdateProcessor(
            normalizer=SymbolNormalizer(config.engine.quote_currencies),
            graph=RateGraph(),
            detector=CycleDetector(tolerance=config.engine.cycle_tolerance),
            sink=self.monitor,
            performance=self.performance,
        )
        self.feed = TickerFeed(config.feed)

    def configure_logging(self):
        """Send logs to a rotating file; the console belongs to the dashboard."""
        logger.remove()
        logger.add(
            f"{self.config.log_dir}/arbigraph_{{time}}.log",
            rotation="1 day",
            retention="7 days",
            level=self.config.log_level
        )

    def statistics(self) -> dict:
        stats = self.processor.stats.as_dict()
        stats['currencies'] = self.processor.graph.vertex_count()
        stats['edges'] = self.processor.graph.edge_count()
        return stats

    async def process_loop(self):
        """Consume batches until the feed ends or shutdown is requested."""
        try:
            await self.processor.run(self.feed.batches())
        finally:
            self.running = False

    async def display_loop(self):
        """Display loop: update dashboard."""
        with Live(
            self.monitor.render(self.statistics()),
            console=self.console,
            refresh_per_second=2
        ) as live:
            while self.running:
                live.update(self.monitor.render(self.statistics()))
                await asyncio.sleep(0.5)

    async def run(self):
        """Run until the feed gives up or a shutdown signal arrives."""
        self.running = True
        logger.info(f"Quote currencies: {', '.join(self.config.engine.quote_currencies)}")
        logger.info(f"Feed: {self.config.feed.url}")

        try:
            await asyncio.gather(self.process_loop(), self.display_loop())
        except asyncio.CancelledError:
            logger.info("Received shutdown signal")
        except Exception as e:
            logger.error(f"Fatal error: {e}")
            raise
        finally:
            await self.shutdown()

    async def shutdown(self):
        """Graceful shutdown."""
        logger.info("Shutting down Arbigraph...")
        self.running = False
        await self.feed.close()

        self.performance.log_summary()
        self.monitor.print_summary(self.statistics())
        logger.success("Shutdown complete")


async def _main():
    app = ArbigraphApp()
    app.configure_logging()

    # handles ctrl+c and kill signals gracefully
    task = asyncio.current_task()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, task.cancel)

    await app.run()


def main():
    """Console script entry point."""
    try:
        asyncio.run(_main())
    except asyncio.CancelledError:
        pass
