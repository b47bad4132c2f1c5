import argparse
import asyncio
import logging
import sys
import time
from typing import List, Optional

from compilation import Site
from core.errors import SiteError
from delivery.file_delivery import FileDelivery
from services.compile_cache import CompileCache
from services.config import load_config
from services.database import Database
from services.logging import setup_logging


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Compile a static site")
    parser.add_argument("--config", default="config.yaml", help="Path to the site configuration file")
    parser.add_argument("--force", action="store_true", help="Recompile every item, ignoring the compile cache")
    parser.add_argument("--verbose", action="store_true", help="Log every filter and layout step")
    return parser.parse_args(argv)


async def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    start_time = time.perf_counter()
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)
    logger = logging.getLogger(__name__)

    config = load_config(args.config)
    logger.info(f"Compiling site in {config.site_root}")

    # ----------------------------
    # Load site
    # ----------------------------
    site = Site(config)
    site.load_data()

    cache = CompileCache(Database(config.cache_path))
    await cache.initialize()
    if args.force:
        await cache.reset()

    # ----------------------------
    # Route and compile
    # ----------------------------
    delivery = FileDelivery(site.router)
    reps = site.compiler.build_reps()
    delivery.route(reps)

    outdated = cache.outdated_reps(site, reps)
    try:
        compiled = site.compiler.compile(outdated)
    except SiteError as e:
        logger.error(f"Compilation failed: {e}")
        return 1
    except Exception as e:
        # Raised by a filter itself; the proxy has already logged which step
        logger.exception(f"Compilation failed: {type(e).__name__}: {e}")
        return 1

    # ----------------------------
    # Write out
    # ----------------------------
    written = await delivery.deliver(compiled)
    await cache.record(site, {rep.item for rep in compiled})

    logger.info(f"Compiled {len(compiled)} item reps, wrote {len(written)} files")
    end_time = time.perf_counter()
    logger.info(f"Total time: {end_time - start_time}")
    return 0


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
