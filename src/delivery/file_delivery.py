"""
File delivery channel: writes compiled reps below the output directory
"""
import logging
import os
from typing import Iterable, List

import aiofiles

from core.item_rep import ItemRep
from delivery.base import DeliveryChannel
from delivery.routers import Router

logger = logging.getLogger(__name__)


class FileDelivery(DeliveryChannel):
    name = "file"

    def __init__(self, router: Router):
        self.router = router

    def route(self, reps: Iterable[ItemRep]) -> None:
        """Assign output paths; must happen before compiling so rules can link to reps."""
        for rep in reps:
            self.router.route(rep)

    async def deliver(self, reps: Iterable[ItemRep]) -> List[str]:
        written = []

        for rep in reps:
            if rep.raw_path is None:
                self.router.route(rep)
            if rep.raw_path is None:
                continue

            content = rep.compiled_content()
            if await self._unchanged(rep.raw_path, content):
                logger.debug(f"Unchanged: {rep.raw_path}")
                continue

            directory = os.path.dirname(rep.raw_path)
            if directory:
                os.makedirs(directory, exist_ok=True)

            if isinstance(content, bytes):
                async with aiofiles.open(rep.raw_path, "wb") as f:
                    await f.write(content)
            else:
                async with aiofiles.open(rep.raw_path, "w", encoding="utf-8") as f:
                    await f.write(content)

            written.append(rep.raw_path)
            logger.info(f"Wrote {rep.raw_path}")

        return written

    async def _unchanged(self, path: str, content) -> bool:
        if not os.path.exists(path):
            return False

        async with aiofiles.open(path, "rb") as f:
            existing = await f.read()

        expected = content if isinstance(content, bytes) else content.encode("utf-8")
        return existing == expected
