# glslcombine/assets/server.py
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from queue import Queue
from typing import Dict, List, Optional

from glslcombine.assets.handle import AssetHandle, AssetId, asset_id_for
from glslcombine.assets.importers.base import AssetImporter
from glslcombine.assets.importers.shader import CombinedShaderImporter, ShaderImporter
from glslcombine.assets.registry import AssetRegistry

logger = logging.getLogger(__name__)


def default_importers() -> Dict[str, AssetImporter]:
    combined = CombinedShaderImporter()
    single = ShaderImporter()
    return {
        ".glsl": combined,
        ".frag": single,
        ".vert": single,
        ".comp": single,
    }


class AssetServer:
    """
    Loads shader assets on worker threads.

    Each load owns its own preprocessing state, so any number of loads may
    run at once; results are handed back on the thread calling `update()`.
    """

    def __init__(
        self,
        asset_root: Path,
        importers: Optional[Dict[str, AssetImporter]] = None,
        max_workers: int = 2,
    ) -> None:
        self.root = Path(asset_root)
        self.registry = AssetRegistry()

        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="ShaderWorker"
        )
        self._loaded_queue: Queue = Queue()

        self._handles: Dict[str, AssetHandle] = {}  # Path -> Handle
        self._importers = importers if importers is not None else default_importers()

    def load(self, path: str) -> AssetHandle:
        """
        Non-blocking load request. Return handle instantly.
        """
        if path in self._handles:
            return self._handles[path]

        handle = AssetHandle(asset_id_for(path), path)
        self._handles[path] = handle

        self._executor.submit(self._worker_load, handle.id, self.root / path)
        return handle

    def _worker_load(self, asset_id: AssetId, full_path: Path) -> None:
        """
        Load asset on background thread.
        """
        try:
            ext = full_path.suffix.lower()
            importer = self._importers.get(ext)
            if not importer:
                raise ValueError(f"No importer for {ext}")

            data = importer.import_file(full_path)
        except Exception as e:
            logger.error("Failed to load %s: %s", full_path, e)
            self._loaded_queue.put((asset_id, None, e))
            return
        self._loaded_queue.put((asset_id, data, None))

    def update(self) -> List[AssetId]:
        """
        Drain finished loads into the registry.
        Return the ids that loaded successfully since the last call.
        """
        loaded_ids = []
        while not self._loaded_queue.empty():
            asset_id, data, exc = self._loaded_queue.get()
            if exc is not None:
                self.registry.store_failure(asset_id, exc)
                continue
            self.registry.store(asset_id, data)
            loaded_ids.append(asset_id)

        return loaded_ids

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
