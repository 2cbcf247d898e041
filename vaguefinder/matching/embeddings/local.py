"""Local embedding provider using sentence-transformers."""

import asyncio
import fnmatch
import logging
from typing import Any

import numpy as np
from huggingface_hub import HfApi, hf_hub_download, snapshot_download

from vaguefinder.matching.embeddings.base import EmbeddingProvider, ProgressCallback
from vaguefinder.errors import ProviderLoadError
from vaguefinder.models.enums import LoadStatus
from vaguefinder.models.progress import ProgressSnapshot

logger = logging.getLogger(__name__)


class LocalEmbeddingProvider(EmbeddingProvider):
    """
    Local embedding provider using sentence-transformers.

    Runs entirely on this machine, no API key required.
    Uses gte-small by default (384 dim, mean pooling).
    """

    name = "local"

    # Recommended models
    MODELS = {
        "gte": "thenlper/gte-small",           # 384 dim, default
        "fast": "all-MiniLM-L6-v2",            # 384 dim, fastest
        "balanced": "all-mpnet-base-v2",       # 768 dim, good quality
        "bge": "BAAI/bge-small-en-v1.5",       # 384 dim, great for retrieval
    }

    # Weights in formats sentence-transformers never reads
    IGNORE_PATTERNS = [
        "onnx/*",
        "openvino/*",
        "*.onnx",
        "*.h5",
        "*.msgpack",
        "*.ot",
        "tf_model*",
        "flax_model*",
        "rust_model*",
        ".gitattributes",
        "README.md",
    ]

    def __init__(
        self,
        model_name: str = "thenlper/gte-small",
        device: str = "cpu",
        revision: str | None = None,
    ):
        """
        Initialize local embedding provider.

        Args:
            model_name: HuggingFace model name or preset ("gte", "fast", "balanced", "bge").
            device: Device to run on ("cpu", "cuda", "mps").
            revision: Optional Hub revision to pin.
        """
        super().__init__()
        self.model_name = self.MODELS.get(model_name, model_name)
        self.device = device
        self.revision = revision
        self._model: Any = None

    def _select_files(self, siblings) -> list[tuple[str, int]]:
        """Pick the repository files the model needs, with their sizes."""
        files = [
            (s.rfilename, s.size or 0)
            for s in siblings
            if not any(fnmatch.fnmatch(s.rfilename, p) for p in self.IGNORE_PATTERNS)
        ]
        names = {name for name, _ in files}
        if any(name.endswith(".safetensors") for name in names):
            files = [(n, size) for n, size in files if not n.endswith(".bin")]
        return files

    def _download(self, on_progress: ProgressCallback | None) -> str:
        """Fetch model files one at a time, reporting cumulative bytes."""
        info = HfApi().model_info(self.model_name, revision=self.revision, files_metadata=True)
        files = self._select_files(info.siblings or [])
        bytes_total = sum(size for _, size in files)
        bytes_loaded = 0

        for filename, size in files:
            self._emit(on_progress, ProgressSnapshot(
                status=LoadStatus.INITIATE,
                resource_name=self.model_name,
                resource_file=filename,
            ))
            self._emit(on_progress, ProgressSnapshot(
                status=LoadStatus.DOWNLOAD,
                resource_name=self.model_name,
                resource_file=filename,
                bytes_total=size,
            ))
            hf_hub_download(self.model_name, filename, revision=self.revision)
            bytes_loaded += size
            self._emit(on_progress, ProgressSnapshot(
                status=LoadStatus.PROGRESS,
                resource_name=self.model_name,
                resource_file=filename,
                progress_fraction=bytes_loaded / bytes_total if bytes_total else 1.0,
                bytes_loaded=bytes_loaded,
                bytes_total=bytes_total,
            ))
            self._emit(on_progress, ProgressSnapshot(
                status=LoadStatus.DONE,
                resource_name=self.model_name,
                resource_file=filename,
                progress_fraction=1.0,
                bytes_loaded=size,
                bytes_total=size,
            ))

        # Everything is cached now; this only resolves the snapshot folder
        return snapshot_download(
            self.model_name,
            revision=self.revision,
            allow_patterns=[name for name, _ in files],
        )

    def _build_model(self, path: str):
        from sentence_transformers import SentenceTransformer

        return SentenceTransformer(path, device=self.device)

    def _load_sync(self, on_progress: ProgressCallback | None) -> None:
        path = self._download(on_progress)
        self._model = self._build_model(path)
        self._dimension = self._model.get_sentence_embedding_dimension()

    async def load(self, on_progress: ProgressCallback | None = None) -> None:
        """Download the model (if needed) and load it onto the device."""
        if self._loaded:
            return

        logger.info("Loading %s on %s", self.model_name, self.device)
        try:
            await asyncio.to_thread(self._load_sync, on_progress)
        except ImportError as e:
            raise ProviderLoadError(
                "sentence-transformers not installed. "
                "Install with: pip install 'vaguefinder[local]'",
                details={"model": self.model_name},
            ) from e
        except Exception as e:
            raise ProviderLoadError(
                f"Unable to load model {self.model_name} due to {e}",
                details={"model": self.model_name},
            ) from e

        self._loaded = True
        self._emit(on_progress, ProgressSnapshot(
            status=LoadStatus.READY,
            resource_name=self.model_name,
            progress_fraction=1.0,
        ))
        logger.info("Loaded %s (%s dim)", self.model_name, self._dimension)

    def _encode(self, text: str) -> list[float]:
        embedding = self._model.encode(
            text,
            convert_to_numpy=True,
            show_progress_bar=False,
            normalize_embeddings=True,  # L2 normalize for cosine similarity
        )
        return embedding.astype(np.float64).tolist()

    async def embed(self, text: str) -> list[float]:
        """Generate an embedding locally."""
        return await asyncio.to_thread(self._encode, text)

    async def aclose(self) -> None:
        self._model = None
        await super().aclose()
