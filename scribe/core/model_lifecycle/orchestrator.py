# File: scribe/core/model_lifecycle/orchestrator.py

import gc
import logging
from threading import Lock
from .types import ModelType

logger = logging.getLogger(__name__)


class ModelOrchestrator:
    """
    Singleton Resource Manager.
    Keeps at most one local recognition model resident, so the out-of-band
    worker can process transcripts back to back without reloading weights.
    """
    _instance = None
    _lock = Lock()

    def __new__(cls):
        with cls._lock:
            if cls._instance is None:
                cls._instance = super(ModelOrchestrator, cls).__new__(cls)
                cls._instance._current_key = None
                cls._instance._loaded_model = None
        return cls._instance

    def request_model(self, model_type: ModelType, variant: str, loader_func):
        """
        Request usage of a model. If it's not loaded, unload current and load requested.

        Args:
            model_type: The enum identifier for the model family.
            variant: Size/checkpoint within the family (e.g. 'medium').
            loader_func: Callable returning the loaded model. Only called on a miss.
        """
        key = (model_type, variant)
        with self._lock:
            if self._current_key == key and self._loaded_model is not None:
                return self._loaded_model

            if self._loaded_model is not None:
                self._unload()

            logger.info(f"Orchestrator: Loading {model_type.value}:{variant}...")
            try:
                self._loaded_model = loader_func()
                self._current_key = key
                return self._loaded_model
            except Exception as e:
                logger.error(f"Failed to load {model_type.value}:{variant}: {e}")
                raise

    def release(self):
        """Explicitly frees the resident model (e.g. when the worker goes idle)."""
        with self._lock:
            if self._loaded_model is not None:
                self._unload()

    def _unload(self):
        """Forcefully removes the current model from memory."""
        if self._current_key:
            logger.info(f"Orchestrator: Unloading {self._current_key[0].value}:{self._current_key[1]}...")

        self._loaded_model = None
        self._current_key = None

        gc.collect()
        try:
            import torch
        except ImportError:
            return
        if torch.cuda.is_available():
            torch.cuda.empty_cache()

    def get_current_model_type(self):
        """Helper for testing state."""
        return self._current_key[0] if self._current_key else None
