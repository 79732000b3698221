# File: scribe/features/engines/service/registry.py
import logging
from dataclasses import replace
from typing import Dict, List, Optional, Any, Union

from scribe.core.common.enums import EngineKind, EngineStatus
from scribe.core.common.errors import InvalidEngineError, EngineRegistryError
from ..data.defaults import BUILTIN_ENGINES, BUILTIN_ENGINE_IDS, ASSEMBLYAI_ID, LOCAL_WHISPER_ID
from ..data.repository import SqlEngineRepo
from ..domain.interfaces import IEngineRepository, ISpeechEngine, ILocalRecognizer
from ..domain.models import EngineDescriptor

logger = logging.getLogger(__name__)

EngineClient = Union[ISpeechEngine, ILocalRecognizer]


def _build_assemblyai(descriptor: EngineDescriptor) -> EngineClient:
    from ..data.assemblyai_adapter import AssemblyAIAdapter
    return AssemblyAIAdapter(config=descriptor.config)


def _build_whisper(descriptor: EngineDescriptor) -> EngineClient:
    from ..data.whisper_adapter import WhisperAdapter
    return WhisperAdapter(config=descriptor.config)


# provider key (descriptor.config["provider"]) -> adapter factory
_PROVIDERS = {
    ASSEMBLYAI_ID: _build_assemblyai,
    LOCAL_WHISPER_ID: _build_whisper,
}


class EngineRegistry:
    """
    Catalogue of speech-to-text engines.
    Backed by the stt_engines table; load() seeds the built-ins at process start.
    Explicitly constructed and injected, never a module-level list.
    """

    def __init__(self, repo: Optional[IEngineRepository] = None):
        self.repo = repo or SqlEngineRepo()
        self._clients: Dict[str, EngineClient] = {}

    def load(self) -> List[EngineDescriptor]:
        """Ensures every built-in engine exists in the store."""
        for builtin in BUILTIN_ENGINES:
            if self.repo.get(builtin.id) is None:
                logger.info(f"Registry: seeding built-in engine '{builtin.id}'")
                self.repo.add(builtin)
        engines = self.repo.list_all()
        logger.info(f"Registry loaded with {len(engines)} engines.")
        return engines

    # --- Reads ---

    def list_engines(self) -> List[EngineDescriptor]:
        return self.repo.list_all()

    def get(self, engine_id: str) -> Optional[EngineDescriptor]:
        return self.repo.get(engine_id)

    def require_active(self, engine_id: str) -> EngineDescriptor:
        engine = self.repo.get(engine_id)
        if engine is None:
            raise InvalidEngineError(engine_id, "unknown")
        if not engine.is_active:
            raise InvalidEngineError(engine_id, "inactive")
        return engine

    # --- Writes ---

    def register(self,
                 engine_id: str,
                 display_name: str,
                 kind: Union[EngineKind, str],
                 status: Union[EngineStatus, str, None] = None,
                 config: Optional[Dict[str, Any]] = None) -> EngineDescriptor:
        if not engine_id or not display_name or not kind:
            raise EngineRegistryError("Missing required fields: id, name, kind")
        kind = self._coerce(EngineKind, kind, "kind")
        status = self._coerce(EngineStatus, status, "status") if status else EngineStatus.INACTIVE

        if self.repo.get(engine_id) is not None:
            raise EngineRegistryError(f"Engine '{engine_id}' already exists")

        descriptor = EngineDescriptor(
            id=engine_id,
            display_name=display_name,
            kind=kind,
            status=status,
            config=dict(config or {})
        )
        logger.info(f"Registry: registered engine '{engine_id}' ({kind.value}, {status.value})")
        return self.repo.add(descriptor)

    def update(self,
               engine_id: str,
               display_name: Optional[str] = None,
               status: Union[EngineStatus, str, None] = None,
               config: Optional[Dict[str, Any]] = None) -> EngineDescriptor:
        engine = self.repo.get(engine_id)
        if engine is None:
            raise InvalidEngineError(engine_id, "unknown")

        changes = {}
        if display_name:
            changes["display_name"] = display_name
        if status:
            changes["status"] = self._coerce(EngineStatus, status, "status")
        if config:
            changes["config"] = {**engine.config, **config}

        updated = self.repo.save(replace(engine, **changes))
        # Config may have changed the adapter wiring.
        self._clients.pop(engine_id, None)
        return updated

    def delete(self, engine_id: str) -> EngineDescriptor:
        engine = self.repo.get(engine_id)
        if engine is None:
            raise InvalidEngineError(engine_id, "unknown")
        if engine.is_builtin or engine_id in BUILTIN_ENGINE_IDS:
            raise EngineRegistryError(f"Cannot delete built-in engine '{engine_id}'")
        self.repo.delete(engine_id)
        self._clients.pop(engine_id, None)
        logger.info(f"Registry: deleted engine '{engine_id}'")
        return engine

    def record_usage(self, engine_id: str, audio_seconds: float, wall_seconds: Optional[float]) -> EngineDescriptor:
        """Adds one finished job to the engine's cumulative stats."""
        engine = self.repo.apply_usage(engine_id, audio_seconds, wall_seconds)
        if engine is None:
            raise InvalidEngineError(engine_id, "unknown")
        return engine

    # --- Clients ---

    def bind_client(self, engine_id: str, client: EngineClient) -> None:
        """Overrides the adapter used for an engine (tests, custom deployments)."""
        self._clients[engine_id] = client

    def client_for(self, engine_id: str, require_active: bool = True) -> EngineClient:
        """
        Adapter for an engine. Polling passes require_active=False so jobs
        already in flight can finish after an engine is switched off.
        """
        if require_active:
            engine = self.require_active(engine_id)
        else:
            engine = self.repo.get(engine_id)
            if engine is None:
                raise InvalidEngineError(engine_id, "unknown")

        if engine_id in self._clients:
            return self._clients[engine_id]

        provider = engine.config.get("provider", engine.id)
        factory = _PROVIDERS.get(provider)
        if factory is None:
            raise InvalidEngineError(engine_id, f"no adapter for provider '{provider}'")

        client = factory(engine)
        self._clients[engine_id] = client
        return client

    @staticmethod
    def _coerce(enum_cls, value, field_name):
        try:
            return enum_cls(value)
        except ValueError:
            allowed = ", ".join(f'"{m.value}"' for m in enum_cls)
            raise EngineRegistryError(f"Invalid {field_name} '{value}'. Must be one of {allowed}")
