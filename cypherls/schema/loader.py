"""
Schema loading.

The schema snapshot used for completion comes from the first of:

1. ``initializationOptions.schema``: the schema itself, inline;
2. ``initializationOptions.schemaFile``: a path, relative to the workspace
   root unless absolute;
3. ``.cypherls/schema.yml`` (or ``.yaml`` / ``.json``) in the workspace root.

Schema files are YAML. JSON is a subset of YAML, so ``.json`` files go
through the same loader.
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import TYPE_CHECKING, Any, Mapping
from urllib.parse import unquote, urlparse

import yaml
from lsprotocol.types import (
    DidSaveTextDocumentParams,
    LogMessageParams,
    MessageType,
)

from cypherls.schema.db_schema import DbSchema

if TYPE_CHECKING:
    from cypherls.lsp.cypher_language_server import CypherLanguageServer


SCHEMA_DIR = ".cypherls"
SCHEMA_FILE_NAMES = ("schema.yml", "schema.yaml", "schema.json")


class SchemaLoadError(Exception):
    """A schema file could not be read or does not describe a schema."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Cannot load schema from {path}: {reason}")
        self.path = path
        self.reason = reason


def load_schema_file(path: Path) -> DbSchema:
    """
    Read a YAML (or JSON) schema file.

    An empty file is an empty schema.

    Raises:
        SchemaLoadError: If the file cannot be read, is not valid YAML, or
            does not have the shape of a schema.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise SchemaLoadError(path, e.strerror or str(e)) from e
    except yaml.YAMLError as e:
        raise SchemaLoadError(path, f"invalid YAML: {e}") from e

    try:
        return DbSchema.from_dict(data)
    except TypeError as e:
        raise SchemaLoadError(path, str(e)) from e


def find_schema_file(workspace_root: Path | None) -> Path | None:
    """Locate the schema file kept in the workspace, if any."""
    if workspace_root is None:
        return None

    for name in SCHEMA_FILE_NAMES:
        candidate = workspace_root / SCHEMA_DIR / name
        if candidate.is_file():
            return candidate
    return None


def uri_to_path(uri: str) -> Path:
    return Path(unquote(urlparse(uri).path))


def _file_hash(path: Path) -> str:
    return hashlib.sha256(path.read_bytes()).hexdigest()


class SchemaStore:
    """
    Holds the schema snapshot for the running server.

    The snapshot is replaced, never mutated, so completion requests can keep
    using the one they started with. When the schema comes from a file,
    saving that file from the editor reloads it.

    Usage:
        store = SchemaStore(server)
        store.load(params.initialization_options, workspace_root)
        store.register_text_sync_hooks()

        resolve_completions(text, position, store.schema)
    """

    def __init__(self, server: CypherLanguageServer | None = None) -> None:
        self.server = server
        self.schema = DbSchema()
        self.schema_file: Path | None = None
        self._file_hash: str | None = None

    def load(
        self,
        initialization_options: Any = None,
        workspace_root: Path | None = None,
    ) -> DbSchema:
        """Load the schema from the first configured source."""
        options = (
            initialization_options
            if isinstance(initialization_options, Mapping)
            else {}
        )

        inline = options.get("schema")
        if inline is not None:
            try:
                self.schema = DbSchema.from_dict(inline)
            except TypeError as e:
                self._log(f"Ignoring inline schema: {e}", MessageType.Warning)
                self.schema = DbSchema()
            else:
                self._log("Loaded schema from initialization options")
            return self.schema

        configured = options.get("schemaFile") or options.get("schema_file")
        if configured:
            path = Path(configured).expanduser()
            if not path.is_absolute() and workspace_root is not None:
                path = workspace_root / path
        else:
            path = find_schema_file(workspace_root)

        if path is None:
            self._log("No schema configured, completing keywords only")
            return self.schema

        self.schema_file = path
        self.reload()
        return self.schema

    def reload(self) -> bool:
        """
        Re-read the schema file.

        Returns True if the schema changed. On error the empty schema is used
        and the error is logged.
        """
        if self.schema_file is None:
            return False

        try:
            new_hash = _file_hash(self.schema_file)
        except OSError:
            new_hash = None

        if new_hash is not None and new_hash == self._file_hash:
            return False

        try:
            self.schema = load_schema_file(self.schema_file)
        except SchemaLoadError as e:
            self._log(str(e), MessageType.Error)
            self.schema = DbSchema()
            self._file_hash = None
            return True

        self._file_hash = new_hash
        self._log(
            f"Loaded schema from {self.schema_file}: "
            f"{len(self.schema.labels)} labels, "
            f"{len(self.schema.relationship_types)} relationship types, "
            f"{len(self.schema.procedure_signatures)} procedures, "
            f"{len(self.schema.function_signatures)} functions"
        )
        return True

    def register_text_sync_hooks(self) -> None:
        if self.server is None or self.server.text_sync_manager is None:
            return
        self.server.text_sync_manager.add_on_save_hook(self._on_schema_file_saved)

    async def _on_schema_file_saved(self, params: DidSaveTextDocumentParams) -> None:
        if self.schema_file is None:
            return
        saved = uri_to_path(params.text_document.uri)
        if saved.resolve() == self.schema_file.resolve():
            self.reload()

    def _log(self, message: str, level: MessageType = MessageType.Info) -> None:
        if self.server is None:
            return
        self.server.window_log_message(LogMessageParams(type=level, message=message))
