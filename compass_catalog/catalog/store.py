"""EventCatalog store: read and write catalog records as markdown files.

Records are markdown documents with YAML front matter laid out the way
EventCatalog expects::

    domains/<id>/index.mdx
    domains/<id>/versioned/<version>/index.mdx
    services/<id>/index.mdx
    services/<id>/versioned/<version>/index.mdx
    teams/<id>.mdx
    users/<id>.mdx
"""

from __future__ import annotations

import logging
import re
import shutil
from pathlib import Path
from typing import Any, Literal, Protocol, TypeVar

import yaml
from pydantic import BaseModel

from ..exceptions import CatalogWriteError
from ..models import Domain, ResourcePointer, Service, Team, User

logger = logging.getLogger(__name__)

Format = Literal["md", "mdx"]
RecordT = TypeVar("RecordT", bound=BaseModel)

_FRONT_MATTER = re.compile(r"\A---\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)(.*)\Z", re.DOTALL)


class CatalogStore(Protocol):
    """Operations the generator needs from the catalog."""

    def get_domain(self, id: str, version: str | None = None) -> Domain | None: ...

    def write_domain(self, domain: Domain, override: bool = False, format: Format = "mdx") -> None: ...

    def version_domain(self, id: str) -> None: ...

    def add_service_to_domain(self, id: str, service: ResourcePointer, version: str | None = None) -> None: ...

    def get_service(self, id: str, version: str | None = None) -> Service | None: ...

    def write_service(self, service: Service, override: bool = False, format: Format = "mdx") -> None: ...

    def version_service(self, id: str) -> None: ...

    def get_team(self, id: str) -> Team | None: ...

    def write_team(self, team: Team, override: bool = False, format: Format = "mdx") -> None: ...

    def get_user(self, id: str) -> User | None: ...

    def write_user(self, user: User, override: bool = False, format: Format = "mdx") -> None: ...


def parse_document(text: str) -> tuple[dict[str, Any], str]:
    """Split a markdown document into (front matter, body)."""
    match = _FRONT_MATTER.match(text)
    if not match:
        return {}, text.strip()
    front = yaml.safe_load(match.group(1)) or {}
    if not isinstance(front, dict):
        front = {}
    return front, match.group(2).strip()


def render_document(record: BaseModel) -> str:
    """Serialize a record as YAML front matter followed by its markdown."""
    # mode="json" ensures Enums are serialized as strings
    data = record.model_dump(exclude_none=True, mode="json")
    markdown = data.pop("markdown", "") or ""
    front = yaml.dump(
        data,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )
    return f"---\n{front}---\n\n{markdown}\n"


class FileCatalog:
    """Catalog store backed by an EventCatalog project directory."""

    KIND_DIRS = {
        "domain": "domains",
        "service": "services",
        "team": "teams",
        "user": "users",
    }
    EXTENSIONS = ("mdx", "md")
    VERSIONED_DIR = "versioned"

    def __init__(self, project_dir: str | Path):
        self.root = Path(project_dir)

    # -- paths ---------------------------------------------------------------

    def _kind_dir(self, kind: str) -> Path:
        return self.root / self.KIND_DIRS[kind]

    def _find(self, stem: Path) -> Path | None:
        """Find ``<stem>.mdx`` or ``<stem>.md``."""
        for ext in self.EXTENSIONS:
            candidate = stem.with_name(f"{stem.name}.{ext}")
            if candidate.exists():
                return candidate
        return None

    def _latest_stem(self, kind: str, id: str) -> Path:
        return self._kind_dir(kind) / id / "index"

    def _versioned_stem(self, kind: str, id: str, version: str) -> Path:
        return self._kind_dir(kind) / id / self.VERSIONED_DIR / version / "index"

    # -- generic read/write ----------------------------------------------------

    def _read(self, path: Path | None, model: type[RecordT]) -> RecordT | None:
        if path is None:
            return None
        try:
            front, body = parse_document(path.read_text(encoding="utf-8"))
            return model.model_validate({**front, "markdown": body})
        except (OSError, yaml.YAMLError, ValueError) as e:
            logger.warning(f"Failed to read catalog file {path}: {e}")
            return None

    def _write(self, stem: Path, record: BaseModel, override: bool, format: Format, label: str) -> Path:
        existing = self._find(stem)
        if existing is not None:
            if not override:
                raise CatalogWriteError(f"Failed to write {label}: it already exists (use override)")
            existing.unlink()

        path = stem.with_name(f"{stem.name}.{format}")
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(render_document(record), encoding="utf-8")
        logger.debug(f"Wrote {label} to {path}")
        return path

    def _get_versioned(self, kind: str, id: str, version: str | None, model: type[RecordT]) -> RecordT | None:
        latest = self._read(self._find(self._latest_stem(kind, id)), model)
        if version is None or version == "latest":
            return latest
        if latest is not None and getattr(latest, "version", None) == version:
            return latest
        return self._read(self._find(self._versioned_stem(kind, id, version)), model)

    def _version(self, kind: str, id: str, model: type[RecordT]) -> None:
        """Move the latest record (and its sibling files) under versioned/<version>/."""
        folder = self._kind_dir(kind) / id
        latest = self._read(self._find(self._latest_stem(kind, id)), model)
        if latest is None:
            return
        target = folder / self.VERSIONED_DIR / latest.version
        target.mkdir(parents=True, exist_ok=True)
        for item in folder.iterdir():
            if item.name == self.VERSIONED_DIR:
                continue
            shutil.move(str(item), str(target / item.name))
        logger.debug(f"Versioned {kind} {id} as {latest.version}")

    # -- domains ---------------------------------------------------------------

    def get_domain(self, id: str, version: str | None = None) -> Domain | None:
        return self._get_versioned("domain", id, version, Domain)

    def write_domain(self, domain: Domain, override: bool = False, format: Format = "mdx") -> None:
        self._write(self._latest_stem("domain", domain.id), domain, override, format, f"domain {domain.id}")

    def version_domain(self, id: str) -> None:
        self._version("domain", id, Domain)

    def add_service_to_domain(self, id: str, service: ResourcePointer, version: str | None = None) -> None:
        """Reference a service from a domain, once."""
        path = self._find(self._latest_stem("domain", id))
        domain = self._read(path, Domain)
        if version and version != "latest" and (domain is None or domain.version != version):
            path = self._find(self._versioned_stem("domain", id, version))
            domain = self._read(path, Domain)
        if domain is None or path is None:
            raise CatalogWriteError(f"Domain {id} (v{version}) not found")

        if any(s.id == service.id and s.version == service.version for s in domain.services):
            return
        domain.services.append(service)
        path.write_text(render_document(domain), encoding="utf-8")

    # -- services --------------------------------------------------------------

    def get_service(self, id: str, version: str | None = None) -> Service | None:
        return self._get_versioned("service", id, version, Service)

    def write_service(self, service: Service, override: bool = False, format: Format = "mdx") -> None:
        self._write(self._latest_stem("service", service.id), service, override, format, f"service {service.id}")

    def version_service(self, id: str) -> None:
        self._version("service", id, Service)

    # -- teams and users -------------------------------------------------------

    def get_team(self, id: str) -> Team | None:
        return self._read(self._find(self._kind_dir("team") / id), Team)

    def write_team(self, team: Team, override: bool = False, format: Format = "mdx") -> None:
        self._write(self._kind_dir("team") / team.id, team, override, format, f"team {team.id}")

    def get_user(self, id: str) -> User | None:
        return self._read(self._find(self._kind_dir("user") / id), User)

    def write_user(self, user: User, override: bool = False, format: Format = "mdx") -> None:
        self._write(self._kind_dir("user") / user.id, user, override, format, f"user {user.id}")
