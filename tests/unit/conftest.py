"""Shared fixtures for unit tests."""

from __future__ import annotations

import copy
from collections import Counter
from typing import TYPE_CHECKING, Any

import pytest

from octo_cmdlets.client.errors import OctopusNotFoundError
from octo_cmdlets.config import load
from octo_cmdlets.core import OctopusProvider, ResourceCache
from octo_cmdlets.engine import connect, disconnect, reset_process_cache
from octo_cmdlets.resources import ResourceKind

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from octo_cmdlets.config.schema import Config

_OCTO_ENV_VARS = (
    "OCTO_HOST",
    "OCTO_API_KEY",
    "OCTO_VERIFY_SSL",
    "OCTO_TIMEOUT",
    "OCTO_CACHE_TTL",
    "OCTO_LOG",
)

_ID_PREFIXES: dict[ResourceKind, str] = {
    ResourceKind.PROJECT: "Projects",
    ResourceKind.PROJECT_GROUP: "ProjectGroups",
    ResourceKind.ENVIRONMENT: "Environments",
    ResourceKind.MACHINE: "Machines",
    ResourceKind.LIBRARY_VARIABLE_SET: "LibraryVariableSets",
}


@pytest.fixture(autouse=True)
def _clean_octo_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove OCTO_* env vars so unit tests don't leak host config."""
    for var in _OCTO_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def _no_session() -> None:
    disconnect()
    reset_process_cache()


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeOctopusServer:
    """In-memory stand-in for :class:`OctopusClient`.

    Stores raw PascalCase payloads per collection, answers the same paths the
    repositories request and records every call.
    """

    def __init__(self, page_size: int = 30) -> None:
        self.collections: dict[str, list[dict[str, Any]]] = {
            kind.value: [] for kind in ResourceKind
        }
        self.calls: list[tuple[str, str]] = []
        self.failures: dict[tuple[str, str], Exception] = {}
        self.page_size = page_size
        self._ids: Counter[ResourceKind] = Counter()

    # -- seeding ------------------------------------------------------------

    def add(self, kind: ResourceKind, name: str, **fields: Any) -> dict[str, Any]:
        self._ids[kind] += 1
        resource_id = fields.pop("Id", None) or f"{_ID_PREFIXES[kind]}-{self._ids[kind]}"
        item: dict[str, Any] = {"Id": resource_id, "Name": name, **fields}
        item["Links"] = {"Self": f"/api/{kind.value}/{resource_id}"}
        if kind in (ResourceKind.PROJECT, ResourceKind.LIBRARY_VARIABLE_SET):
            set_id = f"variableset-{resource_id}"
            item["VariableSetId"] = set_id
            item["Links"]["Variables"] = f"/api/variables/{set_id}"
            self.collections[ResourceKind.VARIABLE_SET.value].append(
                {
                    "Id": set_id,
                    "OwnerId": resource_id,
                    "Version": 0,
                    "Variables": [],
                    "Links": {"Self": f"/api/variables/{set_id}"},
                }
            )
        self.collections[kind.value].append(item)
        return item

    def variable_set(self, owner_id: str) -> dict[str, Any]:
        return self._item(ResourceKind.VARIABLE_SET.value, f"variableset-{owner_id}")

    def add_variable(self, owner_id: str, name: str, value: str = "", **fields: Any) -> None:
        variables = self.variable_set(owner_id)["Variables"]
        variables.append(
            {
                "Id": f"var-{owner_id}-{len(variables) + 1}",
                "Name": name,
                "Value": value,
                "IsSensitive": False,
                "Scope": {},
                **fields,
            }
        )

    def fail(self, method: str, path: str, exc: Exception) -> None:
        self.failures[(method, path)] = exc

    def count(self, method: str, path: str) -> int:
        return self.calls.count((method, path))

    # -- transport ----------------------------------------------------------

    def _record(self, method: str, path: str) -> tuple[str, str]:
        self.calls.append((method, path))
        exc = self.failures.get((method, path))
        if exc is not None:
            raise exc
        collection, _, rest = path.removeprefix("/api/").partition("/")
        return collection, rest

    def _item(self, collection: str, resource_id: str) -> dict[str, Any]:
        for item in self.collections[collection]:
            if item["Id"] == resource_id:
                return item
        raise OctopusNotFoundError(404, f"{resource_id} not found", url=resource_id)

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        collection, rest = self._record("GET", path)
        items = self.collections[collection]
        if rest == "all":
            return copy.deepcopy(items)
        if not rest:
            params = params or {}
            partial = str(params.get("partialName", "")).casefold()
            skip = int(params.get("skip", 0))
            take = int(params.get("take", self.page_size))
            matches = [i for i in items if partial in i["Name"].casefold()]
            page = matches[skip : skip + take]
            links = {"Page.Next": f"/api/{collection}?skip={skip + take}"}
            return {
                "Items": copy.deepcopy(page),
                "Links": links if skip + take < len(matches) else {},
            }
        return copy.deepcopy(self._item(collection, rest))

    def put(self, path: str, json: Any = None) -> Any:
        collection, rest = self._record("PUT", path)
        items = self.collections[collection]
        current = self._item(collection, rest)
        stored = copy.deepcopy(json)
        if "Version" in current:
            stored["Version"] = current["Version"] + 1
        items[items.index(current)] = stored
        return copy.deepcopy(stored)

    def delete(self, path: str) -> Any:
        collection, rest = self._record("DELETE", path)
        self.collections[collection].remove(self._item(collection, rest))


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def server() -> FakeOctopusServer:
    return FakeOctopusServer()


@pytest.fixture
def provider(server: FakeOctopusServer, clock: FakeClock) -> OctopusProvider:
    """Provider around the fake server, stored as the process session."""
    return connect(OctopusProvider.from_client(server, cache=ResourceCache(ttl=60, clock=clock)))


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[..., Config]:
    """Factory fixture: write YAML + optional .env, return loaded Config."""

    def _make(yaml_str: str, *, dotenv: str | None = None) -> Config:
        (tmp_path / "octo.yaml").write_text(yaml_str)
        if dotenv is not None:
            (tmp_path / ".env").write_text(dotenv)
        return load(tmp_path / "octo.yaml")

    return _make
