from dataclasses import dataclass, field
from typing import Any, Dict, List

YAML_EXTENSIONS = (".yml", ".yaml")


class TemplateFields:
    """Read-only field set for templates; only the event fields resolve, never mapping methods."""

    __slots__ = ("_fields",)

    def __init__(self, fields: Dict[str, str]):
        object.__setattr__(self, "_fields", dict(fields))

    def __getattr__(self, name: str) -> str:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._fields[name]
        except KeyError:
            raise AttributeError(name) from None

    def __getitem__(self, name: str) -> str:
        return self._fields[name]

    def __setattr__(self, name, value):
        raise AttributeError("template fields are read-only")


@dataclass(frozen=True)
class RepoInfo:
    name: str = ""
    owner: str = ""
    full_name: str = ""
    clone_url: str = ""
    default_branch: str = ""

    @property
    def namespace(self) -> str:
        return self.owner

    @classmethod
    def from_payload(cls, repo: Dict[str, Any]):
        return cls(
            name=repo.get("name") or "",
            owner=repo.get("owner") or "",
            full_name=repo.get("full_name") or "",
            clone_url=repo.get("clone_url") or "",
            default_branch=repo.get("default_branch") or "",
        )


@dataclass(frozen=True)
class PipelineInfo:
    branch: str = ""
    commit: str = ""
    ref: str = ""

    @classmethod
    def from_payload(cls, pipeline: Dict[str, Any]):
        return cls(
            branch=pipeline.get("branch") or "",
            commit=pipeline.get("commit") or "",
            ref=pipeline.get("ref") or "",
        )


@dataclass(frozen=True)
class EventContext:
    """Snapshot of the repository and pipeline that triggered a config request."""
    repo: RepoInfo = field(default_factory=RepoInfo)
    pipeline: PipelineInfo = field(default_factory=PipelineInfo)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]):
        if not isinstance(payload, dict):
            raise ValueError("request body must be a JSON object")
        repo = payload.get("repo") or {}
        pipeline = payload.get("pipeline") or {}
        if not isinstance(repo, dict) or not isinstance(pipeline, dict):
            raise ValueError("'repo' and 'pipeline' must be JSON objects")
        return cls(repo=RepoInfo.from_payload(repo), pipeline=PipelineInfo.from_payload(pipeline))

    def template_data(self) -> Dict[str, Any]:
        repo = TemplateFields({
            "name": self.repo.name,
            "owner": self.repo.owner,
            "namespace": self.repo.namespace,
            "full_name": self.repo.full_name,
            "clone_url": self.repo.clone_url,
            "default_branch": self.repo.default_branch,
        })
        pipeline = TemplateFields({
            "branch": self.pipeline.branch,
            "commit": self.pipeline.commit,
            "ref": self.pipeline.ref,
        })
        return {
            "repo": repo,
            "pipeline": pipeline,
            "owner": self.repo.owner,
            "namespace": self.repo.namespace,
            "branch": self.pipeline.branch,
            "commit": self.pipeline.commit,
            "ref": self.pipeline.ref,
        }


@dataclass(frozen=True)
class ResolvedCoordinates:
    namespace: str
    repo: str
    branch: str
    path: str


@dataclass(frozen=True)
class DirectoryEntry:
    """One item of a backend directory listing, with kind normalized to 'file' or 'dir'."""
    name: str
    path: str
    kind: str

    def is_yaml_file(self) -> bool:
        return self.kind == "file" and self.name.endswith(YAML_EXTENSIONS)


@dataclass(frozen=True)
class FileRecord:
    name: str
    path: str
    content: str
    kind: str = "file"


@dataclass(frozen=True)
class ConfigDocument:
    name: str
    content: str

    def to_dict(self) -> Dict[str, str]:
        # Woodpecker reads the pipeline body from "data"
        return {"name": self.name, "data": self.content}


@dataclass(frozen=True)
class ConfigurationBundle:
    configs: List[ConfigDocument] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.configs

    def to_dict(self) -> Dict[str, Any]:
        return {"configs": [config.to_dict() for config in self.configs]}
