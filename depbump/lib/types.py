"""
Shared data types for depbump.

This module contains dataclasses used across multiple modules to avoid
circular imports.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class PackageSpec:
    """A package pinned to an exact version, e.g. @scope/ui@6.3.56."""
    name: str
    version: str

    def __str__(self) -> str:
        return f"{self.name}@{self.version}"

    def to_dict(self) -> dict:
        return {"name": self.name, "version": self.version}

    @classmethod
    def from_dict(cls, data: dict) -> "PackageSpec":
        return cls(name=data["name"], version=data["version"])


@dataclass(frozen=True)
class UpdateTarget:
    """One (project, branch) pair scheduled for update."""
    project_name: str
    branch_name: str


@dataclass
class Preset:
    """A saved selection that can be replayed in a later run.

    origin_branches keeps the branch descriptors (as API-shaped dicts) that
    were offered when the preset was created.
    """
    packages: list[PackageSpec]
    branches: list[str]
    origin_branches: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "packages": [p.to_dict() for p in self.packages],
            "branches": list(self.branches),
            "originBranches": [dict(b) for b in self.origin_branches],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Preset":
        return cls(
            packages=[PackageSpec.from_dict(p) for p in data.get("packages", [])],
            branches=list(data.get("branches", [])),
            origin_branches=[dict(b) for b in data.get("originBranches", [])],
        )
