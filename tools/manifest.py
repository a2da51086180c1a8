"""
Decoding of synthesized cloud assemblies.

A cloud assembly (``cdk.out/``) has an index, ``manifest.json``, that lists
artifacts. Stack artifacts point at CloudFormation templates whose
``Resources`` section is decoded here into an ordered resource manifest.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from tools.errors import ManifestParseError, ManifestReadError

logger = logging.getLogger(__name__)

ASSET_MANIFEST_ARTIFACT = "cdk:asset-manifest"
STACK_ARTIFACT = "aws:cloudformation:stack"


class ResourceDefinition(BaseModel):
    """A single CloudFormation resource."""

    model_config = ConfigDict(populate_by_name=True)

    type_tag: str = Field(alias="Type")
    properties: Dict[str, Any] = Field(default_factory=dict, alias="Properties")
    depends_on: List[str] = Field(default_factory=list, alias="DependsOn")

    @field_validator("properties", mode="before")
    @classmethod
    def _none_properties(cls, value):
        return {} if value is None else value

    @field_validator("depends_on", mode="before")
    @classmethod
    def _single_dependency(cls, value):
        # CloudFormation allows DependsOn to be a single logical id
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value


ResourceManifest = Dict[str, ResourceDefinition]


class Template(BaseModel):
    """The part of a CloudFormation template the tools care about."""

    resources: Dict[str, ResourceDefinition] = Field(alias="Resources")


class ArtifactProperties(BaseModel):
    file: Optional[str] = None
    template_file: Optional[str] = Field(default=None, alias="templateFile")


class Artifact(BaseModel):
    """An entry of the cloud assembly index."""

    type: Optional[str] = None
    properties: ArtifactProperties = Field(default_factory=ArtifactProperties)

    @field_validator("properties", mode="before")
    @classmethod
    def _none_properties(cls, value):
        return {} if value is None else value


class AssemblyManifest(BaseModel):
    """The cloud assembly index, ``manifest.json``."""

    artifacts: Dict[str, Artifact] = Field(default_factory=dict)

    @field_validator("artifacts", mode="before")
    @classmethod
    def _none_artifacts(cls, value):
        return {} if value is None else value


def _read_json(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ManifestReadError(path, f"cannot read file ({exc.strerror or exc})") from exc

    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ManifestParseError(
            path, f"invalid JSON at line {exc.lineno} column {exc.colno}: {exc.msg}"
        ) from exc


def _describe(error: ValidationError) -> str:
    details = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "<root>"
        details.append(f"{location}: {item['msg']}")
    return "; ".join(details)


def parse_template(data: Any, source="<template>") -> ResourceManifest:
    """Decode a loaded CloudFormation template into a resource manifest.

    Raises:
        ManifestParseError: If ``data`` is not a template with a valid
            ``Resources`` mapping.
    """
    if not isinstance(data, dict):
        raise ManifestParseError(source, "template must be a JSON object")
    try:
        template = Template.model_validate(data)
    except ValidationError as exc:
        raise ManifestParseError(source, _describe(exc)) from exc
    return template.resources


def load_template(path) -> ResourceManifest:
    """Read and decode the template at ``path``.

    Raises:
        ManifestReadError: If the file cannot be read.
        ManifestParseError: If the content is not a valid template.
    """
    path = Path(path)
    manifest = parse_template(_read_json(path), source=path)
    logger.debug("Decoded %d resources from %s", len(manifest), path)
    return manifest


def discover_templates(manifest_path) -> List[Path]:
    """List the template files referenced by a cloud assembly index.

    Asset manifests name their stack's template by swapping ``assets`` for
    ``template`` in the file name; stack artifacts name it directly. Paths are
    resolved against the index's directory and returned in artifact order
    without duplicates.

    Raises:
        ManifestReadError: If the index cannot be read.
        ManifestParseError: If the index is not valid JSON or has a malformed
            ``artifacts`` section.
    """
    manifest_path = Path(manifest_path)
    data = _read_json(manifest_path)
    if not isinstance(data, dict):
        raise ManifestParseError(manifest_path, "manifest must be a JSON object")
    try:
        assembly = AssemblyManifest.model_validate(data)
    except ValidationError as exc:
        raise ManifestParseError(manifest_path, _describe(exc)) from exc

    base_dir = manifest_path.parent
    templates: List[Path] = []

    for artifact in assembly.artifacts.values():
        properties = artifact.properties

        if artifact.type == ASSET_MANIFEST_ARTIFACT and properties.file:
            path = base_dir / properties.file.replace("assets", "template")
        elif artifact.type == STACK_ARTIFACT and properties.template_file:
            path = base_dir / properties.template_file
        else:
            continue

        if path not in templates:
            templates.append(path)

    logger.debug("Found %d templates in %s", len(templates), manifest_path)
    return templates
