#!/usr/bin/env python3
"""
List the resources of every synthesized stack, grouped by AWS service.

Colors follow the AWS console palette using ANSI 256-color codes, see
https://en.wikipedia.org/wiki/ANSI_escape_code#8-bit
"""

import logging
import sys
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Tuple

import click

from tools.errors import ManifestParseError, ManifestReadError
from tools.manifest import discover_templates, load_template

logger = logging.getLogger(__name__)

DEFAULT_COLOR = 37

SERVICE_COLORS: Dict[str, int] = {
    "AWS::ApiGateway": 198,
    "AWS::ApiGatewayV2": 198,
    "AWS::CDK": 170,
    "AWS::CertificateManager": 167,
    "AWS::CloudWatch": 198,
    "AWS::EC2": 36,
    "AWS::IAM": 167,
    "AWS::KMS": 167,
    "AWS::Lambda": 208,
    "AWS::Logs": 198,
    "AWS::Route53": 141,
    "AWS::S3": 106,
    "AWS::SNS": 198,
    "AWS::SQS": 198,
}


@dataclass
class ServiceGroup:
    """Resource type counts for one service, e.g. ``AWS::SQS``."""

    prefix: str
    color: int
    services: List[Tuple[str, int]] = field(default_factory=list)


def service_prefix(resource_type: str) -> str:
    """``AWS::SQS::Queue`` -> ``AWS::SQS``"""
    return "::".join(resource_type.split("::")[:2])


def group_services(resource_types: Iterable[str]) -> List[ServiceGroup]:
    """Count resource types and group them by service, both sorted by name."""
    counts = Counter(resource_types)
    groups: Dict[str, ServiceGroup] = {}

    for resource_type in sorted(counts):
        prefix = service_prefix(resource_type)
        if prefix not in groups:
            groups[prefix] = ServiceGroup(prefix, SERVICE_COLORS.get(prefix, DEFAULT_COLOR))
        groups[prefix].services.append((resource_type, counts[resource_type]))

    return list(groups.values())


def format_group(group: ServiceGroup) -> str:
    lines = []
    for name, count in group.services:
        line = click.style(name, fg=group.color)
        if count > 1:
            line += f" ({count})"
        lines.append(line)
    return "\n".join(lines)


@click.command()
@click.option(
    "--cdk-out",
    "cdk_out",
    envvar="CDK_OUT_DIR",
    default="cdk.out",
    show_default=True,
    type=click.Path(file_okay=False, path_type=Path),
    help="Cloud assembly directory produced by cdk synth",
)
@click.option("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, WARNING, ERROR)")
def main(cdk_out: Path, log_level: str):
    """Print resource counts per service for each synthesized stack."""
    logging.basicConfig(level=log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    try:
        templates = discover_templates(cdk_out / "manifest.json")
    except (ManifestReadError, ManifestParseError) as exc:
        logger.error("Cannot read cloud assembly: %s", exc)
        sys.exit(1)

    for template_path in templates:
        try:
            manifest = load_template(template_path)
        except (ManifestReadError, ManifestParseError) as exc:
            logger.error("Skipping template: %s", exc)
            continue

        resource_types = [resource.type_tag for resource in manifest.values()]
        click.echo(f"Stack {template_path.name} / {len(resource_types)} Resources")
        for group in group_services(resource_types):
            click.echo(format_group(group))
        click.echo()


if __name__ == "__main__":
    main()
