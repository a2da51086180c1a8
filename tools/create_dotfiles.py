#!/usr/bin/env python3
"""
Write a Graphviz DOT file for every template in a cloud assembly.

Run after ``cdk synth``:

    create-dotfiles --cdk-out cdk.out
    dot -Tsvg cdk.out/MyStack.template.json.dot -o MyStack.svg
"""

import logging
import sys
from pathlib import Path
from typing import Iterable, List

import click

from tools.errors import ManifestParseError, ManifestReadError, OutputWriteError
from tools.graph import render
from tools.manifest import discover_templates, load_template

logger = logging.getLogger(__name__)

DEFAULT_SUFFIX = ".dot"


def write_dot_file(template_path, suffix: str = DEFAULT_SUFFIX) -> Path:
    """Render one template and write it beside the original.

    Raises:
        ManifestReadError: If the template cannot be read.
        ManifestParseError: If the template cannot be decoded.
        OutputWriteError: If the DOT file cannot be written.
    """
    template_path = Path(template_path)
    document = render(load_template(template_path))
    output_path = template_path.with_name(template_path.name + suffix)

    # The output file is opened only once the document is fully encoded
    try:
        data = document.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise ManifestParseError(template_path, f"content cannot be encoded as UTF-8 ({exc.reason})") from exc

    try:
        output_path.write_bytes(data)
    except OSError as exc:
        raise OutputWriteError(output_path, f"cannot write file ({exc.strerror or exc})") from exc

    logger.info("Wrote %s", output_path)
    return output_path


def create_dot_files(template_paths: Iterable, suffix: str = DEFAULT_SUFFIX) -> List[Path]:
    """Write DOT files for each template, skipping ones that cannot be decoded.

    Write failures are not skipped and propagate to the caller.
    """
    written = []
    for template_path in template_paths:
        try:
            written.append(write_dot_file(template_path, suffix))
        except (ManifestReadError, ManifestParseError) as exc:
            logger.error("Skipping template: %s", exc)
    return written


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
@click.option(
    "--suffix",
    default=DEFAULT_SUFFIX,
    show_default=True,
    help="Suffix appended to each template file name",
)
@click.option("--log-level", default="INFO", help="Logging level (DEBUG, INFO, WARNING, ERROR)")
def main(cdk_out: Path, suffix: str, log_level: str):
    """Create Graphviz DOT files for synthesized CloudFormation templates."""
    logging.basicConfig(level=log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    try:
        templates = discover_templates(cdk_out / "manifest.json")
    except (ManifestReadError, ManifestParseError) as exc:
        logger.error("Cannot read cloud assembly: %s", exc)
        sys.exit(1)

    try:
        written = create_dot_files(templates, suffix)
    except OutputWriteError as exc:
        logger.error("%s", exc)
        sys.exit(1)

    logger.info("Created %d of %d DOT files", len(written), len(templates))


if __name__ == "__main__":
    main()
