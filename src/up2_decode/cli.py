"""UP2 update file inspector."""
from __future__ import annotations

import json
from pathlib import Path
from warnings import warn

import click

from up2_core.errors import LayoutError
from up2_core.models import Firmware, Record
from up2_core.tags import CANONICAL_SCHEME, TagScheme

from .blocks import block_count, reassemble
from .index import write_record_index
from .stream import Up2Decoder


def _load_scheme(tag_map: Path | None) -> TagScheme:
    if tag_map is None:
        return CANONICAL_SCHEME
    tags = json.loads(tag_map.read_text(encoding="utf-8"))
    return TagScheme.from_names(tag_map.stem, tags)


def _describe(record: Record) -> str:
    content = record.content
    if isinstance(content, Firmware):
        body = (
            f"Firmware(dst_susy={content.dst_susy}, dst_ser={content.dst_ser}, "
            f"delay={content.delay}, payload={len(content.data)} bytes)"
        )
    else:
        body = repr(content)
    return f"[{record.index}] @{record.offset} tag=0x{record.header.type_tag:04x} {body}"


tag_map_option = click.option(
    "--tag-map",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON {module type name: tag} for an older tag numbering",
)


def _fail(e: Exception) -> None:
    # Fail closed, with a single-line reason.
    click.echo(f"FATAL: {e}", err=True)
    raise SystemExit(1)


@click.group()
def main():
    pass


@main.command("parse")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--keep-going", is_flag=True, help="Warn about bad records and continue")
@tag_map_option
def parse_cmd(path: Path, keep_going: bool, tag_map: Path | None):
    """Print the container header and every record."""
    try:
        scheme = _load_scheme(tag_map)
        with open(path, "rb") as f:
            decoder = Up2Decoder(f, scheme=scheme)
            h = decoder.header
            click.echo(f"Header ID: 0x{h.magic:08x}")
            click.echo(f"Version: {h.version}")

            for item in decoder.results():
                if isinstance(item, LayoutError):
                    if not keep_going:
                        raise item
                    warn(f"Skipping bad record: {item}")
                    continue
                click.echo(_describe(item))

            click.echo(f"Records: {decoder.index}, bytes: {decoder.offset}")
    except (ValueError, OSError) as e:
        _fail(e)


@main.command("dump")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("out", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--blocks", is_flag=True, help="Strip block sequence numbers from each payload")
@tag_map_option
def dump_cmd(path: Path, out: Path, blocks: bool, tag_map: Path | None):
    """Write the firmware payload to OUT, or to OUT.<record index> when there are several."""
    try:
        scheme = _load_scheme(tag_map)
        with open(path, "rb") as f:
            images = {
                r.index: r.content.data
                for r in Up2Decoder(f, scheme=scheme)
                if isinstance(r.content, Firmware)
            }
        if not images:
            raise ValueError("No firmware records in container")
        if blocks:
            click.echo(f"Reassembling {sum(block_count(i) for i in images.values())} blocks")
            images = {index: reassemble(data) for index, data in images.items()}

        # One output file per firmware record.
        if len(images) == 1:
            targets = {out: next(iter(images.values()))}
        else:
            targets = {out.with_name(f"{out.name}.{index}"): data for index, data in images.items()}

        out.parent.mkdir(parents=True, exist_ok=True)
        for target, data in targets.items():
            target.write_bytes(data)
            click.echo(f"PASS: {len(data)} bytes written to {target}")
    except (ValueError, OSError) as e:
        _fail(e)


@main.command("index")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("out", type=click.Path(dir_okay=False, path_type=Path))
@tag_map_option
def index_cmd(path: Path, out: Path, tag_map: Path | None):
    """Write a Parquet index of every record."""
    try:
        rows = write_record_index(path, out, scheme=_load_scheme(tag_map))
    except (ValueError, OSError) as e:
        _fail(e)
    click.echo(f"PASS: {rows} records indexed to {out}")


if __name__ == "__main__":
    main()
