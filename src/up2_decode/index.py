"""Record index: one row per framed record, written as Parquet."""
from __future__ import annotations

from pathlib import Path

import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from up2_core.errors import LayoutError
from up2_core.protocol import RECORD_HEADER_LEN
from up2_core.tags import CANONICAL_SCHEME, TagScheme

from .stream import Up2Decoder

INDEX_SCHEMA = pa.schema(
    [
        ("index", pa.int32()),
        ("offset", pa.int64()),
        ("length", pa.int64()),
        ("checksum", pa.uint32()),
        ("type_tag", pa.uint32()),
        ("system_id", pa.uint32()),
        ("module_type", pa.string()),
        ("status", pa.string()),
        ("detail", pa.string()),
    ]
)


def build_record_index(decoder: Up2Decoder) -> pd.DataFrame:
    """Drain the decoder into a table. Layout errors become rows; stream errors propagate."""
    rows: list[dict] = []
    for item in decoder.results():
        if isinstance(item, LayoutError):
            header = item.header
            rows.append(
                {
                    "index": item.index,
                    "offset": item.offset,
                    "length": RECORD_HEADER_LEN + header.body_length,
                    "checksum": header.checksum,
                    "type_tag": header.type_tag,
                    "system_id": header.system_id,
                    "module_type": decoder.scheme.resolve(header.type_tag).value,
                    "status": item.code,
                    "detail": item.detail,
                }
            )
            continue

        rows.append(
            {
                "index": item.index,
                "offset": item.offset,
                "length": item.length,
                "checksum": item.header.checksum,
                "type_tag": item.header.type_tag,
                "system_id": item.header.system_id,
                "module_type": item.module_type.value,
                "status": "DECODED",
                "detail": "",
            }
        )

    return pd.DataFrame(rows, columns=INDEX_SCHEMA.names)


def write_record_index(path: Path, out_path: Path, scheme: TagScheme = CANONICAL_SCHEME) -> int:
    """Write the record index of the container at `path`. Returns the row count."""
    with open(path, "rb") as f:
        df = build_record_index(Up2Decoder(f, scheme=scheme))

    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    table = pa.Table.from_pandas(df, schema=INDEX_SCHEMA, preserve_index=False)
    pq.write_table(table, out_path)
    return len(df)
