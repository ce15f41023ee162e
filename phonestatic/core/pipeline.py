"""
End-to-end generation: snapshot in, module text out.

Each stage logs one progress message. Any `DataShapeViolation` aborts the run
before a single line is written, since the text is rendered in full first.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from phonestatic.core.dedup import DedupIndex, build_index
from phonestatic.core.normalize import normalize_snapshot
from phonestatic.core.regions import build_region_index
from phonestatic.core.snapshot import MetadataSnapshot
from phonestatic.core.trie import IdTrie, build_id_trie
from phonestatic.io.emit import IdDispatch, render_module

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GenerationResult:
    text: str
    index: DedupIndex
    trie: IdTrie
    regions: dict[int, tuple[str, ...]]

    @property
    def unique_records(self) -> int:
        return len(self.index.table)

    def to_dict(self) -> dict[str, int]:
        return {
            "unique_records": self.unique_records,
            "ids": len(self.index.by_id),
            "calling_codes": len(self.index.by_code),
            "region_codes": len(self.regions),
        }


def generate(
    snapshot: MetadataSnapshot,
    *,
    id_dispatch: IdDispatch = "trie",
    width: int = 100,
    source_label: str | None = None,
) -> GenerationResult:
    """
    Run every stage over one snapshot.

    Raises:
        DataShapeViolation: if the snapshot breaks a structural invariant.
    """

    logger.info(
        "Normalizing %d ids and %d calling codes", len(snapshot.by_id), len(snapshot.by_code)
    )
    canonical = normalize_snapshot(snapshot)

    logger.info("Deduplicating records (code groups first, then ids)")
    index = build_index(canonical.by_code, canonical.by_id)
    logger.info(
        "Stored %d unique records for %d ids across %d calling codes",
        len(index.table),
        len(index.by_id),
        len(index.by_code),
    )

    logger.info("Building id byte dispatch")
    trie = build_id_trie(index.by_id)

    logger.info("Building region index for %d calling codes", len(canonical.regions))
    regions = build_region_index(canonical.regions, known_codes=canonical.by_code)

    logger.info("Rendering module (id dispatch: %s)", id_dispatch)
    text = render_module(
        index,
        trie,
        regions,
        id_dispatch=id_dispatch,
        width=width,
        source_label=source_label,
    )
    return GenerationResult(text=text, index=index, trie=trie, regions=regions)
