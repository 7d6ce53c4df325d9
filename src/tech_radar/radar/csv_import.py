"""CSV import of blips and the downloadable sample file.

Expected columns (header matched case-insensitively):

    name, quadrant, ring          required
    description, isNew            optional

Rows are numbered from 1 = header.  A bad row is reported and skipped;
the remaining rows are still imported.
"""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass, field

from tech_radar.geometry.collision import RandomSource
from tech_radar.radar.defaults import BLIP_DESCRIPTION_MAX, BLIP_NAME_MAX, random_offsets
from tech_radar.radar.models import Quadrant, Ring

_TRUTHY = frozenset({"true", "yes", "1"})

SAMPLE_HEADER = ("name", "quadrant", "ring", "description", "isNew")

# (name, quadrant position, ring position, description, isNew, fallback quadrant, fallback ring)
_SAMPLE_ROWS = (
    ("React", 3, 0, "Our primary frontend framework", "false", "Languages & Frameworks", "Adopt"),
    ("Kubernetes", 1, 0, "Container orchestration platform", "false", "Platforms", "Adopt"),
    ("Deno", 1, 2, "Alternative JavaScript runtime", "true", "Platforms", "Assess"),
    ("Pair Programming", 0, 1, "Collaborative coding practice", "false", "Techniques", "Trial"),
    ("Vite", 2, 0, "Fast build tool for web projects", "true", "Tools", "Adopt"),
)


class CsvImportError(ValueError):
    """The CSV as a whole cannot be imported (no data rows, missing columns)."""


@dataclass
class BlipDraft:
    """A validated CSV row, ready to be stored."""

    row: int
    name: str
    quadrant_id: str
    ring_id: str
    description: str | None
    is_new: bool
    offset_x: float
    offset_y: float


@dataclass
class CsvImportResult:
    drafts: list[BlipDraft] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def imported(self) -> int:
        return len(self.drafts)

    @property
    def message(self) -> str | None:
        """Summary of a partial import, or None when every row was accepted."""
        if not self.errors:
            return None
        return (
            f"Imported {self.imported} blip(s) with {len(self.errors)} error(s):\n"
            + "\n".join(self.errors)
        )


def _records(csv_text: str) -> list[list[str]]:
    reader = csv.reader(io.StringIO(csv_text, newline=""))
    return [rec for rec in reader if any(f.strip() for f in rec)]


def _cell(record: list[str], idx: int) -> str:
    if idx < 0 or idx >= len(record):
        return ""
    return record[idx].strip()


def parse_blip_csv(
    csv_text: str,
    quadrants: list[Quadrant],
    rings: list[Ring],
    rng: RandomSource,
) -> CsvImportResult:
    """Validate *csv_text* against the radar's quadrants and rings.

    Each accepted row gets fresh random offsets drawn from *rng*.

    Raises:
        CsvImportError: If there is no data row or a required column is
            missing.
    """
    records = _records(csv_text)
    if len(records) < 2:
        raise CsvImportError("CSV must have a header row and at least one data row")

    header = [h.strip().lower() for h in records[0]]
    if not {"name", "quadrant", "ring"}.issubset(header):
        raise CsvImportError(
            "CSV must have columns: name, quadrant, ring. Optional: description, isNew"
        )
    name_idx = header.index("name")
    quadrant_idx = header.index("quadrant")
    ring_idx = header.index("ring")
    desc_idx = header.index("description") if "description" in header else -1
    is_new_idx = header.index("isnew") if "isnew" in header else -1

    quadrant_map = {q.name.strip().lower(): q.id for q in quadrants}
    ring_map = {r.name.strip().lower(): r.id for r in rings}

    result = CsvImportResult()
    for row_no, record in enumerate(records[1:], start=2):
        name = _cell(record, name_idx)
        quadrant_name = _cell(record, quadrant_idx)
        ring_name = _cell(record, ring_idx)

        if not name:
            result.errors.append(f"Row {row_no}: missing name")
            continue
        if len(name) > BLIP_NAME_MAX:
            result.errors.append(f"Row {row_no}: name too long (max {BLIP_NAME_MAX})")
            continue

        description = _cell(record, desc_idx) or None
        if description and len(description) > BLIP_DESCRIPTION_MAX:
            result.errors.append(
                f"Row {row_no}: description too long (max {BLIP_DESCRIPTION_MAX})"
            )
            continue

        quadrant_id = quadrant_map.get(quadrant_name.lower())
        if quadrant_id is None:
            result.errors.append(
                f'Row {row_no}: unknown quadrant "{quadrant_name}". '
                f"Valid: {', '.join(quadrant_map)}"
            )
            continue

        ring_id = ring_map.get(ring_name.lower())
        if ring_id is None:
            result.errors.append(
                f'Row {row_no}: unknown ring "{ring_name}". Valid: {", ".join(ring_map)}'
            )
            continue

        is_new = _cell(record, is_new_idx).lower() in _TRUTHY if is_new_idx >= 0 else True
        offset_x, offset_y = random_offsets(rng)
        result.drafts.append(BlipDraft(
            row=row_no,
            name=name,
            quadrant_id=quadrant_id,
            ring_id=ring_id,
            description=description,
            is_new=is_new,
            offset_x=offset_x,
            offset_y=offset_y,
        ))

    return result


def _quote(value: str) -> str:
    if "," in value or '"' in value:
        return '"' + value.replace('"', '""') + '"'
    return value


def build_sample_csv(quadrant_names: list[str], ring_names: list[str]) -> str:
    """Return a sample import file that uses the radar's own names.

    *quadrant_names* and *ring_names* are in position order; a missing
    position falls back to the default name.
    """
    lines = [",".join(SAMPLE_HEADER)]
    for name, q_pos, r_pos, desc, is_new, q_default, r_default in _SAMPLE_ROWS:
        quadrant = quadrant_names[q_pos] if q_pos < len(quadrant_names) else q_default
        ring = ring_names[r_pos] if r_pos < len(ring_names) else r_default
        lines.append(",".join(_quote(f) for f in (name, quadrant, ring, desc, is_new)))
    return "\n".join(lines)
