"""RadarService — radar, blip and import operations for the Web API.

Every method opens its own :class:`RadarStorage` and closes it before
returning.  Ownership is enforced on every call: records of another user
raise :class:`RadarNotFoundError` exactly like missing ones.
"""

from __future__ import annotations

import logging
import random
import sqlite3

from tech_radar.geometry.collision import RandomSource
from tech_radar.geometry.layout import LayoutConfig, RadarLayoutBuilder
from tech_radar.geometry.models import RadarLayout
from tech_radar.radar.csv_import import build_sample_csv, parse_blip_csv
from tech_radar.radar.defaults import random_offsets
from tech_radar.radar.models import Blip, Quadrant, Radar, Ring, User
from tech_radar.radar.storage import RadarStorage
from tech_radar.web.auth import DEFAULT_ROUNDS, hash_password
from tech_radar.web.schemas import (
    BlipRequest,
    ImportResponse,
    QuadrantUpdate,
    RadarRequest,
    RegisterRequest,
    RingUpdate,
)

_logger = logging.getLogger(__name__)


class RadarNotFoundError(LookupError):
    """A radar, quadrant, ring or blip is missing or owned by someone else."""


class DuplicateEmailError(ValueError):
    pass


class RadarService:
    """Wraps storage, CSV import and layout for one user's radars.

    Parameters
    ----------
    db_path:
        Path to the SQLite database.
    rng:
        Randomness for new blip offsets and collision resolution.  Inject a
        seeded :class:`random.Random` for reproducible results.
    layout_config:
        Tuning values for :class:`RadarLayoutBuilder`.
    bcrypt_rounds:
        Cost factor used when registering users.
    """

    def __init__(
        self,
        db_path: str,
        rng: RandomSource | None = None,
        layout_config: LayoutConfig | None = None,
        bcrypt_rounds: int = DEFAULT_ROUNDS,
    ) -> None:
        self._db_path = db_path
        self._rng = rng if rng is not None else random.Random()
        self._layout_config = layout_config or LayoutConfig()
        self._bcrypt_rounds = bcrypt_rounds

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def register(self, req: RegisterRequest) -> User:
        """Create a user account.

        Raises
        ------
        DuplicateEmailError
            If the e-mail is already registered.
        """
        storage = RadarStorage(self._db_path)
        try:
            if storage.get_user_by_email(req.email) is not None:
                raise DuplicateEmailError("An account with this email already exists")
            try:
                user = storage.create_user(
                    req.name, req.email, hash_password(req.password, self._bcrypt_rounds)
                )
            except sqlite3.IntegrityError as exc:
                raise DuplicateEmailError("An account with this email already exists") from exc
        finally:
            storage.close()
        _logger.info("Registered user %s", user.id)
        return user

    # ------------------------------------------------------------------
    # Radars
    # ------------------------------------------------------------------

    def list_radars(self, user: User) -> list[Radar]:
        storage = RadarStorage(self._db_path)
        try:
            return storage.list_radars(user.id)
        finally:
            storage.close()

    def create_radar(self, user: User, req: RadarRequest) -> Radar:
        storage = RadarStorage(self._db_path)
        try:
            radar = storage.create_radar(user.id, req.name, req.description)
        finally:
            storage.close()
        _logger.info("Created radar %s for user %s", radar.id, user.id)
        return radar

    def get_radar(self, user: User, radar_id: str) -> Radar:
        storage = RadarStorage(self._db_path)
        try:
            return self._require_radar(storage, user, radar_id)
        finally:
            storage.close()

    def update_radar(self, user: User, radar_id: str, req: RadarRequest) -> Radar:
        storage = RadarStorage(self._db_path)
        try:
            if not storage.update_radar(radar_id, user.id, req.name, req.description):
                raise RadarNotFoundError("Radar not found")
            return self._require_radar(storage, user, radar_id)
        finally:
            storage.close()

    def delete_radar(self, user: User, radar_id: str) -> None:
        storage = RadarStorage(self._db_path)
        try:
            if not storage.delete_radar(radar_id, user.id):
                raise RadarNotFoundError("Radar not found")
        finally:
            storage.close()
        _logger.info("Deleted radar %s", radar_id)

    # ------------------------------------------------------------------
    # Quadrants and rings
    # ------------------------------------------------------------------

    def update_quadrant(self, user: User, quadrant_id: str, req: QuadrantUpdate) -> Quadrant:
        storage = RadarStorage(self._db_path)
        try:
            quadrant = storage.get_quadrant(quadrant_id, user.id)
            if quadrant is None:
                raise RadarNotFoundError("Quadrant not found")
            storage.update_quadrant(quadrant_id, req.name, req.color)
            quadrant.name = req.name
            quadrant.color = req.color
            return quadrant
        finally:
            storage.close()

    def update_ring(self, user: User, ring_id: str, req: RingUpdate) -> Ring:
        storage = RadarStorage(self._db_path)
        try:
            ring = storage.get_ring(ring_id, user.id)
            if ring is None:
                raise RadarNotFoundError("Ring not found")
            storage.update_ring(ring_id, req.name)
            ring.name = req.name
            return ring
        finally:
            storage.close()

    # ------------------------------------------------------------------
    # Blips
    # ------------------------------------------------------------------

    def list_blips(self, user: User, radar_id: str) -> list[Blip]:
        return self.get_radar(user, radar_id).blips

    def get_blip(self, user: User, radar_id: str, blip_id: str) -> Blip:
        storage = RadarStorage(self._db_path)
        try:
            self._require_radar(storage, user, radar_id)
            blip = storage.get_blip(radar_id, blip_id)
        finally:
            storage.close()
        if blip is None:
            raise RadarNotFoundError("Blip not found")
        return blip

    def create_blip(self, user: User, radar_id: str, req: BlipRequest) -> Blip:
        """Create a blip at a random position inside its segment.

        Raises
        ------
        RadarNotFoundError
            If the radar is missing or not owned by *user*.
        ValueError
            If the quadrant or ring does not belong to the radar.
        """
        storage = RadarStorage(self._db_path)
        try:
            radar = self._require_radar(storage, user, radar_id)
            self._check_references(radar, req)
            offset_x, offset_y = random_offsets(self._rng)
            return storage.create_blip(
                radar_id,
                req.quadrant_id,
                req.ring_id,
                req.name,
                req.description,
                req.is_new,
                offset_x,
                offset_y,
            )
        finally:
            storage.close()

    def update_blip(self, user: User, radar_id: str, blip_id: str, req: BlipRequest) -> Blip:
        """Update name, description, quadrant, ring and ``is_new``; offsets stay."""
        storage = RadarStorage(self._db_path)
        try:
            radar = self._require_radar(storage, user, radar_id)
            if storage.get_blip(radar_id, blip_id) is None:
                raise RadarNotFoundError("Blip not found")
            self._check_references(radar, req)
            storage.update_blip(
                radar_id,
                blip_id,
                req.quadrant_id,
                req.ring_id,
                req.name,
                req.description,
                req.is_new,
            )
            blip = storage.get_blip(radar_id, blip_id)
            if blip is None:
                raise RadarNotFoundError("Blip not found")
            return blip
        finally:
            storage.close()

    def delete_blip(self, user: User, radar_id: str, blip_id: str) -> None:
        storage = RadarStorage(self._db_path)
        try:
            self._require_radar(storage, user, radar_id)
            if not storage.delete_blip(radar_id, blip_id):
                raise RadarNotFoundError("Blip not found")
        finally:
            storage.close()

    # ------------------------------------------------------------------
    # CSV
    # ------------------------------------------------------------------

    def import_csv(self, user: User, radar_id: str, csv_text: str) -> ImportResponse:
        """Import blips from CSV; bad rows are reported, good rows stored together.

        Raises
        ------
        CsvImportError
            If the file has no data rows or lacks a required column.
        """
        storage = RadarStorage(self._db_path)
        try:
            radar = self._require_radar(storage, user, radar_id)
            result = parse_blip_csv(csv_text, radar.quadrants, radar.rings, self._rng)
            storage.create_blips(radar_id, result.drafts)
        finally:
            storage.close()

        _logger.info(
            "CSV import into radar %s: %d imported, %d error(s)",
            radar_id,
            result.imported,
            len(result.errors),
        )
        return ImportResponse(
            imported=result.imported, errors=result.errors, message=result.message
        )

    def sample_csv(self, user: User, radar_id: str) -> str:
        radar = self.get_radar(user, radar_id)
        return build_sample_csv(
            [q.name for q in radar.quadrants], [r.name for r in radar.rings]
        )

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def build_layout(self, radar: Radar, canvas_size: float | None = None) -> RadarLayout:
        builder = RadarLayoutBuilder(self._layout_config, rng=self._rng)
        return builder.build(radar.quadrants, radar.rings, radar.blips, canvas_size)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _require_radar(storage: RadarStorage, user: User, radar_id: str) -> Radar:
        radar = storage.get_radar(radar_id, user.id)
        if radar is None:
            raise RadarNotFoundError("Radar not found")
        return radar

    @staticmethod
    def _check_references(radar: Radar, req: BlipRequest) -> None:
        if req.quadrant_id not in {q.id for q in radar.quadrants}:
            raise ValueError("Quadrant does not belong to this radar")
        if req.ring_id not in {r.id for r in radar.rings}:
            raise ValueError("Ring does not belong to this radar")
