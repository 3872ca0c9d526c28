"""
Creature Database.

Handles loading and validation of static creature data (moves, species).
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import jsonschema
from pydantic import ValidationError

from pocketbattle.creatures.models import Creature, CreatureBase, LearnableMove, MoveBase

DEFAULT_DATA_PATH = Path(__file__).resolve().parent.parent / "data"


class CreatureDatabase:
    """
    Central storage for static creature data.

    Layout under data_path:
        schemas/move.schema.json
        schemas/species.schema.json
        database/moves/*.json
        database/species/*.json

    Each JSON file holds one record or a list of records. Records that
    fail validation are logged and skipped.
    """

    def __init__(self, data_path: Path | str = DEFAULT_DATA_PATH):
        self._data_path = Path(data_path)
        self._schemas: dict[str, Any] = {}

        self.moves: dict[str, MoveBase] = {}
        self.species: dict[str, CreatureBase] = {}

        self.logger = logging.getLogger(__name__)

    def load_all(self) -> None:
        """Load all data from disk. Moves first, species reference them."""
        self._load_schemas()

        for record in self._load_category("moves", "move.schema.json"):
            try:
                move = MoveBase.model_validate(record)
            except ValidationError as e:
                self.logger.error(f"Invalid move {record.get('name')!r}: {e}")
                continue
            self.moves[move.name] = move

        for record in self._load_category("species", "species.schema.json"):
            species = self._build_species(record)
            if species:
                self.species[species.name] = species

        self.logger.info(f"Loaded {len(self.moves)} moves, {len(self.species)} species.")

    def _build_species(self, record: dict[str, Any]) -> CreatureBase | None:
        """Resolve learnable move names, then validate the species."""
        learnable = []
        for entry in record.get("learnable_moves", []):
            move = self.moves.get(entry["move"])
            if move is None:
                self.logger.error(
                    f"Species {record.get('name')!r} references unknown move {entry['move']!r}"
                )
                return None
            learnable.append(LearnableMove(move=move, level=entry.get("level", 1)))

        try:
            return CreatureBase.model_validate({**record, "learnable_moves": learnable})
        except ValidationError as e:
            self.logger.error(f"Invalid species {record.get('name')!r}: {e}")
            return None

    def _load_schemas(self) -> None:
        """Load JSON schemas."""
        schema_dir = self._data_path / "schemas"
        if not schema_dir.exists():
            self.logger.warning(f"Schema directory not found: {schema_dir}")
            return

        for schema_file in schema_dir.glob("*.schema.json"):
            try:
                with open(schema_file, 'r', encoding='utf-8') as f:
                    self._schemas[schema_file.name] = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                self.logger.error(f"Failed to load schema {schema_file}: {e}")

    def _load_category(self, folder: str, schema_name: str) -> list[dict[str, Any]]:
        """Load and validate all JSON records in a category folder."""
        category_dir = self._data_path / "database" / folder
        records: list[dict[str, Any]] = []

        if not category_dir.exists():
            self.logger.warning(f"Data directory not found: {category_dir}")
            return records

        schema = self._schemas.get(schema_name)
        if not schema:
            self.logger.warning(f"No schema found for {folder} ({schema_name})")

        for file_path in sorted(category_dir.glob("*.json")):
            try:
                with open(file_path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                self.logger.error(f"Failed to load {file_path}: {e}")
                continue

            for item in data if isinstance(data, list) else [data]:
                if schema:
                    try:
                        jsonschema.validate(instance=item, schema=schema)
                    except jsonschema.ValidationError as e:
                        self.logger.error(f"Validation error in {file_path}: {e.message}")
                        continue
                records.append(item)

        return records

    def get_move(self, name: str) -> MoveBase:
        try:
            return self.moves[name]
        except KeyError:
            raise KeyError(f"Unknown move: {name}") from None

    def get_species(self, name: str) -> CreatureBase:
        try:
            return self.species[name]
        except KeyError:
            raise KeyError(f"Unknown species: {name}") from None

    def create_creature(self, species_name: str, level: int) -> Creature:
        """Instantiate a creature at full HP with its level-appropriate moves."""
        return Creature(self.get_species(species_name), level)
