"""Loading of the game configuration (maps, roads, offices, loot) from JSON."""

from __future__ import annotations

import errno
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Union

_log = logging.getLogger(__name__)

DEFAULT_DOG_SPEED = 1.0
DEFAULT_BAG_CAPACITY = 3
DEFAULT_DOG_RETIREMENT_TIME_MS = 60_000.0
_MILLISECONDS_IN_SECOND = 1000.0


class ConfigError(ValueError):
    """Raised when the game configuration is invalid."""


@dataclass(frozen=True)
class Point:
    x: int
    y: int


@dataclass(frozen=True)
class Offset:
    dx: int
    dy: int


@dataclass(frozen=True)
class Road:
    start: Point
    end: Point
    horizontal: bool = True

    @classmethod
    def make_horizontal(cls, start: Point, end_x: int) -> "Road":
        return cls(start, Point(end_x, start.y), True)

    @classmethod
    def make_vertical(cls, start: Point, end_y: int) -> "Road":
        return cls(start, Point(start.x, end_y), False)

    def is_horizontal(self) -> bool:
        """True if the road runs along the x axis."""
        return self.horizontal


@dataclass(frozen=True)
class Building:
    position: Point
    width: int
    height: int


@dataclass(frozen=True)
class Office:
    id: str
    position: Point
    offset: Offset


@dataclass
class LootType:
    name: Optional[str] = None
    file: Optional[str] = None
    type: Optional[str] = None
    rotation: Optional[int] = None
    color: Optional[str] = None
    scale: Optional[float] = None
    value: Optional[int] = None


@dataclass
class GameSettings:
    default_period: float = 0.0
    default_probability: float = 0.0
    default_bag_capacity: int = DEFAULT_BAG_CAPACITY
    dog_retirement_time: float = DEFAULT_DOG_RETIREMENT_TIME_MS


@dataclass
class MapConfig:
    id: str
    name: str
    dog_speed: float = DEFAULT_DOG_SPEED
    bag_capacity: int = DEFAULT_BAG_CAPACITY
    roads: list[Road] = field(default_factory=list)
    buildings: list[Building] = field(default_factory=list)
    offices: list[Office] = field(default_factory=list)
    loot_types: list[LootType] = field(default_factory=list)


@dataclass
class GameConfig:
    maps: list[MapConfig] = field(default_factory=list)
    settings: GameSettings = field(default_factory=GameSettings)
    default_dog_speed: float = DEFAULT_DOG_SPEED

    def find_map(self, map_id: str) -> Optional[MapConfig]:
        """Return the map with the given id, or None."""
        return next((m for m in self.maps if m.id == map_id), None)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _as_string(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"Value of '{key}' must be a string")
    return value


def _as_int(value: Any, key: str) -> int:
    if not _is_int(value):
        raise ConfigError(f"Value of '{key}' must be an integer")
    return value


def _as_float(value: Any, key: str) -> float:
    if not _is_number(value):
        raise ConfigError(f"Value of '{key}' must be a number")
    return float(value)


def _as_uint(value: Any, key: str) -> int:
    if not _is_int(value) or value < 0:
        raise ConfigError(f"Value of '{key}' must be a non-negative integer")
    return value


def _as_list(value: Any, key: str) -> list:
    if not isinstance(value, list):
        raise ConfigError(f"Value of '{key}' must be an array")
    return value


def _coordinates(names: Iterable[str], obj: Mapping[str, Any], what: str) -> list[int]:
    names = list(names)
    if not all(name in obj for name in names):
        raise ConfigError(
            f"Missing required coordinates {' or '.join(names)} for {what} definition"
        )
    result = []
    for name in names:
        value = obj[name]
        if not _is_int(value):
            raise ConfigError(f"Invalid type for coordinate {name}")
        result.append(value)
    return result


_LOOT_STRING_KEYS = ("name", "file", "type", "color")
_LOOT_INT_KEYS = ("rotation", "value")


def _loot_type(obj: Mapping[str, Any]) -> LootType:
    loot = LootType()
    for key, value in obj.items():
        if key in _LOOT_STRING_KEYS:
            setattr(loot, key, _as_string(value, key))
        elif key in _LOOT_INT_KEYS:
            setattr(loot, key, _as_int(value, key))
        elif key == "scale":
            loot.scale = _as_float(value, key)
        else:
            _log.error("Unknown key in loot type: %s", key)
    if loot.scale is None or loot.scale <= 0.0:
        raise ConfigError("Scale must be positive")
    return loot


def _roads(config: Mapping[str, Any]) -> list[Road]:
    if "roads" not in config:
        raise ConfigError("The map configuration is missing the required 'roads' parameter")
    roads_json = _as_list(config["roads"], "roads")
    if not roads_json:
        raise ConfigError("The 'roads' array must contain at least one element")

    roads = []
    for road_obj in roads_json:
        if not isinstance(road_obj, dict):
            _log.error("Each road must be an object")
            continue
        horizontal = "x1" in road_obj
        x0, y0, end = _coordinates(
            ("x0", "y0", "x1" if horizontal else "y1"), road_obj, "roads"
        )
        start = Point(x0, y0)
        roads.append(
            Road.make_horizontal(start, end) if horizontal else Road.make_vertical(start, end)
        )
    return roads


def _buildings(config: Mapping[str, Any]) -> list[Building]:
    if "buildings" not in config:
        _log.error("The map configuration is missing the required 'buildings' parameter")
        return []

    buildings = []
    keys = ("x", "y", "w", "h")
    for obj in _as_list(config["buildings"], "buildings"):
        if not isinstance(obj, dict):
            _log.error("Each building must be an object")
            continue
        if not all(key in obj for key in keys):
            raise ConfigError(
                'Missing required coordinates "x" or "y" or "w" or "h" for building definition'
            )
        x, y, w, h = _coordinates(keys, obj, "buildings")
        buildings.append(Building(Point(x, y), w, h))
    return buildings


def _offices(config: Mapping[str, Any]) -> list[Office]:
    if "offices" not in config:
        _log.error("The map configuration is missing the required 'offices' parameter")
        return []

    offices = []
    for obj in _as_list(config["offices"], "offices"):
        if not isinstance(obj, dict):
            _log.error("Each office must be an object")
            continue
        if "id" not in obj:
            raise ConfigError("Missing required 'id' field for office definition")
        office_id = _as_string(obj["id"], "id")
        x, y, dx, dy = _coordinates(("x", "y", "offsetX", "offsetY"), obj, "offices")
        offices.append(Office(office_id, Point(x, y), Offset(dx, dy)))
    return offices


def _loot_types(config: Mapping[str, Any]) -> list[LootType]:
    if "lootTypes" not in config:
        raise ConfigError("Missing 'lootTypes' parameter in map configuration")

    loot_types = []
    for obj in _as_list(config["lootTypes"], "lootTypes"):
        if not isinstance(obj, dict):
            raise ConfigError("Each loot type must be an object")
        try:
            loot_types.append(_loot_type(obj))
        except ConfigError as exc:
            _log.error("Error processing loot type: %s", exc)
    return loot_types


def _settings(generator_config: Any) -> GameSettings:
    if not isinstance(generator_config, dict):
        raise ConfigError("'lootGeneratorConfig' must be an object")
    settings = GameSettings()
    for key, value in generator_config.items():
        if key == "period":
            settings.default_period = _as_float(value, key)
        elif key == "probability":
            settings.default_probability = _as_float(value, key)
    if settings.default_period <= 0.0:
        raise ConfigError("Period must be positive")
    if not 0.0 <= settings.default_probability <= 1.0:
        raise ConfigError("Probability must be in range 0, 1")
    return settings


def _map(config: Any, game: GameConfig) -> MapConfig:
    if not isinstance(config, dict):
        raise ConfigError("Each map must be an object")
    if "id" not in config or "name" not in config:
        raise ConfigError("Missing required 'id' or 'name' field for map")

    game_map = MapConfig(
        id=_as_string(config["id"], "id"),
        name=_as_string(config["name"], "name"),
        dog_speed=game.default_dog_speed,
        bag_capacity=game.settings.default_bag_capacity,
    )
    if "dogSpeed" in config:
        game_map.dog_speed = _as_float(config["dogSpeed"], "dogSpeed")
    if "bagCapacity" in config:
        game_map.bag_capacity = _as_uint(config["bagCapacity"], "bagCapacity")

    game_map.roads = _roads(config)
    game_map.buildings = _buildings(config)
    game_map.offices = _offices(config)
    game_map.loot_types = _loot_types(config)
    return game_map


def read_file(path: Union[str, Path], binary_mode: bool = False) -> Union[str, bytes]:
    """Read a whole file; text files must not be empty."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(errno.ENOENT, "File does not exist", str(path))
    if binary_mode:
        return path.read_bytes()
    text = path.read_text()
    if not text:
        raise ConfigError(f"File is empty: {path}")
    return text


def parse_game(data: Union[str, bytes, Mapping[str, Any]]) -> GameConfig:
    """Build a GameConfig from JSON text or an already decoded JSON object."""
    if isinstance(data, (str, bytes, bytearray)):
        data = json.loads(data)
    if not isinstance(data, Mapping):
        raise ConfigError("Root of the configuration must be an object")
    if "maps" not in data:
        raise ConfigError("Missing 'maps' key in root JSON object")
    maps_json = _as_list(data["maps"], "maps")

    game = GameConfig()
    if "defaultDogSpeed" in data:
        game.default_dog_speed = _as_float(data["defaultDogSpeed"], "defaultDogSpeed")

    if "lootGeneratorConfig" not in data:
        raise ConfigError("Invalid config: missing 'lootGeneratorConfig' key in root JSON object")
    settings = _settings(data["lootGeneratorConfig"])

    if "defaultBagCapacity" in data:
        settings.default_bag_capacity = _as_uint(data["defaultBagCapacity"], "defaultBagCapacity")

    retirement = data.get("dogRetirementTime")
    if _is_number(retirement):
        settings.dog_retirement_time = float(retirement) * _MILLISECONDS_IN_SECOND

    game.settings = settings
    game.maps = [_map(map_config, game) for map_config in maps_json]
    return game


def load_game(json_path: Union[str, Path]) -> GameConfig:
    """Read and parse the game configuration file."""
    return parse_game(read_file(json_path))