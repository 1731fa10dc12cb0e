"""JSON views of the game configuration served by the maps API."""

from __future__ import annotations

import json
from typing import Any

from dogstory.loader import GameConfig, LootType, MapConfig

_LOOT_FIELDS = ("name", "file", "type", "rotation", "color", "scale", "value")


def _dumps(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _roads(game_map: MapConfig) -> list[dict[str, int]]:
    if not game_map.roads:
        raise ValueError("No roads available in the map")
    roads = []
    for road in game_map.roads:
        obj = {"x0": road.start.x, "y0": road.start.y}
        if road.is_horizontal():
            obj["x1"] = road.end.x
        else:
            obj["y1"] = road.end.y
        roads.append(obj)
    return roads


def _buildings(game_map: MapConfig) -> list[dict[str, int]]:
    return [
        {
            "x": building.position.x,
            "y": building.position.y,
            "w": building.width,
            "h": building.height,
        }
        for building in game_map.buildings
    ]


def _offices(game_map: MapConfig) -> list[dict[str, Any]]:
    return [
        {
            "id": office.id,
            "x": office.position.x,
            "y": office.position.y,
            "offsetX": office.offset.dx,
            "offsetY": office.offset.dy,
        }
        for office in game_map.offices
    ]


def _loot_type(loot: LootType) -> dict[str, Any]:
    return {
        name: getattr(loot, name)
        for name in _LOOT_FIELDS
        if getattr(loot, name) is not None
    }


def map_list_to_json(game: GameConfig) -> str:
    """Return the id and name of every map as a JSON array."""
    if not game.maps:
        raise ValueError("No maps available in the game")
    return _dumps([{"id": m.id, "name": m.name} for m in game.maps])


def found_map_to_json(game: GameConfig, map_id: str) -> str:
    """Return the full description of a map, or the not-found error body."""
    game_map = game.find_map(map_id)
    if game_map is None:
        return not_found_map_to_json()

    result: dict[str, Any] = {
        "id": game_map.id,
        "name": game_map.name,
        "roads": _roads(game_map),
    }
    buildings = _buildings(game_map)
    if buildings:
        result["buildings"] = buildings
    offices = _offices(game_map)
    if offices:
        result["offices"] = offices
    result["lootTypes"] = [_loot_type(loot) for loot in game_map.loot_types]
    return _dumps(result)


def not_found_map_to_json() -> str:
    """Error body for an unknown map."""
    return _dumps({"code": "mapNotFound", "message": "Map not found"})


def bad_request_to_json() -> str:
    """Error body for a malformed request."""
    return _dumps({"code": "badRequest", "message": "Bad request"})


def method_not_allowed_json() -> str:
    """Error body for an unsupported HTTP method."""
    return _dumps({"code": "invalidMethod", "message": "Method not allowed"})