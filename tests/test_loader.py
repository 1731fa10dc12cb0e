import copy
import json
import logging

import pytest

from dogstory.loader import (
    Building,
    ConfigError,
    GameConfig,
    Offset,
    Office,
    Point,
    Road,
    load_game,
    parse_game,
    read_file,
)

BASE = {
    "defaultDogSpeed": 3.0,
    "lootGeneratorConfig": {"period": 5.0, "probability": 0.5},
    "maps": [
        {
            "id": "map1",
            "name": "Map 1",
            "roads": [
                {"x0": 0, "y0": 0, "x1": 40},
                {"x0": 40, "y0": 0, "y1": 30},
            ],
            "buildings": [{"x": 5, "y": 5, "w": 30, "h": 20}],
            "offices": [{"id": "o0", "x": 40, "y": 30, "offsetX": 5, "offsetY": 0}],
            "lootTypes": [
                {"name": "key", "file": "assets/key.obj", "type": "obj",
                 "rotation": 90, "color": "#338844", "scale": 0.03, "value": 10},
            ],
        }
    ],
}


def make_config(**root):
    data = copy.deepcopy(BASE)
    data.update(root)
    return data


def make_map_config(**map_fields):
    data = copy.deepcopy(BASE)
    data["maps"][0].update(map_fields)
    return data


def test_load_game_from_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(BASE))
    game = load_game(path)
    assert [m.id for m in game.maps] == ["map1"]
    game_map = game.find_map("map1")
    assert game_map.name == "Map 1"
    assert game_map.dog_speed == 3.0
    assert game_map.buildings == [Building(Point(5, 5), 30, 20)]
    assert game_map.offices == [Office("o0", Point(40, 30), Offset(5, 0))]


def test_roads_orientation():
    game = parse_game(BASE)
    horizontal, vertical = game.find_map("map1").roads
    assert horizontal.is_horizontal()
    assert horizontal == Road.make_horizontal(Point(0, 0), 40)
    assert horizontal.end == Point(40, 0)
    assert not vertical.is_horizontal()
    assert vertical.end == Point(40, 30)


def test_loot_type_fields():
    loot = parse_game(BASE).find_map("map1").loot_types[0]
    assert loot.name == "key"
    assert loot.rotation == 90
    assert loot.color == "#338844"
    assert loot.scale == 0.03
    assert loot.value == 10


def test_find_map_unknown_returns_none():
    assert parse_game(BASE).find_map("nowhere") is None
    assert GameConfig().find_map("map1") is None


def test_parse_game_accepts_text():
    assert parse_game(json.dumps(BASE)) == parse_game(BASE)


def test_settings_loaded():
    game = parse_game(make_config(defaultBagCapacity=7, dogRetirementTime=15))
    assert game.settings.default_period == 5.0
    assert game.settings.default_probability == 0.5
    assert game.settings.default_bag_capacity == 7
    assert game.find_map("map1").bag_capacity == 7
    assert game.settings.dog_retirement_time == 15000.0


def test_default_bag_capacity_is_three():
    assert parse_game(BASE).find_map("map1").bag_capacity == 3


def test_map_overrides():
    game = parse_game(make_map_config(bagCapacity=9, dogSpeed=1.5))
    game_map = game.find_map("map1")
    assert game_map.bag_capacity == 9
    assert game_map.dog_speed == 1.5


def test_missing_maps():
    data = make_config()
    del data["maps"]
    with pytest.raises(ConfigError, match="maps"):
        parse_game(data)


def test_missing_loot_generator_config():
    data = make_config()
    del data["lootGeneratorConfig"]
    with pytest.raises(ConfigError, match="lootGeneratorConfig"):
        parse_game(data)


@pytest.mark.parametrize(
    "generator, message",
    [
        ({"period": 0.0, "probability": 0.5}, "Period must be positive"),
        ({"probability": 0.5}, "Period must be positive"),
        ({"period": 1.0, "probability": 1.5}, "Probability must be in range"),
        ({"period": 1.0, "probability": -0.1}, "Probability must be in range"),
    ],
)
def test_invalid_generator_settings(generator, message):
    with pytest.raises(ConfigError, match=message):
        parse_game(make_config(lootGeneratorConfig=generator))


def test_root_must_be_object():
    with pytest.raises(ConfigError):
        parse_game("[]")


def test_invalid_json_text():
    with pytest.raises(ValueError):
        parse_game("{not json")


def test_map_requires_id_and_name():
    data = make_config()
    del data["maps"][0]["name"]
    with pytest.raises(ConfigError, match="'id' or 'name'"):
        parse_game(data)


def test_map_must_be_object():
    with pytest.raises(ConfigError, match="Each map must be an object"):
        parse_game(make_config(maps=[1]))


def test_missing_roads():
    data = make_config()
    del data["maps"][0]["roads"]
    with pytest.raises(ConfigError, match="roads"):
        parse_game(data)


def test_empty_roads():
    with pytest.raises(ConfigError, match="at least one element"):
        parse_game(make_map_config(roads=[]))


def test_non_object_road_is_skipped(caplog):
    with caplog.at_level(logging.ERROR):
        game = parse_game(make_map_config(roads=[5, {"x0": 0, "y0": 0, "x1": 10}]))
    assert len(game.find_map("map1").roads) == 1
    assert "Each road must be an object" in caplog.text


def test_road_missing_coordinate():
    with pytest.raises(ConfigError, match="Missing required coordinates x0 or y0 or y1"):
        parse_game(make_map_config(roads=[{"x0": 0, "y0": 0}]))


def test_road_coordinate_must_be_integer():
    with pytest.raises(ConfigError, match="Invalid type for coordinate x1"):
        parse_game(make_map_config(roads=[{"x0": 0, "y0": 0, "x1": 1.5}]))


def test_missing_buildings_logged(caplog):
    data = make_config()
    del data["maps"][0]["buildings"]
    with caplog.at_level(logging.ERROR):
        game = parse_game(data)
    assert game.find_map("map1").buildings == []
    assert "buildings" in caplog.text


def test_building_missing_key():
    with pytest.raises(ConfigError, match="building definition"):
        parse_game(make_map_config(buildings=[{"x": 1, "y": 1, "w": 2}]))


def test_missing_offices_logged(caplog):
    data = make_config()
    del data["maps"][0]["offices"]
    with caplog.at_level(logging.ERROR):
        game = parse_game(data)
    assert game.find_map("map1").offices == []
    assert "offices" in caplog.text


def test_office_requires_id():
    with pytest.raises(ConfigError, match="'id' field for office"):
        parse_game(make_map_config(offices=[{"x": 1, "y": 1, "offsetX": 0, "offsetY": 0}]))


def test_missing_loot_types():
    data = make_config()
    del data["maps"][0]["lootTypes"]
    with pytest.raises(ConfigError, match="lootTypes"):
        parse_game(data)


def test_loot_type_must_be_object():
    with pytest.raises(ConfigError, match="Each loot type must be an object"):
        parse_game(make_map_config(lootTypes=["key"]))


def test_loot_type_without_scale_is_skipped(caplog):
    with caplog.at_level(logging.ERROR):
        game = parse_game(make_map_config(lootTypes=[{"name": "key"}]))
    assert game.find_map("map1").loot_types == []
    assert "Scale must be positive" in caplog.text


def test_unknown_loot_key_is_logged_and_kept(caplog):
    with caplog.at_level(logging.ERROR):
        game = parse_game(make_map_config(lootTypes=[{"name": "coin", "scale": 1.0, "shiny": True}]))
    loot_types = game.find_map("map1").loot_types
    assert [lt.name for lt in loot_types] == ["coin"]
    assert "Unknown key in loot type: shiny" in caplog.text


def test_read_file_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_file(tmp_path / "absent.json")


def test_read_file_empty_text(tmp_path):
    path = tmp_path / "empty.json"
    path.write_text("")
    with pytest.raises(ConfigError, match="File is empty"):
        read_file(path)


def test_read_file_binary_round_trip(tmp_path):
    payload = bytes(range(256))
    path = tmp_path / "blob.bin"
    path.write_bytes(payload)
    assert read_file(path, binary_mode=True) == payload


def test_read_file_text(tmp_path):
    path = tmp_path / "a.txt"
    path.write_text("hello")
    assert read_file(path) == "hello"