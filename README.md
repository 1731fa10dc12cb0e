# dogstory

Building blocks for the server of a multiplayer game in which players
walk dogs around city maps and pick up lost items. The package depends
only on the standard library.

It contains:

- `dogstory.loader`: reads the game's JSON configuration into a
  `GameConfig` and checks it as it goes.
- `dogstory.convert`: builds the JSON documents of the maps API and its
  error bodies.
- `dogstory.options`: parses the server's command-line options into an
  `Args` record.
- `dogstory.ticker`: a `Ticker` that calls a handler periodically on an
  asyncio event loop.
- `dogstory.random_utils`: uniform random numbers from an interval.
- `dogstory.http_server`: a small asyncio HTTP/1.x server (`Listener`,
  `Session`, `HttpRequest`, `HttpResponse`, `serve_http`).

## Loading a configuration

```python
from dogstory.loader import load_game, parse_game

game = load_game("data/config.json")
town = game.find_map("map1")          # MapConfig or None
if town is not None:
    for road in town.roads:
        print(road.start, road.end, road.is_horizontal())
```

`load_game(path)` reads the file with `read_file` and passes its text to
`parse_game`. `parse_game` also accepts JSON text, bytes, or an already
decoded JSON object.

`read_file(path, binary_mode=False)` raises `FileNotFoundError` for a
missing file. In text mode it raises `ConfigError` for an empty file. In
binary mode it returns `bytes`.

An invalid configuration raises `ConfigError`, a subclass of
`ValueError`.

The result is made of dataclasses:

- `GameConfig`: `maps`, `settings` and `default_dog_speed`.
- `GameSettings`: `default_period`, `default_probability`,
  `default_bag_capacity` and `dog_retirement_time` (in milliseconds).
- `MapConfig`: `id`, `name`, `dog_speed`, `bag_capacity`, `roads`,
  `buildings`, `offices` and `loot_types`.
- `Road`, `Building`, `Office`, `Point`, `Offset` and `LootType`.

### Root object

| Key | Required | Meaning |
| --- | --- | --- |
| `maps` | yes | list of map objects |
| `lootGeneratorConfig` | yes | object with `period` (must be > 0) and `probability` (0 to 1) |
| `defaultDogSpeed` | no | number; speed for maps without `dogSpeed` (default 1.0) |
| `defaultBagCapacity` | no | non-negative integer; capacity for maps without `bagCapacity` (default 3) |
| `dogRetirementTime` | no | seconds; stored multiplied by 1000 (default 60000 ms) |

### Each map

| Key | Required | Meaning |
| --- | --- | --- |
| `id`, `name` | yes | strings |
| `roads` | yes | non-empty list of `{x0, y0, x1}` (horizontal) or `{x0, y0, y1}` (vertical), integers |
| `lootTypes` | yes | list of objects with optional `name`, `file`, `type`, `rotation`, `color`, `scale`, `value` |
| `buildings` | no | list of `{x, y, w, h}` |
| `offices` | no | list of `{id, x, y, offsetX, offsetY}` |
| `dogSpeed` | no | overrides the default speed |
| `bagCapacity` | no | overrides the default bag capacity |

Some entries are skipped with a logged error rather than rejected:

- road, building or office entries that are not objects;
- unknown loot keys;
- loot types without a positive `scale`.

A missing `buildings` or `offices` key is also logged and treated as an
empty list.

## Map API documents

```python
from dogstory.convert import found_map_to_json, map_list_to_json

map_list_to_json(game)           # '[{"id":"map1","name":"Map 1"},...]'
found_map_to_json(game, "map1")  # id, name, roads, buildings, offices, lootTypes
```

All documents are compact JSON strings.

`found_map_to_json` behaves as follows:

- For an unknown id it returns the `not_found_map_to_json()` body.
- It leaves out `buildings` and `offices` when they are empty.
- It raises `ValueError` for a map without roads.

`map_list_to_json` raises `ValueError` when the game has no maps.

The error bodies come from three functions:

- `not_found_map_to_json()`: `{"code":"mapNotFound",...}`
- `bad_request_to_json()`: `{"code":"badRequest",...}`
- `method_not_allowed_json()`: `{"code":"invalidMethod",...}`

## Command-line options

```python
from dogstory.options import parse_command_line

args = parse_command_line(["--config-file", "data/config.json", "--www-root", "static"])
```

With no argument, `parse_command_line` reads `sys.argv[1:]`.

| Option | Value |
| --- | --- |
| `-h`, `--help` | prints help and exits with status 0 |
| `-t`, `--tick-period` | milliseconds (non-negative integer) |
| `-c`, `--config-file` | path to the configuration |
| `-w`, `--www-root` | directory of static files |
| `--randomize-spawn-points` | `true`/`false` (also `yes`/`no`, `on`/`off`, `1`/`0`) |
| `--state-file` | file for saving game state |
| `--save-state-period` | milliseconds (non-negative integer) |

Two options are required:

- Without `--config-file`, it raises `ConfigFileNotSpecifiedError`.
- Without `--www-root`, it raises `StaticContentPathNotSpecifiedError`.

In both cases it first logs a usage message.

## Ticker

```python
import asyncio
from datetime import timedelta
from dogstory.ticker import Ticker

async def main():
    ticker = Ticker(timedelta(milliseconds=50), lambda delta: print(delta))
    ticker.start()           # needs a running event loop
    await asyncio.sleep(0.2)
    ticker.stop()

asyncio.run(main())
```

The period is a `timedelta` or a number of milliseconds. The handler
receives the real time since the previous tick, truncated to whole
milliseconds.

## Random numbers

In `dogstory.random_utils`:

- `generate_double_from_interval(lower, upper)` returns a float in
  `[lower, upper)`.
- `generate_integer_from_interval(lower, upper)` returns an integer in
  `[lower, upper]`.

Both raise `ValueError` if `lower > upper`.

## Serving HTTP

```python
import asyncio
from dogstory.http_server import HttpResponse, serve_http

def handler(endpoint, request, send):
    send(HttpResponse(200, "hello", {"Content-Type": "text/plain"}))

async def main():
    listener = await serve_http("127.0.0.1", 8080, handler)
    try:
        await asyncio.sleep(60)
    finally:
        listener.close()
        await listener.wait_closed()

asyncio.run(main())
```

The handler is called as `handler(endpoint, request, send)` and may be
a coroutine function. It answers by calling `send` with an
`HttpResponse`.

`Listener` is also an async context manager. Its `port` property gives
the bound port, which is useful with port 0.

Each connection runs in a `Session`. The session keeps the connection
open across requests until one of these happens:

- the client closes it;
- a response needs end of stream (`keep_alive=False` or
  `Connection: close`);
- reading a request takes longer than 30 seconds;
- the peer sends a malformed message.

Failures are printed to standard error by `report_error`.

## What the package does not provide

The package has no program of its own and installs no command. It also
does not provide:

- game state (players, dogs, sessions, loot generation);
- request handlers for the game API;
- static file serving;
- saving and restoring state.

`Args.state_file` and `Args.save_state_period` are parsed, but nothing
in the package uses them.