# fsnotice

fsnotice provides the building blocks for handling file system change
notifications:

- `fsnotice.event_kind`: a hierarchical event kind model (`EventKind`,
  `AccessKind`, `ModifyKind`, `RenameMode`, `CreateKind`, `RemoveKind`, ...)
  and the `Flag` enum, with a JSON form (`kind_to_json`, `kind_from_json`);
- `fsnotice.event`: the `Event` type and its `EventAttributes` (tracker, flag,
  info, source, process id), plus `event_to_json` and `event_from_json`;
- `fsnotice.config`: a watcher `Config` (poll interval in seconds, content
  comparison) and `RecursiveMode`;
- `fsnotice.errors`: the `NotifyError` exception with an `ErrorKind`;
- `fsnotice.file_id`: `FileId` and `get_file_id()`, which identify a file by
  device and inode number;
- `fsnotice.cache`: file ID caches (`FileIdMap`, `NoCache`, the `FileIdCache`
  base class) used to join the two halves of a rename into one event;
- two debouncers:
  - `fsnotice.debouncer.new_debouncer()` is the full one, built on
    `fsnotice.debounce_state.DebounceData`. It merges rename events, drops
    duplicate creates, drops data or metadata changes that come right after a
    create, and keeps a single remove when a directory is deleted.
  - `fsnotice.debouncer_mini.new_mini_debouncer()` and
    `new_mini_debouncer_opt()` give the small one. It reports each path as
    `DebouncedEventKind.ANY` once it has settled, or `ANY_CONTINUOUS` while it
    keeps changing past the timeout.

## Installation

```
pip install fsnotice
```

Python 3.10 or later. The package has no third-party dependencies.

## What the package does not do

fsnotice does not watch the file system. There is no inotify, FSEvents,
Windows or polling backend, and no command-line tool. Whatever produces raw
notifications passes each one to a debouncer's `handle()`. The `Config` type
only carries watcher settings. Nothing in the package reads them.

## Events

```python
from fsnotice.event import Event, event_to_json
from fsnotice.event_kind import EventKind, ModifyKind, DataChange

event = Event(EventKind.modify(ModifyKind.data(DataChange.CONTENT))).add_path("/tmp/a.txt")
event = event.set_info("saved")
print(event_to_json(event))
# {'type': {'modify': {'kind': 'data', 'mode': 'content'}},
#  'paths': ['/tmp/a.txt'], 'attrs': {'info': 'saved'}}
```

The `add_*` and `set_*` methods of `Event` return a changed copy.

## The full debouncer

Give `handle()` either an `Event` or a `NotifyError`. Debounced results go to
your handler on a background thread. The handler gets a list of
`DebouncedEvent`, or, in a separate call, a list of `NotifyError`. It can be
any callable, or any object with a `put` method such as `queue.Queue`.
Times are in seconds.

```python
from fsnotice.cache import FileIdMap
from fsnotice.config import RecursiveMode
from fsnotice.debouncer import new_debouncer
from fsnotice.event import Event
from fsnotice.event_kind import CreateKind, EventKind

def on_result(result):
    for item in result:
        print(item)

with new_debouncer(2.0, None, on_result, FileIdMap()) as debouncer:
    with debouncer.cache() as cache:
        cache.add_root("/tmp", RecursiveMode.RECURSIVE)
    debouncer.handle(Event(EventKind.create(CreateKind.FILE)).add_path("/tmp/a.txt"))
    ...
```

If the tick rate is `None`, it is a quarter of the timeout. A tick rate longer
than the timeout raises `NotifyError`. When no cache is given, a fresh
`FileIdMap` is used. Pass `NoCache()` to turn off matching by file ID. Leaving
the `with` block calls `stop()`, which waits for the background thread.
`stop_nonblocking()` does not wait.

To drive the debounce logic yourself, use `DebounceData(cache, timeout,
clock=...)` with `add_event()`, `add_error()`, `debounced_events()` and
`take_errors()`.

## The mini debouncer

```python
from fsnotice.debouncer_mini import MiniConfig, new_mini_debouncer_opt
from fsnotice.event import Event

config = MiniConfig().with_timeout(1.0).with_batch_mode(False)
mini = new_mini_debouncer_opt(config, print)
mini.handle(Event().add_path("/tmp/a.txt"))
...
mini.stop()
```

Errors go straight to the handler, one `NotifyError` at a time. Events are
grouped by path into lists of `MiniDebouncedEvent`. Batch mode is on by
default. With batch mode on, an event may be held back for up to twice the
timeout so that it is delivered together with others.

## File IDs

```python
from fsnotice.file_id import get_file_id
print(get_file_id("."))   # FileId(device=..., file=...)
```

`get_file_id()` raises `OSError` if the path cannot be inspected.

## Running the tests

```
pip install -e .[test]
pytest
```