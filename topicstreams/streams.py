from collections import deque
from contextlib import AsyncExitStack
from typing import Any, Callable, Generic, Optional, Sequence, TypeVar
import asyncio
import logging

from topicstreams.env import DEBUG_STREAMS
from topicstreams.errors import StreamClosedError, UpstreamFailure
from topicstreams.utils import AsyncTrigger

T = TypeVar("T")
S = TypeVar("S")
A = TypeVar("A")
B = TypeVar("B")

_MISSING: Any = object()


class StreamProducer(Generic[T]):
  """
  A hot stream with any number of subscribers.
  The first subscriber starts the producer task, the last one leaving cancels it.
  The most recent value is replayed to every new subscriber.
  """
  def __init__(self) -> None:
    self._task: asyncio.Task | None = None
    self._entered_count: int = 0
    self._consumers: set['StreamConsumer[T]'] = set()
    self._enter_lock = asyncio.Lock()
    self._latest: Any = _MISSING
    self._error: Optional[Exception] = None
    self._ended: bool = False

  @property
  def has_value(self): return self._latest is not _MISSING
  @property
  def value(self) -> T:
    if self._latest is _MISSING: raise LookupError("stream has not produced a value yet")
    return self._latest
  @property
  def ended(self): return self._ended
  @property
  def subscriber_count(self): return len(self._consumers)
  @property
  def running(self): return self._task is not None and not self._task.done()

  async def run(self): await asyncio.Future()

  def subscribe(self) -> 'StreamConsumer[T]': return StreamConsumer(self)
  def map(self, fn: Callable[[T], S]) -> 'MappedStream[T, S]': return MappedStream(self, fn)

  async def first(self) -> T:
    async with self.subscribe() as consumer: return await consumer.get()

  def register(self, consumer: 'StreamConsumer[T]'):
    self._consumers.add(consumer)
    if self._error is not None: consumer.fail(self._error)
    else:
      if self._latest is not _MISSING: consumer.put(self._latest)
      if self._ended: consumer.close()

  def unregister(self, consumer: 'StreamConsumer[T]'): self._consumers.discard(consumer)

  def send_message(self, message: T):
    if self._ended: return
    if DEBUG_STREAMS(): logging.debug(f"{self!r} emitting {message!r}")
    self._latest = message
    for consumer in list(self._consumers): consumer.put(message)

  def send_error(self, error: Exception):
    if self._ended: return
    logging.debug(f"{self!r} failed: {error!r}")
    self._error = error
    self._ended = True
    for consumer in list(self._consumers): consumer.fail(error)

  def close_consumers(self):
    if self._ended: return
    self._ended = True
    for consumer in list(self._consumers): consumer.close()

  async def attach(self, consumer: 'StreamConsumer[T]'):
    async with self._enter_lock:
      if self._entered_count == 0 and self._task is not None: await self.wait_done()
      self._entered_count += 1
      self.register(consumer)
      if self._entered_count == 1: self._task = asyncio.create_task(self._run())

  async def detach(self, consumer: 'StreamConsumer[T]'):
    async with self._enter_lock:
      self.unregister(consumer)
      self._entered_count = max(self._entered_count - 1, 0)
      if self._entered_count == 0 and self._task is not None:
        self._task.cancel()
        try: await self.wait_done()
        finally:
          self._task = None
          self._on_stopped()

  async def wait_done(self):
    try: await self._task
    except asyncio.CancelledError: pass

  async def _run(self):
    try: await self.run()
    except asyncio.CancelledError: pass
    except Exception as e: self.send_error(e)

  def _on_stopped(self): pass


class StreamConsumer(Generic[T]):
  def __init__(self, producer: StreamProducer[T]) -> None:
    self._producer = producer
    self._queue: deque[T] = deque()
    self._trigger = AsyncTrigger()
    self._error: Optional[Exception] = None
    self._closed = False

  def empty(self): return len(self._queue) == 0

  async def get(self) -> T:
    while len(self._queue) == 0:
      if self._error is not None: raise self._error
      if self._closed: raise StreamClosedError()
      await self._trigger.wait()
    return self._queue.popleft()

  def put(self, value: T):
    self._queue.append(value)
    self._trigger.trigger()

  def fail(self, error: Exception):
    self._error = error
    self._trigger.trigger()

  def close(self):
    self._closed = True
    self._trigger.trigger()

  def __aiter__(self): return self
  async def __anext__(self) -> T:
    try: return await self.get()
    except StreamClosedError: raise StopAsyncIteration

  async def __aenter__(self):
    await self._producer.attach(self)
    return self

  async def __aexit__(self, *_): await self._producer.detach(self)


class StateStream(StreamProducer[T]):
  """Source stream holding the current value. Every `emit` replaces it and pushes it to all subscribers."""
  def __init__(self, initial_value: Any = _MISSING) -> None:
    super().__init__()
    self._latest = initial_value

  def emit(self, value: T):
    if self._ended: raise StreamClosedError("can not emit on an ended stream")
    self.send_message(value)

  def fail(self, error: Exception): self.send_error(error)
  def close(self): self.close_consumers()


class _UpstreamSink(StreamConsumer[Any]):
  def __init__(self, source: StreamProducer[Any], target: 'DerivedStream[Any]', index: int) -> None:
    super().__init__(source)
    self._target = target
    self._index = index

  def put(self, value: Any): self._target.on_upstream_value(self._index, value)
  def fail(self, error: Exception): self._target.on_upstream_error(self._index, error)
  def close(self): self._target.on_upstream_closed(self._index)


class DerivedStream(StreamProducer[T]):
  """
  A stream computed from other streams. It holds subscriptions to its sources only while it has subscribers of its own.
  Its state is reset once the last subscriber leaves, so a later subscriber starts from scratch.
  """
  def __init__(self, sources: Sequence[StreamProducer[Any]]) -> None:
    super().__init__()
    self._sources = tuple(sources)
    self._finished = asyncio.Event()

  async def run(self):
    async with AsyncExitStack() as stack:
      for index, source in enumerate(self._sources): await stack.enter_async_context(_UpstreamSink(source, self, index))
      await self._finished.wait()

  def on_upstream_value(self, index: int, value: Any): pass
  def on_upstream_error(self, index: int, error: Exception): self.send_error(error)
  def on_upstream_closed(self, index: int): self.close_consumers()

  def apply(self, fn: Callable[..., T], *args: Any):
    try: result = fn(*args)
    except Exception as e:
      self.send_error(e)
      return
    self.send_message(result)

  def send_error(self, error: Exception):
    super().send_error(error)
    self._finished.set()

  def close_consumers(self):
    super().close_consumers()
    self._finished.set()

  def _on_stopped(self):
    self._latest = _MISSING
    self._error = None
    self._ended = False
    self._finished = asyncio.Event()


class MappedStream(DerivedStream[T], Generic[S, T]):
  def __init__(self, source: StreamProducer[S], fn: Callable[[S], T]) -> None:
    super().__init__((source,))
    self._fn = fn

  def on_upstream_value(self, index: int, value: S): self.apply(self._fn, value)


class CombinedStream(DerivedStream[T]):
  """
  Latest-values join over several streams.
  Nothing is emitted until every source produced a value. After that, every value
  from any source synchronously produces one recomputed value from the latest value of each source.
  Source failures are forwarded as `UpstreamFailure`.
  The stream ends once all sources ended, or as soon as a source ends without ever producing a value.
  """
  def __init__(self, sources: Sequence[StreamProducer[Any]], transform: Callable[..., T]) -> None:
    super().__init__(sources)
    self._transform = transform
    self._values: list[Any] = [ _MISSING ] * len(self._sources)
    self._closed_sources: set[int] = set()

  def on_upstream_value(self, index: int, value: Any):
    self._values[index] = value
    if any(v is _MISSING for v in self._values): return
    self.apply(self._transform, *self._values)

  def on_upstream_error(self, index: int, error: Exception):
    logging.debug(f"source {index} of {self!r} failed, forwarding: {error!r}")
    self.send_error(error if isinstance(error, UpstreamFailure) else UpstreamFailure(error))

  def on_upstream_closed(self, index: int):
    self._closed_sources.add(index)
    if self._values[index] is _MISSING or len(self._closed_sources) == len(self._sources): self.close_consumers()

  def _on_stopped(self):
    super()._on_stopped()
    self._values = [ _MISSING ] * len(self._sources)
    self._closed_sources.clear()


def combine_latest(first: StreamProducer[A], second: StreamProducer[B], transform: Callable[[A, B], T]) -> CombinedStream[T]:
  return CombinedStream((first, second), transform)

def stream_of(value: T) -> StateStream[T]: return StateStream(value)
