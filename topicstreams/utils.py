import asyncio


class AsyncTrigger:
  def __init__(self) -> None:
    self._futs: list[asyncio.Future] = []

  def wait(self):
    fut = asyncio.get_running_loop().create_future()
    self._futs.append(fut)
    return fut

  def trigger(self):
    for fut in self._futs:
      if not fut.done(): fut.set_result(None)
    self._futs.clear()
