"""Sequential-looking logic on top of a tick loop.

Demonstrates:
- Wrapping a hook so it can wait()
- Rejecting values that can't be spawned or deferred
- Connecting, firing and disconnecting signal subscribers
- A subscriber that waits on the signal it was fired from

Run: python -m examples.basics
"""

import tick_async
from tick_async import FrameLoop, InvalidArgument


def main() -> None:
    loop = FrameLoop(tps=20)
    tick_async.attach(loop)

    @tick_async.wrap
    def on_loaded() -> None:
        tick_async.wait(5)
        print(f"Loaded 5 seconds ago (tick {loop.tick_number})")

    loop.on_start(on_loaded)

    for fn in (tick_async.spawn, tick_async.defer):
        try:
            fn("aaa")
        except InvalidArgument as exc:
            print(exc)

    signal = tick_async.signal()

    a = signal.connect(lambda: print("1"))
    b = signal.connect(lambda: print("2"))

    def third() -> None:
        print("3")
        signal.wait()
        print("3 again")

    c = signal.connect(third)

    signal.fire()
    b.disconnect()
    signal.fire()
    a.disconnect()
    c.disconnect()
    signal.fire()

    loop.run(110)


if __name__ == "__main__":
    main()
