import threading


class TimerScheduler:
    """Runs callbacks once after a delay on daemon ``threading.Timer`` threads.

    ``call_later`` returns the timer; calling ``cancel()`` on it before it
    fires stops the callback. A callback that has already started cannot be
    recalled, so callers must still check whether it is stale.
    """

    def call_later(self, delay, callback, *args):
        timer = threading.Timer(delay, callback, args=args)
        timer.daemon = True
        timer.start()
        return timer
