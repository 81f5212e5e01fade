"""explicit observer registry used for memory and oscillator notifications"""


class Event:
    """
    ordered list of handlers called synchronously, in subscription order, on the caller's cycle
    a handler raising an exception propagates to whoever emitted the event
    """
    def __init__(self, name):
        self.name = name
        self._handlers = []

    def subscribe(self, handler):
        if handler not in self._handlers:
            self._handlers.append(handler)
        return handler

    def unsubscribe(self, handler):
        if handler in self._handlers:
            self._handlers.remove(handler)

    def emit(self, *args):
        # iterate over a copy so a handler can unsubscribe itself
        for handler in list(self._handlers):
            handler(*args)

    def __len__(self):
        return len(self._handlers)

    def __repr__(self):
        return f"Event({self.name!r}, handlers={len(self._handlers)})"
