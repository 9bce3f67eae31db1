import logging

logger = logging.getLogger(__name__)

# idle -> loading -> {loaded, errored}; errored -> loading only through retry()
TRANSITIONS = {
    "idle": {"loading"},
    "loading": {"loaded", "errored"},
    "loaded": set(),
    "errored": {"loading"},
}


class InvalidTransition(RuntimeError):
    pass


class FetchState:
    def __init__(self, retry_path: str = None):
        self.state = "idle"
        self.data = None
        self.error = None
        self.retry_path = retry_path

    def _move(self, new_state: str):
        if new_state not in TRANSITIONS[self.state]:
            raise InvalidTransition(f"Cannot go from {self.state} to {new_state}")
        self.state = new_state

    def start(self):
        self._move("loading")
        self.error = None

    def succeed(self, data):
        self._move("loaded")
        self.data = data

    def fail(self, error: str):
        self._move("errored")
        self.error = error
        logger.warning(f"Load failed: {error}")

    def retry(self):
        if self.state != "errored":
            raise InvalidTransition("Retry is only available after an error")
        self.start()

    def load(self, loader):
        """Run ``loader`` through loading and into loaded or errored."""
        self.start()
        try:
            self.succeed(loader())
        except Exception as e:
            self.fail(str(e))
        return self
