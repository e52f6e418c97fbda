from textual.message import Message


class StatusUpdate(Message):
    """Report progress of a long-running action in the status bar."""

    def __init__(self, text: str, busy: bool = False) -> None:
        super().__init__()
        self.text = text
        self.busy = busy
