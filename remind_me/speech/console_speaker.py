from typing import Callable, Optional


class ConsoleSpeaker:
    """
    Stand-in for a text-to-speech engine.

    Writes prompts to the console instead of speaking them. Fire and
    forget, like a real TTS call; nothing waits for playback.
    """

    def __init__(
        self,
        prefix: str = "assistant: ",
        write: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.prefix = prefix
        self.write = write or print

    def __call__(self, text: str) -> None:
        self.speak(text)

    def speak(self, text: str) -> None:
        self.write(f"{self.prefix}{text}")
