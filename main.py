import logging
import os
import sys

from dotenv import load_dotenv

from tietone import Player
from tietone.music import NotationError
from tietone.songs import ACCOMPANIMENT


def configure_logging() -> None:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO"),
        format="[%(asctime)s] %(levelname)s:%(name)s: %(message)s",
    )


def main() -> None:
    load_dotenv()
    configure_logging()

    player = Player()
    log = logging.getLogger("tietone")
    try:
        buffer = player.perform(ACCOMPANIMENT)
    except NotationError as exc:
        log.error("Could not render the accompaniment: %s", exc)
        sys.exit(1)

    try:
        player.play(buffer)
    except KeyboardInterrupt:
        log.info("Stopping playback.")


if __name__ == "__main__":
    main()
