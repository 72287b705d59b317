"""Application entry point for the blog comments server."""

from blogcomments.app import App
from blogcomments.config import Config
from blogcomments.logging import setup_logging
from blogcomments.web.runner import run_server


def main() -> None:
    config = Config()
    setup_logging(config.debug)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()
