import logging

from dash import Dash

from shopease import config, layouts
from shopease.callbacks import register_callbacks
from shopease.carousel import initial_state
from shopease.session import empty_session

logger = logging.getLogger(__name__)


def create_app():
    app = Dash(__name__, title=config.BRAND, suppress_callback_exceptions=True)
    app.layout = layouts.shell(empty_session(), initial_state())
    register_callbacks(app)
    return app


def configure_logging(level=None):
    logging.basicConfig(
        level=level or config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


app = create_app()
server = app.server


def main():
    configure_logging()
    logger.info("Starting %s against %s", config.BRAND, config.API_BASE_URL)
    app.run(host=config.HOST, port=config.PORT, debug=config.DEBUG)


if __name__ == '__main__':
    main()
