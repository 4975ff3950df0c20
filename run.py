import logging

import uvicorn

from doccrawl import config as env
from doccrawl.api.server import create_app
from doccrawl.container import Container

logger = logging.getLogger(__name__)


def main(container=None):
    logging.basicConfig(
        level=env.get_str_env("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if container is None:
        container = Container()

    subjects = container.subject_catalog().reload()
    logger.info("DocCrawl starting with %s subjects", len(subjects))

    app = create_app(container)
    host = env.get_str_env("HOST", "0.0.0.0")
    port = env.get_int_env("PORT", 8000)
    uvicorn.run(app, host=host, port=port)


if __name__ == '__main__':
    main()
