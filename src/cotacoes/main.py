import uvicorn

from cotacoes.app import create_app
from cotacoes.config import settings

app = create_app(settings)


def main() -> None:
    # log_config=None keeps uvicorn from installing its own handlers;
    # its records reach the sinks through the stdlib redirect.
    uvicorn.run(app, host="0.0.0.0", port=settings.app.port, log_config=None)


if __name__ == "__main__":
    main()
