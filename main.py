# main.py

from subprocess import run

from blog_api.configs import settings


def start(cmmd: list[str]) -> None:
    run(cmmd, check=True)


def main() -> None:
    cmmd = [
        "uvicorn",
        "blog_api.main:app",
        "--host",
        "0.0.0.0",
        "--port",
        str(settings.PORT),
        "--log-level",
        settings.LOG_LEVEL.lower(),
        "--loop",
        "uvloop",
        "--http",
        "httptools",
    ]
    if settings.DEBUG:
        cmmd.append("--reload")
    start(cmmd)


if __name__ == "__main__":
    main()
