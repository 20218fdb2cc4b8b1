import uvicorn

from . import config


def main():
    uvicorn.run("taskmaster.main:app", host=config.HOST, port=config.PORT)


if __name__ == "__main__":
    main()
